import pytest

from access.authenticator import CodeAuthenticator
from access.delegation import DelegationAuthority
from access.resolver import RoleResolver
from access.store import CredentialStore
from storage.backends import MemoryBackend


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend):
    return CredentialStore(backend)


@pytest.fixture
def resolver(store):
    return RoleResolver(store)


@pytest.fixture
def authenticator(store):
    return CodeAuthenticator(store)


@pytest.fixture
def authority(store):
    return DelegationAuthority(store)
