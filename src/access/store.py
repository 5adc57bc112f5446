"""
src/access/store.py — the credential record (current role + unlock codes)

Provides:
- CredentialStore: typed accessors over a KeyValueBackend
- subscribe(callback): observer hook, fired after every successful write

Key ideas explained:

1) Explicit handle, no singleton
   The store wraps whatever backend you give it. Build one at start-up and pass
   it to the resolver, authenticator and delegation authority.

2) Defaults materialise on read, not on write
   Owner/admin codes and the two seed custom roles are returned until something
   is saved. Reading never writes.

3) Validate first, then write
   Every code must be exactly six ASCII digits. A bad value raises ValidationError before the
   backend is touched, so prior state is left as it was.
"""


from __future__ import annotations
import json
import logging
import re
from enum import Enum
from typing import Callable, Dict, List, Mapping

from pydantic import ValidationError as PydanticValidationError

from access.errors import StoreCorruptError, ValidationError
from access.models import CredentialSnapshot, CustomRole
from config import (
    ADMIN_CODE_KEY,
    CODE_PATTERN,
    CURRENT_ROLE_KEY,
    CUSTOM_ROLES_KEY,
    DEFAULT_ADMIN_CODE,
    DEFAULT_CUSTOM_ROLES,
    DEFAULT_OWNER_CODE,
    OWNER_CODE_KEY,
    Role,
)
from storage.backends import KeyValueBackend


logger = logging.getLogger(__name__)

_CODE_RE = re.compile(CODE_PATTERN)

Listener = Callable[[], None]


class CredentialStore:

    def __init__(self, backend: KeyValueBackend):

        self.backend = backend
        self._listeners: List[Listener] = []

    # --- Observers -------------------------------------------------------------
    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """
        Register `callback` to run (with no arguments) after every successful write.

        The callback only learns that something may have changed. It should
        re-query get_current_role() / has_access() itself.

        Returns:
            A function that removes the subscription. Calling it twice is harmless.
        """

        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def notify_external_change(self) -> None:
        """Tell subscribers that another context wrote the same storage."""

        self._notify()

    def _notify(self) -> None:

        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                logger.exception("Credential store listener %r failed", callback)

    # --- Current role ----------------------------------------------------------
    def get_current_role(self) -> str:
        """
        Return the active role, or visitor when unset.

        Never raises: an unreadable store is logged and read as visitor.
        """

        try:
            return self.backend.get(CURRENT_ROLE_KEY) or Role.VISITOR.value
        except StoreCorruptError:
            logger.warning("Credential store unreadable; treating actor as visitor", exc_info=True)
            return Role.VISITOR.value

    def set_current_role_unchecked(self, role: str) -> None:
        """
        Overwrite the active role WITHOUT checking that it exists.

        Low-level primitive: an unknown name is stored as-is and simply never
        satisfies any gate. Untrusted input should go through
        CodeAuthenticator.try_become_role() instead.
        """

        role = role.value if isinstance(role, Enum) else role
        self.backend.set(CURRENT_ROLE_KEY, role)
        logger.info("Active role set to %s", role)
        self._notify()

    # --- Codes -----------------------------------------------------------------
    def get_code(self, key: str, default: str) -> str:

        return self.backend.get(key) or default

    def save_code(self, key: str, new_code: str) -> None:
        """
        Persist an unlock code under `key`.

        Raises:
            ValidationError: `new_code` is not exactly six digits. Nothing is written.
        """

        if not isinstance(new_code, str) or not _CODE_RE.fullmatch(new_code):
            raise ValidationError("Code must be 6 digits")

        self.backend.set(key, new_code)
        logger.info("Saved code for key %s", key)
        self._notify()

    def get_owner_code(self) -> str:

        return self.get_code(OWNER_CODE_KEY, DEFAULT_OWNER_CODE)

    def get_admin_code(self) -> str:

        return self.get_code(ADMIN_CODE_KEY, DEFAULT_ADMIN_CODE)

    # --- Custom roles ----------------------------------------------------------
    def get_custom_roles(self) -> Dict[str, str]:
        """
        Return the custom role -> code mapping.

        If nothing was ever saved, a fresh copy of the seed mapping is returned
        and storage is left untouched.
        """

        stored = self.backend.get(CUSTOM_ROLES_KEY)

        if not stored:
            return dict(DEFAULT_CUSTOM_ROLES)

        try:
            roles = json.loads(stored)
        except json.JSONDecodeError as e:
            raise StoreCorruptError(f"Custom roles are not valid JSON: {e}") from e

        if not isinstance(roles, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in roles.items()
        ):
            raise StoreCorruptError("Custom roles must be a mapping of role name to code")

        return roles

    def save_custom_roles(self, roles: Mapping[str, str]) -> None:
        """
        Replace the whole custom role mapping in one write.

        No per-entry merge happens here. Callers merge with get_custom_roles() first.

        Raises:
            ValidationError: any name is blank or any code is not six digits.
                The mapping is checked in full before anything is written.
        """

        checked: Dict[str, str] = {}

        for name, code in roles.items():
            try:
                entry = CustomRole(name=name, code=code)
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid custom role {name!r}: code must be 6 digits and name non-empty") from e
            checked[entry.name] = entry.code

        self.backend.set(CUSTOM_ROLES_KEY, json.dumps(checked))
        logger.info("Saved %d custom role(s)", len(checked))
        self._notify()

    # --- Views -----------------------------------------------------------------
    def snapshot(self) -> CredentialSnapshot:

        return CredentialSnapshot(
            current_role=self.get_current_role(),
            owner_code=self.get_owner_code(),
            admin_code=self.get_admin_code(),
            custom_roles=self.get_custom_roles(),
        )
