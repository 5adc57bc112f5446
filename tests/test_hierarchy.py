import pytest

from access.hierarchy import ROLE_HIERARCHY, is_ranked, rank
from config import Role


@pytest.mark.parametrize("role, expected", [
    ("developer", 0),
    ("owner", 1),
    ("admin", 2),
    ("visitor", 3),
])
def test_rank_of_ranked_roles(role, expected):
    assert rank(role) == expected


def test_rank_accepts_enum_members():
    assert rank(Role.OWNER) == 1


@pytest.mark.parametrize("role", ["betaTester", "partner", "", "Developer", "root"])
def test_unranked_roles(role):
    assert rank(role) is None
    assert not is_ranked(role)


def test_hierarchy_is_most_privileged_first():
    assert ROLE_HIERARCHY == ("developer", "owner", "admin", "visitor")
