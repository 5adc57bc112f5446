"""
src/access/hierarchy.py — the fixed ranking of built-in roles

Ranked roles have a strict order of privilege:

    developer > owner > admin > visitor

A lower rank number means MORE privilege. Anything else (e.g. "betaTester") is a
custom role: unranked, and only ever compared by exact name.

Usage:
    from access.hierarchy import rank
    rank("owner")       # -> 1
    rank("betaTester")  # -> None
"""


from typing import Optional, Tuple

from config import Role


ROLE_HIERARCHY: Tuple[str, ...] = (
    Role.DEVELOPER.value,
    Role.OWNER.value,
    Role.ADMIN.value,
    Role.VISITOR.value,
)


def rank(role: str) -> Optional[int]:
    """
    Return the zero-based position of `role` in ROLE_HIERARCHY, or None if unranked.
    """

    try:
        return ROLE_HIERARCHY.index(role)
    except ValueError:
        return None

def is_ranked(role: str) -> bool:

    return role in ROLE_HIERARCHY
