"""
src/access/resolver.py — who is acting now, and may they see this?

Provides:
- RoleResolver.has_access(required_role): the gate check
- RoleResolver.visible_regions(gates): gate check for a whole page of regions
- RoleWatcher: re-reads the active role after store writes and reports real changes

Gate rules:
* Ranked gate (developer/owner/admin/visitor): allowed when the active role
  ranks at or above it. An active CUSTOM role never passes a ranked gate.
* Custom gate (e.g. "betaTester"): allowed only for that exact role name.
  Ranked privilege does not flow into custom gates, not even for developer.
"""


from __future__ import annotations
import logging
import math
from typing import Callable, Dict, Mapping, Optional

from access.hierarchy import is_ranked, rank
from access.store import CredentialStore


logger = logging.getLogger(__name__)


class RoleResolver:

    def __init__(self, store: CredentialStore):

        self.store = store

    def current_role(self) -> str:

        return self.store.get_current_role()

    def has_access(self, required_role: str) -> bool:
        """
        Return True if the active role satisfies `required_role`.

        Args:
            required_role: a ranked role name or a custom role name (the gate tag).
        """

        current = self.current_role()
        required_rank = rank(required_role)

        if required_rank is None:
            return current == required_role

        current_rank = rank(current)

        return (math.inf if current_rank is None else current_rank) <= required_rank

    def visible_regions(self, gates: Mapping[str, Optional[str]]) -> Dict[str, bool]:
        """
        Evaluate a set of gated regions in one pass.

        Args:
            gates: region name -> required role tag. A None tag means ungated.

        Returns: region name -> visible?
        """

        return {
            region: True if required is None else self.has_access(required)
            for region, required in gates.items()
        }

    def is_registered(self, role: Optional[str] = None) -> bool:
        """
        Is `role` (default: the active role) a ranked role or a current custom role key?

        False means a stale custom role (deleted while active) or a name that was
        forced in via set_current_role_unchecked().
        """

        role = self.current_role() if role is None else role

        return is_ranked(role) or role in self.store.get_custom_roles()


class RoleWatcher:
    """
    Subscribe to a store and call `on_change(old_role, new_role)` when the active role changes.

    Writes that leave the role alone (code rotation, custom role edits) are ignored.
    """

    def __init__(self, store: CredentialStore, on_change: Callable[[str, str], None]):

        self.store = store
        self.on_change = on_change
        self.last_role = store.get_current_role()
        self._unsubscribe = store.subscribe(self._refresh)

    def _refresh(self) -> None:

        role = self.store.get_current_role()

        if role != self.last_role:
            old, self.last_role = self.last_role, role
            logger.info("Role changed: %s -> %s", old, role)
            self.on_change(old, role)

    def close(self) -> None:

        self._unsubscribe()
