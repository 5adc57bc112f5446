"""
src/access/delegation.py — who may view or rotate whose unlock code

Rule of thumb: you can only manage a code that sits strictly BELOW you. Custom
roles are unranked, so any of the three privileged ranked roles may manage them.

    current role | may manage
    -------------+---------------------------------------------
    developer    | owner, admin, visitor + every custom role
    owner        | admin + every custom role
    admin        | every custom role
    anyone else  | nothing (active custom roles included)

Nobody manages developer: its code is a compiled-in constant.

Usage:
    from access.delegation import DelegationAuthority
    authority = DelegationAuthority(store)
    if not authority.can_manage_role("admin"):
        raise PermissionError("You do not have permission.")
"""


from __future__ import annotations
import logging
from typing import Dict, Set

from access.errors import ValidationError
from access.hierarchy import is_ranked
from access.store import CredentialStore
from config import ADMIN_CODE_KEY, OWNER_CODE_KEY, Role


logger = logging.getLogger(__name__)


# Ranked targets each ranked role may manage
MANAGE_MATRIX: Dict[str, Set[str]] = {
    Role.DEVELOPER.value: {Role.OWNER.value, Role.ADMIN.value, Role.VISITOR.value},
    Role.OWNER.value: {Role.ADMIN.value},
    Role.ADMIN.value: set(),
}

# Roles allowed to create / rotate / delete custom roles
CUSTOM_ROLE_MANAGERS: Set[str] = {Role.DEVELOPER.value, Role.OWNER.value, Role.ADMIN.value}

# Ranked roles that carry a stored, rotatable code
_CODE_KEYS: Dict[str, str] = {
    Role.OWNER.value: OWNER_CODE_KEY,
    Role.ADMIN.value: ADMIN_CODE_KEY,
}


class DelegationAuthority:

    def __init__(self, store: CredentialStore):

        self.store = store

    # --- Checks ----------------------------------------------------------------
    def can_manage_role(self, target_role: str) -> bool:
        """
        Return True if the active role may view or change `target_role`'s code.

        Any name outside the ranked hierarchy counts as a custom role.
        """

        current = self.store.get_current_role()

        if is_ranked(target_role):
            return target_role in MANAGE_MATRIX.get(current, set())

        return current in CUSTOM_ROLE_MANAGERS

    def can_create_custom_roles(self) -> bool:

        return self.store.get_current_role() in CUSTOM_ROLE_MANAGERS

    def _require(self, target_role: str) -> None:

        if not self.can_manage_role(target_role):
            raise PermissionError(f"Role {self.store.get_current_role()!r} may not manage {target_role!r}.")

    def manageable_codes(self) -> Dict[str, str]:
        """
        Return the role -> code pairs the active role is allowed to see.

        Owner/admin codes appear only when manageable; custom roles appear
        together or not at all.
        """

        out: Dict[str, str] = {}

        if self.can_manage_role(Role.OWNER.value):
            out[Role.OWNER.value] = self.store.get_owner_code()
        if self.can_manage_role(Role.ADMIN.value):
            out[Role.ADMIN.value] = self.store.get_admin_code()
        if self.can_create_custom_roles():
            out.update(self.store.get_custom_roles())

        return out

    # --- Rotation --------------------------------------------------------------
    def rotate_code(self, target_role: str, new_code: str) -> None:
        """
        Set a new unlock code for `target_role`.

        Args:
            target_role: "owner", "admin", or a custom role name.
            new_code: six digits.

        Raises:
            PermissionError: the active role may not manage `target_role`.
            ValidationError: bad code format, or the role has no stored code (visitor).
        """

        self._require(target_role)

        if is_ranked(target_role):
            key = _CODE_KEYS.get(target_role)
            if key is None:
                raise ValidationError(f"Role {target_role!r} has no unlock code.")
            self.store.save_code(key, new_code)
        else:
            self._upsert_custom_role(target_role, new_code)

        logger.info("Code for %s rotated by %s", target_role, self.store.get_current_role())

    # --- Custom roles ----------------------------------------------------------
    def _upsert_custom_role(self, name: str, code: str) -> str:
        """Internal: merge one entry into the stored mapping and save it whole."""

        name = name.strip()

        if is_ranked(name):
            raise ValidationError(f"{name!r} is a built-in role and cannot be a custom role.")

        roles = self.store.get_custom_roles()
        roles[name] = code
        self.store.save_custom_roles(roles)

        return name

    def add_custom_role(self, name: str, code: str) -> str:
        """
        Create (or overwrite) a custom role.

        Returns: the stored role name (whitespace stripped).
        """

        if not self.can_create_custom_roles():
            raise PermissionError(f"Role {self.store.get_current_role()!r} may not create custom roles.")

        stored = self._upsert_custom_role(name, code)
        logger.info("Custom role %s saved", stored)

        return stored

    def update_custom_role(self, name: str, code: str) -> str:

        self._require(name)

        return self._upsert_custom_role(name, code)

    def delete_custom_role(self, name: str) -> bool:
        """
        Remove a custom role.

        Deleting a name that does not exist is a successful no-op (nothing is
        written). Deleting the role that is currently active does NOT demote the
        actor: the stale name stays active until the next code is entered.

        Returns: True if something was removed.
        """

        name = name.strip()
        self._require(name)

        roles = self.store.get_custom_roles()

        if name not in roles:
            return False

        del roles[name]
        self.store.save_custom_roles(roles)
        logger.info("Custom role %s deleted", name)

        return True
