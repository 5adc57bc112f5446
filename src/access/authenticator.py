"""
src/access/authenticator.py — turn a submitted unlock code into an active role

Matching order is fixed and first match wins:

    1. developer constant (112233)
    2. owner code
    3. admin code
    4. custom role codes, in mapping order

Codes are not unique across roles, so this order is the tie-break. The input is
never format-checked here: "12", "abc" or "" simply fail to match.
"""


import logging
from typing import Optional

from access.store import CredentialStore
from config import DEVELOPER_CODE, Role


logger = logging.getLogger(__name__)


class CodeAuthenticator:

    def __init__(self, store: CredentialStore):

        self.store = store

    def match_custom_role(self, code: str) -> Optional[str]:
        """Return the first custom role whose code equals `code`, or None."""

        for role, role_code in self.store.get_custom_roles().items():
            if role_code == code:
                return role

        return None

    def try_become_role(self, code: str) -> bool:
        """
        Activate the role that `code` unlocks.

        Returns:
            True if a role matched (and is now active), False otherwise. A miss
            leaves the active role untouched.
        """

        if code == DEVELOPER_CODE:
            matched: Optional[str] = Role.DEVELOPER.value
        elif code == self.store.get_owner_code():
            matched = Role.OWNER.value
        elif code == self.store.get_admin_code():
            matched = Role.ADMIN.value
        else:
            matched = self.match_custom_role(code)

        if not matched:
            logger.info("Unlock code did not match any role")
            return False

        self.store.set_current_role_unchecked(matched)

        return True
