"""
src/config.py
"""


import logging
import os
from enum import Enum
from pathlib import Path
from typing import Dict


class Role(str, Enum):

    DEVELOPER = "developer"     # highest
    OWNER = "owner"
    ADMIN = "admin"
    VISITOR = "visitor"         # lowest, needs no code


# Storage keys
CURRENT_ROLE_KEY: str = "currentRole"
OWNER_CODE_KEY: str = "pageOwnerCode"
ADMIN_CODE_KEY: str = "pageAdminCode"
CUSTOM_ROLES_KEY: str = "pageCustomRoles"

# Codes
DEVELOPER_CODE: str = "112233"              # hard-wired, never stored
DEFAULT_OWNER_CODE: str = "445566"
DEFAULT_ADMIN_CODE: str = "778899"
DEFAULT_CUSTOM_ROLES: Dict[str, str] = {    # seed, only until first save
    "betaTester": "123456",
    "partner": "654321",
}
CODE_PATTERN: str = r"^[0-9]{6}$"       # ASCII digits only

# Environment
STORE_PATH = Path(
    os.getenv("ROLE_GUARD_STORE_PATH", Path(__file__).resolve().parents[1] / "data" / "credentials.db")
)
LOG_LEVEL = os.getenv("ROLE_GUARD_LOG_LEVEL", "INFO")


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Basic console logging for the app entry point."""

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
# EOF
