"""
src/access/models.py

Pydantic models for credential entries, read-only snapshots, and audit entries.
"""


from datetime import datetime, timezone
from typing import Dict

from pydantic import BaseModel, Field, field_validator

from config import CODE_PATTERN


class CustomRole(BaseModel):

    name: str = Field(min_length=1)
    code: str = Field(pattern=CODE_PATTERN)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:

        if not v.strip():
            raise ValueError("Role name cannot be empty")

        return v


class CredentialSnapshot(BaseModel):

    current_role: str
    owner_code: str
    admin_code: str
    custom_roles: Dict[str, str] = Field(default_factory=dict)


class AuditEntry(BaseModel):

    ts: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"))
    step: str
    ok: bool
    detail: str
