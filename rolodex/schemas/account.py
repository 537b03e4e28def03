"""Pydantic schemas for accounts: roles, resolved account views, directory entries and CRUD payloads."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rolodex.core.security import PASSWORD_MAX_BYTES


class AccountRole(str, Enum):
    """Account role. OP is the administrative operator; no privilege order is implied between roles."""

    NORMAL = "normal"
    RD = "rd"
    OP = "op"

    @classmethod
    def parse(cls, value: str | None) -> "AccountRole":
        """Map a stored role value to a role; unknown or empty values get least privilege (NORMAL)."""
        if not value:
            return cls.NORMAL
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.NORMAL


ROLE_VALUES: frozenset[str] = frozenset(r.value for r in AccountRole)


class DirectoryEntry(BaseModel):
    """Staff profile from the directory (display name and department)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    username: str = Field(..., min_length=1, description="Directory username (same key as the account).")
    display_name: str = Field(..., description="Human-readable name shown in the UI.")
    department: str | None = Field(default=None, description="Organisational unit, when known.")


class Account(BaseModel):
    """Resolved account view: role from the role snapshot, names from the staff directory. Never persisted."""

    model_config = ConfigDict(frozen=True)

    username: str
    role: AccountRole
    display_name: str
    department: str | None = None


def _check_password_bytes(v: str | None) -> str | None:
    if v is not None and len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes in UTF-8")
    return v


class AccountCreateRequest(BaseModel):
    """Payload to create an account."""

    username: str = Field(..., min_length=1, max_length=255, description="Unique username")
    password: str = Field(..., min_length=8, max_length=128, description="Plain password; stored hashed")
    role: AccountRole = Field(default=AccountRole.NORMAL, description="Account role")

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("username must be non-empty")
        return v

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        return _check_password_bytes(v)


class AccountUpdateRequest(BaseModel):
    """Payload to update an account. Omitted fields keep their stored values."""

    password: str | None = Field(default=None, min_length=8, max_length=128)
    role: AccountRole | None = Field(default=None)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str | None) -> str | None:
        return _check_password_bytes(v)


class AccountRecordItem(BaseModel):
    """Stored account as returned by the API (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    username: str
    role: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AccountListResponse(BaseModel):
    """Response for GET /accounts."""

    accounts: list[AccountRecordItem]


class RoleResponse(BaseModel):
    """Cached role of a username."""

    username: str
    role: AccountRole


class HandlerCheckResponse(BaseModel):
    """Whether a username may handle administrative orders."""

    username: str
    is_handler: bool
    is_operator: bool


class HandlerListResponse(BaseModel):
    """Response for GET /handlers."""

    handlers: list[Account]


class StaffSearchResponse(BaseModel):
    """Live directory search results."""

    staff: list[DirectoryEntry]


class HandlerAllowListBody(BaseModel):
    """Configured handler allow-list (order preserved)."""

    usernames: list[str] = Field(default_factory=list, description="Usernames granted handler privilege")
