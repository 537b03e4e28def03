"""Pydantic request/response schemas."""

from rolodex.schemas.account import (
    Account,
    AccountCreateRequest,
    AccountListResponse,
    AccountRecordItem,
    AccountRole,
    AccountUpdateRequest,
    DirectoryEntry,
    HandlerAllowListBody,
    HandlerCheckResponse,
    HandlerListResponse,
    RoleResponse,
    StaffSearchResponse,
)
from rolodex.schemas.auth import CurrentUser, LoginRequest, TokenResponse
from rolodex.schemas.health import HealthResponse
from rolodex.schemas.result import ResultStatus

__all__ = [
    "Account",
    "AccountCreateRequest",
    "AccountListResponse",
    "AccountRecordItem",
    "AccountRole",
    "AccountUpdateRequest",
    "CurrentUser",
    "DirectoryEntry",
    "HandlerAllowListBody",
    "HandlerCheckResponse",
    "HandlerListResponse",
    "HealthResponse",
    "LoginRequest",
    "ResultStatus",
    "RoleResponse",
    "StaffSearchResponse",
    "TokenResponse",
]
