"""JWT login and auth dependencies (get_current_user, require_handler)."""

from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rolodex.core.config import get_settings
from rolodex.core.dependencies import get_account_resolver
from rolodex.core.security import (
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    create_access_token,
    decode_access_token,
    password_length_ok,
    verify_password,
)
from rolodex.schemas.account import AccountRole
from rolodex.schemas.auth import CurrentUser, LoginRequest, TokenResponse
from rolodex.services.account_resolver import AccountResolver

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _validate_username(username: str) -> None:
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid username length.",
        )


def _validate_password(password: str) -> None:
    if not password_length_ok(password):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid password length.",
        )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("", response_model=TokenResponse)
def login(
    body: LoginRequest,
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    _validate_username(body.username)
    _validate_password(body.password)

    record = resolver.get_one(body.username)
    if record is None or not verify_password(body.password, record.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
        )
    return TokenResponse(access_token=create_access_token(record.username), token_type="bearer")


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> CurrentUser:
    """
    Dependency: require valid Bearer JWT and return the current user. Raises 401 if missing or invalid.

    With AUTH_ENABLED=false every request acts as the system user.
    """
    if not get_settings().AUTH_ENABLED:
        system = resolver.resolve_account(resolver.system_username)
        return CurrentUser(username=system.username, role=system.role)
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    username = payload.get("sub")
    if not username or not isinstance(username, str):
        raise _unauthorized("Invalid token payload")
    if resolver.get_one(username) is None:
        raise _unauthorized("User not found")
    return CurrentUser(username=username, role=resolver.role_of(username))


def require_handler(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> CurrentUser:
    """Dependency: require an order handler (OP role or allow-listed). Raises 403 otherwise."""
    if current_user.role is not AccountRole.OP and not resolver.is_handler(current_user.username):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Handler access required",
        )
    return current_user
