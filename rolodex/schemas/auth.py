"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field

from rolodex.schemas.account import AccountRole


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=8, max_length=128, description="Password")


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class CurrentUser(BaseModel):
    """Authenticated user for dependency injection; role comes from the role snapshot."""

    username: str
    role: AccountRole
