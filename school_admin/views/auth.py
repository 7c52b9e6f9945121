"""Pydantic schemas related to authentication."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Credentials submitted to obtain an access token."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class TokenResponse(BaseModel):
    """Standard access token response body."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(default=0, description="Seconds until the token expires")
    name: str


class CurrentUserResponse(BaseModel):
    id: int
    name: str
    email: str
    roles: list[str]
    permissions: list[str]


__all__ = ["CurrentUserResponse", "LoginRequest", "TokenResponse"]
