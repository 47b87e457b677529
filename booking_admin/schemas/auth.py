"""
Authentication schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator

from booking_admin.schemas.common import BaseSchema
from booking_admin.schemas.user import UserResponse


class LoginRequest(BaseSchema):
    """Log in with either the username or the email address."""

    username: Optional[str] = None
    email: Optional[str] = None
    password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_identifier(self) -> "LoginRequest":
        if not (self.username or self.email):
            raise ValueError("username or email is required")
        return self

    @property
    def identifier(self) -> str:
        return (self.username or self.email or "").lower()


class RefreshTokenRequest(BaseSchema):
    refresh_token: str = Field(..., min_length=1)


class TokenResponse(BaseSchema):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
