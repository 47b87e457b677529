"""
User schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from booking_admin.schemas.common import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)
from booking_admin.schemas.role import RoleSummary


class UserCreate(BaseCreateSchema):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: EmailStr
    mobile_number: Optional[str] = Field(default=None, max_length=30)
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=1)
    role_ids: List[str] = Field(default_factory=list)

    @field_validator("email", "username")
    @classmethod
    def normalize_identity(cls, v: str) -> str:
        return v.lower()


class UserUpdate(BaseUpdateSchema):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    mobile_number: Optional[str] = Field(default=None, max_length=30)
    username: Optional[str] = Field(default=None, min_length=3, max_length=100)
    password: Optional[str] = Field(default=None, min_length=1)
    role_ids: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator("email", "username")
    @classmethod
    def normalize_identity(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v


class UserFilterParams(BaseSchema):
    search_key: Optional[str] = Field(default=None, description="Matches first, last or user name")
    email: Optional[str] = None
    username: Optional[str] = None
    role_id: Optional[str] = None


class UserResponse(BaseResponseSchema):
    first_name: str
    last_name: Optional[str] = None
    full_name: str
    email: str
    mobile_number: Optional[str] = None
    username: str
    last_login: Optional[datetime] = None
    roles: List[RoleSummary] = Field(default_factory=list, validation_alias="active_roles")
    permissions: List[str] = Field(default_factory=list)

    @field_validator("permissions")
    @classmethod
    def sort_permissions(cls, v: List[str]) -> List[str]:
        return sorted(v)
