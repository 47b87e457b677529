"""
Role and permission schemas.
"""

from __future__ import annotations

from typing import Annotated, List, Optional

from pydantic import AfterValidator, Field

from booking_admin.core.permissions import Permission
from booking_admin.schemas.common import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)


def _strip_blank(values: List[str]) -> List[str]:
    return [value.strip() for value in values if value and value.strip()]


def _unique(values: List[Permission]) -> List[Permission]:
    return list(dict.fromkeys(values))


IpList = Annotated[List[str], AfterValidator(_strip_blank)]
PermissionList = Annotated[List[Permission], AfterValidator(_unique)]


class RoleCreate(BaseCreateSchema):
    role: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    permissions: PermissionList = Field(default_factory=list)
    is_clone: bool = False
    is_phone_masked: bool = False
    accepted_ips: IpList = Field(default_factory=list)
    level: int = Field(default=0, ge=0)


class RoleUpdate(BaseUpdateSchema):
    """Omitted permissions or IPs keep the stored values."""

    role: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    permissions: Optional[PermissionList] = None
    is_clone: Optional[bool] = None
    is_phone_masked: Optional[bool] = None
    accepted_ips: Optional[IpList] = None
    level: Optional[int] = Field(default=None, ge=0)


class UserRoleReassignment(BaseSchema):
    user: str
    roles: List[str] = Field(default_factory=list)


class RoleDelete(BaseSchema):
    """Optional new roles for the users of a role being deleted."""

    users_and_new_roles: List[UserRoleReassignment] = Field(default_factory=list)


class RoleSummary(BaseSchema):
    id: str
    role: str


class RoleResponse(BaseResponseSchema):
    role: str
    description: Optional[str] = None
    permissions: List[str] = Field(default_factory=list)
    is_clone: bool = False
    is_phone_masked: bool = False
    accepted_ips: List[str] = Field(default_factory=list)
    level: int = 0


class PermissionResponse(BaseSchema):
    name: str
    description: str
