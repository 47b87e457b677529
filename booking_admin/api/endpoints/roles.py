"""
Role and permission endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from booking_admin.api import deps
from booking_admin.core.pagination import build_list_response
from booking_admin.core.permissions import Permission
from booking_admin.repositories.base_repository import AuditContext
from booking_admin.schemas.common import ListResponse, MessageResponse, PaginationParams
from booking_admin.schemas.role import (
    PermissionResponse,
    RoleCreate,
    RoleDelete,
    RoleResponse,
    RoleUpdate,
)
from booking_admin.services.role_service import RoleService

router = APIRouter(prefix="/roles", tags=["Roles"])


def get_role_service(db: Session = Depends(deps.get_db)) -> RoleService:
    return RoleService(db)


@router.get(
    "",
    response_model=ListResponse[RoleResponse],
    dependencies=[Depends(deps.require_permissions(Permission.SHOW_ROLE))],
)
def list_roles(
    search_key: Optional[str] = Query(None),
    params: PaginationParams = Depends(deps.get_pagination_params),
    service: RoleService = Depends(get_role_service),
):
    items, total = service.list_roles(search_key, params)
    return build_list_response(items=items, total=total, params=params, mapper=RoleResponse.model_validate)


@router.get(
    "/permissions",
    response_model=List[PermissionResponse],
    dependencies=[Depends(deps.require_permissions(Permission.SHOW_ROLE))],
)
def list_permissions(search_key: Optional[str] = Query(None)):
    return RoleService.get_permissions(search_key)


@router.get(
    "/{role_id}",
    response_model=RoleResponse,
    dependencies=[Depends(deps.require_permissions(Permission.SHOW_ROLE))],
)
def get_role(role_id: str, service: RoleService = Depends(get_role_service)):
    return RoleResponse.model_validate(service.get_role(role_id))


@router.post(
    "",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.require_permissions(Permission.CREATE_ROLE))],
)
def create_role(
    payload: RoleCreate,
    service: RoleService = Depends(get_role_service),
    audit_context: AuditContext = Depends(deps.get_audit_context),
):
    return RoleResponse.model_validate(service.create_role(payload, audit_context))


@router.patch(
    "/{role_id}",
    response_model=RoleResponse,
    dependencies=[Depends(deps.require_permissions(Permission.EDIT_ROLE))],
)
def update_role(
    role_id: str,
    payload: RoleUpdate,
    service: RoleService = Depends(get_role_service),
    audit_context: AuditContext = Depends(deps.get_audit_context),
):
    return RoleResponse.model_validate(service.update_role(role_id, payload, audit_context))


@router.delete(
    "/{role_id}",
    response_model=MessageResponse,
    dependencies=[Depends(deps.require_permissions(Permission.DELETE_ROLE))],
)
def delete_role(
    role_id: str,
    payload: Optional[RoleDelete] = Body(None),
    service: RoleService = Depends(get_role_service),
    audit_context: AuditContext = Depends(deps.get_audit_context),
):
    service.delete_role(role_id, payload, audit_context)
    return MessageResponse(message="Role deleted successfully")
