"""
User management endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from booking_admin.api import deps
from booking_admin.core.pagination import build_list_response
from booking_admin.core.permissions import Permission
from booking_admin.core.security import PasswordHasher
from booking_admin.repositories.base_repository import AuditContext
from booking_admin.schemas.common import ListResponse, MessageResponse, PaginationParams
from booking_admin.schemas.user import UserCreate, UserFilterParams, UserResponse, UserUpdate
from booking_admin.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(
    db: Session = Depends(deps.get_db),
    hasher: PasswordHasher = Depends(deps.get_password_hasher),
) -> UserService:
    return UserService(db, hasher)


@router.get(
    "",
    response_model=ListResponse[UserResponse],
    dependencies=[Depends(deps.require_permissions(Permission.VIEW_USER))],
)
def list_users(
    search_key: Optional[str] = Query(None),
    email: Optional[str] = Query(None),
    username: Optional[str] = Query(None),
    role_id: Optional[str] = Query(None),
    params: PaginationParams = Depends(deps.get_pagination_params),
    service: UserService = Depends(get_user_service),
):
    filters = UserFilterParams(search_key=search_key, email=email, username=username, role_id=role_id)
    items, total = service.list_users(filters, params)
    return build_list_response(items=items, total=total, params=params, mapper=UserResponse.model_validate)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(deps.require_permissions(Permission.VIEW_USER))],
)
def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    return UserResponse.model_validate(service.get_user(user_id))


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.require_permissions(Permission.CREATE_USER))],
)
def create_user(
    payload: UserCreate,
    service: UserService = Depends(get_user_service),
    audit_context: AuditContext = Depends(deps.get_audit_context),
):
    return UserResponse.model_validate(service.create_user(payload, audit_context))


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(deps.require_permissions(Permission.EDIT_USER))],
)
def update_user(
    user_id: str,
    payload: UserUpdate,
    service: UserService = Depends(get_user_service),
    audit_context: AuditContext = Depends(deps.get_audit_context),
):
    return UserResponse.model_validate(service.update_user(user_id, payload, audit_context))


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    dependencies=[Depends(deps.require_permissions(Permission.DELETE_USER))],
)
def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
    audit_context: AuditContext = Depends(deps.get_audit_context),
):
    service.delete_user(user_id, audit_context)
    return MessageResponse(message="User deleted successfully")
