"""
Room endpoints.
"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from booking_admin.api import deps
from booking_admin.core.pagination import build_list_response
from booking_admin.core.permissions import Permission
from booking_admin.models.enums import RoomStatus, RoomType
from booking_admin.repositories.base_repository import AuditContext
from booking_admin.schemas.common import ListResponse, MessageResponse, PaginationParams
from booking_admin.schemas.room import (
    RoomCreate,
    RoomFilterParams,
    RoomResponse,
    RoomStatusUpdate,
    RoomUpdate,
)
from booking_admin.services.room_service import RoomService

router = APIRouter(prefix="/rooms", tags=["Rooms"])


def get_room_service(db: Session = Depends(deps.get_db)) -> RoomService:
    return RoomService(db)


@router.get(
    "",
    response_model=ListResponse[RoomResponse],
    dependencies=[Depends(deps.require_permissions(Permission.VIEW_ROOM))],
)
def list_rooms(
    search_key: Optional[str] = Query(None, description="Matches name, room number or description"),
    room_type: Optional[RoomType] = Query(None),
    room_status: Optional[RoomStatus] = Query(None, alias="status"),
    capacity: Optional[int] = Query(None, ge=1, description="Minimum capacity"),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    amenities: Optional[str] = Query(None, description="Comma separated, all must match"),
    params: PaginationParams = Depends(deps.get_pagination_params),
    service: RoomService = Depends(get_room_service),
):
    filters = RoomFilterParams(
        search_key=search_key,
        room_type=room_type,
        status=room_status,
        capacity=capacity,
        min_price=min_price,
        max_price=max_price,
        amenities=amenities,
    )
    items, total = service.list_rooms(filters, params)
    return build_list_response(items=items, total=total, params=params, mapper=RoomResponse.model_validate)


@router.get(
    "/{room_id}",
    response_model=RoomResponse,
    dependencies=[Depends(deps.require_permissions(Permission.VIEW_ROOM))],
)
def get_room(room_id: str, service: RoomService = Depends(get_room_service)):
    return RoomResponse.model_validate(service.get_room(room_id))


@router.post(
    "",
    response_model=RoomResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.require_permissions(Permission.CREATE_ROOM))],
)
def create_room(
    payload: RoomCreate,
    service: RoomService = Depends(get_room_service),
    audit_context: AuditContext = Depends(deps.get_audit_context),
):
    return RoomResponse.model_validate(service.create_room(payload, audit_context))


@router.patch(
    "/{room_id}/status",
    response_model=RoomResponse,
    dependencies=[Depends(deps.require_permissions(Permission.EDIT_ROOM))],
)
def update_room_status(
    room_id: str,
    payload: RoomStatusUpdate,
    service: RoomService = Depends(get_room_service),
    audit_context: AuditContext = Depends(deps.get_audit_context),
):
    return RoomResponse.model_validate(service.update_status(room_id, payload.status, audit_context))


@router.patch(
    "/{room_id}",
    response_model=RoomResponse,
    dependencies=[Depends(deps.require_permissions(Permission.EDIT_ROOM))],
)
def update_room(
    room_id: str,
    payload: RoomUpdate,
    service: RoomService = Depends(get_room_service),
    audit_context: AuditContext = Depends(deps.get_audit_context),
):
    return RoomResponse.model_validate(service.update_room(room_id, payload, audit_context))


@router.delete(
    "/{room_id}",
    response_model=MessageResponse,
    dependencies=[Depends(deps.require_permissions(Permission.DELETE_ROOM))],
)
def delete_room(
    room_id: str,
    hard: bool = Query(False, description="Remove the row instead of soft deleting"),
    service: RoomService = Depends(get_room_service),
    audit_context: AuditContext = Depends(deps.get_audit_context),
):
    service.delete_room(room_id, hard=hard, audit_context=audit_context)
    return MessageResponse(message="Room deleted successfully")
