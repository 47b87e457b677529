"""
Booking endpoints.
"""

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from booking_admin.api import deps
from booking_admin.core.pagination import build_list_response
from booking_admin.core.permissions import Permission
from booking_admin.models.enums import BookingStatus
from booking_admin.repositories.base_repository import AuditContext
from booking_admin.schemas.booking import (
    AvailableRoomsResponse,
    BookingCheckUpdate,
    BookingCreate,
    BookingFilterParams,
    BookingResponse,
    BookingUpdate,
    ChannelSyncResponse,
)
from booking_admin.schemas.common import ListResponse, PaginationParams
from booking_admin.schemas.room import RoomResponse
from booking_admin.services.booking_notifier import BookingNotifier
from booking_admin.services.booking_service import BookingService
from booking_admin.services.channel_sync_service import ChannelSyncService
from booking_admin.utils.datetime_utils import to_naive_utc

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(db: Session = Depends(deps.get_db)) -> BookingService:
    return BookingService(db)


@router.get(
    "",
    response_model=ListResponse[BookingResponse],
    dependencies=[Depends(deps.require_permissions(Permission.VIEW_BOOKING))],
)
def list_bookings(
    search_key: Optional[str] = Query(None, description="Matches the customer name"),
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    room_id: Optional[str] = Query(None),
    booking_id: Optional[str] = Query(None, alias="id"),
    params: PaginationParams = Depends(deps.get_pagination_params),
    service: BookingService = Depends(get_booking_service),
):
    filters = BookingFilterParams(
        search_key=search_key, status=booking_status, room_id=room_id, id=booking_id
    )
    items, total = service.list_bookings(filters, params)
    return build_list_response(
        items=items, total=total, params=params, mapper=BookingResponse.model_validate
    )


@router.get(
    "/available-rooms",
    response_model=AvailableRoomsResponse,
    dependencies=[Depends(deps.require_permissions(Permission.VIEW_BOOKING))],
)
def get_available_rooms(
    check_in: datetime = Query(..., alias="checkIn"),
    check_out: datetime = Query(..., alias="checkOut"),
    service: BookingService = Depends(get_booking_service),
):
    rooms = service.get_available_rooms(to_naive_utc(check_in), to_naive_utc(check_out))
    return AvailableRoomsResponse(
        data=[RoomResponse.model_validate(room) for room in rooms], count=len(rooms)
    )


@router.get(
    "/sync",
    response_model=ChannelSyncResponse,
    dependencies=[Depends(deps.require_permissions(Permission.SYNC_BOOKING))],
)
def sync_bookings(
    from_date: Optional[date] = Query(None, alias="fromDate"),
    to_date: Optional[date] = Query(None, alias="toDate"),
    sync_service: ChannelSyncService = Depends(deps.get_channel_sync_service),
):
    return sync_service.sync(from_date, to_date)


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    dependencies=[Depends(deps.require_permissions(Permission.VIEW_BOOKING))],
)
def get_booking(booking_id: str, service: BookingService = Depends(get_booking_service)):
    return BookingResponse.model_validate(service.get_booking(booking_id))


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.require_permissions(Permission.CREATE_BOOKING))],
)
def create_booking(
    payload: BookingCreate,
    background_tasks: BackgroundTasks,
    service: BookingService = Depends(get_booking_service),
    notifier: BookingNotifier = Depends(deps.get_booking_notifier),
    audit_context: AuditContext = Depends(deps.get_audit_context),
):
    booking = BookingResponse.model_validate(service.create_booking(payload, audit_context))
    background_tasks.add_task(notifier.booking_created, booking)
    return booking


@router.patch(
    "/check/{booking_id}",
    response_model=BookingResponse,
    dependencies=[Depends(deps.require_permissions(Permission.EDIT_BOOKING))],
)
def check_booking(
    booking_id: str,
    payload: BookingCheckUpdate,
    background_tasks: BackgroundTasks,
    service: BookingService = Depends(get_booking_service),
    notifier: BookingNotifier = Depends(deps.get_booking_notifier),
    audit_context: AuditContext = Depends(deps.get_audit_context),
):
    updated, events = service.set_check_flags(booking_id, payload, audit_context)
    booking = BookingResponse.model_validate(updated)
    if events:
        background_tasks.add_task(notifier.booking_checked, booking, events)
    return booking


@router.patch(
    "/{booking_id}",
    response_model=BookingResponse,
    dependencies=[Depends(deps.require_permissions(Permission.EDIT_BOOKING))],
)
def update_booking(
    booking_id: str,
    payload: BookingUpdate,
    background_tasks: BackgroundTasks,
    service: BookingService = Depends(get_booking_service),
    notifier: BookingNotifier = Depends(deps.get_booking_notifier),
    audit_context: AuditContext = Depends(deps.get_audit_context),
):
    updated, previous_status = service.update_booking(booking_id, payload, audit_context)
    booking = BookingResponse.model_validate(updated)
    background_tasks.add_task(notifier.booking_updated, booking, previous_status)
    return booking


@router.delete(
    "/{booking_id}",
    response_model=BookingResponse,
    dependencies=[Depends(deps.require_permissions(Permission.DELETE_BOOKING))],
)
def delete_booking(
    booking_id: str,
    background_tasks: BackgroundTasks,
    service: BookingService = Depends(get_booking_service),
    notifier: BookingNotifier = Depends(deps.get_booking_notifier),
    audit_context: AuditContext = Depends(deps.get_audit_context),
):
    booking = service.delete_booking(booking_id, audit_context)
    background_tasks.add_task(notifier.booking_deleted, booking)
    return booking
