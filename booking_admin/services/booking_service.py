"""
Booking lifecycle: listing, create, update, check-in/out and delete.

Every write runs in one transaction that first locks the target room row,
then checks availability, writes the booking and finally brings the room
status in line. Notifications are sent by the caller after commit.
"""

from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from booking_admin.config.logging import get_logger
from booking_admin.core.exceptions import (
    BusinessRuleError,
    ErrorCode,
    InvalidStatusTransitionError,
    RoomUnavailableError,
    ValidationError,
)
from booking_admin.models.booking import Booking
from booking_admin.models.enums import BookingStatus
from booking_admin.models.room import Room
from booking_admin.repositories.base_repository import AuditContext
from booking_admin.repositories.booking_repository import BookingRepository
from booking_admin.repositories.room_repository import RoomRepository
from booking_admin.schemas.booking import (
    BookingCheckUpdate,
    BookingCreate,
    BookingFilterParams,
    BookingResponse,
    BookingUpdate,
)
from booking_admin.schemas.common import PaginationParams
from booking_admin.services.availability_service import AvailabilityService
from booking_admin.services.base import BaseService, track_performance
from booking_admin.services.room_status_service import RoomStatusService
from booking_admin.utils.datetime_utils import utcnow

logger = get_logger(__name__)

ALLOWED_TRANSITIONS: Dict[BookingStatus, Set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELED: set(),
}

# Statuses in which a booking still claims its room and dates
OPEN_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)

# Fields a client may clear by sending null
NULLABLE_FIELDS = frozenset({"note", "mobile_number"})

CHECK_IN = "check_in"
CHECK_OUT = "check_out"


def validate_transition(current: BookingStatus, new: BookingStatus) -> None:
    """Raise unless ``current -> new`` is allowed. Same-status updates are accepted."""
    if current == new:
        return
    if new not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStatusTransitionError(current.value, new.value)


class BookingService(BaseService):

    def __init__(self, db: Session):
        super().__init__(db)
        self.bookings = BookingRepository(db)
        self.rooms = RoomRepository(db)
        self.availability = AvailabilityService(db)
        self.room_status = RoomStatusService(db)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_bookings(
        self,
        filters: BookingFilterParams,
        params: PaginationParams,
    ) -> Tuple[List[Booking], int]:
        stmt = self.bookings.build_search(filters)
        return self.bookings.paginate(stmt, params.offset, params.size)

    def get_booking(self, booking_id: str) -> Booking:
        return self.bookings.get_with_room(booking_id)

    def get_available_rooms(self, check_in: datetime, check_out: datetime) -> List[Room]:
        if check_in >= check_out:
            raise BusinessRuleError(
                "checkIn must be before checkOut",
                ErrorCode.INVALID_DATE_RANGE,
                {"check_in": check_in.isoformat(), "check_out": check_out.isoformat()},
            )
        return self.availability.get_available_rooms(check_in, check_out)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def _claim_room(
        self,
        room_id: str,
        check_in: datetime,
        check_out: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> Room:
        """Lock the room row and make sure it is free for the window"""
        room = self.rooms.get_for_update(room_id)
        if not self.availability.is_room_available(
            room, check_in, check_out, exclude_booking_id=exclude_booking_id
        ):
            logger.info(
                f"Room {room.room_number} unavailable for {check_in.isoformat()} - {check_out.isoformat()}"
            )
            raise RoomUnavailableError(room_id=room.id)
        return room

    @track_performance("booking.create")
    def create_booking(self, data: BookingCreate, audit_context: Optional[AuditContext] = None) -> Booking:
        """
        Create a booking for a free room.

        Raises:
            RoomNotFoundError: If the room does not exist
            RoomUnavailableError: If the room is in maintenance or already
                held by an overlapping confirmed booking
        """
        with self.transaction():
            self._claim_room(data.room_id, data.clock_in, data.clock_out)
            booking = self.bookings.create(
                Booking(**data.model_dump()), audit_context=audit_context, commit=False
            )
            if booking.status == BookingStatus.CONFIRMED:
                self.room_status.handle_booking_status_change(
                    booking.id, BookingStatus.CONFIRMED, None, audit_context
                )

        logger.info(f"Booking {booking.id} created for room {booking.room_id} ({booking.status.value})")
        return self.bookings.get_with_room(booking.id)

    @track_performance("booking.update")
    def update_booking(
        self,
        booking_id: str,
        data: BookingUpdate,
        audit_context: Optional[AuditContext] = None,
    ) -> Tuple[Booking, BookingStatus]:
        """
        Apply a partial update.

        The room is re-checked, excluding this booking, whenever the stay
        window or room changes or the booking becomes confirmed while still
        open. Returns the updated booking and its previous status.
        """
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field in NULLABLE_FIELDS
        }

        with self.transaction():
            booking = self.bookings.get_by_id(booking_id)
            old_status = booking.status
            old_room_id = booking.room_id

            new_status = changes.get("status") or old_status
            validate_transition(old_status, new_status)
            if new_status == old_status:
                changes.pop("status", None)

            clock_in = changes.get("clock_in") or booking.clock_in
            clock_out = changes.get("clock_out") or booking.clock_out
            if clock_in >= clock_out:
                raise ValidationError(
                    "clock_in must be before clock_out",
                    field_errors={"clock_in": ["must be before clock_out"]},
                )
            room_id = changes.get("room_id") or booking.room_id
            if room_id != old_room_id:
                self._lock_rooms(old_room_id, room_id)

            schedule_changed = (
                clock_in != booking.clock_in
                or clock_out != booking.clock_out
                or room_id != booking.room_id
            )
            becomes_confirmed = new_status == BookingStatus.CONFIRMED and old_status != BookingStatus.CONFIRMED
            if new_status in OPEN_STATUSES and (schedule_changed or becomes_confirmed):
                self._claim_room(room_id, clock_in, clock_out, exclude_booking_id=booking.id)

            self.bookings.update(booking, changes, audit_context=audit_context, commit=False)
            self._sync_room_status(booking, old_status, old_room_id, audit_context)

        return self.bookings.get_with_room(booking.id), old_status

    def _lock_rooms(self, old_room_id: str, new_room_id: str) -> None:
        """
        Lock both rooms of a move in id order. The target must exist whatever
        the booking status; the old room may already be soft deleted.
        """
        for room_id in sorted((old_room_id, new_room_id)):
            self.rooms.get_for_update(room_id, include_deleted=room_id == old_room_id)

    def _sync_room_status(
        self,
        booking: Booking,
        old_status: BookingStatus,
        old_room_id: str,
        audit_context: Optional[AuditContext],
    ) -> None:
        new_status = booking.status
        room_changed = booking.room_id != old_room_id
        released_old_room = room_changed and old_status == BookingStatus.CONFIRMED

        if released_old_room:
            old_room = self.rooms.get_for_update(old_room_id, include_deleted=True)
            self.room_status.release(old_room, audit_context)

        if new_status != old_status and not released_old_room:
            self.room_status.handle_booking_status_change(
                booking.id, new_status, old_status, audit_context
            )
        elif room_changed and new_status == BookingStatus.CONFIRMED:
            self.room_status.occupy(self.rooms.get_for_update(booking.room_id), audit_context)

    def set_check_flags(
        self,
        booking_id: str,
        data: BookingCheckUpdate,
        audit_context: Optional[AuditContext] = None,
    ) -> Tuple[Booking, List[str]]:
        """
        Toggle check-in/check-out. Returns the booking and the events that
        happened (``check_in`` and/or ``check_out``).
        """
        with self.transaction():
            booking = self.bookings.get_by_id(booking_id)
            if booking.status == BookingStatus.CANCELED:
                raise BusinessRuleError(
                    "Canceled bookings cannot be checked in or out", ErrorCode.BOOKING_CLOSED
                )

            changes = {}
            events: List[str] = []
            now = utcnow()

            if data.is_checked_in is not None and data.is_checked_in != booking.is_checked_in:
                changes["is_checked_in"] = data.is_checked_in
                if data.is_checked_in:
                    events.append(CHECK_IN)
                    if booking.checked_in_at is None:
                        changes["checked_in_at"] = now

            if data.is_checked_out is not None and data.is_checked_out != booking.is_checked_out:
                if data.is_checked_out and not changes.get("is_checked_in", booking.is_checked_in):
                    raise BusinessRuleError(
                        "Guest must be checked in before checking out", ErrorCode.GUEST_NOT_CHECKED_IN
                    )
                changes["is_checked_out"] = data.is_checked_out
                if data.is_checked_out:
                    events.append(CHECK_OUT)
                    if booking.checked_out_at is None:
                        changes["checked_out_at"] = now

            if changes:
                self.bookings.update(booking, changes, audit_context=audit_context, commit=False)

        return self.bookings.get_with_room(booking.id), events

    @track_performance("booking.delete")
    def delete_booking(self, booking_id: str, audit_context: Optional[AuditContext] = None) -> BookingResponse:
        """
        Remove a booking, freeing its room first when it was confirmed.

        Returns a snapshot of the removed booking for notifications.
        """
        with self.transaction():
            booking = self.bookings.get_with_room(booking_id)
            snapshot = BookingResponse.model_validate(booking)
            if booking.status == BookingStatus.CONFIRMED:
                self.room_status.handle_booking_status_change(
                    booking.id, BookingStatus.CANCELED, BookingStatus.CONFIRMED, audit_context
                )
            self.bookings.hard_delete(booking, audit_context=audit_context, commit=False)

        logger.info(f"Booking {booking_id} deleted")
        return snapshot
