"""
Keeps a room's status in step with the confirmed state of its bookings.
"""

from typing import Optional

from sqlalchemy.orm import Session

from booking_admin.config.logging import get_logger
from booking_admin.models.enums import BookingStatus, RoomStatus
from booking_admin.models.room import Room
from booking_admin.repositories.base_repository import AuditContext
from booking_admin.repositories.booking_repository import BookingRepository
from booking_admin.repositories.room_repository import RoomRepository
from booking_admin.services.base import BaseService

logger = get_logger(__name__)


class RoomStatusService(BaseService):
    """
    Flips room status on booking status changes.

    Writes are flushed, not committed: the caller's transaction decides
    whether the booking change and the room change persist together.
    """

    def __init__(self, db: Session):
        super().__init__(db)
        self.rooms = RoomRepository(db)
        self.bookings = BookingRepository(db)

    def handle_booking_status_change(
        self,
        booking_id: str,
        new_status: BookingStatus,
        old_status: Optional[BookingStatus] = None,
        audit_context: Optional[AuditContext] = None,
    ) -> Optional[Room]:
        """
        Entering confirmed occupies the room; leaving confirmed frees it.
        Any other change leaves the room untouched and returns None.
        """
        booking = self.bookings.get_by_id(booking_id)

        if new_status == BookingStatus.CONFIRMED:
            target = RoomStatus.OCCUPIED
        elif old_status == BookingStatus.CONFIRMED:
            target = RoomStatus.AVAILABLE
        else:
            return None

        room = self.rooms.get_by_id(booking.room_id, include_deleted=True)
        logger.info(
            f"Booking {booking_id} {old_status.value if old_status else 'new'} -> {new_status.value}: "
            f"room {room.room_number} {room.status.value} -> {target.value}"
        )
        return self.rooms.set_status(room, target, audit_context=audit_context)

    def occupy(self, room: Room, audit_context: Optional[AuditContext] = None) -> Room:
        return self.rooms.set_status(room, RoomStatus.OCCUPIED, audit_context=audit_context)

    def release(self, room: Room, audit_context: Optional[AuditContext] = None) -> Room:
        return self.rooms.set_status(room, RoomStatus.AVAILABLE, audit_context=audit_context)
