"""
Room availability for a stay window.

A room is free for ``[check_in, check_out)`` when it is not deleted, not
under maintenance and no confirmed booking on it overlaps the window.
Pending, completed and canceled bookings never block a room.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from booking_admin.config.logging import get_logger
from booking_admin.models.booking import Booking
from booking_admin.models.enums import RoomStatus
from booking_admin.models.room import Room
from booking_admin.repositories.booking_repository import BookingRepository
from booking_admin.repositories.room_repository import RoomRepository
from booking_admin.services.base import BaseService

logger = get_logger(__name__)


class AvailabilityService(BaseService):

    def __init__(self, db: Session):
        super().__init__(db)
        self.rooms = RoomRepository(db)
        self.bookings = BookingRepository(db)

    def get_available_rooms(self, check_in: datetime, check_out: datetime) -> List[Room]:
        """
        Rooms that can be booked for the window.

        The range is not validated here; an inverted or empty window simply
        matches no overlapping booking.
        """
        excluded = self.bookings.overlapping_room_ids(check_in, check_out)
        available = [
            room
            for room in self.rooms.list_active()
            if room.id not in excluded and room.status != RoomStatus.MAINTENANCE
        ]
        logger.debug(
            f"{len(available)} rooms available between {check_in.isoformat()} and {check_out.isoformat()}"
        )
        return available

    def find_overlapping_bookings(
        self,
        check_in: datetime,
        check_out: datetime,
        exclude_booking_id: Optional[str] = None,
        room_id: Optional[str] = None,
    ) -> List[Booking]:
        return self.bookings.find_overlapping_bookings(
            check_in, check_out, exclude_booking_id=exclude_booking_id, room_id=room_id
        )

    def is_room_available(
        self,
        room: Room,
        check_in: datetime,
        check_out: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        """Single-room form of ``get_available_rooms`` that can ignore one booking"""
        if room.is_deleted or room.status == RoomStatus.MAINTENANCE:
            return False
        conflicts = self.find_overlapping_bookings(
            check_in, check_out, exclude_booking_id=exclude_booking_id, room_id=room.id
        )
        return not conflicts
