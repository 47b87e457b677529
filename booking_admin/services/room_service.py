"""
Room administration.
"""

from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from booking_admin.config.logging import get_logger
from booking_admin.core.exceptions import BusinessRuleError, DuplicateEntryError, ErrorCode
from booking_admin.models.enums import RoomStatus
from booking_admin.models.room import Room
from booking_admin.repositories.base_repository import AuditContext
from booking_admin.repositories.booking_repository import BookingRepository
from booking_admin.repositories.room_repository import RoomRepository
from booking_admin.schemas.common import PaginationParams
from booking_admin.schemas.room import RoomCreate, RoomFilterParams, RoomUpdate
from booking_admin.services.base import BaseService
from booking_admin.utils.datetime_utils import utcnow

logger = get_logger(__name__)


class RoomService(BaseService):

    def __init__(self, db: Session):
        super().__init__(db)
        self.rooms = RoomRepository(db)
        self.bookings = BookingRepository(db)

    def _ensure_unique_number(self, room_number: str, exclude_id: Optional[str] = None) -> None:
        if self.rooms.find_by_room_number(room_number, exclude_id=exclude_id):
            raise DuplicateEntryError("Room number already exists", field="room_number")

    def list_rooms(self, filters: RoomFilterParams, params: PaginationParams) -> Tuple[List[Room], int]:
        stmt = self.rooms.build_search(filters)
        return self.rooms.paginate(stmt, params.offset, params.size)

    def get_room(self, room_id: str) -> Room:
        return self.rooms.get_by_id(room_id)

    def create_room(self, data: RoomCreate, audit_context: Optional[AuditContext] = None) -> Room:
        with self.transaction():
            self._ensure_unique_number(data.room_number)
            room = self.rooms.create(Room(**data.model_dump()), audit_context=audit_context, commit=False)
        return room

    def update_room(
        self,
        room_id: str,
        data: RoomUpdate,
        audit_context: Optional[AuditContext] = None,
    ) -> Room:
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field == "description"
        }
        with self.transaction():
            room = self.rooms.get_by_id(room_id)
            if "room_number" in changes and changes["room_number"] != room.room_number:
                self._ensure_unique_number(changes["room_number"], exclude_id=room.id)
            self.rooms.update(room, changes, audit_context=audit_context, commit=False)
        return room

    def update_status(
        self,
        room_id: str,
        status: RoomStatus,
        audit_context: Optional[AuditContext] = None,
    ) -> Room:
        """Manual status override, e.g. taking a room out for maintenance"""
        with self.transaction():
            room = self.rooms.get_for_update(room_id)
            logger.info(f"Room {room.room_number} status override {room.status.value} -> {status.value}")
            self.rooms.set_status(room, status, audit_context=audit_context)
        return room

    def delete_room(
        self,
        room_id: str,
        hard: bool = False,
        audit_context: Optional[AuditContext] = None,
    ) -> None:
        """
        Soft delete by default. A room with upcoming confirmed stays cannot be
        removed, and a hard delete is refused while any booking references it.
        """
        with self.transaction():
            room = self.rooms.get_for_update(room_id)
            upcoming = self.bookings.find_upcoming_confirmed(room.id, utcnow())
            if upcoming:
                raise BusinessRuleError(
                    "Room has upcoming confirmed bookings",
                    ErrorCode.ROOM_UNAVAILABLE,
                    {"booking_ids": [booking.id for booking in upcoming]},
                )
            if hard:
                if self.rooms.has_bookings(room):
                    raise BusinessRuleError(
                        "Room has bookings and cannot be permanently deleted",
                        details={"room_id": room.id},
                    )
                self.rooms.hard_delete(room, audit_context=audit_context, commit=False)
            else:
                self.rooms.soft_delete(room, audit_context=audit_context, commit=False)
        logger.info(f"Room {room_id} {'hard' if hard else 'soft'} deleted")
