"""
Room repository: lookups, filtered listing and row locking.
"""

from typing import List, Optional

from sqlalchemy import String, Select, cast, func, or_
from sqlalchemy.orm import Session

from booking_admin.core.exceptions import RoomNotFoundError
from booking_admin.models.enums import RoomStatus
from booking_admin.models.room import Room
from booking_admin.repositories.base_repository import BaseRepository
from booking_admin.schemas.room import RoomFilterParams


class RoomRepository(BaseRepository[Room]):
    not_found_error = RoomNotFoundError

    def __init__(self, db: Session):
        super().__init__(Room, db)

    def find_by_room_number(self, room_number: str, exclude_id: Optional[str] = None) -> Optional[Room]:
        """Non-deleted room holding ``room_number``, ignoring ``exclude_id``"""
        stmt = self._base_query().where(Room.room_number == room_number)
        if exclude_id:
            stmt = stmt.where(Room.id != exclude_id)
        return self.db.execute(stmt).scalars().first()

    def get_for_update(self, room_id: str, include_deleted: bool = False) -> Room:
        """
        Load a room and lock its row until the current transaction ends.

        Booking writes take this lock first so two requests for the same room
        cannot both pass the availability check.
        """
        stmt = self._base_query(include_deleted).where(Room.id == room_id).with_for_update()
        room = self.db.execute(stmt).scalars().first()
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def list_active(self) -> List[Room]:
        stmt = self._base_query().order_by(Room.room_number)
        return list(self.db.execute(stmt).scalars().all())

    def build_search(self, filters: RoomFilterParams) -> Select:
        stmt = self._base_query()

        if filters.search_key:
            pattern = f"%{filters.search_key}%"
            stmt = stmt.where(
                or_(
                    Room.name.ilike(pattern),
                    Room.room_number.ilike(pattern),
                    Room.description.ilike(pattern),
                )
            )
        if filters.room_type:
            stmt = stmt.where(Room.room_type == filters.room_type)
        if filters.status:
            stmt = stmt.where(Room.status == filters.status)
        if filters.capacity:
            stmt = stmt.where(Room.capacity >= filters.capacity)
        if filters.min_price is not None:
            stmt = stmt.where(Room.price_per_night >= filters.min_price)
        if filters.max_price is not None:
            stmt = stmt.where(Room.price_per_night <= filters.max_price)
        # amenities is a JSON array; match each quoted entry in its text form
        for amenity in filters.amenity_list:
            stmt = stmt.where(
                func.lower(cast(Room.amenities, String)).like(f'%"{amenity.lower()}"%')
            )

        return stmt.order_by(Room.created_on.desc())

    def has_bookings(self, room: Room) -> bool:
        return bool(room.bookings)

    def set_status(self, room: Room, status: RoomStatus, audit_context=None, commit: bool = False) -> Room:
        if room.status == status:
            return room
        return self.update(room, {"status": status}, audit_context=audit_context, commit=commit)
