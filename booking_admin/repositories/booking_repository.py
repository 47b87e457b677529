"""
Booking repository: overlap queries and filtered listing.
"""

from datetime import datetime
from typing import List, Optional, Set

from sqlalchemy import Select, and_
from sqlalchemy.orm import Session, joinedload

from booking_admin.core.exceptions import BookingNotFoundError
from booking_admin.models.booking import Booking
from booking_admin.models.enums import BookingStatus
from booking_admin.repositories.base_repository import BaseRepository
from booking_admin.schemas.booking import BookingFilterParams


class BookingRepository(BaseRepository[Booking]):
    not_found_error = BookingNotFoundError

    def __init__(self, db: Session):
        super().__init__(Booking, db)

    def _overlap_query(
        self,
        check_in: datetime,
        check_out: datetime,
        exclude_booking_id: Optional[str] = None,
        room_id: Optional[str] = None,
    ) -> Select:
        # half-open intervals: [a, b) and [c, d) overlap iff a < d and c < b
        stmt = self._base_query().where(
            and_(
                Booking.status == BookingStatus.CONFIRMED,
                Booking.clock_in < check_out,
                Booking.clock_out > check_in,
            )
        )
        if exclude_booking_id:
            stmt = stmt.where(Booking.id != exclude_booking_id)
        if room_id:
            stmt = stmt.where(Booking.room_id == room_id)
        return stmt

    def find_overlapping_bookings(
        self,
        check_in: datetime,
        check_out: datetime,
        exclude_booking_id: Optional[str] = None,
        room_id: Optional[str] = None,
    ) -> List[Booking]:
        """
        Confirmed bookings whose stay overlaps ``[check_in, check_out)``.

        Args:
            exclude_booking_id: Booking to leave out, used when re-validating an edit
            room_id: Restrict to one room
        """
        stmt = self._overlap_query(check_in, check_out, exclude_booking_id, room_id)
        return list(self.db.execute(stmt.order_by(Booking.clock_in)).scalars().all())

    def overlapping_room_ids(self, check_in: datetime, check_out: datetime) -> Set[str]:
        subquery = self._overlap_query(check_in, check_out).with_only_columns(Booking.room_id)
        return set(self.db.execute(subquery).scalars().all())

    def find_upcoming_confirmed(self, room_id: str, after: datetime) -> List[Booking]:
        """Confirmed bookings on the room that have not ended by ``after``"""
        stmt = self._base_query().where(
            Booking.room_id == room_id,
            Booking.status == BookingStatus.CONFIRMED,
            Booking.clock_out > after,
        )
        return list(self.db.execute(stmt.order_by(Booking.clock_in)).scalars().all())

    def get_with_room(self, booking_id: str) -> Booking:
        stmt = (
            self._base_query()
            .options(joinedload(Booking.room))
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        booking = self.db.execute(stmt).scalars().first()
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    def build_search(self, filters: BookingFilterParams) -> Select:
        stmt = self._base_query().options(joinedload(Booking.room))

        if filters.search_key:
            stmt = stmt.where(Booking.customer_name.ilike(f"%{filters.search_key}%"))
        if filters.status:
            stmt = stmt.where(Booking.status == filters.status)
        if filters.room_id:
            stmt = stmt.where(Booking.room_id == filters.room_id)
        if filters.id:
            stmt = stmt.where(Booking.id == filters.id)

        return stmt.order_by(Booking.created_on.desc())

