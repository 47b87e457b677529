"""
Availability resolution and room status synchronisation, exercised through
the services against the in-memory database.
"""
from datetime import datetime
from decimal import Decimal

import pytest

from booking_admin.core.exceptions import (
    InvalidStatusTransitionError,
    RoomNotFoundError,
    RoomUnavailableError,
)
from booking_admin.models import Room
from booking_admin.models.enums import BookingStatus, RoomStatus, RoomType
from booking_admin.schemas.booking import BookingCreate, BookingUpdate
from booking_admin.services.availability_service import AvailabilityService
from booking_admin.services.booking_service import BookingService


def _room(db, number: str, status: RoomStatus = RoomStatus.AVAILABLE) -> Room:
    room = Room(
        name=f"Room {number}",
        room_number=number,
        room_type=RoomType.DOUBLE,
        capacity=2,
        price_per_night=Decimal("100.00"),
        status=status,
    )
    db.add(room)
    db.commit()
    return room


def _booking(room: Room, start: datetime, end: datetime, status=BookingStatus.CONFIRMED) -> BookingCreate:
    return BookingCreate(
        customer_name="Guest",
        email="guest@example.com",
        clock_in=start,
        clock_out=end,
        room_id=room.id,
        status=status,
    )


JAN_10 = datetime(2024, 1, 10)
JAN_11 = datetime(2024, 1, 11)
JAN_12 = datetime(2024, 1, 12)
JAN_13 = datetime(2024, 1, 13)
JAN_14 = datetime(2024, 1, 14)


class TestAvailableRooms:

    @pytest.fixture
    def r101(self, db_session) -> Room:
        return _room(db_session, "R101")

    def test_confirmed_booking_occupies_room_and_blocks_window(self, db_session, r101):
        service = BookingService(db_session)
        service.create_booking(_booking(r101, JAN_10, JAN_12))

        db_session.refresh(r101)
        assert r101.status == RoomStatus.OCCUPIED

        available = AvailabilityService(db_session).get_available_rooms(JAN_10, JAN_12)
        assert r101.id not in {room.id for room in available}

    def test_room_free_again_when_stay_ends(self, db_session, r101):
        BookingService(db_session).create_booking(_booking(r101, JAN_10, JAN_12))

        # half-open intervals: a stay ending on the 12th does not block the 12th
        available = AvailabilityService(db_session).get_available_rooms(JAN_12, JAN_14)
        assert r101.id in {room.id for room in available}

    def test_pending_booking_does_not_block(self, db_session, r101):
        BookingService(db_session).create_booking(
            _booking(r101, JAN_10, JAN_12, status=BookingStatus.PENDING)
        )

        available = AvailabilityService(db_session).get_available_rooms(JAN_10, JAN_12)
        assert r101.id in {room.id for room in available}
        db_session.refresh(r101)
        assert r101.status == RoomStatus.AVAILABLE

    def test_maintenance_room_never_available(self, db_session):
        room = _room(db_session, "R102", status=RoomStatus.MAINTENANCE)

        available = AvailabilityService(db_session).get_available_rooms(JAN_10, JAN_12)
        assert room.id not in {r.id for r in available}

    def test_deleted_room_not_listed(self, db_session):
        room = _room(db_session, "R103")
        room.is_deleted = True
        db_session.commit()

        available = AvailabilityService(db_session).get_available_rooms(JAN_10, JAN_12)
        assert room.id not in {r.id for r in available}

    def test_inverted_range_is_not_rejected_by_resolver(self, db_session, r101):
        available = AvailabilityService(db_session).get_available_rooms(JAN_12, JAN_10)
        assert r101.id in {room.id for room in available}


class TestOverlappingBookings:

    def test_exclude_booking_id_is_never_returned(self, db_session):
        room = _room(db_session, "R201")
        booking = BookingService(db_session).create_booking(_booking(room, JAN_10, JAN_12))

        availability = AvailabilityService(db_session)
        assert [b.id for b in availability.find_overlapping_bookings(JAN_11, JAN_13)] == [booking.id]
        assert availability.find_overlapping_bookings(JAN_11, JAN_13, exclude_booking_id=booking.id) == []

    def test_room_filter(self, db_session):
        first = _room(db_session, "R202")
        second = _room(db_session, "R203")
        BookingService(db_session).create_booking(_booking(first, JAN_10, JAN_12))

        availability = AvailabilityService(db_session)
        assert availability.find_overlapping_bookings(JAN_10, JAN_12, room_id=second.id) == []
        assert len(availability.find_overlapping_bookings(JAN_10, JAN_12, room_id=first.id)) == 1

    def test_is_room_available_ignores_the_booking_under_edit(self, db_session):
        room = _room(db_session, "R204")
        booking = BookingService(db_session).create_booking(_booking(room, JAN_10, JAN_12))

        availability = AvailabilityService(db_session)
        assert not availability.is_room_available(room, JAN_11, JAN_13)
        assert availability.is_room_available(room, JAN_11, JAN_13, exclude_booking_id=booking.id)


class TestBookingLifecycle:

    def test_overlapping_confirmed_booking_rejected(self, db_session):
        room = _room(db_session, "R301")
        service = BookingService(db_session)
        service.create_booking(_booking(room, JAN_10, JAN_12))

        with pytest.raises(RoomUnavailableError):
            service.create_booking(_booking(room, JAN_11, JAN_13))

    def test_cancel_releases_room(self, db_session):
        room = _room(db_session, "R302")
        service = BookingService(db_session)
        booking = service.create_booking(_booking(room, JAN_10, JAN_12))

        updated, previous = service.update_booking(booking.id, BookingUpdate(status="canceled"))

        assert previous == BookingStatus.CONFIRMED
        assert updated.status == BookingStatus.CANCELED
        db_session.refresh(room)
        assert room.status == RoomStatus.AVAILABLE

    def test_complete_releases_room(self, db_session):
        room = _room(db_session, "R303")
        service = BookingService(db_session)
        booking = service.create_booking(_booking(room, JAN_10, JAN_12))

        service.update_booking(booking.id, BookingUpdate(status="completed"))

        db_session.refresh(room)
        assert room.status == RoomStatus.AVAILABLE

    def test_terminal_status_cannot_reopen(self, db_session):
        room = _room(db_session, "R304")
        service = BookingService(db_session)
        booking = service.create_booking(_booking(room, JAN_10, JAN_12))
        service.update_booking(booking.id, BookingUpdate(status="canceled"))

        with pytest.raises(InvalidStatusTransitionError):
            service.update_booking(booking.id, BookingUpdate(status="confirmed"))

    def test_confirming_pending_booking_rechecks_availability(self, db_session):
        room = _room(db_session, "R305")
        service = BookingService(db_session)
        pending = service.create_booking(_booking(room, JAN_10, JAN_12, status=BookingStatus.PENDING))
        service.create_booking(_booking(room, JAN_11, JAN_13))

        with pytest.raises(RoomUnavailableError):
            service.update_booking(pending.id, BookingUpdate(status="confirmed"))

    def test_moving_confirmed_booking_swaps_room_status(self, db_session):
        old_room = _room(db_session, "R306")
        new_room = _room(db_session, "R307")
        service = BookingService(db_session)
        booking = service.create_booking(_booking(old_room, JAN_10, JAN_12))

        service.update_booking(booking.id, BookingUpdate(room_id=new_room.id))

        db_session.refresh(old_room)
        db_session.refresh(new_room)
        assert old_room.status == RoomStatus.AVAILABLE
        assert new_room.status == RoomStatus.OCCUPIED

    @pytest.mark.parametrize(
        "status,changes",
        [
            (BookingStatus.PENDING, {}),
            (BookingStatus.CONFIRMED, {"status": "canceled"}),
            (BookingStatus.CONFIRMED, {"status": "completed"}),
        ],
    )
    def test_move_to_unknown_room_rejected_in_any_status(self, db_session, status, changes):
        room = _room(db_session, "R310")
        service = BookingService(db_session)
        booking = service.create_booking(_booking(room, JAN_10, JAN_12, status=status))
        if status == BookingStatus.PENDING:
            service.update_booking(booking.id, BookingUpdate(status="canceled"))

        with pytest.raises(RoomNotFoundError):
            service.update_booking(booking.id, BookingUpdate(room_id="no-such-room", **changes))

        db_session.expire_all()
        stored = service.get_booking(booking.id)
        assert stored.room_id == room.id
        assert stored.room is not None

    def test_move_locks_both_rooms_in_id_order(self, db_session, monkeypatch):
        old_room = _room(db_session, "R311")
        new_room = _room(db_session, "R312")
        service = BookingService(db_session)
        booking = service.create_booking(_booking(old_room, JAN_10, JAN_12))

        locked = []
        get_for_update = service.rooms.get_for_update

        def recording_get_for_update(room_id, include_deleted=False):
            locked.append(room_id)
            return get_for_update(room_id, include_deleted=include_deleted)

        monkeypatch.setattr(service.rooms, "get_for_update", recording_get_for_update)

        service.update_booking(booking.id, BookingUpdate(room_id=new_room.id))

        assert locked[:2] == sorted([old_room.id, new_room.id])
        assert set(locked) == {old_room.id, new_room.id}
        db_session.refresh(old_room)
        db_session.refresh(new_room)
        assert old_room.status == RoomStatus.AVAILABLE
        assert new_room.status == RoomStatus.OCCUPIED

    def test_rescheduling_within_own_window_is_allowed(self, db_session):
        room = _room(db_session, "R308")
        service = BookingService(db_session)
        booking = service.create_booking(_booking(room, JAN_10, JAN_12))

        updated, _ = service.update_booking(booking.id, BookingUpdate(clock_out=JAN_13))

        assert updated.clock_out == JAN_13

    def test_delete_confirmed_booking_frees_room(self, db_session):
        room = _room(db_session, "R309")
        service = BookingService(db_session)
        booking = service.create_booking(_booking(room, JAN_10, JAN_12))

        snapshot = service.delete_booking(booking.id)

        assert snapshot.id == booking.id
        db_session.refresh(room)
        assert room.status == RoomStatus.AVAILABLE
        assert AvailabilityService(db_session).find_overlapping_bookings(JAN_10, JAN_12) == []
