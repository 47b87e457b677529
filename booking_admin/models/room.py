"""
Room model.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from booking_admin.models.base import AuditedModel, enum_column
from booking_admin.models.enums import RoomStatus, RoomType

if TYPE_CHECKING:
    from booking_admin.models.booking import Booking


class Room(AuditedModel):
    """
    A bookable room.

    ``status`` reflects the room right now; whether a room can be booked for
    a future stay is answered by the availability service from the confirmed
    bookings, not by this column alone.
    """

    __tablename__ = "rooms"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    room_number: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    room_type: Mapped[RoomType] = mapped_column(enum_column(RoomType), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    price_per_night: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    amenities: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[RoomStatus] = mapped_column(
        enum_column(RoomStatus),
        nullable=False,
        default=RoomStatus.AVAILABLE,
        index=True,
    )

    bookings: Mapped[List["Booking"]] = relationship(back_populates="room")

    __table_args__ = (
        Index("ix_rooms_status_deleted", "status", "is_deleted"),
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, room_number={self.room_number}, status={self.status})>"
