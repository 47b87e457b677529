"""
Booking model.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from booking_admin.core.constants import DEFAULT_BOOKING_ORIGIN
from booking_admin.models.base import AuditedModel, enum_column
from booking_admin.models.enums import BookingStatus

if TYPE_CHECKING:
    from booking_admin.models.room import Room


class Booking(AuditedModel):
    """
    A guest reservation for one room over ``[clock_in, clock_out)``.

    A confirmed booking holds its room for the whole stay window.
    """

    __tablename__ = "bookings"

    customer_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    mobile_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    booking_originate: Mapped[str] = mapped_column(
        String(50), nullable=False, default=DEFAULT_BOOKING_ORIGIN
    )
    clock_in: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    clock_out: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        enum_column(BookingStatus),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    room_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False
    )

    is_checked_in: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_checked_out: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    checked_in_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    checked_out_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    room: Mapped["Room"] = relationship(back_populates="bookings")

    __table_args__ = (
        CheckConstraint("clock_in < clock_out", name="ck_bookings_stay_window"),
        Index("ix_bookings_room_status_window", "room_id", "status", "clock_in", "clock_out"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, room_id={self.room_id}, status={self.status})>"
