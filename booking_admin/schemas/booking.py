"""
Booking request/response schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, BeforeValidator, EmailStr, Field, field_validator, model_validator

from booking_admin.core.constants import DEFAULT_BOOKING_ORIGIN
from booking_admin.models.enums import BookingStatus
from booking_admin.schemas.common import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)
from booking_admin.schemas.room import RoomResponse, RoomSummary
from booking_admin.utils.datetime_utils import to_naive_utc


def _lower(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


StayDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]
BookingStatusInput = Annotated[BookingStatus, BeforeValidator(_lower)]

INITIAL_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class BookingCreate(BaseCreateSchema):
    customer_name: str = Field(..., min_length=1, max_length=200)
    mobile_number: Optional[str] = Field(default=None, max_length=30)
    email: EmailStr = Field(..., description="Customer email, used for notifications")
    booking_originate: str = Field(default=DEFAULT_BOOKING_ORIGIN, min_length=1, max_length=50)
    clock_in: StayDatetime
    clock_out: StayDatetime
    status: BookingStatusInput = BookingStatus.PENDING
    note: Optional[str] = None
    room_id: str = Field(..., min_length=1, description="Room selection is required")

    @field_validator("status")
    @classmethod
    def validate_initial_status(cls, v: BookingStatus) -> BookingStatus:
        if v not in INITIAL_STATUSES:
            raise ValueError("A new booking must be pending or confirmed")
        return v

    @model_validator(mode="after")
    def validate_stay_window(self) -> "BookingCreate":
        if self.clock_in >= self.clock_out:
            raise ValueError("clock_in must be before clock_out")
        return self


class BookingUpdate(BaseUpdateSchema):
    customer_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    mobile_number: Optional[str] = Field(default=None, max_length=30)
    email: Optional[EmailStr] = None
    booking_originate: Optional[str] = Field(default=None, min_length=1, max_length=50)
    clock_in: Optional[StayDatetime] = None
    clock_out: Optional[StayDatetime] = None
    status: Optional[BookingStatusInput] = None
    note: Optional[str] = None
    room_id: Optional[str] = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def validate_stay_window(self) -> "BookingUpdate":
        if self.clock_in and self.clock_out and self.clock_in >= self.clock_out:
            raise ValueError("clock_in must be before clock_out")
        return self


class BookingCheckUpdate(BaseSchema):
    is_checked_in: Optional[bool] = None
    is_checked_out: Optional[bool] = None

    @model_validator(mode="after")
    def validate_any_flag(self) -> "BookingCheckUpdate":
        if self.is_checked_in is None and self.is_checked_out is None:
            raise ValueError("Provide is_checked_in or is_checked_out")
        return self


class BookingFilterParams(BaseSchema):
    search_key: Optional[str] = Field(default=None, description="Matches the customer name")
    status: Optional[BookingStatus] = None
    room_id: Optional[str] = None
    id: Optional[str] = None


class BookingResponse(BaseResponseSchema):
    customer_name: str
    mobile_number: Optional[str] = None
    email: str
    booking_originate: str
    clock_in: datetime
    clock_out: datetime
    status: BookingStatus
    note: Optional[str] = None
    room_id: str
    room: Optional[RoomSummary] = None
    is_checked_in: bool = False
    is_checked_out: bool = False
    checked_in_at: Optional[datetime] = None
    checked_out_at: Optional[datetime] = None


class AvailableRoomsResponse(BaseSchema):
    data: List[RoomResponse]
    count: int


class ChannelSyncResponse(BaseSchema):
    message: str
    count: int
    channels: Dict[str, int] = Field(default_factory=dict, description="Reservations fetched per channel")
