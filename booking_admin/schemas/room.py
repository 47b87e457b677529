"""
Room request/response schemas.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, List, Optional

from pydantic import AfterValidator, BeforeValidator, Field

from booking_admin.models.enums import RoomStatus, RoomType
from booking_admin.schemas.common import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)


def _clean_strings(values: List[str]) -> List[str]:
    """Strip entries, drop blanks and duplicates while keeping order"""
    cleaned: List[str] = []
    for value in values:
        value = value.strip()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned


def _upper(value: Any) -> Any:
    return value.strip().upper() if isinstance(value, str) else value


def _lower(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


# Clients send room types and statuses in any case
RoomTypeInput = Annotated[RoomType, BeforeValidator(_upper)]
RoomStatusInput = Annotated[RoomStatus, BeforeValidator(_lower)]
StringSet = Annotated[List[str], AfterValidator(_clean_strings)]
Price = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


class RoomCreate(BaseCreateSchema):
    name: str = Field(..., min_length=1, max_length=100)
    room_number: str = Field(..., min_length=1, max_length=20)
    room_type: RoomTypeInput
    capacity: int = Field(..., ge=1)
    price_per_night: Price
    description: Optional[str] = None
    amenities: StringSet = Field(default_factory=list)
    images: StringSet = Field(default_factory=list)
    status: RoomStatusInput = RoomStatus.AVAILABLE


class RoomUpdate(BaseUpdateSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    room_number: Optional[str] = Field(default=None, min_length=1, max_length=20)
    room_type: Optional[RoomTypeInput] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    price_per_night: Optional[Price] = None
    description: Optional[str] = None
    amenities: Optional[StringSet] = None
    images: Optional[StringSet] = None
    status: Optional[RoomStatusInput] = None


class RoomStatusUpdate(BaseSchema):
    status: RoomStatusInput


class RoomFilterParams(BaseSchema):
    """Query filters for the room list."""

    search_key: Optional[str] = None
    room_type: Optional[RoomType] = None
    status: Optional[RoomStatus] = None
    capacity: Optional[int] = Field(default=None, ge=1, description="Minimum capacity")
    min_price: Optional[Decimal] = Field(default=None, ge=0)
    max_price: Optional[Decimal] = Field(default=None, ge=0)
    amenities: Optional[str] = Field(
        default=None,
        description="Comma separated amenities the room must all have",
    )

    @property
    def amenity_list(self) -> List[str]:
        if not self.amenities:
            return []
        return [item.strip() for item in self.amenities.split(",") if item.strip()]


class RoomSummary(BaseSchema):
    """Room details embedded in booking responses."""

    id: str
    name: str
    room_number: str
    room_type: RoomType
    price_per_night: Decimal


class RoomResponse(BaseResponseSchema):
    name: str
    room_number: str
    room_type: RoomType
    capacity: int
    price_per_night: Decimal
    description: Optional[str] = None
    amenities: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    status: RoomStatus
