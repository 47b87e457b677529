"""
Reservation feeds from channel managers (Booking.com, Agoda).

Each channel exposes a JSON list of reservations behind basic auth. Entries
are mapped onto booking-shaped ``ChannelReservation`` records.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from booking_admin.config.logging import get_logger
from booking_admin.core.exceptions import ExternalServiceError
from booking_admin.models.enums import BookingStatus
from booking_admin.utils.datetime_utils import to_naive_utc

logger = get_logger(__name__)

BOOKING_COM = "booking.com"
AGODA = "agoda"

# query parameter names for the arrival date window
DATE_PARAMS: Dict[str, Tuple[str, str]] = {
    BOOKING_COM: ("arrival_date_from", "arrival_date_to"),
    AGODA: ("checkInDateFrom", "checkInDateTo"),
}

STATUS_MAP = {
    "confirmed": BookingStatus.CONFIRMED,
    "ok": BookingStatus.CONFIRMED,
    "new": BookingStatus.CONFIRMED,
    "cancelled": BookingStatus.CANCELED,
    "canceled": BookingStatus.CANCELED,
    "pending": BookingStatus.PENDING,
    "on request": BookingStatus.PENDING,
    "completed": BookingStatus.COMPLETED,
    "checked_out": BookingStatus.COMPLETED,
}


def map_channel_status(value: Optional[str]) -> BookingStatus:
    """Unknown or missing channel statuses are treated as pending"""
    return STATUS_MAP.get((value or "").strip().lower(), BookingStatus.PENDING)


def _parse_stay(value: Any) -> datetime:
    """Feed dates arrive as ISO dates or datetimes, optionally with a Z suffix"""
    if isinstance(value, str):
        value = value.strip()
        if len(value) == 10:
            value = date.fromisoformat(value)
        else:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value is None:
        raise ValueError("missing stay date")
    return to_naive_utc(value)


def _first(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return value
    return default


class ChannelReservation(BaseModel):
    """A reservation pulled from a channel feed, shaped like a booking."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str
    source: str
    customer_name: str = ""
    mobile_number: str = ""
    email: str = ""
    clock_in: datetime
    clock_out: datetime
    status: BookingStatus = BookingStatus.PENDING
    note: str = ""
    room_type: str = ""
    adults: int = 0
    children: int = 0
    total_price: Decimal = Decimal("0")
    currency: str = ""

    @classmethod
    def from_feed(cls, item: Dict[str, Any], source: str) -> "ChannelReservation":
        guest = item.get("guest") or {}
        guests = _first(item, "guests", "number_of_guests", default={})
        price = item.get("price") or {}
        if not isinstance(price, dict):
            price = {"total": price}

        name = " ".join(
            part
            for part in (
                _first(guest, "firstName", "first_name", default=""),
                _first(guest, "lastName", "last_name", default=""),
            )
            if part
        )
        return cls(
            id=str(item["id"]),
            source=source,
            customer_name=name or _first(item, "guest_name", "customer_name", default=""),
            mobile_number=_first(guest, "phoneNumber", "telephone", default=""),
            email=_first(guest, "email", default=""),
            clock_in=_parse_stay(_first(item, "checkInDate", "arrival_date", "clock_in")),
            clock_out=_parse_stay(_first(item, "checkOutDate", "departure_date", "clock_out")),
            status=map_channel_status(item.get("status")),
            note=_first(item, "specialRequests", "notes", default=""),
            room_type=_first(item, "roomType", "room_type", default=""),
            adults=int(_first(guests, "adults", default=0)),
            children=int(_first(guests, "children", default=0)),
            total_price=Decimal(str(_first(price, "total", "value", default="0"))),
            currency=_first(price, "currency", default=""),
        )


class ChannelFeedClient:
    """Pulls reservations for an arrival window from one channel."""

    def __init__(
        self,
        channel: str,
        url: Optional[str],
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.channel = channel
        self.url = url
        self.auth = (username, password) if username and password else None
        self.timeout = timeout
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def fetch_reservations(self, from_date: date, to_date: date) -> List[ChannelReservation]:
        """
        Fetch reservations arriving between ``from_date`` and ``to_date``.

        Entries that cannot be mapped are logged and skipped.

        Raises:
            ExternalServiceError: If the feed cannot be reached or returns an error
        """
        if not self.enabled:
            return []

        from_param, to_param = DATE_PARAMS.get(self.channel, ("from", "to"))
        params = {from_param: from_date.isoformat(), to_param: to_date.isoformat()}
        logger.info(f"Fetching {self.channel} reservations from {from_date} to {to_date}")

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport, auth=self.auth) as client:
                response = client.get(self.url, params=params, headers={"Accept": "application/json"})
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"{self.channel} feed returned {e.response.status_code}")
            raise ExternalServiceError(
                self.channel, f"{self.channel} feed returned {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching reservations from {self.channel}: {e}")
            raise ExternalServiceError(self.channel, f"{self.channel} feed request failed: {e}") from e

        items = payload.get("reservations") if isinstance(payload, dict) else payload
        if items is None:
            items = []
        if not isinstance(items, list):
            logger.error(f"{self.channel} feed returned {type(items).__name__} instead of a list")
            raise ExternalServiceError(self.channel, f"{self.channel} feed returned an unexpected payload")

        reservations = []
        for item in items:
            if not isinstance(item, dict):
                logger.warning(f"Skipping malformed {self.channel} reservation: {item!r}")
                continue
            try:
                reservations.append(ChannelReservation.from_feed(item, self.channel))
            except (AttributeError, KeyError, TypeError, ValueError, ValidationError) as e:
                logger.warning(f"Skipping malformed {self.channel} reservation: {e}")

        logger.info(f"Retrieved {len(reservations)} reservations from {self.channel}")
        return reservations
