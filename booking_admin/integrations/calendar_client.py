"""
HTTP client for the hotel calendar service.

Each booking maps to one event whose id is derived from the booking id, so
the event can be updated or removed without storing anything locally.
"""

from typing import Any, Dict, Optional

import httpx

from booking_admin.config.logging import get_logger
from booking_admin.core.exceptions import ExternalServiceError
from booking_admin.schemas.booking import BookingResponse

logger = get_logger(__name__)

SERVICE_NAME = "calendar"


class CalendarClient:

    def __init__(
        self,
        base_url: Optional[str],
        calendar_id: str = "primary",
        location: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.calendar_id = calendar_id
        self.location = location
        self.timeout = timeout
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    @staticmethod
    def event_id_for(booking_id: str) -> str:
        return booking_id.replace("-", "").lower()

    def build_event(self, booking: BookingResponse) -> Dict[str, Any]:
        room = booking.room
        summary = f"Booking: {booking.customer_name}"
        if room:
            summary += f" - Room {room.room_number}"

        lines = [
            f"Guest: {booking.customer_name}",
            f"Email: {booking.email}",
            f"Phone: {booking.mobile_number or '-'}",
            f"Status: {booking.status.value}",
            f"Source: {booking.booking_originate}",
        ]
        if room:
            lines.append(f"Room: {room.name} ({room.room_type.value})")
        if booking.note:
            lines.append(f"Note: {booking.note}")

        return {
            "id": self.event_id_for(booking.id),
            "summary": summary,
            "description": "\n".join(lines),
            "start": {"dateTime": booking.clock_in.isoformat() + "Z", "timeZone": "UTC"},
            "end": {"dateTime": booking.clock_out.isoformat() + "Z", "timeZone": "UTC"},
            "location": self.location,
        }

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            with httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                return client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Calendar {method} {path} failed: {e}")
            raise ExternalServiceError(SERVICE_NAME, f"Calendar request failed: {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(
                SERVICE_NAME, f"Calendar service returned {response.status_code}"
            ) from e

    def _events_path(self, event_id: Optional[str] = None) -> str:
        path = f"/calendars/{self.calendar_id}/events"
        return f"{path}/{event_id}" if event_id else path

    def create_event(self, booking: BookingResponse) -> Optional[str]:
        """Create the booking's event. Returns the event id, or None when disabled"""
        if not self.enabled:
            return None
        event = self.build_event(booking)
        response = self._request("POST", self._events_path(), json=event)
        self._raise_for_status(response)
        logger.info(f"Calendar event {event['id']} created for booking {booking.id}")
        return event["id"]

    def update_event(self, booking: BookingResponse) -> Optional[str]:
        if not self.enabled:
            return None
        event = self.build_event(booking)
        response = self._request("PATCH", self._events_path(event["id"]), json=event)
        self._raise_for_status(response)
        logger.info(f"Calendar event {event['id']} updated for booking {booking.id}")
        return event["id"]

    def delete_event(self, booking_id: str) -> bool:
        """Remove the booking's event; an already missing event counts as removed"""
        if not self.enabled:
            return False
        event_id = self.event_id_for(booking_id)
        response = self._request("DELETE", self._events_path(event_id))
        if response.status_code in (404, 410):
            logger.info(f"Calendar event {event_id} already gone")
            return True
        self._raise_for_status(response)
        logger.info(f"Calendar event {event_id} deleted for booking {booking_id}")
        return True
