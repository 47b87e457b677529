"""
Post-commit side effects of booking changes: guest emails and calendar events.

Runs from FastAPI background tasks. Failures are logged and never reach the
client; the stored booking is already committed.
"""

from typing import Callable, List

from booking_admin.config.logging import get_logger
from booking_admin.core.exceptions import ExternalServiceError
from booking_admin.integrations.calendar_client import CalendarClient
from booking_admin.models.enums import BookingStatus
from booking_admin.schemas.booking import BookingResponse
from booking_admin.services.booking_service import CHECK_IN, CHECK_OUT
from booking_admin.services.email_service import EmailService

logger = get_logger(__name__)


class BookingNotifier:

    def __init__(self, email: EmailService, calendar: CalendarClient):
        self.email = email
        self.calendar = calendar

    def _safe(self, action: str, booking_id: str, call: Callable[[], object]) -> bool:
        try:
            call()
            return True
        except ExternalServiceError as e:
            logger.error(
                f"{action} failed for booking {booking_id}: {e.message}",
                extra={"booking_id": booking_id, "action": action},
            )
            return False

    def booking_created(self, booking: BookingResponse) -> None:
        self._safe("confirmation email", booking.id, lambda: self.email.send_booking_confirmation(booking))
        self._safe("calendar create", booking.id, lambda: self.calendar.create_event(booking))

    def booking_updated(self, booking: BookingResponse, previous_status: BookingStatus) -> None:
        if booking.status == BookingStatus.CANCELED and previous_status != BookingStatus.CANCELED:
            self._safe("cancellation email", booking.id, lambda: self.email.send_booking_cancellation(booking))
        else:
            self._safe("update email", booking.id, lambda: self.email.send_booking_update(booking))
        self._safe("calendar update", booking.id, lambda: self.calendar.update_event(booking))

    def booking_checked(self, booking: BookingResponse, events: List[str]) -> None:
        if CHECK_IN in events:
            self._safe("check-in email", booking.id, lambda: self.email.send_check_in(booking))
        if CHECK_OUT in events:
            self._safe("check-out email", booking.id, lambda: self.email.send_check_out(booking))

    def booking_deleted(self, booking: BookingResponse) -> None:
        self._safe("cancellation email", booking.id, lambda: self.email.send_booking_cancellation(booking))
        self._safe("calendar delete", booking.id, lambda: self.calendar.delete_event(booking.id))
