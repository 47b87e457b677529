"""
Guest email notifications.

Bodies are rendered from the Jinja2 templates in ``templates/email`` and sent
over SMTP. Sending is disabled when no SMTP host is configured.
"""

import math
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, TemplateError

from booking_admin.config.logging import get_logger
from booking_admin.config.settings import Settings, settings
from booking_admin.core.exceptions import EmailServiceError
from booking_admin.models.enums import BookingStatus
from booking_admin.schemas.booking import BookingResponse

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"

STATUS_BANNERS: Dict[BookingStatus, Dict[str, str]] = {
    BookingStatus.PENDING: {"text": "Booking Pending", "color": "#FFC107"},
    BookingStatus.CONFIRMED: {"text": "Booking Confirmed", "color": "#4CAF50"},
    BookingStatus.COMPLETED: {"text": "Stay Completed", "color": "#2196F3"},
    BookingStatus.CANCELED: {"text": "Booking Canceled", "color": "#F44336"},
}


class EmailService:
    """Render and send booking emails"""

    def __init__(self, config: Settings = settings, templates_dir: Path = TEMPLATES_DIR):
        self.config = config
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=True,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.config.SMTP_HOST)

    def render(self, template_name: str, variables: Dict[str, Any]) -> str:
        try:
            return self.env.get_template(template_name).render(**variables)
        except TemplateError as e:
            raise EmailServiceError(f"Failed to render template {template_name}: {e}") from e

    def send(self, to: str, subject: str, body_html: str) -> bool:
        """
        Send one HTML email.

        Returns False without connecting when email is disabled.

        Raises:
            EmailServiceError: If the SMTP exchange fails
        """
        if not self.enabled:
            logger.debug(f"Email disabled, skipping '{subject}' to {to}")
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.config.EMAIL_FROM_NAME, self.config.EMAIL_FROM))
        msg["To"] = to
        msg.attach(MIMEText(body_html, "html"))

        try:
            with smtplib.SMTP(
                self.config.SMTP_HOST,
                self.config.SMTP_PORT,
                timeout=self.config.INTEGRATION_TIMEOUT_SECONDS,
            ) as server:
                if self.config.SMTP_USE_TLS:
                    server.starttls()
                if self.config.SMTP_USER and self.config.SMTP_PASSWORD:
                    server.login(self.config.SMTP_USER, self.config.SMTP_PASSWORD)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to}: {e}")
            raise EmailServiceError(f"Failed to send email: {e}") from e

        logger.info(f"Email '{subject}' sent to {to}")
        return True

    # ==================== Booking emails ====================

    def _booking_context(
        self, booking: BookingResponse, status: Optional[BookingStatus] = None
    ) -> Dict[str, Any]:
        nights = max(1, math.ceil((booking.clock_out - booking.clock_in).total_seconds() / 86400))
        total_price = booking.room.price_per_night * nights if booking.room else None
        return {
            "booking": booking,
            "reference": booking.id.replace("-", "")[-8:].upper(),
            "hotel_name": self.config.EMAIL_FROM_NAME,
            "nights": nights,
            "total_price": total_price,
            "banner": STATUS_BANNERS[status or booking.status],
        }

    def _send_booking(
        self,
        booking: BookingResponse,
        template_name: str,
        title: str,
        status: Optional[BookingStatus] = None,
    ) -> bool:
        context = self._booking_context(booking, status)
        subject = f"{title} - {context['hotel_name']} Booking #{context['reference']}"
        return self.send(booking.email, subject, self.render(template_name, context))

    def send_booking_confirmation(self, booking: BookingResponse) -> bool:
        return self._send_booking(
            booking, "booking_confirmation.html", STATUS_BANNERS[booking.status]["text"]
        )

    def send_booking_update(self, booking: BookingResponse) -> bool:
        return self._send_booking(booking, "booking_update.html", "Booking Updated")

    def send_booking_cancellation(self, booking: BookingResponse) -> bool:
        return self._send_booking(
            booking, "booking_cancellation.html", "Booking Canceled", BookingStatus.CANCELED
        )

    def send_check_in(self, booking: BookingResponse) -> bool:
        return self._send_booking(booking, "check_in.html", "Welcome")

    def send_check_out(self, booking: BookingResponse) -> bool:
        return self._send_booking(booking, "check_out.html", "Thank You For Staying")
