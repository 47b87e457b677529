"""
Booking email rendering and delivery.
"""
import smtplib
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from booking_admin.config.settings import settings
from booking_admin.core.exceptions import EmailServiceError
from booking_admin.models.enums import BookingStatus
from booking_admin.schemas.booking import BookingResponse
from booking_admin.services.email_service import STATUS_BANNERS, EmailService


@pytest.fixture
def booking() -> BookingResponse:
    return BookingResponse.model_validate(
        {
            "id": "0b7e4c2a-91d3-4f6e-8a1b-55aa12cd34ef",
            "created_on": datetime(2024, 1, 10, 9, 0),
            "last_modified_on": datetime(2024, 1, 10, 9, 0),
            "customer_name": "Jane <Doe>",
            "email": "jane@example.com",
            "booking_originate": "direct",
            "clock_in": datetime(2024, 1, 15, 14, 0),
            "clock_out": datetime(2024, 1, 17, 11, 0),
            "status": "confirmed",
            "room_id": "room-1",
            "room": {
                "id": "room-1",
                "name": "Garden View",
                "room_number": "R101",
                "room_type": "DOUBLE",
                "price_per_night": "120.00",
            },
        }
    )


@pytest.fixture
def smtp_settings():
    return settings.model_copy(
        update={
            "SMTP_HOST": "smtp.test",
            "SMTP_PORT": 2525,
            "SMTP_USER": "mailer",
            "SMTP_PASSWORD": "pw",
            "EMAIL_FROM_NAME": "Seaside Hotel",
        }
    )


class TestRendering:

    def test_booking_context(self, booking):
        context = EmailService(settings)._booking_context(booking)

        assert context["reference"] == "12CD34EF"
        assert context["nights"] == 2
        assert float(context["total_price"]) == 240.0
        assert context["banner"] == STATUS_BANNERS[BookingStatus.CONFIRMED]

    def test_confirmation_template(self, booking):
        service = EmailService(settings)

        html = service.render("booking_confirmation.html", service._booking_context(booking))

        assert "Booking Confirmed" in html
        assert "#4CAF50" in html
        assert "#12CD34EF" in html
        assert "Garden View (R101, DOUBLE)" in html
        assert "240.00" in html
        assert "Jane &lt;Doe&gt;" in html

    def test_cancellation_uses_canceled_banner(self, booking):
        service = EmailService(settings)

        html = service.render(
            "booking_cancellation.html", service._booking_context(booking, BookingStatus.CANCELED)
        )

        assert "#F44336" in html

    @pytest.mark.parametrize(
        "template",
        ["booking_update.html", "check_in.html", "check_out.html"],
    )
    def test_templates_render(self, booking, template):
        service = EmailService(settings)

        assert booking.customer_name.split()[0] in service.render(template, service._booking_context(booking))

    def test_missing_template(self, booking):
        with pytest.raises(EmailServiceError):
            EmailService(settings).render("nope.html", {})


class TestSending:

    def test_disabled_without_host(self, booking):
        service = EmailService(settings.model_copy(update={"SMTP_HOST": None}))

        assert service.enabled is False
        assert service.send_booking_confirmation(booking) is False

    def test_send_over_smtp(self, booking, smtp_settings):
        with patch("booking_admin.services.email_service.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value

            assert EmailService(smtp_settings).send_check_in(booking) is True

        smtp_cls.assert_called_once_with("smtp.test", 2525, timeout=smtp_settings.INTEGRATION_TIMEOUT_SECONDS)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "pw")
        message = server.send_message.call_args[0][0]
        assert message["To"] == "jane@example.com"
        assert message["Subject"] == "Welcome - Seaside Hotel Booking #12CD34EF"

    def test_smtp_failure_raises(self, booking, smtp_settings):
        with patch("booking_admin.services.email_service.smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.__enter__.return_value.send_message = MagicMock(
                side_effect=smtplib.SMTPException("refused")
            )

            with pytest.raises(EmailServiceError):
                EmailService(smtp_settings).send_booking_update(booking)
