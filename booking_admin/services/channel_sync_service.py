"""
Pulls reservations from every configured channel feed.
"""

from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

from booking_admin.config.logging import get_logger
from booking_admin.core.exceptions import BusinessRuleError, ErrorCode, ExternalServiceError
from booking_admin.integrations.channel_feed import ChannelFeedClient, ChannelReservation
from booking_admin.schemas.booking import ChannelSyncResponse
from booking_admin.utils.datetime_utils import intervals_overlap, to_naive_utc, utcnow

logger = get_logger(__name__)

DEFAULT_SYNC_DAYS = 30
SYNC_MESSAGE = "Bookings synced successfully"


class ChannelSyncService:
    """
    Fan out to each channel and count the reservations whose stay falls in
    the requested window. A failing channel is logged and counts as zero.
    """

    def __init__(self, clients: List[ChannelFeedClient]):
        self.clients = clients

    @staticmethod
    def default_window() -> Tuple[date, date]:
        today = utcnow().date()
        return today, today + timedelta(days=DEFAULT_SYNC_DAYS)

    def _fetch(self, client: ChannelFeedClient, from_date: date, to_date: date) -> List[ChannelReservation]:
        try:
            return client.fetch_reservations(from_date, to_date)
        except ExternalServiceError as e:
            logger.error(f"Channel {client.channel} sync failed: {e.message}")
            return []

    def sync(self, from_date: Optional[date] = None, to_date: Optional[date] = None) -> ChannelSyncResponse:
        default_from, default_to = self.default_window()
        from_date = from_date or default_from
        to_date = to_date or default_to
        if from_date >= to_date:
            raise BusinessRuleError(
                "fromDate must be before toDate",
                ErrorCode.INVALID_DATE_RANGE,
                {"from_date": from_date.isoformat(), "to_date": to_date.isoformat()},
            )

        window_start = to_naive_utc(from_date)
        # the end date is inclusive
        window_end = to_naive_utc(to_date + timedelta(days=1))

        channels: Dict[str, int] = {}
        for client in self.clients:
            if not client.enabled:
                continue
            reservations = [
                reservation
                for reservation in self._fetch(client, from_date, to_date)
                if intervals_overlap(reservation.clock_in, reservation.clock_out, window_start, window_end)
            ]
            channels[client.channel] = len(reservations)

        total = sum(channels.values())
        logger.info(f"Synced {total} bookings from external services")
        return ChannelSyncResponse(message=SYNC_MESSAGE, count=total, channels=channels)
