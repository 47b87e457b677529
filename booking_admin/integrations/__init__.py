from booking_admin.integrations.calendar_client import CalendarClient
from booking_admin.integrations.channel_feed import ChannelFeedClient, ChannelReservation

__all__ = ["CalendarClient", "ChannelFeedClient", "ChannelReservation"]
