from booking_admin.services.activity_log_service import ActivityLogService
from booking_admin.services.auth_service import AuthService
from booking_admin.services.availability_service import AvailabilityService
from booking_admin.services.booking_notifier import BookingNotifier
from booking_admin.services.booking_service import BookingService
from booking_admin.services.channel_sync_service import ChannelSyncService
from booking_admin.services.email_service import EmailService
from booking_admin.services.role_service import RoleService
from booking_admin.services.room_service import RoomService
from booking_admin.services.room_status_service import RoomStatusService
from booking_admin.services.user_service import UserService

__all__ = [
    "ActivityLogService",
    "AuthService",
    "AvailabilityService",
    "BookingNotifier",
    "BookingService",
    "ChannelSyncService",
    "EmailService",
    "RoleService",
    "RoomService",
    "RoomStatusService",
    "UserService",
]
