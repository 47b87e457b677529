from booking_admin.repositories.activity_log_repository import ActivityLogRepository
from booking_admin.repositories.base_repository import AuditContext, BaseRepository
from booking_admin.repositories.booking_repository import BookingRepository
from booking_admin.repositories.role_repository import RoleRepository
from booking_admin.repositories.room_repository import RoomRepository
from booking_admin.repositories.user_repository import UserRepository

__all__ = [
    "ActivityLogRepository",
    "AuditContext",
    "BaseRepository",
    "BookingRepository",
    "RoleRepository",
    "RoomRepository",
    "UserRepository",
]
