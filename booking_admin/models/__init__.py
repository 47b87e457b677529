from booking_admin.models.activity_log import ActivityLog
from booking_admin.models.base import AuditedModel, Base, BaseModel
from booking_admin.models.booking import Booking
from booking_admin.models.enums import ActivityAction, BookingStatus, RoomStatus, RoomType
from booking_admin.models.role import Role, user_roles
from booking_admin.models.room import Room
from booking_admin.models.user import AuthCredential, User

__all__ = [
    "ActivityAction",
    "ActivityLog",
    "AuditedModel",
    "AuthCredential",
    "Base",
    "BaseModel",
    "Booking",
    "BookingStatus",
    "Role",
    "Room",
    "RoomStatus",
    "RoomType",
    "User",
    "user_roles",
]
