from booking_admin.core.security.jwt_handler import JWTManager
from booking_admin.core.security.password_hasher import PasswordHasher, validate_password_policy

__all__ = ["JWTManager", "PasswordHasher", "validate_password_policy"]
