"""Application wide constants."""
from __future__ import annotations

# Pagination
DEFAULT_PAGE: int = 1
DEFAULT_PAGE_SIZE: int = 20
MAX_PAGE_SIZE: int = 100

# Bookings
DEFAULT_BOOKING_ORIGIN: str = "Direct"

# Password policy
PASSWORD_MIN_LENGTH: int = 6
PASSWORD_MAX_LENGTH: int = 20
PASSWORD_SPECIAL_CHARACTERS: str = "?@#$%&!_-"

# Roles
ADMIN_ROLE_NAME: str = "Admin"

# Generic client facing message for unexpected failures
GENERIC_ERROR_MESSAGE: str = "Something went wrong"
