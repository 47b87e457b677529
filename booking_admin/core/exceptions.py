"""
Custom Exceptions for the Booking Administration Application

This module defines the exception hierarchy raised by repositories and
services. Every exception carries an HTTP status code and renders to the
JSON error body through the handlers in ``booking_admin.core.handlers``.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from booking_admin.core.constants import GENERIC_ERROR_MESSAGE


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Authentication & Authorization
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_INVALID = "TOKEN_INVALID"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Business logic errors
    ROOM_UNAVAILABLE = "ROOM_UNAVAILABLE"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    GUEST_NOT_CHECKED_IN = "GUEST_NOT_CHECKED_IN"
    BOOKING_CLOSED = "BOOKING_CLOSED"

    # Resource specific
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    ROLE_NOT_FOUND = "ROLE_NOT_FOUND"

    # External service errors
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    EMAIL_SERVICE_ERROR = "EMAIL_SERVICE_ERROR"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def messages(self) -> List[str]:
        """Flat list of human readable messages for the response body"""
        return [self.message]

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            },
            "message": self.messages,
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# Validation & Business Rule Exceptions
# ========================================

class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        status_code: int = 422
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, error_code, details, status_code)

    @property
    def messages(self) -> List[str]:
        field_errors = self.details.get("field_errors") or {}
        flattened = [f"{field}: {error}" for field, errors in field_errors.items() for error in errors]
        return flattened or [self.message]


class BusinessRuleError(BaseAppException):
    """Exception raised when a request violates a booking or room rule"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INVALID_REQUEST,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details, 400)


class RoomUnavailableError(BusinessRuleError):
    """Exception raised when the requested room is not free for the stay"""

    def __init__(
        self,
        message: str = "Selected room is not available for the chosen dates",
        room_id: Optional[str] = None
    ):
        details = {"room_id": room_id} if room_id else {}
        super().__init__(message, ErrorCode.ROOM_UNAVAILABLE, details)


class InvalidStatusTransitionError(BusinessRuleError):
    """Exception raised for an illegal booking status change"""

    def __init__(self, current_status: str, new_status: str):
        super().__init__(
            f"Cannot change booking status from {current_status} to {new_status}",
            ErrorCode.INVALID_STATUS_TRANSITION,
            {"current_status": current_status, "new_status": new_status},
        )


class DuplicateEntryError(BusinessRuleError):
    """Exception raised when trying to create a duplicate entry"""

    def __init__(self, message: str = "Entry already exists", field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, ErrorCode.DUPLICATE_ENTRY, details)


# ========================================
# Not Found Exceptions
# ========================================

class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    error_code_for_resource = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, self.error_code_for_resource, details, 404)


class RoomNotFoundError(ResourceNotFoundError):
    error_code_for_resource = ErrorCode.ROOM_NOT_FOUND

    def __init__(self, room_id: Optional[str] = None):
        super().__init__("Room", room_id)


class BookingNotFoundError(ResourceNotFoundError):
    error_code_for_resource = ErrorCode.BOOKING_NOT_FOUND

    def __init__(self, booking_id: Optional[str] = None):
        super().__init__("Booking", booking_id)


class UserNotFoundError(ResourceNotFoundError):
    error_code_for_resource = ErrorCode.USER_NOT_FOUND

    def __init__(self, user_id: Optional[str] = None):
        super().__init__("User", user_id)


class RoleNotFoundError(ResourceNotFoundError):
    error_code_for_resource = ErrorCode.ROLE_NOT_FOUND

    def __init__(self, role_id: Optional[str] = None):
        super().__init__("Role", role_id)


# ========================================
# Authentication & Authorization Exceptions
# ========================================

class AuthenticationError(BaseAppException):
    """Exception raised when authentication fails"""

    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: ErrorCode = ErrorCode.AUTHENTICATION_FAILED,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details, 401)


class InvalidCredentialsError(AuthenticationError):
    """Exception raised when a login does not match a user and password"""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, ErrorCode.INVALID_CREDENTIALS)


class AuthorizationError(BaseAppException):
    """Exception raised when authorization fails"""

    def __init__(
        self,
        message: str = "Access denied",
        required_permission: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.INSUFFICIENT_PERMISSIONS
    ):
        details = {"required_permission": required_permission} if required_permission else {}
        super().__init__(message, error_code, details, 403)


class TokenError(AuthenticationError):
    """Exception raised for token-related authentication errors"""

    def __init__(
        self,
        message: str = "Invalid token",
        error_code: ErrorCode = ErrorCode.TOKEN_INVALID,
        token_type: str = "access"
    ):
        details = {"token_type": token_type}
        super().__init__(message, error_code, details)


class TokenExpiredError(TokenError):
    """Exception raised when a token has expired"""

    def __init__(
        self,
        message: str = "Token has expired",
        token_type: str = "access"
    ):
        super().__init__(message, ErrorCode.TOKEN_EXPIRED, token_type)


class InvalidTokenError(TokenError):
    """Exception raised when token is invalid"""

    def __init__(
        self,
        message: str = "Invalid token",
        token_type: str = "access",
        reason: Optional[str] = None
    ):
        super().__init__(message, ErrorCode.TOKEN_INVALID, token_type)
        if reason:
            self.details["reason"] = reason


# ========================================
# Infrastructure Exceptions
# ========================================

class DatabaseError(BaseAppException):
    """Exception raised when database operations fail"""

    def __init__(
        self,
        message: str = GENERIC_ERROR_MESSAGE,
        operation: Optional[str] = None,
        table: Optional[str] = None
    ):
        details = {"operation": operation, "table": table}
        super().__init__(message, ErrorCode.DATABASE_ERROR, details, 500)


class RepositoryError(DatabaseError):
    """Raised by repositories when a query or write fails"""


class ExternalServiceError(BaseAppException):
    """Exception raised when an external integration call fails"""

    def __init__(
        self,
        service_name: str,
        message: str = "External service call failed",
        error_code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR
    ):
        super().__init__(message, error_code, {"service": service_name}, 502)


class EmailServiceError(ExternalServiceError):
    def __init__(self, message: str = "Email delivery failed"):
        super().__init__("email", message, ErrorCode.EMAIL_SERVICE_ERROR)
