"""
FastAPI dependencies: database session, current user, permission guards,
pagination and integration clients.

Example usage in a router:
    @router.get("", dependencies=[Depends(deps.require_permissions(Permission.VIEW_ROOM))])
    def list_rooms(db: Session = Depends(deps.get_db)):
        ...
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from booking_admin.config.logging import get_logger
from booking_admin.config.settings import settings
from booking_admin.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from booking_admin.core.exceptions import AuthorizationError
from booking_admin.core.pagination import normalize_pagination
from booking_admin.core.permissions import Permission, has_any_permission
from booking_admin.core.security import JWTManager, PasswordHasher
from booking_admin.db.session import get_db
from booking_admin.integrations.calendar_client import CalendarClient
from booking_admin.integrations.channel_feed import AGODA, BOOKING_COM, ChannelFeedClient
from booking_admin.models.user import User
from booking_admin.repositories.base_repository import AuditContext
from booking_admin.schemas.common import PaginationParams
from booking_admin.services.auth_service import AuthService
from booking_admin.services.booking_notifier import BookingNotifier
from booking_admin.services.channel_sync_service import ChannelSyncService
from booking_admin.services.email_service import EmailService

logger = get_logger(__name__)

# auto_error is off so a missing header goes through AuthenticationError (401)
bearer_scheme = HTTPBearer(auto_error=False)


# --- Security primitives --------------------------------------------------------

@lru_cache()
def get_jwt_manager() -> JWTManager:
    return JWTManager(
        secret_key=settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        access_token_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        refresh_token_expire_minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES,
    )


@lru_cache()
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)


def get_auth_service(
    db: Session = Depends(get_db),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AuthService:
    return AuthService(db, jwt_manager, hasher)


# --- Authentication & Authorization -------------------------------------------

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    token = credentials.credentials if credentials else None
    return auth_service.resolve_user(token)


class PermissionChecker:
    """
    Guard passing when the current user holds any of the listed permissions.
    ADMIN passes every guard.
    """

    def __init__(self, *permissions: Permission):
        self.permissions = [permission.value for permission in permissions]

    def __call__(self, current_user: User = Depends(get_current_user)) -> User:
        if not has_any_permission(current_user.permissions, self.permissions):
            logger.info(
                f"User {current_user.username} denied, needs one of {', '.join(self.permissions)}"
            )
            raise AuthorizationError(
                f"At least one of these permissions required: {', '.join(self.permissions)}",
                required_permission=self.permissions[0] if self.permissions else None,
            )
        return current_user


def require_permissions(*permissions: Permission) -> PermissionChecker:
    return PermissionChecker(*permissions)


def get_audit_context(request: Request, current_user: User = Depends(get_current_user)) -> AuditContext:
    return AuditContext(
        user_id=current_user.id,
        ip_address=request.client.host if request.client else None,
        metadata={"request_id": getattr(request.state, "request_id", None)},
    )


# --- Pagination ------------------------------------------------------------------

def get_pagination_params(
    page: int = Query(DEFAULT_PAGE, description="Page number (1-indexed)"),
    size: int = Query(DEFAULT_PAGE_SIZE, description=f"Items per page, at most {MAX_PAGE_SIZE}"),
) -> PaginationParams:
    return normalize_pagination(page, size)


# --- Integrations ----------------------------------------------------------------

def get_email_service() -> EmailService:
    return EmailService(settings)


def get_calendar_client() -> CalendarClient:
    return CalendarClient(
        base_url=settings.CALENDAR_SERVICE_URL,
        calendar_id=settings.CALENDAR_ID,
        location=settings.HOTEL_LOCATION,
        timeout=settings.INTEGRATION_TIMEOUT_SECONDS,
    )


def get_booking_notifier(
    email: EmailService = Depends(get_email_service),
    calendar: CalendarClient = Depends(get_calendar_client),
) -> BookingNotifier:
    return BookingNotifier(email, calendar)


def get_channel_sync_service() -> ChannelSyncService:
    return ChannelSyncService(
        [
            ChannelFeedClient(
                BOOKING_COM,
                settings.BOOKING_COM_FEED_URL,
                settings.BOOKING_COM_USERNAME,
                settings.BOOKING_COM_PASSWORD,
                timeout=settings.INTEGRATION_TIMEOUT_SECONDS,
            ),
            ChannelFeedClient(
                AGODA,
                settings.AGODA_FEED_URL,
                settings.AGODA_USERNAME,
                settings.AGODA_PASSWORD,
                timeout=settings.INTEGRATION_TIMEOUT_SECONDS,
            ),
        ]
    )


__all__ = [
    "get_db",
    "get_jwt_manager",
    "get_password_hasher",
    "get_auth_service",
    "get_current_user",
    "require_permissions",
    "get_audit_context",
    "get_pagination_params",
    "get_email_service",
    "get_calendar_client",
    "get_booking_notifier",
    "get_channel_sync_service",
]
