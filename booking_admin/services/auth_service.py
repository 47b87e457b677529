"""
Login, token refresh and bearer token resolution.
"""

from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from booking_admin.config.logging import get_logger
from booking_admin.core.exceptions import AuthenticationError, InvalidCredentialsError, InvalidTokenError
from booking_admin.core.security import JWTManager, PasswordHasher
from booking_admin.core.security.jwt_handler import ACCESS_TOKEN, REFRESH_TOKEN
from booking_admin.models.user import User
from booking_admin.repositories.user_repository import UserRepository
from booking_admin.schemas.auth import LoginRequest, TokenResponse
from booking_admin.schemas.user import UserResponse
from booking_admin.services.base import BaseService
from booking_admin.utils.datetime_utils import utcnow

logger = get_logger(__name__)


class AuthService(BaseService):

    def __init__(self, db: Session, jwt_manager: JWTManager, hasher: PasswordHasher):
        super().__init__(db)
        self.users = UserRepository(db)
        self.jwt = jwt_manager
        self.hasher = hasher

    def _claims(self, user: User) -> Dict[str, Any]:
        return {"username": user.username, "permissions": sorted(user.permissions)}

    def _issue_tokens(self, user: User) -> TokenResponse:
        claims = self._claims(user)
        return TokenResponse(
            access_token=self.jwt.create_access_token(user.id, claims),
            refresh_token=self.jwt.create_refresh_token(user.id, claims),
            expires_in=self.jwt.access_token_expires_in,
            user=UserResponse.model_validate(user),
        )

    def login(self, data: LoginRequest) -> TokenResponse:
        """
        Authenticate by username or email.

        Raises:
            InvalidCredentialsError: Unknown user, wrong password or inactive account
        """
        user = self.users.find_by_username_or_email(data.identifier)
        credential = user.credential if user else None
        if (
            user is None
            or credential is None
            or not user.is_active
            or not self.hasher.verify(data.password, credential.password_hash)
        ):
            logger.info(f"Failed login for '{data.identifier}'")
            raise InvalidCredentialsError()

        # not audited; logging in is not a change to the user record
        user.last_login = utcnow()
        self.db.commit()

        logger.info(f"User {user.username} logged in")
        return self._issue_tokens(user)

    def refresh(self, refresh_token: str) -> TokenResponse:
        payload = self.jwt.verify_token(refresh_token, expected_type=REFRESH_TOKEN)
        user = self._active_user(payload["sub"], REFRESH_TOKEN)
        return self._issue_tokens(user)

    def resolve_user(self, token: Optional[str]) -> User:
        """
        Map a bearer access token to its active user.

        Raises:
            AuthenticationError: No token, or the user is gone or deactivated
            TokenError: The token is expired or invalid
        """
        if not token:
            raise AuthenticationError("Not authenticated")
        payload = self.jwt.verify_token(token, expected_type=ACCESS_TOKEN)
        return self._active_user(payload["sub"], ACCESS_TOKEN)

    def _active_user(self, user_id: str, token_type: str) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise InvalidTokenError(
                "Invalid refresh token" if token_type == REFRESH_TOKEN else "Invalid token",
                token_type=token_type,
                reason="user not found",
            )
        if not user.is_active:
            raise AuthenticationError("User account is inactive")
        return user
