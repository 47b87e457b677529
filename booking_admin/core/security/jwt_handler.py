"""
JWT token management utilities.

Handles JWT token creation and validation for access and refresh tokens.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from booking_admin.core.exceptions import InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class JWTManager:
    """
    JWT token manager for authentication.

    Access and refresh tokens share the same signing key and differ by
    their ``token_type`` claim and lifetime.
    """

    DEFAULT_ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str,
        algorithm: str = DEFAULT_ALGORITHM,
        access_token_expire_minutes: int = 60,
        refresh_token_expire_minutes: int = 60 * 24 * 7,
    ):
        if not secret_key:
            raise ValueError("JWT secret key must not be empty")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expire_minutes = access_token_expire_minutes
        self.refresh_token_expire_minutes = refresh_token_expire_minutes

    @property
    def access_token_expires_in(self) -> int:
        """Access token lifetime in seconds"""
        return self.access_token_expire_minutes * 60

    def _encode(
        self,
        subject: str,
        token_type: str,
        lifetime: timedelta,
        additional_claims: Optional[Dict[str, Any]] = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": str(subject),
            "token_type": token_type,
            "iat": now,
            "exp": now + lifetime,
            "jti": secrets.token_hex(16),
        }
        if additional_claims:
            payload.update(additional_claims)

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.debug(f"{token_type.capitalize()} token created for {subject}")
        return token

    def create_access_token(
        self,
        subject: str,
        additional_claims: Optional[Dict[str, Any]] = None,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Create JWT access token.

        Args:
            subject: User identifier stored in the ``sub`` claim
            additional_claims: Extra claims such as username and permissions
            expires_delta: Custom expiration time

        Returns:
            Encoded JWT token
        """
        lifetime = expires_delta or timedelta(minutes=self.access_token_expire_minutes)
        return self._encode(subject, ACCESS_TOKEN, lifetime, additional_claims)

    def create_refresh_token(
        self,
        subject: str,
        additional_claims: Optional[Dict[str, Any]] = None,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        lifetime = expires_delta or timedelta(minutes=self.refresh_token_expire_minutes)
        return self._encode(subject, REFRESH_TOKEN, lifetime, additional_claims)

    def verify_token(self, token: str, expected_type: str = ACCESS_TOKEN) -> Dict[str, Any]:
        """
        Verify and decode JWT token.

        Raises:
            TokenExpiredError: If the token is past its ``exp``
            InvalidTokenError: If the signature, payload or token type is wrong
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError(
                "Refresh token expired" if expected_type == REFRESH_TOKEN else "Token has expired",
                token_type=expected_type,
            ) from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(
                "Invalid refresh token" if expected_type == REFRESH_TOKEN else "Invalid token",
                token_type=expected_type,
                reason=str(e),
            ) from e

        if payload.get("token_type") != expected_type or not payload.get("sub"):
            raise InvalidTokenError(
                "Invalid refresh token" if expected_type == REFRESH_TOKEN else "Invalid token",
                token_type=expected_type,
                reason="unexpected token type",
            )
        return payload
