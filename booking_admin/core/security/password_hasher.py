"""
Password hashing and verification utilities.

Provides password hashing using bcrypt with configurable rounds and the
password policy enforced when users are created or change their password.
"""

import logging
from typing import List

import bcrypt

from booking_admin.core.constants import (
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    PASSWORD_SPECIAL_CHARACTERS,
)

logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    Handle password hashing and verification using bcrypt.
    """

    DEFAULT_ROUNDS = 12
    MIN_ROUNDS = 4
    MAX_ROUNDS = 31

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        """
        Args:
            rounds: Number of bcrypt rounds (4-31, default 12)

        Raises:
            ValueError: If rounds is outside valid range
        """
        if not (self.MIN_ROUNDS <= rounds <= self.MAX_ROUNDS):
            raise ValueError(
                f"Rounds must be between {self.MIN_ROUNDS} and {self.MAX_ROUNDS}, got {rounds}"
            )
        self.rounds = rounds

    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("Password cannot be empty")

        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

    def verify(self, password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Returns False for malformed hashes instead of raising.
        """
        if not password or not hashed_password:
            return False

        try:
            return bcrypt.checkpw(password.encode('utf-8'), hashed_password.encode('utf-8'))
        except ValueError as e:
            logger.warning(f"Password verification failed on malformed hash: {e}")
            return False


def validate_password_policy(password: str) -> List[str]:
    """Return the list of policy violations, empty when the password is acceptable"""
    errors = []
    if not (PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH):
        errors.append(
            f"Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters"
        )
    if not any(ch.isupper() for ch in password):
        errors.append("Password must contain at least one uppercase letter")
    if not any(ch in PASSWORD_SPECIAL_CHARACTERS for ch in password):
        errors.append(
            f"Password must contain at least one special character ({PASSWORD_SPECIAL_CHARACTERS})"
        )
    return errors
