"""
User and credential models.
"""

from datetime import datetime
from typing import List, Optional, Set

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from booking_admin.models.base import AuditedModel, BaseModel
from booking_admin.models.role import Role, user_roles


class User(AuditedModel):
    """Back-office user. Credentials are stored separately in ``AuthCredential``."""

    __tablename__ = "users"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    mobile_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    roles: Mapped[List[Role]] = relationship(
        secondary=user_roles, back_populates="users", lazy="selectin"
    )
    credential: Mapped[Optional["AuthCredential"]] = relationship(
        back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def active_roles(self) -> List[Role]:
        return [role for role in self.roles if not role.is_deleted]

    @property
    def permissions(self) -> Set[str]:
        """Union of the permissions of every active role"""
        granted: Set[str] = set()
        for role in self.active_roles:
            granted.update(role.permissions or [])
        return granted

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"


class AuthCredential(BaseModel):
    """Password hash for a user."""

    __tablename__ = "auth_credentials"

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    password_changed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    user: Mapped[User] = relationship(back_populates="credential")
