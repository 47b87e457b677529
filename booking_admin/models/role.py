"""
Role model and the user/role association table.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from booking_admin.models.base import AuditedModel, Base

if TYPE_CHECKING:
    from booking_admin.models.user import User


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", String(36), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(AuditedModel):
    """Named set of permissions assigned to users."""

    __tablename__ = "roles"

    role: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    permissions: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    is_clone: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_phone_masked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    accepted_ips: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    users: Mapped[List["User"]] = relationship(secondary=user_roles, back_populates="roles")

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, role={self.role})>"
