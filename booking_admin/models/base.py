"""
Base model configuration for SQLAlchemy ORM.

Provides the declarative base and the abstract models every table builds on:
``BaseModel`` with the UUID primary key and ``AuditedModel`` with the audit
columns shared by administrative records.
"""

import enum
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Type
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, String
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from booking_admin.utils.datetime_utils import utcnow

Base = declarative_base()


def enum_column(enum_cls: Type[enum.Enum], length: int = 20) -> SAEnum:
    """Portable enum column storing the member values as strings"""
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=length,
        validate_strings=True,
        values_callable=lambda members: [member.value for member in members],
    )


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    return value


class BaseModel(Base):
    """Abstract base model with the UUID primary key and dict conversion."""

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
        nullable=False,
    )

    def to_dict(self, exclude: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Convert the column values to a JSON friendly dictionary.

        Args:
            exclude: List of column names to leave out
        """
        exclude = exclude or []
        return {
            column.name: _serialize(getattr(self, column.key))
            for column in self.__table__.columns
            if column.name not in exclude
        }

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"


class AuditedModel(BaseModel):
    """Abstract model carrying creation/modification tracking and soft delete."""

    __abstract__ = True

    created_on: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    last_modified_on: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )
    created_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    changed_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
