"""
Activity log model recording every create, update and delete.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from booking_admin.models.base import BaseModel, enum_column
from booking_admin.models.enums import ActivityAction
from booking_admin.utils.datetime_utils import utcnow


class ActivityLog(BaseModel):
    __tablename__ = "activity_logs"

    action: Mapped[ActivityAction] = mapped_column(enum_column(ActivityAction, 30), nullable=False)
    entity: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    changed_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    modifications: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    __table_args__ = (
        Index("ix_activity_logs_entity_date", "entity", "date"),
    )
