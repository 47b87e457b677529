"""
Activity log schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from booking_admin.models.enums import ActivityAction
from booking_admin.schemas.common import BaseSchema


class Modification(BaseSchema):
    field_name: str
    old_value: Any = None
    new_value: Any = None


class ActivityLogFilterParams(BaseSchema):
    entity: Optional[str] = None
    entity_id: Optional[str] = None
    action: Optional[ActivityAction] = None
    changed_by: Optional[str] = None


class ActivityLogResponse(BaseSchema):
    id: str
    action: ActivityAction
    entity: str
    entity_id: Optional[str] = None
    changed_by: Optional[str] = None
    date: datetime
    modifications: List[Modification] = Field(default_factory=list)
    index: Optional[int] = None
