"""
Activity log repository. Logs are written by the other repositories;
this one only reads them.
"""

from sqlalchemy import Select
from sqlalchemy.orm import Session

from booking_admin.models.activity_log import ActivityLog
from booking_admin.repositories.base_repository import BaseRepository
from booking_admin.schemas.activity_log import ActivityLogFilterParams


class ActivityLogRepository(BaseRepository[ActivityLog]):
    record_activity = False

    def __init__(self, db: Session):
        super().__init__(ActivityLog, db)

    def build_search(self, filters: ActivityLogFilterParams) -> Select:
        stmt = self._base_query()
        if filters.entity:
            stmt = stmt.where(ActivityLog.entity == filters.entity)
        if filters.entity_id:
            stmt = stmt.where(ActivityLog.entity_id == filters.entity_id)
        if filters.action:
            stmt = stmt.where(ActivityLog.action == filters.action)
        if filters.changed_by:
            stmt = stmt.where(ActivityLog.changed_by == filters.changed_by)
        return stmt.order_by(ActivityLog.date.desc())
