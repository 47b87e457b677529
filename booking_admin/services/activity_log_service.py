"""
Read access to the activity log.
"""

from typing import List, Tuple

from sqlalchemy.orm import Session

from booking_admin.models.activity_log import ActivityLog
from booking_admin.repositories.activity_log_repository import ActivityLogRepository
from booking_admin.schemas.activity_log import ActivityLogFilterParams
from booking_admin.schemas.common import PaginationParams
from booking_admin.services.base import BaseService


class ActivityLogService(BaseService):

    def __init__(self, db: Session):
        super().__init__(db)
        self.logs = ActivityLogRepository(db)

    def list_logs(self, filters: ActivityLogFilterParams, params: PaginationParams) -> Tuple[List[ActivityLog], int]:
        return self.logs.paginate(self.logs.build_search(filters), params.offset, params.size)
