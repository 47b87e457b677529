"""
Activity log endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from booking_admin.api import deps
from booking_admin.core.pagination import build_list_response
from booking_admin.core.permissions import Permission
from booking_admin.models.enums import ActivityAction
from booking_admin.schemas.activity_log import ActivityLogFilterParams, ActivityLogResponse
from booking_admin.schemas.common import ListResponse, PaginationParams
from booking_admin.services.activity_log_service import ActivityLogService

router = APIRouter(prefix="/logs", tags=["Activity Logs"])


@router.get(
    "",
    response_model=ListResponse[ActivityLogResponse],
    dependencies=[Depends(deps.require_permissions(Permission.VIEW_LOGS))],
)
def list_logs(
    entity: Optional[str] = Query(None, description="Table name, e.g. bookings"),
    entity_id: Optional[str] = Query(None),
    action: Optional[ActivityAction] = Query(None),
    changed_by: Optional[str] = Query(None),
    params: PaginationParams = Depends(deps.get_pagination_params),
    db: Session = Depends(deps.get_db),
):
    filters = ActivityLogFilterParams(
        entity=entity, entity_id=entity_id, action=action, changed_by=changed_by
    )
    items, total = ActivityLogService(db).list_logs(filters, params)
    return build_list_response(
        items=items, total=total, params=params, mapper=ActivityLogResponse.model_validate
    )
