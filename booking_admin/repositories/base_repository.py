"""
Base repository with standardized CRUD operations, flush/commit handling,
error mapping and activity logging.
"""

from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from booking_admin.config.logging import get_logger
from booking_admin.core.exceptions import (
    DuplicateEntryError,
    RepositoryError,
    ResourceNotFoundError,
)
from booking_admin.models.activity_log import ActivityLog
from booking_admin.models.base import AuditedModel, BaseModel
from booking_admin.models.enums import ActivityAction
from booking_admin.utils.datetime_utils import utcnow
from booking_admin.utils.modifications import detect_modifications

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)


class AuditContext:
    """Who performed a change, and from where."""

    def __init__(
        self,
        user_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ):
        self.user_id = user_id
        self.ip_address = ip_address
        self.metadata = metadata or {}
        self.timestamp: datetime = utcnow()


class BaseRepository(Generic[ModelType]):
    """
    Repository base with CRUD operations shared by every table.

    Writes flush inside the session and commit only when ``commit=True`` so a
    service can group several writes in one transaction. Every create, update
    and delete on an audited repository adds an ``ActivityLog`` row in the
    same transaction.
    """

    not_found_error: Type[ResourceNotFoundError] = ResourceNotFoundError
    record_activity: bool = True

    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db
        self._is_soft_delete = issubclass(model, AuditedModel)

    def _flush_or_commit(self, commit: bool, operation: str) -> None:
        try:
            if commit:
                self.db.commit()
            else:
                self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateEntryError(f"{self.model.__name__} already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{operation} on {self.model.__tablename__} failed: {e}", exc_info=True)
            raise RepositoryError(operation=operation, table=self.model.__tablename__) from e

    # ==================== Activity Log ====================

    def _record(
        self,
        action: ActivityAction,
        entity_id: Optional[str],
        modifications: List[Dict[str, Any]],
        audit_context: Optional[AuditContext],
    ) -> None:
        if not self.record_activity:
            return
        if audit_context:
            logger.debug(
                f"{action.value} {self.model.__tablename__}/{entity_id} by {audit_context.user_id}",
                extra={"ip_address": audit_context.ip_address, **audit_context.metadata},
            )
        self.db.add(
            ActivityLog(
                action=action,
                entity=self.model.__tablename__,
                entity_id=entity_id,
                changed_by=audit_context.user_id if audit_context else None,
                date=audit_context.timestamp if audit_context else utcnow(),
                modifications=modifications,
            )
        )

    # ==================== Create Operations ====================

    def create(
        self,
        entity: ModelType,
        audit_context: Optional[AuditContext] = None,
        commit: bool = True
    ) -> ModelType:
        """
        Persist a new entity.

        Raises:
            DuplicateEntryError: If a unique constraint is violated
            RepositoryError: On any other database failure
        """
        if audit_context and isinstance(entity, AuditedModel):
            entity.created_by = audit_context.user_id
            entity.changed_by = audit_context.user_id

        self.db.add(entity)
        self._flush_or_commit(False, "create")
        self._record(
            ActivityAction.ADD_DOCUMENT,
            entity.id,
            detect_modifications(entity.to_dict(), None),
            audit_context,
        )
        self._flush_or_commit(commit, "create")
        if commit:
            self.db.refresh(entity)

        logger.info(f"Created {self.model.__name__} with id: {entity.id}")
        return entity

    # ==================== Read Operations ====================

    def _base_query(self, include_deleted: bool = False) -> Select:
        stmt = select(self.model)
        if self._is_soft_delete and not include_deleted:
            stmt = stmt.where(self.model.is_deleted.is_(False))
        return stmt

    def find_by_id(self, id: str, include_deleted: bool = False) -> Optional[ModelType]:
        try:
            stmt = self._base_query(include_deleted).where(self.model.id == id)
            return self.db.execute(stmt).scalars().first()
        except SQLAlchemyError as e:
            raise RepositoryError(operation="find_by_id", table=self.model.__tablename__) from e

    def get_by_id(self, id: str, include_deleted: bool = False) -> ModelType:
        """
        Get entity by ID or raise the repository's not found error.
        """
        entity = self.find_by_id(id, include_deleted)
        if entity is None:
            raise self.not_found_error(id)
        return entity

    def find_by_ids(self, ids: Sequence[str]) -> List[ModelType]:
        if not ids:
            return []
        stmt = self._base_query().where(self.model.id.in_(list(ids)))
        return list(self.db.execute(stmt).scalars().all())

    def paginate(self, stmt: Select, offset: int, limit: Optional[int]) -> Tuple[List[ModelType], int]:
        """
        Run ``stmt`` for one page and count all matches.

        A ``limit`` of None returns every row.
        """
        try:
            count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
            total = self.db.execute(count_stmt).scalar_one()
            page_stmt = stmt.offset(offset)
            if limit is not None:
                page_stmt = page_stmt.limit(limit)
            items = list(self.db.execute(page_stmt).unique().scalars().all())
            return items, total
        except SQLAlchemyError as e:
            raise RepositoryError(operation="paginate", table=self.model.__tablename__) from e

    # ==================== Update Operations ====================

    def update(
        self,
        entity: ModelType,
        data: Dict[str, Any],
        audit_context: Optional[AuditContext] = None,
        commit: bool = True
    ) -> ModelType:
        """
        Apply ``data`` to ``entity`` and record the changed fields.
        """
        before = entity.to_dict()
        for field, value in data.items():
            setattr(entity, field, value)
        if isinstance(entity, AuditedModel):
            entity.changed_by = audit_context.user_id if audit_context else entity.changed_by
            entity.last_modified_on = utcnow()

        modifications = detect_modifications(entity.to_dict(), before)
        if modifications:
            self._record(ActivityAction.UPDATE_DOCUMENT, entity.id, modifications, audit_context)
        self._flush_or_commit(commit, "update")
        return entity

    # ==================== Delete Operations ====================

    def soft_delete(
        self,
        entity: ModelType,
        audit_context: Optional[AuditContext] = None,
        commit: bool = True
    ) -> ModelType:
        if not self._is_soft_delete:
            raise TypeError(f"{self.model.__name__} does not support soft delete")
        return self.update(
            entity,
            {"is_deleted": True, "is_active": False},
            audit_context=audit_context,
            commit=commit,
        )

    def hard_delete(
        self,
        entity: ModelType,
        audit_context: Optional[AuditContext] = None,
        commit: bool = True
    ) -> None:
        entity_id = entity.id
        self._record(
            ActivityAction.DELETE_DOCUMENT,
            entity_id,
            detect_modifications(None, entity.to_dict()),
            audit_context,
        )
        self.db.delete(entity)
        self._flush_or_commit(commit, "delete")
        logger.info(f"Deleted {self.model.__name__} with id: {entity_id}")
