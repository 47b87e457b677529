"""
Role repository.
"""

from typing import Optional

from sqlalchemy import Select, func, or_
from sqlalchemy.orm import Session

from booking_admin.core.exceptions import RoleNotFoundError
from booking_admin.models.role import Role
from booking_admin.repositories.base_repository import BaseRepository


class RoleRepository(BaseRepository[Role]):
    not_found_error = RoleNotFoundError

    def __init__(self, db: Session):
        super().__init__(Role, db)

    def find_by_name(self, name: str, exclude_id: Optional[str] = None) -> Optional[Role]:
        stmt = self._base_query().where(func.lower(Role.role) == name.strip().lower())
        if exclude_id:
            stmt = stmt.where(Role.id != exclude_id)
        return self.db.execute(stmt).scalars().first()

    def build_search(self, search_key: Optional[str] = None) -> Select:
        stmt = self._base_query()
        if search_key:
            pattern = f"%{search_key}%"
            stmt = stmt.where(or_(Role.role.ilike(pattern), Role.description.ilike(pattern)))
        return stmt.order_by(Role.level, Role.role)
