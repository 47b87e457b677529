"""
User repository.
"""

from typing import List, Optional

from sqlalchemy import Select, func, or_
from sqlalchemy.orm import Session

from booking_admin.core.exceptions import UserNotFoundError
from booking_admin.models.role import Role
from booking_admin.models.user import User
from booking_admin.repositories.base_repository import BaseRepository
from booking_admin.schemas.user import UserFilterParams


class UserRepository(BaseRepository[User]):
    not_found_error = UserNotFoundError

    def __init__(self, db: Session):
        super().__init__(User, db)

    def find_by_username_or_email(self, identifier: str) -> Optional[User]:
        """Active lookup used by login; matches either column case-insensitively"""
        identifier = identifier.lower()
        stmt = self._base_query().where(
            or_(func.lower(User.username) == identifier, func.lower(User.email) == identifier)
        )
        return self.db.execute(stmt).scalars().first()

    def find_conflicting(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[str] = None,
    ) -> Optional[User]:
        """Any user, deleted or not, already holding the username or email"""
        conditions = []
        if username:
            conditions.append(func.lower(User.username) == username.lower())
        if email:
            conditions.append(func.lower(User.email) == email.lower())
        if not conditions:
            return None
        stmt = self._base_query(include_deleted=True).where(or_(*conditions))
        if exclude_id:
            stmt = stmt.where(User.id != exclude_id)
        return self.db.execute(stmt).scalars().first()

    def find_users_with_role(self, role_id: str) -> List[User]:
        stmt = self._base_query().where(User.roles.any(Role.id == role_id))
        return list(self.db.execute(stmt).scalars().all())

    def build_search(self, filters: UserFilterParams) -> Select:
        stmt = self._base_query()

        if filters.search_key:
            pattern = f"%{filters.search_key}%"
            stmt = stmt.where(
                or_(
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                    User.username.ilike(pattern),
                )
            )
        if filters.email:
            stmt = stmt.where(User.email.ilike(f"%{filters.email}%"))
        if filters.username:
            stmt = stmt.where(User.username.ilike(f"%{filters.username}%"))
        if filters.role_id:
            stmt = stmt.where(User.roles.any(Role.id == filters.role_id))

        return stmt.order_by(User.created_on.desc())
