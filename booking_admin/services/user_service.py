"""
Back-office user management.
"""

from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from booking_admin.config.logging import get_logger
from booking_admin.core.exceptions import BusinessRuleError, DuplicateEntryError, RoleNotFoundError, ValidationError
from booking_admin.core.security import PasswordHasher, validate_password_policy
from booking_admin.models.role import Role
from booking_admin.models.user import AuthCredential, User
from booking_admin.repositories.base_repository import AuditContext
from booking_admin.repositories.role_repository import RoleRepository
from booking_admin.repositories.user_repository import UserRepository
from booking_admin.schemas.common import PaginationParams
from booking_admin.schemas.user import UserCreate, UserFilterParams, UserUpdate
from booking_admin.services.base import BaseService
from booking_admin.utils.datetime_utils import utcnow

logger = get_logger(__name__)


class UserService(BaseService):

    def __init__(self, db: Session, hasher: PasswordHasher):
        super().__init__(db)
        self.users = UserRepository(db)
        self.roles = RoleRepository(db)
        self.hasher = hasher

    @staticmethod
    def _check_password(password: str) -> None:
        errors = validate_password_policy(password)
        if errors:
            raise ValidationError("Password does not meet the policy", field_errors={"password": errors})

    def _ensure_unique(
        self,
        username: Optional[str],
        email: Optional[str],
        exclude_id: Optional[str] = None,
    ) -> None:
        existing = self.users.find_conflicting(username=username, email=email, exclude_id=exclude_id)
        if existing is None:
            return
        if username and existing.username.lower() == username.lower():
            raise DuplicateEntryError("Username already exists", field="username")
        raise DuplicateEntryError("Email already exists", field="email")

    def _load_roles(self, role_ids: List[str]) -> List[Role]:
        unique_ids = list(dict.fromkeys(role_ids))
        roles = self.roles.find_by_ids(unique_ids)
        found = {role.id for role in roles}
        missing = [role_id for role_id in unique_ids if role_id not in found]
        if missing:
            raise RoleNotFoundError(missing[0])
        return roles

    def list_users(self, filters: UserFilterParams, params: PaginationParams) -> Tuple[List[User], int]:
        return self.users.paginate(self.users.build_search(filters), params.offset, params.size)

    def get_user(self, user_id: str) -> User:
        return self.users.get_by_id(user_id)

    def create_user(self, data: UserCreate, audit_context: Optional[AuditContext] = None) -> User:
        self._check_password(data.password)
        with self.transaction():
            self._ensure_unique(data.username, data.email)
            user = User(**data.model_dump(exclude={"password", "role_ids"}))
            user.roles = self._load_roles(data.role_ids)
            user.credential = AuthCredential(
                password_hash=self.hasher.hash(data.password),
                password_changed_at=utcnow(),
            )
            self.users.create(user, audit_context=audit_context, commit=False)

        logger.info(f"User {user.username} created")
        return user

    def update_user(
        self,
        user_id: str,
        data: UserUpdate,
        audit_context: Optional[AuditContext] = None,
    ) -> User:
        changes = data.model_dump(exclude_unset=True)
        password = changes.pop("password", None)
        role_ids = changes.pop("role_ids", None)
        changes = {
            field: value
            for field, value in changes.items()
            if value is not None or field in ("last_name", "mobile_number")
        }
        if password is not None:
            self._check_password(password)

        with self.transaction():
            user = self.users.get_by_id(user_id)
            username = changes.get("username")
            email = changes.get("email")
            if (username and username != user.username) or (email and email != user.email):
                self._ensure_unique(username, email, exclude_id=user.id)

            if role_ids is not None:
                user.roles = self._load_roles(role_ids)
            if password is not None:
                if user.credential is None:
                    user.credential = AuthCredential(password_hash=self.hasher.hash(password))
                else:
                    user.credential.password_hash = self.hasher.hash(password)
                user.credential.password_changed_at = utcnow()
                logger.info(f"Password changed for user {user.username}")

            self.users.update(user, changes, audit_context=audit_context, commit=False)

        return user

    def delete_user(self, user_id: str, audit_context: Optional[AuditContext] = None) -> None:
        """Soft delete; a user cannot delete their own account"""
        if audit_context and audit_context.user_id == user_id:
            raise BusinessRuleError("You cannot delete your own account")
        with self.transaction():
            user = self.users.get_by_id(user_id)
            self.users.soft_delete(user, audit_context=audit_context, commit=False)
        logger.info(f"User {user_id} deleted")
