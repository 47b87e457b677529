"""
Role management and the permission catalogue.
"""

from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from booking_admin.config.logging import get_logger
from booking_admin.core.constants import ADMIN_ROLE_NAME
from booking_admin.core.exceptions import BusinessRuleError, DuplicateEntryError, RoleNotFoundError
from booking_admin.core.permissions import list_permissions
from booking_admin.models.role import Role
from booking_admin.repositories.base_repository import AuditContext
from booking_admin.repositories.role_repository import RoleRepository
from booking_admin.repositories.user_repository import UserRepository
from booking_admin.schemas.common import PaginationParams
from booking_admin.schemas.role import RoleCreate, RoleDelete, RoleUpdate
from booking_admin.services.base import BaseService

logger = get_logger(__name__)


class RoleService(BaseService):

    def __init__(self, db: Session):
        super().__init__(db)
        self.roles = RoleRepository(db)
        self.users = UserRepository(db)

    def _ensure_unique(self, name: str, exclude_id: Optional[str] = None) -> None:
        if self.roles.find_by_name(name, exclude_id=exclude_id):
            raise DuplicateEntryError("Role already exists", field="role")

    def list_roles(self, search_key: Optional[str], params: PaginationParams) -> Tuple[List[Role], int]:
        return self.roles.paginate(self.roles.build_search(search_key), params.offset, params.size)

    def get_role(self, role_id: str) -> Role:
        return self.roles.get_by_id(role_id)

    @staticmethod
    def get_permissions(search_key: Optional[str] = None) -> List[Dict[str, str]]:
        return list_permissions(search_key)

    def create_role(self, data: RoleCreate, audit_context: Optional[AuditContext] = None) -> Role:
        with self.transaction():
            self._ensure_unique(data.role)
            values = data.model_dump()
            values["permissions"] = [permission.value for permission in data.permissions]
            role = self.roles.create(Role(**values), audit_context=audit_context, commit=False)
        logger.info(f"Role {role.role} created")
        return role

    def update_role(
        self,
        role_id: str,
        data: RoleUpdate,
        audit_context: Optional[AuditContext] = None,
    ) -> Role:
        # permissions and IPs are replaced only when sent
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field == "description"
        }
        if data.permissions is not None:
            changes["permissions"] = [permission.value for permission in data.permissions]

        with self.transaction():
            role = self.roles.get_by_id(role_id)
            if "role" in changes and changes["role"].lower() != role.role.lower():
                if role.role == ADMIN_ROLE_NAME:
                    raise BusinessRuleError("The Admin role cannot be renamed")
                self._ensure_unique(changes["role"], exclude_id=role.id)
            self.roles.update(role, changes, audit_context=audit_context, commit=False)
        return role

    def delete_role(
        self,
        role_id: str,
        data: Optional[RoleDelete] = None,
        audit_context: Optional[AuditContext] = None,
    ) -> None:
        """
        Soft delete a role.

        Users listed in ``data.users_and_new_roles`` get those roles added;
        the deleted role is detached from every user that held it.
        """
        reassignments = data.users_and_new_roles if data else []
        with self.transaction():
            role = self.roles.get_by_id(role_id)
            if role.role == ADMIN_ROLE_NAME:
                raise BusinessRuleError("The Admin role cannot be deleted")

            for entry in reassignments:
                user = self.users.get_by_id(entry.user)
                wanted = [rid for rid in dict.fromkeys(entry.roles) if rid != role.id]
                new_roles = self.roles.find_by_ids(wanted)
                missing = set(wanted) - {new_role.id for new_role in new_roles}
                if missing:
                    raise RoleNotFoundError(sorted(missing)[0])
                for new_role in new_roles:
                    if new_role not in user.roles:
                        user.roles.append(new_role)

            for user in self.users.find_users_with_role(role.id):
                user.roles.remove(role)
                logger.debug(f"Role {role.role} detached from user {user.username}")

            self.roles.soft_delete(role, audit_context=audit_context, commit=False)
        logger.info(f"Role {role_id} deleted")
