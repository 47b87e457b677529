"""Database initialization and default data seeding."""
import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from booking_admin.config.settings import Settings, settings
from booking_admin.core.constants import ADMIN_ROLE_NAME
from booking_admin.core.permissions import Permission
from booking_admin.core.security import PasswordHasher
from booking_admin.models import AuthCredential, Base, Role, User
from booking_admin.repositories.role_repository import RoleRepository
from booking_admin.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """
    Create all tables that do not exist yet.

    Suitable for development and tests; production deployments manage the
    schema with migrations.
    """
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")


def seed_defaults(
    db: Session,
    config: Settings = settings,
    hasher: Optional[PasswordHasher] = None,
) -> User:
    """
    Make sure the Admin role and the default administrator exist.

    Returns the administrator, created or found.
    """
    roles = RoleRepository(db)
    users = UserRepository(db)

    admin_role = roles.find_by_name(ADMIN_ROLE_NAME)
    if admin_role is None:
        admin_role = roles.create(
            Role(
                role=ADMIN_ROLE_NAME,
                description="Administrator with full access",
                permissions=[Permission.ADMIN.value],
                level=0,
            ),
            commit=False,
        )
        logger.info("Seeded Admin role")

    admin = users.find_by_username_or_email(config.ADMIN_USERNAME)
    if admin is None:
        hasher = hasher or PasswordHasher(rounds=config.BCRYPT_ROUNDS)
        admin = User(
            first_name="Admin",
            last_name="User",
            username=config.ADMIN_USERNAME,
            email=config.ADMIN_EMAIL,
            roles=[admin_role],
        )
        admin.credential = AuthCredential(password_hash=hasher.hash(config.ADMIN_PASSWORD))
        users.create(admin, commit=False)
        logger.info(f"Seeded administrator '{config.ADMIN_USERNAME}'")

    db.commit()
    return admin
