"""
Shared fixtures: an in-memory SQLite database, the app with its database and
integration dependencies overridden, and authenticated clients.
"""
from typing import Callable, Dict, List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from booking_admin.api import deps
from booking_admin.config.settings import settings
from booking_admin.core.security import PasswordHasher
from booking_admin.db.init_db import seed_defaults
from booking_admin.main import create_app
from booking_admin.models import Base, Role, User
from booking_admin.services.user_service import UserService
from booking_admin.schemas.user import UserCreate

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

# bcrypt at its minimum cost keeps the suite fast
test_hasher = PasswordHasher(rounds=4)


class RecordingNotifier:
    """Stands in for BookingNotifier and records every call."""

    def __init__(self):
        self.calls: List[tuple] = []

    def booking_created(self, booking):
        self.calls.append(("created", booking))

    def booking_updated(self, booking, previous_status):
        self.calls.append(("updated", booking, previous_status))

    def booking_checked(self, booking, events):
        self.calls.append(("checked", booking, events))

    def booking_deleted(self, booking):
        self.calls.append(("deleted", booking))

    def names(self) -> List[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def admin_user(db_session) -> User:
    return seed_defaults(db_session, settings, hasher=test_hasher)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def app(db_session, admin_user, notifier):
    application = create_app()

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    application.dependency_overrides[deps.get_db] = override_get_db
    application.dependency_overrides[deps.get_password_hasher] = lambda: test_hasher
    application.dependency_overrides[deps.get_booking_notifier] = lambda: notifier
    return application


@pytest.fixture
def client(app) -> TestClient:
    # not entered as a context manager, so the startup hook does not touch the real database
    return TestClient(app)


def auth_headers(user: User) -> Dict[str, str]:
    token = deps.get_jwt_manager().create_access_token(user.id, {"username": user.username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for() -> Callable[[User], Dict[str, str]]:
    return auth_headers


@pytest.fixture
def admin_headers(admin_user) -> Dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture
def make_user(db_session) -> Callable[..., User]:
    """Create a user holding a fresh role with the given permissions."""
    counter = {"n": 0}

    def _make(*permissions: str) -> User:
        counter["n"] += 1
        n = counter["n"]
        role = Role(role=f"Role {n}", permissions=[str(getattr(p, "value", p)) for p in permissions])
        db_session.add(role)
        db_session.commit()
        return UserService(db_session, test_hasher).create_user(
            UserCreate(
                first_name="Staff",
                last_name=str(n),
                email=f"staff{n}@example.com",
                username=f"staff{n}",
                password="Staff@123",
                role_ids=[role.id],
            )
        )

    return _make


ROOM_PAYLOAD = {
    "name": "Garden View",
    "room_number": "R101",
    "room_type": "DOUBLE",
    "capacity": 2,
    "price_per_night": "120.00",
    "description": "Quiet room facing the garden",
    "amenities": ["wifi", "tv"],
}


@pytest.fixture
def create_room(client, admin_headers) -> Callable[..., dict]:
    def _create(**overrides) -> dict:
        response = client.post("/api/rooms", json={**ROOM_PAYLOAD, **overrides}, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_booking(client, admin_headers) -> Callable[..., dict]:
    def _create(room_id: str, clock_in: str, clock_out: str, **overrides) -> dict:
        payload = {
            "customer_name": "Jane Doe",
            "mobile_number": "+15550100",
            "email": "jane@example.com",
            "clock_in": clock_in,
            "clock_out": clock_out,
            "room_id": room_id,
            "status": "confirmed",
            **overrides,
        }
        response = client.post("/api/bookings", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
