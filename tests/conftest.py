"""Shared fixtures: a throwaway SQLite database and user factories."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / f"cdstock_test_{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["APP_TIMEZONE"] = "UTC"
os.environ.pop("OFFLINE_QUEUE_PATH", None)

from cdstock.config import get_settings  # noqa: E402

get_settings.cache_clear()

from cdstock.domain.entities import User, UserRole  # noqa: E402
from cdstock.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from cdstock.infrastructure.notifications import (  # noqa: E402
    NotificationPublisher,
    RealtimeBridge,
)
from cdstock.infrastructure.repositories import UserRepository  # noqa: E402
from cdstock.infrastructure.security import (  # noqa: E402
    create_access_token,
    get_password_hash,
    password_signature,
)

PASSWORD = "Secret123"
_password_hash: str | None = None


def hashed_password() -> str:
    """Hash the shared test password once; pbkdf2 with many rounds is slow."""

    global _password_hash
    if _password_hash is None:
        _password_hash = get_password_hash(PASSWORD)
    return _password_hash


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure the test database starts from a clean state for each test."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_user(session):
    """Insert a user with the shared test password."""

    def _make_user(
        user_id: str,
        *,
        role: UserRole = UserRole.NORMAL,
        name: str | None = None,
        is_blocked: bool = False,
    ) -> User:
        return UserRepository(session).create(
            User(
                id=user_id,
                email=f"{user_id}@example.com",
                name=name or user_id.title(),
                role=role,
                password=hashed_password(),
                is_blocked=is_blocked,
            )
        )

    return _make_user


@pytest.fixture()
def bridge() -> RealtimeBridge:
    return RealtimeBridge()


@pytest.fixture()
def publisher(bridge) -> NotificationPublisher:
    return NotificationPublisher(bridge)


def auth_headers(user: User) -> dict[str, str]:
    """Build a bearer header for ``user`` without going through sign-in."""

    token = create_access_token(
        {
            "sub": user.id,
            "role": user.role.value,
            "pwd_sig": password_signature(user.password, user.is_blocked),
        }
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def client():
    """Return a test client bound to a fresh application instance."""

    pytest.importorskip("httpx")
    from fastapi.testclient import TestClient

    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
