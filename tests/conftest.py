"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backoffice.api.main import create_app
from backoffice.core.access import AccessControl, Department, Principal, Role
from backoffice.core.config import Settings
from backoffice.core.security import create_access_token
from backoffice.db.base import Base


class RecordingSink:
    """Audit sink that keeps every event in memory."""

    def __init__(self):
        self.events = []

    def emit(self, event):
        self.events.append(event)


@pytest.fixture
def settings():
    """Settings isolated from the environment's database and secrets."""
    return Settings(
        secret_key="test-secret-key",
        database_url="sqlite://",
        audit_enabled=False,
        file_logging=False,
    )


@pytest.fixture
def audit_sink():
    return RecordingSink()


@pytest.fixture
def access_control(audit_sink):
    return AccessControl(audit_sink=audit_sink)


@pytest.fixture
def editor():
    return Principal(
        user_id="user-editor",
        email="editor@success.com",
        role=Role.EDITOR,
        primary_department=Department.EDITORIAL,
        name="Eddie Editor",
    )


@pytest.fixture
def admin():
    return Principal(
        user_id="user-admin",
        email="admin@success.com",
        role=Role.ADMIN,
        primary_department=None,
    )


@pytest.fixture
def super_admin():
    return Principal(
        user_id="user-super",
        email="super@success.com",
        role=Role.SUPER_ADMIN,
        primary_department=Department.SUPER_ADMIN,
    )


@pytest.fixture
def session_factory():
    """In-memory SQLite session factory with the schema created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def app(settings, access_control, session_factory):
    return create_app(settings=settings, access_control=access_control, session_factory=session_factory)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers(settings):
    """Build Authorization headers for a principal."""
    def _headers(principal: Principal) -> dict:
        token = create_access_token(principal, settings)
        return {"Authorization": f"Bearer {token}"}
    return _headers
