"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from priority_tracker.models.database import Base, get_db, reset_engine
from priority_tracker.models.user import UserRole
from priority_tracker.services.authorization import SYSTEM_PRINCIPAL, Principal
from priority_tracker.services.initiative_service import InitiativeService
from priority_tracker.services.user_service import UserService
from priority_tracker.utils.config import Config, reset_config, set_config
from priority_tracker.utils.security import create_access_token

TEST_PASSWORD = "secret123"


@pytest.fixture(scope="function")
def test_config():
    """Create a test configuration."""
    config = Config(
        database={"url": "sqlite:///:memory:", "echo": False},
        auth={"secret_key": "test-secret", "min_password_length": 6},
        dashboard={"max_weekly_priorities": 5},
    )
    set_config(config)
    yield config
    reset_config()


@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite engine for testing.

    Uses StaticPool to ensure the same connection is used throughout,
    which is required for in-memory SQLite databases.
    """
    # Import models to ensure they're registered with Base
    from priority_tracker.models import initiative, priority, user  # noqa: F401

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_connection(test_db_engine):
    """A connection wrapped in a transaction that is rolled back after the test."""
    connection = test_db_engine.connect()
    transaction = connection.begin()
    yield connection
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def test_db_session(db_connection, test_config):
    """Create a database session for testing."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_connection)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_connection, test_config):
    """Create a test client with dependency overrides."""
    from priority_tracker import __version__
    from priority_tracker.api.errors import register_error_handlers
    from priority_tracker.api.main import health_check, readiness_check
    from priority_tracker.api.routes import (
        analytics_router,
        auth_router,
        initiatives_router,
        priorities_router,
        users_router,
        weeks_router,
    )
    from priority_tracker.api.schemas import HealthResponse

    reset_engine()
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_connection)

    # Create a test app without lifespan
    app = FastAPI(title="Priority Tracker API (Test)", version=__version__)
    register_error_handlers(app)
    for router in (
        auth_router,
        users_router,
        initiatives_router,
        priorities_router,
        analytics_router,
        weeks_router,
    ):
        app.include_router(router, prefix="/api")
    app.add_api_route("/health", health_check, response_model=HealthResponse)
    app.add_api_route("/health/ready", readiness_check, response_model=HealthResponse)

    # Override get_db dependency to use the test connection
    def override_get_db():
        session = SessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client


# --- Domain fixtures ---


@pytest.fixture
def user_service(test_db_session, test_config):
    """User service bound to the test session."""
    return UserService(test_db_session, test_config)


@pytest.fixture
def initiative_service(test_db_session):
    """Initiative service bound to the test session."""
    return InitiativeService(test_db_session)


@pytest.fixture
def admin_user(user_service):
    """An active administrator."""
    return user_service.create_user(
        SYSTEM_PRINCIPAL,
        name="Ana Admin",
        email="admin@example.com",
        password=TEST_PASSWORD,
        role=UserRole.ADMIN,
    )


@pytest.fixture
def regular_user(user_service):
    """An active regular user."""
    return user_service.create_user(
        SYSTEM_PRINCIPAL,
        name="Bruno User",
        email="bruno@example.com",
        password=TEST_PASSWORD,
    )


@pytest.fixture
def other_user(user_service):
    """A second regular user."""
    return user_service.create_user(
        SYSTEM_PRINCIPAL,
        name="Carla User",
        email="carla@example.com",
        password=TEST_PASSWORD,
    )


@pytest.fixture
def admin_principal(admin_user):
    return Principal.from_user(admin_user)


@pytest.fixture
def user_principal(regular_user):
    return Principal.from_user(regular_user)


@pytest.fixture
def other_principal(other_user):
    return Principal.from_user(other_user)


@pytest.fixture
def initiative(initiative_service):
    """A single active initiative."""
    return initiative_service.create_initiative(
        SYSTEM_PRINCIPAL, name="Eficiencia Operativa", color="#f59e0b"
    )


@pytest.fixture
def second_initiative(initiative_service):
    return initiative_service.create_initiative(
        SYSTEM_PRINCIPAL, name="Orca SNS", color="#ec4899"
    )


@pytest.fixture
def week_day():
    """A Wednesday used as "this week" in date-sensitive tests."""
    return datetime(2025, 10, 15, 10, 30)


def _bearer(user) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    """Build a Bearer header for any user without going through the login endpoint."""
    return _bearer


@pytest.fixture
def admin_headers(admin_user):
    return _bearer(admin_user)


@pytest.fixture
def user_headers(regular_user):
    return _bearer(regular_user)


@pytest.fixture
def other_headers(other_user):
    return _bearer(other_user)
