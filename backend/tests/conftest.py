"""
Pytest configuration and fixtures for the EV charging backend tests.

Provides test database isolation and common test utilities.
"""
import sys
import os
import pathlib
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Use in-memory SQLite for tests to ensure complete isolation
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")

# One shared connection so the schema is visible to every session and thread
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in TEST_DATABASE_URL else {},
    poolclass=StaticPool if "sqlite" in TEST_DATABASE_URL else None,
    echo=False  # Set to True for SQL debugging
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

TEST_USER_ID = "user-123"


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """
    Create and tear down the test schema once per test session.

    Tests never touch the dev/prod database.
    """
    from evcharge.db import Base
    # Import models so they're registered with Base
    from evcharge import models  # noqa: F401

    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    yield

    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def db():
    """
    Provide a clean database session for each test.

    Everything runs inside one outer transaction that is rolled back after
    the test, so commits made by the code under test never leak.
    """
    connection = test_engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


def override_get_db(db_session):
    """Dependency override for get_db that yields the test session."""
    def _override():
        yield db_session
    return _override


@pytest.fixture(scope="function")
def client(setup_test_db, db):
    """
    FastAPI TestClient bound to the test database session.
    """
    from fastapi.testclient import TestClient
    from evcharge.main_simple import app
    from evcharge.db import get_db

    app.dependency_overrides[get_db] = override_get_db(db)

    try:
        # raise_server_exceptions=False so unhandled errors become 500 responses
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_auth_headers():
    """Factory: Bearer token headers for any user id."""
    from evcharge.services.auth import create_token_with_role

    def _make(user_id: str, role: str = "user") -> dict:
        return {"Authorization": f"Bearer {create_token_with_role(user_id, role)}"}
    return _make


@pytest.fixture
def auth_headers(make_auth_headers):
    """Bearer token headers for TEST_USER_ID."""
    return make_auth_headers(TEST_USER_ID)
