"""Pytest configuration and fixtures."""

import os

# settings are read at import time
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["COOKIE_SECURE"] = "false"
os.environ["GOOGLE_MAPS_API_KEY"] = ""

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tipsheet.auth.passwords import hash_password
from tipsheet.core.db import Base, get_db
from tipsheet.main import app
from tipsheet.models import AdminUser
from tipsheet.store.sql import SqlStore

from tests.fakes import FakeStore

TEST_DATABASE_URL = "sqlite:///:memory:"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "hunter22"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sql_store(db_session: Session) -> SqlStore:
    return SqlStore(db_session)


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db_session: Session) -> AdminUser:
    admin = AdminUser(email=ADMIN_EMAIL, password_hash=hash_password(ADMIN_PASSWORD), is_active=True)
    db_session.add(admin)
    db_session.commit()
    db_session.refresh(admin)
    return admin


@pytest.fixture
def admin_client(client: TestClient, admin_user: AdminUser) -> TestClient:
    """Client carrying a signed-in admin cookie."""
    resp = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 204
    return client
