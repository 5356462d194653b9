"""
Shared fixtures: an in-memory database, a test client bound to it and a few
registered users.
"""

import os

# Settings are read once, so the environment must be ready before the app is imported
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from messenger.database import Base, get_db
from messenger.main import app
from helpers import register

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db():
    """A session on a freshly created schema."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """Test client with the database dependency pointed at the test engine."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def db_sessions(client):
    """Sessions handed to requests from here on, in the order they were opened."""
    sessions = []

    def recording_get_db():
        db = TestingSessionLocal()
        sessions.append(db)
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = recording_get_db
    yield sessions
    app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def alice(client):
    return register(client, "Alice", "Archer", "alice@example.com")


@pytest.fixture
def bob(client):
    return register(client, "Bob", "Baker", "bob@example.com")


@pytest.fixture
def carol(client):
    return register(client, "Carol", "Cooper", "carol@example.com")
