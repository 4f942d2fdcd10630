import os

# must be set before the app (and its settings) are imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shortlink.main import app
from shortlink.db.Models.models import Base
from shortlink.db.Connection import database
from shortlink.services import auth


# Create in-memory SQLite database for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_PASSWORD = "correct horse battery staple"
USER_PASSWORD = "hunter2-but-longer"


@pytest.fixture
def db_session():
    """Creates a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """Creates a test client with overridden database dependency."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[database.get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db_session):
    return auth.create_user(db_session, "admin", ADMIN_PASSWORD, is_admin=True)


@pytest.fixture
def regular_user(db_session):
    return auth.create_user(db_session, "bob", USER_PASSWORD, is_admin=False)


@pytest.fixture
def admin_client(client, admin_user):
    """Client holding an admin session cookie."""
    response = client.post("/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def user_client(db_session, regular_user):
    """A second client, logged in as a non-admin user."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[database.get_db] = override_get_db
    c = TestClient(app)
    response = c.post("/login", json={"username": "bob", "password": USER_PASSWORD})
    assert response.status_code == 200
    yield c
    app.dependency_overrides.clear()


@pytest.fixture
def sample_urls():
    """Provides sample URLs for testing."""
    return [
        "https://example.com/test1",
        "https://google.com/search?q=test",
        "https://github.com/user/repo",
    ]
