"""Pytest configuration and fixtures."""

import os

# Cheap hashes for tests; must be set before the application settings are loaded
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import make_url  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from accounts.database import Base, engine_options, get_db  # noqa: E402
from accounts.main import app  # noqa: E402

TEST_PASSWORD = "testpass123"  # noqa: S105


class AuthHeaders(dict):
    """Dict subclass that also stores the registered user's credentials."""

    def __init__(self, *args, email: str, password: str, token: str, **kwargs):
        super().__init__(*args, **kwargs)
        self.email = email
        self.password = password
        self.token = token


# Use test database - PostgreSQL when DATABASE_URL is set, SQLite locally
if os.getenv("DATABASE_URL"):
    url = make_url(os.environ["DATABASE_URL"])
    SQLALCHEMY_DATABASE_URL = url.set(database=f"{url.database}_test").render_as_string(
        hide_password=False
    )
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(SQLALCHEMY_DATABASE_URL, **engine_options(SQLALCHEMY_DATABASE_URL))
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """Return a helper that registers a user through the API."""

    def _register(name="Test User", email="test@example.com", password=TEST_PASSWORD):
        return client.post(
            "/api/register",
            json={
                "name": name,
                "email": email,
                "password": password,
                "password_confirmation": password,
            },
        )

    return _register


@pytest.fixture
def auth_headers(register_user):
    """Register a user and return auth headers carrying its credentials."""
    response = register_user()
    assert response.status_code == 200
    token = response.json()["success"]["token"]

    return AuthHeaders(
        {"Authorization": f"Bearer {token}"},
        email="test@example.com",
        password=TEST_PASSWORD,
        token=token,
    )
