import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from notes_tasks_backend.api.config import Settings
from notes_tasks_backend.api.main import create_app
from notes_tasks_database.db import create_db_engine


@pytest.fixture
def settings():
    """Settings for an in-memory database and a fixed signing secret."""
    return Settings(secret_key="test-secret", database_url="sqlite://")

@pytest.fixture
def engine(settings):
    """A single shared in-memory SQLite connection, fresh for every test."""
    engine = create_db_engine(settings.database_url, poolclass=StaticPool)
    yield engine
    engine.dispose()

@pytest.fixture
def app(settings, engine):
    return create_app(settings, engine=engine)

@pytest.fixture
def db_session(app):
    """Provide a SQLAlchemy session on the app's database for direct inspection."""
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

@pytest.fixture
def client(app):
    """Fixture for FastAPI TestClient bound to the test app."""
    with TestClient(app) as c:
        yield c

@pytest.fixture
def user_data():
    """Returns default user data for signup."""
    return {
        "name": "Alice",
        "email": "alice@example.com",
        "password": "alicepassword123"
    }

@pytest.fixture
def second_user_data():
    """Returns a second user's data."""
    return {
        "name": "Bob",
        "email": "bob@example.com",
        "password": "bobpassword456"
    }

def register_and_auth(client, name, email, password):
    """Helper for signing up then signing in to get a token.

    The client's cookie jar is cleared afterwards so requests only
    authenticate through the header they pass explicitly.
    """
    r1 = client.post("/api/auth/signup", json={
        "name": name, "email": email, "password": password
    })
    assert r1.status_code == 201

    r2 = client.post("/api/auth/signin", json={
        "email": email, "password": password
    })
    assert r2.status_code == 200
    client.cookies.clear()
    return r2.json()["token"]

@pytest.fixture
def auth_header(client, user_data):
    """Returns {'Authorization': 'Bearer <token>'} for default user."""
    token = register_and_auth(client, user_data["name"], user_data["email"], user_data["password"])
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def second_auth_header(client, second_user_data):
    """Returns auth header for second user."""
    token = register_and_auth(client, second_user_data["name"], second_user_data["email"], second_user_data["password"])
    return {"Authorization": f"Bearer {token}"}
