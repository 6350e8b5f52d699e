"""Shared pytest fixtures for all tests."""

import pytest
from fastapi.testclient import TestClient

from config import Settings
from db import create_db_engine, create_session_factory, init_db
from main import create_app
from app.services import categories, identity, wallets
from tests.helpers import TEST_SECRET


@pytest.fixture
def test_settings():
    """Settings pointing at a fresh in-memory database."""
    return Settings(
        jwt_secret=TEST_SECRET,
        database_url="sqlite:///:memory:",
        log_level="WARNING",
    )


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with the schema created."""
    engine = create_db_engine("sqlite:///:memory:")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(db_engine):
    """A session for calling services directly."""
    session = create_session_factory(db_engine)()
    yield session
    session.close()


@pytest.fixture
def alice(db):
    return identity.register(db, "alice", "secret1")


@pytest.fixture
def bob(db):
    return identity.register(db, "bob", "secret2")


@pytest.fixture
def alice_cash(db, alice):
    return wallets.create_wallet(db, alice.id, name="Cash", type="cash")


@pytest.fixture
def alice_bank(db, alice):
    return wallets.create_wallet(db, alice.id, name="BCA", type="bank", initial_balance=1000)


@pytest.fixture
def alice_salary(db, alice):
    return categories.create_category(db, alice.id, "Salary", "income")


@pytest.fixture
def alice_food(db, alice):
    return categories.create_category(db, alice.id, "Food", "expense")


@pytest.fixture
def client(test_settings):
    """HTTP client for a fresh app; the lifespan (table creation) runs."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login(client):
    """Register (if needed) and log in; returns Authorization headers."""

    def _login(username="alice", password="secret1"):
        client.post("/auth/register", json={"username": username, "password": password})
        response = client.post("/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login
