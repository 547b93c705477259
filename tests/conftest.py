"""
Shared fixtures.

The app runs against an in-memory SQLite database with demo mode on and a
cheap bcrypt cost. Tables are rebuilt around every test.
"""

import os

os.environ["FINADVISOR_DATABASE_URL"] = "sqlite://"
os.environ["FINADVISOR_DEMO_MODE"] = "true"
os.environ["FINADVISOR_BCRYPT_ROUNDS"] = "4"
os.environ["FINADVISOR_JWT_SECRET"] = "test-secret"
os.environ["FINADVISOR_LOG_JSON"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from finadvisor import models
from finadvisor.config import get_settings
from finadvisor.database import SessionLocal, engine, get_db
from finadvisor.main import app

# A path sqlite can never open: every query raises OperationalError.
UNREACHABLE_DATABASE_URL = "sqlite:////nonexistent-finadvisor-dir/finadvisor.db"


@pytest.fixture(autouse=True)
def fresh_database():
    get_settings.cache_clear()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def unreachable_store():
    """Route every request's session to a database that cannot be opened."""
    broken_engine = create_engine(UNREACHABLE_DATABASE_URL)
    BrokenSession = sessionmaker(bind=broken_engine)

    def override_get_db():
        session = BrokenSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield BrokenSession
    broken_engine.dispose()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, email="alice@example.com", password="secret123", full_name="Alice Smith", **extra):
    body = {"email": email, "password": password, "fullName": full_name, **extra}
    return client.post("/api/users/register", json=body)


class Account:
    def __init__(self, response):
        data = response.json()
        self.token = data["token"]
        self.id = data["user"]["id"]
        self.email = data["user"]["email"]
        self.headers = auth_headers(self.token)


@pytest.fixture
def alice(client):
    response = register(client)
    assert response.status_code == 201
    return Account(response)


@pytest.fixture
def bob(client):
    response = register(client, email="bob@example.com", password="hunter22", full_name="Bob Jones")
    assert response.status_code == 201
    return Account(response)
