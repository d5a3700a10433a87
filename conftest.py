import os

# Settings are read at import time, so they have to be in place first.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from taskmanager.database import create_db_engine, create_tables, get_db
from taskmanager.main import app

PASSWORD = "Secret123"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a user and return bearer headers for them."""

    def _register(name="Ann Smith", email="ann@example.com", password=PASSWORD):
        response = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
        assert response.status_code == 201, response.json()
        # Requests in tests always carry an explicit header
        client.cookies.clear()
        token = response.json()["data"]["token"]
        return {"Authorization": f"Bearer {token}"}

    return _register


@pytest.fixture
def make_task(client):
    def _make_task(headers, title="Buy milk", due_date="2030-01-15", priority="Medium", **extra):
        body = {"title": title, "dueDate": due_date, "priority": priority, **extra}
        response = client.post("/api/tasks", json=body, headers=headers)
        assert response.status_code == 201, response.json()
        return response.json()["data"]

    return _make_task
