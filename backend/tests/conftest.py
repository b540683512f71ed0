import os

# Must be set before the app is imported so the in-memory engine is used.
os.environ["TESTING"] = "True"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from typing import Dict, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.database import DatabaseManager, SessionLocal, init_db
from app.main import app
from app.services.store import DocumentStore


@pytest.fixture
def db() -> Iterator[Session]:
    """Fresh tables with the starter data for every test."""
    DatabaseManager.drop_all_tables()
    DatabaseManager.create_all_tables()
    session = SessionLocal()
    init_db(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db: Session) -> DocumentStore:
    return DocumentStore(db)


@pytest.fixture
def client(db: Session) -> TestClient:
    return TestClient(app)


def _login(client: TestClient, staff_id: str, pin: str = "1234") -> Dict[str, str]:
    response = client.post("/api/auth/login", json={"id": staff_id, "pin": pin})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def login(client: TestClient):
    """Log in as any staff id and return the auth headers."""
    def _do(staff_id: str, pin: str = "1234") -> Dict[str, str]:
        return _login(client, staff_id, pin)
    return _do


@pytest.fixture
def educator_headers(client: TestClient) -> Dict[str, str]:
    return _login(client, "admin")


@pytest.fixture
def nurse_headers(client: TestClient) -> Dict[str, str]:
    # Mike Ross: 850 XP, badge b1, nothing completed
    return _login(client, "54321")
