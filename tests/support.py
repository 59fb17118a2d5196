"""Shared test wiring: in-memory SQLite database, TestClient and user helpers."""

import uuid
from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core import security
from app.core.config import get_settings
from app.core.database import enable_sqlite_foreign_keys, get_db
from app.main import app
from app.models import Base, UserRole

# Minimum bcrypt cost keeps the suite fast; hashing behaviour is unchanged.
security.BCRYPT_ROUNDS = 4

API = get_settings().API_PREFIX

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


def reset_database() -> None:
    """Drop and recreate every table."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def new_client() -> TestClient:
    return TestClient(app)


def random_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:10]}@test.com"


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register(
    client: TestClient,
    name: str = "pizza diner",
    email: str | None = None,
    password: str = "a",
) -> dict[str, Any]:
    """Register a user; returns the response body ({user, token}) plus password."""
    body = {"name": name, "email": email or random_email(), "password": password}
    resp = client.post(f"{API}/auth", json=body)
    assert resp.status_code == 200, resp.text
    data = resp.json()
    data["password"] = password
    return data


def login(client: TestClient, email: str, password: str) -> dict[str, Any]:
    resp = client.put(f"{API}/auth", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()


def grant_role(user_id: int, role: str, object_id: int = 0) -> None:
    """Insert a role grant directly, as an operator would."""
    db = TestingSessionLocal()
    try:
        db.add(UserRole(user_id=user_id, role=role, object_id=object_id))
        db.commit()
    finally:
        db.close()


def register_admin(client: TestClient, name: str = "pizza admin") -> dict[str, Any]:
    """Register a user, grant global admin, and re-login so the token carries it."""
    registered = register(client, name=name)
    user = registered["user"]
    grant_role(user["id"], "admin")
    return login(client, user["email"], registered["password"])


def mock_factory(
    mock_client_class: MagicMock,
    status_code: int = 200,
    body: dict[str, Any] | None = None,
    side_effect: Exception | None = None,
) -> AsyncMock:
    """Wire a patched httpx.AsyncClient to answer one POST; returns the post mock."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = body if body is not None else {}
    resp.text = ""
    mock_post = AsyncMock(return_value=resp, side_effect=side_effect)
    mock_instance = MagicMock()
    mock_instance.post = mock_post
    mock_client_class.return_value.__aenter__ = AsyncMock(return_value=mock_instance)
    mock_client_class.return_value.__aexit__ = AsyncMock(return_value=None)
    return mock_post
