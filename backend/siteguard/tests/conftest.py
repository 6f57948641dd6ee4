from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from siteguard.api.deps import get_db
from siteguard.core.config import settings
from siteguard.main import app

API = settings.API_V1_STR


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def db(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine) -> Generator[TestClient, None, None]:
    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def signup(client: TestClient, email: str = "engineer@example.com", name: str = "Ada Site") -> dict[str, str]:
    response = client.post(
        f"{API}/auth/signup",
        json={"name": name, "email": email, "password": "strong-password"},
    )
    assert response.status_code == 201, response.text
    token = response.json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client: TestClient) -> dict[str, str]:
    return signup(client)


@pytest.fixture
def create_workspace(client: TestClient, auth_headers: dict[str, str]) -> Callable[..., dict[str, Any]]:
    def _create(**overrides: Any) -> dict[str, Any]:
        payload = {
            "name": "Lekki Duplex",
            "location": "Lekki, Lagos",
            "stage": "Construction & Project Execution",
            "type": "Residential",
            "budget": "50000000",
            **overrides,
        }
        response = client.post(f"{API}/workspaces", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
