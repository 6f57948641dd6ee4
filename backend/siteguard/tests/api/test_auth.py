from fastapi.testclient import TestClient

from siteguard.tests.conftest import API, signup


def test_health_check(client: TestClient):
    response = client.get(f"{API}/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["timestamp"]


def test_signup_returns_token_and_user(client: TestClient):
    response = client.post(
        f"{API}/auth/signup",
        json={"name": "Ada Site", "email": "ada@example.com", "password": "strong-password"},
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["token"]
    assert data["user"]["email"] == "ada@example.com"
    assert data["user"]["name"] == "Ada Site"
    assert "hashed_password" not in data["user"]


def test_signup_rejects_duplicate_email(client: TestClient):
    signup(client, email="dup@example.com")

    response = client.post(
        f"{API}/auth/signup",
        json={"name": "Other", "email": "dup@example.com", "password": "strong-password"},
    )

    assert response.status_code == 400


def test_login_and_me(client: TestClient):
    signup(client, email="pm@example.com", name="Project Manager")

    response = client.post(
        f"{API}/auth/login",
        json={"email": "pm@example.com", "password": "strong-password"},
    )
    assert response.status_code == 200
    token = response.json()["data"]["token"]

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["name"] == "Project Manager"


def test_login_with_wrong_password(client: TestClient):
    signup(client, email="pm@example.com")

    response = client.post(
        f"{API}/auth/login",
        json={"email": "pm@example.com", "password": "not-the-password"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Incorrect email or password"


def test_workspaces_require_authentication(client: TestClient):
    assert client.get(f"{API}/workspaces").status_code == 401

    bad = client.get(f"{API}/workspaces", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 403
