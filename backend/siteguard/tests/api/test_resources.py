import pytest
from fastapi.testclient import TestClient

from siteguard.models import ResourceStatus, resource_status_for
from siteguard.tests.conftest import API, signup


@pytest.mark.parametrize(
    "quantity, threshold, expected",
    [
        (100, 40, ResourceStatus.GOOD),
        (40, 40, ResourceStatus.LOW),
        (21, 40, ResourceStatus.LOW),
        (20, 40, ResourceStatus.CRITICAL),
        (0, 0, ResourceStatus.CRITICAL),
        (1, 0, ResourceStatus.GOOD),
    ],
)
def test_resource_status_thresholds(quantity, threshold, expected):
    assert resource_status_for(quantity, threshold) == expected


@pytest.fixture
def resources_url(create_workspace) -> str:
    workspace = create_workspace()
    return f"{API}/workspaces/{workspace['id']}/resources"


def _add(client: TestClient, url: str, headers, **payload):
    body = {"name": "Cement", "quantity": 100, "unit": "bags", "threshold": 40, **payload}
    response = client.post(url, json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_create_resource_derives_status(client: TestClient, auth_headers, resources_url):
    good = _add(client, resources_url, auth_headers)
    critical = _add(client, resources_url, auth_headers, name="Rebar", quantity=5, unit="tons", threshold=20)

    assert good["status"] == "Good"
    assert critical["status"] == "Critical"

    listing = client.get(resources_url, headers=auth_headers).json()
    assert listing["count"] == 2
    assert [item["name"] for item in listing["data"]] == ["Cement", "Rebar"]


def test_client_supplied_status_is_ignored(client: TestClient, auth_headers, resources_url):
    created = _add(client, resources_url, auth_headers, quantity=1, threshold=40, status="Good")
    assert created["status"] == "Critical"


def test_update_and_quantity_patch_recompute_status(client: TestClient, auth_headers, resources_url):
    created = _add(client, resources_url, auth_headers)
    url = f"{resources_url}/{created['id']}"

    updated = client.put(url, json={"threshold": 150}, headers=auth_headers).json()["data"]
    assert updated["status"] == "Low"
    assert updated["quantity"] == 100

    patched = client.patch(f"{url}/quantity", json={"quantity": 10}, headers=auth_headers).json()["data"]
    assert patched["status"] == "Critical"

    fetched = client.get(url, headers=auth_headers).json()["data"]
    assert fetched["quantity"] == 10
    assert fetched["status"] == "Critical"


def test_negative_quantity_rejected(client: TestClient, auth_headers, resources_url):
    created = _add(client, resources_url, auth_headers)

    response = client.patch(
        f"{resources_url}/{created['id']}/quantity", json={"quantity": -3}, headers=auth_headers
    )

    assert response.status_code == 422


def test_non_finite_numbers_rejected(client: TestClient, auth_headers, resources_url):
    created = _add(client, resources_url, auth_headers)
    url = f"{resources_url}/{created['id']}"
    headers = {**auth_headers, "Content-Type": "application/json"}

    attempts = [
        client.post(resources_url, content='{"name": "Sand", "quantity": 1e400, "threshold": 10}', headers=headers),
        client.post(resources_url, content='{"name": "Sand", "quantity": 10, "threshold": 1e400}', headers=headers),
        client.put(url, content='{"threshold": 1e400}', headers=headers),
        client.patch(f"{url}/quantity", content='{"quantity": 1e400}', headers=headers),
        client.put(resources_url, content='{"resources": [{"name": "Sand", "quantity": 1e400}]}', headers=headers),
    ]

    assert [response.status_code for response in attempts] == [422] * 5
    listing = client.get(resources_url, headers=auth_headers).json()
    assert listing["count"] == 1
    assert listing["data"][0]["quantity"] == 100
    assert listing["data"][0]["threshold"] == 40


def test_resource_statistics(client: TestClient, auth_headers, resources_url):
    _add(client, resources_url, auth_headers, name="Cement", quantity=100, threshold=40)
    _add(client, resources_url, auth_headers, name="Sand", quantity=30, threshold=40)
    _add(client, resources_url, auth_headers, name="Rebar", quantity=2, threshold=40)

    stats = client.get(f"{resources_url}/statistics", headers=auth_headers).json()["data"]

    assert stats == {
        "total": 3,
        "by_status": {"good": 1, "low": 1, "critical": 1},
        "low_stock_count": 2,
    }


def test_bulk_replace(client: TestClient, auth_headers, resources_url):
    _add(client, resources_url, auth_headers, name="Old stock")

    response = client.put(
        resources_url,
        json={
            "resources": [
                {"name": "Blocks", "quantity": 5000, "unit": "pcs", "threshold": 1000},
                {"name": "Granite", "quantity": 3, "unit": "tons", "threshold": 10},
            ]
        },
        headers=auth_headers,
    )

    assert response.status_code == 200
    names = {item["name"]: item["status"] for item in response.json()["data"]}
    assert names == {"Blocks": "Good", "Granite": "Critical"}
    assert client.get(resources_url, headers=auth_headers).json()["count"] == 2


def test_delete_resource(client: TestClient, auth_headers, resources_url):
    created = _add(client, resources_url, auth_headers)
    url = f"{resources_url}/{created['id']}"

    assert client.delete(url, headers=auth_headers).status_code == 200
    assert client.get(url, headers=auth_headers).status_code == 404


def test_resource_from_other_workspace_is_404(client: TestClient, auth_headers, create_workspace, resources_url):
    created = _add(client, resources_url, auth_headers)
    other = create_workspace(name="Second site")

    response = client.get(
        f"{API}/workspaces/{other['id']}/resources/{created['id']}", headers=auth_headers
    )

    assert response.status_code == 404


def test_other_users_cannot_touch_resources(client: TestClient, resources_url):
    intruder = signup(client, email="intruder@example.com")

    response = client.post(
        resources_url,
        json={"name": "Cement", "quantity": 1, "unit": "bags", "threshold": 1},
        headers=intruder,
    )

    assert response.status_code == 403
