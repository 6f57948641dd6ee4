import json

import httpx
import pytest

from siteguard.client.api import ApiError
from siteguard.client.session import SiteGuardClient

BASE_URL = "http://siteguard.test/api"


class RecordingNotifier:
    def __init__(self):
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class FakeBackend:
    """Just enough of the REST API to drive the hooks."""

    def __init__(self):
        self.requests: list[tuple[str, str]] = []
        self.workspaces = {
            "ws-1": {"id": "ws-1", "name": "Lekki Duplex", "status": "Under Construction", "progress": 10},
            "ws-2": {"id": "ws-2", "name": "Kano Warehouse", "status": "Finished", "progress": 100},
        }
        self.resources = [
            {"id": "r-1", "name": "Cement", "quantity": 100, "unit": "bags", "threshold": 40, "status": "Good"}
        ]
        self.fail_quantity = False
        self.quantity_failure_body: object = {"detail": "Database unavailable"}
        self.on_quantity = None
        self.offline = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api")
        self.requests.append((request.method, path))
        if self.offline:
            raise httpx.ConnectError("connection refused", request=request)

        if path == "/auth/login":
            body = json.loads(request.content)
            if body["password"] != "strong-password":
                return httpx.Response(400, json={"detail": "Incorrect email or password"})
            user = {"id": "u-1", "name": "Ada Site", "email": body["email"]}
            return httpx.Response(200, json={"data": {"token": "jwt-token", "user": user}})

        if path == "/workspaces" and request.method == "GET":
            data = list(self.workspaces.values())
            return httpx.Response(200, json={"data": data, "count": len(data)})
        if path.startswith("/workspaces/") and path.count("/") == 2:
            workspace_id = path.rsplit("/", 1)[1]
            if request.method == "DELETE":
                self.workspaces.pop(workspace_id)
                return httpx.Response(200, json={"message": "Workspace deleted successfully"})
            return httpx.Response(200, json={"data": self.workspaces[workspace_id]})

        if path == "/workspaces/ws-1/resources" and request.method == "GET":
            return httpx.Response(200, json={"data": self.resources, "count": len(self.resources)})
        if path == "/workspaces/ws-1/resources" and request.method == "PUT":
            body = json.loads(request.content)
            return httpx.Response(200, json={"data": body["resources"], "count": len(body["resources"])})
        if path == "/workspaces/ws-1/resources/r-1/quantity":
            if self.on_quantity:
                self.on_quantity()
            if self.fail_quantity:
                return httpx.Response(500, json=self.quantity_failure_body)
            quantity = json.loads(request.content)["quantity"]
            self.resources[0] = {**self.resources[0], "quantity": quantity}
            return httpx.Response(200, json={"data": self.resources[0]})

        if path == "/ai/architecture":
            return httpx.Response(
                429, json={"detail": "AI Usage Limit Exceeded. Please try again later or upgrade plan."}
            )

        return httpx.Response(404, json={"detail": "Not Found"})

    def count(self, method: str, path: str) -> int:
        return self.requests.count((method, path))


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def sg(backend, notifier):
    with SiteGuardClient(BASE_URL, notifier=notifier, transport=httpx.MockTransport(backend)) as client:
        yield client


def test_login_sets_session_and_authorizes_requests(sg, backend):
    user = sg.auth.login("ada@example.com", "strong-password")

    assert user["name"] == "Ada Site"
    assert sg.context.is_authenticated
    assert sg.context.token == "jwt-token"

    sg.workspaces.workspaces()
    assert backend.count("GET", "/workspaces") == 1


def test_failed_login_notifies(sg, notifier):
    with pytest.raises(ApiError) as exc_info:
        sg.auth.login("ada@example.com", "wrong")

    assert exc_info.value.status_code == 400
    assert notifier.errors == ["Incorrect email or password"]
    assert not sg.context.is_authenticated


def test_workspace_list_is_cached(sg, backend):
    first = sg.workspaces.workspaces()
    second = sg.workspaces.workspaces()

    assert first == second
    assert backend.count("GET", "/workspaces") == 1


def test_offline_falls_back_to_stored_workspaces(sg, backend):
    sg.workspaces.workspaces()
    sg.cache.invalidate(("workspaces",))
    backend.offline = True

    workspaces = sg.workspaces.workspaces()

    assert [ws["id"] for ws in workspaces] == ["ws-1", "ws-2"]


def test_delete_clears_active_workspace(sg, backend, notifier):
    sg.workspaces.workspaces()
    sg.workspaces.workspace("ws-1")
    sg.context.set_active_workspace("ws-1")

    sg.workspaces.delete_workspace("ws-1")

    assert sg.context.active_workspace_id is None
    assert [ws["id"] for ws in sg.cache.get_data(("workspaces",))] == ["ws-2"]
    assert ("workspace", "ws-1") not in sg.cache.keys()
    assert "Workspace deleted successfully!" in notifier.successes

    sg.workspaces.workspaces()
    assert backend.count("GET", "/workspaces") == 2


def test_deleted_workspace_stays_gone_offline(sg, backend):
    sg.workspaces.workspaces()
    sg.workspaces.delete_workspace("ws-1")
    sg.cache.invalidate(("workspaces",))
    backend.offline = True

    workspaces = sg.workspaces.workspaces()

    assert [ws["id"] for ws in workspaces] == ["ws-2"]


def test_delete_keeps_other_active_workspace(sg):
    sg.context.set_active_workspace("ws-2")

    sg.workspaces.delete_workspace("ws-1")

    assert sg.context.active_workspace_id == "ws-2"


def test_quantity_update_invalidates_related_queries(sg):
    sg.workspaces.workspaces()
    sg.resources.resources("ws-1")

    sg.resources.update_quantity("ws-1", "r-1", 30)

    assert sg.cache.is_stale(("workspaces",))
    assert sg.cache.is_stale(("resources", "ws-1"))
    assert sg.resources.resources("ws-1")[0]["quantity"] == 30


def test_quantity_update_rolls_back_on_failure(sg, backend, notifier):
    sg.resources.resources("ws-1")
    backend.fail_quantity = True
    in_flight = []
    backend.on_quantity = lambda: in_flight.append(sg.cache.get_data(("resources", "ws-1")))

    with pytest.raises(ApiError):
        sg.resources.update_quantity("ws-1", "r-1", 5)

    assert in_flight[0][0]["quantity"] == 5
    assert in_flight[0][0]["status"] == "Critical"

    cached = sg.cache.get_data(("resources", "ws-1"))
    assert cached[0]["quantity"] == 100
    assert cached[0]["status"] == "Good"
    assert notifier.errors == ["Database unavailable"]


def test_quantity_update_rolls_back_on_unstructured_error_body(sg, backend, notifier):
    sg.resources.resources("ws-1")
    backend.fail_quantity = True
    backend.quantity_failure_body = ["boom"]

    with pytest.raises(ApiError) as exc_info:
        sg.resources.update_quantity("ws-1", "r-1", 5)

    assert exc_info.value.status_code == 500
    assert sg.cache.get_data(("resources", "ws-1"))[0]["quantity"] == 100
    assert len(notifier.errors) == 1


def test_bulk_replace_drops_client_status(sg, backend):
    result = sg.resources.bulk_replace(
        "ws-1",
        [{"name": "Blocks", "quantity": 10, "unit": "pcs", "threshold": 100, "status": "Good"}],
    )

    assert result == [{"name": "Blocks", "quantity": 10, "unit": "pcs", "threshold": 100}]


def test_usage_limit_reaches_notifier(sg, notifier):
    with pytest.raises(ApiError) as exc_info:
        sg.architecture.generate("Duplex", "600sqm", "2", "85,000,000")

    assert exc_info.value.status_code == 429
    assert notifier.errors == ["AI Usage Limit Exceeded. Please try again later or upgrade plan."]


def test_unknown_architecture_part(sg):
    with pytest.raises(ValueError):
        sg.architecture.part("ws-1", "floors")


def test_logout_clears_cache(sg):
    sg.auth.login("ada@example.com", "strong-password")
    sg.workspaces.workspaces()

    sg.auth.logout()

    assert sg.cache.keys() == []
    assert not sg.context.is_authenticated
