import logging
from collections.abc import Callable
from typing import Any

import httpx

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if not isinstance(body, dict):
        return response.text or response.reason_phrase
    detail = body.get("detail")
    if isinstance(detail, list):
        # FastAPI validation errors
        return "; ".join(str(item.get("msg", item)) for item in detail if isinstance(item, dict)) or str(detail)
    return str(detail or body.get("message") or response.reason_phrase)


class ApiClient:
    """Thin wrapper over the REST API. Calls return the unwrapped ``data``."""

    def __init__(
        self,
        base_url: str,
        *,
        token_provider: TokenProvider | None = None,
        transport: httpx.BaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self.token_provider = token_provider
        self._http = httpx.Client(base_url=base_url, transport=transport, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = kwargs.pop("headers", {})
        token = self.token_provider() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            response = self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise ApiError(0, "Network error. Please check your connection.") from exc
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response.json()

    def _data(self, method: str, path: str, **kwargs: Any) -> Any:
        return self._request(method, path, **kwargs)["data"]

    # Health / auth
    def health(self) -> dict[str, Any]:
        return self._request("GET", "/health")

    def login(self, email: str, password: str) -> dict[str, Any]:
        return self._data("POST", "/auth/login", json={"email": email, "password": password})

    def signup(self, name: str, email: str, password: str) -> dict[str, Any]:
        return self._data("POST", "/auth/signup", json={"name": name, "email": email, "password": password})

    # Workspaces
    def get_all_workspaces(self) -> list[dict[str, Any]]:
        return self._data("GET", "/workspaces")

    def get_workspace_stats(self) -> dict[str, Any]:
        return self._data("GET", "/workspaces/stats")

    def get_workspace(self, workspace_id: str) -> dict[str, Any]:
        return self._data("GET", f"/workspaces/{workspace_id}")

    def create_workspace(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._data("POST", "/workspaces", json=data)

    def update_workspace(self, workspace_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._data("PUT", f"/workspaces/{workspace_id}", json=data)

    def delete_workspace(self, workspace_id: str) -> None:
        self._request("DELETE", f"/workspaces/{workspace_id}")

    def update_progress(self, workspace_id: str, progress: int) -> dict[str, Any]:
        return self._data("PATCH", f"/workspaces/{workspace_id}/progress", json={"progress": progress})

    def toggle_status(self, workspace_id: str) -> dict[str, Any]:
        return self._data("PATCH", f"/workspaces/{workspace_id}/status")

    # Resources
    def get_all_resources(self, workspace_id: str) -> list[dict[str, Any]]:
        return self._data("GET", f"/workspaces/{workspace_id}/resources")

    def get_resource(self, workspace_id: str, resource_id: str) -> dict[str, Any]:
        return self._data("GET", f"/workspaces/{workspace_id}/resources/{resource_id}")

    def get_resource_statistics(self, workspace_id: str) -> dict[str, Any]:
        return self._data("GET", f"/workspaces/{workspace_id}/resources/statistics")

    def add_resource(self, workspace_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._data("POST", f"/workspaces/{workspace_id}/resources", json=data)

    def update_resource(self, workspace_id: str, resource_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._data("PUT", f"/workspaces/{workspace_id}/resources/{resource_id}", json=data)

    def update_resource_quantity(self, workspace_id: str, resource_id: str, quantity: float) -> dict[str, Any]:
        return self._data(
            "PATCH",
            f"/workspaces/{workspace_id}/resources/{resource_id}/quantity",
            json={"quantity": quantity},
        )

    def delete_resource(self, workspace_id: str, resource_id: str) -> None:
        self._request("DELETE", f"/workspaces/{workspace_id}/resources/{resource_id}")

    def bulk_replace_resources(self, workspace_id: str, resources: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return self._data("PUT", f"/workspaces/{workspace_id}/resources", json={"resources": resources})

    def get_resource_insights(self, workspace_id: str) -> str:
        return self._data("POST", f"/workspaces/{workspace_id}/resources/insights")

    # Architecture
    def get_architecture_plan(self, workspace_id: str) -> dict[str, Any] | None:
        return self._data("GET", f"/workspaces/{workspace_id}/architecture")

    def save_architecture_plan(self, workspace_id: str, plan: dict[str, Any]) -> dict[str, Any]:
        return self._data("POST", f"/workspaces/{workspace_id}/architecture", json=plan)

    def update_architecture_plan(self, workspace_id: str, plan: dict[str, Any]) -> dict[str, Any]:
        return self._data("PUT", f"/workspaces/{workspace_id}/architecture", json=plan)

    def delete_architecture_plan(self, workspace_id: str) -> None:
        self._request("DELETE", f"/workspaces/{workspace_id}/architecture")

    def get_architecture_part(self, workspace_id: str, part: str) -> list[dict[str, Any]]:
        return self._data("GET", f"/workspaces/{workspace_id}/architecture/{part}")

    def add_architecture_part(self, workspace_id: str, part: str, item: dict[str, Any]) -> list[dict[str, Any]]:
        return self._data("POST", f"/workspaces/{workspace_id}/architecture/{part}", json=item)

    # Safety reports
    def get_all_safety_reports(self, workspace_id: str) -> list[dict[str, Any]]:
        return self._data("GET", f"/workspaces/{workspace_id}/safety-reports")

    def get_safety_report(self, workspace_id: str, report_id: str) -> dict[str, Any]:
        return self._data("GET", f"/workspaces/{workspace_id}/safety-reports/{report_id}")

    def save_safety_report(self, workspace_id: str, report: dict[str, Any]) -> dict[str, Any]:
        return self._data("POST", f"/workspaces/{workspace_id}/safety-reports", json=report)

    # AI
    def generate_architecture(self, brief: dict[str, Any]) -> dict[str, Any]:
        return self._data("POST", "/ai/architecture", json=brief)

    def analyze_safety_image(self, image: bytes, mime_type: str = "image/jpeg") -> dict[str, Any]:
        files = {"file": ("site.jpg", image, mime_type)}
        return self._data("POST", "/ai/safety-analysis", files=files)

    def suggest_resource_allocation(self, brief: dict[str, Any]) -> list[dict[str, Any]]:
        return self._data("POST", "/ai/resource-allocation", json=brief)

    def generate_daily_report(self, workspace_id: str) -> dict[str, Any]:
        return self._data("POST", f"/workspaces/{workspace_id}/reports/daily")
