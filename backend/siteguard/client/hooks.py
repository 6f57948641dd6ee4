"""Per-resource query and mutation helpers over the API client.

Queries read through the shared QueryCache. Mutations call the API, then
invalidate every cached query the change can affect, and report the outcome
through a Notifier.
"""
import logging
from collections.abc import Callable, Iterable
from typing import Any, Protocol, TypeVar

from siteguard.client.api import ApiClient, ApiError
from siteguard.client.cache import FIVE_MINUTES, QueryCache, QueryKey
from siteguard.client.context import AppContext
from siteguard.models import resource_status_for

logger = logging.getLogger(__name__)

R = TypeVar("R")

TWO_MINUTES = 60 * 2


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingNotifier:
    def success(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)


class _Hooks:
    def __init__(self, api: ApiClient, cache: QueryCache, context: AppContext, notifier: Notifier):
        self.api = api
        self.cache = cache
        self.context = context
        self.notifier = notifier

    def _mutate(
        self,
        call: Callable[[], R],
        *,
        invalidate: Iterable[QueryKey] = (),
        success: str | None = None,
        failure: str | None = None,
    ) -> R:
        try:
            result = call()
        except ApiError as e:
            if failure:
                self.notifier.error(e.message or failure)
            raise
        for key in invalidate:
            self.cache.invalidate(key)
        if success:
            self.notifier.success(success)
        return result


class AuthHooks(_Hooks):
    def _start_session(self, session: dict[str, Any]) -> dict[str, Any]:
        self.cache.clear()
        self.context.set_session(session["token"], session["user"])
        return session["user"]

    def login(self, email: str, password: str) -> dict[str, Any]:
        session = self._mutate(lambda: self.api.login(email, password), failure="Login failed")
        return self._start_session(session)

    def signup(self, name: str, email: str, password: str) -> dict[str, Any]:
        session = self._mutate(lambda: self.api.signup(name, email, password), failure="Signup failed")
        return self._start_session(session)

    def logout(self) -> None:
        self.context.logout()
        self.cache.clear()


class WorkspaceHooks(_Hooks):
    def workspaces(self) -> list[dict[str, Any]]:
        try:
            workspaces = self.cache.fetch(("workspaces",), self.api.get_all_workspaces, stale_time=FIVE_MINUTES)
        except ApiError as e:
            if e.status_code != 0:
                raise
            logger.warning("Backend unreachable, serving the offline workspace list")
            return self.context.cached_workspaces()
        self.context.cache_workspaces(workspaces)
        return workspaces

    def workspace(self, workspace_id: str | None) -> dict[str, Any] | None:
        if not workspace_id:
            return None
        return self.cache.fetch(
            ("workspace", workspace_id),
            lambda: self.api.get_workspace(workspace_id),
            stale_time=FIVE_MINUTES,
        )

    def active_workspace(self) -> dict[str, Any] | None:
        return self.workspace(self.context.active_workspace_id)

    def stats(self) -> dict[str, Any]:
        return self.cache.fetch(("workspace-stats",), self.api.get_workspace_stats, stale_time=FIVE_MINUTES)

    def _invalidate_workspace(self, workspace_id: str) -> list[QueryKey]:
        return [("workspaces",), ("workspace-stats",), ("workspace", workspace_id)]

    def create_workspace(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._mutate(
            lambda: self.api.create_workspace(data),
            invalidate=[("workspaces",), ("workspace-stats",)],
            success="Workspace created successfully!",
            failure="Failed to create workspace",
        )

    def update_workspace(self, workspace_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._mutate(
            lambda: self.api.update_workspace(workspace_id, data),
            invalidate=self._invalidate_workspace(workspace_id),
            success="Workspace updated successfully!",
            failure="Failed to update workspace",
        )

    def delete_workspace(self, workspace_id: str) -> None:
        self._mutate(
            lambda: self.api.delete_workspace(workspace_id),
            invalidate=[("workspaces",), ("workspace-stats",)],
            success="Workspace deleted successfully!",
            failure="Failed to delete workspace",
        )
        self.cache.update_data(
            ("workspaces",),
            lambda workspaces: [ws for ws in workspaces if ws["id"] != workspace_id],
        )
        self.context.cache_workspaces(
            [ws for ws in self.context.cached_workspaces() if ws["id"] != workspace_id]
        )
        for prefix in ("workspace", "resources", "resource", "resource-statistics", "architecture", "safety-reports", "safety-report"):
            self.cache.remove((prefix, workspace_id))
        if self.context.active_workspace_id == workspace_id:
            self.context.set_active_workspace(None)

    def update_progress(self, workspace_id: str, progress: int) -> dict[str, Any]:
        return self._mutate(
            lambda: self.api.update_progress(workspace_id, progress),
            invalidate=self._invalidate_workspace(workspace_id),
            failure="Failed to update progress",
        )

    def toggle_status(self, workspace_id: str) -> dict[str, Any]:
        return self._mutate(
            lambda: self.api.toggle_status(workspace_id),
            invalidate=self._invalidate_workspace(workspace_id),
            success="Workspace status updated!",
            failure="Failed to toggle status",
        )


class ResourceHooks(_Hooks):
    def resources(self, workspace_id: str) -> list[dict[str, Any]]:
        return self.cache.fetch(("resources", workspace_id), lambda: self.api.get_all_resources(workspace_id))

    def resource(self, workspace_id: str, resource_id: str) -> dict[str, Any]:
        return self.cache.fetch(
            ("resource", workspace_id, resource_id),
            lambda: self.api.get_resource(workspace_id, resource_id),
        )

    def statistics(self, workspace_id: str) -> dict[str, Any]:
        return self.cache.fetch(
            ("resource-statistics", workspace_id),
            lambda: self.api.get_resource_statistics(workspace_id),
        )

    def insights(self, workspace_id: str) -> str:
        return self.api.get_resource_insights(workspace_id)

    def suggest_allocation(self, project_type: str, stage: str, budget: str) -> list[dict[str, Any]]:
        return self._mutate(
            lambda: self.api.suggest_resource_allocation(
                {"project_type": project_type, "stage": stage, "budget": budget}
            ),
            failure="Failed to generate resource allocation",
        )

    def _touched(self, workspace_id: str, resource_id: str | None = None) -> list[QueryKey]:
        keys: list[QueryKey] = [
            ("resources", workspace_id),
            ("resource-statistics", workspace_id),
            ("workspaces",),
            ("workspace", workspace_id),
        ]
        if resource_id:
            keys.append(("resource", workspace_id, resource_id))
        return keys

    def add_resource(self, workspace_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._mutate(
            lambda: self.api.add_resource(workspace_id, data),
            invalidate=self._touched(workspace_id),
            success="Resource added",
            failure="Failed to add resource",
        )

    def update_resource(self, workspace_id: str, resource_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._mutate(
            lambda: self.api.update_resource(workspace_id, resource_id, data),
            invalidate=self._touched(workspace_id, resource_id),
            failure="Failed to update resource",
        )

    def update_quantity(self, workspace_id: str, resource_id: str, quantity: float) -> dict[str, Any]:
        """Apply the new quantity to the cached list before the request lands.

        The cached entry's status is recomputed locally; on failure the
        previous list is restored.
        """
        key: QueryKey = ("resources", workspace_id)
        previous = self.cache.get_data(key)

        def apply(resources: list[dict[str, Any]]) -> list[dict[str, Any]]:
            return [
                {
                    **r,
                    "quantity": quantity,
                    "status": resource_status_for(quantity, r["threshold"]).value,
                }
                if r["id"] == resource_id
                else r
                for r in resources
            ]

        self.cache.update_data(key, apply)
        try:
            return self._mutate(
                lambda: self.api.update_resource_quantity(workspace_id, resource_id, quantity),
                invalidate=self._touched(workspace_id, resource_id),
                failure="Failed to update quantity",
            )
        except ApiError:
            if previous is not None:
                self.cache.update_data(key, lambda _: previous)
            raise

    def delete_resource(self, workspace_id: str, resource_id: str) -> None:
        self._mutate(
            lambda: self.api.delete_resource(workspace_id, resource_id),
            invalidate=self._touched(workspace_id),
            failure="Failed to delete resource",
        )
        self.cache.remove(("resource", workspace_id, resource_id))

    def bulk_replace(self, workspace_id: str, resources: list[dict[str, Any]]) -> list[dict[str, Any]]:
        # Client-side status values are not sent; the server derives them.
        payload = [
            {field: r[field] for field in ("name", "quantity", "unit", "threshold")}
            for r in resources
        ]
        return self._mutate(
            lambda: self.api.bulk_replace_resources(workspace_id, payload),
            invalidate=self._touched(workspace_id),
            success="Inventory updated",
            failure="Failed to replace resources",
        )


class ArchitectureHooks(_Hooks):
    PARTS = ("sections", "materials", "stages")

    def architecture(self, workspace_id: str | None) -> dict[str, Any] | None:
        if not workspace_id:
            return None
        return self.cache.fetch(
            ("architecture", workspace_id),
            lambda: self.api.get_architecture_plan(workspace_id),
        )

    def part(self, workspace_id: str, part: str) -> list[dict[str, Any]]:
        if part not in self.PARTS:
            raise ValueError(f"Unknown architecture part: {part}")
        return self.cache.fetch(
            ("architecture", workspace_id, part),
            lambda: self.api.get_architecture_part(workspace_id, part),
        )

    def generate(self, building_type: str, land_size: str, floors: str, budget: str) -> dict[str, Any]:
        brief = {"building_type": building_type, "land_size": land_size, "floors": floors, "budget": budget}
        return self._mutate(
            lambda: self.api.generate_architecture(brief),
            failure="Failed to generate plan.",
        )

    def _touched(self, workspace_id: str) -> list[QueryKey]:
        return [("architecture", workspace_id), ("workspaces",), ("workspace", workspace_id)]

    def save(self, workspace_id: str, plan: dict[str, Any]) -> dict[str, Any]:
        return self._mutate(
            lambda: self.api.save_architecture_plan(workspace_id, plan),
            invalidate=self._touched(workspace_id),
            success="Architecture plan saved successfully",
            failure="Failed to save architecture plan",
        )

    def update(self, workspace_id: str, plan: dict[str, Any]) -> dict[str, Any]:
        return self._mutate(
            lambda: self.api.update_architecture_plan(workspace_id, plan),
            invalidate=self._touched(workspace_id),
            success="Architecture plan updated successfully",
            failure="Failed to update architecture plan",
        )

    def delete(self, workspace_id: str) -> None:
        self._mutate(
            lambda: self.api.delete_architecture_plan(workspace_id),
            invalidate=self._touched(workspace_id),
            success="Architecture plan deleted successfully",
            failure="Failed to delete architecture plan",
        )

    def add_part(self, workspace_id: str, part: str, item: dict[str, Any]) -> list[dict[str, Any]]:
        if part not in self.PARTS:
            raise ValueError(f"Unknown architecture part: {part}")
        return self._mutate(
            lambda: self.api.add_architecture_part(workspace_id, part, item),
            invalidate=self._touched(workspace_id),
            failure=f"Failed to add architecture {part}",
        )


class SafetyReportHooks(_Hooks):
    def reports(self, workspace_id: str | None) -> list[dict[str, Any]]:
        if not workspace_id:
            return []
        return self.cache.fetch(
            ("safety-reports", workspace_id),
            lambda: self.api.get_all_safety_reports(workspace_id),
            stale_time=TWO_MINUTES,
        )

    def report(self, workspace_id: str, report_id: str) -> dict[str, Any]:
        return self.cache.fetch(
            ("safety-report", workspace_id, report_id),
            lambda: self.api.get_safety_report(workspace_id, report_id),
            stale_time=FIVE_MINUTES,
        )

    def analyze(self, image: bytes, mime_type: str = "image/jpeg") -> dict[str, Any]:
        return self._mutate(
            lambda: self.api.analyze_safety_image(image, mime_type),
            failure="Analysis failed. Please try again.",
        )

    def save(self, workspace_id: str, report: dict[str, Any]) -> dict[str, Any]:
        payload = {field: report[field] for field in ("risk_score", "hazards", "summary")}
        return self._mutate(
            lambda: self.api.save_safety_report(workspace_id, payload),
            invalidate=[
                ("safety-reports", workspace_id),
                ("workspaces",),
                ("workspace-stats",),
                ("workspace", workspace_id),
            ],
            success="Safety report saved successfully!",
            failure="Failed to save safety report",
        )


class ReportHooks(_Hooks):
    def daily_report(self, workspace_id: str) -> dict[str, Any]:
        return self._mutate(
            lambda: self.api.generate_daily_report(workspace_id),
            failure="Failed to generate report",
        )
