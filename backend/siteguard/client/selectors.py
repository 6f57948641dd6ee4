from typing import Any

Workspace = dict[str, Any]

UNDER_CONSTRUCTION = "Under Construction"
FINISHED = "Finished"


def filter_workspaces(workspaces: list[Workspace], search: str = "", filter_type: str = "All") -> list[Workspace]:
    """Search by name or location; filter by status, where "Active" means under construction."""
    term = search.lower()

    def matches(ws: Workspace) -> bool:
        matches_search = term in ws["name"].lower() or term in ws.get("location", "").lower()
        matches_filter = (
            filter_type == "All"
            or ws["status"] == filter_type
            or (filter_type == "Active" and ws["status"] == UNDER_CONSTRUCTION)
        )
        return matches_search and matches_filter

    return [ws for ws in workspaces if matches(ws)]


def portfolio_stats(workspaces: list[Workspace]) -> dict[str, int]:
    total = len(workspaces)
    return {
        "total": total,
        "active": sum(1 for ws in workspaces if ws["status"] == UNDER_CONSTRUCTION),
        "completed": sum(1 for ws in workspaces if ws["status"] == FINISHED),
        "average_progress": round(sum(ws["progress"] for ws in workspaces) / total) if total else 0,
    }


def safety_buckets(workspaces: list[Workspace]) -> dict[str, int]:
    scores = [ws["safety_score"] for ws in workspaces]
    return {
        "safe": sum(1 for s in scores if s >= 90),
        "warning": sum(1 for s in scores if 75 <= s < 90),
        "critical": sum(1 for s in scores if s < 75),
    }


def resources_with_status(workspace: Workspace, status: str) -> list[dict[str, Any]]:
    return [r for r in workspace.get("resources", []) if r["status"] == status]


def find_workspace(workspaces: list[Workspace], workspace_id: str | None) -> Workspace | None:
    if not workspace_id:
        return None
    return next((ws for ws in workspaces if ws["id"] == workspace_id), None)
