import httpx

from siteguard.client.api import ApiClient
from siteguard.client.cache import QueryCache
from siteguard.client.context import AppContext
from siteguard.client.hooks import (
    ArchitectureHooks,
    AuthHooks,
    LoggingNotifier,
    Notifier,
    ReportHooks,
    ResourceHooks,
    SafetyReportHooks,
    WorkspaceHooks,
)
from siteguard.client.storage import LocalStorage


class SiteGuardClient:
    """One signed-in session: context, cache, API client and every hook set
    sharing them."""

    def __init__(
        self,
        base_url: str,
        *,
        storage: LocalStorage | None = None,
        notifier: Notifier | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.context = AppContext(storage)
        self.cache = QueryCache()
        self.notifier = notifier or LoggingNotifier()
        self.api = ApiClient(base_url, token_provider=lambda: self.context.token, transport=transport)

        shared = (self.api, self.cache, self.context, self.notifier)
        self.auth = AuthHooks(*shared)
        self.workspaces = WorkspaceHooks(*shared)
        self.resources = ResourceHooks(*shared)
        self.architecture = ArchitectureHooks(*shared)
        self.safety = SafetyReportHooks(*shared)
        self.reports = ReportHooks(*shared)

        self.context.load()

    def close(self) -> None:
        self.api.close()

    def __enter__(self) -> "SiteGuardClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
