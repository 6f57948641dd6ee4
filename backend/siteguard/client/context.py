import json
import logging
from collections.abc import Callable
from typing import Any

from siteguard.client.storage import TOKEN_KEY, USER_KEY, WORKSPACES_KEY, LocalStorage

logger = logging.getLogger(__name__)

Listener = Callable[["AppContext"], None]


class AppContext:
    """Session-wide state: the signed-in user and the active workspace."""

    def __init__(self, storage: LocalStorage | None = None):
        self.storage = storage or LocalStorage()
        self.user: dict[str, Any] | None = None
        self.active_workspace_id: str | None = None
        self.is_loading_auth = True
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def load(self) -> None:
        """Restore the user from storage. Corrupt entries are wiped."""
        try:
            token = self.storage.get_item(TOKEN_KEY)
            stored_user = self.storage.get_item(USER_KEY)
            if token and stored_user:
                self.user = json.loads(stored_user)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse stored user: %s", e)
            self.storage.remove_item(TOKEN_KEY)
            self.storage.remove_item(USER_KEY)
        finally:
            self.is_loading_auth = False
            self._notify()

    @property
    def token(self) -> str | None:
        return self.storage.get_item(TOKEN_KEY)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.token is not None

    def set_session(self, token: str, user: dict[str, Any]) -> None:
        self.storage.set_item(TOKEN_KEY, token)
        self.storage.set_item(USER_KEY, json.dumps(user))
        self.set_user(user)

    def set_user(self, user: dict[str, Any] | None) -> None:
        self.user = user
        self._notify()

    def set_active_workspace(self, workspace_id: str | None) -> None:
        self.active_workspace_id = workspace_id
        self._notify()

    def logout(self) -> None:
        self.user = None
        self.active_workspace_id = None
        self.storage.remove_item(USER_KEY)
        self.storage.remove_item(TOKEN_KEY)
        self._notify()

    # Offline copy of the last workspace list, for reading without a backend.
    def cache_workspaces(self, workspaces: list[dict[str, Any]]) -> None:
        self.storage.set_item(WORKSPACES_KEY, json.dumps(workspaces))

    def cached_workspaces(self) -> list[dict[str, Any]]:
        raw = self.storage.get_item(WORKSPACES_KEY)
        if not raw:
            return []
        try:
            workspaces = json.loads(raw)
        except json.JSONDecodeError:
            self.storage.remove_item(WORKSPACES_KEY)
            return []
        return workspaces if isinstance(workspaces, list) else []
