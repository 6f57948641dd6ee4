import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "thinklab_user"
WORKSPACES_KEY = "thinklab_workspaces"


class LocalStorage:
    """String key/value store persisted to a JSON file.

    Mirrors the browser localStorage contract: values are strings, callers
    encode structured data themselves. With no path the store lives in memory.
    """

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path is not None else None
        self._items: dict[str, str] = self._read()

    def _read(self) -> dict[str, str]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            items = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable local storage at %s: %s", self.path, e)
            return {}
        if not isinstance(items, dict):
            return {}
        return {str(k): str(v) for k, v in items.items()}

    def _write(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._items, indent=2), encoding="utf-8")

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._write()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._write()

    def clear(self) -> None:
        self._items.clear()
        self._write()
