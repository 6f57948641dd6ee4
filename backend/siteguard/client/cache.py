import copy
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

QueryKey = tuple[Any, ...]

FIVE_MINUTES = 60 * 5


@dataclass
class CacheEntry:
    data: Any
    updated_at: float
    stale_time: float = 0
    invalidated: bool = False


def _matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[: len(prefix)] == prefix


class QueryCache:
    """Keyed query results with stale times and prefix invalidation.

    Keys are tuples such as ``("workspaces",)`` or ``("resources", ws_id)``.
    Invalidating ``("workspace",)`` marks every workspace entry stale; the
    next ``fetch`` of a stale entry calls the fetcher again.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[QueryKey, CacheEntry] = {}

    def get_data(self, key: QueryKey) -> Any:
        entry = self._entries.get(key)
        return copy.deepcopy(entry.data) if entry else None

    def set_data(self, key: QueryKey, data: Any, *, stale_time: float | None = None) -> None:
        previous = self._entries.get(key)
        if stale_time is None:
            stale_time = previous.stale_time if previous else 0
        self._entries[key] = CacheEntry(data=copy.deepcopy(data), updated_at=self._clock(), stale_time=stale_time)

    def update_data(self, key: QueryKey, updater: Callable[[Any], Any]) -> None:
        """Apply ``updater`` to the cached value, if there is one."""
        entry = self._entries.get(key)
        if entry is None:
            return
        entry.data = updater(copy.deepcopy(entry.data))

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        if entry is None or entry.invalidated:
            return True
        return self._clock() - entry.updated_at >= entry.stale_time

    def fetch(self, key: QueryKey, fetcher: Callable[[], Any], *, stale_time: float = 0) -> Any:
        if not self.is_stale(key):
            return self.get_data(key)
        logger.debug("Fetching query %s", key)
        data = fetcher()
        self.set_data(key, data, stale_time=stale_time)
        return copy.deepcopy(data)

    def invalidate(self, prefix: QueryKey) -> int:
        count = 0
        for key, entry in self._entries.items():
            if _matches(key, prefix):
                entry.invalidated = True
                count += 1
        return count

    def remove(self, prefix: QueryKey) -> None:
        for key in [k for k in self._entries if _matches(k, prefix)]:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[QueryKey]:
        return list(self._entries)
