"""
Keyed query cache used by the category board

Each key has a fetcher. ``invalidate`` marks a key stale so the next
``get`` goes back to the fetcher; ``refetch`` reloads it immediately.
"""
from typing import Any, Awaitable, Callable, Dict, Optional, Set

Fetcher = Callable[[], Awaitable[Any]]


class QueryCache:
    """In-memory cache of fetched query results"""

    def __init__(self):
        self._fetchers: Dict[str, Fetcher] = {}
        self._data: Dict[str, Any] = {}
        self._stale: Set[str] = set()

    def register(self, key: str, fetcher: Fetcher) -> None:
        self._fetchers[key] = fetcher

    def peek(self, key: str) -> Optional[Any]:
        """Cached value without fetching, stale or not"""
        return self._data.get(key)

    def is_stale(self, key: str) -> bool:
        return key not in self._data or key in self._stale

    async def get(self, key: str) -> Any:
        """Cached value, fetched first when missing or stale"""
        if self.is_stale(key):
            return await self.refetch(key)
        return self._data[key]

    def invalidate(self, key: str) -> None:
        self._stale.add(key)

    async def refetch(self, key: str) -> Any:
        """
        Reload key from its fetcher

        Raises:
            KeyError: if no fetcher is registered for key
        """
        fetcher = self._fetchers[key]
        value = await fetcher()
        self._data[key] = value
        self._stale.discard(key)
        return value
