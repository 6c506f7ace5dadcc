"""
In-Memory Cache
===============
TTL cache for development and testing.
"""

import json
import time
from typing import Any, Callable, Dict, Optional, Tuple

from .base import BaseCache


class InMemoryCache(BaseCache):
    """
    Process-local TTL cache.

    For development and testing only.
    Use RedisCache in production.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        """
        Args:
            clock: Returns the current time in seconds (injectable for tests)
        """
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        raw, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None

        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        # Values are stored encoded so callers never share mutable state
        self._entries[key] = (
            json.dumps(value, separators=(",", ":")),
            self._clock() + max(1, int(ttl_seconds)),
        )

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._clock() < entry[1]

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for _, expires_at in self._entries.values() if now < expires_at)
