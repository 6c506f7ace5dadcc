"""
Cache Contract
==============
Minimal key-value contract with per-key TTL shared by the flow engines.
"""

from typing import Any, Dict, Optional, Protocol


class CacheClient(Protocol):
    """Async key-value store with per-key time-to-live."""

    async def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if absent or expired."""

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a value unconditionally, replacing any previous one."""

    async def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""

    async def set_many(self, mapping: Dict[str, Any], ttl_seconds: int) -> None:
        """Store several keys under the same TTL."""


class BaseCache:
    """
    Shared behaviour for cache backends.

    Backends without multi-key transactions inherit a sequential
    ``set_many``; a reader may observe the first key without the second.
    """

    async def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        raise NotImplementedError

    async def set_many(self, mapping: Dict[str, Any], ttl_seconds: int) -> None:
        for key, value in mapping.items():
            await self.set(key, value, ttl_seconds)
