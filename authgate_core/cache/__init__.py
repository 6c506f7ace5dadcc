"""
Cache Module
============
Shared key-value store with per-key TTL used by the flow engines.
"""

from .base import CacheClient, BaseCache
from .in_memory import InMemoryCache
from .redis_cache import RedisCache

__all__ = [
    # Contract
    "CacheClient",
    "BaseCache",
    # Backends
    "InMemoryCache",
    "RedisCache",
]
