"""
Redis Cache
===========
Redis-backed cache using MULTI/EXEC for multi-key writes.
"""

import json
from typing import Any, Dict, Optional

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from ..errors import CacheUnavailableError
from .base import BaseCache

logger = structlog.get_logger(__name__)


class RedisCache(BaseCache):
    """
    Redis-backed cache.

    Values are JSON encoded. Expiry is delegated to Redis key TTLs, there is
    no sweep on our side.
    """

    def __init__(self, redis_client: Redis, prefix: str = ""):
        """
        Args:
            redis_client: Async Redis client
            prefix: Namespace prepended to every key
        """
        self.redis = redis_client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[Any]:
        try:
            raw = await self.redis.get(self._key(key))
        except RedisError as e:
            logger.error("Cache read failed", key=key, error=str(e))
            raise CacheUnavailableError(str(e)) from e

        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            await self.redis.set(
                self._key(key),
                json.dumps(value, separators=(",", ":")),
                ex=max(1, int(ttl_seconds)),
            )
        except RedisError as e:
            logger.error("Cache write failed", key=key, error=str(e))
            raise CacheUnavailableError(str(e)) from e

    async def delete(self, key: str) -> None:
        try:
            await self.redis.delete(self._key(key))
        except RedisError as e:
            logger.error("Cache delete failed", key=key, error=str(e))
            raise CacheUnavailableError(str(e)) from e

    async def set_many(self, mapping: Dict[str, Any], ttl_seconds: int) -> None:
        """Write all keys in one MULTI/EXEC transaction."""
        ttl = max(1, int(ttl_seconds))
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                for key, value in mapping.items():
                    pipe.set(
                        self._key(key),
                        json.dumps(value, separators=(",", ":")),
                        ex=ttl,
                    )
                await pipe.execute()
        except RedisError as e:
            logger.error("Cache transaction failed", keys=list(mapping), error=str(e))
            raise CacheUnavailableError(str(e)) from e
