"""
Redis Cache implementation.

Provides key invalidation for cached product listings.
"""
from typing import Optional

import redis.asyncio as aioredis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from internal.domain.errors import CacheError
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


class RedisCache:
    """Thin async wrapper around a Redis connection."""

    def __init__(self, redis_url: str) -> None:
        """
        Initialize the Redis cache.

        Args:
            redis_url: Redis connection URL.
        """
        self._redis_url = redis_url
        self._redis: Optional[Redis] = None

    async def connect(self) -> None:
        """Connect to Redis."""
        self._redis = aioredis.from_url(
            self._redis_url,
            decode_responses=False,
        )
        await self._redis.ping()
        logger.info("Connected to Redis", url=self._redis_url)

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Disconnected from Redis")

    async def close(self) -> None:
        """Alias for disconnect."""
        await self.disconnect()

    async def invalidate(self, key: str) -> bool:
        """
        Invalidate a cache key.

        Args:
            key: Cache key to invalidate.

        Returns:
            True if key was deleted, False if it was not cached.

        Raises:
            CacheError: If Redis is not connected or the delete fails.
        """
        if not self._redis:
            raise CacheError("Redis not connected")

        try:
            deleted = await self._redis.delete(key)
        except RedisError as e:
            logger.error("Cache invalidate error", key=key, error=str(e))
            raise CacheError(f"Failed to invalidate '{key}': {e}") from e

        logger.debug("Cache invalidated", key=key, deleted=deleted)
        return deleted > 0


class ProductCacheService:
    """
    Product-specific cache service.

    Namespaces product keys so they do not collide with other services.
    """

    def __init__(self, cache: RedisCache, prefix: str = "product") -> None:
        """
        Initialize the product cache service.

        Args:
            cache: RedisCache instance.
            prefix: Namespace prepended to every key.
        """
        self._cache = cache
        self._prefix = prefix

    def _key(self, key: str) -> str:
        """Generate the namespaced cache key."""
        return f"{self._prefix}:{key}" if self._prefix else key

    async def invalidate(self, key: str) -> None:
        """
        Invalidate a product cache entry.

        Args:
            key: Logical key, e.g. "all_products".

        Raises:
            CacheError: If the entry could not be removed.
        """
        await self._cache.invalidate(self._key(key))
