"""
Redis client for caching category lists

Features:
1. Generic JSON cache helpers
2. Per-user category list cache
3. Explicit invalidation after mutations
"""

import json
from typing import Optional, Dict, Any, List
import logging

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from finance_categories.core.config import settings

logger = logging.getLogger(__name__)


def category_generation_key(user_id: str) -> str:
    """Counter bumped on every mutation of a user's categories"""
    return f"categories:{user_id}:generation"


def category_list_key(user_id: str, generation: int) -> str:
    """Cache key of one user's category list at a generation"""
    return f"categories:{user_id}:{generation}"


class RedisClient:
    """
    Redis client wrapper with helper methods for caching

    Usage:
        redis_client = RedisClient()
        await redis_client.connect()
        await redis_client.set_category_list("user-1", 0, [{"id": "..."}])
    """

    def __init__(self):
        self.redis: Optional[Redis] = None

    async def connect(self) -> None:
        """Initialize Redis connection pool"""
        connection = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=settings.redis_max_connections,
            retry_on_timeout=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        try:
            # Test connection; only a reachable client is kept
            await connection.ping()
        except Exception as e:
            logger.error(f"Redis connection failed: {e}")
            await connection.aclose()
            raise

        self.redis = connection
        logger.info("Redis connected successfully")

    async def disconnect(self) -> None:
        """Close Redis connection"""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            logger.info("Redis connection closed")

    async def health_check(self) -> bool:
        """Check if Redis is healthy"""
        try:
            if not self.redis:
                return False
            await self.redis.ping()
            return True
        except Exception as e:
            logger.error(f"Redis health check failed: {e}")
            return False

    # === GENERAL CACHING ===

    async def set_cache(
        self,
        key: str,
        value: Any,
        ttl: int = 3600
    ) -> None:
        """
        Generic cache setter

        Args:
            key: Cache key
            value: Value to cache (will be JSON serialized)
            ttl: Time to live in seconds
        """
        if isinstance(value, (dict, list)):
            value = json.dumps(value)
        elif not isinstance(value, str):
            value = str(value)

        await self.redis.setex(key, ttl, value)

    async def get_cache(self, key: str) -> Optional[str]:
        """
        Generic cache getter

        Args:
            key: Cache key

        Returns:
            Cached value or None
        """
        return await self.redis.get(key)

    async def delete_cache(self, key: str) -> bool:
        """
        Delete cache key

        Args:
            key: Cache key to delete

        Returns:
            True if key was deleted
        """
        deleted = await self.redis.delete(key)
        return bool(deleted)

    # === CATEGORY LISTS ===

    async def get_category_generation(self, user_id: str) -> int:
        """Current list generation of a user; 0 before the first mutation"""
        value = await self.redis.get(category_generation_key(user_id))
        return int(value) if value is not None else 0

    async def get_category_list(
        self,
        user_id: str,
        generation: int
    ) -> Optional[List[Dict[str, Any]]]:
        """
        Get cached category list of a user

        Returns:
            List of serialized categories or None if not cached
        """
        data = await self.get_cache(category_list_key(user_id, generation))
        if data is None:
            logger.debug(f"Category list not in cache for user: {user_id}")
            return None
        logger.debug(f"Category list retrieved from cache for user: {user_id}")
        return json.loads(data)

    async def set_category_list(
        self,
        user_id: str,
        generation: int,
        categories: List[Dict[str, Any]]
    ) -> None:
        """
        Cache serialized category list under the generation it was read at

        A list read before a mutation lands under an old generation and is
        never served afterwards.
        """
        await self.set_cache(
            category_list_key(user_id, generation),
            categories,
            ttl=settings.category_cache_ttl
        )
        logger.debug(f"Category list cached for user: {user_id} (generation {generation})")

    async def invalidate_category_list(self, user_id: str) -> int:
        """Start a new list generation after a mutation"""
        generation = await self.redis.incr(category_generation_key(user_id))
        await self.delete_cache(category_list_key(user_id, generation - 1))
        logger.debug(f"Category list invalidated for user: {user_id} (generation {generation})")
        return generation


# Global Redis client instance
redis_client = RedisClient()


async def get_redis() -> Optional[RedisClient]:
    """
    Dependency function for FastAPI

    Returns None when caching is disabled or Redis is unreachable,
    so requests run uncached instead of failing.

    Usage:
        @app.get("/endpoint")
        async def endpoint(redis: Optional[RedisClient] = Depends(get_redis)):
            ...
    """
    if not settings.cache_enabled:
        return None
    if not redis_client.redis:
        try:
            await redis_client.connect()
        except (RedisError, OSError) as e:
            logger.warning(f"Category cache unavailable, continuing without it: {e}")
            return None
    return redis_client


async def cache_status() -> str:
    """Cache state reported by the health endpoint"""
    if not settings.cache_enabled:
        return "disabled"
    client = await get_redis()
    if client is not None and await client.health_check():
        return "operational"
    return "unavailable"


async def close_redis() -> None:
    """Close Redis connection on app shutdown"""
    await redis_client.disconnect()
