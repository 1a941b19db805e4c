"""
Redis caching utilities for the dashboard summaries
"""
import json
import logging
from typing import Optional, Any
import redis.asyncio as redis

from config import settings

logger = logging.getLogger(__name__)

DASHBOARD_KEY_PREFIX = "dashboard"


class CacheManager:
    """Redis cache manager for async operations"""

    def __init__(self):
        self.redis_client: Optional[redis.Redis] = None
        self.enabled = False

    async def connect(self, redis_url: Optional[str] = None):
        """Connect to Redis"""
        redis_url = redis_url or settings.REDIS_URL
        if not redis_url:
            logger.info("Redis URL not configured. Caching disabled.")
            self.enabled = False
            return

        try:
            self.redis_client = redis.from_url(
                redis_url,
                encoding="utf-8",
                decode_responses=True
            )
            await self.redis_client.ping()
            self.enabled = True
        except (redis.RedisError, OSError) as e:
            logger.warning(f"Redis connection failed: {e}. Continuing without cache.")
            self.redis_client = None
            self.enabled = False

    async def disconnect(self):
        """Disconnect from Redis"""
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None
        self.enabled = False

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        if not self.enabled or not self.redis_client:
            return None

        try:
            value = await self.redis_client.get(key)
            if value:
                return json.loads(value)
            return None
        except redis.RedisError as e:
            logger.warning(f"Cache get error: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: int = 3600):
        """Set value in cache with TTL (default 1 hour)"""
        if not self.enabled or not self.redis_client:
            return False

        try:
            serialized = json.dumps(value, default=str)
            await self.redis_client.setex(key, ttl, serialized)
            return True
        except redis.RedisError as e:
            logger.warning(f"Cache set error: {e}")
            return False

    async def delete_pattern(self, pattern: str):
        """Delete all keys matching pattern"""
        if not self.enabled or not self.redis_client:
            return False

        try:
            keys = await self.redis_client.keys(pattern)
            if keys:
                await self.redis_client.delete(*keys)
            return True
        except redis.RedisError as e:
            logger.warning(f"Cache delete pattern error: {e}")
            return False


# Global cache manager instance
cache_manager = CacheManager()


def dashboard_cache_key(day) -> str:
    return f"{DASHBOARD_KEY_PREFIX}:summary:{day.isoformat()}"


async def invalidate_dashboard():
    """Drop cached summaries after writes that change totals"""
    await cache_manager.delete_pattern(f"{DASHBOARD_KEY_PREFIX}:*")
