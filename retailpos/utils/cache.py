import json
import logging
import redis
from typing import Iterable, Optional, Any

from retailpos.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Create Redis client
redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)


class CacheService:
    """
    Redis cache for catalog lookups.

    The cache is advisory: every failure to reach Redis degrades to a miss,
    and the database stays the source of truth for stock and prices.
    """

    def __init__(self, client: redis.Redis = None, ttl: int = None):
        self.client = client or redis_client
        self.ttl = ttl or settings.CACHE_TTL

    def _make_key(self, prefix: str, key: str) -> str:
        """Create a namespaced cache key."""
        return f"{prefix}:{key}"

    def get(self, prefix: str, key: str) -> Optional[Any]:
        """
        Get a value from cache.

        Args:
            prefix: Cache key prefix (e.g., 'product')
            key: Unique identifier

        Returns:
            Cached value or None if not found
        """
        cache_key = self._make_key(prefix, key)
        try:
            value = self.client.get(cache_key)
            if value:
                return json.loads(value)
            return None
        except (redis.RedisError, json.JSONDecodeError) as e:
            logger.debug(f"Cache read failed for {cache_key}: {e}")
            return None

    def set(self, prefix: str, key: str, value: Any, ttl: int = None) -> bool:
        """
        Set a value in cache with TTL.

        Decimal and datetime values are stored as strings.
        """
        cache_key = self._make_key(prefix, key)
        ttl = ttl or self.ttl
        try:
            serialized = json.dumps(value, default=str)
            self.client.setex(cache_key, ttl, serialized)
            return True
        except (redis.RedisError, TypeError) as e:
            logger.debug(f"Cache write failed for {cache_key}: {e}")
            return False

    def delete(self, prefix: str, key: str) -> bool:
        """Delete a value from cache."""
        cache_key = self._make_key(prefix, key)
        try:
            self.client.delete(cache_key)
            return True
        except redis.RedisError:
            return False

    def delete_many(self, prefix: str, keys: Iterable[Any]) -> int:
        """
        Delete several keys under one prefix, e.g. every product a checkout touched.

        Returns:
            Number of keys deleted
        """
        cache_keys = [self._make_key(prefix, str(k)) for k in keys]
        if not cache_keys:
            return 0
        try:
            return self.client.delete(*cache_keys)
        except redis.RedisError:
            return 0

    def ping(self) -> bool:
        return bool(self.client.ping())


# Singleton cache service instance
cache_service = CacheService()
