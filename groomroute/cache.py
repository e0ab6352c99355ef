"""
Redis caching utilities for lookups that are slow or rate limited upstream
(geocoding results mostly). Every failure degrades to a cache miss.
"""

import json
import logging
from typing import Any, Optional

import redis

from . import rate_limiter

logger = logging.getLogger(__name__)


class Cache:
    """Redis cache wrapper with automatic serialization"""

    def __init__(self, namespace: str = "groomroute"):
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> Optional[Any]:
        client = rate_limiter.get_redis_client()
        if client is None:
            return None

        try:
            value = client.get(self._key(key))
        except redis.RedisError as e:
            logger.error(f"❌ Cache get error for {key}: {e}")
            return None

        if value is None:
            logger.debug(f"❌ Cache MISS: {key}")
            return None
        logger.debug(f"✅ Cache HIT: {key}")
        return json.loads(value)

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        """Set value in cache with TTL (default 1 hour)"""
        client = rate_limiter.get_redis_client()
        if client is None:
            return False

        try:
            client.setex(self._key(key), ttl, json.dumps(value))
        except redis.RedisError as e:
            logger.error(f"❌ Cache set error for {key}: {e}")
            return False
        logger.debug(f"✅ Cache SET: {key} (TTL: {ttl}s)")
        return True

    def delete(self, key: str) -> bool:
        client = rate_limiter.get_redis_client()
        if client is None:
            return False

        try:
            client.delete(self._key(key))
        except redis.RedisError as e:
            logger.error(f"❌ Cache delete error for {key}: {e}")
            return False
        return True


# Global cache instance
cache = Cache()
