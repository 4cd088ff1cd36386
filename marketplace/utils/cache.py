import decimal
import functools
import json
import logging
from datetime import date, datetime
from typing import Any, Callable

import redis

from marketplace.core.config import settings

logger = logging.getLogger(__name__)


class CacheJSONEncoder(json.JSONEncoder):
    """Encodes Decimal and datetime values found in cached payloads."""

    def default(self, obj):
        if isinstance(obj, decimal.Decimal):
            return float(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return super().default(obj)


class Cache:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._client = None
            cls._instance._ttl = settings.cache.ttl_seconds
            if settings.cache.redis_url:
                try:
                    cls._instance._client = redis.from_url(
                        settings.cache.redis_url,
                        decode_responses=True,
                        socket_timeout=settings.cache.redis_socket_timeout,
                        socket_connect_timeout=settings.cache.redis_socket_connect_timeout,
                        retry_on_timeout=settings.cache.redis_retry_on_timeout,
                    )
                    logger.info(f"Redis cache initialized with URL: {settings.cache.redis_url}")
                except redis.RedisError as e:
                    logger.warning(f"Failed to initialize Redis cache: {str(e)}. Caching will be disabled.")
        return cls._instance

    @property
    def enabled(self) -> bool:
        return self._client is not None

    # ------------------------------------------------------------------
    def get(self, key: str):
        if self._client is None:
            return None

        try:
            val = self._client.get(key)
            if val:
                logger.debug(f"Cache hit for key: {key}")
                return json.loads(val)
            logger.debug(f"Cache miss for key: {key}")
            return None
        except redis.RedisError as e:
            logger.error(f"Error retrieving from cache: {str(e)}")
            return None

    def set(self, key: str, value: Any, ttl: int | None = None):
        if self._client is None:
            return

        try:
            self._client.set(key, json.dumps(value, cls=CacheJSONEncoder), ex=ttl or self._ttl)
            logger.debug(f"Set cache for key: {key}, TTL: {ttl or self._ttl}s")
        except (redis.RedisError, TypeError) as e:
            logger.error(f"Error setting cache: {str(e)}")

    def invalidate(self, key_prefix: str):
        if self._client is None:
            return

        try:
            keys = list(self._client.scan_iter(f"{key_prefix}*"))
            if keys:
                self._client.delete(*keys)
                logger.debug(f"Invalidated {len(keys)} keys with prefix: {key_prefix}")
        except redis.RedisError as e:
            logger.error(f"Error invalidating cache: {str(e)}")

    # ------------------------------------------------------------------
    def cacheable(self, key_builder: Callable, ttl: int | None = None):
        """Decorator for caching JSON-serialisable service results."""

        def decorator(fn):
            @functools.wraps(fn)
            def wrapper(*args, **kwargs):
                if self._client is None:
                    return fn(*args, **kwargs)

                key = key_builder(*args, **kwargs)
                cached = self.get(key)
                if cached is not None:
                    return cached
                result = fn(*args, **kwargs)
                self.set(key, result, ttl)
                return result

            return wrapper

        return decorator


cache = Cache()
