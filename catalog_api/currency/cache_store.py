"""
==============================================================================
Cache Store Module
==============================================================================

Key -> string storage with per-entry time-to-live.

Implementations:
---------------
- InMemoryCacheStore: Process-local, lock-protected dict (development, tests)
- RedisCacheStore: Shared store via redis-py (SET key value EX ttl)

Both are safe for concurrent use from request threads. Expiry is enforced by
the store, callers never see an expired value.

==============================================================================
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, Optional, Protocol, Tuple

import redis

from catalog_api.config import Settings
from catalog_api.core import exceptions


# Module logger
logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    """Contract consumed by the exchange-rate cache."""

    def get(self, key: str) -> Optional[str]:
        """Return the live value for key, or None."""
        ...

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store value under key, replacing any previous value."""
        ...

    def close(self) -> None:
        """Release connections held by the store."""
        ...


class InMemoryCacheStore:
    """
    In-process cache store.

    Entries are (expires_at, value) pairs; expired entries are dropped
    lazily on read.

    Attributes:
        _entries: key -> (expires_at, value)
        _clock: Monotonic time source, injectable for tests
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: Dict[str, Tuple[float, str]] = {}
        self._clock = clock
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        with self._lock:
            self._entries[key] = (self._clock() + ttl_seconds, value)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def close(self) -> None:
        self.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class RedisCacheStore:
    """
    Redis-backed cache store.

    Redis errors are wrapped into CacheUnavailable so they surface as a
    dependency failure rather than a bare driver exception.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._redis = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheStore":
        """Create a store with a pooled client for url."""
        logger.info("Connecting cache store to Redis...")
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def get(self, key: str) -> Optional[str]:
        try:
            return self._redis.get(key)
        except redis.RedisError as e:
            logger.error(f"Redis GET failed for {key}: {e}")
            raise exceptions.cache_unavailable(str(e)) from e

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self._redis.set(key, value, ex=ttl_seconds)
        except redis.RedisError as e:
            logger.error(f"Redis SET failed for {key}: {e}")
            raise exceptions.cache_unavailable(str(e)) from e

    def close(self) -> None:
        """Release the connection pool."""
        self._redis.close()


def create_cache_store(settings: Settings) -> CacheStore:
    """
    Build the cache store selected by settings.cache_backend.

    Args:
        settings: Application settings

    Returns:
        InMemoryCacheStore or RedisCacheStore
    """
    if settings.cache_backend == "redis":
        return RedisCacheStore.from_url(settings.redis_url)

    logger.info("Using in-memory cache store")
    return InMemoryCacheStore()
