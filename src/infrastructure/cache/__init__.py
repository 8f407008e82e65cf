"""
Cache Infrastructure
====================

Key-value cache used by the HTTP layer for ticket lists and report status.

Uses Redis when a URL is configured, and an in-process TTL store otherwise.
Values must be JSON-serializable; both backends store them encoded so a
cached payload never aliases a live object.
"""

import json
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import redis.asyncio as aioredis

from src.config import settings
from src.core import ConfigurationException
from src.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class ICache(ABC):
    """Interface for cache operations."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get a value, or None on miss/expiry."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Store a value with a TTL."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Invalidate a key (no-op when absent)."""

    async def ping(self) -> bool:
        """Check the backend is reachable."""
        return True

    async def close(self) -> None:
        """Release backend resources."""


class InMemoryCache(ICache):
    """Thread-safe in-process cache with TTL support."""

    def __init__(self, default_ttl_seconds: int = 3600):
        self.default_ttl_seconds = default_ttl_seconds
        self._store: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    async def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            raw, expires_at = entry
            if time.monotonic() > expires_at:
                del self._store[key]
                return None
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ttl = ttl_seconds or self.default_ttl_seconds
        raw = json.dumps(value)
        with self._lock:
            self._store[key] = (raw, time.monotonic() + ttl)

    async def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


class RedisCache(ICache):
    """Redis-backed cache using redis.asyncio."""

    def __init__(self, url: str, default_ttl_seconds: int = 3600):
        self.default_ttl_seconds = default_ttl_seconds
        try:
            self._client = aioredis.from_url(url, decode_responses=True)
        except ValueError as e:
            raise ConfigurationException(f"Invalid redis_url: {e}") from e

    async def get(self, key: str) -> Optional[Any]:
        raw = await self._client.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Discarding undecodable cache entry", extra={"cache_key": key})
            return None

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        await self._client.set(key, json.dumps(value), ex=ttl_seconds or self.default_ttl_seconds)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def ping(self) -> bool:
        return bool(await self._client.ping())

    async def close(self) -> None:
        await self._client.aclose()


def create_cache(redis_url: Optional[str] = None, ttl_seconds: Optional[int] = None) -> ICache:
    """
    Build the configured cache backend.

    Args:
        redis_url: Override for settings.redis_url
        ttl_seconds: Override for settings.cache_ttl_seconds

    Returns:
        ICache: RedisCache when a URL is configured, InMemoryCache otherwise
    """
    url = redis_url if redis_url is not None else settings.redis_url
    ttl = ttl_seconds or settings.cache_ttl_seconds

    if url:
        logger.info("Cache: using Redis", extra={"redis_host": url.split("@")[-1]})
        return RedisCache(url, default_ttl_seconds=ttl)

    logger.info("Cache: using in-memory store")
    return InMemoryCache(default_ttl_seconds=ttl)
