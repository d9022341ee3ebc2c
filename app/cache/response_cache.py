"""Read-through response cache keyed by (operation, params).

Keys look like ``blog-posts:1:5`` and ``blog-post:<id>``. Values are
JSON-compatible dicts. An entry older than ``stale_seconds`` is treated as
absent. ``invalidate_prefix(operation)`` drops every entry of that operation.

Two backends:
- InMemoryResponseCache: process-local, thread-safe.
- RedisResponseCache: shared, entries expire through Redis TTL; falls back to
  an in-memory cache when Redis is unreachable.
"""
from __future__ import annotations

import json
import threading
import time
from typing import Any, Dict, Optional, Protocol, Tuple, Union

import redis

from app.config import CACHE_SETTINGS
from app.utils import get_logger

logger = get_logger(__name__)


def cache_key(operation: str, *params: Any) -> str:
    return ":".join([operation, *(str(p) for p in params)])


class ResponseCache(Protocol):
    def get(self, key: str) -> Optional[Dict[str, Any]]: ...
    def set(self, key: str, value: Dict[str, Any]) -> None: ...
    def invalidate_prefix(self, operation: str) -> int: ...
    def clear(self) -> None: ...


class InMemoryResponseCache:
    def __init__(self, stale_seconds: Optional[float] = None) -> None:
        self.stale_seconds = float(stale_seconds if stale_seconds is not None else CACHE_SETTINGS["stale_seconds"])  # type: ignore[arg-type]
        self._entries: dict[str, Tuple[float, Dict[str, Any]]] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if time.monotonic() - stored_at > self.stale_seconds:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Dict[str, Any]) -> None:
        with self._lock:
            self._entries[key] = (time.monotonic(), value)

    def invalidate_prefix(self, operation: str) -> int:
        with self._lock:
            doomed = [k for k in self._entries if k == operation or k.startswith(f"{operation}:")]
            for k in doomed:
                del self._entries[k]
            return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def snapshot(self) -> dict:
        with self._lock:
            return {"backend": "memory", "entries": len(self._entries)}


class RedisResponseCache:
    def __init__(self, stale_seconds: Optional[float] = None) -> None:
        self.stale_seconds = float(stale_seconds if stale_seconds is not None else CACHE_SETTINGS["stale_seconds"])  # type: ignore[arg-type]
        self._redis_url = str(CACHE_SETTINGS.get("redis_url", "redis://localhost:6379/0"))
        self._prefix = str(CACHE_SETTINGS.get("key_prefix", "blog:cache:"))
        self._health_check_timeout = float(CACHE_SETTINGS.get("redis_health_check_timeout", 2.0))  # type: ignore[arg-type]
        self._fallback = InMemoryResponseCache(self.stale_seconds)
        self._redis_client: Optional[redis.Redis] = None
        self._is_redis_active = False
        self._init_redis_client()

    def _init_redis_client(self) -> None:
        try:
            self._redis_client = redis.from_url(self._redis_url, socket_connect_timeout=self._health_check_timeout)
            self._redis_client.ping()
            self._is_redis_active = True
            logger.info("Connected to Redis response cache", url=self._redis_url)
        except (redis.RedisError, ConnectionError) as e:
            self._redis_client = None
            self._is_redis_active = False
            logger.warning("Failed to connect to Redis, using in-memory response cache", error=str(e))

    def health_check(self) -> bool:
        if self._redis_client is None:
            self._init_redis_client()
            return self._is_redis_active
        try:
            self._redis_client.ping()
            if not self._is_redis_active:
                logger.info("Redis connection restored")
            self._is_redis_active = True
        except (redis.RedisError, ConnectionError) as e:
            if self._is_redis_active:
                logger.warning("Redis connection lost, using in-memory response cache", error=str(e))
            self._is_redis_active = False
        return self._is_redis_active

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def _mark_down(self, error: Exception) -> None:
        logger.warning("Redis response cache operation failed", error=str(error))
        self._is_redis_active = False

    def _redis_available(self) -> bool:
        # Pinged before every operation; a failed ping routes this call to the fallback.
        return self.health_check() and self._redis_client is not None

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        if not self._redis_available():
            return self._fallback.get(key)
        try:
            raw = self._redis_client.get(self._full_key(key))
        except (redis.RedisError, ConnectionError) as e:
            self._mark_down(e)
            return self._fallback.get(key)
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return json.loads(raw)

    def set(self, key: str, value: Dict[str, Any]) -> None:
        if not self._redis_available():
            self._fallback.set(key, value)
            return
        try:
            ttl = max(int(self.stale_seconds), 1)
            self._redis_client.set(self._full_key(key), json.dumps(value, default=str), ex=ttl)
        except (redis.RedisError, ConnectionError) as e:
            self._mark_down(e)
            self._fallback.set(key, value)

    def invalidate_prefix(self, operation: str) -> int:
        removed = self._fallback.invalidate_prefix(operation)
        if not self._redis_available():
            return removed
        try:
            keys = [self._full_key(operation)]
            keys.extend(self._redis_client.scan_iter(match=f"{self._full_key(operation)}:*"))
            removed += int(self._redis_client.delete(*keys) or 0)
        except (redis.RedisError, ConnectionError) as e:
            self._mark_down(e)
        return removed

    def clear(self) -> None:
        self._fallback.clear()
        if not self._redis_available():
            return
        try:
            keys = list(self._redis_client.scan_iter(match=f"{self._prefix}*"))
            if keys:
                self._redis_client.delete(*keys)
        except (redis.RedisError, ConnectionError) as e:
            self._mark_down(e)

    def snapshot(self) -> dict:
        return {"backend": "redis", "redis_active": self._is_redis_active}


def create_response_cache() -> Union[InMemoryResponseCache, RedisResponseCache]:
    """Create the cache backend selected by CACHE_SETTINGS."""
    if CACHE_SETTINGS.get("use_redis", False):
        cache = RedisResponseCache()
        if cache.health_check():
            logger.info("Using Redis-backed response cache")
            return cache
        logger.warning("Redis response cache requested but unreachable; using in-memory cache")
    logger.info("Using in-memory response cache")
    return InMemoryResponseCache()


__all__ = [
    "cache_key",
    "ResponseCache",
    "InMemoryResponseCache",
    "RedisResponseCache",
    "create_response_cache",
]
