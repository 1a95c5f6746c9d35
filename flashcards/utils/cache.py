"""Lookup cache for external sentence and conjugation services.

Entries live in process memory and are mirrored to Redis when a
``REDIS_URL`` is configured and the ``redis`` package is installed.
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import json
import threading
import time
from dataclasses import dataclass
from typing import Any

from loguru import logger

from flashcards.config import settings


def build_cache_key(**components: Any) -> str:
    """Return a stable hash for the provided lookup parameters."""

    payload = json.dumps(components, sort_keys=True, default=str)
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


_redis_module = None
if importlib.util.find_spec("redis") is not None:
    _redis_module = importlib.import_module("redis")


@dataclass
class _CacheEntry:
    expires_at: float | None
    payload: str


class CacheBackend:
    """Namespaced JSON cache with an optional Redis mirror."""

    def __init__(self, redis_url: str | None = None) -> None:
        self._lock = threading.Lock()
        self._local: dict[str, _CacheEntry] = {}
        self._redis = None
        if redis_url and _redis_module is not None:
            self._redis = _redis_module.Redis.from_url(redis_url, decode_responses=True)

    def _drop_redis(self, exc: Exception) -> None:
        logger.warning(f"Redis cache disabled after error: {exc}")
        self._redis = None

    def get(self, namespace: str, key: str) -> Any | None:
        name = f"{namespace}:{key}"
        if self._redis is not None:
            try:
                value = self._redis.get(name)
            except Exception as exc:  # redis raises many connection error types
                self._drop_redis(exc)
            else:
                if value is not None:
                    return json.loads(value)
        with self._lock:
            entry = self._local.get(name)
            if entry is None:
                return None
            if entry.expires_at is not None and entry.expires_at < time.time():
                del self._local[name]
                return None
            return json.loads(entry.payload)

    def set(self, namespace: str, key: str, value: Any, ttl_seconds: int) -> None:
        name = f"{namespace}:{key}"
        payload = json.dumps(value, default=str)
        if self._redis is not None:
            try:
                self._redis.set(name, payload, ex=ttl_seconds)
            except Exception as exc:
                self._drop_redis(exc)
        with self._lock:
            expires_at = time.time() + ttl_seconds if ttl_seconds else None
            self._local[name] = _CacheEntry(expires_at=expires_at, payload=payload)

    def clear(self) -> None:
        """Reset the in-memory cache (used between tests)."""

        with self._lock:
            self._local.clear()


cache_backend = CacheBackend(str(settings.REDIS_URL) if settings.REDIS_URL else None)


__all__ = ["cache_backend", "CacheBackend", "build_cache_key"]
