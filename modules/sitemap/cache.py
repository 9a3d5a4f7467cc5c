"""Sitemap cache: the single persisted blob and the single-flight guard."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, Optional, Protocol, Tuple, Union

from modules.sitemap.errors import SitemapBuildTimeout

logger = logging.getLogger(__name__)

CACHE_KEY = "sitemap"


class SitemapCache(Protocol):
    def exists(self, key: str) -> bool: ...

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryCache:
    """In-process cache, optional TTL (None = never expires).

    ttl may be a callable, read on every access so option changes apply.
    """

    def __init__(self, ttl: Union[None, float, Callable[[], Optional[float]]] = None):
        self.ttl = ttl
        self._data: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.RLock()

    def _expired(self, stored_at: float) -> bool:
        ttl = self.ttl() if callable(self.ttl) else self.ttl
        return ttl is not None and time.monotonic() - stored_at > ttl

    def exists(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return None
            value, stored_at = item
            if self._expired(stored_at):
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = (value, time.monotonic())

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._data.clear()


class SingleFlight:
    """At most one build per key; other callers wait for it."""

    def __init__(self):
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def do(
        self,
        key: str,
        cache: SitemapCache,
        build: Callable[[], str],
        timeout: Optional[float] = None,
    ) -> str:
        """Return the cached value for key, building it at most once at a time."""
        lock = self._lock_for(key)
        acquired = lock.acquire(timeout=timeout) if timeout else lock.acquire()
        if not acquired:
            raise SitemapBuildTimeout(
                f"Timed out after {timeout}s waiting for the '{key}' build."
            )
        try:
            # a concurrent caller may have filled the cache while we waited
            cached = cache.get(key)
            if cached is not None:
                logger.debug("single-flight '%s' → served by concurrent build", key)
                return cached
            value = build()
            cache.set(key, value)
            return value
        finally:
            lock.release()
