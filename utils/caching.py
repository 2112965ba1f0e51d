"""
Caching utilities for the city bus API.
Keeps the static stop and route lookups in a small in-process TTL cache and
builds the HTTP cache headers sent with each response.
"""

import threading
import time
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, Callable, Dict, Optional


class CacheEntry:
    """One cached value and when it stops being valid."""

    def __init__(self, value: Any, ttl_seconds: Optional[int] = None):
        self.value = value
        self.expires_at = time.monotonic() + ttl_seconds if ttl_seconds else None
        self.hits = 0

    def is_expired(self, now: Optional[float] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or time.monotonic()) >= self.expires_at


class InMemoryCache:
    """
    Thread-safe TTL cache.

    Sync handlers run in the server's threadpool, so every access goes
    through one lock. When max_entries is reached the oldest entry is dropped.
    """

    def __init__(self, default_ttl: Optional[int] = 300, max_entries: int = 1024):
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._stats = {'hits': 0, 'misses': 0, 'sets': 0, 'evictions': 0}

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_expired():
                del self._entries[key]
                self._stats['evictions'] += 1
                entry = None

            if entry is None:
                self._stats['misses'] += 1
                return None

            entry.hits += 1
            self._stats['hits'] += 1
            return entry.value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(value, self.default_ttl if ttl is None else ttl)
            self._entries.move_to_end(key)
            self._stats['sets'] += 1
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
                self._stats['evictions'] += 1

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._stats = dict.fromkeys(self._stats, 0)

    def cleanup_expired(self) -> int:
        """Drop expired entries; returns how many were removed."""
        now = time.monotonic()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
            self._stats['evictions'] += len(expired)
            return len(expired)

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            lookups = self._stats['hits'] + self._stats['misses']
            return {
                **self._stats,
                'total_requests': lookups,
                'hit_rate': self._stats['hits'] / lookups if lookups else 0,
                'cache_size': len(self._entries),
            }


_global_cache = InMemoryCache()


def cached(ttl: Optional[int] = None, key_func: Optional[Callable] = None):
    """
    Cache a function's results in the process-wide cache.

    Args:
        ttl: Seconds a result stays valid; None uses the cache default
        key_func: Builds the cache key from the call arguments

    Returns:
        Decorator; the wrapped function gains cache_clear()
    """
    def decorator(func: Callable) -> Callable:
        prefix = f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        def wrapper(*args, **kwargs):
            if key_func:
                key = f"{prefix}:{key_func(*args, **kwargs)}"
            else:
                key = f"{prefix}:{args!r}:{sorted(kwargs.items())!r}"

            result = _global_cache.get(key)
            if result is None:
                result = func(*args, **kwargs)
                _global_cache.set(key, result, ttl)
            return result

        wrapper.cache_clear = _global_cache.clear
        return wrapper

    return decorator


def get_cache_headers(ttl_seconds: Optional[int] = None) -> Dict[str, str]:
    """
    HTTP caching headers for a response.

    Static lookups get a public max-age; live data (buses, seats, sessions)
    passes None and is marked uncacheable.
    """
    if not ttl_seconds:
        return {
            'Cache-Control': 'no-cache, no-store, must-revalidate',
            'Pragma': 'no-cache',
            'Expires': '0',
        }

    expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)
    return {
        'Cache-Control': f'public, max-age={ttl_seconds}',
        'Expires': expires_at.strftime('%a, %d %b %Y %H:%M:%S GMT'),
    }


def get_global_cache() -> InMemoryCache:
    return _global_cache


def get_cache_stats() -> Dict[str, Any]:
    return _global_cache.get_stats()
