"""
Caller-owned memoization for quotes.

The pricing functions never cache. A UI that re-quotes the same inputs many
times per second can wrap calls in a `QuoteCache` it owns. Entries are keyed on
the function plus its full argument tuple, so fresh reserves or curve
parameters always miss.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Hashable, Optional, Tuple, TypeVar

import structlog


logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_CACHE_SIZE = 50
DEFAULT_CACHE_TTL_SECONDS = 2.0


class QuoteCache:
    """
    Bounded, time-limited cache of pure quote results.

    Args:
        max_size: Maximum number of entries; the oldest entry is evicted first
        ttl_seconds: Entry lifetime
        clock: Monotonic clock, injectable for tests
    """

    def __init__(
        self,
        max_size: int = DEFAULT_CACHE_SIZE,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[Tuple[Hashable, ...], Tuple[Any, float]]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key_for(fn: Callable[..., Any], args: Tuple[Any, ...], kwargs: dict) -> Tuple[Hashable, ...]:
        return (fn.__module__, fn.__qualname__, args, tuple(sorted(kwargs.items())))

    def _lookup(self, key: Tuple[Hashable, ...]) -> Tuple[bool, Any]:
        entry = self._entries.get(key)
        if entry is None:
            return False, None
        value, stored_at = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return False, None
        return True, value

    def _store(self, key: Tuple[Hashable, ...], value: Any) -> None:
        self._entries.pop(key, None)
        while len(self._entries) >= self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("quote_cache_evicted", fn=evicted[1])
        self._entries[key] = (value, self._clock())

    def call(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Return `fn(*args, **kwargs)`, reusing a fresh cached result when present."""
        key = self.key_for(fn, args, kwargs)
        with self._lock:
            found, value = self._lookup(key)
            if found:
                self.hits += 1
                return value
            self.misses += 1

        # Outside the lock; concurrent misses on one key store equal values.
        value = fn(*args, **kwargs)
        with self._lock:
            self._store(key, value)
        return value

    def get(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Optional[Any]:
        key = self.key_for(fn, args, kwargs)
        with self._lock:
            _, value = self._lookup(key)
            return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
