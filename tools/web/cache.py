"""Thread-safe bounded TTL cache and the fallback-aware result cache on top of it."""

import hashlib
import threading
import time
from collections import OrderedDict
from typing import Any, Callable

from models.search_result import AnswerResult
from utils.logger import get_logger, log_extra

logger = get_logger(__name__)


class InMemoryTTLCache:
    """
    Thread-safe in-memory cache with TTL and a maximum entry count.

    Uses sha256 hash of text as key (first 16 chars) and threading.Lock
    for concurrent access safety. When full, the least recently used entry
    (by read or write) is evicted.
    """

    def __init__(self, ttl_seconds: int, max_entries: int = 1000, clock: Callable[[], float] = time.monotonic):
        """
        Initialize cache with TTL.

        Args:
            ttl_seconds: Time to live in seconds for cached entries
            max_entries: Upper bound on stored entries
            clock: Monotonic time source (injectable for tests)
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._cache: OrderedDict[str, tuple[Any, float]] = OrderedDict()
        self._lock = threading.Lock()
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock

    def _make_key(self, text: str) -> str:
        """Generate cache key from text using sha256 hash."""
        return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]

    def get(self, text: str) -> Any | None:
        """
        Get cached value if exists and not expired.

        Args:
            text: Text to use as cache key

        Returns:
            Cached value if exists and valid, None otherwise
        """
        key = self._make_key(text)
        with self._lock:
            if key in self._cache:
                value, expiry = self._cache[key]
                if self._clock() < expiry:
                    self._cache.move_to_end(key)
                    return value
                del self._cache[key]
            return None

    def set(self, text: str, value: Any):
        """
        Store value in cache with TTL.

        Args:
            text: Text to use as cache key
            value: Value to cache
        """
        key = self._make_key(text)
        with self._lock:
            self._cache.pop(key, None)
            self._cache[key] = (value, self._clock() + self._ttl)
            while len(self._cache) > self._max_entries:
                self._cache.popitem(last=False)

    def delete(self, text: str) -> None:
        with self._lock:
            self._cache.pop(self._make_key(text), None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def clear(self):
        """Clear all cached entries."""
        with self._lock:
            self._cache.clear()


class ResultCache:
    """
    Cache-aside store of AnswerResults keyed by normalized query.

    Fallback results are refused on write and reported as misses on read.
    """

    def __init__(self, store: InMemoryTTLCache):
        self._store = store
        self._stats_lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, normalized_query: str, trace_id: str | None = None) -> AnswerResult | None:
        cached = self._store.get(normalized_query)
        if cached is not None and cached.is_fallback:
            logger.warning(
                "Fallback result found in cache, treating as miss",
                extra=log_extra(trace_id, query=normalized_query),
            )
            self._store.delete(normalized_query)
            cached = None

        with self._stats_lock:
            if cached is None:
                self.misses += 1
            else:
                self.hits += 1
        return cached

    def put(self, normalized_query: str, result: AnswerResult, trace_id: str | None = None) -> bool:
        """
        Store a result unless it is a fallback.

        Returns:
            True if the result was written
        """
        if result.is_fallback:
            logger.info(
                "Skipping cache write for fallback result",
                extra=log_extra(trace_id, query=normalized_query),
            )
            return False
        self._store.set(normalized_query, result)
        return True

    def stats(self) -> dict[str, int]:
        with self._stats_lock:
            return {"hits": self.hits, "misses": self.misses, "size": len(self._store)}

    def clear(self) -> None:
        self._store.clear()
