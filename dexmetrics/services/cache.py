# dexmetrics/services/cache.py

from typing import Any, Callable, Dict, Hashable, Optional, Tuple, TypeVar
import threading
import time

from ..core.logging import LoggingMixin
from ..types.config import CacheConfig

T = TypeVar('T')

_MISSING = object()


class AggregateCache(LoggingMixin):
    """
    Process-wide TTL cache for computed aggregates.

    Entries are keyed by tuples such as ``("price_history", category, range)``.
    Invalidation is global: any write to the transaction log clears every
    entry. A value computed while an invalidation happened is returned to its
    caller but never stored.
    """

    def __init__(self, config: CacheConfig = None, clock: Callable[[], float] = time.monotonic):
        config = config or CacheConfig()
        self.ttl = config.ttl_seconds
        self.maxsize = config.max_entries
        self._clock = clock
        self._store: Dict[Hashable, Tuple[float, Any]] = {}
        self._generation = 0
        self._lock = threading.Lock()

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            rec = self._store.get(key)
            if rec is None:
                return default
            expires_at, value = rec
            if expires_at <= self._clock():
                self._store.pop(key, None)
                return default
            return value

    def set(self, key: Hashable, value: Any, ttl_seconds: Optional[float] = None) -> None:
        with self._lock:
            self._put(key, value, ttl_seconds)

    def get_or_set(self, key: Hashable, compute: Callable[[], T], force: bool = False,
                   ttl_seconds: Optional[float] = None) -> T:
        if not force:
            cached = self.get(key, _MISSING)
            if cached is not _MISSING:
                return cached

        with self._lock:
            generation = self._generation

        value = compute()

        with self._lock:
            if generation == self._generation:
                self._put(key, value, ttl_seconds)
        return value

    def invalidate_all(self) -> None:
        with self._lock:
            dropped = len(self._store)
            self._store.clear()
            self._generation += 1
        self.log_debug("Aggregate cache invalidated", entry_count=dropped)

    def clear(self) -> None:
        self.invalidate_all()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def _put(self, key: Hashable, value: Any, ttl_seconds: Optional[float]) -> None:
        if self.maxsize <= 0:
            return
        if key not in self._store and len(self._store) >= self.maxsize:
            self._store.pop(next(iter(self._store)))
        ttl = self.ttl if ttl_seconds is None else ttl_seconds
        self._store[key] = (self._clock() + ttl, value)
