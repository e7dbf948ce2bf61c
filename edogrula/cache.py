"""Injectable caches for memoizing search payloads."""
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Optional, Protocol

DEFAULT_MAX_ENTRIES = 10_000


class SearchCache(Protocol):
    def get(self, key: Hashable) -> Optional[Any]:
        ...

    def set(self, key: Hashable, value: Any, ttl: float) -> None:
        ...


@dataclass
class CacheEntry:
    """Represents a cached value and its expiration."""

    value: Any
    expires_at: float

    def is_expired(self, now: Optional[float] = None) -> bool:
        timestamp = now if now is not None else time.monotonic()
        return timestamp >= self.expires_at


class TTLCache:
    """
    Lock-guarded TTL cache, safe to share between concurrent requests.

    Expired entries are swept on every write, and the store never holds more
    than `max_entries` items; when full, the oldest insertion is evicted.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        self.max_entries = max_entries
        self._store: Dict[Hashable, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            entry = self._store.get(key)
            if not entry:
                return None
            if entry.is_expired():
                self._store.pop(key, None)
                return None
            return entry.value

    def set(self, key: Hashable, value: Any, ttl: float) -> None:
        with self._lock:
            now = time.monotonic()
            self._sweep(now)
            self._store.pop(key, None)
            while len(self._store) >= self.max_entries:
                self._store.pop(next(iter(self._store)))
            self._store[key] = CacheEntry(value=value, expires_at=now + ttl)

    def _sweep(self, now: float) -> None:
        # Caller holds the lock
        expired = [k for k, entry in self._store.items() if entry.is_expired(now)]
        for k in expired:
            del self._store[k]

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()


class NullCache:
    """Cache that never stores anything."""

    def get(self, key: Hashable) -> Optional[Any]:
        return None

    def set(self, key: Hashable, value: Any, ttl: float) -> None:
        return None
