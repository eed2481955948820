# storage/cache.py

import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from typing import Protocol

from ._utils import max_cache_entries, ttl_seconds


class Cache(Protocol):
    """
    Minimal key/value cache interface consumed by the resolvers.
    """

    def get(self, key: Hashable, default: object = None) -> object: ...

    def set(self, key: Hashable, value: object) -> None: ...

    def has(self, key: Hashable) -> bool: ...

    def invalidate(self, key: Hashable) -> None: ...


class MemoryCache:
    """
    Bounded in-process cache with least-recently-used eviction and an optional
    time-to-live.

    Entries are stored with their insertion time; an expired entry behaves as
    absent and is dropped on access. A ``ttl`` of 0 disables expiry.
    """

    __slots__ = ("_clock", "_entries", "_lock", "_max_entries", "_ttl")

    def __init__(
        self,
        *,
        max_entries: int | None = None,
        ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            max_entries: Entry bound; defaults to ``CACHE_MAX_ENTRIES``.
            ttl: Time-to-live in seconds; defaults to ``CACHE_TTL_MINUTES``.
            clock: Monotonic time source, injectable for tests.
        """
        self._max_entries = max_entries if max_entries is not None else max_cache_entries()
        self._ttl = ttl if ttl is not None else ttl_seconds()
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, object]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: Hashable, default: object = None) -> object:
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return default
            self._entries.move_to_end(key)
            return entry[1]

    def set(self, key: Hashable, value: object) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def has(self, key: Hashable) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _live_entry(self, key: Hashable) -> tuple[float, object] | None:
        """
        Return the entry for ``key`` unless it is missing or expired.

        Expired entries are removed as a side effect. Caller holds the lock.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, _ = entry
        if self._ttl and self._clock() - stored_at >= self._ttl:
            del self._entries[key]
            return None

        return entry
