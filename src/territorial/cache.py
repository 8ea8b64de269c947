"""Bounded least-recently-used cache of rule verdicts."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Hashable

DEFAULT_CACHE_SIZE = 1_000


class RuleCache:
    """Thread-safe LRU map from a query key to an allow/deny verdict.

    Reads refresh recency, so the entry evicted on overflow is the one least
    recently accessed rather than least recently inserted. ``None`` keys mark
    queries that could not be keyed; they are never stored.
    """

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE) -> None:
        if max_size < 1:
            raise ValueError(f"Cache size must be at least 1, got {max_size}")
        self._max_size = max_size
        self._entries: OrderedDict[Hashable, bool] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, key: Hashable | None) -> bool | None:
        """Return the cached verdict for ``key`` and mark it most recently used."""
        if key is None:
            return None
        with self._lock:
            if key not in self._entries:
                return None
            self._entries.move_to_end(key)
            return self._entries[key]

    def put(self, key: Hashable | None, value: bool) -> None:
        if key is None:
            return
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_size:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        # Membership checks do not count as an access.
        with self._lock:
            return key in self._entries
