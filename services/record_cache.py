"""Short-lived cache of readiness records in front of the store."""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

from logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class RecordCache(Generic[T]):
    """
    Time-to-live cache.

    Entries expire ``ttl`` seconds after they were stored. A ``ttl`` of 0
    disables caching. ``clock`` is injectable so expiry can be tested
    without sleeping.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        if ttl < 0:
            raise ValueError(f"Cache TTL cannot be negative, got {ttl}")
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, T]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[T]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl:
                del self._entries[key]
                return None
            return value

    def put(self, key: Hashable, value: T) -> None:
        if self.ttl == 0:
            return
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug(f"Cleared {count} cached record(s)")
