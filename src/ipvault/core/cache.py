"""Bounded, time-expiring in-memory cache.

This module provides the response cache that sits between the lookup API
and the network. Entries expire ``ttl`` seconds after insertion and the
cache never holds more than ``max_size`` entries.

Key Features:
- Lazy expiry: an expired entry is dropped when a ``get`` finds it, there
  is no background sweeper
- Insertion-order eviction: when a new key arrives at capacity, the
  least-recently-inserted entry is evicted
- Thread-safe: every operation runs under one lock

Example:
    >>> cache = BoundedExpiringCache(max_size=2, ttl=100)
    >>> cache.set("a", 1)
    >>> cache.set("b", 2)
    >>> cache.set("c", 3)
    >>> cache.get("a") is None
    True
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

from ipvault.shared.constants import CacheConfig
from ipvault.shared.errors import ErrorContext, create_config_error
from ipvault.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A cached value and the time it was stored."""

    key: str
    value: Any
    inserted_at: float

    def is_expired(self, now: float, ttl: float) -> bool:
        """An entry is valid while ``now - inserted_at < ttl``."""
        return now - self.inserted_at >= ttl


class BoundedExpiringCache:
    """Key/value store bounded by entry count and entry age.

    Args:
        max_size: Maximum number of live entries (must be positive)
        ttl: Time-to-live in seconds (must not be negative). A ttl of 0
            makes every entry expire immediately.
        clock: Monotonic time source, injectable for tests

    Raises:
        ConfigurationError: If max_size or ttl are invalid
    """

    def __init__(
        self,
        max_size: int = CacheConfig.DEFAULT_MAX_SIZE,
        ttl: float = CacheConfig.DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        context = ErrorContext(
            operation="cache_init",
            additional_data={"max_size": repr(max_size), "ttl": repr(ttl)},
        )

        # bool is an int subclass; reject it along with non-integers
        if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size <= 0:
            error = create_config_error(
                f"max_size must be a positive integer, got: {max_size!r}",
                config_key="max_size",
                operation="cache_init",
            )
            log_operation_error(logger, error, additional_context=context)
            raise error

        if isinstance(ttl, bool) or not isinstance(ttl, (int, float)) or ttl < 0:
            error = create_config_error(
                f"ttl must be a non-negative number of seconds, got: {ttl!r}",
                config_key="ttl",
                operation="cache_init",
            )
            log_operation_error(logger, error, additional_context=context)
            raise error

        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        """Return the live value for ``key``, or None.

        An expired entry is removed from the store as a side effect.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock(), self.ttl):
                del self._entries[key]
                logger.debug("Cache entry expired: %s", key)
                return None
            return entry.value

    def set(self, key: str, value: Any) -> None:
        """Insert or overwrite ``key``.

        Overwriting refreshes the insertion time and never evicts. Inserting
        a new key at capacity evicts the least-recently-inserted entry.
        """
        with self._lock:
            now = self._clock()
            if key in self._entries:
                # Refreshed entries become the newest insertion
                self._entries.move_to_end(key)
            elif len(self._entries) >= self.max_size:
                # Oldest insertion sits at the front
                evicted_key, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cache entry at capacity: %s", evicted_key)
            self._entries[key] = CacheEntry(key=key, value=value, inserted_at=now)

    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if an entry was removed."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[arg-type]
            return entry is not None and not entry.is_expired(self._clock(), self.ttl)

    def __len__(self) -> int:
        """Number of live (unexpired) entries."""
        with self._lock:
            now = self._clock()
            return sum(
                1 for entry in self._entries.values() if not entry.is_expired(now, self.ttl)
            )

    def __repr__(self) -> str:
        return (
            f"BoundedExpiringCache(max_size={self.max_size}, ttl={self.ttl}, "
            f"size={len(self._entries)})"
        )
