"""Lookup result models.

These models are what the lookup orchestrator hands back to its caller.
They are transient: the orchestrator keeps no reference to them.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class LookupSource(str, Enum):
    """Where a lookup result came from."""

    BOGON = "bogon"
    CACHE = "cache"
    NETWORK = "network"


@dataclass(frozen=True)
class LookupResult:
    """Result of a single-address lookup.

    Attributes:
        payload: Bogon marker (``{"ip": ..., "bogon": True}``) or the raw
            upstream payload
        source: Bogon short-circuit, cache hit or network fetch
    """

    payload: dict[str, Any]
    source: LookupSource

    @property
    def is_bogon(self) -> bool:
        return self.source is LookupSource.BOGON

    @classmethod
    def bogon(cls, ip: str) -> LookupResult:
        return cls(payload={"ip": ip, "bogon": True}, source=LookupSource.BOGON)


@dataclass(frozen=True)
class BatchEntry:
    """One key of a batch response, either a payload or an error marker.

    Attributes:
        key: Batch key as sent by the caller, e.g. ``"8.8.8.8/country"``
        payload: Upstream value for the key (dict, or a plain string for
            single-field keys), None when ``error`` is set
        error: Upstream error message for the key
        from_cache: True if the value was served from the cache
    """

    key: str
    payload: Any = None
    error: str | None = None
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def from_payload(cls, key: str, payload: Any, *, from_cache: bool = False) -> BatchEntry:
        """Tag an upstream value, recognising ``{"error": ...}`` objects."""
        if isinstance(payload, Mapping) and "error" in payload:
            error = payload["error"]
            if isinstance(error, Mapping):
                error = error.get("message") or error.get("title") or str(dict(error))
            return cls(key=key, error=str(error), from_cache=from_cache)
        return cls(key=key, payload=payload, from_cache=from_cache)


@dataclass
class BatchResult(Mapping[str, BatchEntry]):
    """Mapping from each requested key to its BatchEntry.

    Iteration follows the order of the caller's keys.
    """

    entries: dict[str, BatchEntry] = field(default_factory=dict)
    requests_made: int = 0

    def __getitem__(self, key: str) -> BatchEntry:
        return self.entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def cache_hits(self) -> int:
        return sum(1 for entry in self.entries.values() if entry.from_cache)

    def payloads(self) -> dict[str, Any]:
        """Plain ``key -> payload`` view of the successful entries."""
        return {key: entry.payload for key, entry in self.entries.items() if entry.ok}

    def errors(self) -> dict[str, str]:
        """``key -> message`` view of the entries the upstream rejected."""
        return {
            key: entry.error
            for key, entry in self.entries.items()
            if entry.error is not None
        }
