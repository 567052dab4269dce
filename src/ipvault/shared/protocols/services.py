"""Service protocols for dependency inversion.

The lookup orchestrator depends on these interfaces rather than on the
concrete cache and HTTP adapter, so embedders can inject their own
implementations (a shared Redis cache, a recording fake in tests, ...).
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence


class CacheProtocol(Protocol):
    """Minimal cache contract used by the orchestrator.

    ``get`` must return None for absent or expired keys.
    """

    def get(self, key: str) -> Any | None:
        """Return the cached value for ``key`` or None."""

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``."""


class NetworkClientProtocol(Protocol):
    """Upstream geolocation API.

    Both methods raise RateLimitError on HTTP 429 and TransportError on
    any other failure.
    """

    def fetch(self, ip: str | None) -> dict[str, Any]:
        """Fetch the raw payload for ``ip`` (None means the caller's address)."""

    def fetch_batch(self, keys: Sequence[str], token: str | None) -> Mapping[str, Any]:
        """Fetch raw payloads for a group of batch keys in one request."""
