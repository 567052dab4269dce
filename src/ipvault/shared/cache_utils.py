"""Cache key helpers for lookup requests.

Keys are versioned so that a change in the cached payload shape can be
rolled out by bumping ``CacheConfig.KEY_VERSION`` instead of flushing
caches that live outside the process.

Example:
    >>> from ipvault.shared.cache_utils import cache_key
    >>> cache_key("8.8.8.8")
    '1:8.8.8.8'
    >>> cache_key(None)
    '1:<self>'
"""

from __future__ import annotations

from ipvault.shared.constants import CacheConfig


def cache_key(subject: str | None) -> str:
    """Build the cache key for a lookup subject.

    Args:
        subject: IP address, batch key such as ``"8.8.8.8/country"``, or
            None (or empty) for a lookup of the caller's own address.

    Returns:
        Versioned cache key.
    """
    if not subject:
        subject = CacheConfig.SELF_LOOKUP_SENTINEL
    return f"{CacheConfig.KEY_VERSION}{CacheConfig.KEY_SEPARATOR}{subject}"
