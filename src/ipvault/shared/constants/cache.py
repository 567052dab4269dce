"""
Cache Configuration Constants

This module provides the defaults for the in-process response cache
and the cache key scheme.
"""

from .system import BASE_DAY


class CacheConfig:
    """Response cache configuration."""

    DEFAULT_MAX_SIZE = 4096
    DEFAULT_TTL = BASE_DAY  # 24 hours

    # Bump when the cached payload shape changes
    KEY_VERSION = "1"
    KEY_SEPARATOR = ":"

    # Subject used for "look up my own address"
    SELF_LOOKUP_SENTINEL = "<self>"
