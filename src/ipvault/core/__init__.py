"""Core local-decision components of IPVault.

The reserved-range classifier and the bounded expiring cache answer
lookups without touching the network.
"""

from .address_classifier import (
    RESERVED_RANGES,
    AddressClassifier,
    ReservedRange,
    is_bogon,
    parse_address,
)
from .cache import BoundedExpiringCache, CacheEntry

__all__ = [
    "RESERVED_RANGES",
    "AddressClassifier",
    "BoundedExpiringCache",
    "CacheEntry",
    "ReservedRange",
    "is_bogon",
    "parse_address",
]
