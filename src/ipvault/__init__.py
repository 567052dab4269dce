"""
IPVault - IP Geolocation Client

A client for an IP geolocation API with local bogon detection, a bounded
expiring response cache, batched lookups and response enrichment.
"""

__version__ = "0.1.0"

from .core import AddressClassifier, BoundedExpiringCache, is_bogon
from .services import IPVaultClient, create
from .shared.errors import (
    InvalidAddressError,
    IPVaultError,
    RateLimitError,
    TransportError,
)
from .shared.logging import configure_logging
from .shared.models import BatchEntry, BatchResult, Details

__all__ = [
    "AddressClassifier",
    "BatchEntry",
    "BatchResult",
    "BoundedExpiringCache",
    "Details",
    "IPVaultClient",
    "IPVaultError",
    "InvalidAddressError",
    "RateLimitError",
    "TransportError",
    "configure_logging",
    "create",
    "is_bogon",
]
