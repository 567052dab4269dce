"""Shared data models."""

from .details import Details
from .lookup import BatchEntry, BatchResult, LookupResult, LookupSource

__all__ = [
    "BatchEntry",
    "BatchResult",
    "Details",
    "LookupResult",
    "LookupSource",
]
