"""Cache configuration model.

This module contains the cache configuration model for the in-process
response cache: its capacity and the time-to-live of each entry.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ipvault.shared.constants import CacheConfig


class CacheSettings(BaseModel):
    """Response cache configuration."""

    max_size: int = Field(
        default=CacheConfig.DEFAULT_MAX_SIZE,
        gt=0,
        description="Maximum number of cached lookups",
    )
    ttl: int = Field(
        default=CacheConfig.DEFAULT_TTL,
        ge=0,
        description="Cache time-to-live in seconds",
    )


__all__ = ["CacheSettings"]
