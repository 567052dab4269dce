"""API configuration model.

This module contains the configuration for the upstream geolocation API:
authentication, endpoint, timeouts, retries and batching limits.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ipvault.shared.constants import NetworkConfig


class APISettings(BaseModel):
    """Upstream API configuration.

    Security: access_token is masked in __repr__ to prevent accidental
    exposure in logs.
    """

    # API authentication (sensitive - hidden from repr)
    access_token: str | None = Field(
        default=None,
        repr=False,
        description="API access token (optional for the free tier)",
    )

    base_url: str = Field(
        default=NetworkConfig.BASE_URL,
        description="Base URL of the geolocation API",
    )

    # Request settings
    timeout: float = Field(
        default=NetworkConfig.DEFAULT_TIMEOUT,
        gt=0,
        description="Single lookup timeout in seconds",
    )
    batch_timeout: float = Field(
        default=NetworkConfig.BATCH_TIMEOUT,
        gt=0,
        description="Timeout in seconds for each batch request",
    )

    # Retry settings (connection failures and 5xx responses only)
    max_retries: int = Field(
        default=NetworkConfig.DEFAULT_RETRIES,
        ge=0,
        description="Number of transport-level retries",
    )
    backoff_factor: float = Field(
        default=NetworkConfig.BACKOFF_FACTOR,
        ge=0,
        description="Exponential backoff factor between retries",
    )

    # Batching
    batch_chunk_size: int = Field(
        default=NetworkConfig.BATCH_CHUNK_SIZE,
        gt=0,
        description="Maximum number of keys per batch request",
    )
    map_max_ips: int = Field(
        default=NetworkConfig.MAP_MAX_IPS,
        gt=0,
        description="Maximum number of addresses accepted by get_map_url",
    )

    def __repr__(self) -> str:
        """Custom repr that masks the access token."""
        masked_token = "****" if self.access_token else "[empty]"
        return (
            f"APISettings("
            f"access_token={masked_token}, "
            f"base_url={self.base_url!r}, "
            f"timeout={self.timeout}, "
            f"max_retries={self.max_retries}, "
            f"batch_chunk_size={self.batch_chunk_size})"
        )


__all__ = ["APISettings"]
