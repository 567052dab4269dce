"""
Network Configuration Constants

This module contains all constants related to the upstream geolocation
API and the HTTP client talking to it.
"""

from .system import BASE_SECOND


class NetworkConfig:
    """Network configuration constants."""

    # Endpoint
    BASE_URL = "https://ipinfo.io"
    BATCH_PATH = "/batch"
    MAP_PATH = "/tools/map"

    # Timeout settings
    DEFAULT_TIMEOUT = 2 * BASE_SECOND
    BATCH_TIMEOUT = 5 * BASE_SECOND

    # Retry settings (connection failures and 5xx only, never 429)
    DEFAULT_RETRIES = 3
    BACKOFF_FACTOR = 0.5
    RETRY_STATUS_FORCELIST = (500, 502, 503, 504)

    # Batching
    BATCH_CHUNK_SIZE = 1000
    MAP_MAX_IPS = 500_000

    # User agent
    USER_AGENT = "IPVault/0.1.0 (python-requests)"


class ReferenceURLs:
    """Static asset URLs used while enriching responses."""

    # "PK" -> "https://cdn.ipinfo.io/static/images/countries-flags/PK.svg"
    COUNTRY_FLAGS_URL = "https://cdn.ipinfo.io/static/images/countries-flags/"
