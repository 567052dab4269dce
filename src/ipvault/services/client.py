"""High-level IPVault client.

This module wires the pieces together: settings, the response cache, the
HTTP adapter, the lookup orchestrator and response enrichment. It is the
entry point most embedders use.

Example:
    >>> client = IPVaultClient("my-token")
    >>> details = client.details("8.8.8.8")
    >>> details.country_name
    'United States'
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Sequence

import requests
from pydantic import ValidationError

from ipvault.config.models.settings import Settings
from ipvault.core.address_classifier import AddressClassifier
from ipvault.core.cache import BoundedExpiringCache
from ipvault.services.enricher import DetailsEnricher
from ipvault.services.http_client import APIAdapter
from ipvault.services.lookup import LookupOrchestrator
from ipvault.services.reference_data import ReferenceData
from ipvault.shared.constants import APIMessages
from ipvault.shared.errors import (
    ErrorCode,
    create_config_error,
    create_transport_error,
    create_validation_error,
)
from ipvault.shared.logging import log_operation_error
from ipvault.shared.models import BatchResult, Details
from ipvault.shared.protocols import CacheProtocol, NetworkClientProtocol

logger = logging.getLogger(__name__)


def _settings_from_environment() -> Settings:
    """Build Settings from ``IPVAULT_*`` variables.

    Raises:
        ConfigurationError: If a variable holds an invalid value
    """
    try:
        return Settings()
    except ValidationError as e:
        error = create_config_error(
            f"Invalid configuration: {e.error_count()} validation error(s)",
            operation="client_init",
            original_error=e,
        )
        log_operation_error(logger, error)
        raise error from e


class IPVaultClient:
    """Client for the IP geolocation API.

    Args:
        access_token: API token; overrides ``settings.api.access_token``
        settings: Full configuration (default: ``Settings()``, which reads
            ``IPVAULT_*`` environment variables)
        cache: Cache to use instead of a BoundedExpiringCache built from
            ``settings.cache``
        network: Network collaborator to use instead of an APIAdapter.
            ``get_map_url`` additionally needs a ``create_map`` method.
        session: requests session handed to the default APIAdapter
        reference_data: Preloaded reference tables

    Raises:
        ConfigurationError: If the cache settings or reference tables are
            invalid
    """

    def __init__(
        self,
        access_token: str | None = None,
        settings: Settings | None = None,
        *,
        cache: CacheProtocol | None = None,
        network: NetworkClientProtocol | None = None,
        session: requests.Session | None = None,
        reference_data: ReferenceData | None = None,
    ) -> None:
        if settings is None:
            settings = _settings_from_environment()
        if access_token is not None:
            api = settings.api.model_copy(update={"access_token": access_token})
            settings = settings.model_copy(update={"api": api})
        self.settings = settings

        if cache is None:
            cache = BoundedExpiringCache(
                max_size=settings.cache.max_size,
                ttl=settings.cache.ttl,
            )
        if network is None:
            network = APIAdapter(settings.api, session=session)
        if reference_data is None:
            reference_data = ReferenceData.load(settings.reference_data)

        self.cache = cache
        self.network = network
        self.orchestrator = LookupOrchestrator(
            cache=self.cache,
            network=self.network,
            classifier=AddressClassifier(),
            batch_chunk_size=settings.api.batch_chunk_size,
        )
        self.enricher = DetailsEnricher(reference_data)

        logger.debug("IPVault client initialized: %r", settings.api)

    @property
    def access_token(self) -> str | None:
        return self.settings.api.access_token

    @property
    def reference_data(self) -> ReferenceData:
        return self.enricher.reference_data

    def details(self, ip: str | None = None) -> Details:
        """Look up ``ip`` (or the caller's own address) and enrich the result.

        Raises:
            InvalidAddressError: If ``ip`` is not a valid IP literal
            RateLimitError: If the upstream quota is exhausted
            TransportError: On any other upstream failure
        """
        result = self.orchestrator.lookup(ip)
        return self.enricher.enrich(result.payload)

    def get_details_raw(self, ip: str | None = None) -> dict[str, Any]:
        """Look up ``ip`` without enrichment.

        The returned dict is a deep copy; mutating it, nested values
        included, does not affect the cache.
        """
        return copy.deepcopy(self.orchestrator.lookup(ip).payload)

    def batch_requests(
        self,
        keys: Sequence[str],
        token: str | None = None,
    ) -> BatchResult:
        """Look up many batch keys at once.

        Args:
            keys: Addresses or field selectors such as ``"8.8.8.8/country"``
            token: Token for the batch endpoint (default: the client's)

        Raises:
            RateLimitError: If any chunk hits the upstream quota
            TransportError: On any other upstream failure
        """
        return self.orchestrator.batch_requests(keys, token or self.access_token)

    def get_map_url(self, ips: Sequence[str]) -> str:
        """Plot ``ips`` on a map and return the report URL.

        Raises:
            ApplicationError: With code VALIDATION_ERROR if ``ips`` is not a
                list or exceeds the configured limit
            RateLimitError: If the upstream quota is exhausted
            TransportError: On any other upstream failure
        """
        if not isinstance(ips, (list, tuple)):
            raise create_validation_error(
                APIMessages.MAP_INPUT_NOT_LIST,
                field="ips",
                operation="get_map_url",
            )
        limit = self.settings.api.map_max_ips
        if len(ips) > limit:
            raise create_validation_error(
                APIMessages.MAP_TOO_MANY_IPS.format(limit=limit),
                field="ips",
                operation="get_map_url",
            )

        body = self.network.create_map(list(ips))  # type: ignore[attr-defined]
        report_url = body.get("reportUrl")
        if not report_url:
            raise create_transport_error(
                "Map response did not contain a reportUrl",
                code=ErrorCode.API_INVALID_RESPONSE,
                operation="get_map_url",
            )
        return report_url

    def close(self) -> None:
        """Release the HTTP session, if the network collaborator has one."""
        close = getattr(self.network, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> IPVaultClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def create(
    access_token: str | None = None,
    settings: Settings | None = None,
    **kwargs: Any,
) -> IPVaultClient:
    """Build an IPVaultClient; keyword arguments are passed through."""
    return IPVaultClient(access_token, settings, **kwargs)
