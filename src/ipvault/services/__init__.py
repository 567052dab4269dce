"""Services module for IPVault.

This module contains the HTTP adapter for the geolocation API, lookup
orchestration, response enrichment and the client facade.
"""

from .client import IPVaultClient, create
from .enricher import DetailsEnricher
from .http_client import APIAdapter
from .lookup import LookupOrchestrator
from .reference_data import ReferenceData

__all__ = [
    "APIAdapter",
    "DetailsEnricher",
    "IPVaultClient",
    "LookupOrchestrator",
    "ReferenceData",
    "create",
]
