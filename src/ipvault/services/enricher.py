"""Response enrichment.

Adds reference data and parsed convenience fields to a raw lookup
payload. The raw payload may be shared with the cache, so enrichment
always works on a deep copy.
"""

from __future__ import annotations

import copy
import ipaddress
import logging
from typing import Any

from ipvault.services.reference_data import ReferenceData
from ipvault.shared.constants import ReferenceURLs
from ipvault.shared.models import Details

logger = logging.getLogger(__name__)


class DetailsEnricher:
    """Turns raw payloads into Details objects.

    Args:
        reference_data: Loaded reference tables
    """

    def __init__(self, reference_data: ReferenceData) -> None:
        self.reference_data = reference_data

    def enrich(self, payload: dict[str, Any]) -> Details:
        """Return a Details built from an enriched copy of ``payload``.

        Added fields, when the payload has what they derive from:
        ``country_name``, ``is_eu``, ``country_flag``, ``country_currency``,
        ``continent``, ``country_flag_url`` (from ``country``),
        ``ip_address`` (from ``ip``), ``latitude``/``longitude`` (from
        ``loc``).
        """
        details = copy.deepcopy(payload)

        country = details.get("country")
        if country:
            ref = self.reference_data
            details["country_name"] = ref.country_name(country)
            details["is_eu"] = ref.is_eu(country)
            details["country_flag"] = ref.flag(country)
            details["country_currency"] = ref.currency(country)
            details["continent"] = ref.continent(country)
            details["country_flag_url"] = f"{ReferenceURLs.COUNTRY_FLAGS_URL}{country}.svg"

        ip = details.get("ip")
        if ip:
            try:
                details["ip_address"] = ipaddress.ip_address(ip)
            except ValueError:
                logger.warning("Upstream returned an unparseable ip field: %r", ip)

        loc = details.get("loc")
        if isinstance(loc, str) and "," in loc:
            latitude, longitude = loc.split(",", 1)
            details["latitude"] = latitude
            details["longitude"] = longitude

        return Details(details)
