"""Static reference tables used to enrich lookup responses.

Five JSON tables ship with the package under ``ipvault/data``:

* ``countries.json``: ISO 3166-1 alpha-2 code -> country name
* ``eu.json``: list of EU member codes
* ``flags.json``: code -> ``{"emoji", "unicode"}``
* ``currency.json``: code -> ``{"code", "symbol"}``
* ``continent.json``: code -> ``{"code", "name"}``

Any table can be replaced by pointing ReferenceDataSettings at another
file with the same shape. Tables are loaded once, when a ReferenceData
is built, and never refreshed.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from ipvault.config.models.reference_settings import ReferenceDataSettings
from ipvault.shared.errors import ErrorCode, create_config_error
from ipvault.shared.logging import log_operation_error

logger = logging.getLogger(__name__)

_DATA_PACKAGE = "ipvault.data"

# settings field -> (bundled file name, expected JSON type)
_TABLES: dict[str, tuple[str, type]] = {
    "countries": ("countries.json", dict),
    "eu_countries": ("eu.json", list),
    "countries_flags": ("flags.json", dict),
    "countries_currencies": ("currency.json", dict),
    "continents": ("continent.json", dict),
}


def _read_table(field_name: str, override: str | None) -> Any:
    file_name, expected_type = _TABLES[field_name]
    source = override or f"{_DATA_PACKAGE}/{file_name}"
    try:
        if override:
            text = Path(override).read_text(encoding="utf-8")
        else:
            text = resources.files(_DATA_PACKAGE).joinpath(file_name).read_text(
                encoding="utf-8"
            )
        table = json.loads(text)
    except (OSError, ValueError) as e:
        error = create_config_error(
            f"Failed to load reference table {source}: {e}",
            config_key=field_name,
            operation="load_reference_data",
            code=ErrorCode.REFERENCE_DATA_ERROR,
            original_error=e,
        )
        log_operation_error(logger, error)
        raise error from e

    if not isinstance(table, expected_type):
        error = create_config_error(
            f"Reference table {source} must be a JSON {expected_type.__name__}",
            config_key=field_name,
            operation="load_reference_data",
            code=ErrorCode.REFERENCE_DATA_ERROR,
        )
        log_operation_error(logger, error)
        raise error
    return table


@dataclass(frozen=True)
class ReferenceData:
    """The loaded reference tables."""

    countries: dict[str, str]
    eu_countries: frozenset[str]
    countries_flags: dict[str, dict[str, str]]
    countries_currencies: dict[str, dict[str, str]]
    continents: dict[str, dict[str, str]]

    @classmethod
    def load(cls, settings: ReferenceDataSettings | None = None) -> ReferenceData:
        """Load every table, honouring override paths.

        Raises:
            ConfigurationError: If a table is missing, unreadable or has
                the wrong shape (code REFERENCE_DATA_ERROR)
        """
        settings = settings or ReferenceDataSettings()
        tables = {
            field_name: _read_table(field_name, getattr(settings, field_name))
            for field_name in _TABLES
        }
        tables["eu_countries"] = frozenset(tables["eu_countries"])
        logger.debug(
            "Loaded reference data for %d countries", len(tables["countries"])
        )
        return cls(**tables)

    def country_name(self, code: str) -> str | None:
        return self.countries.get(code)

    def is_eu(self, code: str) -> bool:
        return code in self.eu_countries

    def flag(self, code: str) -> dict[str, str] | None:
        return self.countries_flags.get(code)

    def currency(self, code: str) -> dict[str, str] | None:
        return self.countries_currencies.get(code)

    def continent(self, code: str) -> dict[str, str] | None:
        return self.continents.get(code)
