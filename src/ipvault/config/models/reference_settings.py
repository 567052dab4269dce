"""Reference data configuration model.

Each field optionally points at a JSON file that replaces the table
bundled with the package.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ReferenceDataSettings(BaseModel):
    """Override paths for the static reference tables."""

    countries: str | None = Field(default=None, description="Country code -> name")
    eu_countries: str | None = Field(default=None, description="EU member codes")
    countries_flags: str | None = Field(default=None, description="Country flags")
    countries_currencies: str | None = Field(default=None, description="Currencies")
    continents: str | None = Field(default=None, description="Continents")


__all__ = ["ReferenceDataSettings"]
