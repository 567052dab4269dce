"""Tests for reference table loading."""

import json

import pytest

from ipvault.config.models.reference_settings import ReferenceDataSettings
from ipvault.services.reference_data import ReferenceData
from ipvault.shared.errors import ConfigurationError, ErrorCode


class TestBundledReferenceData:
    """Test cases for the tables shipped with the package."""

    def test_lookups(self, reference_data):
        """Test each accessor against a known country."""
        assert reference_data.country_name("US") == "United States"
        assert reference_data.flag("US") == {"emoji": "🇺🇸", "unicode": "U+1F1FA U+1F1F8"}
        assert reference_data.currency("DE") == {"code": "EUR", "symbol": "€"}
        assert reference_data.continent("DE") == {"code": "EU", "name": "Europe"}

    def test_eu_membership(self, reference_data):
        """Test EU membership lookups."""
        assert reference_data.is_eu("DE")
        assert not reference_data.is_eu("US")
        assert not reference_data.is_eu("GB")
        assert isinstance(reference_data.eu_countries, frozenset)

    def test_unknown_code(self, reference_data):
        """Test that unknown codes return None."""
        assert reference_data.country_name("ZZ") is None
        assert reference_data.flag("ZZ") is None

    def test_tables_agree_on_codes(self, reference_data):
        """Test that every country has a flag, currency and continent."""
        codes = set(reference_data.countries)

        assert codes == set(reference_data.countries_flags)
        assert codes == set(reference_data.countries_currencies)
        assert codes == set(reference_data.continents)
        assert reference_data.eu_countries <= codes


class TestReferenceDataOverrides:
    """Test cases for override files."""

    def test_override_table(self, tmp_path):
        """Test replacing one table with a custom file."""
        countries_file = tmp_path / "countries.json"
        countries_file.write_text(json.dumps({"US": "USA"}), encoding="utf-8")

        data = ReferenceData.load(ReferenceDataSettings(countries=str(countries_file)))

        assert data.country_name("US") == "USA"
        assert data.country_name("DE") is None
        assert data.is_eu("DE")

    def test_missing_override_file(self, tmp_path):
        """Test that a missing file raises ConfigurationError."""
        settings = ReferenceDataSettings(continents=str(tmp_path / "nope.json"))

        with pytest.raises(ConfigurationError) as exc_info:
            ReferenceData.load(settings)

        assert exc_info.value.code == ErrorCode.REFERENCE_DATA_ERROR
        assert isinstance(exc_info.value.original_error, OSError)

    def test_invalid_json(self, tmp_path):
        """Test that a malformed file raises ConfigurationError."""
        broken = tmp_path / "flags.json"
        broken.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            ReferenceData.load(ReferenceDataSettings(countries_flags=str(broken)))

        assert exc_info.value.code == ErrorCode.REFERENCE_DATA_ERROR

    def test_wrong_shape(self, tmp_path):
        """Test that a table of the wrong JSON type is rejected."""
        wrong = tmp_path / "eu.json"
        wrong.write_text(json.dumps({"DE": True}), encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            ReferenceData.load(ReferenceDataSettings(eu_countries=str(wrong)))

        assert "must be a JSON list" in exc_info.value.message
