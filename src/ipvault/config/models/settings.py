"""IPVault Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ipvault.config.models.api_settings import APISettings
from ipvault.config.models.cache_settings import CacheSettings
from ipvault.config.models.logging_settings import LoggingSettings
from ipvault.config.models.reference_settings import ReferenceDataSettings


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Values come from, in increasing priority: defaults, ``IPVAULT_``-prefixed
    environment variables with ``__`` as the nested delimiter
    (e.g. ``IPVAULT_CACHE__TTL=3600``), and constructor arguments (which
    is how ``from_toml_file`` passes the file contents).
    """

    model_config = SettingsConfigDict(
        env_prefix="IPVAULT_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    api: APISettings = Field(default_factory=APISettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    reference_data: ReferenceDataSettings = Field(default_factory=ReferenceDataSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file; the environment fills unset values."""
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file.

        The access token, when set, is written in clear text.
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(exclude_none=True)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)
