"""Settings loader.

This module handles configuration file loading from TOML and turns
validation failures into ConfigurationError. No module-level Settings
instance is kept; every client receives its Settings explicitly.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ipvault.config.models.settings import Settings
from ipvault.shared.errors import create_config_error
from ipvault.shared.logging import log_operation_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS = (
    Path("ipvault.toml"),
    Path("config/ipvault.toml"),
)


def load_settings(config_path: str | Path | None = None, **overrides: Any) -> Settings:
    """Load settings from a TOML file or the environment.

    Args:
        config_path: Optional path to a TOML file. When None, the default
            locations are tried and environment variables are used if no
            file exists.
        **overrides: Top-level sections to override, e.g.
            ``cache={"ttl": 60}``

    Returns:
        Validated Settings instance

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    try:
        if config_path is None:
            config_path = next((p for p in DEFAULT_CONFIG_PATHS if p.exists()), None)

        if config_path is None:
            return Settings(**overrides)

        settings = Settings.from_toml_file(config_path)
        if not overrides:
            return settings
        merged = settings.model_dump()
        for section, values in overrides.items():
            if isinstance(values, dict) and isinstance(merged.get(section), dict):
                merged[section].update(values)
            else:
                merged[section] = values
        return Settings(**merged)

    except ValidationError as e:
        error = create_config_error(
            f"Invalid configuration: {e.error_count()} validation error(s)",
            operation="load_settings",
            original_error=e,
        )
        log_operation_error(logger, error)
        raise error from e
    except FileNotFoundError as e:
        error = create_config_error(
            str(e),
            config_key="config_path",
            operation="load_settings",
            original_error=e,
        )
        log_operation_error(logger, error)
        raise error from e
    except (OSError, ValueError) as e:
        # toml.TomlDecodeError is a ValueError
        error = create_config_error(
            f"Failed to read configuration file {config_path}: {e}",
            config_key="config_path",
            operation="load_settings",
            original_error=e,
        )
        log_operation_error(logger, error)
        raise error from e
