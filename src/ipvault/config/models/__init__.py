"""Configuration domain models."""

from .api_settings import APISettings
from .cache_settings import CacheSettings
from .logging_settings import LoggingSettings
from .reference_settings import ReferenceDataSettings
from .settings import Settings

__all__ = [
    "APISettings",
    "CacheSettings",
    "LoggingSettings",
    "ReferenceDataSettings",
    "Settings",
]
