"""IPVault Configuration Module

This module provides unified access to the configuration models and the
settings loader.
"""

from __future__ import annotations

from .loader import load_settings
from .models import (
    APISettings,
    CacheSettings,
    LoggingSettings,
    ReferenceDataSettings,
    Settings,
)

__all__ = [
    "APISettings",
    "CacheSettings",
    "LoggingSettings",
    "ReferenceDataSettings",
    "Settings",
    "load_settings",
]
