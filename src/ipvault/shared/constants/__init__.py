"""
IPVault Constants Module

This module provides centralized constants for IPVault. All magic values
and configuration defaults are defined here.
"""

from .cache import CacheConfig
from .http_codes import ContentTypes, HTTPHeaders, HTTPStatusCodes
from .messages import APIMessages
from .network import NetworkConfig, ReferenceURLs
from .system import BASE_DAY, BASE_HOUR, BASE_MINUTE, BASE_SECOND

__all__ = [
    "BASE_DAY",
    "BASE_HOUR",
    "BASE_MINUTE",
    "BASE_SECOND",
    "APIMessages",
    "CacheConfig",
    "ContentTypes",
    "HTTPHeaders",
    "HTTPStatusCodes",
    "NetworkConfig",
    "ReferenceURLs",
]
