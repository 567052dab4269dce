"""IPVault Shared Module.

This package contains shared constants, errors, logging helpers, models
and protocols used across IPVault.
"""

__all__ = ["cache_utils", "constants", "errors", "logging", "models", "protocols"]
