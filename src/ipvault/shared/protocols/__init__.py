"""Protocol interfaces shared across IPVault layers."""

from .services import CacheProtocol, NetworkClientProtocol

__all__ = ["CacheProtocol", "NetworkClientProtocol"]
