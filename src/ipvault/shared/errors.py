"""IPVault Error Handling Module

This module defines the error handling system for IPVault, providing
structured error classes with context information and user-friendly messages.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved

The lookup core raises four concrete errors:
- InvalidAddressError: malformed IP literal (DomainError)
- RateLimitError: upstream quota exhausted, HTTP 429 (InfrastructureError)
- TransportError: any other network or payload failure (InfrastructureError)
- ConfigurationError: invalid construction parameters (ApplicationError)
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Default keys to mask in safe_dict so tokens never reach the logs
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("access_token", "token")


class ErrorCode(str, Enum):
    """Error codes for IPVault.

    This enum serves as the single source of truth for all error codes
    used throughout the library.
    """

    # Address Errors
    INVALID_ADDRESS = "INVALID_ADDRESS"

    # Network and API Errors
    API_RATE_LIMIT = "API_RATE_LIMIT"
    API_AUTHENTICATION_FAILED = "API_AUTHENTICATION_FAILED"
    API_REQUEST_FAILED = "API_REQUEST_FAILED"
    API_TIMEOUT = "API_TIMEOUT"
    API_CONNECTION_ERROR = "API_CONNECTION_ERROR"
    API_SERVER_ERROR = "API_SERVER_ERROR"
    API_INVALID_RESPONSE = "API_INVALID_RESPONSE"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Configuration Errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    REFERENCE_DATA_ERROR = "REFERENCE_DATA_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to keep the context safe to serialize.

    Attributes:
        operation: Optional operation name that caused the error
        ip: Optional IP address (or batch key) being looked up
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    ip: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export context as dict with token masking.

        Args:
            mask_keys: Keys to drop from additional_data. Defaults to
                SAFE_DICT_MASK_KEYS.

        Returns:
            Dictionary with masked sensitive fields and guaranteed
            additional_data key.

        Example:
            >>> context = ErrorContext(operation="lookup", additional_data={"token": "x"})
            >>> context.safe_dict()
            {'operation': 'lookup', 'additional_data': {}}
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        if self.ip is not None:
            data["ip"] = self.ip

        data["additional_data"] = {
            key: val
            for key, val in (self.additional_data or {}).items()
            if key not in mask_keys
        }
        return data


class IPVaultError(Exception):
    """Base exception class for all IPVault errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize IPVaultError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        formatted_message = f"{code.value}: {message}"
        super().__init__(formatted_message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging with token masking.

        Returns:
            Dictionary representation of the error with code, message,
            masked context, and original_error (if present)
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(IPVaultError):
    """Domain-specific errors.

    These errors occur when input violates the rules of the lookup
    domain, e.g. an address literal that does not parse.
    """


class InfrastructureError(IPVaultError):
    """Infrastructure-related errors.

    These errors occur when interacting with external systems such as
    the geolocation API or the filesystem.
    """


class ApplicationError(IPVaultError):
    """Application-level errors.

    These errors occur at the application layer, typically related to
    configuration or misuse of the public API.
    """


class InvalidAddressError(DomainError):
    """Raised when a string is not a valid IPv4 or IPv6 literal."""

    def __init__(
        self,
        address: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.INVALID_ADDRESS,
            f"Invalid IP address: {address!r}",
            context or ErrorContext(operation="classify_address", ip=address),
            original_error,
        )
        self.address = address


class TransportError(InfrastructureError):
    """Network or payload failure talking to the upstream API.

    Attributes:
        status_code: HTTP status code when the failure came from a response
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(code, message, context, original_error)
        self.status_code = status_code


class RateLimitError(InfrastructureError):
    """Upstream quota exhausted (HTTP 429).

    Not a TransportError: ``except TransportError`` does not catch it.
    """

    status_code = 429


class ConfigurationError(ApplicationError):
    """Invalid configuration detected at construction time."""


# Convenience functions for common error scenarios
def create_invalid_address_error(
    address: str,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> InvalidAddressError:
    """Create an invalid address error with context."""
    context = ErrorContext(operation=operation, ip=address)
    return InvalidAddressError(address, context, original_error)


def create_rate_limit_error(
    message: str,
    operation: str | None = None,
    ip: str | None = None,
    additional_data: dict[str, PrimitiveContextValue] | None = None,
) -> RateLimitError:
    """Create a rate limit error with context."""
    context = ErrorContext(
        operation=operation,
        ip=ip,
        additional_data=additional_data,
    )
    return RateLimitError(ErrorCode.API_RATE_LIMIT, message, context)


def create_transport_error(
    message: str,
    code: ErrorCode = ErrorCode.API_REQUEST_FAILED,
    operation: str | None = None,
    status_code: int | None = None,
    original_error: Exception | None = None,
    additional_data: dict[str, PrimitiveContextValue] | None = None,
) -> TransportError:
    """Create a transport error with context."""
    data: dict[str, PrimitiveContextValue] = dict(additional_data or {})
    if status_code is not None:
        data["status_code"] = status_code
    context = ErrorContext(
        operation=operation,
        additional_data=data or None,
    )
    return TransportError(code, message, context, original_error, status_code)


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
    code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
) -> ConfigurationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ConfigurationError(code, message, context, original_error)


def create_validation_error(
    message: str,
    field: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a validation error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"field": field} if field else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ApplicationError(
        ErrorCode.VALIDATION_ERROR,
        message,
        context,
        original_error,
    )
