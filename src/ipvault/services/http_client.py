"""HTTP adapter for the geolocation API.

This module owns everything that touches the wire: session setup, auth
headers, retries of transient failures, and the translation of HTTP
outcomes into IPVault errors. The lookup orchestrator only sees the
``fetch``/``fetch_batch`` contract of NetworkClientProtocol.

Retry policy: connection failures and 5xx responses are retried by
urllib3 with exponential backoff. HTTP 429 is never retried here; it is
raised as RateLimitError so the caller decides what to do.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Mapping, Sequence
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ipvault.config.models.api_settings import APISettings
from ipvault.shared.constants import (
    APIMessages,
    ContentTypes,
    HTTPHeaders,
    HTTPStatusCodes,
    NetworkConfig,
)
from ipvault.shared.errors import (
    ErrorCode,
    RateLimitError,
    TransportError,
    create_rate_limit_error,
    create_transport_error,
)
from ipvault.shared.logging import log_api_call, log_operation_error

logger = logging.getLogger(__name__)


def path_for(ip: str | None) -> str:
    """Request path for a single lookup; None means the caller's address.

    Example:
        >>> path_for("2001:db8::1")
        '/2001%3Adb8%3A%3A1'
        >>> path_for(None)
        '/'
    """
    return f"/{quote(ip, safe='')}" if ip else "/"


class APIAdapter:
    """requests-based client for the geolocation API.

    Args:
        settings: API settings (base URL, token, timeouts, retries)
        session: Pre-built session to use instead of creating one. Retry
            adapters are only mounted on sessions created here.
    """

    def __init__(
        self,
        settings: APISettings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings or APISettings()
        self.base_url = self.settings.base_url.rstrip("/")
        self.session = session or self._create_session()
        self._apply_headers(self.session)

        logger.debug("API adapter initialized for %s", self.base_url)

    def _create_session(self) -> requests.Session:
        """Create a session with a retry strategy for transient failures."""
        session = requests.Session()

        retry_strategy = Retry(
            total=self.settings.max_retries,
            status_forcelist=list(NetworkConfig.RETRY_STATUS_FORCELIST),
            backoff_factor=self.settings.backoff_factor,
            allowed_methods=["GET", "POST"],
            respect_retry_after_header=False,
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

        return session

    def _apply_headers(self, session: requests.Session) -> None:
        session.headers[HTTPHeaders.USER_AGENT] = NetworkConfig.USER_AGENT
        session.headers[HTTPHeaders.ACCEPT] = ContentTypes.JSON
        if self.settings.access_token:
            session.headers[HTTPHeaders.AUTHORIZATION] = (
                f"Bearer {self.settings.access_token}"
            )

    # ------------------------------------------------------------------
    # Raw HTTP
    # ------------------------------------------------------------------

    def get(self, path: str, timeout: float | None = None) -> requests.Response:
        """GET ``path`` relative to the base URL."""
        return self._request("GET", path, timeout=timeout)

    def post(
        self,
        path: str,
        payload: Any,
        timeout: float | None = None,
        params: Mapping[str, str] | None = None,
    ) -> requests.Response:
        """POST ``payload`` as JSON to ``path`` relative to the base URL."""
        return self._request("POST", path, payload=payload, timeout=timeout, params=params)

    def _request(
        self,
        method: str,
        path: str,
        payload: Any = None,
        timeout: float | None = None,
        params: Mapping[str, str] | None = None,
    ) -> requests.Response:
        """Send a request and translate transport failures.

        Raises:
            RateLimitError: On HTTP 429
            TransportError: On timeouts, connection failures and other
                non-2xx responses
        """
        url = f"{self.base_url}{path}"
        timeout = timeout or self.settings.timeout
        headers = {}
        data = None
        if payload is not None:
            headers[HTTPHeaders.CONTENT_TYPE] = ContentTypes.JSON
            data = json.dumps(payload)

        start = time.perf_counter()
        try:
            response = self.session.request(
                method,
                url,
                data=data,
                headers=headers,
                params=params,
                timeout=timeout,
            )
        except requests.Timeout as e:
            raise self._transport_failure(
                APIMessages.TIMEOUT.format(timeout=timeout),
                ErrorCode.API_TIMEOUT,
                path,
                original_error=e,
            ) from e
        except requests.ConnectionError as e:
            raise self._transport_failure(
                APIMessages.CONNECTION_FAILED.format(url=self.base_url),
                ErrorCode.API_CONNECTION_ERROR,
                path,
                original_error=e,
            ) from e
        except requests.RequestException as e:
            raise self._transport_failure(
                f"Request failed: {e}",
                ErrorCode.API_REQUEST_FAILED,
                path,
                original_error=e,
            ) from e

        duration_ms = (time.perf_counter() - start) * 1000
        log_api_call(
            logger,
            endpoint=path,
            method=method,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
        self._raise_for_status(response, path)
        return response

    def _raise_for_status(self, response: requests.Response, path: str) -> None:
        status_code = response.status_code
        if HTTPStatusCodes.is_success(status_code):
            return

        if status_code == HTTPStatusCodes.TOO_MANY_REQUESTS:
            raise create_rate_limit_error(
                APIMessages.RATE_LIMIT_EXCEEDED,
                operation="api_request",
                additional_data={"endpoint": path},
            )

        if status_code in (HTTPStatusCodes.UNAUTHORIZED, HTTPStatusCodes.FORBIDDEN):
            code = ErrorCode.API_AUTHENTICATION_FAILED
            message = APIMessages.AUTHENTICATION_FAILED.format(status_code=status_code)
        elif HTTPStatusCodes.is_server_error(status_code):
            code = ErrorCode.API_SERVER_ERROR
            message = APIMessages.SERVER_ERROR.format(status_code=status_code)
        else:
            code = ErrorCode.API_REQUEST_FAILED
            message = APIMessages.CLIENT_ERROR.format(status_code=status_code)

        raise self._transport_failure(message, code, path, status_code=status_code)

    def _transport_failure(
        self,
        message: str,
        code: ErrorCode,
        path: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> TransportError:
        error = create_transport_error(
            message,
            code=code,
            operation="api_request",
            status_code=status_code,
            original_error=original_error,
            additional_data={"endpoint": path},
        )
        log_operation_error(logger, error)
        return error

    def _parse_json(self, response: requests.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise self._transport_failure(
                APIMessages.INVALID_JSON,
                ErrorCode.API_INVALID_RESPONSE,
                path,
                status_code=response.status_code,
                original_error=e,
            ) from e

    def _parse_object(self, response: requests.Response, path: str) -> dict[str, Any]:
        body = self._parse_json(response, path)
        if not isinstance(body, dict):
            raise self._transport_failure(
                APIMessages.UNEXPECTED_PAYLOAD.format(kind=type(body).__name__),
                ErrorCode.API_INVALID_RESPONSE,
                path,
                status_code=response.status_code,
            )
        return body

    # ------------------------------------------------------------------
    # NetworkClientProtocol
    # ------------------------------------------------------------------

    def fetch(self, ip: str | None) -> dict[str, Any]:
        """Fetch the raw lookup payload for ``ip``.

        Raises:
            RateLimitError: On HTTP 429
            TransportError: On any other failure
        """
        path = path_for(ip)
        response = self.get(path)
        return self._parse_object(response, path)

    def fetch_batch(self, keys: Sequence[str], token: str | None) -> dict[str, Any]:
        """Fetch payloads for up to one chunk of batch keys.

        Raises:
            RateLimitError: On HTTP 429 (quota exceeded for the batch)
            TransportError: On any other failure
        """
        params = {"token": token} if token else None
        try:
            response = self.post(
                NetworkConfig.BATCH_PATH,
                list(keys),
                timeout=self.settings.batch_timeout,
                params=params,
            )
        except RateLimitError as e:
            raise create_rate_limit_error(
                APIMessages.BATCH_QUOTA_EXCEEDED,
                operation="fetch_batch",
                additional_data={"key_count": len(keys)},
            ) from e
        return self._parse_object(response, NetworkConfig.BATCH_PATH)

    def create_map(self, ips: Sequence[str]) -> dict[str, Any]:
        """Submit addresses to the map tool and return its response object."""
        response = self.post(NetworkConfig.MAP_PATH, {"ips": list(ips)})
        return self._parse_object(response, NetworkConfig.MAP_PATH)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()
