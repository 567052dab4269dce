"""
User-facing message templates for API failures.
"""


class APIMessages:
    """Error messages raised by the HTTP adapter and the client."""

    RATE_LIMIT_EXCEEDED = (
        "To increase your limits, please review our "
        "paid plans at https://ipinfo.io/pricing"
    )
    BATCH_QUOTA_EXCEEDED = "Request Quota Exceeded"
    AUTHENTICATION_FAILED = "Authentication failed (status {status_code})"
    CLIENT_ERROR = "Client error (status {status_code})"
    SERVER_ERROR = "Server error (status {status_code})"
    TIMEOUT = "Request timed out after {timeout}s"
    CONNECTION_FAILED = "Connection to {url} failed"
    INVALID_JSON = "Upstream returned a non-JSON body"
    UNEXPECTED_PAYLOAD = "Upstream returned {kind} where an object was expected"
    MAP_INPUT_NOT_LIST = "Invalid input. Array required!"
    MAP_TOO_MANY_IPS = "No more than {limit:,} ips allowed!"
