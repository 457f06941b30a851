"""
API client exceptions.

Every failure path of ApiClient raises exactly one of these,
so callers can branch on the type or read ``status``/``data``.
"""

from typing import Any

# Status used when no HTTP response was received at all
TRANSPORT_ERROR_STATUS = 500


class ApiError(Exception):
    """Base exception for all API client errors."""

    def __init__(self, message: str, status: int, data: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(status={self.status}, message='{self.message}')>"


class TransportError(ApiError):
    """The HTTP call could not complete (connectivity, DNS, TLS, timeout)."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"Network or Client Error: {reason}",
            TRANSPORT_ERROR_STATUS,
        )


class HttpStatusError(ApiError):
    """Response received with a non-2xx status."""

    def __init__(self, status: int, data: Any = None) -> None:
        super().__init__(f"Request failed with status {status}", status, data)


class MalformedResponseError(ApiError):
    """A 2xx response whose body is not valid JSON."""

    def __init__(self, status: int, data: Any = None) -> None:
        super().__init__(f"Malformed response body with status {status}", status, data)


class EmptyResultError(ApiError):
    """A successful response carrying an empty collection."""

    def __init__(self, endpoint: str) -> None:
        super().__init__("The endpoint returned no items.", 200)
        self.endpoint = endpoint
