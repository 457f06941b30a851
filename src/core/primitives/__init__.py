"""
Primitives — atomic building blocks for the catalog client.

Each primitive does ONE thing well.
Services compose primitives into consumer-facing state.
"""

from src.core.primitives.api_client import (
    UNSET,
    ApiClient,
    ApiConfig,
    ApiResult,
    HttpMethod,
    RequestOptions,
    create_client,
)
from src.core.primitives.exceptions import (
    ApiError,
    EmptyResultError,
    HttpStatusError,
    MalformedResponseError,
    TransportError,
)

__all__ = [
    "UNSET",
    "ApiClient",
    "ApiConfig",
    "ApiError",
    "ApiResult",
    "EmptyResultError",
    "HttpMethod",
    "HttpStatusError",
    "MalformedResponseError",
    "RequestOptions",
    "TransportError",
    "create_client",
]
