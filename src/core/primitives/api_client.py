"""
API client primitive — typed JSON requests against the catalog API.

This is an atomic primitive that does ONE thing:
send a request to an endpoint relative to the configured base URL
and return the parsed payload, or raise a typed ApiError.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import httpx

from src.core.primitives.exceptions import (
    ApiError,
    HttpStatusError,
    MalformedResponseError,
    TransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "/api/v1"


class HttpMethod(StrEnum):
    """Supported request methods."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class _Unset:
    """Marker for "no request body" (None is a valid JSON body)."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass
class ApiConfig:
    """Configuration for ApiClient. Built once at process start."""
    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = None
    default_headers: dict[str, str] = field(
        default_factory=lambda: {"Accept": "application/json"}
    )
    follow_redirects: bool = True
    verify_ssl: bool = True


@dataclass
class RequestOptions:
    """Per-call request options."""
    method: HttpMethod = HttpMethod.GET
    data: Any = UNSET
    headers: dict[str, str | None] = field(default_factory=dict)
    params: dict[str, Any] | None = None
    cookies: dict[str, str] | None = None
    timeout: float | None = None
    follow_redirects: bool | None = None

    @property
    def has_body(self) -> bool:
        return self.data is not UNSET


@dataclass
class ApiResult:
    """Outcome of ApiClient.execute(): either a value or an ApiError."""
    value: Any = None
    error: ApiError | None = None

    @property
    def ok(self) -> bool:
        """True if the request succeeded."""
        return self.error is None

    def unwrap(self) -> Any:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value


class ApiClient:
    """
    Sends JSON requests to the catalog API.

    Stateless between calls: each request opens its own httpx.AsyncClient,
    so one instance can be shared by any number of concurrent callers.

    Usage:
        client = ApiClient(ApiConfig(base_url="https://example.com/api/v1"))
        items = await client.get("/catalog")

        result = await client.execute("catalog")
        if result.ok:
            print(result.value)
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or ApiConfig()
        self._transport = transport

    async def request(self, endpoint: str, options: RequestOptions | None = None) -> Any:
        """
        Send a request and return the parsed JSON payload.

        Args:
            endpoint: Path relative to the base URL.
            options: Method, body, header overrides and passthrough options.

        Returns:
            Parsed JSON body, or None for 204 No Content.

        Raises:
            ValueError: If endpoint is empty.
            TransportError: If no response was received.
            HttpStatusError: If the response status is not 2xx.
            MalformedResponseError: If a 2xx body is not valid JSON.
        """
        options = options or RequestOptions()
        url = self.build_url(endpoint)
        headers = self.build_headers(options)
        method = HttpMethod(str(options.method).upper())

        try:
            content = self._encode_body(options)
        except (TypeError, ValueError) as e:
            logger.warning(f"Cannot encode body for {method} {url}: {e}")
            raise TransportError(str(e)) from e

        logger.debug(f"{method} {url}")

        extra: dict[str, Any] = {}
        if options.timeout is not None:
            extra["timeout"] = options.timeout
        if options.cookies:
            extra["cookies"] = options.cookies
        send_extra: dict[str, Any] = {}
        if options.follow_redirects is not None:
            send_extra["follow_redirects"] = options.follow_redirects

        async with httpx.AsyncClient(
            timeout=self.config.timeout,
            follow_redirects=self.config.follow_redirects,
            verify=self.config.verify_ssl,
            transport=self._transport,
        ) as client:
            try:
                http_request = client.build_request(
                    method,
                    url,
                    headers=headers,
                    content=content,
                    params=options.params,
                    **extra,
                )
                # Headers only; the body is read during classification
                response = await client.send(http_request, stream=True, **send_extra)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                logger.warning(f"Network error on {method} {url}: {e}")
                raise TransportError(str(e)) from e

            try:
                return await self._handle_response(method, url, response)
            finally:
                await response.aclose()

    async def execute(self, endpoint: str, options: RequestOptions | None = None) -> ApiResult:
        """Send a request and return an ApiResult instead of raising ApiError."""
        try:
            value = await self.request(endpoint, options)
        except ApiError as e:
            return ApiResult(error=e)
        return ApiResult(value=value)

    async def get(self, endpoint: str, **kwargs: Any) -> Any:
        return await self.request(endpoint, RequestOptions(method=HttpMethod.GET, **kwargs))

    async def post(self, endpoint: str, data: Any, **kwargs: Any) -> Any:
        return await self.request(
            endpoint, RequestOptions(method=HttpMethod.POST, data=data, **kwargs)
        )

    async def put(self, endpoint: str, data: Any, **kwargs: Any) -> Any:
        return await self.request(
            endpoint, RequestOptions(method=HttpMethod.PUT, data=data, **kwargs)
        )

    async def patch(self, endpoint: str, data: Any, **kwargs: Any) -> Any:
        return await self.request(
            endpoint, RequestOptions(method=HttpMethod.PATCH, data=data, **kwargs)
        )

    async def delete(self, endpoint: str, **kwargs: Any) -> Any:
        return await self.request(endpoint, RequestOptions(method=HttpMethod.DELETE, **kwargs))

    def build_url(self, endpoint: str) -> str:
        """Join the base URL and endpoint with exactly one separator."""
        if not endpoint or endpoint == "/":
            raise ValueError("endpoint must not be empty")
        path = endpoint[1:] if endpoint.startswith("/") else endpoint
        return f"{self.config.base_url.rstrip('/')}/{path}"

    def build_headers(self, options: RequestOptions) -> dict[str, str]:
        """Merge defaults, body content type and overrides; drop None values."""
        # Header names are case-insensitive; the last writer's spelling is kept
        merged: dict[str, tuple[str, str | None]] = {}
        for source in (
            self.config.default_headers,
            {"Content-Type": "application/json" if options.has_body else None},
            options.headers,
        ):
            for key, value in source.items():
                merged[key.lower()] = (key, value)
        return {key: value for key, value in merged.values() if value is not None}

    def _encode_body(self, options: RequestOptions) -> bytes | None:
        if not options.has_body:
            return None
        return json.dumps(options.data, ensure_ascii=False).encode("utf-8")

    async def _handle_response(self, method: str, url: str, response: httpx.Response) -> Any:
        """Classify a received response into a payload or an ApiError."""
        if not response.is_success:
            # The status is known; a body that cannot be read only loses the payload
            try:
                await response.aread()
            except httpx.HTTPError as e:
                logger.debug(f"Cannot read error body of {method} {url}: {e}")
                data = None
            else:
                data = self._read_error_body(response)
            logger.warning(f"{method} {url} failed: HTTP {response.status_code}")
            raise HttpStatusError(response.status_code, data)

        if response.status_code == 204:
            return None

        try:
            await response.aread()
        except httpx.HTTPError as e:
            logger.warning(f"Network error reading {method} {url}: {e}")
            raise TransportError(str(e)) from e

        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"{method} {url} returned a malformed body: {e}")
            raise MalformedResponseError(response.status_code, self._safe_text(response)) from e

    def _read_error_body(self, response: httpx.Response) -> Any:
        """Best-effort read of an error body: JSON if declared, text otherwise."""
        content_type_header = response.headers.get("content-type", "").lower()
        try:
            if "application/json" in content_type_header:
                return response.json()
            return response.text
        except ValueError:
            return None

    @staticmethod
    def _safe_text(response: httpx.Response) -> str | None:
        try:
            return response.text
        except ValueError:
            return None


def create_client(
    config: ApiConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ApiClient:
    """Create an ApiClient (convenience function)."""
    return ApiClient(config, transport=transport)
