"""Sync and async clients for the NS1 REST API."""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Callable, Mapping, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from ns1 import __version__
from ns1.rest.exceptions import (
    BodyReadError,
    BuildError,
    BuildErrorReason,
    DecodeError,
    RestError,
    TransportError,
)
from ns1.rest.models import ErrorBody, RateLimit
from ns1.rest.ratelimit import (
    RateLimitFunc,
    async_sleep_strategy,
    noop,
    sleep_strategy,
)
from ns1.rest.request_context import bind_call
from ns1.rest.transport import AsyncTransport, Transport

if TYPE_CHECKING:
    from ns1.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.nsone.net/v1/"
DEFAULT_USER_AGENT = f"ns1-python/{__version__}"
DEFAULT_TIMEOUT = 30.0

HEADER_AUTH = "X-NSONE-Key"
HEADER_USER_AGENT = "User-Agent"

T = TypeVar("T")
ClientT = TypeVar("ClientT", bound="_BaseAPIClient")
Option = Callable[["_BaseAPIClient"], None]


def _parse_endpoint(endpoint: str | httpx.URL) -> httpx.URL:
    try:
        url = httpx.URL(endpoint)
    except httpx.InvalidURL as exc:
        raise ValueError(f"invalid endpoint {endpoint!r}: {exc}") from exc
    if not url.is_absolute_url:
        raise ValueError(f"endpoint must be an absolute URL, got {endpoint!r}")
    return url


@lru_cache(maxsize=128)
def _adapter(result_type: Any) -> TypeAdapter:
    return TypeAdapter(result_type)


def _read_body(response: httpx.Response) -> bytes:
    try:
        return response.read()
    except (httpx.TransportError, httpx.StreamError, httpx.DecodingError) as exc:
        raise BodyReadError(response, str(exc)) from exc


async def _aread_body(response: httpx.Response) -> bytes:
    try:
        return await response.aread()
    except (httpx.TransportError, httpx.StreamError, httpx.DecodingError) as exc:
        raise BodyReadError(response, str(exc)) from exc


def _decode(response: httpx.Response, body: bytes, result_type: Any) -> Any:
    try:
        return _adapter(result_type).validate_json(body)
    except ValidationError as exc:
        raise DecodeError(response, str(exc)) from exc


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------


def classify_response(response: httpx.Response, body: bytes) -> RestError | None:
    """Return the :class:`RestError` for a non-2xx *response*, else ``None``.

    *body* is the already-read response body. An empty body yields an error
    with an empty message; a body that is not the service's
    ``{"message": ...}`` shape raises :class:`DecodeError`.
    """
    if response.is_success:
        return None
    if not body:
        return RestError(response)
    try:
        payload = ErrorBody.from_json(body)
    except ValidationError as exc:
        raise DecodeError(response, f"unreadable error body: {exc}") from exc
    return RestError(response, payload.message)


def check_response(response: httpx.Response) -> None:
    """Raise :class:`RestError` if *response* is outside the 2xx range."""
    if response.is_success:
        return
    error = classify_response(response, _read_body(response))
    if error is not None:
        raise error


async def acheck_response(response: httpx.Response) -> None:
    """Async variant of :func:`check_response`."""
    if response.is_success:
        return
    error = classify_response(response, await _aread_body(response))
    if error is not None:
        raise error


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


def set_transport(transport: Transport | AsyncTransport) -> Option:
    def apply(client: _BaseAPIClient) -> None:
        client.transport = transport

    return apply


def set_api_key(api_key: str) -> Option:
    def apply(client: _BaseAPIClient) -> None:
        client.api_key = api_key

    return apply


def set_endpoint(endpoint: str) -> Option:
    def apply(client: _BaseAPIClient) -> None:
        client.endpoint = endpoint

    return apply


def set_user_agent(user_agent: str) -> Option:
    def apply(client: _BaseAPIClient) -> None:
        client.user_agent = user_agent

    return apply


def set_rate_limit_func(func: RateLimitFunc) -> Option:
    def apply(client: _BaseAPIClient) -> None:
        client.rate_limit_func = func

    return apply


# ---------------------------------------------------------------------------
# Shared configuration and request building
# ---------------------------------------------------------------------------


class _BaseAPIClient(ABC):
    """Configuration and request building shared by both clients.

    Configure before the first call. Only ``rate_limit_func`` is meant to be
    swapped later, and not while other threads are issuing requests.
    """

    def __init__(
        self,
        api_key: str = "",
        *,
        transport: Any = None,
        endpoint: str = DEFAULT_ENDPOINT,
        user_agent: str = DEFAULT_USER_AGENT,
        rate_limit_func: RateLimitFunc = noop,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.api_key = api_key
        self.user_agent = user_agent
        self.rate_limit_func = rate_limit_func
        self.debug = False
        self.last_rate_limit: RateLimit | None = None
        self.endpoint = endpoint
        self._timeout = timeout
        self._transport = transport
        self._owns_transport = False

    @classmethod
    def with_options(
        cls: type[ClientT], transport: Any = None, *options: Option
    ) -> ClientT:
        """Build a client from a transport and option functions, applied in order."""
        client = cls(transport=transport)
        for option in options:
            option(client)
        return client

    @classmethod
    def from_settings(cls: type[ClientT], settings: Settings | None = None) -> ClientT:
        """Build a client from :class:`ns1.config.Settings` (env ``NS1_*``)."""
        if settings is None:
            from ns1.config import settings as default_settings

            settings = default_settings
        client = cls(
            settings.api_key,
            endpoint=settings.endpoint,
            user_agent=settings.user_agent,
            timeout=settings.timeout,
        )
        if settings.debug:
            client.enable_debug()
        if settings.rate_limit_strategy == "sleep":
            client.rate_limit_strategy_sleep()
        elif settings.rate_limit_strategy != "none":
            raise ValueError(
                f"unknown rate_limit_strategy {settings.rate_limit_strategy!r}"
            )
        return client

    # -- configuration -------------------------------------------------------

    @property
    def endpoint(self) -> httpx.URL:
        return self._endpoint

    @endpoint.setter
    def endpoint(self, value: str | httpx.URL) -> None:
        self._endpoint = _parse_endpoint(value)

    @property
    def transport(self) -> Any:
        if self._transport is None:
            self._transport = self._default_transport()
            self._owns_transport = True
        return self._transport

    @transport.setter
    def transport(self, value: Any) -> None:
        self._transport = value
        self._owns_transport = False

    @abstractmethod
    def _default_transport(self) -> Any:
        ...

    def enable_debug(self) -> None:
        """Log every built request and the sleep strategy's decisions."""
        self.debug = True

    @abstractmethod
    def rate_limit_strategy_sleep(self) -> None:
        ...

    # -- request building ----------------------------------------------------

    def new_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Request:
        """Build an authenticated request for *path* relative to the endpoint.

        *body*, when not ``None``, is encoded as JSON. The auth and
        user-agent headers always take the configured values, replacing any
        given in *headers*.
        """
        try:
            url = self.endpoint.join(httpx.URL(path))
        except httpx.InvalidURL as exc:
            raise BuildError(BuildErrorReason.INVALID_PATH, str(exc)) from exc

        content = b""
        if body is not None:
            try:
                content = to_json(body)
            except PydanticSerializationError as exc:
                raise BuildError(BuildErrorReason.ENCODING_FAILED, str(exc)) from exc

        if self.debug:
            logger.debug("%s: %s (%s)", method, url, content.decode("utf-8"))

        request_headers = httpx.Headers(headers)
        if content:
            request_headers["Content-Type"] = "application/json"
        request_headers[HEADER_AUTH] = self.api_key
        request_headers[HEADER_USER_AGENT] = self.user_agent
        return httpx.Request(method, url, headers=request_headers, content=content)

    def _observe_rate_limit(self, response: httpx.Response) -> RateLimit:
        rl = RateLimit.from_headers(response.headers)
        self.last_rate_limit = rl
        return rl

    def _log_response(self, response: httpx.Response) -> None:
        if self.debug:
            logger.debug(
                "%s %s -> %d",
                response.request.method,
                response.request.url,
                response.status_code,
            )


# ---------------------------------------------------------------------------
# Sync client
# ---------------------------------------------------------------------------


class APIClient(_BaseAPIClient):
    """Synchronous client (default transport: ``httpx.Client``)."""

    def __enter__(self) -> APIClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport and self._transport is not None:
            self._transport.close()

    def _default_transport(self) -> httpx.Client:
        return httpx.Client(timeout=self._timeout)

    def rate_limit_strategy_sleep(self) -> None:
        """Throttle by sleeping ``period / remaining`` after every response."""
        self.rate_limit_func = lambda rl: sleep_strategy(rl, debug=self.debug)

    def do(
        self, request: httpx.Request, result_type: type[T] | None = None
    ) -> tuple[httpx.Response, T | None]:
        """Send *request* and return ``(response, result)``.

        ``result`` is the body validated into *result_type*, or ``None`` when
        no type is given. The rate-limit strategy runs before the status is
        checked, so it also sees telemetry from failed calls.
        """
        with bind_call(request.method, str(request.url)):
            try:
                response = self.transport.send(request, stream=True)
            except httpx.TransportError as exc:
                logger.warning(
                    "Transport failure for %s %s: %s", request.method, request.url, exc
                )
                raise TransportError(request, str(exc)) from exc

            try:
                self._log_response(response)
                self.rate_limit_func(self._observe_rate_limit(response))
                check_response(response)
                body = _read_body(response)
                if result_type is None:
                    return response, None
                return response, _decode(response, body, result_type)
            finally:
                response.close()

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        result_type: type[T] | None = None,
    ) -> tuple[httpx.Response, T | None]:
        """Build and send a request in one step."""
        return self.do(self.new_request(method, path, body), result_type)


# ---------------------------------------------------------------------------
# Async client
# ---------------------------------------------------------------------------


class AsyncAPIClient(_BaseAPIClient):
    """Async client (default transport: ``httpx.AsyncClient``).

    ``rate_limit_func`` may be a plain function or a coroutine function.
    """

    async def __aenter__(self) -> AsyncAPIClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_transport and self._transport is not None:
            await self._transport.aclose()

    def _default_transport(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout)

    def rate_limit_strategy_sleep(self) -> None:
        """Throttle by suspending the task ``period / remaining`` after every response."""
        self.rate_limit_func = lambda rl: async_sleep_strategy(rl, debug=self.debug)

    async def do(
        self, request: httpx.Request, result_type: type[T] | None = None
    ) -> tuple[httpx.Response, T | None]:
        with bind_call(request.method, str(request.url)):
            try:
                response = await self.transport.send(request, stream=True)
            except httpx.TransportError as exc:
                logger.warning(
                    "Transport failure for %s %s: %s", request.method, request.url, exc
                )
                raise TransportError(request, str(exc)) from exc

            try:
                self._log_response(response)
                outcome = self.rate_limit_func(self._observe_rate_limit(response))
                if inspect.isawaitable(outcome):
                    await outcome
                await acheck_response(response)
                body = await _aread_body(response)
                if result_type is None:
                    return response, None
                return response, _decode(response, body, result_type)
            finally:
                await response.aclose()

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        result_type: type[T] | None = None,
    ) -> tuple[httpx.Response, T | None]:
        return await self.do(self.new_request(method, path, body), result_type)
