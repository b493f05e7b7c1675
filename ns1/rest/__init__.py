"""Request building, dispatch and response handling for the NS1 REST API."""

from __future__ import annotations

from ns1.rest.client import (
    DEFAULT_ENDPOINT,
    DEFAULT_USER_AGENT,
    HEADER_AUTH,
    APIClient,
    AsyncAPIClient,
    acheck_response,
    check_response,
    classify_response,
    set_api_key,
    set_endpoint,
    set_rate_limit_func,
    set_transport,
    set_user_agent,
)
from ns1.rest.exceptions import (
    BodyReadError,
    BuildError,
    BuildErrorReason,
    DecodeError,
    NS1Error,
    RestError,
    TransportError,
)
from ns1.rest.models import ErrorBody, RateLimit
from ns1.rest.ratelimit import async_sleep_strategy, noop, sleep_strategy
from ns1.rest.transport import AsyncTransport, Transport

__all__ = [
    "DEFAULT_ENDPOINT",
    "DEFAULT_USER_AGENT",
    "HEADER_AUTH",
    "APIClient",
    "AsyncAPIClient",
    "Transport",
    "AsyncTransport",
    "check_response",
    "acheck_response",
    "classify_response",
    "set_transport",
    "set_api_key",
    "set_endpoint",
    "set_user_agent",
    "set_rate_limit_func",
    "NS1Error",
    "BuildError",
    "BuildErrorReason",
    "TransportError",
    "RestError",
    "DecodeError",
    "BodyReadError",
    "RateLimit",
    "ErrorBody",
    "noop",
    "sleep_strategy",
    "async_sleep_strategy",
]
