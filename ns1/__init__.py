"""NS1 REST API client core."""

from __future__ import annotations

__version__ = "0.9.0"

from ns1.rest import (  # noqa: E402
    APIClient,
    AsyncAPIClient,
    BodyReadError,
    BuildError,
    BuildErrorReason,
    DecodeError,
    NS1Error,
    RateLimit,
    RestError,
    TransportError,
)

__all__ = [
    "__version__",
    "APIClient",
    "AsyncAPIClient",
    "NS1Error",
    "BuildError",
    "BuildErrorReason",
    "TransportError",
    "RestError",
    "DecodeError",
    "BodyReadError",
    "RateLimit",
]
