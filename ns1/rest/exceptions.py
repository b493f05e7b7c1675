"""Exception hierarchy for the NS1 REST client."""

from __future__ import annotations

from enum import Enum

import httpx


class NS1Error(Exception):
    """Base exception for all client errors."""


class BuildErrorReason(str, Enum):
    INVALID_PATH = "invalid_path"
    ENCODING_FAILED = "encoding_failed"


class BuildError(NS1Error):
    """The request could not be built from the caller's input."""

    def __init__(self, reason: BuildErrorReason, detail: str = "") -> None:
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)


class TransportError(NS1Error):
    """The transport failed before a response was received.

    The underlying ``httpx`` exception is available as ``__cause__``.
    """

    def __init__(self, request: httpx.Request, detail: str) -> None:
        self.request = request
        self.detail = detail
        super().__init__(f"{request.method} {request.url}: {detail}")


class DecodeError(NS1Error):
    """A response body was present but could not be interpreted."""

    def __init__(self, response: httpx.Response, detail: str) -> None:
        self.response = response
        self.detail = detail
        super().__init__(f"{response.status_code}: {detail}")


class BodyReadError(NS1Error):
    """Reading the response body stream failed."""

    def __init__(self, response: httpx.Response, detail: str) -> None:
        self.response = response
        self.detail = detail
        super().__init__(f"{response.status_code}: {detail}")


class RestError(NS1Error):
    """Raised for every response outside the 2xx range."""

    def __init__(self, response: httpx.Response, message: str = "") -> None:
        self.response = response
        self.message = message
        super().__init__(str(self))

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def method(self) -> str:
        return self.response.request.method

    @property
    def url(self) -> httpx.URL:
        return self.response.request.url

    def __str__(self) -> str:
        return f"{self.method} {self.url}: {self.status_code} {self.message}"
