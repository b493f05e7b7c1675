"""Value types shared by the client: rate-limit telemetry and error bodies."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping, Optional

from pydantic import BaseModel, TypeAdapter, model_validator

HEADER_RATE_LIMIT = "X-Ratelimit-Limit"
HEADER_RATE_REMAINING = "X-Ratelimit-Remaining"
HEADER_RATE_PERIOD = "X-Ratelimit-Period"


def _header_int(headers: Mapping[str, str], name: str) -> int:
    raw = headers.get(name)
    if not raw:
        return 0
    try:
        return int(raw)
    except ValueError:
        return 0


@dataclass(frozen=True)
class RateLimit:
    """Rate-limit telemetry reported by the service on every response.

    ``period`` is in seconds. The derived wait times are not guarded against
    zero ``limit`` or ``remaining``; they raise :class:`ZeroDivisionError`.
    """

    limit: int = 0
    remaining: int = 0
    period: int = 0

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> RateLimit:
        """Parse the ``X-Ratelimit-*`` headers.

        Missing or non-numeric values become ``0``; this never raises.
        *headers* should be case-insensitive (``httpx.Headers``) when it
        comes off the wire.
        """
        return cls(
            limit=_header_int(headers, HEADER_RATE_LIMIT),
            remaining=_header_int(headers, HEADER_RATE_REMAINING),
            period=_header_int(headers, HEADER_RATE_PERIOD),
        )

    @property
    def percentage_left(self) -> int:
        return self.remaining * 100 // self.limit

    @property
    def wait_time(self) -> timedelta:
        """Even spacing between requests: ``period / limit``."""
        return timedelta(seconds=self.period) / self.limit

    @property
    def wait_time_remaining(self) -> timedelta:
        """Spacing that spreads the remaining quota over a period: ``period / remaining``."""
        return timedelta(seconds=self.period) / self.remaining


class ErrorBody(BaseModel):
    """Error payload the service sends with non-2xx responses."""

    message: str = ""

    @model_validator(mode="before")
    @classmethod
    def fold_message_key(cls, data: Any) -> Any:
        # Keys match case-insensitively, e.g. {"Message": ...}; the last match wins.
        if isinstance(data, dict) and "message" not in data:
            matches = [
                value
                for key, value in data.items()
                if isinstance(key, str) and key.lower() == "message"
            ]
            if matches:
                return {**data, "message": matches[-1]}
        return data

    @classmethod
    def from_json(cls, body: bytes) -> ErrorBody:
        """Parse an error body. A JSON ``null`` yields an empty message."""
        parsed = _OPTIONAL_ERROR_BODY.validate_json(body)
        return parsed if parsed is not None else cls()


_OPTIONAL_ERROR_BODY: TypeAdapter[Optional[ErrorBody]] = TypeAdapter(Optional[ErrorBody])
