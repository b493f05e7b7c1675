"""Built-in rate-limit strategies.

A strategy is any callable taking the :class:`RateLimit` observed on a
response. The client calls it synchronously, once per response, before the
status code is classified.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Union

from ns1.rest.models import RateLimit

logger = logging.getLogger(__name__)

RateLimitFunc = Callable[[RateLimit], Union[None, Awaitable[None]]]


def noop(rl: RateLimit) -> None:
    """Default strategy: never throttles."""


def sleep_seconds(rl: RateLimit) -> float:
    """Seconds to wait so the remaining quota lasts until the period resets.

    This is ``period / remaining``. When ``remaining`` is zero the quota is
    exhausted and a full period is waited. No telemetry (``limit == 0``) or a
    zero period means no wait.
    """
    if rl.limit <= 0 or rl.period <= 0:
        return 0.0
    if rl.remaining <= 0:
        return float(rl.period)
    return rl.wait_time_remaining.total_seconds()


def _log_wait(rl: RateLimit, seconds: float) -> None:
    logger.debug(
        "Rate limiting - Limit %d Remaining %d in period %d: sleeping %.3fs",
        rl.limit,
        rl.remaining,
        rl.period,
        seconds,
        extra={"wait_seconds": seconds},
    )


def sleep_strategy(rl: RateLimit, *, debug: bool = False) -> None:
    """Block the calling thread for :func:`sleep_seconds`."""
    seconds = sleep_seconds(rl)
    if debug:
        _log_wait(rl, seconds)
    if seconds > 0:
        time.sleep(seconds)


async def async_sleep_strategy(rl: RateLimit, *, debug: bool = False) -> None:
    """Suspend the calling task for :func:`sleep_seconds`."""
    seconds = sleep_seconds(rl)
    if debug:
        _log_wait(rl, seconds)
    if seconds > 0:
        await asyncio.sleep(seconds)
