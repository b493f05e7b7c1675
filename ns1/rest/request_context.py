"""Correlation data for the in-flight API call, held in contextvars."""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class CallContext:
    request_id: str
    method: str
    url: str


call_context_var: ContextVar[CallContext | None] = ContextVar(
    "ns1_call_context", default=None
)


def generate_request_id() -> str:
    """Return a new 32-character hex request ID."""
    return uuid.uuid4().hex


def get_call_context() -> CallContext | None:
    return call_context_var.get()


def get_request_id() -> str:
    """Return the request ID of the current call, or ``""`` outside one."""
    ctx = call_context_var.get()
    return ctx.request_id if ctx is not None else ""


@contextmanager
def bind_call(method: str, url: str) -> Iterator[CallContext]:
    """Bind a fresh :class:`CallContext` for the duration of one ``do()``."""
    ctx = CallContext(request_id=generate_request_id(), method=method, url=url)
    token = call_context_var.set(ctx)
    try:
        yield ctx
    finally:
        call_context_var.reset(token)
