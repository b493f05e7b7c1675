"""Transport capability: anything that sends a prepared request.

``httpx.Client`` and ``httpx.AsyncClient`` satisfy these protocols, so a
client configured with ``httpx.MockTransport`` or custom event hooks can be
substituted for testing, proxying or instrumentation.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx


@runtime_checkable
class Transport(Protocol):
    def send(self, request: httpx.Request, *, stream: bool = False) -> httpx.Response:
        ...


@runtime_checkable
class AsyncTransport(Protocol):
    async def send(
        self, request: httpx.Request, *, stream: bool = False
    ) -> httpx.Response:
        ...
