from typing import Callable

import httpx
import pytest

from ns1.rest import APIClient, AsyncAPIClient

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def make_client():
    """Return a factory building an :class:`APIClient` over a mock transport."""
    clients: list[httpx.Client] = []

    def factory(handler: Handler, api_key: str = "test-key") -> APIClient:
        http = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(http)
        return APIClient(api_key, transport=http)

    yield factory
    for http in clients:
        http.close()


@pytest.fixture
async def make_async_client():
    clients: list[httpx.AsyncClient] = []

    def factory(handler: Handler, api_key: str = "test-key") -> AsyncAPIClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(http)
        return AsyncAPIClient(api_key, transport=http)

    yield factory
    for http in clients:
        await http.aclose()
