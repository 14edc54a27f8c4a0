from collections.abc import Generator
from unittest.mock import MagicMock, AsyncMock

import httpx
import pytest
import pytest_asyncio

from sf_tooling.auth.types import SalesforceToken
from sf_tooling.client import AsyncSalesforceClient, SalesforceClient


INSTANCE_URL = httpx.URL("https://example.my.salesforce.com")


def mock_client(
    spec_class: type[SalesforceClient | AsyncSalesforceClient],
) -> Generator[MagicMock, None, None]:
    # Create a mock client for testing
    mock_client = MagicMock(spec=spec_class)
    mock_client.data_url = _url = "/services/data/v63.0"
    mock_client.tooling_url = f"{_url}/tooling"
    mock_client.connection_name = spec_class.DEFAULT_CONNECTION_NAME

    # Keep a reference to the original _connections dictionary to restore later
    original_connections = spec_class._connections

    # Add the mock client to the _connections dictionary directly
    spec_class._connections = {spec_class.DEFAULT_CONNECTION_NAME: mock_client}
    yield mock_client

    # Restore the original _connections dictionary
    spec_class._connections = original_connections


@pytest.fixture()
def mock_sf_client():
    yield from mock_client(SalesforceClient)


@pytest.fixture()
def mock_async_client():
    for client in mock_client(AsyncSalesforceClient):
        client.execute = AsyncMock()
        yield client


class RecordingHandler:
    """httpx.MockTransport handler that records requests and replays canned responses"""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response] = []

    def respond(self, status_code: int = 200, **kwargs):
        self.responses.append(httpx.Response(status_code, **kwargs))
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def sf_client(handler) -> Generator[SalesforceClient, None, None]:
    """SalesforceClient whose requests are served by `handler` instead of the network"""
    with SalesforceClient(
        token=SalesforceToken(INSTANCE_URL, "mock_access_token"),
        transport=httpx.MockTransport(handler),
    ) as client:
        yield client


@pytest_asyncio.fixture
async def async_sf_client(handler):
    async with AsyncSalesforceClient(
        token=SalesforceToken(INSTANCE_URL, "mock_access_token"),
        transport=httpx.MockTransport(handler),
    ) as client:
        yield client

