import io
from collections.abc import Callable, Iterator

import pytest

from csrf_client.api.http_client import HttpClient
from csrf_client.config import ClientConfig
from csrf_client.log import LogLevel
from csrf_client.tests.constants import (
    API_KEY,
    API_KEY_HEADER,
    CLIENT_ID_HEADER,
    ENDPOINT,
)
from csrf_client.tests.utils.mock_transport import MockTransport


@pytest.fixture
def mock_transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def log_out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def config(log_out: io.StringIO) -> ClientConfig:
    """Session (client ID + CSRF) mode config."""
    return ClientConfig(
        endpoint=ENDPOINT,
        url_prefix="rest",
        header_client_key_name=CLIENT_ID_HEADER,
        log_out=log_out,
        log_level=LogLevel.DEBUG,
    )


@pytest.fixture
def apikey_config(log_out: io.StringIO) -> ClientConfig:
    return ClientConfig(
        endpoint=ENDPOINT,
        url_prefix="rest",
        header_api_key_name=API_KEY_HEADER,
        api_key=API_KEY,
        header_client_key_name=CLIENT_ID_HEADER,
        log_out=log_out,
        log_level=LogLevel.DEBUG,
    )


@pytest.fixture
def make_client(mock_transport: MockTransport) -> Iterator[Callable[[ClientConfig], HttpClient]]:
    clients: list[HttpClient] = []

    def _make(config: ClientConfig) -> HttpClient:
        client = HttpClient(config, transport=mock_transport)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()
