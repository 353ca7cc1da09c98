"""Common test fixtures for the remotetext project."""

from __future__ import annotations

import typing as t

import pytest
from aiohttp import hdrs
from yarl import URL

from remotetext import Exchange, RemoteTextConfig

if t.TYPE_CHECKING:
    from pytest_httpserver import HTTPServer

    from remotetext import PreparedRequest

TEST_VERSION = "1.2.3"


class ScriptedTransport:
    """Transport whose exchanges are driven by the test instead of the network."""

    def __init__(self) -> None:
        self.requests: list[PreparedRequest] = []
        self.exchanges: list[Exchange] = []

    def get(self, request: PreparedRequest) -> Exchange:
        assert request.method == hdrs.METH_GET
        return self._open(request)

    def post(self, request: PreparedRequest) -> Exchange:
        assert request.method == hdrs.METH_POST
        return self._open(request)

    def _open(self, request: PreparedRequest) -> Exchange:
        exchange = Exchange(str(request.url))
        self.requests.append(request)
        self.exchanges.append(exchange)
        return exchange

    @property
    def last(self) -> Exchange:
        return self.exchanges[-1]


@pytest.fixture
def config() -> RemoteTextConfig:
    """Test fixture providing a config with a fixed product name and version."""
    return RemoteTextConfig(
        product_name="remotetext-test",
        version_provider=lambda: TEST_VERSION,
    )


@pytest.fixture
def scripted_transport() -> ScriptedTransport:
    """Test fixture providing a transport driven by the test."""
    return ScriptedTransport()


@pytest.fixture
def version_url(httpserver: HTTPServer) -> URL:
    """Test fixture providing a URL serving a version manifest."""
    url = URL(f"http://localhost:{httpserver.port}/version.json")
    httpserver.expect_request(url.path).respond_with_data(
        '{"version": "2.0.0"}',
        content_type="application/json",
    )
    return url


@pytest.fixture
def signed_url(httpserver: HTTPServer) -> URL:
    """Test fixture providing a URL whose response carries a signature header."""
    url = URL(f"http://localhost:{httpserver.port}/signed")
    httpserver.expect_request(url.path).respond_with_data(
        "signed payload",
        headers={"X-Signature": "abc123"},
    )
    return url


@pytest.fixture
def not_found_url(httpserver: HTTPServer) -> URL:
    """Test fixture providing a URL that answers 404 with a body."""
    url = URL(f"http://localhost:{httpserver.port}/missing")
    httpserver.expect_request(url.path).respond_with_data("no such file", status=404)
    return url


@pytest.fixture
def refused_url() -> str:
    """Test fixture providing a URL nothing listens on."""
    return "http://127.0.0.1:1/unreachable"
