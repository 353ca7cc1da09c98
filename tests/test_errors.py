"""Tests for transport error wrapping."""

from __future__ import annotations

import aiohttp

from remotetext import RemoteTextError, RemoteTextTimeoutError, RequestError, ResponseError
from remotetext.errors import wrap_transport_error

URL_STR = "https://updates.example.test/feed"


class TestWrapTransportError:
    """Tests for mapping raised exceptions onto the error hierarchy."""

    def test_connection_error(self) -> None:
        cause = aiohttp.ClientConnectionError("connection reset")
        error = wrap_transport_error(cause, URL_STR)

        assert type(error) is RequestError
        assert str(error) == "Request failed: connection reset"
        assert error.cause is cause
        assert error.url == URL_STR

    def test_timeout(self) -> None:
        error = wrap_transport_error(TimeoutError(), URL_STR)

        assert isinstance(error, RemoteTextTimeoutError)
        assert str(error) == f"Request timed out: {URL_STR}"

    def test_unexpected_error(self) -> None:
        error = wrap_transport_error(ValueError("bad chunk"), URL_STR)

        assert type(error) is RequestError
        assert str(error) == "Unexpected error during request: bad chunk"
        assert isinstance(error.cause, ValueError)

    def test_cause_text_appears_once(self) -> None:
        error = wrap_transport_error(aiohttp.ClientPayloadError("truncated"), URL_STR)

        assert str(error).count("truncated") == 1
        assert "Caused by" not in str(error)


class TestResponseError:
    """Tests for HTTP status errors."""

    def test_status_and_message(self) -> None:
        error = ResponseError("HTTP error 503: Service Unavailable", status=503, url=URL_STR)

        expected_status = 503
        assert isinstance(error, RemoteTextError)
        assert error.status == expected_status
        assert error.cause is None
        assert str(error) == "HTTP error 503: Service Unavailable"
