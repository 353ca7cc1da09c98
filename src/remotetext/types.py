"""Request descriptors, outcomes and results for remotetext.

This module provides the dataclasses exchanged between the request builder,
the engine and the two completion modes.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from aiohttp import hdrs

if TYPE_CHECKING:
    from collections.abc import Sequence

    from yarl import URL

    from .errors import RemoteTextError

# HTTP method type - reuses aiohttp's method string constants
HttpMethod = str

SUPPORTED_METHODS = frozenset({hdrs.METH_GET, hdrs.METH_POST})


class FetchState(enum.Enum):
    """Lifecycle states of an asynchronous fetch object.

    Attributes:
        IDLE: Created, never started.
        IN_FLIGHT: Request dispatched, no terminal event yet.
        SUCCEEDED: The exchange finished without error.
        FAILED: The exchange reported an error.

    """

    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class RequestDescriptor:
    """Everything needed to build one outgoing request.

    Attributes:
        url: Target URL. Must not be empty.
        content_type: Explicit Content-Type header value.
        post_data: Request payload. ``str`` payloads are sent as UTF-8.
        post_data_length: Explicit payload length in bytes. When set and
            non-zero the payload is sent as raw bytes truncated to it.
        extra_headers: Raw header lines formatted ``"Name: Value"``.
        timeout_sec: Transfer timeout in seconds. 0 or None means no timeout.
        method: Explicit request type, ``"GET"`` or ``"POST"``. When None,
            POST is used if a non-empty payload is present.

    """

    url: str | URL
    content_type: str | None = None
    post_data: bytes | str | None = None
    post_data_length: int | None = None
    extra_headers: Sequence[str] = field(default_factory=tuple)
    timeout_sec: int | None = 0
    method: HttpMethod | None = None

    def __post_init__(self) -> None:
        if not str(self.url):
            msg = "URL must not be empty"
            raise ValueError(msg)
        if self.timeout_sec is not None and self.timeout_sec < 0:
            msg = f"Timeout must not be negative: {self.timeout_sec}"
            raise ValueError(msg)
        if self.method is not None:
            self.method = self.method.upper()
            if self.method not in SUPPORTED_METHODS:
                msg = f"Unsupported request type: {self.method}"
                raise ValueError(msg)

    @property
    def body(self) -> bytes | None:
        """Encoded payload, or None when no payload was given."""
        if self.post_data is None:
            return None
        data = self.post_data
        if isinstance(data, str):
            data = data.encode("utf-8")
        if self.post_data_length:
            return bytes(data[: self.post_data_length])
        return bytes(data)

    @property
    def resolved_method(self) -> HttpMethod:
        """Method the request will be dispatched with."""
        if self.method is not None:
            return self.method
        return hdrs.METH_POST if self.body else hdrs.METH_GET


@dataclass(frozen=True)
class Success:
    """Terminal outcome of an exchange that finished without error."""

    body: bytes


@dataclass(frozen=True)
class Failure:
    """Terminal outcome of an exchange that reported an error.

    Attributes:
        message: Error description reported by the transport.
        error: The wrapped transport error, if any.

    """

    message: str
    error: RemoteTextError | None = None


Outcome = Success | Failure


@dataclass(frozen=True)
class ResponseMetadata:
    """Response details read from the transport after the terminal event.

    Attributes:
        status: HTTP status code, or None if no response was received.
        signature: Value of the ``X-Signature`` response header, if present.

    """

    status: int | None = None
    signature: str | None = None


@dataclass(frozen=True)
class Resolution:
    """Result handed to a completion callback once an exchange terminates.

    Attributes:
        outcome: Success or failure of the exchange.
        received: Bytes accumulated before the terminal event.
        metadata: Status code and signature of the response.

    """

    outcome: Outcome
    received: bytes
    metadata: ResponseMetadata


@dataclass
class RemoteFile:
    """Result of a remote file call.

    Attributes:
        ok: False only if an error occurred and the caller asked to fail on
            errors.
        body: Response body accumulated before the exchange ended. May be
            partial when an error occurred.
        error: Error message, empty when no error occurred.
        status_code: HTTP status code, or None if no response was received.
        signature: Value of the ``X-Signature`` response header, if present.

    """

    ok: bool
    body: bytes = b""
    error: str = ""
    status_code: int | None = None
    signature: str | None = None

    @property
    def text(self) -> str:
        """Body decoded as UTF-8, with invalid sequences replaced."""
        return self.body.decode("utf-8", errors="replace")
