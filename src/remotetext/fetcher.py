"""Fetch objects and remote file calls."""

from __future__ import annotations

import asyncio
import typing as t

from .config import RemoteTextConfig
from .engine import Engine, StreamBuffer
from .types import Failure, FetchState, RemoteFile, RequestDescriptor, Success

if t.TYPE_CHECKING:
    from collections.abc import Sequence

    from yarl import URL

    from .transport import Exchange, Transport
    from .types import HttpMethod, Resolution

Notifier = t.Callable[[str, str], None]


class RemoteText:
    """Asynchronous fetch object.

    ``start()`` dispatches the request and returns immediately. When the
    exchange ends, ``notifier(body, error)`` is called once on the event loop:
    with the decoded body and an empty error on success, or with an empty body
    and the error message on failure. The object can be started again once
    the previous exchange has ended; the request attributes may be changed in
    between.

    Attributes:
        url: Target URL.
        notifier: Completion callback receiving ``(body, error)``.
        content_type: Explicit Content-Type header value.
        post_data: Payload; a non-empty payload makes the request a POST.
        extra_headers: Raw header lines formatted ``"Name: Value"``.
        timeout_sec: Transfer timeout in seconds, 0 for none.
        config: Configuration object.

    """

    def __init__(
        self,
        url: str | URL,
        notifier: Notifier,
        *,
        content_type: str | None = None,
        post_data: bytes | str | None = None,
        extra_headers: Sequence[str] = (),
        timeout_sec: int = 0,
        config: RemoteTextConfig | None = None,
        transport: Transport | None = None,
    ) -> None:
        self.url = url
        self.notifier = notifier
        self.content_type = content_type
        self.post_data = post_data
        self.extra_headers = list(extra_headers)
        self.timeout_sec = timeout_sec
        self.config = config or RemoteTextConfig()
        self._engine = Engine(self.config, transport)
        self._buffer = StreamBuffer()
        self._state = FetchState.IDLE
        self._exchange: Exchange | None = None

    @property
    def state(self) -> FetchState:
        return self._state

    def start(self) -> None:
        """Dispatch the request.

        Raises:
            RuntimeError: If a request is already in flight or no event loop
                is running.
            ValueError: If the request attributes are invalid.

        """
        if self._state is FetchState.IN_FLIGHT:
            msg = "RemoteText request is already in flight"
            raise RuntimeError(msg)

        descriptor = RequestDescriptor(
            url=self.url,
            content_type=self.content_type,
            post_data=self.post_data,
            extra_headers=tuple(self.extra_headers),
            timeout_sec=self.timeout_sec,
        )
        self._buffer.clear()
        self._exchange = self._engine.dispatch(descriptor, self._complete, self._buffer)
        self._state = FetchState.IN_FLIGHT

    def _complete(self, resolution: Resolution) -> None:
        self._exchange = None
        outcome = resolution.outcome
        if isinstance(outcome, Success):
            self._state = FetchState.SUCCEEDED
            self.notifier(outcome.body.decode("utf-8", errors="replace"), "")
        else:
            self._state = FetchState.FAILED
            self.notifier("", outcome.message)


async def fetch_remote_file(
    url: str | URL,
    *,
    content_type: str | None = None,
    method: HttpMethod | None = None,
    post_data: bytes | str | None = None,
    extra_headers: Sequence[str] = (),
    timeout_sec: int = 0,
    fail_on_error: bool = False,
    post_data_length: int | None = None,
    config: RemoteTextConfig | None = None,
    transport: Transport | None = None,
) -> RemoteFile:
    """Fetch a remote file and wait for the exchange to end.

    Transport and HTTP errors never raise; they are reported in the result.
    Cancelling the call aborts the exchange.

    Args:
        url: The URL to fetch.
        content_type: Explicit Content-Type header value.
        method: ``"GET"`` or ``"POST"``. When None, POST is used if a
            non-empty payload is given.
        post_data: Request payload.
        extra_headers: Raw header lines formatted ``"Name: Value"``.
        timeout_sec: Transfer timeout in seconds, 0 for none.
        fail_on_error: If True, an error makes the result not ok. Otherwise
            the result stays ok and only carries the error message.
        post_data_length: Explicit payload length in bytes for binary payloads.
        config: Configuration object. If None, uses the default configuration.
        transport: Dispatcher to use instead of the aiohttp transport.

    Returns:
        RemoteFile: Body, error, status code and signature of the response.

    Raises:
        ValueError: If the URL is empty, the timeout negative or the method
            unsupported.

    """
    descriptor = RequestDescriptor(
        url=url,
        content_type=content_type,
        post_data=post_data,
        post_data_length=post_data_length,
        extra_headers=tuple(extra_headers),
        timeout_sec=timeout_sec,
        method=method,
    )
    loop = asyncio.get_running_loop()
    done: asyncio.Future[Resolution] = loop.create_future()

    def resolve(resolution: Resolution) -> None:
        if not done.done():
            done.set_result(resolution)

    exchange = Engine(config, transport).dispatch(descriptor, resolve)
    try:
        resolution = await done
    except asyncio.CancelledError:
        exchange.abort()
        raise

    outcome = resolution.outcome
    in_error = isinstance(outcome, Failure)
    return RemoteFile(
        ok=not (in_error and fail_on_error),
        body=resolution.received,
        error=outcome.message if in_error else "",
        status_code=resolution.metadata.status,
        signature=resolution.metadata.signature,
    )


def get_remote_file(
    url: str | URL,
    *,
    content_type: str | None = None,
    method: HttpMethod | None = None,
    post_data: bytes | str | None = None,
    extra_headers: Sequence[str] = (),
    timeout_sec: int = 0,
    fail_on_error: bool = False,
    post_data_length: int | None = None,
    config: RemoteTextConfig | None = None,
    transport: Transport | None = None,
) -> RemoteFile:
    """Blocking form of :func:`fetch_remote_file`.

    Runs its own event loop, so it must not be called from a coroutine.
    """
    return asyncio.run(
        fetch_remote_file(
            url,
            content_type=content_type,
            method=method,
            post_data=post_data,
            extra_headers=extra_headers,
            timeout_sec=timeout_sec,
            fail_on_error=fail_on_error,
            post_data_length=post_data_length,
            config=config,
            transport=transport,
        ),
    )
