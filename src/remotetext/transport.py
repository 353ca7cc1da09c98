"""HTTP transport dispatch built on aiohttp."""

from __future__ import annotations

import asyncio
import logging
import typing as t

import aiohttp
from aiohttp import hdrs

from .config import RemoteTextConfig
from .errors import RemoteTextError, ResponseError, wrap_transport_error

if t.TYPE_CHECKING:
    from multidict import CIMultiDictProxy

    from .request import PreparedRequest

_logger = logging.getLogger("remotetext")

ChunkCallback = t.Callable[[bytes], None]
FinishedCallback = t.Callable[[], None]
FailedCallback = t.Callable[[RemoteTextError], None]


class Exchange:
    """Handle for one in-flight HTTP exchange.

    Subscribers are told about body chunks, a failure and the end of the
    exchange. A transport emits chunks in arrival order, then at most one
    failure, then ``finished``. Once released, the handle drops all
    subscribers and ignores further events.

    Attributes:
        url: The requested URL, for diagnostics.
        status: HTTP status code, None until a response arrives.
        headers: Response headers, None until a response arrives.
        task: The task performing the exchange, if the transport runs one.

    """

    def __init__(self, url: str) -> None:
        self.url = url
        self.status: int | None = None
        self.headers: CIMultiDictProxy[str] | None = None
        self.task: asyncio.Task[None] | None = None
        self._chunk_callbacks: list[ChunkCallback] = []
        self._finished_callbacks: list[FinishedCallback] = []
        self._failed_callbacks: list[FailedCallback] = []
        self._released = False

    @property
    def released(self) -> bool:
        """Whether the handle was released and no longer reports events."""
        return self._released

    def on_chunk(self, callback: ChunkCallback) -> None:
        """Subscribe to body chunks, called once per chunk in arrival order."""
        self._chunk_callbacks.append(callback)

    def on_finished(self, callback: FinishedCallback) -> None:
        """Subscribe to the end of the exchange, successful or not."""
        self._finished_callbacks.append(callback)

    def on_failed(self, callback: FailedCallback) -> None:
        """Subscribe to the failure of the exchange."""
        self._failed_callbacks.append(callback)

    def emit_chunk(self, chunk: bytes) -> None:
        """Report a body chunk to the subscribers."""
        for callback in list(self._chunk_callbacks):
            callback(chunk)

    def emit_failed(self, error: RemoteTextError) -> None:
        """Report a failure to the subscribers."""
        for callback in list(self._failed_callbacks):
            callback(error)

    def emit_finished(self) -> None:
        """Report the end of the exchange to the subscribers."""
        for callback in list(self._finished_callbacks):
            callback()

    def header(self, name: str) -> str | None:
        """Look up a response header, None if absent or no response yet."""
        if self.headers is None:
            return None
        return self.headers.get(name)

    def release(self) -> None:
        """Detach all subscribers."""
        self._released = True
        self._chunk_callbacks.clear()
        self._finished_callbacks.clear()
        self._failed_callbacks.clear()

    def abort(self) -> None:
        """Release the handle and cancel the task performing the exchange."""
        self.release()
        if self.task is not None:
            self.task.cancel()


class Transport:
    """Dispatches prepared requests with aiohttp.

    Every exchange runs in its own ``aiohttp.ClientSession`` as a task on the
    running event loop; dispatch returns immediately with the exchange handle.
    """

    def __init__(self, config: RemoteTextConfig | None = None) -> None:
        """Initialize the transport.

        Args:
            config: Configuration providing redirect policy and logger.

        """
        self.config = config or RemoteTextConfig()
        self._logger = self.config.logger or _logger

    def get(self, request: PreparedRequest) -> Exchange:
        """Issue a GET request."""
        return self._dispatch(hdrs.METH_GET, request)

    def post(self, request: PreparedRequest) -> Exchange:
        """Issue a POST request with the request body."""
        return self._dispatch(hdrs.METH_POST, request)

    def _dispatch(self, method: str, request: PreparedRequest) -> Exchange:
        """Schedule the exchange on the running loop.

        Raises:
            RuntimeError: If no event loop is running.

        """
        loop = asyncio.get_running_loop()
        exchange = Exchange(str(request.url))
        exchange.task = loop.create_task(self._run(exchange, method, request))
        exchange.task.add_done_callback(self._log_callback_error)
        return exchange

    def _log_callback_error(self, task: asyncio.Task[None]) -> None:
        # Only subscriber callbacks run outside the error ladder in _run.
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._logger.error("RemoteText: completion callback failed", exc_info=exc)

    def _build_request_kwargs(self, method: str, request: PreparedRequest) -> dict[str, t.Any]:
        kwargs: dict[str, t.Any] = {
            "headers": request.headers,
            "allow_redirects": self.config.allow_redirects,
        }
        if method == hdrs.METH_POST and request.body is not None:
            kwargs["data"] = request.body
        return kwargs

    async def _run(self, exchange: Exchange, method: str, request: PreparedRequest) -> None:
        """Perform the exchange and report its events.

        Chunks are emitted while the body streams in. Failures are reported
        through ``failed`` once the session is closed, and ``finished`` is
        always emitted last.
        """
        url_str = exchange.url
        timeout = request.client_timeout or aiohttp.ClientTimeout(total=None)
        kwargs = self._build_request_kwargs(method, request)
        error: RemoteTextError | None = None
        try:
            async with (
                aiohttp.ClientSession(timeout=timeout) as session,
                session.request(method, request.url, **kwargs) as response,
            ):
                exchange.status = response.status
                exchange.headers = response.headers
                async for chunk in response.content.iter_any():
                    exchange.emit_chunk(chunk)

                if response.status >= 400:  # noqa: PLR2004
                    self._logger.debug("Non-OK response: %s %s -> %d", method, url_str, response.status)
                    msg = f"HTTP error {response.status}: {response.reason}"
                    error = ResponseError(msg, status=response.status, url=url_str)
                else:
                    self._logger.debug("Request completed: %s %s -> %d", method, url_str, response.status)
        except Exception as e:  # noqa: BLE001
            error = wrap_transport_error(e, url_str)

        if error is not None:
            exchange.emit_failed(error)
        exchange.emit_finished()
