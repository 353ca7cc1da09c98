"""Exchange engine shared by fetch objects and remote file calls.

The engine builds the request, dispatches it, accumulates body chunks and
resolves exactly one terminal outcome per exchange. How the outcome reaches
the caller is decided by the completion callback passed to
:meth:`Engine.dispatch`.
"""

from __future__ import annotations

import logging
import typing as t

from aiohttp import hdrs

from .config import RemoteTextConfig
from .request import build_request
from .transport import Transport
from .types import Failure, ResponseMetadata, Resolution, Success

if t.TYPE_CHECKING:
    from .errors import RemoteTextError
    from .transport import Exchange
    from .types import RequestDescriptor

_logger = logging.getLogger("remotetext")

SIGNATURE_HEADER = "X-Signature"

CompletionCallback = t.Callable[[Resolution], None]


class StreamBuffer:
    """Append-only byte buffer for one exchange."""

    def __init__(self) -> None:
        self._data = bytearray()

    def append(self, chunk: bytes) -> None:
        self._data += chunk

    def clear(self) -> None:
        self._data.clear()

    def getvalue(self) -> bytes:
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)


class _Resolver:
    """Turns the events of one exchange into a single resolution.

    The first terminal event wins. A ``finished`` after a failure, a second
    failure and chunks arriving after the terminal event are ignored.
    """

    def __init__(
        self,
        exchange: Exchange,
        buffer: StreamBuffer,
        on_complete: CompletionCallback,
        logger: logging.Logger,
    ) -> None:
        self._exchange = exchange
        self._buffer = buffer
        self._on_complete = on_complete
        self._logger = logger
        self._resolved = False
        exchange.on_chunk(self._handle_chunk)
        exchange.on_failed(self._handle_failed)
        exchange.on_finished(self._handle_finished)

    def _handle_chunk(self, chunk: bytes) -> None:
        if self._resolved:
            return
        self._buffer.append(chunk)

    def _handle_failed(self, error: RemoteTextError) -> None:
        if self._resolved:
            return
        message = str(error)
        self._logger.warning("RemoteText: HTTP request failed. %s", message)
        self._resolve(Failure(message=message, error=error))

    def _handle_finished(self) -> None:
        if self._resolved:
            return
        self._resolve(Success(body=self._buffer.getvalue()))

    def _resolve(self, outcome: Success | Failure) -> None:
        self._resolved = True
        metadata = extract_metadata(self._exchange)
        received = self._buffer.getvalue()
        self._exchange.release()
        self._on_complete(Resolution(outcome=outcome, received=received, metadata=metadata))


def extract_metadata(exchange: Exchange) -> ResponseMetadata:
    """Read the status code and signature header of a finished exchange."""
    return ResponseMetadata(
        status=exchange.status,
        signature=exchange.header(SIGNATURE_HEADER),
    )


class Engine:
    """Builds, dispatches and resolves exchanges.

    Attributes:
        config: Configuration used to build requests.
        transport: Dispatcher performing the HTTP exchanges.

    """

    def __init__(
        self,
        config: RemoteTextConfig | None = None,
        transport: Transport | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Configuration object. If None, uses the default configuration.
            transport: Dispatcher to use. If None, an aiohttp transport is
                created from the configuration.

        """
        self.config = config or RemoteTextConfig()
        self.transport = transport or Transport(self.config)
        self._logger = self.config.logger or _logger

    def dispatch(
        self,
        descriptor: RequestDescriptor,
        on_complete: CompletionCallback,
        buffer: StreamBuffer | None = None,
    ) -> Exchange:
        """Start an exchange and report its resolution to ``on_complete``.

        Args:
            descriptor: The request to perform.
            on_complete: Called exactly once with the resolution.
            buffer: Buffer receiving the body chunks. A new one is used if None.

        Returns:
            Exchange: The in-flight exchange handle.

        Raises:
            RuntimeError: If no event loop is running.

        """
        request = build_request(descriptor, self.config)
        self._logger.debug("Starting request: %s %s", request.method, request.url)

        if request.method == hdrs.METH_POST:
            exchange = self.transport.post(request)
        else:
            exchange = self.transport.get(request)

        _Resolver(exchange, buffer if buffer is not None else StreamBuffer(), on_complete, self._logger)
        return exchange
