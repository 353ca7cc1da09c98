"""Transport errors reported by remotetext.

Failures are never raised to callers of the fetch API. The transport wraps
what aiohttp raised into one of these classes and the resolver hands its
message to the caller, so ``str(error)`` is a single transport description.
"""

from __future__ import annotations

import aiohttp


class RemoteTextError(Exception):
    """Base exception for all remotetext errors.

    Attributes:
        message: Transport description surfaced to callers.
        cause: The aiohttp exception that caused this error, if any.
        url: The URL that was being fetched.

    """

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.url = url

    def __str__(self) -> str:
        return self.message


class RequestError(RemoteTextError):
    """Connection, DNS, TLS or invalid URL failure."""


class RemoteTextTimeoutError(RemoteTextError):
    """No data was transferred within the transfer timeout."""


class ResponseError(RemoteTextError):
    """The server replied with an HTTP error status.

    Attributes:
        status: HTTP status code of the reply.

    """

    def __init__(
        self,
        message: str,
        *,
        status: int,
        url: str | None = None,
    ) -> None:
        super().__init__(message, url=url)
        self.status = status


def wrap_transport_error(exc: Exception, url: str) -> RemoteTextError:
    """Wrap an exception raised while performing an exchange.

    The cause's own text is used once, as the tail of the message.

    Args:
        exc: What aiohttp (or a subscriber) raised.
        url: The URL being fetched.

    Returns:
        RemoteTextError: The error to report through ``failed``.

    """
    if isinstance(exc, TimeoutError):
        return RemoteTextTimeoutError(f"Request timed out: {url}", cause=exc, url=url)
    if isinstance(exc, aiohttp.ClientError):
        return RequestError(f"Request failed: {exc}", cause=exc, url=url)
    return RequestError(f"Unexpected error during request: {exc}", cause=exc, url=url)
