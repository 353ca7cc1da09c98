"""Outgoing request construction."""

from __future__ import annotations

import logging
import typing as t
from dataclasses import dataclass

import aiohttp
from aiohttp import hdrs
from multidict import CIMultiDict
from yarl import URL

from .config import RemoteTextConfig

if t.TYPE_CHECKING:
    from .types import HttpMethod, RequestDescriptor

_logger = logging.getLogger("remotetext")

HEADER_SEPARATOR = ": "


@dataclass
class PreparedRequest:
    """A fully specified request ready for dispatch.

    Attributes:
        method: ``"GET"`` or ``"POST"``.
        url: Target URL.
        headers: Request headers, looked up case-insensitively.
        body: Encoded payload for POST requests.
        timeout_ms: Transfer timeout in milliseconds, None for no timeout.

    """

    method: HttpMethod
    url: URL
    headers: CIMultiDict[str]
    body: bytes | None = None
    timeout_ms: int | None = None

    @property
    def client_timeout(self) -> aiohttp.ClientTimeout | None:
        """Transfer timeout as an aiohttp timeout.

        The transfer timeout bounds inactivity rather than the whole exchange,
        so it applies to connecting and to each socket read.
        """
        if self.timeout_ms is None:
            return None
        seconds = self.timeout_ms / 1000
        return aiohttp.ClientTimeout(total=None, sock_connect=seconds, sock_read=seconds)


def parse_header_line(line: str) -> tuple[str, str] | None:
    """Split a raw ``"Name: Value"`` header line at the first separator.

    Args:
        line: Raw header line.

    Returns:
        tuple[str, str] or None: Name and value, or None for a malformed line.

    """
    name, sep, value = line.partition(HEADER_SEPARATOR)
    if not sep:
        return None
    return name, value


def build_request(
    descriptor: RequestDescriptor,
    config: RemoteTextConfig | None = None,
) -> PreparedRequest:
    """Build the outgoing request for a descriptor.

    Extra header lines are applied after User-Agent and Content-Type and
    replace same-named headers. The form content type default for POST
    bodies is only used when neither ``content_type`` nor an extra
    ``Content-Type`` line was given, so an extra line is never overridden.

    Args:
        descriptor: What to fetch and how.
        config: Product name, version provider and defaults. If None, uses
            the default configuration.

    Returns:
        PreparedRequest: The request to dispatch.

    """
    config = config or RemoteTextConfig()
    logger = config.logger or _logger

    headers: CIMultiDict[str] = CIMultiDict()
    headers[hdrs.USER_AGENT] = config.user_agent
    if descriptor.content_type:
        headers[hdrs.CONTENT_TYPE] = descriptor.content_type

    timeout_sec = descriptor.timeout_sec or config.default_timeout_sec
    timeout_ms = timeout_sec * 1000 if timeout_sec else None

    for line in descriptor.extra_headers:
        parsed = parse_header_line(line)
        if parsed is None:
            logger.debug("Skipping malformed header line: %r", line)
            continue
        name, value = parsed
        headers[name] = value

    method = descriptor.resolved_method
    body = descriptor.body if method == hdrs.METH_POST else None
    if body and not descriptor.content_type and hdrs.CONTENT_TYPE not in headers:
        headers[hdrs.CONTENT_TYPE] = config.default_content_type

    return PreparedRequest(
        method=method,
        url=descriptor.url if isinstance(descriptor.url, URL) else URL(descriptor.url),
        headers=headers,
        body=body,
        timeout_ms=timeout_ms,
    )
