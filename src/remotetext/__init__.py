"""Fetch remote text and binary payloads over HTTP."""

from .config import RemoteTextConfig
from .engine import Engine, StreamBuffer
from .errors import (
    RemoteTextError,
    RemoteTextTimeoutError,
    RequestError,
    ResponseError,
)
from .fetcher import RemoteText, fetch_remote_file, get_remote_file
from .request import PreparedRequest, build_request, parse_header_line
from .transport import Exchange, Transport
from .types import (
    Failure,
    FetchState,
    RemoteFile,
    RequestDescriptor,
    Success,
)

__all__ = [
    "Engine",
    "Exchange",
    "Failure",
    "FetchState",
    "PreparedRequest",
    "RemoteFile",
    "RemoteText",
    "RemoteTextConfig",
    "RemoteTextError",
    "RemoteTextTimeoutError",
    "RequestDescriptor",
    "RequestError",
    "ResponseError",
    "StreamBuffer",
    "Success",
    "Transport",
    "build_request",
    "fetch_remote_file",
    "get_remote_file",
    "parse_header_line",
]
__version__ = "0.1.0"
