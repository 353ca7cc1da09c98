"""Configuration settings for remotetext."""

from __future__ import annotations

import typing as t
from dataclasses import dataclass

if t.TYPE_CHECKING:
    import logging

DEFAULT_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _package_version() -> str:
    from . import __version__

    return __version__


@dataclass
class RemoteTextConfig:
    """Configuration shared by fetch objects and remote file calls.

    Attributes:
        product_name: Product name embedded in the User-Agent header.
        version_provider: Callable returning the host application's version
            string, embedded in the User-Agent header after the product name.
        default_content_type: Content type used for POST bodies when the
            request does not specify one.
        default_timeout_sec: Transfer timeout applied to requests that do not
            set their own. 0 means no timeout.
        allow_redirects: Whether to follow redirects.
        logger: Logger instance receiving request diagnostics. If None, uses
            the module logger.

    """

    product_name: str = "remotetext"
    version_provider: t.Callable[[], str] = _package_version
    default_content_type: str = DEFAULT_CONTENT_TYPE
    default_timeout_sec: int = 0
    allow_redirects: bool = True
    logger: logging.Logger | None = None

    @property
    def user_agent(self) -> str:
        """User-Agent header value for outgoing requests."""
        return f"User-Agent: {self.product_name} {self.version_provider()}"
