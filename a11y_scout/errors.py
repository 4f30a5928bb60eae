"""Error types shared by the crawler, the CLI and the HTTP server."""
from __future__ import annotations

from typing import Final

__all__ = ("UNKNOWN_ERROR", "CrawlerError", "InvalidUrl", "BrowserLaunchError", "describe_error")

UNKNOWN_ERROR: Final[str] = "Unknown error"


def describe_error(error: object) -> str:
    """Human-readable message for any raised value.

    Exceptions without a message, and values that are not exceptions at all,
    are reported as ``"Unknown error"``.
    """
    if isinstance(error, BaseException):
        message = str(error).strip()
        if message:
            return message
    return UNKNOWN_ERROR


class CrawlerError(Exception):
    """Base class for crawler failures; always carries a message."""

    def __init__(self, message: str | None = None) -> None:
        self.message = message or UNKNOWN_ERROR
        super().__init__(self.message)


class InvalidUrl(CrawlerError, ValueError):
    """The string cannot be parsed as an absolute URL with a host."""

    def __init__(self, url: str, reason: str | None = None) -> None:
        self.url = url
        text = f"Invalid URL: {url!r}"
        if reason:
            text = f"{text} ({reason})"
        super().__init__(text)


class BrowserLaunchError(CrawlerError):
    """The headless browser could not be started."""
