"""Custom exceptions for the link shortener service."""

from typing import Optional


class LinkShortenerError(Exception):
    """Base exception for the link shortener service."""


class StoreError(LinkShortenerError):
    """Raised when a link store operation fails.

    Covers timeouts, constraint violations and connectivity loss.
    """

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        self.original_error = original_error
        super().__init__(f"Store error: {message}")


class ShortCodeGenerationError(LinkShortenerError):
    """Raised when a short code cannot be derived from a URL."""

    def __init__(self, url: str, original_error: Optional[BaseException] = None):
        self.url = url
        self.original_error = original_error
        super().__init__(f"Cannot generate short code for {url!r}")
