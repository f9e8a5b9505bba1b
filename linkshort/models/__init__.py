"""Models package for the link shortener."""

from .link import LinkCreate, ErrorResponse

__all__ = ["LinkCreate", "ErrorResponse"]
