"""Middleware package for the link shortener."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
