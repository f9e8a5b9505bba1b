"""Schemas package for the link shortener."""

from .link import Link

__all__ = ["Link"]
