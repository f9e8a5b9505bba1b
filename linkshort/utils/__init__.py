"""Utils package for the link shortener."""

from .shortener import (
    generate_short_code,
    is_absolute_url,
    create_short_url,
)

__all__ = [
    "generate_short_code",
    "is_absolute_url",
    "create_short_url",
]
