"""Core package - configuration, errors and link stores."""

from .config import Settings, get_settings
from .database import LinkStore, MemoryLinkStore, SQLiteLinkStore, get_store
from .exceptions import LinkShortenerError, ShortCodeGenerationError, StoreError

__all__ = [
    "Settings",
    "get_settings",
    "LinkStore",
    "MemoryLinkStore",
    "SQLiteLinkStore",
    "get_store",
    "LinkShortenerError",
    "ShortCodeGenerationError",
    "StoreError",
]
