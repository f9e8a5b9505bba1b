"""URL shortening utilities module.

This module derives short codes from URLs and validates the URLs
clients submit.
"""

import hashlib
import logging
import posixpath
import re
import struct
from urllib.parse import urlsplit

from ..core.exceptions import ShortCodeGenerationError
from . import base62

logger = logging.getLogger(__name__)

# RFC 3986 scheme, followed by a colon
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_FORBIDDEN_RE = re.compile(r"[\x00-\x20\x7f]")


def generate_short_code(url: str) -> str:
    """Derive a short code from a URL.

    The md5 digest of the URL's UTF-8 bytes is truncated to its first four
    bytes, read as a little-endian unsigned 32-bit integer and base62
    encoded. The same URL always yields the same code; distinct URLs may
    collide.

    Args:
        url: Already validated absolute URL.

    Returns:
        Short code of at most 6 characters.

    Raises:
        ShortCodeGenerationError: If the URL cannot be encoded as UTF-8.
    """
    try:
        data = url.encode("utf-8")
    except UnicodeEncodeError as e:
        logger.error(f"Cannot encode URL for hashing: {e}")
        raise ShortCodeGenerationError(url, e) from e

    digest = hashlib.md5(data, usedforsecurity=False).digest()
    (value,) = struct.unpack("<I", digest[:4])
    short_code = base62.encode(value)
    logger.debug(f"Generated short code {short_code} for {url}")
    return short_code


def is_absolute_url(url: str) -> bool:
    """Check that a URL is a usable absolute request URI.

    Args:
        url: URL submitted by a client.

    Returns:
        True if the URL has a scheme, a non-empty remainder, no whitespace
        or control characters, and a well-formed authority when one is
        present.
    """
    if not url or _FORBIDDEN_RE.search(url):
        return False
    if not _SCHEME_RE.match(url):
        return False

    try:
        parts = urlsplit(url)
        # Raises ValueError on a non-numeric or out-of-range port
        parts.port
    except ValueError:
        return False

    remainder = url[len(parts.scheme) + 1:]
    if not remainder:
        return False
    if remainder.startswith("//") and not parts.netloc:
        return False
    return True


def create_short_url(host: str, short_code: str) -> str:
    """Join the request host and a short code into the public path.

    Args:
        host: Host the request was addressed to (may be empty).
        short_code: Short code.

    Returns:
        ``<host>/<short_code>``, or just the code when there is no host.
    """
    return posixpath.join(host.rstrip("/"), short_code)
