"""Base62 codec for short codes.

Converts unsigned 64-bit integers to and from strings over the alphabet
``[0-9a-zA-Z]`` (digits first, then lowercase, then uppercase).
"""

import string

ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase
BASE = len(ALPHABET)
MAX_VALUE = 2**64 - 1

_POSITIONS = {char: index for index, char in enumerate(ALPHABET)}


def encode(value: int) -> str:
    """Encode an unsigned 64-bit integer as a base62 string.

    Args:
        value: Integer in the range [0, 2**64).

    Returns:
        Base62 representation, most significant digit first.

    Raises:
        ValueError: If value is outside the uint64 range.
    """
    if value < 0 or value > MAX_VALUE:
        raise ValueError(f"value out of uint64 range: {value}")
    if value == 0:
        return ALPHABET[0]

    digits = []
    while value > 0:
        value, remainder = divmod(value, BASE)
        digits.append(ALPHABET[remainder])

    return "".join(reversed(digits))


def decode(code: str) -> int:
    """Decode a base62 string back to its integer value.

    Callers are expected to validate the format first; a character outside
    the alphabet is treated as a programming error.

    Args:
        code: Base62 string.

    Returns:
        Decoded integer.

    Raises:
        ValueError: If code is empty or contains a non-alphabet character.
    """
    if not code:
        raise ValueError("cannot decode an empty code")

    value = 0
    for char in code:
        try:
            position = _POSITIONS[char]
        except KeyError:
            raise ValueError(f"invalid base62 character {char!r} in {code!r}") from None
        value = value * BASE + position
    return value


def is_valid(code: str) -> bool:
    """Check that a code is non-empty and uses only base62 characters."""
    return bool(code) and all(char in _POSITIONS for char in code)
