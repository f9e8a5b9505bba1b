"""Tests for the base62 codec and short code generation."""

import random
import re

import pytest

from linkshort.core.exceptions import ShortCodeGenerationError
from linkshort.utils import base62
from linkshort.utils.shortener import (
    create_short_url,
    generate_short_code,
    is_absolute_url,
)


class TestBase62:
    """Tests for the base62 codec."""

    def test_encode_zero(self):
        assert base62.encode(0) == "0"

    @pytest.mark.parametrize(
        "value, expected",
        [
            (1, "1"),
            (10, "a"),
            (36, "A"),
            (61, "Z"),
            (62, "10"),
            (3843, "ZZ"),
            (238327, "ZZZ"),
            (4294967295, "4GFfc3"),
        ],
    )
    def test_encode_known_values(self, value, expected):
        assert base62.encode(value) == expected
        assert base62.decode(expected) == value

    def test_round_trip(self):
        rng = random.Random(1234)
        values = [0, 1, 61, 62, 2**32 - 1, 2**32, 2**63, 2**64 - 1]
        values += [rng.randrange(2**64) for _ in range(500)]
        for value in values:
            assert base62.decode(base62.encode(value)) == value

    def test_no_leading_zeros(self):
        for value in (1, 62, 62**5, 2**64 - 1):
            assert not base62.encode(value).startswith("0")

    @pytest.mark.parametrize("value", [-1, 2**64])
    def test_encode_out_of_range(self, value):
        with pytest.raises(ValueError):
            base62.encode(value)

    @pytest.mark.parametrize("code", ["", "abc-1", "a b", "é"])
    def test_decode_invalid(self, code):
        with pytest.raises(ValueError):
            base62.decode(code)

    def test_is_valid(self):
        assert base62.is_valid("abcXYZ019")
        assert not base62.is_valid("")
        assert not base62.is_valid("abc_1")
        assert not base62.is_valid("abc/1")


class TestGenerateShortCode:
    """Tests for URL-derived short codes."""

    def test_known_value(self):
        # md5("http://example.com") starts with a9 b9 f0 43
        assert generate_short_code("http://example.com") == "1f8GXD"

    def test_deterministic(self):
        url = "https://example.com/some/long/path?q=1"
        assert generate_short_code(url) == generate_short_code(url)

    def test_format(self):
        for i in range(200):
            code = generate_short_code(f"https://example.com/{i}")
            assert re.match(r"^[0-9a-zA-Z]+$", code)
            assert len(code) <= 6

    def test_case_sensitive_input(self):
        assert generate_short_code("http://example.com/A") != generate_short_code(
            "http://example.com/a"
        )

    def test_unencodable_url(self):
        with pytest.raises(ShortCodeGenerationError):
            generate_short_code("http://example.com/\ud800")


class TestIsAbsoluteURL:
    """Tests for request URI validation."""

    @pytest.mark.parametrize(
        "url",
        [
            "http://example.com",
            "https://example.com/path?q=1#frag",
            "http://localhost:8080/",
            "http://[::1]:3000/x",
            "ftp://files.example.com/a.txt",
            "mailto:someone@example.com",
        ],
    )
    def test_valid(self, url):
        assert is_absolute_url(url) is True

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "example.com",
            "/relative/path",
            "http:",
            "http://",
            "1http://example.com",
            "http://exa mple.com",
            "http://example.com/\n",
            "http://example.com:99999/",
            "http://[::1/",
        ],
    )
    def test_invalid(self, url):
        assert is_absolute_url(url) is False


class TestCreateShortURL:
    """Tests for public short link construction."""

    def test_joins_host_and_code(self):
        assert create_short_url("goshort.test", "abc") == "goshort.test/abc"

    def test_host_with_port(self):
        assert create_short_url("localhost:3000", "abc") == "localhost:3000/abc"

    def test_no_host(self):
        assert create_short_url("", "abc") == "abc"
