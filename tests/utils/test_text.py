"""Tests for shared text utilities."""

import hashlib

import pytest

from eventscan.errors import FatalHashError
from eventscan.utils.text import (
    content_hash,
    ensure_hash_available,
    is_digits_only,
    is_year_only,
    normalize_whitespace,
)


class TestNormalizeWhitespace:

    @pytest.mark.parametrize("raw,expected", [
        ("  Annual   Gala ", "Annual Gala"),
        ("Line\tone\nline two", "Line one line two"),
        (" Boston ", "Boston"),
        ("", ""),
        (None, ""),
    ])
    def test_collapses_and_trims(self, raw, expected):
        assert normalize_whitespace(raw) == expected

    def test_idempotent(self):
        once = normalize_whitespace("  a \n\n b\t c  ")
        assert normalize_whitespace(once) == once


class TestNoisePredicates:

    @pytest.mark.parametrize("text", ["2026", " 2026 ", "\t1999\n"])
    def test_year_only_true(self, text):
        assert is_year_only(text)

    @pytest.mark.parametrize("text", ["26", "20266", "Jan 2026", "2026.", "", None])
    def test_year_only_false(self, text):
        assert not is_year_only(text)

    def test_year_only_rejects_non_ascii_digits(self):
        assert not is_year_only("２０２６")

    def test_digits_only(self):
        assert is_digits_only("7")
        assert is_digits_only(" 42 ")
        assert not is_digits_only("4 2")
        assert not is_digits_only("p. 4")
        assert not is_digits_only("")


class TestContentHash:

    def test_matches_hashlib(self):
        expected = hashlib.sha256("a|b|c".encode("utf-8")).hexdigest()
        assert content_hash(["a", "b", "c"]) == expected

    def test_deterministic_and_full_length(self):
        first = content_hash(["gala", "Jan 5", "boston"])
        assert first == content_hash(["gala", "Jan 5", "boston"])
        assert len(first) == 64

    def test_part_boundaries_matter(self):
        assert content_hash(["ab", "c"]) != content_hash(["a", "bc"])

    def test_unknown_algorithm_is_fatal(self):
        with pytest.raises(FatalHashError, match="no-such-hash"):
            content_hash(["x"], algorithm="no-such-hash")

    def test_ensure_hash_available(self):
        ensure_hash_available("sha256")
        with pytest.raises(FatalHashError):
            ensure_hash_available("no-such-hash")
