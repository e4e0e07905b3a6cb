"""
Text processing utilities for the event extraction pipeline.

This module provides the small text primitives every stage shares:
- Whitespace normalization for line and cell text
- Year-only and digit-only predicates used by the noise filters
- Content hashing for record fingerprints
"""

import hashlib
import re
from typing import List, Optional

from eventscan.errors import FatalHashError


_WS_RX = re.compile(r"\s+")
_YEAR_RX = re.compile(r"^[0-9]{4}$")
_DIGITS_RX = re.compile(r"^[0-9]+$")


def normalize_whitespace(text: Optional[str]) -> str:
    """
    Collapse every run of whitespace to a single space and trim.

    Args:
        text: Raw text (None is treated as empty).

    Returns:
        Normalized text. Applying the function twice gives the same result.

    Example:
        >>> normalize_whitespace("  Annual\\t Gala \\n")
        'Annual Gala'
        >>> normalize_whitespace(None)
        ''
    """
    return _WS_RX.sub(" ", text or "").strip()


def is_year_only(text: Optional[str]) -> bool:
    """
    Check whether text is a bare four-digit year after normalization.

    Only ASCII digits count; "２０２６" or "2026." are not years.

    Example:
        >>> is_year_only(" 2026 ")
        True
        >>> is_year_only("Jan 2026")
        False
    """
    return bool(_YEAR_RX.match(normalize_whitespace(text)))


def is_digits_only(text: Optional[str]) -> bool:
    """
    Check whether text is a run of ASCII digits (page-number artifacts).

    Example:
        >>> is_digits_only("42")
        True
        >>> is_digits_only("4 2")
        False
    """
    return bool(_DIGITS_RX.match(normalize_whitespace(text)))


def content_hash(parts: List[str], algorithm: str = "sha256") -> str:
    """
    Hash a list of string parts joined with "|".

    The same inputs always produce the same hex digest, independent of run
    order or process, which is what persisted fingerprints rely on.

    Args:
        parts: Strings to hash together.
        algorithm: hashlib algorithm name.

    Returns:
        Full hex digest.

    Raises:
        FatalHashError: If the algorithm is not available in this interpreter.
    """
    try:
        hasher = hashlib.new(algorithm)
    except (ValueError, TypeError) as exc:
        raise FatalHashError(f"Hash algorithm '{algorithm}' unavailable: {exc}") from exc

    hasher.update("|".join(parts).encode("utf-8"))
    return hasher.hexdigest()


def ensure_hash_available(algorithm: str = "sha256") -> None:
    """
    Fail fast when the hash algorithm cannot be instantiated.

    Raises:
        FatalHashError: If hashlib does not provide the algorithm.
    """
    content_hash([], algorithm=algorithm)
