"""
Utility modules for the event extraction pipeline.

Submodules:
    text: Text processing utilities (normalization, noise predicates, hashing)
"""

from eventscan.utils.text import (
    normalize_whitespace,
    is_year_only,
    is_digits_only,
    content_hash,
    ensure_hash_available,
)

__all__ = [
    "normalize_whitespace",
    "is_year_only",
    "is_digits_only",
    "content_hash",
    "ensure_hash_available",
]
