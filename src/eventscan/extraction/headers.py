"""
Table header detection and column anchor derivation.

A header line must mention all of DATE, TIME, EVENT, DETAILS and LOCATION
(as substrings of the upper-cased line text). Each column's anchor is the x
of the first token containing its label. EVENT falls back to DETAILS when
no token contains EVENT.

Anchors are returned sorted by x. The splitter maps the i-th boundary to
the i-th anchor's key, so the physical left-to-right order on the page is
assumed to be date < time < event < location. A document that orders the
labels differently is still split consistently, but its cells carry the
wrong semantic keys. Persisted fingerprints depend on this mapping.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .lines import Line

logger = logging.getLogger(__name__)


COLUMN_KEYS = ("date", "time", "event", "location")

# Substrings a header line must contain
HEADER_REQUIRED_LABELS = ("DATE", "TIME", "EVENT", "DETAILS", "LOCATION")

# Column key -> labels tried in order when locating the anchor token
ANCHOR_LABELS = {
    "date": ("DATE",),
    "time": ("TIME",),
    "event": ("EVENT", "DETAILS"),
    "location": ("LOCATION",),
}

KIND_RESOLVED = "resolved"
KIND_UNRESOLVED = "unresolved"
KIND_NOT_HEADER = "not_header"


@dataclass(frozen=True)
class ColumnAnchor:
    """X-position of a recognized column label."""

    key: str
    x: float


@dataclass
class HeaderResolution:
    """
    Result of testing a line as a table header.

    Attributes:
        kind: resolved, unresolved (labels present but an anchor token is
            missing), or not_header.
        anchors: Four anchors sorted by ascending x (resolved only).
        missing: Column keys whose anchor token could not be found.
    """

    kind: str
    anchors: List[ColumnAnchor] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)

    @property
    def is_header(self) -> bool:
        """True only when all four anchors resolved."""
        return self.kind == KIND_RESOLVED

    @property
    def is_mismatch(self) -> bool:
        """True when the substring test passed but anchoring failed."""
        return self.kind == KIND_UNRESOLVED


def looks_like_header(text: str) -> bool:
    """Substring test for the five header labels."""
    upper = (text or "").upper()
    return all(label in upper for label in HEADER_REQUIRED_LABELS)


def _find_anchor_x(line: Line, labels: Tuple[str, ...]) -> Optional[float]:
    for label in labels:
        for token in line.tokens:
            if label in (token.text or "").upper():
                return token.x
    return None


def detect_header(line: Line) -> HeaderResolution:
    """
    Test a line as a table header and derive its four column anchors.

    Args:
        line: A grouped line with x-ordered tokens.

    Returns:
        HeaderResolution. Callers must check is_header before using anchors.

    Example:
        >>> res = detect_header(header_line)
        >>> [a.key for a in res.anchors]
        ['date', 'time', 'event', 'location']
    """
    if not looks_like_header(line.text):
        return HeaderResolution(kind=KIND_NOT_HEADER)

    found = {}
    missing = []
    for key in COLUMN_KEYS:
        x = _find_anchor_x(line, ANCHOR_LABELS[key])
        if x is None:
            missing.append(key)
        else:
            found[key] = x

    if missing:
        logger.debug(f"Header-like line lacks anchors for {missing}: {line.text!r}")
        return HeaderResolution(kind=KIND_UNRESOLVED, missing=missing)

    anchors = sorted(
        (ColumnAnchor(key=key, x=float(found[key])) for key in COLUMN_KEYS),
        key=lambda a: a.x,
    )
    return HeaderResolution(kind=KIND_RESOLVED, anchors=anchors)
