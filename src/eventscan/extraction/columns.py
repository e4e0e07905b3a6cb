"""
Column splitting for table data lines.

This module assigns each token of a data line to one of the four table
columns using the x anchors of the section's header.

Algorithm Overview:
1. Compute three boundaries as midpoints between consecutive sorted anchors
2. Assign each token by x to a half-open interval (b[i-1], b[i]]; a token
   exactly on a boundary belongs to the lower column
3. Within each column, re-sort tokens by x, join with spaces, normalize

Columns are reported positionally as (date, time, event, location): the
leftmost anchor's interval is always the date cell, whichever label
produced it.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

from eventscan.utils.text import normalize_whitespace
from .geometry import PositionedToken
from .headers import COLUMN_KEYS, ColumnAnchor
from .lines import Line


@dataclass
class ColumnCells:
    """
    Normalized cell text for one data line.

    Attributes:
        date, time, event, location: Cell text ("" when empty).
        event_tokens: Raw tokens assigned to the event column (for link
            matching), ordered by x.
    """

    date: str = ""
    time: str = ""
    event: str = ""
    location: str = ""
    event_tokens: List[PositionedToken] = field(default_factory=list)

    def get(self, key: str) -> str:
        return getattr(self, key)


def column_boundaries(anchors: Sequence[ColumnAnchor]) -> np.ndarray:
    """
    Compute the three column boundaries from four sorted anchors.

    Example:
        >>> column_boundaries(anchors_at(0, 50, 100, 150))
        array([ 25.,  75., 125.])
    """
    if len(anchors) != len(COLUMN_KEYS):
        raise ValueError(f"Expected {len(COLUMN_KEYS)} anchors, got {len(anchors)}")
    xs = np.array([a.x for a in anchors], dtype=float)
    return (xs[:-1] + xs[1:]) / 2


def assign_columns(xs: Sequence[float], boundaries: np.ndarray) -> np.ndarray:
    """
    Vectorized column index (0..3) for each x.

    side="left" places a value equal to a boundary before it, i.e. in the
    lower column.
    """
    return np.searchsorted(boundaries, np.asarray(xs, dtype=float), side="left")


def assign_column(x: float, boundaries: np.ndarray) -> int:
    """Column index (0..3) for a single x."""
    return int(assign_columns([x], boundaries)[0])


def split_line_into_columns(line: Line, anchors: Sequence[ColumnAnchor]) -> ColumnCells:
    """
    Split a data line into the four column cells.

    Args:
        line: Data line with x-ordered tokens.
        anchors: The section header's four anchors, sorted by x.

    Returns:
        ColumnCells with normalized text and the event column's tokens.
    """
    boundaries = column_boundaries(anchors)
    tokens = [t for t in line.tokens if t.text.strip()]
    buckets: List[List[PositionedToken]] = [[] for _ in COLUMN_KEYS]

    if tokens:
        for token, idx in zip(tokens, assign_columns([t.x for t in tokens], boundaries)):
            buckets[int(idx)].append(token)

    texts = []
    for bucket in buckets:
        bucket.sort(key=lambda t: t.x)
        texts.append(normalize_whitespace(" ".join(t.text for t in bucket)))

    return ColumnCells(
        date=texts[0],
        time=texts[1],
        event=texts[2],
        location=texts[3],
        event_tokens=buckets[2],
    )
