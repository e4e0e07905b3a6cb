"""
Geometry primitives for layout-driven event extraction.

This module defines the positioned values the reader produces and the
extraction stages consume, plus the rectangle helpers the link matcher uses.

Key concepts:
- Token position (x, y): x grows to the right, y grows toward the TOP of the
  page (PDF user space), so sorting by descending y gives top-to-bottom order.
- Link rectangle: [x1, y1, x2, y2] normalized so x1 <= x2 and y1 <= y2.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np


# Type aliases
Rect = Tuple[float, float, float, float]
RectLike = Union[list, tuple, np.ndarray, None]


@dataclass(frozen=True)
class PositionedToken:
    """
    A fragment of text at a page position.

    Attributes:
        text: Raw fragment text as produced by the reader.
        x: Left/origin x-coordinate.
        y: Baseline y-coordinate (larger is higher on the page).
    """

    text: str
    x: float
    y: float


def safe_rect(rect: RectLike) -> Rect:
    """
    Extract rectangle coordinates and normalize corner order.

    Annotation rectangles may list their corners in any order. This returns
    (x1, y1, x2, y2) with x1 <= x2 and y1 <= y2.

    Args:
        rect: Rectangle as [x1, y1, x2, y2] in any corner order.

    Returns:
        Normalized 4-tuple of floats.

    Raises:
        ValueError: If the input does not hold four numeric values.

    Example:
        >>> safe_rect([100, 40, 20, 10])
        (20.0, 10.0, 100.0, 40.0)
    """
    if not isinstance(rect, (list, tuple, np.ndarray)) or len(rect) < 4:
        raise ValueError(f"Expected 4 rectangle coordinates, got {rect!r}")
    try:
        x_a, y_a, x_b, y_b = (float(v) for v in rect[:4])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Non-numeric rectangle coordinates: {rect!r}") from exc
    return min(x_a, x_b), min(y_a, y_b), max(x_a, x_b), max(y_a, y_b)


@dataclass(frozen=True)
class LinkRect:
    """
    A URL annotation rectangle on a page.

    Build instances with LinkRect.from_rect so the corner order is normalized.

    Attributes:
        url: Target URL of the annotation.
        x1, y1, x2, y2: Rectangle bounds with x1 <= x2 and y1 <= y2.
    """

    url: str
    x1: float
    y1: float
    x2: float
    y2: float

    @classmethod
    def from_rect(cls, url: str, rect: RectLike) -> "LinkRect":
        x1, y1, x2, y2 = safe_rect(rect)
        return cls(url=url, x1=x1, y1=y1, x2=x2, y2=y2)

    def contains(self, x: float, y: float) -> bool:
        """Inclusive point-in-rectangle test."""
        return self.x1 <= x <= self.x2 and self.y1 <= y <= self.y2

    def as_tuple(self) -> Rect:
        return (self.x1, self.y1, self.x2, self.y2)


def token_points(tokens: Sequence[PositionedToken]) -> np.ndarray:
    """Stack token positions into an (n, 2) float array."""
    if not tokens:
        return np.empty((0, 2), dtype=float)
    return np.array([(t.x, t.y) for t in tokens], dtype=float)


def rect_array(links: Sequence[LinkRect]) -> np.ndarray:
    """Stack link rectangles into an (m, 4) float array."""
    if not links:
        return np.empty((0, 4), dtype=float)
    return np.array([link.as_tuple() for link in links], dtype=float)


def containment_matrix(rects: np.ndarray, points: np.ndarray) -> np.ndarray:
    """
    Compute which points fall inside which rectangles.

    Args:
        rects: (m, 4) array of normalized rectangles.
        points: (n, 2) array of (x, y) points.

    Returns:
        (m, n) boolean array; [i, j] is True when point j lies in rect i,
        bounds inclusive.
    """
    if rects.size == 0 or points.size == 0:
        return np.zeros((len(rects), len(points)), dtype=bool)

    xs = points[:, 0][np.newaxis, :]
    ys = points[:, 1][np.newaxis, :]
    return (
        (rects[:, 0:1] <= xs) & (xs <= rects[:, 2:3]) &
        (rects[:, 1:2] <= ys) & (ys <= rects[:, 3:4])
    )
