"""
Line grouping for positioned text tokens.

This module clusters a page's tokens into horizontal writing lines by
vertical proximity and synthesizes each line's normalized text.

Algorithm Overview:
1. Sort tokens top-to-bottom (descending y), then left-to-right
2. Place each token on the first line whose anchor y is within tolerance,
   otherwise start a new line anchored at the token's y
3. Sort each line's tokens by x and join their text
4. Sort lines top-to-bottom

A line's anchor y is fixed at its first token; later tokens are compared
against that anchor only and never move it. Clustering is therefore
order-sensitive, and output compatibility depends on keeping it that way.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

import pandas as pd

from eventscan.utils.text import normalize_whitespace
from .geometry import PositionedToken

logger = logging.getLogger(__name__)


DEFAULT_Y_TOLERANCE = 2.0
DEFAULT_GAP_THRESHOLD = 12.0


@dataclass
class Line:
    """
    A cluster of tokens judged to be on the same writing line.

    Attributes:
        y: Anchor y (the first placed token's y).
        tokens: Tokens ordered by ascending x.
        text: Normalized line text.
    """

    y: float
    tokens: List[PositionedToken] = field(default_factory=list)
    text: str = ""


def build_line_text(tokens: List[PositionedToken], gap_threshold: float = DEFAULT_GAP_THRESHOLD) -> str:
    """
    Concatenate x-ordered token text into normalized line text.

    A separator is inserted when the gap from the previous token exceeds
    gap_threshold, and whenever the text built so far does not already end
    in a space. Blank tokens are skipped.

    Args:
        tokens: Tokens sorted by ascending x.
        gap_threshold: Horizontal gap (points) that forces a space.

    Returns:
        Whitespace-normalized line text.

    Example:
        >>> build_line_text([PositionedToken("Jan", 10, 0), PositionedToken("5", 30, 0)])
        'Jan 5'
    """
    text = ""
    prev_x = None
    for token in tokens:
        s = token.text.strip()
        if not s:
            continue
        if prev_x is not None and token.x - prev_x > gap_threshold:
            text += " "
        if text and not text.endswith(" "):
            text += " "
        text += s
        prev_x = token.x
    return normalize_whitespace(text)


def group_tokens_into_lines(
    tokens: Iterable[PositionedToken],
    y_tolerance: float = DEFAULT_Y_TOLERANCE,
    gap_threshold: float = DEFAULT_GAP_THRESHOLD,
) -> List[Line]:
    """
    Group a page's unordered tokens into top-to-bottom lines.

    Args:
        tokens: The page's tokens in any order.
        y_tolerance: Max |dy| between a token and a line's anchor y.
        gap_threshold: Horizontal gap passed to build_line_text.

    Returns:
        Lines ordered by descending y, each with tokens ordered by x.
    """
    ordered = sorted(tokens, key=lambda t: (-t.y, t.x))
    lines: List[Line] = []

    for token in ordered:
        for line in lines:
            if abs(line.y - token.y) <= y_tolerance:
                line.tokens.append(token)
                break
        else:
            lines.append(Line(y=token.y, tokens=[token]))

    for line in lines:
        line.tokens.sort(key=lambda t: t.x)
        line.text = build_line_text(line.tokens, gap_threshold)

    lines.sort(key=lambda ln: -ln.y)

    logger.debug(f"Grouped {len(ordered)} tokens into {len(lines)} lines")
    return lines


def lines_to_frame(lines: List[Line], page_number: int) -> pd.DataFrame:
    """
    Build a diagnostic DataFrame for a page's lines.

    Columns: page, line_idx, y, token_count, x_min, x_max, text
    """
    rows = [
        {
            "page": int(page_number),
            "line_idx": idx,
            "y": float(line.y),
            "token_count": len(line.tokens),
            "x_min": float(line.tokens[0].x) if line.tokens else float("nan"),
            "x_max": float(line.tokens[-1].x) if line.tokens else float("nan"),
            "text": line.text,
        }
        for idx, line in enumerate(lines)
    ]
    return pd.DataFrame(
        rows,
        columns=["page", "line_idx", "y", "token_count", "x_min", "x_max", "text"],
    )
