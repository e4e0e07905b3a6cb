"""
Link matching for event titles.

A record's URL comes from the first page link rectangle (in the page's
annotation order) that contains the (x, y) point of any token in the
record's event column.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .geometry import LinkRect, PositionedToken, containment_matrix, rect_array, token_points


KIND_RESOLVED = "resolved"
KIND_UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class LinkMatch:
    """
    Result of matching event tokens against link rectangles.

    Attributes:
        kind: resolved or unresolved.
        url: Matched URL ("" when unresolved).
        rect_index: Index of the matched rectangle in page order.
    """

    kind: str
    url: str = ""
    rect_index: Optional[int] = None

    @property
    def is_resolved(self) -> bool:
        return self.kind == KIND_RESOLVED


UNRESOLVED = LinkMatch(kind=KIND_UNRESOLVED)


def match_link(tokens: Sequence[PositionedToken], links: Sequence[LinkRect]) -> LinkMatch:
    """
    Find the first link rectangle containing any of the given tokens.

    Args:
        tokens: Tokens assigned to the event column of one line.
        links: The page's link rectangles in annotation order.

    Returns:
        LinkMatch; UNRESOLVED when nothing matches.
    """
    if not tokens or not links:
        return UNRESOLVED

    hits = containment_matrix(rect_array(links), token_points(tokens)).any(axis=1)
    matched = np.flatnonzero(hits)
    if matched.size == 0:
        return UNRESOLVED

    idx = int(matched[0])
    return LinkMatch(kind=KIND_RESOLVED, url=links[idx].url, rect_index=idx)
