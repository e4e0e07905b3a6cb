"""
Row assembly: turn a page's lines into event candidates.

This module runs the per-page state machine that sits between the header
detector and the deduplicator.

State Machine:
- scanning: lines are ignored until a header resolves
- in-section: each line is a new row, a continuation of the last row, or
  noise; a later header restarts the section with no last row

Row Rules (in order, inside a section):
1. Empty, digits-only (page numbers) and banner lines are noise
2. A line has a new-row signal if its time cell is set, or its date cell is
   set and is not a bare year
3. No signal + event text + a last row: continuation. The event text is
   appended to the title (unless it is a bare year), location is appended,
   and the URL is backfilled if still unset
4. No signal and no event text: noise
5. Empty or bare-year event cell: noise (no phantom "2026" titles)
6. Otherwise start a new candidate
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from eventscan.schemas.event_contract import EventCandidate
from eventscan.utils.text import is_digits_only, is_year_only, normalize_whitespace
from .columns import ColumnCells, split_line_into_columns
from .geometry import LinkRect
from .headers import ColumnAnchor, detect_header
from .lines import Line
from .links import match_link

logger = logging.getLogger(__name__)


# Running page-title banners repeated at the top of each page
DEFAULT_BANNER_PATTERNS = (r"ANA\s+Upcoming\s+Events",)

DATE_TIME_SEPARATOR = " • "


@dataclass
class RowAssemblyResult:
    """
    Result of row assembly for one page.

    Attributes:
        candidates: Candidates in discovery order.
        headers_found: Lines that resolved as headers.
        header_mismatches: Header-like lines that failed anchoring.
        skipped_noise: In-section lines dropped as noise.
        continuations: Lines merged into a previous candidate.
    """

    candidates: List[EventCandidate] = field(default_factory=list)
    headers_found: int = 0
    header_mismatches: int = 0
    skipped_noise: int = 0
    continuations: int = 0

    def __repr__(self) -> str:
        return (
            f"RowAssemblyResult(candidates={len(self.candidates)}, "
            f"headers={self.headers_found}, "
            f"continuations={self.continuations}, "
            f"noise={self.skipped_noise})"
        )


def compile_banner_patterns(patterns: Sequence[str]) -> List[re.Pattern]:
    """Compile banner regexes case-insensitively."""
    return [re.compile(p, re.IGNORECASE) for p in patterns]


def format_date_display(date_cell: str, time_cell: str) -> str:
    """
    Combine date and time cells for display.

    Example:
        >>> format_date_display("Jan 5", "6 PM")
        'Jan 5 • 6 PM'
        >>> format_date_display("", "6 PM")
        '6 PM'
    """
    if date_cell and time_cell:
        return f"{date_cell}{DATE_TIME_SEPARATOR}{time_cell}"
    return date_cell or time_cell or ""


def has_new_row_signal(date_cell: str, time_cell: str) -> bool:
    return bool(time_cell) or (bool(date_cell) and not is_year_only(date_cell))


def _is_noise_line(text: str, banners: Sequence[re.Pattern]) -> bool:
    if not text:
        return True
    if is_digits_only(text):
        return True
    return any(rx.search(text) for rx in banners)


def _merge_continuation(last: EventCandidate, cells: ColumnCells, links: Sequence[LinkRect]) -> None:
    if not is_year_only(cells.event):
        last.title = normalize_whitespace(f"{last.title} {cells.event}")
    if cells.location:
        last.location = normalize_whitespace(f"{last.location} {cells.location}")
    if not last.url:
        match = match_link(cells.event_tokens, links)
        if match.is_resolved:
            last.url = match.url


def assemble_page_rows(
    lines: Sequence[Line],
    links: Sequence[LinkRect] = (),
    banner_patterns: Sequence[str] = DEFAULT_BANNER_PATTERNS,
) -> RowAssemblyResult:
    """
    Assemble event candidates from one page's ordered lines.

    Args:
        lines: Lines in top-to-bottom order from group_tokens_into_lines.
        links: The page's link rectangles in annotation order.
        banner_patterns: Regexes for running banners to drop.

    Returns:
        RowAssemblyResult with candidates and anomaly counts.
    """
    banners = compile_banner_patterns(banner_patterns)
    result = RowAssemblyResult()

    anchors: Optional[List[ColumnAnchor]] = None
    last: Optional[EventCandidate] = None

    for line in lines:
        header = detect_header(line)
        if header.is_header:
            anchors = header.anchors
            last = None
            result.headers_found += 1
            continue
        if header.is_mismatch:
            result.header_mismatches += 1

        if anchors is None:
            continue

        text = line.text or ""
        if _is_noise_line(text, banners):
            result.skipped_noise += 1
            continue

        cells = split_line_into_columns(line, anchors)
        new_row = has_new_row_signal(cells.date, cells.time)

        if not new_row and cells.event and last is not None:
            _merge_continuation(last, cells, links)
            result.continuations += 1
            continue

        if not cells.event or is_year_only(cells.event):
            logger.debug(f"Dropped row without a usable title: {text!r}")
            result.skipped_noise += 1
            continue

        match = match_link(cells.event_tokens, links)
        last = EventCandidate(
            title=cells.event,
            date=format_date_display(cells.date, cells.time),
            location=cells.location,
            url=match.url if match.is_resolved else "",
        )
        result.candidates.append(last)

    logger.debug(repr(result))
    return result
