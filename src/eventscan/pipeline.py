"""
Event extraction pipeline.

Pages are folded in document order through an explicit accumulator:

    acc = ParseAccumulator()
    for page in pages:
        acc = process_page(acc, page, config)
    result = finalize(acc, config)

Each page runs its own row-assembly state machine; only candidates, debug
lines and counts flow from one page to the next. Deduplication runs once,
globally, after the last page. If the reader fails on any page the
exception propagates and the partial accumulator is discarded.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Tuple

import pandas as pd
from tqdm import tqdm

from eventscan.config import PipelineConfig
from eventscan.extraction.dedup import deduplicate
from eventscan.extraction.lines import group_tokens_into_lines, lines_to_frame
from eventscan.extraction.pdf import PageContent, PdfSource, iter_pdf_pages
from eventscan.extraction.rows import assemble_page_rows
from eventscan.schemas.event_contract import EventCandidate, EventRecord

logger = logging.getLogger(__name__)


STAT_KEYS = (
    "pages",
    "tokens",
    "links",
    "lines",
    "headers",
    "header_mismatches",
    "noise_rows",
    "continuations",
    "candidates",
    "duplicates_dropped",
    "records",
)


@dataclass(frozen=True)
class ParseAccumulator:
    """
    Fold state carried between pages.

    Attributes:
        candidates: Candidates from all pages so far, in discovery order.
        debug_lines: Diagnostic dump lines so far.
        line_frames: Per-page line DataFrames for diagnostics.
        stats: Running counts keyed by STAT_KEYS.
    """

    candidates: Tuple[EventCandidate, ...] = ()
    debug_lines: Tuple[str, ...] = ()
    line_frames: Tuple[pd.DataFrame, ...] = ()
    stats: Dict[str, int] = field(default_factory=lambda: {k: 0 for k in STAT_KEYS})


@dataclass
class ParseResult:
    """
    Final output of a parse.

    Attributes:
        records: Unique records in discovery order.
        debug_dump: Normalized text of every line per page, truncated.
        lines_df: All grouped lines (page, line_idx, y, ..., text).
        stats: Counts keyed by STAT_KEYS.
    """

    records: List[EventRecord]
    debug_dump: str
    lines_df: pd.DataFrame
    stats: Dict[str, int]

    def to_dataframe(self) -> pd.DataFrame:
        """Records as a DataFrame (title, date, location, url, fingerprint)."""
        return pd.DataFrame(
            [r.to_dict() for r in self.records],
            columns=["title", "date", "location", "url", "fingerprint"],
        )


def process_page(
    acc: ParseAccumulator,
    page: PageContent,
    config: PipelineConfig,
) -> ParseAccumulator:
    """
    Fold one page into the accumulator.

    Args:
        acc: State after the previous pages.
        page: The next page in document order.
        config: Pipeline configuration.

    Returns:
        A new accumulator; acc is not modified.
    """
    lines = group_tokens_into_lines(
        page.tokens,
        y_tolerance=config.y_tolerance,
        gap_threshold=config.gap_threshold,
    )
    rows = assemble_page_rows(lines, page.links, banner_patterns=config.banner_patterns)

    stats = dict(acc.stats)
    stats["pages"] += 1
    stats["tokens"] += len(page.tokens)
    stats["links"] += len(page.links)
    stats["lines"] += len(lines)
    stats["headers"] += rows.headers_found
    stats["header_mismatches"] += rows.header_mismatches
    stats["noise_rows"] += rows.skipped_noise
    stats["continuations"] += rows.continuations
    stats["candidates"] += len(rows.candidates)

    if rows.header_mismatches:
        logger.info(
            f"Page {page.page_number}: {rows.header_mismatches} header-like line(s) "
            f"could not be anchored"
        )
    logger.debug(f"Page {page.page_number}: {rows!r}")

    page_debug = (f"--- Page {page.page_number} ---",) + tuple(line.text for line in lines)
    return replace(
        acc,
        candidates=acc.candidates + tuple(rows.candidates),
        debug_lines=acc.debug_lines + page_debug,
        line_frames=acc.line_frames + (lines_to_frame(lines, page.page_number),),
        stats=stats,
    )


def finalize(acc: ParseAccumulator, config: PipelineConfig) -> ParseResult:
    """
    Deduplicate the accumulated candidates and build the debug dump.

    Raises:
        FatalHashError: If the fingerprint algorithm is unavailable.
    """
    dedup = deduplicate(acc.candidates, algorithm=config.hash_algorithm)

    stats = dict(acc.stats)
    stats["duplicates_dropped"] = dedup.dropped_duplicates
    stats["records"] = len(dedup.records)

    frames = [f for f in acc.line_frames if not f.empty]
    if frames:
        lines_df = pd.concat(frames, ignore_index=True)
    else:
        lines_df = lines_to_frame([], 0)

    debug_dump = "\n".join(acc.debug_lines)[: config.debug_max_chars]
    return ParseResult(
        records=list(dedup.records),
        debug_dump=debug_dump,
        lines_df=lines_df,
        stats=stats,
    )


def parse_pages(pages: Iterable[PageContent], config: PipelineConfig) -> ParseResult:
    """
    Parse pages (in document order) into deduplicated event records.

    Args:
        pages: Page contents in document order. If pages were fetched
            concurrently they must be re-sorted before calling this.
        config: Pipeline configuration.

    Returns:
        ParseResult.

    Raises:
        InputError: Propagated from a lazily reading page iterator.
        FatalHashError: If the fingerprint algorithm is unavailable.
    """
    acc = ParseAccumulator()
    for page in tqdm(pages, desc="Pages", unit="page", disable=not config.show_progress):
        acc = process_page(acc, page, config)

    result = finalize(acc, config)
    logger.info(
        f"Parsed {result.stats['pages']} pages: {result.stats['candidates']} candidates, "
        f"{result.stats['records']} records"
    )
    return result


def parse_document(source: PdfSource, config: PipelineConfig) -> ParseResult:
    """
    Read a PDF and parse its event tables.

    Args:
        source: PDF path or raw bytes.
        config: Pipeline configuration.

    Returns:
        ParseResult.

    Raises:
        InputError: If the document or any page cannot be read.
        FatalHashError: If the fingerprint algorithm is unavailable.
    """
    return parse_pages(iter_pdf_pages(source, token_mode=config.token_mode), config)
