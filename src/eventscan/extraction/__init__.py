"""Layout-driven event table extraction modules."""

from .geometry import (
    PositionedToken,
    LinkRect,
    safe_rect,
    token_points,
    rect_array,
    containment_matrix,
)

from .lines import (
    Line,
    build_line_text,
    group_tokens_into_lines,
    lines_to_frame,
    DEFAULT_Y_TOLERANCE,
    DEFAULT_GAP_THRESHOLD,
)

from .headers import (
    ColumnAnchor,
    HeaderResolution,
    looks_like_header,
    detect_header,
    COLUMN_KEYS,
    HEADER_REQUIRED_LABELS,
)

from .columns import (
    ColumnCells,
    column_boundaries,
    assign_column,
    assign_columns,
    split_line_into_columns,
)

from .links import (
    LinkMatch,
    match_link,
)

from .rows import (
    RowAssemblyResult,
    assemble_page_rows,
    format_date_display,
    has_new_row_signal,
    DEFAULT_BANNER_PATTERNS,
)

from .dedup import (
    DedupResult,
    compute_fingerprint,
    build_record,
    deduplicate,
)

from .pdf import (
    PageContent,
    extract_page_tokens,
    extract_page_links,
    iter_pdf_pages,
    read_pdf_pages,
    TOKEN_MODE_SPANS,
    TOKEN_MODE_WORDS,
)

__all__ = [
    # Geometry
    "PositionedToken",
    "LinkRect",
    "safe_rect",
    "token_points",
    "rect_array",
    "containment_matrix",
    # Line grouping
    "Line",
    "build_line_text",
    "group_tokens_into_lines",
    "lines_to_frame",
    "DEFAULT_Y_TOLERANCE",
    "DEFAULT_GAP_THRESHOLD",
    # Header detection
    "ColumnAnchor",
    "HeaderResolution",
    "looks_like_header",
    "detect_header",
    "COLUMN_KEYS",
    "HEADER_REQUIRED_LABELS",
    # Column splitting
    "ColumnCells",
    "column_boundaries",
    "assign_column",
    "assign_columns",
    "split_line_into_columns",
    # Link matching
    "LinkMatch",
    "match_link",
    # Row assembly
    "RowAssemblyResult",
    "assemble_page_rows",
    "format_date_display",
    "has_new_row_signal",
    "DEFAULT_BANNER_PATTERNS",
    # Deduplication
    "DedupResult",
    "compute_fingerprint",
    "build_record",
    "deduplicate",
    # PDF reading
    "PageContent",
    "extract_page_tokens",
    "extract_page_links",
    "iter_pdf_pages",
    "read_pdf_pages",
    "TOKEN_MODE_SPANS",
    "TOKEN_MODE_WORDS",
]
