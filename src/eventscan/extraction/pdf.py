"""
PDF reading utilities.

This module turns a PDF into per-page positioned tokens and URL link
rectangles, the only inputs the extraction core needs.

Coordinates are converted from PyMuPDF's top-down page space to bottom-up
PDF user space (y = page_height - y), so larger y is nearer the top of the
page and lines sort top-first by descending y.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Union

from eventscan.errors import InputError
from .geometry import LinkRect, PositionedToken

logger = logging.getLogger(__name__)


TOKEN_MODE_SPANS = "spans"
TOKEN_MODE_WORDS = "words"
TOKEN_MODES = (TOKEN_MODE_SPANS, TOKEN_MODE_WORDS)

PdfSource = Union[str, Path, bytes]


@dataclass
class PageContent:
    """Tokens and link rectangles of a single page."""
    page_number: int
    tokens: List[PositionedToken] = field(default_factory=list)
    links: List[LinkRect] = field(default_factory=list)


def _describe(source: PdfSource) -> str:
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    return str(source)


def _open_document(source: PdfSource):
    try:
        import fitz  # PyMuPDF
    except ImportError:
        raise ImportError(
            "PyMuPDF not installed. Run: pip install PyMuPDF"
        )

    try:
        if isinstance(source, (bytes, bytearray)):
            doc = fitz.open(stream=bytes(source), filetype="pdf")
        else:
            doc = fitz.open(str(source))
    except (RuntimeError, ValueError, OSError) as exc:
        raise InputError(_describe(source), str(exc)) from exc

    if not doc.is_pdf:
        doc.close()
        raise InputError(_describe(source), "not a PDF document")
    if doc.needs_pass:
        doc.close()
        raise InputError(_describe(source), "document is password protected")
    return doc


def extract_page_tokens(page, token_mode: str = TOKEN_MODE_SPANS) -> List[PositionedToken]:
    """
    Extract positioned tokens from a PyMuPDF page.

    In spans mode every non-blank text span becomes a token at its baseline
    origin. In words mode every word becomes a token at its bottom-left
    corner.

    Args:
        page: fitz.Page.
        token_mode: "spans" or "words".

    Returns:
        Tokens in extraction order (the core does its own sorting).
    """
    height = float(page.rect.height)
    tokens: List[PositionedToken] = []

    if token_mode == TOKEN_MODE_WORDS:
        for x0, _y0, _x1, y1, word, *_rest in page.get_text("words"):
            if word and word.strip():
                tokens.append(PositionedToken(text=word, x=float(x0), y=height - float(y1)))
        return tokens

    d = page.get_text("dict")
    for block in d.get("blocks", []):
        # Skip non-text blocks (images, etc.)
        if block.get("type") != 0:
            continue
        for line in block.get("lines", []):
            for span in line.get("spans", []):
                text = span.get("text", "")
                if not text or not text.strip():
                    continue
                origin = span.get("origin")
                if origin is None:
                    bbox = span.get("bbox")
                    if bbox is None:
                        continue
                    origin = (bbox[0], bbox[3])
                tokens.append(
                    PositionedToken(text=text, x=float(origin[0]), y=height - float(origin[1]))
                )
    return tokens


def extract_page_links(page) -> List[LinkRect]:
    """
    Extract URL link rectangles from a PyMuPDF page in annotation order.

    Destination (internal GOTO) links and links without a URI are ignored.
    """
    import fitz  # PyMuPDF

    height = float(page.rect.height)
    links: List[LinkRect] = []
    for link in page.get_links():
        if link.get("kind") != fitz.LINK_URI:
            continue
        uri = (link.get("uri") or "").strip()
        rect = link.get("from")
        if not uri or rect is None:
            continue
        links.append(
            LinkRect.from_rect(
                uri,
                (rect.x0, height - rect.y1, rect.x1, height - rect.y0),
            )
        )
    return links


def iter_pdf_pages(
    source: PdfSource,
    token_mode: str = TOKEN_MODE_SPANS,
) -> Iterator[PageContent]:
    """
    Yield page contents in document order.

    Each page is read only when the consumer asks for it. Any read failure
    raises InputError, so a consumer that folds pages as they arrive must
    discard its partial state when that happens.

    Args:
        source: PDF path or raw PDF bytes.
        token_mode: "spans" or "words".

    Yields:
        PageContent per page, 1-indexed.

    Raises:
        InputError: If the document or any page cannot be read.
        ValueError: If token_mode is unknown.
    """
    if token_mode not in TOKEN_MODES:
        raise ValueError(f"Unknown token mode '{token_mode}', expected one of {TOKEN_MODES}")

    doc = _open_document(source)
    try:
        for pno in range(doc.page_count):
            try:
                page = doc.load_page(pno)
                content = PageContent(
                    page_number=pno + 1,
                    tokens=extract_page_tokens(page, token_mode),
                    links=extract_page_links(page),
                )
            except (RuntimeError, ValueError) as exc:
                raise InputError(_describe(source), f"page {pno + 1}: {exc}") from exc

            logger.debug(
                f"Page {content.page_number}: {len(content.tokens)} tokens, "
                f"{len(content.links)} links"
            )
            yield content
    finally:
        doc.close()


def read_pdf_pages(
    source: PdfSource,
    token_mode: str = TOKEN_MODE_SPANS,
) -> List[PageContent]:
    """
    Read every page of a PDF, or fail without returning partial output.

    Raises:
        InputError: If the document or any page cannot be read.
    """
    pages = list(iter_pdf_pages(source, token_mode=token_mode))
    logger.info(f"Read {len(pages)} pages from {_describe(source)}")
    return pages
