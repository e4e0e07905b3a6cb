"""
Tests for the per-page row assembly state machine.

Layout used throughout: header anchors at x = 50 (DATE), 150 (TIME),
250 (EVENT DETAILS) and 400 (LOCATION); boundaries at 100, 200 and 325.
"""

import pytest

from eventscan.extraction.geometry import LinkRect, PositionedToken
from eventscan.extraction.lines import Line, group_tokens_into_lines
from eventscan.extraction.rows import (
    assemble_page_rows,
    format_date_display,
    has_new_row_signal,
)


HEADER = [("DATE", 50), ("TIME", 150), ("EVENT DETAILS", 250), ("LOCATION", 400)]


def page_lines(rows, top=700.0, step=20.0):
    """Build grouped lines from a list of rows of (text, x) pairs, top first."""
    tokens = []
    for i, row in enumerate(rows):
        y = top - i * step
        tokens.extend(PositionedToken(text=text, x=x, y=y) for text, x in row)
    return group_tokens_into_lines(tokens)


def row_y(index, top=700.0, step=20.0):
    return top - index * step


# =============================================================================
# HELPERS
# =============================================================================

class TestRowHelpers:

    @pytest.mark.parametrize("date,time,expected", [
        ("Jan 5", "6 PM", "Jan 5 • 6 PM"),
        ("Jan 5", "", "Jan 5"),
        ("", "6 PM", "6 PM"),
        ("", "", ""),
    ])
    def test_format_date_display(self, date, time, expected):
        assert format_date_display(date, time) == expected

    def test_new_row_signal(self):
        assert has_new_row_signal("Jan 5", "")
        assert has_new_row_signal("", "6 PM")
        assert has_new_row_signal("2026", "6 PM")
        assert not has_new_row_signal("2026", "")
        assert not has_new_row_signal("", "")


# =============================================================================
# STATE MACHINE
# =============================================================================

class TestAssemblePageRows:

    def test_lines_before_header_are_ignored(self):
        lines = page_lines([
            [("Welcome to our calendar", 50)],
            [("Jan 1", 50), ("Not in a table", 250)],
            HEADER,
            [("Jan 5", 50), ("6 PM", 150), ("Spring Gala", 250), ("Boston", 400)],
        ])
        result = assemble_page_rows(lines)

        assert result.headers_found == 1
        assert len(result.candidates) == 1
        gala = result.candidates[0]
        assert gala.title == "Spring Gala"
        assert gala.date == "Jan 5 • 6 PM"
        assert gala.location == "Boston"
        assert gala.url == ""

    def test_no_header_no_candidates(self):
        lines = page_lines([[("Jan 5", 50), ("Spring Gala", 250)]])
        result = assemble_page_rows(lines)
        assert result.candidates == []
        assert result.headers_found == 0

    def test_continuation_extends_title(self):
        lines = page_lines([
            HEADER,
            [("Jan 5", 50), ("Spring Gala", 250), ("Boston", 400)],
            [("continued", 250)],
        ])
        result = assemble_page_rows(lines)

        assert len(result.candidates) == 1
        assert result.candidates[0].title == "Spring Gala continued"
        assert result.continuations == 1

    def test_continuation_extends_location(self):
        lines = page_lines([
            HEADER,
            [("Jan 5", 50), ("Spring Gala", 250), ("Hynes Center", 400)],
            [("(reception)", 250), ("Boston, MA", 400)],
        ])
        gala = assemble_page_rows(lines).candidates[0]
        assert gala.title == "Spring Gala (reception)"
        assert gala.location == "Hynes Center Boston, MA"

    def test_page_number_is_noise(self):
        lines = page_lines([
            HEADER,
            [("Jan 5", 50), ("Spring Gala", 250)],
            [("42", 300)],
        ])
        result = assemble_page_rows(lines)

        assert len(result.candidates) == 1
        assert result.candidates[0].title == "Spring Gala"
        assert result.skipped_noise == 1

    def test_bare_year_date_is_not_a_new_row_signal(self):
        lines = page_lines([
            HEADER,
            [("Jan 5", 50), ("Spring Gala", 250)],
            [("2026", 50), ("(evening)", 250)],
        ])
        result = assemble_page_rows(lines)

        assert len(result.candidates) == 1
        assert result.candidates[0].title == "Spring Gala (evening)"
        assert result.candidates[0].date == "Jan 5"

    def test_bare_year_title_is_dropped(self):
        lines = page_lines([
            HEADER,
            [("Jan 5", 50), ("2026", 250)],
        ])
        result = assemble_page_rows(lines)
        assert result.candidates == []
        assert result.skipped_noise == 1

    def test_bare_year_continuation_not_appended(self):
        lines = page_lines([
            HEADER,
            [("Jan 5", 50), ("Spring Gala", 250)],
            [("2026", 250), ("Annex", 400)],
        ])
        result = assemble_page_rows(lines)

        gala = result.candidates[0]
        assert gala.title == "Spring Gala"
        assert gala.location == "Annex"
        assert result.continuations == 1

    def test_banner_is_noise(self):
        lines = page_lines([
            HEADER,
            [("Jan 5", 50), ("Spring Gala", 250)],
            [("ANA   Upcoming Events", 250)],
        ])
        result = assemble_page_rows(lines)
        assert [c.title for c in result.candidates] == ["Spring Gala"]

    def test_custom_banner_patterns(self):
        lines = page_lines([
            HEADER,
            [("Jan 5", 50), ("Spring Gala", 250)],
            [("Club Calendar", 250)],
        ])
        result = assemble_page_rows(lines, banner_patterns=[r"club\s+calendar"])
        assert result.candidates[0].title == "Spring Gala"

    def test_second_header_restarts_section(self):
        lines = page_lines([
            HEADER,
            [("Jan 5", 50), ("Spring Gala", 250)],
            HEADER,
            [("orphan text", 250)],
            [("Feb 2", 50), ("Winter Ball", 250)],
        ])
        result = assemble_page_rows(lines)

        assert result.headers_found == 2
        assert [c.title for c in result.candidates] == ["Spring Gala", "orphan text", "Winter Ball"]

    def test_event_without_date_starts_row_when_no_last(self):
        lines = page_lines([HEADER, [("Open House", 250)]])
        result = assemble_page_rows(lines)
        assert result.candidates[0].title == "Open House"
        assert result.candidates[0].date == ""

    def test_row_without_event_is_noise(self):
        lines = page_lines([HEADER, [("Jan 5", 50), ("6 PM", 150)]])
        result = assemble_page_rows(lines)
        assert result.candidates == []

    def test_new_row_link_resolved(self):
        lines = page_lines([
            HEADER,
            [("Jan 5", 50), ("Spring Gala", 250)],
        ])
        y = row_y(1)
        links = [LinkRect.from_rect("https://example.org/gala", [240, y - 5, 320, y + 10])]
        result = assemble_page_rows(lines, links)
        assert result.candidates[0].url == "https://example.org/gala"

    def test_link_on_other_column_not_used(self):
        lines = page_lines([
            HEADER,
            [("Jan 5", 50), ("Spring Gala", 250)],
        ])
        y = row_y(1)
        links = [LinkRect.from_rect("https://example.org/date", [40, y - 5, 90, y + 10])]
        result = assemble_page_rows(lines, links)
        assert result.candidates[0].url == ""

    def test_url_backfilled_from_continuation(self):
        lines = page_lines([
            HEADER,
            [("Jan 5", 50), ("Spring Gala", 250)],
            [("Register here", 250)],
        ])
        y = row_y(2)
        links = [LinkRect.from_rect("https://example.org/register", [240, y - 5, 320, y + 10])]
        result = assemble_page_rows(lines, links)

        gala = result.candidates[0]
        assert gala.title == "Spring Gala Register here"
        assert gala.url == "https://example.org/register"

    def test_url_not_overwritten_by_continuation(self):
        lines = page_lines([
            HEADER,
            [("Jan 5", 50), ("Spring Gala", 250)],
            [("Register here", 250)],
        ])
        links = [
            LinkRect.from_rect("https://example.org/gala", [240, row_y(1) - 5, 320, row_y(1) + 10]),
            LinkRect.from_rect("https://example.org/register", [240, row_y(2) - 5, 320, row_y(2) + 5]),
        ]
        result = assemble_page_rows(lines, links)
        assert result.candidates[0].url == "https://example.org/gala"

    def test_header_mismatch_counted_and_ignored(self):
        tokens = [
            PositionedToken("DATE", 50, 720),
            PositionedToken("TIME", 150, 720),
            PositionedToken("EVENT DETAILS", 250, 720),
        ]
        mismatch = Line(y=720, tokens=tokens, text="DATE TIME EVENT DETAILS LOCATION")
        lines = [mismatch] + page_lines([HEADER, [("Jan 5", 50), ("Spring Gala", 250)]])
        result = assemble_page_rows(lines)

        assert result.header_mismatches == 1
        assert result.headers_found == 1
        assert [c.title for c in result.candidates] == ["Spring Gala"]
