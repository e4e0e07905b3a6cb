"""
Spreadsheet-friendly export of saved events.

Exports the whole event store (not just the latest run) as CSV with a UTF-8
byte-order mark so Excel detects the encoding.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union

import pandas as pd

from eventscan.schemas.event_contract import EXPORT_COLUMNS, StoredEvent

logger = logging.getLogger(__name__)


EXPORT_FILENAME_PREFIX = "events_saved"


def file_stamp(when: Optional[datetime] = None) -> str:
    """Local-time stamp used in export filenames, e.g. 2026-10-18_0930."""
    return (when or datetime.now()).strftime("%Y-%m-%d_%H%M")


def build_export_frame(events: Iterable[StoredEvent]) -> pd.DataFrame:
    """
    Build the export table.

    Rows are sorted by date text, then title (both case-insensitive). The
    first-saved timestamp is rendered in local time.
    """
    rows = [
        {
            "Event Details": e.record.title,
            "Date": e.record.date,
            "Location": e.record.location,
            "URL": e.record.url,
            "First Saved (Local Time)": e.added_at.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
        }
        for e in events
    ]
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    if df.empty:
        return df

    df["_date_key"] = df["Date"].fillna("").str.lower()
    df["_title_key"] = df["Event Details"].fillna("").str.lower()
    df = df.sort_values(["_date_key", "_title_key"], kind="mergesort")
    return df.drop(columns=["_date_key", "_title_key"]).reset_index(drop=True)


def export_csv(
    events: Iterable[StoredEvent],
    output_dir: Union[str, Path],
    stamp: Optional[str] = None,
) -> Path:
    """
    Write saved events to a timestamped CSV file.

    Args:
        events: Saved events.
        output_dir: Directory to write into (created if missing).
        stamp: Filename stamp; defaults to file_stamp().

    Returns:
        Path of the written file.

    Raises:
        ValueError: If there are no events to export.
    """
    df = build_export_frame(events)
    if df.empty:
        raise ValueError("No saved events to export")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{EXPORT_FILENAME_PREFIX}_{stamp or file_stamp()}.csv"
    df.to_csv(path, index=False, encoding="utf-8-sig")

    logger.info(f"Exported {len(df)} events to {path}")
    return path
