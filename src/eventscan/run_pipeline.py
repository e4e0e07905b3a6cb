#!/usr/bin/env python3
"""
Run the event extraction pipeline on a PDF and merge into the event store.

Usage:
    python -m eventscan.run_pipeline --pdf PATH [--store PATH] [--debug-out PATH]
    python -m eventscan.run_pipeline --export DIR
    python -m eventscan.run_pipeline --clear [--yes]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from eventscan.config import PipelineConfig
from eventscan.errors import EventScanError
from eventscan.export import export_csv
from eventscan.pipeline import ParseResult, parse_document
from eventscan.schemas.event_contract import StoredEvent
from eventscan.storage import EventStore, MergeOutcome


# =============================================================================
# PIPELINE STAGES
# =============================================================================

def stage_1_parse(config: PipelineConfig) -> ParseResult:
    """Stage 1: Read the PDF and extract deduplicated events."""
    print("=" * 70)
    print("STAGE 1: Extracting events from PDF")
    print("=" * 70)

    result = parse_document(config.pdf_path, config)
    stats = result.stats
    print(f"Pages: {stats['pages']}")
    print(f"Lines: {stats['lines']}")
    print(f"Table headers: {stats['headers']}")
    if stats["header_mismatches"]:
        print(f"  (ignored {stats['header_mismatches']} header-like lines without anchors)")
    print(f"Candidates: {stats['candidates']} (continuations merged: {stats['continuations']})")
    print(f"Events found: {stats['records']} ({stats['duplicates_dropped']} duplicates dropped)")

    return result


def stage_2_merge(records: List, config: PipelineConfig) -> MergeOutcome:
    """Stage 2: Merge found events into the saved store."""
    print("\n" + "=" * 70)
    print("STAGE 2: Merging into saved events")
    print("=" * 70)

    outcome = EventStore(config.store_path).merge(records)
    print(
        f"Found {outcome.found} event(s). New: {len(outcome.new_fingerprints)}. "
        f"Total saved: {len(outcome.events)}."
    )
    return outcome


def stage_3_write_diagnostics(result: ParseResult, debug_out: Optional[Path], lines_csv: Optional[Path]) -> None:
    """Stage 3: Write the line dump used to debug layout misdetection."""
    if debug_out is None and lines_csv is None:
        return

    print("\n" + "=" * 70)
    print("STAGE 3: Writing diagnostics")
    print("=" * 70)

    if debug_out is not None:
        debug_out.parent.mkdir(parents=True, exist_ok=True)
        debug_out.write_text(result.debug_dump, encoding="utf-8")
        print(f"Debug dump: {debug_out} ({len(result.debug_dump)} chars)")
    if lines_csv is not None:
        lines_csv.parent.mkdir(parents=True, exist_ok=True)
        result.lines_df.to_csv(lines_csv, index=False)
        print(f"Line table: {lines_csv} ({len(result.lines_df)} lines)")


# =============================================================================
# RENDERING
# =============================================================================

def _format_event(event: StoredEvent) -> str:
    record = event.record
    parts = [record.title or "(No event details)"]
    if record.date:
        parts.append(record.date)
    if record.location:
        parts.append(record.location)
    return "  " + " | ".join(parts)


def render_summary(outcome: MergeOutcome) -> None:
    """Print NEW events first, then previously SAVED events."""
    for label, events in (("New", outcome.new_events), ("Saved", outcome.saved_events)):
        print(f"\n--- {label} ({len(events)}) ---")
        for event in events:
            print(_format_event(event))


# =============================================================================
# MAIN PIPELINE
# =============================================================================

def run_pipeline(
    config: PipelineConfig,
    debug_out: Optional[Path] = None,
    lines_csv: Optional[Path] = None,
) -> Dict:
    """
    Parse a PDF and merge its events into the store.

    The store is only written after the whole document parsed successfully.

    Args:
        config: Pipeline configuration (pdf_path required).
        debug_out: Optional path for the text line dump.
        lines_csv: Optional path for the line table CSV.

    Returns:
        Dict with parse and merge counts.
    """
    if config.pdf_path is None:
        raise ValueError("config.pdf_path is required to run the pipeline")

    print("\n" + "=" * 70)
    print(f"Event Extraction Pipeline: {config.pdf_path}")
    print("=" * 70 + "\n")

    result = stage_1_parse(config)
    outcome = stage_2_merge(result.records, config)
    stage_3_write_diagnostics(result, debug_out, lines_csv)
    render_summary(outcome)

    results = dict(result.stats)
    results["new"] = len(outcome.new_fingerprints)
    results["saved_total"] = len(outcome.events)
    return results


def run_export(config: PipelineConfig, output_dir: Path) -> Optional[Path]:
    """Export every saved event to CSV; returns None when the store is empty."""
    saved = EventStore(config.store_path).load()
    if not saved:
        print("No saved events to export yet.")
        return None
    path = export_csv(saved, output_dir)
    print(f"Exported {len(saved)} saved event(s) to {path}")
    return path


def run_clear(config: PipelineConfig, assume_yes: bool = False) -> bool:
    """Clear the store after confirmation; returns True when cleared."""
    if not assume_yes:
        answer = input(
            "Are you sure you want to clear all saved events? This cannot be undone. [y/N] "
        )
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted.")
            return False
    EventStore(config.store_path).clear()
    print("Cleared saved events.")
    return True


# =============================================================================
# CLI
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract event tables from a PDF and track new events across runs"
    )
    parser.add_argument("--pdf", help="Path to PDF file to parse")
    parser.add_argument("--store", help="Path to the JSON event store")
    parser.add_argument("--env-file", help="Optional .env file with EVENTSCAN_* settings")
    parser.add_argument("--debug-out", help="Write the normalized line dump to this file")
    parser.add_argument("--lines-csv", help="Write the grouped line table to this CSV")
    parser.add_argument(
        "--token-mode",
        choices=["spans", "words"],
        help="Token granularity read from the PDF",
    )
    parser.add_argument(
        "--export",
        nargs="?",
        const="",
        metavar="DIR",
        help="Export all saved events to a CSV file in DIR (default: output dir)",
    )
    parser.add_argument("--clear", action="store_true", help="Clear all saved events")
    parser.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    parser.add_argument("--progress", action="store_true", help="Show page progress")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")

    if not (args.pdf or args.export is not None or args.clear):
        parser.error("one of --pdf, --export or --clear is required")

    try:
        config = PipelineConfig.from_env(
            pdf_path=args.pdf,
            env_file=args.env_file,
            store_path=args.store,
            token_mode=args.token_mode,
            show_progress=args.progress or None,
        )
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    if args.clear:
        run_clear(config, assume_yes=args.yes)

    if args.pdf:
        try:
            results = run_pipeline(
                config,
                debug_out=Path(args.debug_out) if args.debug_out else None,
                lines_csv=Path(args.lines_csv) if args.lines_csv else None,
            )
        except EventScanError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        print(f"\nPipeline complete: {results['records']} events found, {results['new']} new")

    if args.export is not None:
        run_export(config, Path(args.export) if args.export else config.output_dir)

    return 0


if __name__ == "__main__":
    sys.exit(main())
