"""
eventscan: extract event tables from text-based PDFs using layout cues.

Usage:
    from eventscan import PipelineConfig, parse_document, EventStore

    config = PipelineConfig.from_env("events.pdf")
    result = parse_document(config.pdf_path, config)
    outcome = EventStore(config.store_path).merge(result.records)
"""

from eventscan.config import PipelineConfig
from eventscan.errors import EventScanError, FatalHashError, InputError
from eventscan.pipeline import ParseResult, parse_document, parse_pages
from eventscan.schemas.event_contract import EventRecord, StoredEvent
from eventscan.storage import EventStore, MergeOutcome

__version__ = "0.1.0"

__all__ = [
    "PipelineConfig",
    "EventScanError",
    "FatalHashError",
    "InputError",
    "ParseResult",
    "parse_document",
    "parse_pages",
    "EventRecord",
    "StoredEvent",
    "EventStore",
    "MergeOutcome",
]
