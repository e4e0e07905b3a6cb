"""
Schema modules for event extraction artifacts.

This package hosts lightweight dataclasses that define the contracts between
the extraction core and its persistence and export collaborators.
"""

from eventscan.schemas.event_contract import (
    EXPORT_COLUMNS,
    EventCandidate,
    EventRecord,
    StoredEvent,
)

__all__ = [
    "EXPORT_COLUMNS",
    "EventCandidate",
    "EventRecord",
    "StoredEvent",
]
