"""
Event record contracts shared by extraction, persistence and export.

EventCandidate is the mutable record the row assembler builds and extends
with continuation lines. EventRecord is the frozen, fingerprinted record
emitted by a parse; its fingerprint is derived by the deduplicator
(eventscan.extraction.dedup.build_record) or carried over verbatim from the
event store, never chosen by a caller. StoredEvent adds the first-saved
timestamp owned by the event store.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict

EXPORT_COLUMNS = [
    "Event Details",
    "Date",
    "Location",
    "URL",
    "First Saved (Local Time)",
]


@dataclass
class EventCandidate:
    """A record under assembly within one table section."""

    title: str
    date: str = ""
    location: str = ""
    url: str = ""


@dataclass(frozen=True)
class EventRecord:
    """A deduplicated event extracted from a document."""

    title: str
    date: str
    location: str
    url: str
    fingerprint: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "EventRecord":
        return cls(
            title=str(payload.get("title") or ""),
            date=str(payload.get("date") or ""),
            location=str(payload.get("location") or ""),
            url=str(payload.get("url") or ""),
            fingerprint=str(payload["fingerprint"]),
        )


@dataclass(frozen=True)
class StoredEvent:
    """An event record as persisted, with its first-saved UTC timestamp."""

    record: EventRecord
    added_at: datetime

    @property
    def fingerprint(self) -> str:
        return self.record.fingerprint

    def to_dict(self) -> Dict[str, Any]:
        payload = self.record.to_dict()
        payload["added_at"] = self.added_at.astimezone(timezone.utc).isoformat()
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "StoredEvent":
        added_at = datetime.fromisoformat(str(payload["added_at"]))
        if added_at.tzinfo is None:
            added_at = added_at.replace(tzinfo=timezone.utc)
        return cls(record=EventRecord.from_dict(payload), added_at=added_at)
