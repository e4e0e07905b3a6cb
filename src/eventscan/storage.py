"""
JSON-file event store.

The store is the persistence collaborator of the extraction core. It keeps
every event ever seen, keyed by fingerprint, and stamps each one with the
time it was first saved. Merging a parse result marks which events are new
in that run.

File format: a JSON list of objects with title, date, location, url,
fingerprint and added_at (ISO 8601, UTC).
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Set, Union

from eventscan.schemas.event_contract import EventRecord, StoredEvent

logger = logging.getLogger(__name__)


@dataclass
class MergeOutcome:
    """
    Result of merging one parse into the store.

    Attributes:
        events: Previously saved events followed by newly added ones.
        new_fingerprints: Fingerprints added by this merge.
        found: Number of records offered to the merge.
    """

    events: List[StoredEvent] = field(default_factory=list)
    new_fingerprints: Set[str] = field(default_factory=set)
    found: int = 0

    def is_new(self, event: StoredEvent) -> bool:
        return event.fingerprint in self.new_fingerprints

    @property
    def new_events(self) -> List[StoredEvent]:
        """New events, most recently added first."""
        return sorted(
            (e for e in self.events if self.is_new(e)),
            key=lambda e: e.added_at,
            reverse=True,
        )

    @property
    def saved_events(self) -> List[StoredEvent]:
        """Previously saved events, most recently added first."""
        return sorted(
            (e for e in self.events if not self.is_new(e)),
            key=lambda e: e.added_at,
            reverse=True,
        )


class EventStore:
    """Persisted event list backed by a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> List[StoredEvent]:
        """
        Load saved events.

        A missing file is an empty store. An unreadable or corrupt file is
        logged and also treated as empty; the next save replaces it.
        """
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                payload = json.load(fh)
            if not isinstance(payload, list):
                raise ValueError(f"expected a JSON list, got {type(payload).__name__}")
            return [StoredEvent.from_dict(item) for item in payload]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning(f"Ignoring unreadable event store {self.path}: {exc}")
            return []

    def save(self, events: Iterable[StoredEvent]) -> Path:
        """Write the full event list, replacing the file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump([e.to_dict() for e in events], fh, indent=2, ensure_ascii=False)
        tmp_path.replace(self.path)
        return self.path

    def clear(self) -> None:
        """Remove every saved event."""
        if self.path.exists():
            self.path.unlink()
        logger.info(f"Cleared event store {self.path}")

    def merge(
        self,
        records: Iterable[EventRecord],
        now: Optional[datetime] = None,
    ) -> MergeOutcome:
        """
        Add records not seen before and persist the result.

        Existing events keep their original added_at; new ones are stamped
        with now (UTC). Records are matched by fingerprint only.

        Args:
            records: Deduplicated records from a successful parse.
            now: Timestamp for new events (defaults to the current time).

        Returns:
            MergeOutcome describing the merged store.
        """
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        saved = self.load()
        seen = {e.fingerprint for e in saved}

        outcome = MergeOutcome(events=list(saved))
        for record in records:
            outcome.found += 1
            if record.fingerprint in seen:
                continue
            seen.add(record.fingerprint)
            outcome.events.append(StoredEvent(record=record, added_at=now))
            outcome.new_fingerprints.add(record.fingerprint)

        self.save(outcome.events)
        logger.info(
            f"Merged {outcome.found} records: {len(outcome.new_fingerprints)} new, "
            f"{len(outcome.events)} total saved"
        )
        return outcome
