"""
Fingerprinting and deduplication of event candidates.

The fingerprint is a SHA-256 hex digest over

    lower(normalize(title)) | normalize(date) | lower(normalize(location))

The date part is NOT case-folded. Persisted fingerprints were computed this
way, so "Jan 5" and "JAN 5" stay distinct records while title and location
case differences collapse.

Within one parse, records keep discovery order and any later record whose
fingerprint was already emitted is dropped (never merged). The event store
reuses compute_fingerprint for cross-run deduplication.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from eventscan.schemas.event_contract import EventCandidate, EventRecord
from eventscan.utils.text import content_hash, ensure_hash_available, normalize_whitespace

logger = logging.getLogger(__name__)


DEFAULT_HASH_ALGORITHM = "sha256"


@dataclass
class DedupResult:
    """
    Result of deduplicating one parse's candidates.

    Attributes:
        records: Unique records in discovery order.
        dropped_duplicates: Number of candidates dropped as repeats.
    """

    records: List[EventRecord] = field(default_factory=list)
    dropped_duplicates: int = 0


def compute_fingerprint(
    title: str,
    date: str,
    location: str,
    algorithm: str = DEFAULT_HASH_ALGORITHM,
) -> str:
    """
    Compute the content fingerprint of an event.

    Raises:
        FatalHashError: If the hash algorithm is unavailable.

    Example:
        >>> compute_fingerprint("Gala", "Jan 5", "NYC") == compute_fingerprint("GALA", "Jan 5", "nyc")
        True
    """
    return content_hash(
        [
            normalize_whitespace(title).lower(),
            normalize_whitespace(date),
            normalize_whitespace(location).lower(),
        ],
        algorithm=algorithm,
    )


def build_record(candidate: EventCandidate, algorithm: str = DEFAULT_HASH_ALGORITHM) -> EventRecord:
    """Freeze a candidate into an EventRecord with its derived fingerprint."""
    return EventRecord(
        title=candidate.title,
        date=candidate.date,
        location=candidate.location,
        url=candidate.url,
        fingerprint=compute_fingerprint(
            candidate.title, candidate.date, candidate.location, algorithm=algorithm
        ),
    )


def deduplicate(
    candidates: Iterable[EventCandidate],
    algorithm: str = DEFAULT_HASH_ALGORITHM,
) -> DedupResult:
    """
    Fingerprint candidates and drop repeats, keeping the first occurrence.

    Args:
        candidates: Candidates from all pages in document order.
        algorithm: hashlib algorithm name.

    Returns:
        DedupResult with unique records.

    Raises:
        FatalHashError: If the hash algorithm is unavailable. Deduplication
            is never silently skipped.
    """
    ensure_hash_available(algorithm)
    result = DedupResult()
    seen = set()

    for candidate in candidates:
        record = build_record(candidate, algorithm=algorithm)
        if record.fingerprint in seen:
            result.dropped_duplicates += 1
            continue
        seen.add(record.fingerprint)
        result.records.append(record)

    logger.info(
        f"Deduplicated to {len(result.records)} records "
        f"({result.dropped_duplicates} duplicates dropped)"
    )
    return result
