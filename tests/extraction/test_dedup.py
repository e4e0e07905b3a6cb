"""Tests for event fingerprinting and deduplication."""

import hashlib

import pytest

from eventscan.errors import FatalHashError
from eventscan.extraction.dedup import build_record, compute_fingerprint, deduplicate
from eventscan.schemas.event_contract import EventCandidate


class TestComputeFingerprint:

    def test_known_digest(self):
        expected = hashlib.sha256("spring gala|Jan 5 • 6 PM|boston".encode("utf-8")).hexdigest()
        assert compute_fingerprint("Spring  Gala", " Jan 5 • 6 PM", "Boston ") == expected

    def test_title_and_location_case_folded(self):
        a = compute_fingerprint("Spring Gala", "Jan 5", "Boston")
        b = compute_fingerprint("SPRING GALA", "Jan 5", "boston")
        assert a == b

    def test_date_case_preserved(self):
        a = compute_fingerprint("Spring Gala", "Jan 5", "Boston")
        b = compute_fingerprint("Spring Gala", "JAN 5", "Boston")
        assert a != b

    def test_url_not_part_of_fingerprint(self):
        a = build_record(EventCandidate("Gala", "Jan 5", "Boston", url="https://a.example"))
        b = build_record(EventCandidate("Gala", "Jan 5", "Boston", url=""))
        assert a.fingerprint == b.fingerprint


class TestDeduplicate:

    def test_keeps_first_occurrence_in_order(self):
        candidates = [
            EventCandidate("Spring Gala", "Jan 5", "Boston", url="https://first.example"),
            EventCandidate("Winter Ball", "Feb 2", "Denver"),
            EventCandidate("spring gala", "Jan 5", "BOSTON", url="https://second.example"),
        ]
        result = deduplicate(candidates)

        assert [r.title for r in result.records] == ["Spring Gala", "Winter Ball"]
        assert result.records[0].url == "https://first.example"
        assert result.dropped_duplicates == 1

    def test_date_case_difference_kept(self):
        candidates = [
            EventCandidate("Spring Gala", "Jan 5", "Boston"),
            EventCandidate("Spring Gala", "JAN 5", "Boston"),
        ]
        assert len(deduplicate(candidates).records) == 2

    def test_fingerprints_unique(self):
        candidates = [EventCandidate(f"Event {i % 3}", "Jan 5", "") for i in range(9)]
        result = deduplicate(candidates)
        fingerprints = [r.fingerprint for r in result.records]
        assert len(fingerprints) == len(set(fingerprints)) == 3

    def test_empty_input(self):
        result = deduplicate([])
        assert result.records == []
        assert result.dropped_duplicates == 0

    def test_unavailable_hash_is_fatal_even_without_candidates(self):
        with pytest.raises(FatalHashError):
            deduplicate([], algorithm="no-such-hash")
