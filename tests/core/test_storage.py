"""Tests for the JSON event store."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from eventscan.extraction.dedup import build_record
from eventscan.schemas.event_contract import EventCandidate, StoredEvent
from eventscan.storage import EventStore


T0 = datetime(2026, 1, 10, 9, 30, tzinfo=timezone.utc)


def record(title, date="Jan 5", location="Boston", url=""):
    return build_record(EventCandidate(title=title, date=date, location=location, url=url))


@pytest.fixture
def store(tmp_path):
    return EventStore(tmp_path / "data" / "events_seen.json")


class TestEventStore:

    def test_missing_file_is_empty(self, store):
        assert store.load() == []

    def test_first_merge_marks_everything_new(self, store):
        outcome = store.merge([record("Gala"), record("Ball")], now=T0)

        assert outcome.found == 2
        assert len(outcome.new_fingerprints) == 2
        assert [e.record.title for e in outcome.events] == ["Gala", "Ball"]
        assert store.path.exists()

    def test_second_merge_only_adds_unseen(self, store):
        store.merge([record("Gala")], now=T0)
        later = T0 + timedelta(days=1)
        outcome = store.merge([record("GALA", location="boston"), record("Ball")], now=later)

        assert outcome.found == 2
        assert len(outcome.events) == 2
        assert [e.record.title for e in outcome.new_events] == ["Ball"]
        assert [e.record.title for e in outcome.saved_events] == ["Gala"]

    def test_added_at_preserved(self, store):
        store.merge([record("Gala")], now=T0)
        store.merge([record("Gala")], now=T0 + timedelta(days=3))

        saved = store.load()
        assert len(saved) == 1
        assert saved[0].added_at == T0

    def test_roundtrip_keeps_fields(self, store):
        store.merge([record("Gala", url="https://example.org/gala")], now=T0)
        saved = store.load()[0]

        assert saved.record.title == "Gala"
        assert saved.record.url == "https://example.org/gala"
        assert saved.record.fingerprint == record("Gala").fingerprint

    def test_file_format(self, store):
        store.merge([record("Gala")], now=T0)
        payload = json.loads(store.path.read_text(encoding="utf-8"))

        assert isinstance(payload, list)
        assert set(payload[0]) == {"title", "date", "location", "url", "fingerprint", "added_at"}
        assert payload[0]["added_at"] == "2026-01-10T09:30:00+00:00"

    def test_sections_sorted_most_recent_first(self, store):
        store.merge([record("Old")], now=T0)
        store.merge([record("Newer")], now=T0 + timedelta(days=1))
        outcome = store.merge([record("Newest")], now=T0 + timedelta(days=2))

        assert [e.record.title for e in outcome.saved_events] == ["Newer", "Old"]

    def test_naive_now_treated_as_utc(self, store):
        store.merge([record("Gala")], now=datetime(2026, 1, 10, 9, 30))
        assert store.load()[0].added_at == T0

    def test_corrupt_file_treated_as_empty(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json", encoding="utf-8")

        assert store.load() == []
        outcome = store.merge([record("Gala")], now=T0)
        assert len(outcome.new_fingerprints) == 1

    def test_wrong_shape_treated_as_empty(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text(json.dumps({"events": []}), encoding="utf-8")
        assert store.load() == []

    def test_clear(self, store):
        store.merge([record("Gala")], now=T0)
        store.clear()

        assert store.load() == []
        assert not store.path.exists()
        store.clear()


class TestStoredEvent:

    def test_naive_timestamp_loaded_as_utc(self):
        payload = record("Gala").to_dict()
        payload["added_at"] = "2026-01-10T09:30:00"
        assert StoredEvent.from_dict(payload).added_at == T0
