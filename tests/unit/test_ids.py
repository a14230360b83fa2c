"""Tests for identifier and timestamp helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from cashbox_api.app.domain.ids import ensure_utc, from_iso, new_id, to_iso

CEST = timezone(timedelta(hours=2))


class TestEnsureUtc:
    def test_none_passes_through(self):
        assert ensure_utc(None) is None

    def test_naive_is_taken_as_utc(self):
        assert ensure_utc(datetime(2024, 7, 1, 9, 0)) == datetime(2024, 7, 1, 9, 0, tzinfo=timezone.utc)

    def test_offset_is_converted(self):
        converted = ensure_utc(datetime(2024, 7, 1, 11, 0, tzinfo=CEST))
        assert converted.utcoffset() == timedelta(0)
        assert converted.hour == 9


class TestIso:
    def test_to_iso_writes_utc(self):
        assert to_iso(datetime(2024, 7, 1, 11, 0, tzinfo=CEST)) == "2024-07-01T09:00:00+00:00"

    def test_offset_strings_sort_in_time_order(self):
        earlier = to_iso(datetime(2024, 7, 1, 10, 30, tzinfo=CEST))
        later = to_iso(datetime(2024, 7, 1, 9, 0, tzinfo=timezone.utc))
        assert earlier < later

    def test_from_iso_round_trip(self):
        assert from_iso("2024-07-01T11:00:00+02:00") == datetime(2024, 7, 1, 9, 0, tzinfo=timezone.utc)
        assert from_iso("") is None

    def test_new_ids_are_unique(self):
        assert new_id() != new_id()
