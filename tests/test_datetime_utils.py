"""Tests for the datetime_utils module."""

from __future__ import annotations

import datetime

from planner.utils.datetime_utils import ensure_utc, from_storage, to_storage


class TestEnsureUtc:
    def test_none_passes_through(self):
        assert ensure_utc(None) is None

    def test_naive_is_treated_as_utc(self):
        result = ensure_utc(datetime.datetime(2024, 1, 1, 9, 0))
        assert result == datetime.datetime(2024, 1, 1, 9, 0, tzinfo=datetime.timezone.utc)

    def test_offset_is_converted(self):
        plus_two = datetime.timezone(datetime.timedelta(hours=2))
        result = ensure_utc(datetime.datetime(2024, 1, 1, 11, 0, tzinfo=plus_two))
        assert result.tzinfo == datetime.timezone.utc
        assert result.hour == 9


class TestStorage:
    def test_to_storage_uses_utc_iso_format(self):
        value = datetime.datetime(2024, 1, 1, 9, 30, tzinfo=datetime.timezone.utc)
        assert to_storage(value) == "2024-01-01T09:30:00+00:00"
        assert to_storage(None) is None

    def test_from_storage_accepts_sqlite_format(self):
        result = from_storage("2024-01-01 09:30:00")
        assert result == datetime.datetime(2024, 1, 1, 9, 30, tzinfo=datetime.timezone.utc)

    def test_from_storage_rejects_garbage(self):
        assert from_storage("") is None
        assert from_storage("yesterday") is None
