"""
Tests for the JSON-backed mock calendar client.
"""

import asyncio
import json

import pendulum
import pytest

from slotfinder.adapters.mock_calendar_client import DEFAULT_DATA_FILE, MockCalendarClient
from slotfinder.domain.exceptions import SourceUnavailable


EVENTS = [
    {"calendarId": "alice@example.com", "start": "2024-11-25 10:00", "end": "2024-11-25 11:00"},
    {"calendarId": "alice@example.com", "start": "2024-12-02T10:00:00Z", "end": "2024-12-02T11:00:00Z"},
    {"calendarId": "bob@example.com", "start": "2024-11-25 12:00", "end": "2024-11-25 13:00"},
    {"calendarId": "alice@example.com", "start": "broken"},
]


def _utc(value: str):
    return pendulum.parse(value, tz="UTC")


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "calendar.json"
    path.write_text(json.dumps(EVENTS), encoding="utf-8")
    return path


class TestMockCalendarClient:
    """Tests for MockCalendarClient."""

    def test_filters_by_calendar_and_window(self, data_file):
        client = MockCalendarClient(
            data_file=data_file,
            calendar_ids={"alice": "alice@example.com"},
            timezone="Europe/Berlin",
        )

        busy = asyncio.run(
            client.get_busy_intervals("alice", _utc("2024-11-25 00:00"), _utc("2024-11-30 00:00"))
        )

        assert len(busy) == 1
        # Naive timestamps are read in the client's timezone
        assert busy[0].start == _utc("2024-11-25 09:00")

    def test_host_id_is_default_calendar(self, data_file):
        client = MockCalendarClient(data_file=data_file)

        busy = asyncio.run(
            client.get_busy_intervals("bob@example.com", _utc("2024-11-25 00:00"), _utc("2024-11-26 00:00"))
        )

        assert [b.start for b in busy] == [_utc("2024-11-25 12:00")]

    def test_non_string_times_are_skipped(self, tmp_path):
        path = tmp_path / "calendar.json"
        path.write_text(json.dumps([
            {"calendarId": "alice", "start": 1732525200, "end": "2024-11-25T11:00:00Z"},
            {"calendarId": "alice", "start": "2024-11-25T12:00:00Z", "end": None},
            {"calendarId": "alice", "start": "2024-11-25T14:00:00Z", "end": "2024-11-25T15:00:00Z"},
        ]), encoding="utf-8")
        client = MockCalendarClient(data_file=path)

        busy = asyncio.run(
            client.get_busy_intervals("alice", _utc("2024-11-25 00:00"), _utc("2024-11-26 00:00"))
        )

        assert [b.start for b in busy] == [_utc("2024-11-25 14:00")]

    def test_missing_file_means_no_busy_times(self, tmp_path):
        client = MockCalendarClient(data_file=tmp_path / "missing.json")

        assert asyncio.run(
            client.get_busy_intervals("alice", _utc("2024-11-25 00:00"), _utc("2024-11-26 00:00"))
        ) == []

    def test_non_list_data_is_unavailable(self, tmp_path):
        path = tmp_path / "calendar.json"
        path.write_text('{"events": []}', encoding="utf-8")

        with pytest.raises(SourceUnavailable):
            MockCalendarClient(data_file=path)

    def test_bundled_sample_loads(self):
        assert DEFAULT_DATA_FILE.exists()
        assert MockCalendarClient().calendar_events
