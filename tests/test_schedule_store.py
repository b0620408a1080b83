"""
Tests for the in-memory schedule store.
"""

from slotfinder.adapters.schedule_store import InMemoryScheduleStore
from slotfinder.config import AppConfig, ScheduleConfig
from slotfinder.domain.models import DayOfWeek


def _schedule_input(*windows, timezone="UTC") -> ScheduleConfig:
    return ScheduleConfig(
        timezone=timezone,
        availabilities=[
            {"day_of_week": day, "start_time": start, "end_time": end}
            for day, start, end in windows
        ],
    )


class TestInMemoryScheduleStore:
    """Tests for InMemoryScheduleStore."""

    def test_absent_schedule(self):
        assert InMemoryScheduleStore().get_schedule("alice") is None

    def test_save_creates_schedule(self):
        store = InMemoryScheduleStore()

        saved = store.save_schedule("alice", _schedule_input(("monday", "09:00", "17:00")))

        assert store.get_schedule("alice") == saved
        assert saved.availabilities[0].day_of_week == DayOfWeek.MONDAY

    def test_save_replaces_all_entries(self):
        """A second save discards every entry of the first one."""
        store = InMemoryScheduleStore()
        store.save_schedule("alice", _schedule_input(
            ("monday", "09:00", "12:00"),
            ("tuesday", "09:00", "12:00"),
        ))

        store.save_schedule("alice", _schedule_input(("friday", "14:00", "16:00"), timezone="Europe/Berlin"))

        schedule = store.get_schedule("alice")
        assert schedule.timezone == "Europe/Berlin"
        assert [e.day_of_week for e in schedule.availabilities] == [DayOfWeek.FRIDAY]

    def test_schedules_are_per_host(self):
        store = InMemoryScheduleStore()
        store.save_schedule("alice", _schedule_input(("monday", "09:00", "17:00")))

        assert store.get_schedule("bob") is None

    def test_delete_schedule(self):
        store = InMemoryScheduleStore()
        store.save_schedule("alice", _schedule_input(("monday", "09:00", "17:00")))

        assert store.delete_schedule("alice")
        assert not store.delete_schedule("alice")
        assert store.get_schedule("alice") is None

    def test_from_config(self):
        config = AppConfig(hosts=[
            {"id": "alice", "schedule": {"timezone": "UTC", "availabilities": [
                {"day_of_week": "wednesday", "start_time": "10:00", "end_time": "11:00"},
            ]}},
            {"id": "bob"},
        ])

        store = InMemoryScheduleStore.from_config(config)

        assert store.get_schedule("alice").availabilities[0].day_of_week == DayOfWeek.WEDNESDAY
        assert store.get_schedule("bob") is None
