"""
In-memory schedule storage with whole-schedule replacement.
"""

import logging
import threading
from typing import Dict, Optional

from ..config import AppConfig, ScheduleConfig
from ..domain.models import Schedule

logger = logging.getLogger(__name__)


class InMemoryScheduleStore:
    """
    Holds exactly one Schedule per host.

    Saving replaces the host's previous schedule in a single swap under a lock,
    so readers see either the old schedule or the new one, never a partial or
    empty set of availabilities.
    """

    def __init__(self, schedules: Optional[Dict[str, Schedule]] = None):
        self._lock = threading.Lock()
        self._schedules: Dict[str, Schedule] = dict(schedules or {})

    @classmethod
    def from_config(cls, config: AppConfig) -> "InMemoryScheduleStore":
        """Build a store from the schedules declared in the configuration."""
        store = cls()
        for host in config.hosts:
            if host.schedule is not None:
                store.save_schedule(host.id, host.schedule)
        return store

    def get_schedule(self, host_id: str) -> Optional[Schedule]:
        with self._lock:
            return self._schedules.get(host_id)

    def save_schedule(self, host_id: str, schedule_input: ScheduleConfig) -> Schedule:
        """
        Replace the host's schedule with a freshly validated one.

        Args:
            host_id: Owner of the schedule
            schedule_input: Validated schedule; previous entries are discarded

        Returns:
            The stored Schedule
        """
        schedule = schedule_input.to_schedule(host_id)

        with self._lock:
            previous = self._schedules.get(host_id)
            self._schedules[host_id] = schedule

        logger.info(
            "%s schedule for host %s (%d availabilities)",
            "Replaced" if previous is not None else "Created",
            host_id,
            len(schedule.availabilities),
        )
        return schedule

    def delete_schedule(self, host_id: str) -> bool:
        """Remove a host's schedule. Returns False if there was none."""
        with self._lock:
            return self._schedules.pop(host_id, None) is not None
