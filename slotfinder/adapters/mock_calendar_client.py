"""
Mock calendar client for running without Google credentials.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pendulum
from pendulum import DateTime

from ..domain.exceptions import SourceUnavailable
from ..domain.models import BusyInterval

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_calendar_data.json"


class MockCalendarClient:
    """
    Mock client that serves busy intervals from a JSON file.

    Each event is an object with ``calendarId``, ``start`` and ``end``. Times
    without an explicit offset are read in the client's timezone.
    """

    def __init__(
        self,
        data_file: Optional[Path] = None,
        calendar_ids: Optional[Mapping[str, str]] = None,
        timezone: str = "UTC",
    ):
        """
        Initialize the mock client.

        Args:
            data_file: JSON file with calendar events (defaults to bundled sample)
            calendar_ids: Optional mapping of host id -> calendar id
            timezone: Timezone for naive timestamps in the data file
        """
        self.data_file = data_file or DEFAULT_DATA_FILE
        self.calendar_ids = dict(calendar_ids or {})
        self.timezone = timezone
        self.calendar_events = self._load_calendar_data()

    def _load_calendar_data(self) -> List[Dict[str, Any]]:
        """Load mock calendar data from JSON file."""
        if not self.data_file.exists():
            logger.warning("Mock calendar data %s not found; no busy times", self.data_file)
            return []

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise SourceUnavailable(f"Could not read mock calendar data {self.data_file}: {exc}") from exc

        if not isinstance(data, list):
            raise SourceUnavailable("Mock calendar data must be a list of events")
        return data

    async def get_busy_intervals(
        self,
        host_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[BusyInterval]:
        """Return the host's events that overlap ``[start, end)``."""
        calendar_id = self.calendar_ids.get(host_id, host_id)
        busy: List[BusyInterval] = []

        for event in self.calendar_events:
            if event.get("calendarId") != calendar_id:
                continue

            try:
                interval = BusyInterval(
                    start=pendulum.parse(event["start"], tz=self.timezone),
                    end=pendulum.parse(event["end"], tz=self.timezone),
                )
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping invalid mock event %s: %s", event, e)
                continue

            if interval.start < end and start < interval.end:
                busy.append(interval)

        return busy
