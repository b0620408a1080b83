"""
Projection of recurring availability entries onto concrete calendar dates.
"""

import logging
from datetime import date, time
from typing import Dict, List, Optional

import pendulum
from pendulum import DateTime

from .models import DayOfWeek, TimeRange, WeeklyAvailabilityEntry, day_of_week

logger = logging.getLogger(__name__)


def _localize(on_date: date, wall_time: time, timezone: str) -> DateTime:
    # Skipped local times move forward by the gap; repeated ones take the later occurrence.
    return pendulum.datetime(
        on_date.year, on_date.month, on_date.day,
        wall_time.hour, wall_time.minute,
        tz=timezone,
        fold=1,
    ).in_timezone("UTC")


def project(entry: WeeklyAvailabilityEntry, on_date: date, timezone: str) -> Optional[TimeRange]:
    """
    Materialize an availability entry on a specific date.

    The entry's wall-clock times are combined with ``on_date`` and localized in
    ``timezone`` using the offset in effect on that date, so daylight-saving
    transitions are honoured. The returned range is expressed in UTC.

    A window lying inside a spring-forward gap (e.g. 02:30-03:00 in New York
    on the switch night) has no real duration on that date; None is returned.

    Args:
        entry: Recurring entry; its day of week is expected to match ``on_date``
        on_date: Calendar date (any time-of-day component is ignored)
        timezone: IANA timezone identifier of the schedule

    Raises:
        MalformedTimeOfDay: If the entry holds an unparseable time string
    """
    start_time, end_time = entry.parsed_times()

    start = _localize(on_date, start_time, timezone)
    end = _localize(on_date, end_time, timezone)

    if start >= end:
        logger.debug(
            "Availability %s-%s does not exist on %s in %s",
            entry.start_time, entry.end_time, on_date, timezone,
        )
        return None

    return TimeRange(start=start, end=end)


def project_day(
    entries_by_day: Dict[DayOfWeek, List[WeeklyAvailabilityEntry]],
    on_date: date,
    timezone: str,
) -> List[TimeRange]:
    """
    Project every entry for the date's day of week.

    Returns an empty list when the host has no availability on that day.
    Entries with no duration on that date are left out.
    """
    entries = entries_by_day.get(day_of_week(on_date), [])
    windows = (project(entry, on_date, timezone) for entry in entries)
    return [window for window in windows if window is not None]
