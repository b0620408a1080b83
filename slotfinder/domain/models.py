"""
Domain models for recurring availability, time ranges and meeting requests.
"""

import re
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, time
from enum import IntEnum
from typing import Dict, Iterable, List, Tuple

from pendulum import DateTime

from .exceptions import MalformedTimeOfDay


_TIME_OF_DAY_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


class DayOfWeek(IntEnum):
    """Canonical day of week. Values follow ``date.weekday()`` (0=Monday)."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def label(self) -> str:
        """Lowercase name used in configuration files."""
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> "DayOfWeek":
        """Look up a day by its (case-insensitive) English name."""
        try:
            return cls[label.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown day of week: {label!r}") from None


def day_of_week(value: date) -> DayOfWeek:
    """
    Classify a date (or datetime) by its proleptic Gregorian weekday.

    Datetimes are classified by their own calendar date, in whatever timezone
    they carry; no conversion happens before classification.
    """
    return DayOfWeek(value.weekday())


def parse_time_of_day(value: str) -> time:
    """
    Parse an ``HH:MM`` wall-clock string.

    Raises:
        MalformedTimeOfDay: If the value is not a string or is out of range
    """
    if not isinstance(value, str):
        raise MalformedTimeOfDay(value)

    match = _TIME_OF_DAY_PATTERN.match(value.strip())
    if not match:
        raise MalformedTimeOfDay(value)

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise MalformedTimeOfDay(value)

    return time(hour=hour, minute=minute)


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another. Touching ends do not overlap."""
        return self.start < other.end and other.start < self.end

    def contains(self, other: "TimeRange") -> bool:
        """Check if ``other`` lies within this range, boundaries included."""
        return self.start <= other.start and other.end <= self.end

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


# Busy intervals from an external calendar share the same semantics.
BusyInterval = TimeRange


@dataclass(frozen=True)
class WeeklyAvailabilityEntry:
    """A recurring free window on one day of the week, in local wall-clock time."""
    day_of_week: DayOfWeek
    start_time: str  # "HH:MM"
    end_time: str  # "HH:MM"

    def parsed_times(self) -> Tuple[time, time]:
        """Return ``(start, end)`` as ``time`` objects."""
        return parse_time_of_day(self.start_time), parse_time_of_day(self.end_time)


@dataclass(frozen=True)
class Schedule:
    """A host's weekly availability, qualified by an IANA timezone."""
    host_id: str
    timezone: str
    availabilities: Tuple[WeeklyAvailabilityEntry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MeetingRequest:
    """Immutable input to slot resolution."""
    host_id: str
    duration_in_minutes: int

    def __post_init__(self):
        if self.duration_in_minutes <= 0:
            raise ValueError(
                f"duration_in_minutes must be greater than zero, got {self.duration_in_minutes}"
            )


@dataclass(frozen=True)
class EventType:
    """A bookable meeting type published by a host."""
    id: str
    host_id: str
    name: str
    duration_in_minutes: int
    description: str = ""
    is_active: bool = True

    def to_meeting_request(self) -> MeetingRequest:
        return MeetingRequest(host_id=self.host_id, duration_in_minutes=self.duration_in_minutes)


def group_by_day(
    entries: Iterable[WeeklyAvailabilityEntry],
) -> Dict[DayOfWeek, List[WeeklyAvailabilityEntry]]:
    """Group availability entries by their day of week."""
    grouped: Dict[DayOfWeek, List[WeeklyAvailabilityEntry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.day_of_week].append(entry)
    return dict(grouped)
