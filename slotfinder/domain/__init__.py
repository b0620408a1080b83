"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import (
    BusyInterval,
    DayOfWeek,
    EventType,
    MeetingRequest,
    Schedule,
    TimeRange,
    WeeklyAvailabilityEntry,
    day_of_week,
    group_by_day,
    parse_time_of_day,
)
from .projector import project, project_day
from .slot_resolver import SlotResolver, resolve

__all__ = [
    "BusyInterval",
    "DayOfWeek",
    "EventType",
    "MeetingRequest",
    "Schedule",
    "SlotResolver",
    "TimeRange",
    "WeeklyAvailabilityEntry",
    "day_of_week",
    "group_by_day",
    "parse_time_of_day",
    "project",
    "project_day",
    "resolve",
]
