"""
Adapters layer - External integrations (Google Calendar, schedule storage).
"""

from .google_calendar_client import GoogleCalendarClient
from .mock_calendar_client import MockCalendarClient
from .schedule_store import InMemoryScheduleStore

__all__ = ["GoogleCalendarClient", "InMemoryScheduleStore", "MockCalendarClient"]
