"""
Domain-specific exception hierarchy for the slotfinder application.
"""


class SlotFinderError(Exception):
    """Base class for all application-level errors."""


class MalformedTimeOfDay(SlotFinderError, ValueError):
    """Raised when a stored availability time is not a valid ``HH:MM`` string."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Malformed time of day: {value!r} (expected HH:MM)")


class BusyIntervalSourceUnavailable(SlotFinderError):
    """Raised when busy intervals cannot be fetched or parsed upstream."""


# Short name used by calendar adapters.
SourceUnavailable = BusyIntervalSourceUnavailable


class CalendarAuthenticationError(BusyIntervalSourceUnavailable):
    """Raised when the calendar provider rejects the access token."""


class EventTypeNotFound(SlotFinderError):
    """Raised when a host has no event type with the requested id."""


class EventTypeInactive(SlotFinderError):
    """Raised when booking is requested for a deactivated event type."""
