"""
Application services for finding bookable meeting times.

The service fetches a host's schedule and busy intervals through small
protocols and delegates the actual filtering to the domain-level
``SlotResolver``. This keeps the CLI thin and lets tests plug in stubs for
the storage and calendar dependencies.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence, Tuple

from pendulum import DateTime

from ..domain.exceptions import EventTypeInactive
from ..domain.models import BusyInterval, EventType, MeetingRequest, Schedule
from ..domain.slot_resolver import SlotResolver

logger = logging.getLogger(__name__)


class ScheduleStoreProtocol(Protocol):
    """Read access to host schedules."""

    def get_schedule(self, host_id: str) -> Optional[Schedule]:
        """Return the host's schedule, or None if none was saved."""


class BusyIntervalSourceProtocol(Protocol):
    """Protocol describing the calendar client behaviour needed by the service."""

    async def get_busy_intervals(
        self,
        host_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[BusyInterval]:
        """Return busy intervals for the host, or raise SourceUnavailable."""


class AvailabilityService:
    """
    Orchestrates schedule lookup, busy-interval retrieval and slot resolution.

    Busy intervals are fetched exactly once per request and must arrive before
    any candidate is evaluated. Source errors propagate unchanged; there is
    no partial result.
    """

    def __init__(
        self,
        schedule_store: ScheduleStoreProtocol,
        busy_source: BusyIntervalSourceProtocol,
        resolver: Optional[SlotResolver] = None,
    ) -> None:
        self._schedule_store = schedule_store
        self._busy_source = busy_source
        self._resolver = resolver or SlotResolver()

    async def find_valid_times(
        self,
        *,
        host_id: str,
        candidates: Sequence[DateTime],
        request: MeetingRequest,
    ) -> List[DateTime]:
        """
        Return the candidates at which the host can be booked.
        """
        if not candidates:
            return []

        schedule = self._schedule_store.get_schedule(host_id)
        if schedule is None:
            logger.info("Host %s has no schedule; nothing to offer", host_id)
            return []

        range_start, range_end = self.busy_range(candidates, request)
        busy_intervals = await self._busy_source.get_busy_intervals(
            host_id,
            range_start,
            range_end,
        )
        logger.debug(
            "Host %s has %d busy intervals between %s and %s",
            host_id, len(busy_intervals), range_start, range_end,
        )

        return self._resolver.resolve(candidates, request, schedule, busy_intervals)

    async def find_valid_times_for_event(
        self,
        *,
        event_type: EventType,
        candidates: Sequence[DateTime],
    ) -> List[DateTime]:
        """
        Resolve valid start times for one of the host's event types.

        Raises:
            EventTypeInactive: If the event type is not bookable
        """
        if not event_type.is_active:
            raise EventTypeInactive(f"Event type '{event_type.id}' is not active")

        return await self.find_valid_times(
            host_id=event_type.host_id,
            candidates=candidates,
            request=event_type.to_meeting_request(),
        )

    @staticmethod
    def busy_range(
        candidates: Sequence[DateTime],
        request: MeetingRequest,
    ) -> Tuple[DateTime, DateTime]:
        """
        Range of busy intervals needed to judge every candidate.

        Covers whole days from the first candidate to the end of the last
        proposed meeting.
        """
        first = min(candidates)
        last = max(candidates)
        return (
            first.start_of("day"),
            last.add(minutes=request.duration_in_minutes).end_of("day"),
        )
