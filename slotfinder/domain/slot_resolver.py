"""
Core business logic for resolving bookable meeting start times.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence

from pendulum import DateTime

from .models import BusyInterval, MeetingRequest, Schedule, TimeRange, group_by_day
from .projector import project_day

logger = logging.getLogger(__name__)


class SlotResolver:
    """
    Selects the candidate instants at which a meeting may start.

    Algorithm, per candidate ``t`` (candidates are independent):
    1. Take the calendar date of ``t`` as given (no timezone shift)
    2. Project the host's entries for that weekday onto the date
    3. Build the proposed meeting ``[t, t + duration)``
    4. Keep ``t`` if one window fully contains the meeting
       and no busy interval overlaps it

    Output preserves the input order.
    """

    def resolve(
        self,
        candidates: Sequence[DateTime],
        request: MeetingRequest,
        schedule: Optional[Schedule],
        busy_intervals: Sequence[BusyInterval],
    ) -> List[DateTime]:
        """
        Filter candidates down to valid booking starts.

        Args:
            candidates: Ascending candidate start instants
            request: Meeting request carrying the duration
            schedule: Host schedule, or None if the host never saved one
            busy_intervals: Busy intervals from the host's external calendar

        Returns:
            The subsequence of ``candidates`` that are valid starts

        Raises:
            MalformedTimeOfDay: If the schedule holds an unparseable time
        """
        if not candidates:
            return []

        if schedule is None:
            logger.debug("No schedule for host %s; no valid times", request.host_id)
            return []

        entries_by_day = group_by_day(schedule.availabilities)
        if not entries_by_day:
            return []

        # Windows are projected once per calendar date within this call only.
        windows_by_date: Dict[date, List[TimeRange]] = {}

        def windows_for(candidate: DateTime) -> List[TimeRange]:
            on_date = candidate.date()
            if on_date not in windows_by_date:
                windows_by_date[on_date] = project_day(entries_by_day, on_date, schedule.timezone)
            return windows_by_date[on_date]

        valid = [
            candidate
            for candidate in candidates
            if self._is_valid(candidate, request, windows_for(candidate), busy_intervals)
        ]

        logger.debug(
            "Resolved %d of %d candidates for host %s",
            len(valid), len(candidates), request.host_id,
        )
        return valid

    def _is_valid(
        self,
        candidate: DateTime,
        request: MeetingRequest,
        windows: List[TimeRange],
        busy_intervals: Sequence[BusyInterval],
    ) -> bool:
        if not windows:
            return False

        meeting = TimeRange(
            start=candidate,
            end=candidate.add(minutes=request.duration_in_minutes),
        )

        return self._fits_a_window(meeting, windows) and self._is_conflict_free(
            meeting, busy_intervals
        )

    @staticmethod
    def _fits_a_window(meeting: TimeRange, windows: List[TimeRange]) -> bool:
        """
        A meeting must sit entirely inside a single window.

        Adjacent windows (e.g. 09:00-12:00 and 12:00-17:00) are not merged.
        """
        return any(window.contains(meeting) for window in windows)

    @staticmethod
    def _is_conflict_free(meeting: TimeRange, busy_intervals: Sequence[BusyInterval]) -> bool:
        return not any(meeting.overlaps(busy) for busy in busy_intervals)


_default_resolver = SlotResolver()


def resolve(
    candidates: Sequence[DateTime],
    request: MeetingRequest,
    schedule: Optional[Schedule],
    busy_intervals: Sequence[BusyInterval],
) -> List[DateTime]:
    """Resolve valid booking starts with a shared stateless resolver."""
    return _default_resolver.resolve(candidates, request, schedule, busy_intervals)
