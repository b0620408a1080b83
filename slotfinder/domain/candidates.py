"""
Generation of candidate meeting start instants.
"""

from typing import List, Tuple

from pendulum import DateTime


def round_up_to_step(moment: DateTime, step_minutes: int = 15) -> DateTime:
    """
    Round a moment up to the next ``step_minutes`` boundary of its day.

    Seconds are cleared; a moment already on a boundary is returned unchanged.
    """
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be greater than zero, got {step_minutes}")

    floored = moment.set(second=0, microsecond=0)
    minutes_since_midnight = floored.hour * 60 + floored.minute
    remainder = minutes_since_midnight % step_minutes

    if remainder == 0 and floored == moment:
        return floored
    return floored.add(minutes=step_minutes - remainder)


def generate_candidates(start: DateTime, end: DateTime, step_minutes: int = 15) -> List[DateTime]:
    """
    Return every ``step_minutes``-spaced instant from ``start`` through ``end`` inclusive.
    """
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be greater than zero, got {step_minutes}")

    candidates: List[DateTime] = []
    current = start
    while current <= end:
        candidates.append(current)
        current = current.add(minutes=step_minutes)
    return candidates


def booking_horizon(now: DateTime, years: int = 1, step_minutes: int = 15) -> Tuple[DateTime, DateTime]:
    """
    Default window offered to guests: from the next step boundary after ``now``
    to the end of the same day ``years`` later.
    """
    start = round_up_to_step(now, step_minutes)
    end = start.add(years=years).end_of("day")
    return start, end
