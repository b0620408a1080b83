"""
Tests for candidate generation.
"""

import pendulum
import pytest

from slotfinder.domain.candidates import booking_horizon, generate_candidates, round_up_to_step


def _utc(value: str):
    return pendulum.parse(value, tz="UTC")


class TestRoundUpToStep:
    """Tests for round_up_to_step()."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2024-11-25 10:07", "2024-11-25 10:15"),
            ("2024-11-25 10:15", "2024-11-25 10:15"),
            ("2024-11-25 10:15:30", "2024-11-25 10:30"),
            ("2024-11-25 10:50", "2024-11-25 11:00"),
            ("2024-11-25 23:55", "2024-11-26 00:00"),
        ],
    )
    def test_rounds_up_to_quarter_hour(self, value, expected):
        assert round_up_to_step(_utc(value)) == _utc(expected)

    def test_custom_step(self):
        assert round_up_to_step(_utc("2024-11-25 10:07"), step_minutes=30) == _utc("2024-11-25 10:30")

    def test_steps_are_counted_from_midnight(self):
        """With 25-minute steps the boundaries are 00:00, 00:25, 00:50, 01:15, ..."""
        assert round_up_to_step(_utc("2024-11-25 01:07"), step_minutes=25) == _utc("2024-11-25 01:15")

    def test_invalid_step(self):
        with pytest.raises(ValueError):
            round_up_to_step(_utc("2024-11-25 10:07"), step_minutes=0)


class TestGenerateCandidates:
    """Tests for generate_candidates()."""

    def test_inclusive_of_both_ends(self):
        candidates = generate_candidates(_utc("2024-11-25 09:00"), _utc("2024-11-25 10:00"), 15)

        assert [c.format("HH:mm") for c in candidates] == ["09:00", "09:15", "09:30", "09:45", "10:00"]

    def test_empty_when_end_precedes_start(self):
        assert generate_candidates(_utc("2024-11-25 10:00"), _utc("2024-11-25 09:00")) == []

    def test_steps_are_absolute_across_dst(self):
        """The switch night in New York still yields evenly spaced instants."""
        start = pendulum.datetime(2024, 3, 10, 0, 0, tz="America/New_York")
        end = pendulum.datetime(2024, 3, 10, 4, 0, tz="America/New_York")

        candidates = generate_candidates(start, end, 60)

        # 02:00 local does not exist that night
        assert len(candidates) == 4
        assert all((b - a).in_minutes() == 60 for a, b in zip(candidates, candidates[1:]))

    def test_invalid_step(self):
        with pytest.raises(ValueError):
            generate_candidates(_utc("2024-11-25 09:00"), _utc("2024-11-25 10:00"), -5)


class TestBookingHorizon:
    """Tests for booking_horizon()."""

    def test_one_year_from_next_step(self):
        start, end = booking_horizon(_utc("2024-11-25 10:07"))

        assert start == _utc("2024-11-25 10:15")
        assert end == _utc("2025-11-25 10:15").end_of("day")
