# backend/tests/unit/test_time_slots.py
"""
Unit tests for the slot grid and interval arithmetic.

Pure functions only; no database.
"""

from datetime import date, time

import pytest

from tutorslot.core.exceptions import ValidationException
from tutorslot.services.time_slots import (
    BusinessHours,
    TimeSlot,
    calculate_duration_minutes,
    covered_slot_starts,
    generate_time_slots,
    is_aligned_to_grid,
    is_reservable_date,
    is_time_overlapping,
    is_within_business_hours,
    minutes_from_time_string,
    parse_hhmm,
    time_string_from_minutes,
)

NINE_TO_SIX = BusinessHours(open="09:00", close="18:00")


class TestGenerateTimeSlots:
    def test_default_day_has_nine_hourly_slots(self):
        slots = generate_time_slots(NINE_TO_SIX, 60)

        assert len(slots) == 9
        assert slots[0] == TimeSlot(start_time="09:00", end_time="10:00", label="09:00 - 10:00")
        assert slots[-1] == TimeSlot(start_time="17:00", end_time="18:00", label="17:00 - 18:00")

    def test_slots_are_back_to_back(self):
        slots = generate_time_slots(NINE_TO_SIX, 60)

        for previous, current in zip(slots, slots[1:]):
            assert previous.end_time == current.start_time

    def test_uses_configured_hours_when_not_given(self):
        assert [s.start_time for s in generate_time_slots()] == [
            s.start_time for s in generate_time_slots(NINE_TO_SIX, 60)
        ]

    def test_half_hour_grid(self):
        slots = generate_time_slots(NINE_TO_SIX, 30)

        assert len(slots) == 18
        assert slots[1].start_time == "09:30"

    def test_partial_trailing_slot_is_dropped(self):
        slots = generate_time_slots(BusinessHours(open="09:00", close="10:30"), 60)

        assert [(s.start_time, s.end_time) for s in slots] == [("09:00", "10:00")]

    def test_window_shorter_than_duration_is_empty(self):
        assert generate_time_slots(BusinessHours(open="09:00", close="09:45"), 60) == []

    def test_grid_can_end_at_midnight(self):
        slots = generate_time_slots(BusinessHours(open="22:00", close="24:00"), 60)

        assert slots[-1].end_time == "24:00"

    @pytest.mark.parametrize("duration", [0, -30])
    def test_non_positive_duration_is_rejected(self, duration):
        with pytest.raises(ValidationException) as exc_info:
            generate_time_slots(NINE_TO_SIX, duration)

        assert exc_info.value.code == "INVALID_DURATION"

    def test_close_before_open_is_rejected(self):
        with pytest.raises(ValidationException) as exc_info:
            generate_time_slots(BusinessHours(open="18:00", close="09:00"), 60)

        assert exc_info.value.code == "INVALID_BUSINESS_HOURS"

    def test_each_call_returns_a_fresh_list(self):
        first = generate_time_slots(NINE_TO_SIX, 60)
        first.clear()

        assert len(generate_time_slots(NINE_TO_SIX, 60)) == 9


class TestOverlap:
    def test_touching_intervals_do_not_overlap(self):
        assert not is_time_overlapping("09:00", "10:00", "10:00", "11:00")
        assert not is_time_overlapping("10:00", "11:00", "09:00", "10:00")

    def test_partial_overlap(self):
        assert is_time_overlapping("09:00", "10:30", "10:00", "11:00")

    def test_containment(self):
        assert is_time_overlapping("09:00", "12:00", "10:00", "11:00")
        assert is_time_overlapping("10:00", "11:00", "09:00", "12:00")

    def test_identical_intervals(self):
        assert is_time_overlapping("14:00", "15:00", "14:00", "15:00")

    def test_disjoint_intervals(self):
        assert not is_time_overlapping("09:00", "10:00", "15:00", "16:00")

    def test_accepts_time_objects(self):
        assert is_time_overlapping(time(9, 0), time(11, 0), "10:00", "11:00")

    @pytest.mark.parametrize(
        "a,b",
        [
            (("09:00", "10:00"), ("09:30", "10:30")),
            (("09:00", "10:00"), ("10:00", "11:00")),
            (("13:00", "17:00"), ("14:00", "15:00")),
        ],
    )
    def test_symmetric(self, a, b):
        assert is_time_overlapping(*a, *b) == is_time_overlapping(*b, *a)


class TestTimeParsing:
    def test_minutes_from_time_string(self):
        assert minutes_from_time_string("00:00") == 0
        assert minutes_from_time_string("09:30") == 570
        assert minutes_from_time_string("24:00") == 1440
        assert minutes_from_time_string(time(17, 15)) == 1035

    @pytest.mark.parametrize("value", ["9:00", "25:00", "12:60", "noon", ""])
    def test_invalid_time_strings(self, value):
        with pytest.raises(ValidationException):
            minutes_from_time_string(value)

    def test_time_string_from_minutes_pads(self):
        assert time_string_from_minutes(545) == "09:05"

    def test_parse_hhmm(self):
        assert parse_hhmm("13:00") == time(13, 0)
        assert parse_hhmm(time(13, 0, 45)) == time(13, 0)

    def test_parse_hhmm_rejects_end_of_day(self):
        with pytest.raises(ValidationException):
            parse_hhmm("24:00")

    def test_duration(self):
        assert calculate_duration_minutes("09:00", "11:00") == 120


class TestGridChecks:
    def test_within_business_hours_is_inclusive(self):
        assert is_within_business_hours("09:00", "18:00", NINE_TO_SIX)
        assert not is_within_business_hours("08:00", "09:00", NINE_TO_SIX)
        assert not is_within_business_hours("17:00", "19:00", NINE_TO_SIX)

    def test_aligned_to_grid(self):
        assert is_aligned_to_grid("10:00", "12:00", NINE_TO_SIX, 60)
        assert not is_aligned_to_grid("09:30", "10:30", NINE_TO_SIX, 60)
        assert not is_aligned_to_grid("10:00", "10:00", NINE_TO_SIX, 60)
        assert not is_aligned_to_grid("17:00", "19:00", NINE_TO_SIX, 60)

    def test_covered_slot_starts(self):
        assert covered_slot_starts("09:00", "11:00", 60) == [time(9, 0), time(10, 0)]

    def test_reservable_dates(self):
        monday = date(2030, 1, 7)
        saturday = date(2030, 1, 12)

        assert is_reservable_date(monday, today=monday)
        assert is_reservable_date(date(2030, 1, 8), today=monday)
        assert not is_reservable_date(saturday, today=monday)
        assert not is_reservable_date(date(2030, 1, 4), today=monday)
