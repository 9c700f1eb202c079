# backend/tests/unit/test_slot_availability.py
from datetime import time
from types import SimpleNamespace

import pytest

from tutorslot.core.exceptions import ValidationException
from tutorslot.services.availability_service import mark_slot_availability, toggle_slot_selection
from tutorslot.services.time_slots import BusinessHours, generate_time_slots

SLOTS = generate_time_slots(BusinessHours(open="09:00", close="18:00"), 60)


def _reservation(start: time, end: time, status: str = "confirmed"):
    return SimpleNamespace(start_time=start, end_time=end, status=status)


def test_confirmed_reservation_flags_exactly_its_slot():
    result = mark_slot_availability(SLOTS, [_reservation(time(10, 0), time(11, 0))])

    assert len(result) == len(SLOTS)
    assert [entry.slot.start_time for entry in result if entry.booked] == ["10:00"]


def test_cancelled_and_completed_reservations_do_not_block():
    result = mark_slot_availability(
        SLOTS,
        [
            _reservation(time(10, 0), time(11, 0), "cancelled"),
            _reservation(time(13, 0), time(14, 0), "completed"),
        ],
    )

    assert not any(entry.booked for entry in result)


def test_multi_hour_reservation_flags_every_covered_slot():
    result = mark_slot_availability(SLOTS, [_reservation(time(14, 0), time(16, 0))])

    assert [entry.slot.start_time for entry in result if entry.booked] == ["14:00", "15:00"]


def test_no_reservations_leaves_grid_open():
    result = mark_slot_availability(SLOTS, [])

    assert [entry.slot for entry in result] == SLOTS
    assert not any(entry.booked for entry in result)


class TestToggleSelection:
    def test_select_from_empty(self):
        assert toggle_slot_selection(None, SLOTS[0]) == SLOTS[0]

    def test_choosing_current_selection_clears_it(self):
        assert toggle_slot_selection(SLOTS[2], SLOTS[2]) is None

    def test_choosing_another_slot_replaces_selection(self):
        assert toggle_slot_selection(SLOTS[2], SLOTS[3]) == SLOTS[3]

    def test_booked_slot_cannot_be_chosen(self):
        availability = mark_slot_availability(SLOTS, [_reservation(time(9, 0), time(10, 0))])

        with pytest.raises(ValidationException) as exc_info:
            toggle_slot_selection(None, SLOTS[0], availability)

        assert exc_info.value.code == "SLOT_ALREADY_BOOKED"
        assert toggle_slot_selection(None, SLOTS[1], availability) == SLOTS[1]
