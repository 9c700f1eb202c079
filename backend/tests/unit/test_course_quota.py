# backend/tests/unit/test_course_quota.py
"""Plan catalogue, monthly usage and quota validation rules."""

from datetime import date, time
from types import SimpleNamespace

import pytest

from tutorslot.core.enums import PlanId
from tutorslot.services.quota_service import (
    CourseUsage,
    compute_course_usage,
    get_all_plans,
    get_plan_info,
    month_bounds,
    validate_quota,
)

JANUARY = date(2030, 1, 15)


def _reservation(day: date, start: time, end: time, status: str = "confirmed"):
    minutes = (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
    return SimpleNamespace(reservation_date=day, duration_minutes=minutes, status=status)


def _usage(used: float, total: float = 15.0) -> CourseUsage:
    return CourseUsage(
        used_hours=used,
        remaining_hours=total - used,
        total_hours=total,
        usage_percentage=used / total * 100,
    )


def test_catalogue_hours():
    assert [(plan.id, plan.monthly_hours) for plan in get_all_plans()] == [
        (PlanId.LIGHT, 15),
        (PlanId.HALF, 30),
        (PlanId.FREE, 45),
    ]


def test_get_plan_info():
    assert get_plan_info("half").monthly_hours == 30
    assert get_plan_info(PlanId.FREE).monthly_hours == 45
    assert get_plan_info("platinum") is None
    assert get_plan_info(None) is None


def test_usage_counts_confirmed_reservations_in_month():
    plan = get_plan_info("light")
    reservations = [
        _reservation(date(2030, 1, 7), time(9, 0), time(16, 0)),
        _reservation(date(2030, 1, 28), time(9, 0), time(16, 0)),
        _reservation(date(2030, 1, 8), time(9, 0), time(12, 0), "cancelled"),
        _reservation(date(2030, 1, 9), time(9, 0), time(12, 0), "completed"),
        _reservation(date(2030, 2, 4), time(9, 0), time(12, 0)),
        _reservation(date(2029, 1, 8), time(9, 0), time(12, 0)),
    ]

    usage = compute_course_usage(plan, reservations, JANUARY)

    assert usage.used_hours == 14
    assert usage.remaining_hours == 1
    assert usage.total_hours == 15
    assert usage.usage_percentage == pytest.approx(14 / 15 * 100)


def test_usage_with_no_reservations():
    usage = compute_course_usage(get_plan_info("free"), [], JANUARY)

    assert usage.used_hours == 0
    assert usage.remaining_hours == 45
    assert usage.usage_percentage == 0


class TestValidateQuota:
    def test_request_within_remaining_hours(self):
        result = validate_quota(1, _usage(14), locale="en")

        assert result.is_valid
        assert result.max_allowed_hours == 1
        assert result.message == "Reservation is possible"

    def test_request_over_remaining_hours(self):
        result = validate_quota(2, _usage(14), locale="en")

        assert not result.is_valid
        assert result.max_allowed_hours == 1
        assert result.message == "This exceeds your monthly hours. Remaining hours: 1"

    def test_zero_hours_is_rejected_first(self):
        result = validate_quota(0, _usage(14), locale="en")

        assert not result.is_valid
        assert result.max_allowed_hours == 1
        assert result.message == "Reservation time must be at least 1 hour"

    def test_exact_remaining_hours_are_allowed(self):
        assert validate_quota(15, _usage(0)).is_valid

    def test_default_locale_is_japanese(self):
        result = validate_quota(2, _usage(14))

        assert result.message == "月間利用可能時間を超えています。残り時間: 1時間"

    def test_missing_usage(self):
        result = validate_quota(1, None, locale="en")

        assert not result.is_valid
        assert result.max_allowed_hours == 0
        assert result.message == "Course information is not available"


@pytest.mark.parametrize(
    "day,expected",
    [
        (date(2030, 1, 15), (date(2030, 1, 1), date(2030, 2, 1))),
        (date(2030, 12, 31), (date(2030, 12, 1), date(2031, 1, 1))),
        (date(2032, 2, 29), (date(2032, 2, 1), date(2032, 3, 1))),
    ],
)
def test_month_bounds(day, expected):
    assert month_bounds(day) == expected
