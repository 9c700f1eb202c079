# backend/tutorslot/services/quota_service.py
"""
Quota Service for the tutoring reservation backend.

Each student subscribes to a course plan with a fixed number of lesson
hours per calendar month. Usage is measured in the current month: confirmed
reservations dated in it consume hours as soon as they are booked.
Cancelled and completed reservations never count against the quota.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.enums import PlanId
from ..core.exceptions import (
    NotFoundException,
    QuotaExceededException,
    RepositoryException,
    StorageException,
    ValidationException,
)
from ..core.messages import get_user_message
from ..models.reservation import Reservation, ReservationStatus
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoursePlan:
    id: PlanId
    name: str
    monthly_hours: int
    description: str
    subjects: Tuple[str, ...]
    features: Tuple[str, ...]


COURSE_PLANS: Tuple[CoursePlan, ...] = (
    CoursePlan(
        id=PlanId.LIGHT,
        name="ライトコース",
        monthly_hours=15,
        description="国語＋単科指導で基礎をしっかり固めるコース",
        subjects=("国語", "選択科目（1科目）"),
        features=(
            "月15時間の個別指導",
            "国語を中心とした基礎学習",
            "1科目を選択して集中指導",
            "リーズナブルな料金設定",
        ),
    ),
    CoursePlan(
        id=PlanId.HALF,
        name="ハーフコース",
        monthly_hours=30,
        description="全教科対応でバランス良く学習できるコース",
        subjects=("国語", "数学", "英語", "理科", "社会"),
        features=(
            "月30時間の個別指導",
            "全教科に対応",
            "バランスの取れた学習プラン",
            "定期テスト対策も充実",
        ),
    ),
    CoursePlan(
        id=PlanId.FREE,
        name="フリーコース",
        monthly_hours=45,
        description="最大45時間で集中的に学習できるコース",
        subjects=("国語", "数学", "英語", "理科", "社会", "専門科目"),
        features=(
            "月45時間の個別指導",
            "全教科対応＋専門科目",
            "受験対策にも最適",
            "最も充実したサポート体制",
        ),
    ),
)


def get_plan_info(plan_id: Optional[str]) -> Optional[CoursePlan]:
    """Look up a plan by id; unknown or missing ids give None."""
    if not plan_id:
        return None
    for plan in COURSE_PLANS:
        if plan.id.value == plan_id:
            return plan
    return None


def get_all_plans() -> List[CoursePlan]:
    return list(COURSE_PLANS)


@dataclass(frozen=True)
class CourseUsage:
    used_hours: float
    remaining_hours: float
    total_hours: float
    usage_percentage: float


@dataclass(frozen=True)
class QuotaValidation:
    is_valid: bool
    message: str
    max_allowed_hours: float


def month_bounds(day: date) -> Tuple[date, date]:
    """First day of ``day``'s month and first day of the following month."""
    first = day.replace(day=1)
    if first.month == 12:
        return first, first.replace(year=first.year + 1, month=1)
    return first, first.replace(month=first.month + 1)


def _format_hours(hours: float) -> str:
    return str(int(hours)) if float(hours).is_integer() else f"{hours:g}"


def compute_course_usage(
    plan: CoursePlan, reservations: Iterable[Reservation], today: date
) -> CourseUsage:
    """
    Hours used and left in ``today``'s month.

    Only confirmed reservations dated in the same month and year count.
    """
    used_minutes = sum(
        r.duration_minutes
        for r in reservations
        if r.status == ReservationStatus.CONFIRMED.value
        and r.reservation_date.year == today.year
        and r.reservation_date.month == today.month
    )
    used_hours = used_minutes / 60
    total_hours = float(plan.monthly_hours)
    remaining_hours = total_hours - used_hours
    usage_percentage = (used_hours / total_hours) * 100 if total_hours else 0.0
    return CourseUsage(
        used_hours=used_hours,
        remaining_hours=remaining_hours,
        total_hours=total_hours,
        usage_percentage=usage_percentage,
    )


def validate_quota(
    requested_hours: float, usage: Optional[CourseUsage], locale: Optional[str] = None
) -> QuotaValidation:
    """
    Check a requested booking length against what is left this month.

    Rules apply in order and the first failure wins: a non-positive request
    is invalid, a request over the remaining hours is invalid, anything
    else is valid. ``max_allowed_hours`` is always the remaining hours.
    """
    if usage is None:
        return QuotaValidation(
            is_valid=False,
            message=get_user_message("COURSE_UNAVAILABLE", locale),
            max_allowed_hours=0,
        )

    remaining = usage.remaining_hours
    if requested_hours <= 0:
        return QuotaValidation(
            is_valid=False,
            message=get_user_message("QUOTA_MIN_HOURS", locale),
            max_allowed_hours=remaining,
        )

    if requested_hours > remaining:
        return QuotaValidation(
            is_valid=False,
            message=get_user_message(
                "QUOTA_EXCEEDED", locale, remaining_hours=_format_hours(remaining)
            ),
            max_allowed_hours=remaining,
        )

    return QuotaValidation(
        is_valid=True,
        message=get_user_message("QUOTA_OK", locale),
        max_allowed_hours=remaining,
    )


class QuotaService(BaseService):
    """Monthly usage of a student's course plan."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.reservation_repository = RepositoryFactory.create_reservation_repository(db)

    def get_plan_for_student(self, student_id: str) -> CoursePlan:
        """
        Resolve the plan a student subscribed to.

        Raises:
            NotFoundException: If the student does not exist
            ValidationException: If no valid plan is selected
        """
        try:
            student = self.user_repository.get_by_id(student_id)
        except RepositoryException as exc:
            raise StorageException(str(exc), operation="get_plan", entity_id=student_id) from exc
        if student is None:
            raise NotFoundException(
                f"User {student_id} not found",
                code="USER_NOT_FOUND",
                user_message=get_user_message("USER_NOT_FOUND"),
            )

        plan = get_plan_info(student.selected_course)
        if plan is None:
            raise ValidationException(
                f"User {student_id} has no course plan selected",
                code="COURSE_UNAVAILABLE",
                user_message=get_user_message("COURSE_UNAVAILABLE"),
            )
        return plan

    @BaseService.measure_operation("get_usage")
    def get_usage(self, student_id: str, today: date) -> CourseUsage:
        """
        Usage of the student's plan in ``today``'s month.

        Args:
            student_id: Student whose usage is computed
            today: Any day in the month of interest
        """
        plan = self.get_plan_for_student(student_id)
        start, end = month_bounds(today)
        try:
            reservations = self.reservation_repository.get_confirmed_for_student_between(
                student_id, start, end
            )
        except RepositoryException as exc:
            raise StorageException(str(exc), operation="get_usage", entity_id=student_id) from exc
        return compute_course_usage(plan, reservations, today)

    def check(
        self, student_id: str, requested_hours: float, today: date, locale: Optional[str] = None
    ) -> QuotaValidation:
        """Validate a booking length for a student without raising."""
        try:
            usage: Optional[CourseUsage] = self.get_usage(student_id, today)
        except ValidationException:
            usage = None
        return validate_quota(requested_hours, usage, locale)

    def ensure_within_quota(
        self,
        student_id: str,
        requested_hours: float,
        day: date,
        released_hours: float = 0.0,
    ) -> None:
        """
        Raise unless ``requested_hours`` fit in what is left of ``day``'s month.

        ``released_hours`` are handed back first (moving a booking frees its
        old length when that booking was counted in this month).

        Raises:
            ValidationException: No plan, or a non-positive request
            QuotaExceededException: Not enough hours left
        """
        usage = self.get_usage(student_id, day)
        if released_hours:
            usage = CourseUsage(
                used_hours=usage.used_hours - released_hours,
                remaining_hours=usage.remaining_hours + released_hours,
                total_hours=usage.total_hours,
                usage_percentage=(usage.used_hours - released_hours) / usage.total_hours * 100,
            )
        validation = validate_quota(requested_hours, usage)
        if validation.is_valid:
            return
        if requested_hours <= 0:
            raise ValidationException(
                f"Requested hours must be positive, got {requested_hours}",
                code="QUOTA_MIN_HOURS",
                user_message=validation.message,
            )
        self.logger.info(
            "Quota exceeded",
            extra={
                "student_id": student_id,
                "requested_hours": requested_hours,
                "remaining_hours": usage.remaining_hours,
            },
        )
        raise QuotaExceededException(
            requested_hours=requested_hours,
            remaining_hours=usage.remaining_hours,
            user_message=validation.message,
        )
