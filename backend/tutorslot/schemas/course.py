# backend/tutorslot/schemas/course.py
from typing import List

from pydantic import Field

from ..core.enums import PlanId
from ..services.quota_service import CoursePlan, CourseUsage, QuotaValidation
from ._strict_base import StrictModel, StrictRequestModel


class CoursePlanResponse(StrictModel):
    id: PlanId
    name: str
    monthly_hours: int
    description: str
    subjects: List[str]
    features: List[str]

    @classmethod
    def from_plan(cls, plan: CoursePlan) -> "CoursePlanResponse":
        return cls(
            id=plan.id,
            name=plan.name,
            monthly_hours=plan.monthly_hours,
            description=plan.description,
            subjects=list(plan.subjects),
            features=list(plan.features),
        )


class CourseUsageResponse(StrictModel):
    plan: CoursePlanResponse
    used_hours: float
    remaining_hours: float
    total_hours: float
    usage_percentage: float

    @classmethod
    def build(cls, plan: CoursePlan, usage: CourseUsage) -> "CourseUsageResponse":
        return cls(
            plan=CoursePlanResponse.from_plan(plan),
            used_hours=usage.used_hours,
            remaining_hours=usage.remaining_hours,
            total_hours=usage.total_hours,
            usage_percentage=usage.usage_percentage,
        )


class QuotaCheckRequest(StrictRequestModel):
    requested_hours: float = Field(..., description="Lesson length to check, in hours")


class QuotaValidationResponse(StrictModel):
    is_valid: bool
    message: str
    max_allowed_hours: float

    @classmethod
    def from_validation(cls, validation: QuotaValidation) -> "QuotaValidationResponse":
        return cls(
            is_valid=validation.is_valid,
            message=validation.message,
            max_allowed_hours=validation.max_allowed_hours,
        )
