"""Schemas for job application requests and responses."""

import enum
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.models.application import (
    ApplicationPriority,
    ApplicationStatus,
    SalaryCurrency,
)


class EligibilityReason(str, enum.Enum):
    """Outcome of an eligibility evaluation."""

    CAN_APPLY = "CanApply"
    ALREADY_APPLIED = "AlreadyApplied"
    MONTHLY_LIMIT_REACHED = "MonthlyLimitReached"


class ExpectedSalary(BaseModel):
    """Salary expectation attached to an application."""

    amount: float | None = Field(default=None, description="Expected amount")
    currency: SalaryCurrency = Field(default=SalaryCurrency.CRC)
    is_negotiable: bool = Field(default=True)


class ApplicationDraft(BaseModel):
    """Request to create a new application."""

    model_config = ConfigDict(str_strip_whitespace=True)

    professional_id: str = Field(..., min_length=1, description="Applying professional")
    job_offer_id: str = Field(..., min_length=1, description="Target job offer")
    cover_letter: str | None = Field(default=None, description="Up to 1000 characters")
    motivation: str | None = Field(default=None, description="Up to 500 characters")
    expected_salary: ExpectedSalary | None = None
    availability_date: datetime | None = Field(
        default=None, description="Date the professional can start"
    )
    additional_skills: list[str] = Field(default_factory=list)
    notes: str | None = Field(default=None, description="Up to 500 characters")
    priority: ApplicationPriority = ApplicationPriority.MEDIUM


class ApplicationUpdate(BaseModel):
    """Partial update of an application.

    Which fields are accepted depends on the application status.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    cover_letter: str | None = None
    motivation: str | None = None
    expected_salary: ExpectedSalary | None = None
    availability_date: datetime | None = None
    additional_skills: list[str] | None = None
    notes: str | None = None
    priority: ApplicationPriority | None = None


class ReviewRequest(BaseModel):
    """Request to accept or reject an application."""

    model_config = ConfigDict(str_strip_whitespace=True)

    status: Literal["Accepted", "Rejected"] = Field(..., description="Decision")
    reviewer_id: str | None = Field(default=None, description="Reviewing employer")
    notes: str | None = Field(default=None, description="Review notes")


class PriorityRequest(BaseModel):
    """Request to change application priority."""

    priority: ApplicationPriority


class ApplicationResponse(BaseModel):
    """Serialized application."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    professional_id: str
    job_offer_id: str
    status: ApplicationStatus
    priority: ApplicationPriority
    cover_letter: str | None
    motivation: str | None
    expected_salary: ExpectedSalary | None
    expected_salary_formatted: str
    availability_date: datetime | None
    additional_skills: list[str]
    notes: str | None
    applied_at: datetime
    reviewed_at: datetime | None
    reviewed_by: str | None
    is_active: bool
    is_reviewed: bool
    days_since_application: int

    @classmethod
    def from_model(cls, application, now: datetime | None = None) -> "ApplicationResponse":
        """Build the response from an ``Application`` row."""
        salary = None
        if application.expected_salary_amount is not None:
            salary = ExpectedSalary(
                amount=application.expected_salary_amount,
                currency=application.expected_salary_currency,
                is_negotiable=application.expected_salary_negotiable,
            )
        return cls(
            id=application.id,
            professional_id=application.professional_id,
            job_offer_id=application.job_offer_id,
            status=application.status,
            priority=application.priority,
            cover_letter=application.cover_letter,
            motivation=application.motivation,
            expected_salary=salary,
            expected_salary_formatted=application.expected_salary_formatted,
            availability_date=application.availability_date,
            additional_skills=list(application.additional_skills or []),
            notes=application.notes,
            applied_at=application.applied_at,
            reviewed_at=application.reviewed_at,
            reviewed_by=application.reviewed_by,
            is_active=application.is_active,
            is_reviewed=application.is_reviewed,
            days_since_application=application.days_since_application(now),
        )


class Pagination(BaseModel):
    """Pagination metadata for list responses."""

    page: int
    page_size: int
    total_count: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, page_size: int, total_count: int) -> "Pagination":
        total_pages = (total_count + page_size - 1) // page_size
        return cls(
            page=page,
            page_size=page_size,
            total_count=total_count,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class ApplicationListResponse(BaseModel):
    """Page of applications."""

    applications: list[ApplicationResponse]
    pagination: Pagination


class ApplicationFilters(BaseModel):
    """Filters for the general application listing."""

    status: ApplicationStatus | None = None
    priority: ApplicationPriority | None = None
    professional_id: str | None = None
    job_offer_id: str | None = None
    applied_from: datetime | None = None
    applied_to: datetime | None = None
    sort_by: Literal["applied_at", "reviewed_at", "priority", "status"] = "applied_at"
    sort_order: Literal["asc", "desc"] = "desc"


class EligibilityResponse(BaseModel):
    """Result of a pre-flight eligibility check."""

    can_apply: bool
    reason: EligibilityReason
    message: str
    monthly_count: int
    monthly_limit: int


class StatsReport(BaseModel):
    """Point-in-time application statistics."""

    total: int = 0
    pending: int = 0
    accepted: int = 0
    rejected: int = 0
    avg_days_to_review: float = 0.0


class BulkCreateRequest(BaseModel):
    """Batch of drafts handed over by the bulk upload parser."""

    drafts: list[ApplicationDraft] = Field(..., min_length=1, max_length=500)


class BulkCreateResult(BaseModel):
    """Outcome of one draft in a bulk creation."""

    index: int
    status: Literal["created", "rejected"]
    application_id: str | None = None
    error_kind: str | None = None
    error_detail: str | None = None


class ApplicationCountResponse(BaseModel):
    """Cached application count of a job offer."""

    job_offer_id: str
    application_count: int
