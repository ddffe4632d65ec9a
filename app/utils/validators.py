"""Validation logic for applications."""

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.utils.dates import local_date

COVER_LETTER_MAX_LENGTH = 1000
MOTIVATION_MAX_LENGTH = 500
NOTES_MAX_LENGTH = 500
SKILL_MAX_LENGTH = 50

_TEXT_LIMITS = {
    "cover_letter": COVER_LETTER_MAX_LENGTH,
    "motivation": MOTIVATION_MAX_LENGTH,
    "notes": NOTES_MAX_LENGTH,
}


@dataclass
class ValidationResult:
    """Result of validation process."""

    is_valid: bool
    error: str | None = None
    field: str | None = None
    constraint: str | None = None
    warnings: list[str] = dataclasses.field(default_factory=list)

    @classmethod
    def failure(cls, field_name: str, constraint: str, error: str) -> "ValidationResult":
        return cls(is_valid=False, error=error, field=field_name, constraint=constraint)


def validate_application_fields(
    values: dict[str, Any],
    now: datetime,
    max_additional_skills: int = 10,
    timezone: str = "UTC",
) -> ValidationResult:
    """Validate the content fields present in ``values``.

    Only keys that are present are checked, so the same function serves
    drafts and partial updates. Dates are compared as calendar days in
    ``timezone``.
    """
    warnings = []

    for name, limit in _TEXT_LIMITS.items():
        text = values.get(name)
        if text is not None and len(text) > limit:
            return ValidationResult.failure(
                name,
                f"max_length:{limit}",
                f"{name.replace('_', ' ').capitalize()} cannot exceed {limit} characters",
            )

    salary = values.get("expected_salary")
    if salary is not None:
        amount = salary.get("amount")
        if amount is not None and amount < 0:
            return ValidationResult.failure(
                "expected_salary.amount",
                "min:0",
                "Expected salary cannot be negative",
            )

    availability = values.get("availability_date")
    if availability is not None:
        if local_date(availability, timezone) < local_date(now, timezone):
            return ValidationResult.failure(
                "availability_date",
                "not_in_past",
                "Availability date cannot be in the past",
            )

    skills = values.get("additional_skills")
    if skills is not None:
        if len(skills) > max_additional_skills:
            return ValidationResult.failure(
                "additional_skills",
                f"max_items:{max_additional_skills}",
                f"No more than {max_additional_skills} additional skills allowed",
            )
        for skill in skills:
            if not skill:
                return ValidationResult.failure(
                    "additional_skills", "not_empty", "Skills cannot be empty"
                )
            if len(skill) > SKILL_MAX_LENGTH:
                return ValidationResult.failure(
                    "additional_skills",
                    f"max_length:{SKILL_MAX_LENGTH}",
                    f"Each skill cannot exceed {SKILL_MAX_LENGTH} characters",
                )

    if "cover_letter" in values and not values.get("cover_letter"):
        warnings.append("Application has no cover letter")

    return ValidationResult(is_valid=True, warnings=warnings)
