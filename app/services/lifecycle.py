"""Application lifecycle: creation and status transitions."""

import logging
from datetime import datetime
from typing import Any

from app.core.config import settings
from app.core.exceptions import (
    AlreadyReviewed,
    ApplicationError,
    CannotModifyReviewed,
    DuplicateKey,
    JobOfferClosed,
    NotFound,
    StoreUnavailable,
    ValidationFailed,
)
from app.models.application import (
    Application,
    ApplicationPriority,
    ApplicationStatus,
    SalaryCurrency,
)
from app.schemas.application import ApplicationDraft, EligibilityReason
from app.services.directories import (
    EmployerDirectory,
    JobOfferDirectory,
    ProfessionalDirectory,
)
from app.services.eligibility import EligibilityEvaluator
from app.services.reconciler import AggregateReconciler
from app.services.record_store import ApplicationStore
from app.utils.dates import to_naive_utc
from app.utils.validators import validate_application_fields

logger = logging.getLogger(__name__)

_REVIEWED_EDITABLE = frozenset({"priority", "notes"})
_PENDING_EDITABLE = frozenset(
    {
        "cover_letter",
        "motivation",
        "expected_salary",
        "availability_date",
        "additional_skills",
        "notes",
        "priority",
    }
)

# Fields a general edit may touch, per status.
EDITABLE_FIELDS = {
    ApplicationStatus.PENDING: _PENDING_EDITABLE,
    ApplicationStatus.ACCEPTED: _REVIEWED_EDITABLE,
    ApplicationStatus.REJECTED: _REVIEWED_EDITABLE,
}


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def _to_columns(values: dict[str, Any]) -> dict[str, Any]:
    """Translate draft/patch fields into ``Application`` column values."""
    columns = {}
    for name, value in values.items():
        if name == "expected_salary":
            salary = value or {}
            columns["expected_salary_amount"] = salary.get("amount")
            columns["expected_salary_currency"] = _enum_value(
                salary.get("currency") or SalaryCurrency.CRC
            )
            columns["expected_salary_negotiable"] = salary.get("is_negotiable", True)
        elif name == "availability_date":
            columns[name] = to_naive_utc(value) if value is not None else None
        elif name == "additional_skills":
            columns[name] = list(value or [])
        elif name == "priority":
            if value is not None:
                columns[name] = _enum_value(value)
        else:
            columns[name] = value
    return columns


class ApplicationLifecycle:
    """State machine for applications.

    ``Pending`` is the only non-terminal status; ``Accepted`` and
    ``Rejected`` are terminal. Every transition is written with a
    compare-and-set on the status read beforehand, so a writer that lost a
    race fails instead of overwriting the winner.
    """

    def __init__(
        self,
        store: ApplicationStore,
        evaluator: EligibilityEvaluator,
        reconciler: AggregateReconciler,
        professionals: ProfessionalDirectory,
        job_offers: JobOfferDirectory,
        employers: EmployerDirectory,
        max_additional_skills: int | None = None,
    ):
        self.store = store
        self.evaluator = evaluator
        self.reconciler = reconciler
        self.professionals = professionals
        self.job_offers = job_offers
        self.employers = employers
        self.max_additional_skills = (
            settings.max_additional_skills
            if max_additional_skills is None
            else max_additional_skills
        )

    def _validate(self, values: dict[str, Any], now: datetime) -> None:
        result = validate_application_fields(
            values, now, self.max_additional_skills, self.evaluator.timezone
        )
        if not result.is_valid:
            raise ValidationFailed(result.field, result.constraint, result.error)
        for warning in result.warnings:
            logger.debug(warning)

    async def _require(self, application_id: str) -> Application:
        application = await self.store.get(application_id)
        if application is None:
            raise NotFound("Application", application_id)
        return application

    async def _require_active(self, application_id: str) -> Application:
        """Like ``_require``, but a soft-deleted application counts as gone."""
        application = await self._require(application_id)
        if not application.is_active:
            raise NotFound("Application", application_id)
        return application

    async def _transition(
        self,
        application_id: str,
        values: dict[str, Any],
        conflict: type[ApplicationError],
    ) -> Application:
        """Apply ``values`` only while the application is still Pending and active."""
        updated = await self.store.compare_and_set(
            application_id, ApplicationStatus.PENDING, values, active_only=True
        )
        if updated is None:
            await self._require_active(application_id)
            raise conflict(application_id)
        return updated

    async def create(self, draft: ApplicationDraft, now: datetime) -> Application:
        """Create a Pending application if the professional is eligible.

        Eligibility is evaluated first and then re-validated by the insert
        itself: the unique pair index turns a lost race into the same
        ``AlreadyApplied`` denial, and the monthly quota is re-counted in
        the insert transaction.
        """
        values = draft.model_dump()
        professional_id = values.pop("professional_id")
        job_offer_id = values.pop("job_offer_id")
        self._validate(values, now)

        if not await self.professionals.exists(professional_id):
            raise NotFound("Professional", professional_id)
        if not await self.job_offers.exists(job_offer_id):
            raise NotFound("JobOffer", job_offer_id)
        closed_reason = await self.job_offers.closed_reason(job_offer_id, now)
        if closed_reason is not None:
            raise JobOfferClosed(job_offer_id, closed_reason)

        decision = await self.evaluator.evaluate(professional_id, job_offer_id, now)
        if not decision.admit:
            logger.warning(
                f"Application of {professional_id} to {job_offer_id} denied: "
                f"{decision.reason.value}"
            )
            raise decision.to_error()

        application = Application(
            professional_id=professional_id,
            job_offer_id=job_offer_id,
            status=ApplicationStatus.PENDING.value,
            applied_at=to_naive_utc(now),
            reviewed_at=None,
            reviewed_by=None,
            is_active=True,
            **_to_columns(values),
        )
        try:
            created = await self.store.insert(
                application, quota=self.evaluator.quota_guard(now)
            )
        except DuplicateKey:
            logger.warning(
                f"Application of {professional_id} to {job_offer_id} lost a "
                f"concurrent creation race"
            )
            raise self.evaluator.decision(
                EligibilityReason.ALREADY_APPLIED
            ).to_error() from None
        if created is None:
            raise self.evaluator.decision(
                EligibilityReason.MONTHLY_LIMIT_REACHED
            ).to_error()

        logger.info(
            f"Application {created.id} created for professional {professional_id} "
            f"and job offer {job_offer_id}"
        )

        try:
            await self.reconciler.reconcile(job_offer_id)
        except StoreUnavailable:
            # The record is committed; the count converges on the next reconcile.
            logger.error(
                f"Application count of job offer {job_offer_id} left stale "
                f"after creating {created.id}"
            )
        return created

    async def review(
        self,
        application_id: str,
        decision: ApplicationStatus,
        now: datetime,
        reviewer_id: str | None = None,
        notes: str | None = None,
    ) -> Application:
        """Move a Pending application to Accepted or Rejected."""
        if decision not in (ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED):
            raise ValidationFailed(
                "status", "one_of:Accepted,Rejected", "Decision must be Accepted or Rejected"
            )
        if notes is not None:
            self._validate({"notes": notes}, now)
        if reviewer_id is not None and not await self.employers.exists(reviewer_id):
            raise NotFound("Employer", reviewer_id)

        values: dict[str, Any] = {
            "status": decision.value,
            "reviewed_at": to_naive_utc(now),
        }
        if reviewer_id is not None:
            values["reviewed_by"] = reviewer_id
        if notes:
            values["notes"] = notes

        application = await self._transition(application_id, values, AlreadyReviewed)
        logger.info(f"Application {application_id} {decision.value.lower()}")
        return application

    async def accept(
        self, application_id: str, now: datetime, reviewer_id: str | None = None
    ) -> Application:
        return await self.review(
            application_id, ApplicationStatus.ACCEPTED, now, reviewer_id=reviewer_id
        )

    async def reject(
        self,
        application_id: str,
        now: datetime,
        reviewer_id: str | None = None,
        notes: str | None = None,
    ) -> Application:
        return await self.review(
            application_id,
            ApplicationStatus.REJECTED,
            now,
            reviewer_id=reviewer_id,
            notes=notes,
        )

    async def set_priority(
        self, application_id: str, priority: ApplicationPriority
    ) -> Application:
        """Change priority; allowed in every status and never touches timestamps."""
        try:
            priority = ApplicationPriority(priority)
        except ValueError:
            raise ValidationFailed(
                "priority", "one_of:Low,Medium,High", f"Unknown priority '{priority}'"
            ) from None

        updated = await self.store.compare_and_set(
            application_id, None, {"priority": priority.value}
        )
        if updated is None:
            raise NotFound("Application", application_id)
        logger.info(f"Application {application_id} priority set to {updated.priority}")
        return updated

    async def soft_delete(self, application_id: str) -> Application:
        """Hide a Pending application from listings without removing it."""
        application = await self._transition(
            application_id, {"is_active": False}, CannotModifyReviewed
        )
        logger.info(f"Application {application_id} soft-deleted")
        return application

    async def edit(
        self, application_id: str, patch: dict[str, Any], now: datetime
    ) -> Application:
        """Apply a partial update restricted to the fields the status allows."""
        unknown = sorted(set(patch) - _PENDING_EDITABLE)
        if unknown:
            raise ValidationFailed(
                unknown[0], "not_editable", f"Field '{unknown[0]}' cannot be edited"
            )
        self._validate(patch, now)

        current = await self._require_active(application_id)
        columns = _to_columns(patch)
        if not columns:
            return current

        # Terminal statuses never change, so one retry covers a concurrent review.
        for _ in range(2):
            status = ApplicationStatus(current.status)
            if not set(patch) <= EDITABLE_FIELDS[status]:
                raise CannotModifyReviewed(application_id)

            updated = await self.store.compare_and_set(
                application_id, status, columns, active_only=True
            )
            if updated is not None:
                logger.info(
                    f"Application {application_id} updated: {', '.join(sorted(patch))}"
                )
                return updated
            current = await self._require_active(application_id)

        raise CannotModifyReviewed(application_id)
