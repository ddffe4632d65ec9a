"""Eligibility rules for new applications."""

import logging
from dataclasses import dataclass
from datetime import datetime

from app.core.config import settings
from app.core.exceptions import IneligibleApplication
from app.schemas.application import EligibilityReason
from app.services.record_store import ApplicationStore, QuotaGuard
from app.utils.dates import month_window

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EligibilityDecision:
    """Admit/deny decision for a (professional, job offer) pair."""

    admit: bool
    reason: EligibilityReason
    message: str

    def to_error(self) -> IneligibleApplication:
        return IneligibleApplication(self.reason.value, self.message)


class EligibilityEvaluator:
    """Decides whether a professional may apply to a job offer.

    Checks run in order and stop at the first failure:

    1. the pair must not have an application yet, active or not;
    2. the professional must have fewer than ``monthly_limit`` applications
       whose ``applied_at`` falls in the current calendar month of
       ``timezone``.

    Evaluation has no side effects, so it also backs the pre-flight
    eligibility check.
    """

    def __init__(
        self,
        store: ApplicationStore,
        monthly_limit: int | None = None,
        timezone: str | None = None,
    ):
        self.store = store
        self.monthly_limit = monthly_limit or settings.monthly_application_limit
        self.timezone = timezone or settings.quota_timezone

    def quota_window(self, now: datetime) -> tuple[datetime, datetime]:
        return month_window(now, self.timezone)

    def quota_guard(self, now: datetime) -> QuotaGuard:
        """Quota to re-validate when the application is committed."""
        start, end = self.quota_window(now)
        return QuotaGuard(window_start=start, window_end=end, limit=self.monthly_limit)

    def decision(self, reason: EligibilityReason) -> EligibilityDecision:
        if reason is EligibilityReason.ALREADY_APPLIED:
            message = "Already applied to this job offer"
        elif reason is EligibilityReason.MONTHLY_LIMIT_REACHED:
            message = (
                f"Monthly application limit reached "
                f"({self.monthly_limit} applications per month)"
            )
        else:
            message = "Can apply"
        return EligibilityDecision(
            admit=reason is EligibilityReason.CAN_APPLY, reason=reason, message=message
        )

    async def monthly_count(self, professional_id: str, now: datetime) -> int:
        start, end = self.quota_window(now)
        return await self.store.count_in_window(professional_id, start, end)

    async def evaluate(
        self, professional_id: str, job_offer_id: str, now: datetime
    ) -> EligibilityDecision:
        if await self.store.find_by_pair(professional_id, job_offer_id) is not None:
            logger.info(
                f"Professional {professional_id} already applied to {job_offer_id}"
            )
            return self.decision(EligibilityReason.ALREADY_APPLIED)

        if await self.monthly_count(professional_id, now) >= self.monthly_limit:
            logger.info(f"Professional {professional_id} reached the monthly limit")
            return self.decision(EligibilityReason.MONTHLY_LIMIT_REACHED)

        return self.decision(EligibilityReason.CAN_APPLY)
