"""Application service: the entry point used by the API layer."""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.core.exceptions import (
    ApplicationError,
    NotFound,
    StoreUnavailable,
    ValidationFailed,
)
from app.models.application import Application, ApplicationPriority, ApplicationStatus
from app.schemas.application import (
    ApplicationDraft,
    ApplicationFilters,
    ApplicationUpdate,
    BulkCreateResult,
    EligibilityResponse,
    StatsReport,
)
from app.services.directories import (
    SqlEmployerDirectory,
    SqlJobOfferDirectory,
    SqlProfessionalDirectory,
)
from app.services.eligibility import EligibilityEvaluator
from app.services.lifecycle import ApplicationLifecycle
from app.services.reconciler import AggregateReconciler
from app.services.record_store import ApplicationStore
from app.services.statistics import StatisticsAggregator
from app.utils.dates import to_naive_utc, utc_now

logger = logging.getLogger(__name__)


class ApplicationService:
    """Core service for handling job applications."""

    def __init__(
        self,
        store: ApplicationStore,
        evaluator: EligibilityEvaluator,
        lifecycle: ApplicationLifecycle,
        reconciler: AggregateReconciler,
        statistics: StatisticsAggregator,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.evaluator = evaluator
        self.lifecycle = lifecycle
        self.reconciler = reconciler
        self.statistics = statistics
        self.clock = clock

    def _now(self, now: datetime | None) -> datetime:
        return now if now is not None else self.clock()

    @staticmethod
    def _page(page: int, page_size: int | None) -> tuple[int, int, int]:
        page = max(page, 1)
        size = page_size or settings.default_page_size
        size = min(max(size, 1), settings.max_page_size)
        return page, size, (page - 1) * size

    async def check_eligibility(
        self, professional_id: str, job_offer_id: str, now: datetime | None = None
    ) -> EligibilityResponse:
        """Pre-flight check; never writes anything."""
        now = self._now(now)
        decision = await self.evaluator.evaluate(professional_id, job_offer_id, now)
        monthly_count = await self.evaluator.monthly_count(professional_id, now)
        return EligibilityResponse(
            can_apply=decision.admit,
            reason=decision.reason,
            message=decision.message,
            monthly_count=monthly_count,
            monthly_limit=self.evaluator.monthly_limit,
        )

    async def get_monthly_count(
        self, professional_id: str, now: datetime | None = None
    ) -> int:
        return await self.evaluator.monthly_count(professional_id, self._now(now))

    async def create_application(
        self, draft: ApplicationDraft, now: datetime | None = None
    ) -> Application:
        return await self.lifecycle.create(draft, self._now(now))

    async def bulk_create(
        self, drafts: list[ApplicationDraft], now: datetime | None = None
    ) -> list[BulkCreateResult]:
        """Create applications one draft at a time.

        A rejected draft does not stop the batch, but repeated storage
        failures do: the remaining drafts are reported as skipped.
        """
        logger.info(f"Starting bulk creation of {len(drafts)} applications")

        results = []
        consecutive_store_errors = 0
        max_consecutive_store_errors = 3  # Circuit breaker threshold

        for index, draft in enumerate(drafts):
            if consecutive_store_errors >= max_consecutive_store_errors:
                results.append(
                    BulkCreateResult(
                        index=index,
                        status="rejected",
                        error_kind=StoreUnavailable.kind,
                        error_detail="Skipped after repeated storage failures",
                    )
                )
                continue

            try:
                application = await self.create_application(draft, now)
            except StoreUnavailable as e:
                consecutive_store_errors += 1
                results.append(
                    BulkCreateResult(
                        index=index,
                        status="rejected",
                        error_kind=e.kind,
                        error_detail=e.message,
                    )
                )
                continue
            except ApplicationError as e:
                consecutive_store_errors = 0
                results.append(
                    BulkCreateResult(
                        index=index,
                        status="rejected",
                        error_kind=e.kind,
                        error_detail=e.message,
                    )
                )
                continue

            consecutive_store_errors = 0
            results.append(
                BulkCreateResult(
                    index=index, status="created", application_id=application.id
                )
            )

        created = sum(1 for r in results if r.status == "created")
        logger.info(
            f"Bulk creation completed: {created} created, "
            f"{len(results) - created} rejected"
        )
        return results

    async def get_application(self, application_id: str) -> Application:
        application = await self.store.get(application_id)
        if application is None:
            raise NotFound("Application", application_id)
        return application

    async def update_application(
        self,
        application_id: str,
        patch: ApplicationUpdate,
        now: datetime | None = None,
    ) -> Application:
        return await self.lifecycle.edit(
            application_id, patch.model_dump(exclude_unset=True), self._now(now)
        )

    async def review_application(
        self,
        application_id: str,
        decision: ApplicationStatus | str,
        reviewer_id: str | None = None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> Application:
        try:
            decision = ApplicationStatus(decision)
        except ValueError:
            raise ValidationFailed(
                "status",
                "one_of:Accepted,Rejected",
                f"Unknown decision '{decision}'",
            ) from None
        return await self.lifecycle.review(
            application_id,
            decision,
            self._now(now),
            reviewer_id=reviewer_id,
            notes=notes,
        )

    async def set_priority(
        self, application_id: str, priority: ApplicationPriority | str
    ) -> Application:
        return await self.lifecycle.set_priority(application_id, priority)

    async def soft_delete_application(self, application_id: str) -> None:
        await self.lifecycle.soft_delete(application_id)

    async def list_by_professional(
        self,
        professional_id: str,
        status: ApplicationStatus | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> tuple[list[Application], int]:
        _, size, offset = self._page(page, page_size)
        return await self.store.list_applications(
            professional_id=professional_id, status=status, offset=offset, limit=size
        )

    async def list_by_job_offer(
        self,
        job_offer_id: str,
        status: ApplicationStatus | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> tuple[list[Application], int]:
        _, size, offset = self._page(page, page_size)
        return await self.store.list_applications(
            job_offer_id=job_offer_id, status=status, offset=offset, limit=size
        )

    async def list_applications(
        self,
        filters: ApplicationFilters,
        page: int = 1,
        page_size: int | None = None,
    ) -> tuple[list[Application], int]:
        _, size, offset = self._page(page, page_size)
        return await self.store.list_applications(
            status=filters.status,
            priority=filters.priority.value if filters.priority else None,
            professional_id=filters.professional_id,
            job_offer_id=filters.job_offer_id,
            applied_from=to_naive_utc(filters.applied_from)
            if filters.applied_from
            else None,
            applied_to=to_naive_utc(filters.applied_to) if filters.applied_to else None,
            sort_by=filters.sort_by,
            sort_order=filters.sort_order,
            offset=offset,
            limit=size,
        )

    async def get_stats(self) -> StatsReport:
        return await self.statistics.compute_stats()

    async def reconcile_job_offer(self, job_offer_id: str) -> int:
        """Recompute a job offer's cached count, e.g. after a crash."""
        if not await self.reconciler.job_offers.exists(job_offer_id):
            raise NotFound("JobOffer", job_offer_id)
        return await self.reconciler.reconcile(job_offer_id)

    async def get_application_count(self, job_offer_id: str) -> int:
        count = await self.reconciler.job_offers.get_application_count(job_offer_id)
        if count is None:
            raise NotFound("JobOffer", job_offer_id)
        return count


# Factory function for dependency injection
def create_application_service(
    session_factory: sessionmaker | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> ApplicationService:
    """Factory function to create ApplicationService with dependencies."""
    store = ApplicationStore(session_factory)
    professionals = SqlProfessionalDirectory(session_factory)
    employers = SqlEmployerDirectory(session_factory)
    job_offers = SqlJobOfferDirectory(session_factory)

    evaluator = EligibilityEvaluator(store)
    reconciler = AggregateReconciler(store, job_offers)
    lifecycle = ApplicationLifecycle(
        store, evaluator, reconciler, professionals, job_offers, employers
    )
    return ApplicationService(
        store=store,
        evaluator=evaluator,
        lifecycle=lifecycle,
        reconciler=reconciler,
        statistics=StatisticsAggregator(store),
        clock=clock,
    )
