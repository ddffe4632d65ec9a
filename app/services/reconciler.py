"""Keeps the cached per-offer application count in sync."""

import asyncio
import logging

from app.core.config import settings
from app.core.exceptions import StoreUnavailable
from app.services.directories import JobOfferDirectory
from app.services.record_store import ApplicationStore

logger = logging.getLogger(__name__)


class AggregateReconciler:
    """Recomputes ``application_count`` of a job offer from the record set.

    The count is always recomputed in full rather than incremented, so
    running it twice, or concurrently with new creations, can only leave
    the value briefly stale, never wrong after the next run.
    """

    def __init__(
        self,
        store: ApplicationStore,
        job_offers: JobOfferDirectory,
        max_attempts: int | None = None,
        backoff_seconds: float | None = None,
    ):
        self.store = store
        self.job_offers = job_offers
        self.max_attempts = max_attempts or settings.reconcile_max_attempts
        self.backoff_seconds = (
            settings.reconcile_backoff_seconds
            if backoff_seconds is None
            else backoff_seconds
        )

    async def reconcile(self, job_offer_id: str) -> int:
        """Write the true application count to the job offer and return it."""
        delay = self.backoff_seconds
        for attempt in range(1, self.max_attempts + 1):
            try:
                count = await self.store.count_for_job_offer(job_offer_id)
                await self.job_offers.set_application_count(job_offer_id, count)
            except StoreUnavailable:
                if attempt == self.max_attempts:
                    logger.error(
                        f"Giving up reconciling job offer {job_offer_id} "
                        f"after {attempt} attempts"
                    )
                    raise
                logger.warning(
                    f"Reconcile of job offer {job_offer_id} failed "
                    f"(attempt {attempt}/{self.max_attempts}), retrying in {delay:.2f}s"
                )
                await asyncio.sleep(delay)
                delay *= 2
                continue

            logger.info(f"Job offer {job_offer_id} application count set to {count}")
            return count

        raise StoreUnavailable("reconcile")
