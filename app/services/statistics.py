"""Read-side rollups over the application records."""

from app.models.application import ApplicationStatus
from app.schemas.application import StatsReport
from app.services.record_store import ApplicationStore

SECONDS_PER_DAY = 86400


class StatisticsAggregator:
    """Computes point-in-time application statistics.

    Counts include soft-deleted applications. The two queries are not run
    in one snapshot, so under concurrent writes the report is best-effort.
    """

    def __init__(self, store: ApplicationStore):
        self.store = store

    async def compute_stats(self) -> StatsReport:
        counts = await self.store.status_counts()
        durations = await self.store.review_durations()

        avg_days = 0.0
        if durations:
            total_seconds = sum(
                (reviewed - applied).total_seconds() for applied, reviewed in durations
            )
            avg_days = total_seconds / len(durations) / SECONDS_PER_DAY

        return StatsReport(
            total=sum(counts.values()),
            pending=counts.get(ApplicationStatus.PENDING.value, 0),
            accepted=counts.get(ApplicationStatus.ACCEPTED.value, 0),
            rejected=counts.get(ApplicationStatus.REJECTED.value, 0),
            avg_days_to_review=avg_days,
        )
