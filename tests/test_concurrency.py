"""Tests for concurrent writers on the same records."""

import asyncio
from datetime import UTC, datetime

import pytest

from app.core.exceptions import AlreadyReviewed, IneligibleApplication
from app.models.application import ApplicationStatus

NOW = datetime(2024, 3, 5, 10, 0, tzinfo=UTC)


class TestConcurrentCreation:
    """Tests for racing creations of the same pair."""

    @pytest.mark.asyncio
    async def test_single_winner_for_same_pair(self, service, make_draft):
        """Test only one of several simultaneous creations succeeds."""
        results = await asyncio.gather(
            *(service.create_application(make_draft(), NOW) for _ in range(5)),
            return_exceptions=True,
        )

        created = [r for r in results if not isinstance(r, Exception)]
        denied = [r for r in results if isinstance(r, IneligibleApplication)]
        assert len(created) == 1
        assert len(denied) == 4
        assert all(e.reason == "AlreadyApplied" for e in denied)

        applications, total = await service.list_by_job_offer("offer-1")
        assert total == 1
        assert applications[0].id == created[0].id
        assert await service.reconcile_job_offer("offer-1") == 1

    @pytest.mark.asyncio
    async def test_parallel_creations_for_distinct_offers(self, service, make_draft):
        """Test different offers of one professional do not conflict."""
        results = await asyncio.gather(
            *(
                service.create_application(make_draft("prof-2", offer), NOW)
                for offer in ("offer-1", "offer-2")
            )
        )

        assert {r.job_offer_id for r in results} == {"offer-1", "offer-2"}
        assert await service.get_monthly_count("prof-2", NOW) == 2


class TestConcurrentReview:
    """Tests for racing status transitions."""

    @pytest.mark.asyncio
    async def test_accept_and_reject_race(self, service, make_draft):
        """Test exactly one of two racing reviews wins."""
        application = await service.create_application(make_draft(), NOW)

        results = await asyncio.gather(
            service.review_application(application.id, "Accepted", now=NOW),
            service.review_application(application.id, "Rejected", now=NOW),
            return_exceptions=True,
        )

        winners = [r for r in results if not isinstance(r, Exception)]
        losers = [r for r in results if isinstance(r, AlreadyReviewed)]
        assert len(winners) == 1
        assert len(losers) == 1

        stored = await service.get_application(application.id)
        assert stored.status == winners[0].status
        assert stored.status != ApplicationStatus.PENDING.value
