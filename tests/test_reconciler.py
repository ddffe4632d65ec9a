"""Tests for the job offer application count reconciler."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import update

from app.core.exceptions import NotFound, StoreUnavailable
from app.models.job_offer import JobOffer
from app.services.reconciler import AggregateReconciler

NOW = datetime(2024, 3, 5, 10, 0, tzinfo=UTC)


class TestReconcile:
    """Tests for count recomputation."""

    @pytest.mark.asyncio
    async def test_count_converges_after_creations(self, service, make_draft):
        """Test the cached count equals the number of records."""
        for professional_id in ("prof-1", "prof-2", "prof-3"):
            await service.create_application(
                make_draft(professional_id, "offer-2"), NOW
            )

        assert await service.get_application_count("offer-2") == 3
        assert await service.get_application_count("offer-1") == 0

    @pytest.mark.asyncio
    async def test_reconcile_fixes_stale_count(
        self, service, make_draft, session_factory
    ):
        """Test reconcile overwrites a count that drifted."""
        await service.create_application(make_draft(), NOW)
        async with session_factory() as session:
            await session.execute(
                update(JobOffer)
                .where(JobOffer.id == "offer-1")
                .values(application_count=42)
            )
            await session.commit()

        assert await service.get_application_count("offer-1") == 42
        assert await service.reconcile_job_offer("offer-1") == 1
        assert await service.get_application_count("offer-1") == 1

    @pytest.mark.asyncio
    async def test_reconcile_is_idempotent(self, service, make_draft):
        """Test running reconcile repeatedly yields the same count."""
        await service.create_application(make_draft(), NOW)

        counts = [await service.reconcile_job_offer("offer-1") for _ in range(3)]
        assert counts == [1, 1, 1]

    @pytest.mark.asyncio
    async def test_reconcile_unknown_job_offer(self, service):
        """Test reconciling a missing job offer raises NotFound."""
        with pytest.raises(NotFound):
            await service.reconcile_job_offer("ghost")

    @pytest.mark.asyncio
    async def test_application_count_unknown_job_offer(self, service):
        """Test reading the count of a missing job offer raises NotFound."""
        with pytest.raises(NotFound):
            await service.get_application_count("ghost")


class TestReconcileRetry:
    """Tests for retry behaviour on storage failures."""

    @pytest.mark.asyncio
    async def test_retries_until_write_succeeds(self):
        """Test a transient failure is retried."""
        store = AsyncMock()
        store.count_for_job_offer.return_value = 4
        job_offers = AsyncMock()
        job_offers.set_application_count.side_effect = [
            StoreUnavailable("set_application_count"),
            None,
        ]
        reconciler = AggregateReconciler(
            store, job_offers, max_attempts=3, backoff_seconds=0
        )

        assert await reconciler.reconcile("offer-1") == 4
        assert job_offers.set_application_count.await_count == 2
        job_offers.set_application_count.assert_awaited_with("offer-1", 4)

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self):
        """Test the last failure is raised to the caller."""
        store = AsyncMock()
        store.count_for_job_offer.side_effect = StoreUnavailable("count_for_job_offer")
        job_offers = AsyncMock()
        reconciler = AggregateReconciler(
            store, job_offers, max_attempts=3, backoff_seconds=0
        )

        with pytest.raises(StoreUnavailable):
            await reconciler.reconcile("offer-1")

        assert store.count_for_job_offer.await_count == 3
        job_offers.set_application_count.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_survives_reconcile_failure(
        self, service, make_draft, monkeypatch
    ):
        """Test a committed application is kept when the count write fails."""
        job_offers = service.reconciler.job_offers
        monkeypatch.setattr(
            job_offers,
            "set_application_count",
            AsyncMock(side_effect=StoreUnavailable("set_application_count")),
        )

        application = await service.create_application(make_draft(), NOW)
        assert (await service.get_application(application.id)).id == application.id
        assert await service.get_application_count("offer-1") == 0

        monkeypatch.undo()
        assert await service.reconcile_job_offer("offer-1") == 1
