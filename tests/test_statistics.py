"""Tests for application statistics."""

from datetime import UTC, datetime, timedelta

import pytest

APPLIED_AT = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)


class TestStatistics:
    """Tests for the statistics report."""

    @pytest.mark.asyncio
    async def test_empty_store(self, service):
        """Test an empty store reports zeros."""
        stats = await service.get_stats()

        assert stats.total == 0
        assert stats.pending == 0
        assert stats.accepted == 0
        assert stats.rejected == 0
        assert stats.avg_days_to_review == 0.0

    @pytest.mark.asyncio
    async def test_scenario_stats(self, service, make_draft):
        """Test counts per status and the average review delay."""
        offers = ["offer-1", "offer-2", "offer-3", "offer-4"]
        applications = []
        for professional_id, offer in zip(
            ["prof-1", "prof-1", "prof-2", "prof-2"], offers, strict=True
        ):
            applications.append(
                await service.create_application(
                    make_draft(professional_id, offer), APPLIED_AT
                )
            )

        reviews = [("Accepted", 1), ("Rejected", 3), ("Accepted", 2)]
        for application, (decision, days) in zip(applications, reviews, strict=False):
            await service.review_application(
                application.id, decision, now=APPLIED_AT + timedelta(days=days)
            )

        stats = await service.get_stats()
        assert stats.total == 4
        assert stats.pending == 1
        assert stats.accepted == 2
        assert stats.rejected == 1
        assert stats.avg_days_to_review == pytest.approx(2.0)

    @pytest.mark.asyncio
    async def test_soft_deleted_are_counted(self, service, make_draft):
        """Test inactive applications remain in the totals."""
        application = await service.create_application(make_draft(), APPLIED_AT)
        await service.soft_delete_application(application.id)

        stats = await service.get_stats()
        assert stats.total == 1
        assert stats.pending == 1

    @pytest.mark.asyncio
    async def test_fractional_review_delay(self, service, make_draft):
        """Test the average keeps sub-day precision."""
        application = await service.create_application(make_draft(), APPLIED_AT)
        await service.review_application(
            application.id, "Accepted", now=APPLIED_AT + timedelta(hours=12)
        )

        stats = await service.get_stats()
        assert stats.avg_days_to_review == pytest.approx(0.5)
