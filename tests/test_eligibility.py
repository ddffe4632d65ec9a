"""Tests for eligibility rules."""

from datetime import UTC, datetime

import pytest

from app.core.exceptions import IneligibleApplication
from app.schemas.application import EligibilityReason
from app.utils.dates import month_window


class TestMonthWindow:
    """Tests for the quota window computation."""

    def test_window_in_utc(self):
        """Test window covers the calendar month of now."""
        start, end = month_window(datetime(2024, 3, 15, 12, 30, tzinfo=UTC))
        assert start == datetime(2024, 3, 1)
        assert end == datetime(2024, 4, 1)

    def test_window_rolls_over_year(self):
        """Test December window ends on January 1st of next year."""
        start, end = month_window(datetime(2024, 12, 31, 23, 59, tzinfo=UTC))
        assert start == datetime(2024, 12, 1)
        assert end == datetime(2025, 1, 1)

    def test_naive_now_is_treated_as_utc(self):
        """Test naive datetimes are interpreted as UTC."""
        assert month_window(datetime(2024, 3, 1)) == (
            datetime(2024, 3, 1),
            datetime(2024, 4, 1),
        )

    def test_window_uses_reference_timezone(self):
        """Test the month is taken in the reference timezone."""
        # 03:00 UTC on April 1st is still March 31st in Costa Rica (UTC-6).
        start, end = month_window(
            datetime(2024, 4, 1, 3, 0, tzinfo=UTC), "America/Costa_Rica"
        )
        assert start == datetime(2024, 3, 1, 6, 0)
        assert end == datetime(2024, 4, 1, 6, 0)


class TestCheckEligibility:
    """Tests for the pre-flight eligibility check."""

    @pytest.mark.asyncio
    async def test_scenario_already_applied(self, service, make_draft):
        """Test eligibility flips to AlreadyApplied once the application exists."""
        now = datetime(2024, 3, 5, 9, 0, tzinfo=UTC)

        before = await service.check_eligibility("prof-1", "offer-1", now)
        assert before.can_apply is True
        assert before.reason == EligibilityReason.CAN_APPLY
        assert before.monthly_count == 0
        assert before.monthly_limit == 3

        await service.create_application(make_draft(), now)

        after = await service.check_eligibility("prof-1", "offer-1", now)
        assert after.can_apply is False
        assert after.reason == EligibilityReason.ALREADY_APPLIED
        assert after.monthly_count == 1

    @pytest.mark.asyncio
    async def test_check_has_no_side_effects(self, service):
        """Test repeated checks never create records."""
        for _ in range(3):
            result = await service.check_eligibility("prof-1", "offer-1")
            assert result.can_apply is True

        stats = await service.get_stats()
        assert stats.total == 0

    @pytest.mark.asyncio
    async def test_duplicate_check_wins_over_quota(self, service, make_draft):
        """Test AlreadyApplied is reported before MonthlyLimitReached."""
        for day, offer in [(1, "offer-1"), (2, "offer-2"), (3, "offer-3")]:
            await service.create_application(
                make_draft(job_offer_id=offer), datetime(2024, 3, day, tzinfo=UTC)
            )

        result = await service.check_eligibility(
            "prof-1", "offer-1", datetime(2024, 3, 10, tzinfo=UTC)
        )
        assert result.reason == EligibilityReason.ALREADY_APPLIED


class TestMonthlyQuota:
    """Tests for the monthly application limit."""

    @pytest.mark.asyncio
    async def test_scenario_monthly_limit(self, service, make_draft):
        """Test a fourth application in the same month is denied."""
        for day, offer in [(1, "offer-1"), (15, "offer-2"), (30, "offer-3")]:
            await service.create_application(
                make_draft(job_offer_id=offer), datetime(2024, 3, day, 12, tzinfo=UTC)
            )

        with pytest.raises(IneligibleApplication) as exc_info:
            await service.create_application(
                make_draft(job_offer_id="offer-4"),
                datetime(2024, 3, 31, 12, tzinfo=UTC),
            )
        assert exc_info.value.reason == EligibilityReason.MONTHLY_LIMIT_REACHED.value
        assert "3 applications per month" in exc_info.value.message

        application = await service.create_application(
            make_draft(job_offer_id="offer-4"), datetime(2024, 4, 1, 0, 0, tzinfo=UTC)
        )
        assert application.job_offer_id == "offer-4"

    @pytest.mark.asyncio
    async def test_soft_deleted_applications_count_toward_quota(
        self, service, make_draft
    ):
        """Test inactive applications still use up the monthly quota."""
        now = datetime(2024, 3, 5, tzinfo=UTC)
        for offer in ["offer-1", "offer-2", "offer-3"]:
            application = await service.create_application(
                make_draft(job_offer_id=offer), now
            )
            await service.soft_delete_application(application.id)

        result = await service.check_eligibility("prof-1", "offer-4", now)
        assert result.can_apply is False
        assert result.reason == EligibilityReason.MONTHLY_LIMIT_REACHED
        assert result.monthly_count == 3

    @pytest.mark.asyncio
    async def test_quota_is_per_professional(self, service, make_draft):
        """Test one professional's quota does not affect another."""
        now = datetime(2024, 3, 5, tzinfo=UTC)
        for offer in ["offer-1", "offer-2", "offer-3"]:
            await service.create_application(make_draft(job_offer_id=offer), now)

        result = await service.check_eligibility("prof-2", "offer-4", now)
        assert result.can_apply is True
        assert result.monthly_count == 0

    @pytest.mark.asyncio
    async def test_previous_month_not_counted(self, service, make_draft):
        """Test applications from the previous month are outside the window."""
        for day, offer in [(27, "offer-1"), (28, "offer-2"), (29, "offer-3")]:
            await service.create_application(
                make_draft(job_offer_id=offer), datetime(2024, 2, day, tzinfo=UTC)
            )

        count = await service.get_monthly_count(
            "prof-1", datetime(2024, 3, 1, tzinfo=UTC)
        )
        assert count == 0
