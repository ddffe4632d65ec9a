"""Date helpers shared by the services."""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Return current time as timezone-aware UTC datetime."""
    return datetime.now(UTC)


def to_naive_utc(value: datetime) -> datetime:
    """Convert a datetime to the timezone-naive UTC form stored in the DB.

    Naive inputs are taken to be UTC already.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def month_window(now: datetime, timezone: str = "UTC") -> tuple[datetime, datetime]:
    """Return the calendar month containing ``now`` as naive UTC bounds.

    The month is taken in ``timezone``; the interval is half-open,
    ``[start_of_month, start_of_next_month)``.
    """
    aware = now if now.tzinfo is not None else now.replace(tzinfo=UTC)
    local = aware.astimezone(ZoneInfo(timezone))
    start = local.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return to_naive_utc(start), to_naive_utc(end)


def local_date(value: datetime, timezone: str = "UTC") -> date:
    """Calendar day of ``value`` in ``timezone``; naive values are UTC."""
    aware = value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    return aware.astimezone(ZoneInfo(timezone)).date()
