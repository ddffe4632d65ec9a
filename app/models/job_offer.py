"""Job offer model."""

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.storage import Base


def _utc_now() -> datetime:
    """Return current UTC time as timezone-naive datetime for DB storage."""
    return datetime.now(UTC).replace(tzinfo=None)


class JobOfferStatus(str, enum.Enum):
    """Publication status of a job offer."""

    DRAFT = "Draft"
    PUBLISHED = "Published"
    PAUSED = "Paused"
    CLOSED = "Closed"
    FILLED = "Filled"


class JobOffer(Base):
    """Model for a job offer published by an employer.

    ``application_count`` is a cached aggregate written only by the
    aggregate reconciler.
    """

    __tablename__ = "job_offers"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: uuid.uuid4().hex
    )
    employer_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=JobOfferStatus.DRAFT.value, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    application_deadline: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )

    application_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, nullable=False
    )
