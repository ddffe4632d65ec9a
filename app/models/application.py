"""Job application model."""

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.core.storage import Base
from app.utils.dates import to_naive_utc


def _utc_now() -> datetime:
    """Return current UTC time as timezone-naive datetime for DB storage."""
    return datetime.now(UTC).replace(tzinfo=None)


def _new_id() -> str:
    return uuid.uuid4().hex


class ApplicationStatus(str, enum.Enum):
    """Review status of an application."""

    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


class ApplicationPriority(str, enum.Enum):
    """Priority an employer may assign to an application."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class SalaryCurrency(str, enum.Enum):
    CRC = "CRC"
    USD = "USD"


class Application(Base):
    """Model for a professional's application to a job offer."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint(
            "professional_id", "job_offer_id", name="uq_applications_professional_offer"
        ),
        Index("ix_applications_professional_applied", "professional_id", "applied_at"),
        Index("ix_applications_offer_status", "job_offer_id", "status"),
        Index("ix_applications_professional_status", "professional_id", "status"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    professional_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    job_offer_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ApplicationStatus.PENDING.value, index=True
    )
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ApplicationPriority.MEDIUM.value, index=True
    )

    cover_letter: Mapped[str | None] = mapped_column(Text, nullable=True)
    motivation: Mapped[str | None] = mapped_column(Text, nullable=True)
    expected_salary_amount: Mapped[float | None] = mapped_column(Float, nullable=True)
    expected_salary_currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default=SalaryCurrency.CRC.value
    )
    expected_salary_negotiable: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    availability_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    additional_skills: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    applied_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=_utc_now, index=True
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, index=True
    )
    reviewed_by: Mapped[str | None] = mapped_column(String(64), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now, nullable=False
    )

    @property
    def is_reviewed(self) -> bool:
        return self.status != ApplicationStatus.PENDING.value

    def days_since_application(self, now: datetime | None = None) -> int:
        """Whole days elapsed since the application was submitted."""
        now = to_naive_utc(now) if now is not None else _utc_now()
        return (now - self.applied_at).days

    @property
    def expected_salary_formatted(self) -> str:
        if not self.expected_salary_amount:
            return "Not specified"
        negotiable = " (Negotiable)" if self.expected_salary_negotiable else ""
        amount = self.expected_salary_amount
        if float(amount).is_integer():
            amount = int(amount)
        return f"{amount} {self.expected_salary_currency}{negotiable}"
