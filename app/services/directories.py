"""Read-only directories of professionals, employers and job offers."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.core.exceptions import StoreUnavailable
from app.core.storage import async_session
from app.models.directory import Employer, Professional
from app.models.job_offer import JobOffer, JobOfferStatus
from app.utils.dates import to_naive_utc

logger = logging.getLogger(__name__)


class ProfessionalDirectory(ABC):
    """Lookup of professionals by identifier."""

    @abstractmethod
    async def exists(self, professional_id: str) -> bool:
        pass


class EmployerDirectory(ABC):
    """Lookup of employers by identifier."""

    @abstractmethod
    async def exists(self, employer_id: str) -> bool:
        pass


class JobOfferDirectory(ABC):
    """Lookup of job offers plus the one field this service owns on them."""

    @abstractmethod
    async def exists(self, job_offer_id: str) -> bool:
        pass

    @abstractmethod
    async def closed_reason(self, job_offer_id: str, now: datetime) -> str | None:
        """Return why the offer does not accept applications, or ``None``."""
        pass

    async def is_accepting_applications(self, job_offer_id: str, now: datetime) -> bool:
        return await self.closed_reason(job_offer_id, now) is None

    @abstractmethod
    async def get_application_count(self, job_offer_id: str) -> int | None:
        pass

    @abstractmethod
    async def set_application_count(self, job_offer_id: str, count: int) -> None:
        """Write the cached application count.

        Only the aggregate reconciler calls this.
        """
        pass


class _SqlDirectory:
    def __init__(self, session_factory: sessionmaker | None = None):
        self._session_factory = session_factory or async_session

    async def _get(self, model, entity_id: str, operation: str):
        try:
            async with self._session_factory() as session:
                return await session.get(model, entity_id)
        except SQLAlchemyError as e:
            logger.error(f"Directory lookup failed during {operation}: {e}")
            raise StoreUnavailable(operation) from e


class SqlProfessionalDirectory(_SqlDirectory, ProfessionalDirectory):
    async def exists(self, professional_id: str) -> bool:
        professional = await self._get(Professional, professional_id, "professional lookup")
        return professional is not None and professional.is_active


class SqlEmployerDirectory(_SqlDirectory, EmployerDirectory):
    async def exists(self, employer_id: str) -> bool:
        employer = await self._get(Employer, employer_id, "employer lookup")
        return employer is not None and employer.is_active


class SqlJobOfferDirectory(_SqlDirectory, JobOfferDirectory):
    async def exists(self, job_offer_id: str) -> bool:
        return await self._get(JobOffer, job_offer_id, "job offer lookup") is not None

    async def closed_reason(self, job_offer_id: str, now: datetime) -> str | None:
        offer = await self._get(JobOffer, job_offer_id, "job offer lookup")
        if offer is None:
            return "Job offer not found"
        if not offer.is_active or offer.status != JobOfferStatus.PUBLISHED.value:
            return "Job offer is not accepting applications"
        if (
            offer.application_deadline is not None
            and to_naive_utc(now) > offer.application_deadline
        ):
            return "Application deadline has passed"
        return None

    async def get_application_count(self, job_offer_id: str) -> int | None:
        offer = await self._get(JobOffer, job_offer_id, "job offer lookup")
        return offer.application_count if offer is not None else None

    async def set_application_count(self, job_offer_id: str, count: int) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(
                    update(JobOffer)
                    .where(JobOffer.id == job_offer_id)
                    .values(application_count=count)
                    .execution_options(synchronize_session=False)
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to write application count for {job_offer_id}: {e}")
            raise StoreUnavailable("set_application_count") from e
