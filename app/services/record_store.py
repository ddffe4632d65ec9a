"""Record store for application documents."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from app.core.exceptions import DuplicateKey, StoreUnavailable
from app.core.storage import async_session
from app.models.application import Application, ApplicationStatus

logger = logging.getLogger(__name__)

PAIR_CONSTRAINT = "uq_applications_professional_offer"

_SORTABLE_COLUMNS = {
    "applied_at": Application.applied_at,
    "reviewed_at": Application.reviewed_at,
    "priority": Application.priority,
    "status": Application.status,
}


def _is_pair_violation(error: IntegrityError) -> bool:
    """Tell whether an integrity error comes from the unique pair index."""
    message = str(error.orig)
    if PAIR_CONSTRAINT in message:
        return True
    # SQLite names the columns instead of the constraint.
    return (
        "UNIQUE" in message.upper()
        and "professional_id" in message
        and "job_offer_id" in message
    )


@dataclass(frozen=True)
class QuotaGuard:
    """Monthly quota to re-check inside the insert transaction."""

    window_start: datetime
    window_end: datetime
    limit: int


class ApplicationStore:
    """Durable storage for applications.

    Every public method opens its own session; SQLAlchemy failures surface
    as ``StoreUnavailable`` and never leak driver details to callers.
    """

    def __init__(self, session_factory: sessionmaker | None = None):
        self._session_factory = session_factory or async_session

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Record store failure during {operation}: {e}")
            raise StoreUnavailable(operation) from e

    async def get(self, application_id: str) -> Application | None:
        """Fetch an application by id, active or not."""
        async with self._session("get") as session:
            return await session.get(Application, application_id)

    async def find_by_pair(
        self, professional_id: str, job_offer_id: str
    ) -> Application | None:
        """Find the application of a professional to a job offer, if any."""
        async with self._session("find_by_pair") as session:
            query = select(Application).where(
                Application.professional_id == professional_id,
                Application.job_offer_id == job_offer_id,
            )
            result = await session.execute(query)
            return result.scalar_one_or_none()

    async def count_in_window(
        self, professional_id: str, window_start: datetime, window_end: datetime
    ) -> int:
        """Count applications of a professional applied within [start, end)."""
        async with self._session("count_in_window") as session:
            return await self._count_in_window(
                session, professional_id, window_start, window_end
            )

    @staticmethod
    async def _count_in_window(
        session: AsyncSession,
        professional_id: str,
        window_start: datetime,
        window_end: datetime,
    ) -> int:
        query = select(func.count(Application.id)).where(
            Application.professional_id == professional_id,
            Application.applied_at >= window_start,
            Application.applied_at < window_end,
        )
        return (await session.execute(query)).scalar_one()

    async def insert(
        self, application: Application, quota: QuotaGuard | None = None
    ) -> Application | None:
        """Insert a new application in a single transaction.

        When ``quota`` is given the window is re-counted right before the
        insert and ``None`` is returned if the limit is already reached.
        This re-count is optimistic: two transactions racing on the last
        free slot can both pass it. The pair uniqueness, on the other hand,
        is enforced by the unique index and raises ``DuplicateKey``.
        """
        async with self._session("insert") as session:
            if quota is not None:
                count = await self._count_in_window(
                    session,
                    application.professional_id,
                    quota.window_start,
                    quota.window_end,
                )
                if count >= quota.limit:
                    return None

            session.add(application)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                if not _is_pair_violation(e):
                    logger.error(f"Record store rejected insert: {e.orig}")
                    raise StoreUnavailable("insert") from e
                logger.info(
                    f"Unique index rejected application for professional "
                    f"{application.professional_id} and job offer "
                    f"{application.job_offer_id}: {e.orig}"
                )
                raise DuplicateKey(
                    application.professional_id, application.job_offer_id
                ) from e
            # Column defaults were applied at flush and survive the commit.
            return application

    async def compare_and_set(
        self,
        application_id: str,
        expected_status: ApplicationStatus | None,
        values: dict[str, Any],
        active_only: bool = False,
    ) -> Application | None:
        """Update an application only if its status still matches.

        Returns the updated row, or ``None`` when no row matched (missing id
        or a status that changed since it was read). ``expected_status=None``
        performs an unconditional update. With ``active_only`` soft-deleted
        rows never match.
        """
        async with self._session("compare_and_set") as session:
            conditions = [Application.id == application_id]
            if expected_status is not None:
                conditions.append(Application.status == expected_status.value)
            if active_only:
                conditions.append(Application.is_active.is_(True))

            result = await session.execute(
                update(Application)
                .where(*conditions)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await session.rollback()
                return None

            updated = await session.get(
                Application, application_id, populate_existing=True
            )
            await session.commit()
            return updated

    async def count_for_job_offer(self, job_offer_id: str) -> int:
        """Count all applications referencing a job offer, active or not."""
        async with self._session("count_for_job_offer") as session:
            query = select(func.count(Application.id)).where(
                Application.job_offer_id == job_offer_id
            )
            return (await session.execute(query)).scalar_one()

    async def list_applications(
        self,
        *,
        status: ApplicationStatus | None = None,
        priority: str | None = None,
        professional_id: str | None = None,
        job_offer_id: str | None = None,
        applied_from: datetime | None = None,
        applied_to: datetime | None = None,
        include_inactive: bool = False,
        sort_by: str = "applied_at",
        sort_order: str = "desc",
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Application], int]:
        """Return one page of matching applications and the total match count."""
        conditions = []
        if not include_inactive:
            conditions.append(Application.is_active.is_(True))
        if status is not None:
            conditions.append(Application.status == status.value)
        if priority is not None:
            conditions.append(Application.priority == priority)
        if professional_id is not None:
            conditions.append(Application.professional_id == professional_id)
        if job_offer_id is not None:
            conditions.append(Application.job_offer_id == job_offer_id)
        if applied_from is not None:
            conditions.append(Application.applied_at >= applied_from)
        if applied_to is not None:
            conditions.append(Application.applied_at <= applied_to)

        column = _SORTABLE_COLUMNS.get(sort_by, Application.applied_at)
        ordering = column.asc() if sort_order == "asc" else column.desc()

        async with self._session("list_applications") as session:
            total = (
                await session.execute(
                    select(func.count(Application.id)).where(*conditions)
                )
            ).scalar_one()

            query = (
                select(Application)
                .where(*conditions)
                .order_by(ordering, Application.id)
                .offset(offset)
                .limit(limit)
            )
            rows = (await session.execute(query)).scalars().all()
            return list(rows), total

    async def status_counts(self) -> dict[str, int]:
        """Count all applications grouped by status."""
        async with self._session("status_counts") as session:
            query = select(Application.status, func.count(Application.id)).group_by(
                Application.status
            )
            result = await session.execute(query)
            return {status: count for status, count in result.all()}

    async def review_durations(self) -> list[tuple[datetime, datetime]]:
        """Return ``(applied_at, reviewed_at)`` for every reviewed application."""
        async with self._session("review_durations") as session:
            query = select(Application.applied_at, Application.reviewed_at).where(
                Application.reviewed_at.is_not(None)
            )
            result = await session.execute(query)
            return [(applied, reviewed) for applied, reviewed in result.all()]
