"""Pytest configuration and fixtures."""

import os
import sys
from datetime import UTC, datetime

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

# Add the app directory to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment variables before importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ["MONTHLY_APPLICATION_LIMIT"] = "3"
os.environ["QUOTA_TIMEZONE"] = "UTC"
os.environ["RECONCILE_BACKOFF_SECONDS"] = "0"

PROFESSIONAL_IDS = ["prof-1", "prof-2", "prof-3"]
EMPLOYER_ID = "emp-1"
OPEN_JOB_OFFER_IDS = [f"offer-{n}" for n in range(1, 7)]
PAUSED_JOB_OFFER_ID = "offer-paused"
EXPIRED_JOB_OFFER_ID = "offer-expired"


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def directory_rows() -> list:
    """Professionals, employers and job offers used across the tests."""
    from app.models import Employer, JobOffer, JobOfferStatus, Professional

    rows = [
        Professional(
            id=professional_id,
            first_name="Test",
            last_name=professional_id,
            email=f"{professional_id}@example.com",
        )
        for professional_id in PROFESSIONAL_IDS
    ]
    rows.append(
        Employer(
            id=EMPLOYER_ID, company_name="Test Company", contact_email="hr@example.com"
        )
    )
    rows.extend(
        JobOffer(
            id=job_offer_id,
            employer_id=EMPLOYER_ID,
            title=f"Python Developer {job_offer_id}",
            status=JobOfferStatus.PUBLISHED.value,
        )
        for job_offer_id in OPEN_JOB_OFFER_IDS
    )
    rows.append(
        JobOffer(
            id=PAUSED_JOB_OFFER_ID,
            employer_id=EMPLOYER_ID,
            title="Paused offer",
            status=JobOfferStatus.PAUSED.value,
        )
    )
    rows.append(
        JobOffer(
            id=EXPIRED_JOB_OFFER_ID,
            employer_id=EMPLOYER_ID,
            title="Expired offer",
            status=JobOfferStatus.PUBLISHED.value,
            application_deadline=datetime(2024, 1, 1),
        )
    )
    return rows


@pytest.fixture
def clock():
    """Clock fixed at 2024-03-05 10:00 UTC."""
    return FixedClock(datetime(2024, 3, 5, 10, 0, tzinfo=UTC))


@pytest.fixture
def db_url(tmp_path):
    """URL of a fresh SQLite database file."""
    return f"sqlite+aiosqlite:///{tmp_path / 'jobmatch.db'}"


@pytest_asyncio.fixture
async def session_factory(db_url):
    """Session factory bound to a seeded, per-test database."""
    from app.core.storage import create_session_factory, init_models

    engine = create_async_engine(db_url, poolclass=NullPool)
    await init_models(engine)

    factory = create_session_factory(engine)
    async with factory() as session:
        session.add_all(directory_rows())
        await session.commit()

    yield factory

    await engine.dispose()


@pytest.fixture
def service(session_factory, clock):
    """ApplicationService wired to the test database."""
    from app.services.application_service import create_application_service

    return create_application_service(session_factory, clock=clock)


@pytest.fixture
def make_draft():
    """Build an ApplicationDraft with sensible defaults."""
    from app.schemas.application import ApplicationDraft

    def _make(professional_id="prof-1", job_offer_id="offer-1", **overrides):
        data = {
            "professional_id": professional_id,
            "job_offer_id": job_offer_id,
            "cover_letter": "I would love to join your backend team.",
            "motivation": "Strong match with my Python experience.",
            "expected_salary": {"amount": 1500000, "currency": "CRC"},
            "additional_skills": ["FastAPI", "PostgreSQL"],
        }
        data.update(overrides)
        return ApplicationDraft(**data)

    return _make


@pytest.fixture
def client(tmp_path, clock):
    """TestClient backed by a seeded SQLite file and a fixed clock."""
    from fastapi.testclient import TestClient
    from sqlalchemy import create_engine
    from sqlalchemy.orm import Session

    from app.core.storage import Base, create_session_factory
    from app.main import app
    from app.routers.applications import get_application_service
    from app.services.application_service import create_application_service

    path = tmp_path / "api.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    with Session(sync_engine) as session:
        session.add_all(directory_rows())
        session.commit()
    sync_engine.dispose()

    engine = create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)
    factory = create_session_factory(engine)

    async def override_service():
        return create_application_service(factory, clock=clock)

    app.dependency_overrides[get_application_service] = override_service
    yield TestClient(app)
    app.dependency_overrides.clear()
