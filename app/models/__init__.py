"""Database models."""

from app.models.application import (
    Application,
    ApplicationPriority,
    ApplicationStatus,
    SalaryCurrency,
)
from app.models.directory import Employer, Professional
from app.models.job_offer import JobOffer, JobOfferStatus

__all__ = [
    "Application",
    "ApplicationPriority",
    "ApplicationStatus",
    "Employer",
    "JobOffer",
    "JobOfferStatus",
    "Professional",
    "SalaryCurrency",
]
