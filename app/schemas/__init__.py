"""Pydantic schemas for request/response validation."""

from app.schemas.application import (
    ApplicationDraft,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationUpdate,
    EligibilityReason,
    EligibilityResponse,
    StatsReport,
)

__all__ = [
    "ApplicationDraft",
    "ApplicationListResponse",
    "ApplicationResponse",
    "ApplicationUpdate",
    "EligibilityReason",
    "EligibilityResponse",
    "StatsReport",
]
