"""API routes for job offer aggregates."""

import logging

from fastapi import APIRouter, Depends

from app.core.exceptions import ApplicationError, to_http_exception
from app.routers.applications import get_application_service
from app.schemas.application import ApplicationCountResponse
from app.services.application_service import ApplicationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job-offers", tags=["job-offers"])


@router.get("/{job_offer_id}/application-count", response_model=ApplicationCountResponse)
async def get_application_count(
    job_offer_id: str,
    service: ApplicationService = Depends(get_application_service),
):
    """Get the cached application count of a job offer."""
    try:
        count = await service.get_application_count(job_offer_id)
    except ApplicationError as e:
        raise to_http_exception(e)
    return ApplicationCountResponse(job_offer_id=job_offer_id, application_count=count)


@router.post("/{job_offer_id}/reconcile", response_model=ApplicationCountResponse)
async def reconcile_application_count(
    job_offer_id: str,
    service: ApplicationService = Depends(get_application_service),
):
    """Recompute the cached application count from the application records."""
    try:
        count = await service.reconcile_job_offer(job_offer_id)
    except ApplicationError as e:
        logger.error(f"Reconcile of job offer {job_offer_id} failed: {e.message}")
        raise to_http_exception(e)
    return ApplicationCountResponse(job_offer_id=job_offer_id, application_count=count)
