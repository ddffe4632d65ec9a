"""API routes for job applications."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from app.core.config import settings
from app.core.exceptions import ApplicationError, to_http_exception
from app.models.application import (
    Application,
    ApplicationPriority,
    ApplicationStatus,
)
from app.schemas.application import (
    ApplicationDraft,
    ApplicationFilters,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationUpdate,
    BulkCreateRequest,
    BulkCreateResult,
    EligibilityResponse,
    Pagination,
    PriorityRequest,
    ReviewRequest,
    StatsReport,
)
from app.services.application_service import (
    ApplicationService,
    create_application_service,
)

router = APIRouter(prefix="/applications", tags=["applications"])


async def get_application_service() -> ApplicationService:
    """Create application service with dependencies."""
    return create_application_service()


def _page_response(
    applications: list[Application], total: int, page: int, page_size: int
) -> ApplicationListResponse:
    return ApplicationListResponse(
        applications=[ApplicationResponse.from_model(a) for a in applications],
        pagination=Pagination.build(page, page_size, total),
    )


PageQuery = Query(default=1, ge=1, description="Page number, starting at 1")
PageSizeQuery = Query(
    default=settings.default_page_size, ge=1, le=settings.max_page_size
)


@router.get("/", response_model=ApplicationListResponse)
async def list_applications(
    status_filter: ApplicationStatus | None = Query(default=None, alias="status"),
    priority: ApplicationPriority | None = None,
    professional_id: str | None = None,
    job_offer_id: str | None = None,
    applied_from: datetime | None = None,
    applied_to: datetime | None = None,
    sort_by: str = Query(
        default="applied_at", pattern="^(applied_at|reviewed_at|priority|status)$"
    ),
    sort_order: str = Query(default="desc", pattern="^(asc|desc)$"),
    page: int = PageQuery,
    page_size: int = PageSizeQuery,
    service: ApplicationService = Depends(get_application_service),
):
    """List active applications with optional filters."""
    filters = ApplicationFilters(
        status=status_filter,
        priority=priority,
        professional_id=professional_id,
        job_offer_id=job_offer_id,
        applied_from=applied_from,
        applied_to=applied_to,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    try:
        applications, total = await service.list_applications(filters, page, page_size)
    except ApplicationError as e:
        raise to_http_exception(e)
    return _page_response(applications, total, page, page_size)


@router.post(
    "/", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED
)
async def create_application(
    draft: ApplicationDraft,
    service: ApplicationService = Depends(get_application_service),
):
    """Create a new application."""
    try:
        application = await service.create_application(draft)
    except ApplicationError as e:
        raise to_http_exception(e)
    return ApplicationResponse.from_model(application)


@router.post("/bulk", response_model=list[BulkCreateResult])
async def bulk_create_applications(
    request: BulkCreateRequest,
    service: ApplicationService = Depends(get_application_service),
):
    """Create applications from a parsed upload, one record at a time."""
    return await service.bulk_create(request.drafts)


@router.get("/stats", response_model=StatsReport)
async def get_stats(
    service: ApplicationService = Depends(get_application_service),
):
    """Get application statistics."""
    try:
        return await service.get_stats()
    except ApplicationError as e:
        raise to_http_exception(e)


@router.get(
    "/check-eligibility/{professional_id}/{job_offer_id}",
    response_model=EligibilityResponse,
)
async def check_eligibility(
    professional_id: str,
    job_offer_id: str,
    service: ApplicationService = Depends(get_application_service),
):
    """Check whether a professional can apply to a job offer."""
    try:
        return await service.check_eligibility(professional_id, job_offer_id)
    except ApplicationError as e:
        raise to_http_exception(e)


@router.get("/professional/{professional_id}", response_model=ApplicationListResponse)
async def list_by_professional(
    professional_id: str,
    status_filter: ApplicationStatus | None = Query(default=None, alias="status"),
    page: int = PageQuery,
    page_size: int = PageSizeQuery,
    service: ApplicationService = Depends(get_application_service),
):
    """List applications submitted by a professional."""
    try:
        applications, total = await service.list_by_professional(
            professional_id, status_filter, page, page_size
        )
    except ApplicationError as e:
        raise to_http_exception(e)
    return _page_response(applications, total, page, page_size)


@router.get("/job-offer/{job_offer_id}", response_model=ApplicationListResponse)
async def list_by_job_offer(
    job_offer_id: str,
    status_filter: ApplicationStatus | None = Query(default=None, alias="status"),
    page: int = PageQuery,
    page_size: int = PageSizeQuery,
    service: ApplicationService = Depends(get_application_service),
):
    """List applications received by a job offer."""
    try:
        applications, total = await service.list_by_job_offer(
            job_offer_id, status_filter, page, page_size
        )
    except ApplicationError as e:
        raise to_http_exception(e)
    return _page_response(applications, total, page, page_size)


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: str,
    service: ApplicationService = Depends(get_application_service),
):
    """Get a single application."""
    try:
        application = await service.get_application(application_id)
    except ApplicationError as e:
        raise to_http_exception(e)
    return ApplicationResponse.from_model(application)


@router.put("/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: str,
    patch: ApplicationUpdate,
    service: ApplicationService = Depends(get_application_service),
):
    """Update an application; reviewed ones only accept priority and notes."""
    try:
        application = await service.update_application(application_id, patch)
    except ApplicationError as e:
        raise to_http_exception(e)
    return ApplicationResponse.from_model(application)


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_application(
    application_id: str,
    service: ApplicationService = Depends(get_application_service),
):
    """Soft-delete a pending application."""
    try:
        await service.soft_delete_application(application_id)
    except ApplicationError as e:
        raise to_http_exception(e)


@router.post("/{application_id}/review", response_model=ApplicationResponse)
async def review_application(
    application_id: str,
    request: ReviewRequest,
    service: ApplicationService = Depends(get_application_service),
):
    """Accept or reject a pending application."""
    try:
        application = await service.review_application(
            application_id,
            request.status,
            reviewer_id=request.reviewer_id,
            notes=request.notes,
        )
    except ApplicationError as e:
        raise to_http_exception(e)
    return ApplicationResponse.from_model(application)


@router.post("/{application_id}/priority", response_model=ApplicationResponse)
async def set_priority(
    application_id: str,
    request: PriorityRequest,
    service: ApplicationService = Depends(get_application_service),
):
    """Set application priority."""
    try:
        application = await service.set_priority(application_id, request.priority)
    except ApplicationError as e:
        raise to_http_exception(e)
    return ApplicationResponse.from_model(application)
