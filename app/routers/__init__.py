"""API routers."""

from app.routers.applications import router as applications_router
from app.routers.job_offers import router as job_offers_router

__all__ = ["applications_router", "job_offers_router"]
