"""JobMatch - application lifecycle and eligibility service."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.storage import init_models
from app.routers import applications_router, job_offers_router

log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Initializing application...")
    await init_models()
    logger.info("Application initialized")

    yield

    logger.info("Shutdown complete")


app = FastAPI(
    title="JobMatch",
    description="Job application lifecycle and eligibility service",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(applications_router)
app.include_router(job_offers_router)


@app.get("/api")
async def api_info():
    """API information endpoint."""
    return {
        "message": "JobMatch API",
        "version": "1.0.0",
        "docs": "/docs",
        "status": "active",
        "monthly_application_limit": settings.monthly_application_limit,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "jobmatch"}
