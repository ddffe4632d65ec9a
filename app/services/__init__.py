"""Application services."""

from app.services.application_service import (
    ApplicationService,
    create_application_service,
)

__all__ = ["ApplicationService", "create_application_service"]
