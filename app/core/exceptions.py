"""Custom exceptions for the application."""

from fastapi import HTTPException, status


class ApplicationError(Exception):
    """Base exception for application errors.

    Every subclass exposes a stable machine-readable ``kind`` next to the
    human-readable ``message``.
    """

    kind = "ApplicationError"

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Serialize the error for API responses."""
        return {"kind": self.kind, "message": self.message}


class ValidationFailed(ApplicationError):
    """Raised when an application field violates its constraint."""

    kind = "ValidationFailed"

    def __init__(self, field: str, constraint: str, detail: str | None = None):
        self.field = field
        self.constraint = constraint
        super().__init__(detail or f"Field '{field}' violates constraint: {constraint}")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "field": self.field, "constraint": self.constraint}


class IneligibleApplication(ApplicationError):
    """Raised when the professional may not apply to the job offer."""

    kind = "IneligibleApplication"

    def __init__(self, reason: str, message: str | None = None):
        self.reason = reason
        super().__init__(message or f"Application not allowed: {reason}")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "reason": self.reason}


class NotFound(ApplicationError):
    """Raised when a referenced entity does not exist."""

    kind = "NotFound"

    def __init__(self, entity_kind: str, entity_id: str):
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        super().__init__(f"{entity_kind} {entity_id} not found")

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            "entity_kind": self.entity_kind,
            "entity_id": self.entity_id,
        }


class AlreadyReviewed(ApplicationError):
    """Raised when reviewing an application that already left Pending."""

    kind = "AlreadyReviewed"

    def __init__(self, application_id: str):
        self.application_id = application_id
        super().__init__(f"Application {application_id} has already been reviewed")


class CannotModifyReviewed(ApplicationError):
    """Raised when changing fields that are frozen after review."""

    kind = "CannotModifyReviewed"

    def __init__(self, application_id: str):
        self.application_id = application_id
        super().__init__(f"Cannot modify reviewed application {application_id}")


class DuplicateKey(ApplicationError):
    """Raised by the record store when the unique pair index rejects an insert."""

    kind = "DuplicateKey"

    def __init__(self, professional_id: str, job_offer_id: str):
        self.professional_id = professional_id
        self.job_offer_id = job_offer_id
        super().__init__(
            f"Application for professional {professional_id} "
            f"and job offer {job_offer_id} already exists"
        )


class StoreUnavailable(ApplicationError):
    """Raised when the record store fails for a transient reason."""

    kind = "StoreUnavailable"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Storage temporarily unavailable during {operation}")


class JobOfferClosed(ApplicationError):
    """Raised when the job offer is not accepting applications."""

    kind = "JobOfferClosed"

    def __init__(self, job_offer_id: str, reason: str):
        self.job_offer_id = job_offer_id
        self.reason = reason
        super().__init__(f"Job offer {job_offer_id} is not accepting applications: {reason}")


_STATUS_BY_KIND = {
    ValidationFailed.kind: status.HTTP_400_BAD_REQUEST,
    NotFound.kind: status.HTTP_404_NOT_FOUND,
    IneligibleApplication.kind: status.HTTP_409_CONFLICT,
    AlreadyReviewed.kind: status.HTTP_409_CONFLICT,
    CannotModifyReviewed.kind: status.HTTP_409_CONFLICT,
    JobOfferClosed.kind: status.HTTP_409_CONFLICT,
    StoreUnavailable.kind: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http_exception(error: ApplicationError) -> HTTPException:
    """Map a domain error to the HTTP exception returned to clients."""
    return HTTPException(
        status_code=_STATUS_BY_KIND.get(
            error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR
        ),
        detail=error.to_dict(),
    )
