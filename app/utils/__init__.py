"""Utility functions and classes."""

from app.utils.dates import local_date, month_window, to_naive_utc, utc_now
from app.utils.validators import ValidationResult, validate_application_fields

__all__ = [
    "ValidationResult",
    "local_date",
    "month_window",
    "to_naive_utc",
    "utc_now",
    "validate_application_fields",
]
