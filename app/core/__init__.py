"""Core application components."""

from app.core.config import settings
from app.core.exceptions import ApplicationError, to_http_exception
from app.core.storage import Base, async_session, init_models

__all__ = [
    "ApplicationError",
    "Base",
    "async_session",
    "init_models",
    "settings",
    "to_http_exception",
]
