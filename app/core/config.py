"""Application configuration management."""

from pydantic import AnyUrl, ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: AnyUrl
    database_echo: bool = False

    # Eligibility
    monthly_application_limit: int = Field(
        default=3,
        ge=1,
        description="Applications a professional may submit per calendar month",
    )
    quota_timezone: str = Field(
        default="UTC",
        description="Reference timezone for the monthly quota window",
    )

    # Application content
    max_additional_skills: int = Field(default=10, ge=0, le=50)

    # Aggregate reconciliation
    reconcile_max_attempts: int = Field(default=3, ge=2, le=10)
    reconcile_backoff_seconds: float = Field(default=0.1, ge=0)

    # Pagination
    default_page_size: int = Field(default=10, ge=1, le=100)
    max_page_size: int = Field(default=100, ge=1, le=500)

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
