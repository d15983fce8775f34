"""
Application configuration settings.
"""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal, Self


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Check-in API"
    APP_VERSION: str = "0.1.0"
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # API
    API_V1_PREFIX: str = "/v1"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Identity
    # Tokens are issued by the external account service; this service only
    # verifies them. MUST be set in .env - no default for security.
    JWT_SECRET_KEY: str = Field(..., description="JWT signing secret key (required)")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Catalog administration
    ADMIN_TOKEN: str = Field(
        default="",
        description="Admin API token for catalog authoring and clinician reads",
    )

    # Daily check-in
    # The one-per-day rule is evaluated on the calendar date in this zone
    CHECKIN_TIMEZONE: str = "America/Sao_Paulo"
    HISTORY_DEFAULT_LIMIT: int = Field(default=30, ge=1)
    HISTORY_MAX_LIMIT: int = Field(default=100, ge=1)
    SEED_BASELINE_QUIZZES: bool = Field(
        default=False,
        description="Create the baseline daily check-in and initial assessment "
        "quizzes at startup when none exists for a purpose",
    )

    # Sentry Error Tracking
    SENTRY_DSN: str = Field(
        default="",
        description="Sentry DSN for error tracking (leave empty to disable)",
    )
    SENTRY_TRACES_SAMPLE_RATE: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Sentry traces sample rate (0.0-1.0, 0.1 = 10% of transactions)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields from .env not defined in Settings
    )

    @model_validator(mode="after")
    def validate_checkin_timezone(self) -> Self:
        """Reject unknown IANA zone names at startup rather than on first submit."""
        try:
            ZoneInfo(self.CHECKIN_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(
                f"CHECKIN_TIMEZONE must be a valid IANA zone name, "
                f"got {self.CHECKIN_TIMEZONE!r}"
            ) from e
        return self

    @model_validator(mode="after")
    def validate_history_limits(self) -> Self:
        """Validate HISTORY_DEFAULT_LIMIT does not exceed HISTORY_MAX_LIMIT."""
        if self.HISTORY_DEFAULT_LIMIT > self.HISTORY_MAX_LIMIT:
            raise ValueError(
                f"HISTORY_DEFAULT_LIMIT ({self.HISTORY_DEFAULT_LIMIT}) must not "
                f"exceed HISTORY_MAX_LIMIT ({self.HISTORY_MAX_LIMIT})"
            )
        return self


# mypy doesn't understand that pydantic_settings loads required fields from env vars
settings = Settings()  # type: ignore[call-arg]
