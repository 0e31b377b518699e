# backend/tutorly/core/config.py
import logging
import os
from pathlib import Path
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import BRAND_NAME, MAX_BOOKING_DURATION, MIN_BOOKING_DURATION


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug("[CONFIG] Looking for .env at: %s (exists=%s)", env_path, env_path.exists())
    load_dotenv(env_path)


if os.getenv("CI"):
    _DEFAULT_SECRET_KEY: SecretStr | object = SecretStr("ci-test-secret-key-not-for-production")
else:
    _DEFAULT_SECRET_KEY = ...


class Settings(BaseSettings):
    # Use a default secret key for CI/testing environments
    secret_key: SecretStr = Field(
        default=_DEFAULT_SECRET_KEY,
        description="Secret key for JWT tokens",
    )  # type: ignore[assignment]  # required outside CI
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    database_url: str = Field(
        default="sqlite:///./tutorly.db",
        description="SQLAlchemy URL; SQLite for local work, PostgreSQL in production",
    )
    database_echo: bool = False

    environment: str = Field(default="development", description="development|production")
    is_testing: bool = False  # Set to True when running tests
    log_level: str = Field(default="INFO", description="Root log level")

    # Email
    email_provider: Literal["console", "resend"] = Field(
        default="console",
        description="console logs outgoing email, resend delivers it",
    )
    resend_api_key: Optional[str] = Field(default=None, description="Resend API key")
    from_email: str = f"{BRAND_NAME} <hello@tutorly.app>"
    notification_max_attempts: int = Field(default=3, ge=1)
    notification_retry_backoff_seconds: float = Field(default=1.0, ge=0)

    # Frontend / CORS
    frontend_url: str = "http://localhost:3000"
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:3001"]
    )

    # Booking rules
    meeting_link_base: str = Field(
        default="https://meet.jit.si",
        description="Base URL used to generate placeholder meeting links",
    )
    min_booking_duration: int = MIN_BOOKING_DURATION
    max_booking_duration: int = MAX_BOOKING_DURATION

    # Admin stats
    recent_registration_days: int = 30
    top_teachers_limit: int = 5
    popular_subjects_limit: int = 10

    # Bootstrap admin (used by the create-admin command)
    admin_email: str = Field(default="admin@tutorly.app", alias="ADMIN_EMAIL")
    admin_name: str = Field(default="Tutorly Admin", alias="ADMIN_NAME")
    admin_password: Optional[str] = Field(default=None, alias="ADMIN_PASSWORD")

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,  # allows SECRET_KEY to match secret_key
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip().startswith("["):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("email_provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
logger.info(
    "[CONFIG] environment=%s email_provider=%s sqlite=%s",
    settings.environment,
    settings.email_provider,
    settings.is_sqlite,
)
