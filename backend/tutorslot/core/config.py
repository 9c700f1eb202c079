# backend/tutorslot/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import BRAND_NAME

logger = logging.getLogger(__name__)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


_BACKEND_ROOT = Path(__file__).resolve().parents[2]

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = _BACKEND_ROOT / ".env"
    logger.debug(f"[CONFIG] Looking for .env at: {env_path} (exists={env_path.exists()})")
    load_dotenv(env_path)


def _parse_hhmm(value: str) -> int:
    hour, minute = value.split(":")
    return int(hour) * 60 + int(minute)


class Settings(BaseSettings):
    app_name: str = BRAND_NAME
    environment: Literal["development", "production", "test"] = Field(
        default="development", alias="ENVIRONMENT"
    )
    is_testing: bool = False

    # Auth
    secret_key: SecretStr = Field(
        default=SecretStr("dev-secret-key-change-me"),
        description="Secret key for JWT tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720  # 12 hours
    initial_admin_email: Optional[str] = Field(
        default=None,
        alias="INITIAL_ADMIN_EMAIL",
        description="Email allowed to self-register with staff roles",
    )

    # Database
    database_url: str = Field(
        default=f"sqlite:///{_BACKEND_ROOT / 'tutorslot.db'}",
        alias="DATABASE_URL",
    )
    database_echo: bool = False

    # Scheduling
    business_open: str = Field(default="09:00", description="Opening time (HH:mm)")
    business_close: str = Field(default="18:00", description="Closing time (HH:mm)")
    lesson_duration_minutes: int = Field(default=60, ge=1, le=24 * 60)

    # Localization of user-facing error messages
    default_locale: Literal["ja", "en"] = "ja"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("business_open", "business_close")
    @classmethod
    def _validate_hhmm(cls, v: str) -> str:
        try:
            minutes = _parse_hhmm(v)
        except (ValueError, AttributeError):
            raise ValueError(f"Invalid time format: {v}. Expected HH:mm format.")
        if not 0 <= minutes <= 24 * 60:
            raise ValueError(f"Time out of range: {v}")
        return v

    @model_validator(mode="after")
    def _validate_business_hours(self) -> "Settings":
        if _parse_hhmm(self.business_close) <= _parse_hhmm(self.business_open):
            raise ValueError("business_close must be after business_open")
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()

if is_running_tests():
    settings.is_testing = True
