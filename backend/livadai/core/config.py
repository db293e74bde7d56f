# backend/livadai/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal, Set

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..services.window_policy import WindowPolicy
from .constants import (
    API_TITLE,
    ATTENDANCE_CLOSES_AFTER_HOURS,
    ATTENDANCE_OPENS_AFTER_MINUTES,
    DISPUTE_CLOSES_AFTER_HOURS,
    DISPUTE_OPENS_AFTER_MINUTES,
    HISTORY_VISIBLE_AFTER_HOURS,
    REVIEW_OPENS_AFTER_HOURS,
    SINGLE_DAY_FALLBACK_HOURS,
)

logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug("[CONFIG] Looking for .env at: %s (exists=%s)", env_path, env_path.exists())
    load_dotenv(env_path)


NON_PROD_SITE_MODES: Set[str] = {"local", "dev", "development", "stg", "staging", "preview"}
PROD_SITE_MODES: Set[str] = {"prod", "production", "live"}

LOG_LEVELS: Set[str] = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _classify_site_mode(raw_site_mode: str | None) -> tuple[str, bool, bool]:
    """Return normalized site mode with production/non-prod classification."""

    normalized = (raw_site_mode or "").strip().lower()
    is_prod = normalized in PROD_SITE_MODES
    is_non_prod = normalized in NON_PROD_SITE_MODES
    return normalized, is_prod, is_non_prod


class Settings(BaseSettings):
    site_mode: str = Field(default="local", description="Deployment mode (local, stg, prod)")
    log_level: str = Field(default="INFO", description="Root log level")
    api_title: str = Field(default=API_TITLE, description="OpenAPI title")
    metrics_enabled: bool = Field(default=True, description="Expose GET /metrics")
    docs_enabled: bool = Field(default=True, description="Serve /docs and /redoc")
    error_media_type: Literal["application/json", "application/problem+json"] = Field(
        default="application/json",
        description="Media type for error envelopes",
    )

    # Booking windows
    dispute_opens_after_minutes: int = Field(default=DISPUTE_OPENS_AFTER_MINUTES, ge=0)
    dispute_closes_after_hours: int = Field(default=DISPUTE_CLOSES_AFTER_HOURS, ge=0)
    attendance_opens_after_minutes: int = Field(default=ATTENDANCE_OPENS_AFTER_MINUTES, ge=0)
    attendance_closes_after_hours: int = Field(default=ATTENDANCE_CLOSES_AFTER_HOURS, ge=0)
    review_opens_after_hours: int = Field(default=REVIEW_OPENS_AFTER_HOURS, ge=0)
    history_visible_after_hours: int = Field(default=HISTORY_VISIBLE_AFTER_HOURS, ge=0)
    single_day_fallback_hours: int = Field(default=SINGLE_DAY_FALLBACK_HOURS, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="LIVADAI_",
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> str:
        if value is None:
            return "INFO"
        normalized = str(value).strip().upper()
        if normalized not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(sorted(LOG_LEVELS))}")
        return normalized

    @field_validator("site_mode", mode="before")
    @classmethod
    def _normalize_site_mode(cls, value: object) -> str:
        normalized, _is_prod, _is_non_prod = _classify_site_mode(
            value if isinstance(value, str) else None
        )
        return normalized or "local"

    @property
    def is_production(self) -> bool:
        _normalized, is_prod, _is_non_prod = _classify_site_mode(self.site_mode)
        return is_prod

    def window_policy(self) -> WindowPolicy:
        """Build the immutable window policy used by the rule services."""

        return WindowPolicy(
            dispute_opens_after_minutes=self.dispute_opens_after_minutes,
            dispute_closes_after_hours=self.dispute_closes_after_hours,
            attendance_opens_after_minutes=self.attendance_opens_after_minutes,
            attendance_closes_after_hours=self.attendance_closes_after_hours,
            review_opens_after_hours=self.review_opens_after_hours,
            history_visible_after_hours=self.history_visible_after_hours,
            single_day_fallback_hours=self.single_day_fallback_hours,
        )


settings = Settings()
