# backend/integrity/config.py
from __future__ import annotations
import logging
from pydantic_settings import BaseSettings
from pydantic import Field
from dotenv import load_dotenv

# Load .env before reading settings
load_dotenv()

logger = logging.getLogger("integrity.config")


class Settings(BaseSettings):
    # Remote detection service
    detection_api_url: str = Field("http://localhost:8000")
    detection_timeout: float | None = Field(None)  # None = wait for the service
    check_threshold_high: float = Field(0.85, ge=0.0, le=1.0)
    check_threshold_medium: float = Field(0.7, ge=0.0, le=1.0)

    # Session / history
    history_capacity: int = Field(50, ge=1)
    min_text_length: int = Field(10, ge=1)

    # Reporting
    highlight_threshold: float = Field(0.5, ge=0.0, le=1.0)
    risk_low_threshold: float = Field(80.0)
    risk_medium_threshold: float = Field(50.0)
    flag_review_threshold: float = Field(70.0)
    trend_window: int = Field(7, ge=1)
    trend_label_length: int = Field(8, ge=1)
    preview_length: int = Field(2000, ge=1)

    # API
    cors_origins: str = Field("*")
    log_level: str = Field("INFO")

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Instantiate settings once
settings = Settings()

logger.info(f"Detection service configured at {settings.detection_api_url}")
