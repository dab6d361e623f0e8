"""
Settings - Application configuration using Pydantic Settings.

Loads from environment variables and .env files.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Cloud OCR (Google Cloud Vision). Unset key disables the cloud tier.
    google_vision_api_key: str | None = None
    vision_endpoint: str = "https://vision.googleapis.com/v1/images:annotate"
    vision_timeout_seconds: float = 30.0

    # Local OCR
    tesseract_language: str = "eng"

    # Acceptance thresholds
    min_text_length: int = 30
    min_ocr_confidence: float = 60.0
    last_resort_min_length: int = 10
    pdf_max_ocr_pages: int = 10
    pdf_render_scale: float = 2.0
    category_majority_threshold: float = 0.6

    # Uploads
    max_upload_bytes: int = 5 * 1024 * 1024

    # Gemini classification oracle (OAuth/ADC)
    gemini_model: str = "gemini-2.0-flash"
    gemini_temperature: float = 0.2
    gemini_rate_limit_rpm: int = 60

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    api_rate_limit_rpm: int = 60

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
