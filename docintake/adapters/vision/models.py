"""
Vision Models - Configuration and result types for Google Cloud Vision.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class VisionConfig(BaseModel):
    """
    Configuration for the Cloud Vision client.

    The API key is resolved once by whoever builds the config; the client
    never reads the environment itself.
    """

    api_key: str | None = Field(default=None)
    endpoint: str = Field(default="https://vision.googleapis.com/v1/images:annotate")
    timeout_seconds: float = Field(default=30.0, gt=0)

    model_config = {"frozen": True}


class VisionOCRResult(BaseModel):
    """Text detected by Cloud Vision with an estimated confidence (0-100)."""

    text: str
    confidence: float = Field(ge=0.0, le=100.0)
    method: str = "google_vision"
