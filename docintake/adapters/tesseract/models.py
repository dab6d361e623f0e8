"""
Tesseract Models - Configuration and result types for local OCR.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class TesseractConfig(BaseModel):
    """Configuration for the local Tesseract engine."""

    language: str = Field(default="eng")
    page_segmentation_mode: int = Field(default=3, ge=0, le=13)

    model_config = {"frozen": True}


class TesseractResult(BaseModel):
    """Text recognized by Tesseract with its mean word confidence (0-100)."""

    text: str
    confidence: float = Field(default=0.0, ge=0.0, le=100.0)
    word_count: int = 0
