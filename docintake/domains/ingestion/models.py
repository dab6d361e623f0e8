"""
Ingestion Models - Data types for document text extraction.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class DocumentKind(str, Enum):
    """Extractor branch selected for an upload."""

    PDF = "pdf"
    WORD = "word"
    TEXT = "text"
    IMAGE = "image"
    HEIC = "heic"
    UNSUPPORTED = "unsupported"


class ExtractionMethod(str, Enum):
    """Strategy that produced the accepted text."""

    NATIVE = "native"
    TESSERACT = "tesseract"
    CLOUD_VISION = "cloud_vision"
    HYBRID = "hybrid"


class DocumentMetadata(BaseModel):
    """Document info embedded in the source file."""

    page_count: int | None = None
    title: str | None = None
    author: str | None = None


class ExtractionResult(BaseModel):
    """Text recovered from an uploaded document."""

    text: str
    metadata: DocumentMetadata | None = None
    extraction_method: ExtractionMethod = ExtractionMethod.NATIVE
    ocr_confidence: float | None = Field(default=None, ge=0.0, le=100.0)

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("extracted text must not be empty")
        return value

    @property
    def char_count(self) -> int:
        return len(self.text.strip())

    @property
    def used_ocr(self) -> bool:
        return self.extraction_method != ExtractionMethod.NATIVE


class IngestionConfig(BaseModel):
    """Acceptance thresholds and limits for the extraction pipeline."""

    min_text_length: int = Field(default=30, ge=1)
    min_ocr_confidence: float = Field(default=60.0, ge=0.0, le=100.0)
    last_resort_min_length: int = Field(default=10, ge=1)
    pdf_max_ocr_pages: int = Field(default=10, ge=1)
    pdf_render_scale: float = Field(default=2.0, gt=0.0)
    ocr_language: str = "eng"

    model_config = {"frozen": True}
