"""
Document Routes - Upload, extract and analyze.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel

from docintake.config import ErrorCode, LLMError, ProcessingError, Settings, get_settings
from docintake.domains.analysis import AnalysisResult, DocumentAnalyzer
from docintake.domains.ingestion import (
    DocumentExtractor,
    DocumentMetadata,
    ExtractionMethod,
    ExtractionResult,
)

from ..deps import get_document_analyzer, get_document_extractor

logger = logging.getLogger(__name__)

router = APIRouter()


class ExtractionResponse(BaseModel):
    """Extraction result response."""

    file_name: str | None
    text: str
    char_count: int
    extraction_method: ExtractionMethod
    ocr_confidence: float | None
    metadata: DocumentMetadata | None

    @classmethod
    def from_result(cls, file_name: str | None, result: ExtractionResult) -> ExtractionResponse:
        return cls(
            file_name=file_name,
            text=result.text,
            char_count=result.char_count,
            extraction_method=result.extraction_method,
            ocr_confidence=result.ocr_confidence,
            metadata=result.metadata,
        )


class AnalysisResponse(BaseModel):
    """Extraction plus validated analysis."""

    extraction: ExtractionResponse
    analysis: AnalysisResult


async def _extract_upload(
    file: UploadFile,
    mime_type: str | None,
    extractor: DocumentExtractor,
    settings: Settings,
) -> ExtractionResponse:
    data = await file.read()
    if len(data) > settings.max_upload_bytes:
        raise ProcessingError(
            ErrorCode.FILE_TOO_LARGE,
            f"{file.filename} is {len(data)} bytes, limit is {settings.max_upload_bytes}",
            details={"size": len(data), "limit": settings.max_upload_bytes},
        )

    result = await extractor.extract(data, mime_type or file.content_type, file.filename)
    return ExtractionResponse.from_result(file.filename, result)


@router.post("/extract", response_model=ExtractionResponse)
async def extract_document(
    file: UploadFile = File(...),
    mime_type: str | None = Form(default=None),
    extractor: DocumentExtractor = Depends(get_document_extractor),
    settings: Settings = Depends(get_settings),
) -> ExtractionResponse:
    """
    Extract plain text from an uploaded document.

    Accepts PDF, Word, plain text and raster images. ``mime_type`` overrides
    the upload's declared content type.
    """
    return await _extract_upload(file, mime_type, extractor, settings)


@router.post("/analyze", response_model=AnalysisResponse, response_model_by_alias=True)
async def analyze_document(
    file: UploadFile = File(...),
    mime_type: str | None = Form(default=None),
    extractor: DocumentExtractor = Depends(get_document_extractor),
    analyzer: DocumentAnalyzer = Depends(get_document_analyzer),
    settings: Settings = Depends(get_settings),
) -> AnalysisResponse:
    """
    Extract text and classify it into importable items.

    Items are serialized with camelCase keys.
    """
    extraction = await _extract_upload(file, mime_type, extractor, settings)

    analysis = await analyzer.analyze(extraction.text)
    if analysis is None:
        raise LLMError(
            "Classifier output failed validation",
            details={"file_name": file.filename},
            code=ErrorCode.ANALYSIS_INVALID_RESPONSE,
        )

    return AnalysisResponse(extraction=extraction, analysis=analysis)
