"""
API Dependencies - Dependency injection for FastAPI routes.

Provides singleton instances of the OCR engines, extractor and analyzer.
"""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache

from docintake.adapters.gemini import GeminiClient, GeminiConfig
from docintake.adapters.tesseract import TesseractConfig, TesseractEngine
from docintake.adapters.vision import CloudVisionClient, VisionConfig
from docintake.config import get_settings
from docintake.domains.analysis import AnalysisConfig, DocumentAnalyzer
from docintake.domains.ingestion import DocumentExtractor

logger = logging.getLogger(__name__)


@lru_cache
def get_tesseract_engine() -> TesseractEngine:
    """Get local OCR engine singleton."""
    settings = get_settings()
    return TesseractEngine(TesseractConfig(language=settings.tesseract_language))


@lru_cache
def get_vision_client() -> CloudVisionClient:
    """Get Cloud Vision client singleton."""
    settings = get_settings()
    return CloudVisionClient(
        VisionConfig(
            api_key=settings.google_vision_api_key,
            endpoint=settings.vision_endpoint,
            timeout_seconds=settings.vision_timeout_seconds,
        )
    )


@lru_cache
def get_document_extractor() -> DocumentExtractor:
    """Get document extractor singleton."""
    return DocumentExtractor.from_settings(
        get_settings(),
        local_engine=get_tesseract_engine(),
        cloud_service=get_vision_client(),
    )


@lru_cache
def get_gemini_client() -> GeminiClient:
    """Get Gemini client singleton."""
    settings = get_settings()
    return GeminiClient(
        GeminiConfig(
            model=settings.gemini_model,
            temperature=settings.gemini_temperature,
            rate_limit_rpm=settings.gemini_rate_limit_rpm,
        )
    )


@lru_cache
def get_document_analyzer() -> DocumentAnalyzer:
    """Get document analyzer singleton."""
    settings = get_settings()
    return DocumentAnalyzer(
        get_gemini_client(),
        AnalysisConfig(majority_threshold=settings.category_majority_threshold),
    )


async def ocr_status() -> dict[str, bool]:
    """Report which OCR tiers can run."""
    local = await asyncio.to_thread(get_tesseract_engine().is_available)
    return {"local": local, "cloud": get_vision_client().is_configured()}


async def init_services() -> None:
    """
    Initialize services on startup.

    This should be called from the FastAPI lifespan handler.
    """
    status = await ocr_status()
    if not status["local"]:
        logger.warning("Tesseract not found; image and scanned PDF uploads will rely on cloud OCR")
    if not status["cloud"]:
        logger.info("GOOGLE_VISION_API_KEY not set; cloud OCR tier disabled")


async def cleanup_services() -> None:
    """Cleanup services on shutdown."""
    await get_vision_client().close()
