"""
Document Extractor - Top-level dispatcher for uploaded files.

Routes an upload to the matching extractor, lets typed ProcessingErrors
through untouched and wraps anything else exactly once as EXTRACTION_FAILED.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from docintake.config.errors import ErrorCode, ProcessingError

from .image_ocr import ImageOCRCascade
from .models import DocumentKind, ExtractionResult, IngestionConfig
from .pdf_pipeline import PdfPipeline
from .routing import detect_document_kind
from .text import WordExtractor, extract_plain_text

if TYPE_CHECKING:
    from .contracts import (
        CloudOCRService,
        LocalOCREngine,
        PdfParser,
        PdfRasterizer,
        WordTextExtractor,
    )

logger = logging.getLogger(__name__)

__all__ = ["DocumentExtractor", "extract_text_from_buffer"]


class DocumentExtractor:
    """
    Extract plain text from an upload of unknown format.

    Example:
        >>> extractor = DocumentExtractor.from_settings(get_settings())
        >>> result = await extractor.extract(data, "application/pdf", "plan.pdf")
        >>> result.extraction_method
        <ExtractionMethod.NATIVE: 'native'>
    """

    def __init__(
        self,
        pdf_parser: PdfParser,
        pdf_rasterizer: PdfRasterizer,
        word_reader: WordTextExtractor,
        local_engine: LocalOCREngine,
        cloud_service: CloudOCRService | None = None,
        config: IngestionConfig | None = None,
    ) -> None:
        """
        Initialize extractor.

        Args:
            pdf_parser: Native PDF text-layer parser
            pdf_rasterizer: PDF page renderer for OCR fallback
            word_reader: Word raw-text extractor
            local_engine: Local OCR engine
            cloud_service: Optional cloud OCR service
            config: Thresholds, defaults if None
        """
        self.config = config or IngestionConfig()
        self.images = ImageOCRCascade(local_engine, cloud_service, self.config)
        self.pdfs = PdfPipeline(
            pdf_parser, pdf_rasterizer, local_engine, cloud_service, self.config
        )
        self.word = WordExtractor(word_reader, self.config)

    @classmethod
    def from_settings(
        cls,
        settings,
        local_engine: LocalOCREngine | None = None,
        cloud_service: CloudOCRService | None = None,
    ) -> DocumentExtractor:
        """
        Build an extractor wired to the real adapters.

        Engines passed in are used as-is; missing ones are built from settings.
        """
        from docintake.adapters.pdf import PyMuPDFReader
        from docintake.adapters.tesseract import TesseractConfig, TesseractEngine
        from docintake.adapters.vision import CloudVisionClient, VisionConfig
        from docintake.adapters.word import DocxReader

        if local_engine is None:
            local_engine = TesseractEngine(TesseractConfig(language=settings.tesseract_language))
        if cloud_service is None:
            cloud_service = CloudVisionClient(
                VisionConfig(
                    api_key=settings.google_vision_api_key,
                    endpoint=settings.vision_endpoint,
                    timeout_seconds=settings.vision_timeout_seconds,
                )
            )

        pdf_reader = PyMuPDFReader()
        return cls(
            pdf_parser=pdf_reader,
            pdf_rasterizer=pdf_reader,
            word_reader=DocxReader(),
            local_engine=local_engine,
            cloud_service=cloud_service,
            config=IngestionConfig(
                min_text_length=settings.min_text_length,
                min_ocr_confidence=settings.min_ocr_confidence,
                last_resort_min_length=settings.last_resort_min_length,
                pdf_max_ocr_pages=settings.pdf_max_ocr_pages,
                pdf_render_scale=settings.pdf_render_scale,
                ocr_language=settings.tesseract_language,
            ),
        )

    async def extract(
        self,
        data: bytes,
        mime_type: str | None,
        file_name: str | None,
    ) -> ExtractionResult:
        """
        Extract text from an uploaded file.

        Args:
            data: Raw file bytes
            mime_type: Declared MIME type (untrusted, routing only)
            file_name: Original file name (extension routing, messages)

        Returns:
            Extraction result

        Raises:
            ProcessingError: every failure, never a raw exception
        """
        start_time = time.time()
        kind = detect_document_kind(mime_type, file_name)
        logger.info(
            "Extracting %s (%s, %d bytes) as %s",
            file_name or "<unnamed>",
            mime_type or "unknown type",
            len(data),
            kind.value,
        )

        try:
            result = await self._dispatch(kind, data, mime_type, file_name)
        except ProcessingError as e:
            logger.warning(
                "Extraction failed for %s: %s (%s) after %.0fms",
                file_name,
                e.code.value,
                e.message,
                (time.time() - start_time) * 1000,
            )
            raise
        except Exception as e:
            logger.exception("Unexpected extraction error for %s", file_name)
            raise ProcessingError(
                ErrorCode.EXTRACTION_FAILED,
                f"Unexpected error extracting {file_name}: {e}",
                details={"error_type": type(e).__name__, "error": str(e)},
            ) from e

        logger.info(
            "Extracted %s: method=%s, %d chars in %.0fms",
            file_name or "<unnamed>",
            result.extraction_method.value,
            result.char_count,
            (time.time() - start_time) * 1000,
        )
        return result

    async def _dispatch(
        self,
        kind: DocumentKind,
        data: bytes,
        mime_type: str | None,
        file_name: str | None,
    ) -> ExtractionResult:
        if not data:
            raise ProcessingError(ErrorCode.EMPTY_FILE, "Uploaded file is empty (0 bytes)")

        if kind == DocumentKind.PDF:
            return await self.pdfs.extract(data)
        if kind == DocumentKind.WORD:
            return await self.word.extract(data)
        if kind == DocumentKind.TEXT:
            return extract_plain_text(data, self.config)
        if kind == DocumentKind.IMAGE:
            return await self.images.extract(data, mime_type or "image/png")
        if kind == DocumentKind.HEIC:
            raise ProcessingError(
                ErrorCode.UNSUPPORTED_IMAGE_FORMAT,
                f"HEIC/HEIF images are not supported: {file_name} ({mime_type})",
            )
        raise ProcessingError(
            ErrorCode.UNSUPPORTED_FILE_TYPE,
            f"Unsupported file type: {mime_type} ({file_name})",
            details={"mime_type": mime_type, "file_name": file_name},
        )


async def extract_text_from_buffer(
    data: bytes,
    mime_type: str | None,
    file_name: str | None,
    extractor: DocumentExtractor | None = None,
) -> ExtractionResult:
    """Extract text with the given extractor, or one built from settings."""
    if extractor is None:
        from docintake.config import get_settings

        extractor = DocumentExtractor.from_settings(get_settings())
    return await extractor.extract(data, mime_type, file_name)
