"""
PDF Pipeline - Native text layer first, rasterized OCR for scanned pages.

Native extraction is cheap and exact when a text layer exists. Scanned or
image-only PDFs fall back to per-page OCR, capped at ``pdf_max_ocr_pages``
pages regardless of document length.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from docintake.config.errors import ErrorCode, ProcessingError

from .models import DocumentMetadata, ExtractionMethod, ExtractionResult, IngestionConfig

if TYPE_CHECKING:
    from .contracts import CloudOCRService, LocalOCREngine, PdfParser, PdfRasterizer

logger = logging.getLogger(__name__)

__all__ = ["PdfPipeline", "PAGE_SEPARATOR"]

PAGE_SEPARATOR = "\n\n---\n\n"


@dataclass
class _PageText:
    index: int
    text: str
    confidence: float
    method: ExtractionMethod


class PdfPipeline:
    """
    Text extraction for PDF uploads.

    Example:
        >>> reader = PyMuPDFReader()
        >>> pipeline = PdfPipeline(reader, reader, TesseractEngine())
        >>> result = await pipeline.extract(pdf_bytes)
    """

    def __init__(
        self,
        parser: PdfParser,
        rasterizer: PdfRasterizer,
        local_engine: LocalOCREngine,
        cloud_service: CloudOCRService | None = None,
        config: IngestionConfig | None = None,
    ) -> None:
        self._parser = parser
        self._rasterizer = rasterizer
        self._local = local_engine
        self._cloud = cloud_service
        self.config = config or IngestionConfig()

    async def extract(self, data: bytes) -> ExtractionResult:
        """
        Extract text from a PDF.

        Raises:
            ProcessingError: PDF_EXTRACTION_FAILED when the file cannot be
                parsed and OCR also fails, PDF_OCR_FAILED when a readable
                PDF has too little text even after OCR
        """
        min_length = self.config.min_text_length
        native_error: Exception | None = None
        metadata: DocumentMetadata | None = None

        try:
            layer = await self._parser.parse(data)
        except Exception as e:
            native_error = e
            logger.warning("Native PDF parse failed, trying OCR: %s", e)
        else:
            metadata = DocumentMetadata(
                page_count=layer.page_count,
                title=layer.title,
                author=layer.author,
            )
            text = layer.text.strip()
            if len(text) >= min_length:
                logger.info("Native PDF text: %d chars, %d pages", len(text), layer.page_count)
                return ExtractionResult(
                    text=text,
                    metadata=metadata,
                    extraction_method=ExtractionMethod.NATIVE,
                )
            logger.info(
                "Native PDF text too short (%d chars), likely scanned; running OCR", len(text)
            )

        try:
            pages, total_pages = await self._ocr_pages(data)
        except Exception as e:
            logger.error("PDF OCR fallback failed: %s", e)
            raise self._failure(native_error, f"PDF OCR fallback failed: {e}") from e

        combined = PAGE_SEPARATOR.join(page.text for page in pages).strip()
        if len(combined) < min_length:
            raise self._failure(
                native_error,
                f"OCR recovered {len(combined)} chars from {len(pages)} pages",
            )

        confidence = sum(page.confidence for page in pages) / len(pages)
        methods = {page.method for page in pages}
        method = methods.pop() if len(methods) == 1 else ExtractionMethod.HYBRID

        if metadata is None:
            metadata = DocumentMetadata(page_count=total_pages)

        logger.info(
            "PDF OCR: %d/%d pages with text, %d chars, confidence=%.1f, method=%s",
            len(pages),
            total_pages,
            len(combined),
            confidence,
            method.value,
        )
        return ExtractionResult(
            text=combined,
            metadata=metadata,
            extraction_method=method,
            ocr_confidence=round(confidence, 2),
        )

    def _failure(self, native_error: Exception | None, message: str) -> ProcessingError:
        if native_error is not None:
            return ProcessingError(
                ErrorCode.PDF_EXTRACTION_FAILED,
                f"Failed to extract text from PDF: {native_error}; {message}",
            )
        return ProcessingError(ErrorCode.PDF_OCR_FAILED, message)

    async def _ocr_pages(self, data: bytes) -> tuple[list[_PageText], int]:
        """OCR up to the page cap; returns pages that yielded text and the page total."""
        total_pages = await self._rasterizer.page_count(data)
        limit = min(total_pages, self.config.pdf_max_ocr_pages)
        if total_pages > limit:
            logger.info("PDF has %d pages, OCR limited to first %d", total_pages, limit)

        pages: list[_PageText] = []
        for index in range(limit):
            try:
                image = await self._rasterizer.render_page(
                    data, index, self.config.pdf_render_scale
                )
            except Exception as e:
                logger.warning("Page %d rasterization failed, skipping: %s", index + 1, e)
                continue

            page = await self._ocr_page(index, image)
            if page is not None:
                pages.append(page)

        return pages, total_pages

    async def _ocr_page(self, index: int, image: bytes) -> _PageText | None:
        try:
            result = await self._local.recognize(image, self.config.ocr_language)
        except Exception as e:
            logger.warning("Local OCR failed on page %d: %s", index + 1, e)
            return await self._cloud_page(index, image)

        text = (result.text or "").strip()
        logger.debug(
            "Page %d local OCR: %d chars, confidence=%.1f", index + 1, len(text), result.confidence
        )
        if not text:
            return None
        return _PageText(index, text, float(result.confidence), ExtractionMethod.TESSERACT)

    async def _cloud_page(self, index: int, image: bytes) -> _PageText | None:
        if self._cloud is None or not self._cloud.is_configured():
            return None
        try:
            result = await self._cloud.extract_text(image, "image/png")
        except Exception as e:
            logger.warning("Cloud OCR failed on page %d, skipping page: %s", index + 1, e)
            return None

        text = (result.text or "").strip()
        if not text:
            return None
        return _PageText(index, text, float(result.confidence), ExtractionMethod.CLOUD_VISION)
