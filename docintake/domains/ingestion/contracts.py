"""
Ingestion Contracts - Capabilities the extraction pipeline depends on.

Adapters in ``docintake.adapters`` satisfy these structurally; tests
substitute mocks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from docintake.adapters.pdf import PdfTextLayer
    from docintake.adapters.tesseract import TesseractResult
    from docintake.adapters.vision import VisionOCRResult


@runtime_checkable
class LocalOCREngine(Protocol):
    """
    Offline OCR engine returning text with a 0-100 confidence.

    Example:
        >>> result = await engine.recognize(png_bytes, language="eng")
    """

    async def recognize(self, image: bytes, language: str | None = None) -> TesseractResult:
        ...


@runtime_checkable
class CloudOCRService(Protocol):
    """Remote OCR service, skipped entirely when not configured."""

    def is_configured(self) -> bool:
        ...

    async def extract_text(self, image: bytes, mime_type: str) -> VisionOCRResult:
        ...


@runtime_checkable
class PdfParser(Protocol):
    """Native text-layer parser; raises on malformed or encrypted input."""

    async def parse(self, data: bytes) -> PdfTextLayer:
        ...


@runtime_checkable
class PdfRasterizer(Protocol):
    """Renders individual PDF pages to PNG images."""

    async def page_count(self, data: bytes) -> int:
        ...

    async def render_page(self, data: bytes, page_index: int, scale: float = 2.0) -> bytes:
        ...


@runtime_checkable
class WordTextExtractor(Protocol):
    """Raw-text extractor for Word documents."""

    async def extract_raw_text(self, data: bytes) -> str:
        ...
