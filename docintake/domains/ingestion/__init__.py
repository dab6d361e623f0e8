"""
Ingestion Domain - Uploaded file to plain text.

This domain handles:
- Routing uploads by declared MIME type and file name
- Plain text and Word document extraction
- PDF text layers with rasterized OCR fallback
- Image OCR cascade (local, cloud, last resort)
"""

from .contracts import (
    CloudOCRService,
    LocalOCREngine,
    PdfParser,
    PdfRasterizer,
    WordTextExtractor,
)
from .models import (
    DocumentKind,
    DocumentMetadata,
    ExtractionMethod,
    ExtractionResult,
    IngestionConfig,
)
from .routing import detect_document_kind
from .text import WordExtractor, extract_plain_text
from .image_ocr import ImageOCRCascade
from .pdf_pipeline import PAGE_SEPARATOR, PdfPipeline
from .orchestrator import DocumentExtractor, extract_text_from_buffer

__all__ = [
    # Contracts
    "LocalOCREngine",
    "CloudOCRService",
    "PdfParser",
    "PdfRasterizer",
    "WordTextExtractor",
    # Models
    "DocumentKind",
    "DocumentMetadata",
    "ExtractionMethod",
    "ExtractionResult",
    "IngestionConfig",
    # Implementations
    "detect_document_kind",
    "extract_plain_text",
    "WordExtractor",
    "ImageOCRCascade",
    "PdfPipeline",
    "PAGE_SEPARATOR",
    "DocumentExtractor",
    "extract_text_from_buffer",
]
