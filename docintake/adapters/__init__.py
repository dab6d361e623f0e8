"""
Adapters - External service integrations.

All OCR engines, document parsers and LLM calls are wrapped here to isolate
domains from third-party changes.
"""

from .gemini import GeminiClient
from .pdf import PyMuPDFReader
from .tesseract import TesseractEngine
from .vision import CloudVisionClient
from .word import DocxReader

__all__ = [
    "TesseractEngine",
    "CloudVisionClient",
    "PyMuPDFReader",
    "DocxReader",
    "GeminiClient",
]
