"""
Tesseract Adapter - Local OCR engine.
"""

from .engine import TesseractEngine
from .models import TesseractConfig, TesseractResult

__all__ = [
    "TesseractEngine",
    "TesseractConfig",
    "TesseractResult",
]
