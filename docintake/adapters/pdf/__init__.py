"""
PDF Adapter - PyMuPDF text layer and rasterization.
"""

from .models import PdfTextLayer
from .reader import PdfReadError, PyMuPDFReader

__all__ = [
    "PyMuPDFReader",
    "PdfReadError",
    "PdfTextLayer",
]
