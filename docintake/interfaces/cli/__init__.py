"""
CLI Interface - Command-line tools for docintake.

Provides commands for:
- Text extraction
- Document analysis
- OCR diagnostics
- Serving the API
"""

from .main import app, main

__all__ = ["app", "main"]
