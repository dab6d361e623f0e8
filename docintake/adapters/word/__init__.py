"""
Word Adapter - DOCX text extraction via python-docx.
"""

from .reader import DocxReadError, DocxReader

__all__ = ["DocxReader", "DocxReadError"]
