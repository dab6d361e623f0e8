"""
PDF Models - Native text layer result.
"""

from __future__ import annotations

from pydantic import BaseModel


class PdfTextLayer(BaseModel):
    """Text embedded in a PDF plus the document info fields, if any."""

    text: str
    page_count: int = 0
    title: str | None = None
    author: str | None = None
