"""
PyMuPDF Reader - Native text extraction and page rasterization.

The same class serves both roles the PDF pipeline needs: a text-layer parser
and a per-page rasterizer for OCR fallback.
"""

from __future__ import annotations

import asyncio
import logging

import pymupdf as fitz

from .models import PdfTextLayer

logger = logging.getLogger(__name__)

__all__ = ["PyMuPDFReader", "PdfReadError"]


class PdfReadError(Exception):
    """PDF could not be opened (corrupted, encrypted, not a PDF)."""

    pass


def _open(data: bytes) -> fitz.Document:
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise PdfReadError(f"Not a readable PDF: {e}") from e
    if doc.needs_pass:
        doc.close()
        raise PdfReadError("PDF is password protected")
    if doc.page_count == 0:
        doc.close()
        raise PdfReadError("PDF contains no pages")
    return doc


class PyMuPDFReader:
    """
    PDF text-layer parser and rasterizer backed by PyMuPDF.

    Example:
        >>> reader = PyMuPDFReader()
        >>> layer = await reader.parse(pdf_bytes)
        >>> png = await reader.render_page(pdf_bytes, 0, scale=2.0)
    """

    async def parse(self, data: bytes) -> PdfTextLayer:
        """
        Extract the native text layer and document info.

        Raises:
            PdfReadError: PDF cannot be opened
        """
        return await asyncio.to_thread(self._parse_sync, data)

    async def page_count(self, data: bytes) -> int:
        """Number of pages in the document."""
        return await asyncio.to_thread(self._page_count_sync, data)

    async def render_page(self, data: bytes, page_index: int, scale: float = 2.0) -> bytes:
        """
        Rasterize one page to PNG.

        Args:
            data: PDF bytes
            page_index: Zero-based page number
            scale: Zoom factor relative to 72 DPI
        """
        return await asyncio.to_thread(self._render_page_sync, data, page_index, scale)

    def _parse_sync(self, data: bytes) -> PdfTextLayer:
        with _open(data) as doc:
            pages = [page.get_text("text") for page in doc]
            metadata = doc.metadata or {}
            layer = PdfTextLayer(
                text="\n\n".join(p.strip() for p in pages if p.strip()),
                page_count=doc.page_count,
                title=metadata.get("title") or None,
                author=metadata.get("author") or None,
            )
        logger.debug("Native PDF text: %d pages, %d chars", layer.page_count, len(layer.text))
        return layer

    def _page_count_sync(self, data: bytes) -> int:
        with _open(data) as doc:
            return doc.page_count

    def _render_page_sync(self, data: bytes, page_index: int, scale: float) -> bytes:
        with _open(data) as doc:
            page = doc.load_page(page_index)
            pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
            return pix.tobytes("png")
