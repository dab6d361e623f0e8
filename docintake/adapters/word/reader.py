"""
DOCX Reader - Raw text extraction from Word documents via python-docx.
"""

from __future__ import annotations

import asyncio
import io
import logging

from docx import Document

logger = logging.getLogger(__name__)

__all__ = ["DocxReader", "DocxReadError"]


class DocxReadError(Exception):
    """Word document could not be read."""

    pass


class DocxReader:
    """
    Plain-text extractor for .docx files.

    Paragraph text comes first, followed by table cells row by row.
    Legacy binary .doc files are not readable and raise DocxReadError.
    """

    async def extract_raw_text(self, data: bytes) -> str:
        """
        Extract raw text from a Word document.

        Raises:
            DocxReadError: document cannot be opened
        """
        return await asyncio.to_thread(self._extract_sync, data)

    def _extract_sync(self, data: bytes) -> str:
        try:
            document = Document(io.BytesIO(data))
        except Exception as e:
            raise DocxReadError(f"Could not open Word document: {e}") from e

        lines = [p.text for p in document.paragraphs if p.text.strip()]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    lines.append("\t".join(cells))

        logger.debug(
            "DOCX text: %d paragraphs, %d tables",
            len(document.paragraphs),
            len(document.tables),
        )
        return "\n".join(lines)
