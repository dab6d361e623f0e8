"""
Text Extractors - Plain text and Word documents.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docintake.config.errors import ErrorCode, ProcessingError

from .models import ExtractionMethod, ExtractionResult, IngestionConfig

if TYPE_CHECKING:
    from .contracts import WordTextExtractor

logger = logging.getLogger(__name__)

__all__ = ["extract_plain_text", "WordExtractor"]


def extract_plain_text(data: bytes, config: IngestionConfig | None = None) -> ExtractionResult:
    """
    Decode bytes as UTF-8 text.

    The decoded text is returned unmodified, so feeding a result back in
    yields the same text.

    Raises:
        ProcessingError: EMPTY_FILE when the text is shorter than the floor
    """
    config = config or IngestionConfig()
    text = data.decode("utf-8", errors="replace")
    length = len(text.strip())

    if length < config.min_text_length:
        raise ProcessingError(
            ErrorCode.EMPTY_FILE,
            f"Text file has {length} characters, need {config.min_text_length}",
            details={"char_count": length},
        )

    return ExtractionResult(text=text, extraction_method=ExtractionMethod.NATIVE)


class WordExtractor:
    """Word document extractor with the shared length floor."""

    def __init__(
        self,
        reader: WordTextExtractor,
        config: IngestionConfig | None = None,
    ) -> None:
        self._reader = reader
        self.config = config or IngestionConfig()

    async def extract(self, data: bytes) -> ExtractionResult:
        """
        Extract raw text from a Word document.

        Raises:
            ProcessingError: DOCX_EXTRACTION_FAILED if the document cannot be
                read, EMPTY_DOCUMENT if it holds too little text
        """
        try:
            text = await self._reader.extract_raw_text(data)
        except Exception as e:
            logger.error("DOCX extraction error: %s", e)
            raise ProcessingError(
                ErrorCode.DOCX_EXTRACTION_FAILED,
                f"Failed to extract text from Word document: {e}",
            ) from e

        text = text.strip()
        if len(text) < self.config.min_text_length:
            raise ProcessingError(
                ErrorCode.EMPTY_DOCUMENT,
                f"Word document has {len(text)} characters, need {self.config.min_text_length}",
                details={"char_count": len(text)},
            )

        return ExtractionResult(text=text, extraction_method=ExtractionMethod.NATIVE)
