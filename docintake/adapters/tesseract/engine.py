"""
Tesseract Engine - Local OCR with per-word confidence scores.

Wraps pytesseract. Recognition is CPU bound and runs in a worker thread so
the event loop stays responsive while a large image is processed.
"""

from __future__ import annotations

import asyncio
import io
import logging
from typing import Any

import pytesseract
from PIL import Image

from .models import TesseractConfig, TesseractResult

logger = logging.getLogger(__name__)

__all__ = ["TesseractEngine"]


class TesseractEngine:
    """
    Local OCR engine backed by the Tesseract binary.

    Example:
        >>> engine = TesseractEngine()
        >>> result = await engine.recognize(png_bytes)
        >>> print(result.text, result.confidence)
    """

    def __init__(self, config: TesseractConfig | None = None) -> None:
        self.config = config or TesseractConfig()

    def is_available(self) -> bool:
        """Check whether the Tesseract binary can be found."""
        try:
            version = pytesseract.get_tesseract_version()
        except (pytesseract.TesseractNotFoundError, OSError) as e:
            logger.warning("Tesseract not available: %s", e)
            return False
        logger.debug("Tesseract version: %s", version)
        return True

    async def recognize(self, image: bytes, language: str | None = None) -> TesseractResult:
        """
        Recognize text in an image.

        Args:
            image: Encoded image bytes (PNG, JPEG, ...)
            language: Tesseract language hint, defaults to the configured one

        Returns:
            Recognized text and mean word confidence

        Raises:
            PIL.UnidentifiedImageError: bytes are not a decodable image
            pytesseract.TesseractError: engine failure
        """
        return await asyncio.to_thread(
            self._recognize_sync, image, language or self.config.language
        )

    def _recognize_sync(self, image: bytes, language: str) -> TesseractResult:
        with Image.open(io.BytesIO(image)) as img:
            img.load()
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")
            data = pytesseract.image_to_data(
                img,
                lang=language,
                config=f"--psm {self.config.page_segmentation_mode}",
                output_type=pytesseract.Output.DICT,
            )

        text, confidences = _assemble_text(data)
        confidence = sum(confidences) / len(confidences) if confidences else 0.0
        logger.debug(
            "Tesseract recognized %d words, confidence=%.1f", len(confidences), confidence
        )
        return TesseractResult(
            text=text,
            confidence=min(max(confidence, 0.0), 100.0),
            word_count=len(confidences),
        )


def _assemble_text(data: dict[str, list[Any]]) -> tuple[str, list[float]]:
    """Rebuild lines from image_to_data output and collect word confidences."""
    lines: dict[tuple[int, int, int], list[str]] = {}
    confidences: list[float] = []

    for i, word in enumerate(data.get("text", [])):
        word = (word or "").strip()
        if not word:
            continue
        try:
            conf = float(data["conf"][i])
        except (KeyError, IndexError, TypeError, ValueError):
            conf = -1.0
        if conf >= 0:
            confidences.append(conf)

        key = (
            int(data["block_num"][i]),
            int(data["par_num"][i]),
            int(data["line_num"][i]),
        )
        lines.setdefault(key, []).append(word)

    paragraphs: list[str] = []
    current_block: tuple[int, int] | None = None
    for (block, par, _line), words in sorted(lines.items()):
        if current_block is not None and current_block != (block, par):
            paragraphs.append("")
        paragraphs.append(" ".join(words))
        current_block = (block, par)

    return "\n".join(paragraphs).strip(), confidences
