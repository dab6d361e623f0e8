"""
Image OCR Cascade - Local OCR first, cloud OCR second, weak local text last.

Each tier has its own acceptance bar and the bar only ever drops:

1. local text >= min_text_length AND confidence >= min_ocr_confidence
2. cloud text >= min_text_length (cloud confidence ignored)
3. local text >= last_resort_min_length

Empty text is never reported as success.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docintake.config.errors import ErrorCode, ProcessingError

from .models import ExtractionMethod, ExtractionResult, IngestionConfig

if TYPE_CHECKING:
    from .contracts import CloudOCRService, LocalOCREngine

logger = logging.getLogger(__name__)

__all__ = ["ImageOCRCascade"]


class ImageOCRCascade:
    """
    Best-effort text recovery from a single raster image.

    Example:
        >>> cascade = ImageOCRCascade(TesseractEngine(), CloudVisionClient(config))
        >>> result = await cascade.extract(jpeg_bytes, "image/jpeg")
    """

    def __init__(
        self,
        local_engine: LocalOCREngine,
        cloud_service: CloudOCRService | None = None,
        config: IngestionConfig | None = None,
    ) -> None:
        self._local = local_engine
        self._cloud = cloud_service
        self.config = config or IngestionConfig()

    @property
    def cloud_enabled(self) -> bool:
        return self._cloud is not None and self._cloud.is_configured()

    async def extract(self, image: bytes, mime_type: str = "image/png") -> ExtractionResult:
        """
        Run the OCR tiers until one clears its bar.

        Raises:
            ProcessingError: OCR_FAILED when every tier falls short
        """
        config = self.config
        local_text = ""
        local_confidence = 0.0

        # Tier 1: local OCR
        try:
            local = await self._local.recognize(image, config.ocr_language)
            local_text = (local.text or "").strip()
            local_confidence = float(local.confidence)
            logger.info(
                "Local OCR: %d chars, confidence=%.1f", len(local_text), local_confidence
            )
        except Exception as e:
            logger.warning("Local OCR failed, continuing cascade: %s", e)

        if (
            len(local_text) >= config.min_text_length
            and local_confidence >= config.min_ocr_confidence
        ):
            return ExtractionResult(
                text=local_text,
                extraction_method=ExtractionMethod.TESSERACT,
                ocr_confidence=local_confidence,
            )

        # Tier 2: cloud OCR
        if self.cloud_enabled:
            try:
                cloud = await self._cloud.extract_text(image, mime_type)
                cloud_text = (cloud.text or "").strip()
                logger.info(
                    "Cloud OCR: %d chars, confidence=%.1f", len(cloud_text), cloud.confidence
                )
                if len(cloud_text) >= config.min_text_length:
                    return ExtractionResult(
                        text=cloud_text,
                        extraction_method=ExtractionMethod.CLOUD_VISION,
                        ocr_confidence=float(cloud.confidence),
                    )
            except Exception as e:
                logger.warning("Cloud OCR failed, falling back: %s", e)
        else:
            logger.debug("Cloud OCR not configured, skipping tier")

        # Tier 3: weak local text beats nothing
        if len(local_text) >= config.last_resort_min_length:
            logger.warning(
                "Accepting low-quality local OCR: %d chars, confidence=%.1f",
                len(local_text),
                local_confidence,
            )
            return ExtractionResult(
                text=local_text,
                extraction_method=ExtractionMethod.TESSERACT,
                ocr_confidence=local_confidence,
            )

        raise ProcessingError(
            ErrorCode.OCR_FAILED,
            f"All OCR tiers failed (local text {len(local_text)} chars, "
            f"confidence {local_confidence:.1f})",
            details={
                "local_chars": len(local_text),
                "local_confidence": local_confidence,
                "cloud_enabled": self.cloud_enabled,
            },
        )
