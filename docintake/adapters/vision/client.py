"""
Cloud Vision Client - Remote OCR via Google Cloud Vision DOCUMENT_TEXT_DETECTION.

Failures are raised as ``VisionError`` with a code and a retryable flag so
callers can tell rate limiting or bad credentials apart from transport
problems. No retries are attempted here.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from docintake.config.errors import ErrorCode, VisionError

from .models import VisionConfig, VisionOCRResult

logger = logging.getLogger(__name__)

__all__ = ["CloudVisionClient"]


class CloudVisionClient:
    """
    Google Cloud Vision OCR client.

    Example:
        >>> client = CloudVisionClient(VisionConfig(api_key="..."))
        >>> if client.is_configured():
        ...     result = await client.extract_text(png_bytes, "image/png")
    """

    def __init__(
        self,
        config: VisionConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize client.

        Args:
            config: Client configuration. Unconfigured (no API key) if None.
            http_client: Optional preconfigured HTTP client
        """
        self.config = config or VisionConfig()
        self._client = http_client

    def is_configured(self) -> bool:
        """Return True when an API key is present."""
        return bool(self.config.api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout_seconds)
        return self._client

    async def extract_text(self, image: bytes, mime_type: str) -> VisionOCRResult:
        """
        Detect document text in an image.

        Args:
            image: Encoded image bytes
            mime_type: Declared image MIME type (informational)

        Returns:
            Detected text and confidence

        Raises:
            VisionError: on any failure, see ErrorCode.VISION_*
        """
        if not self.is_configured():
            raise VisionError(
                ErrorCode.VISION_NOT_CONFIGURED,
                "Cloud Vision API key is not configured",
                is_retryable=False,
            )

        payload = {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image).decode("ascii")},
                    "features": [{"type": "DOCUMENT_TEXT_DETECTION", "maxResults": 1}],
                }
            ]
        }

        client = await self._get_client()
        logger.debug("Cloud Vision request: %d bytes (%s)", len(image), mime_type)

        try:
            response = await client.post(
                self.config.endpoint,
                params={"key": self.config.api_key},
                json=payload,
            )
        except httpx.HTTPError as e:
            logger.error("Cloud Vision transport error: %s", e)
            raise VisionError(
                ErrorCode.VISION_NETWORK_ERROR,
                f"Could not connect to Cloud Vision: {e}",
                is_retryable=True,
            ) from e

        if response.status_code == 429:
            raise VisionError(
                ErrorCode.VISION_RATE_LIMITED,
                "Cloud Vision rate limit exceeded",
                is_retryable=True,
            )
        if response.status_code == 403:
            raise VisionError(
                ErrorCode.VISION_FORBIDDEN,
                "Cloud Vision access denied, check the API key",
                is_retryable=False,
            )
        if response.is_error:
            raise VisionError(
                ErrorCode.VISION_API_ERROR,
                _error_message(response),
                is_retryable=response.status_code >= 500,
                details={"status_code": response.status_code},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise VisionError(
                ErrorCode.VISION_API_ERROR,
                "Cloud Vision returned a non-JSON response",
                is_retryable=True,
            ) from e

        responses = data.get("responses") if isinstance(data, dict) else None
        annotations = (responses or [{}])[0] or {}
        error = annotations.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else None
            raise VisionError(
                ErrorCode.VISION_PROCESSING_ERROR,
                message or "Vision API processing error",
                is_retryable=False,
            )

        text = (annotations.get("fullTextAnnotation") or {}).get("text")
        if not text:
            raise VisionError(
                ErrorCode.VISION_NO_TEXT_FOUND,
                "No text could be detected in this image",
                is_retryable=False,
            )

        confidence = _calculate_confidence(annotations)
        logger.info("Cloud Vision detected %d chars, confidence=%.0f", len(text), confidence)
        return VisionOCRResult(text=text, confidence=confidence)

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = {}
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return f"HTTP {response.status_code}"


def _calculate_confidence(annotations: dict[str, Any]) -> float:
    """Mean block confidence scaled to 0-100."""
    try:
        pages = (annotations.get("fullTextAnnotation") or {}).get("pages") or []
        if not pages:
            return 50.0

        scores = [
            float(block["confidence"])
            for page in pages
            for block in page.get("blocks") or []
            if block.get("confidence") is not None
        ]
        if not scores:
            return 70.0
        return float(min(max(round(sum(scores) / len(scores) * 100), 0), 100))
    except (AttributeError, TypeError, ValueError):
        return 60.0
