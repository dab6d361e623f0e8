"""
Error Taxonomy - Consistent error codes across the application.

Usage:
    from docintake.config.errors import ErrorCode, ProcessingError

    raise ProcessingError(ErrorCode.OCR_FAILED, "all OCR tiers exhausted")

Every failure that reaches a caller is an ``IntakeError`` subclass. Callers
tell them apart with ``isinstance`` (see ``is_processing_error``) rather than
by probing for attribute names.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Ingestion errors
    EMPTY_FILE = "EMPTY_FILE"
    EMPTY_DOCUMENT = "EMPTY_DOCUMENT"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_FILE_TYPE = "UNSUPPORTED_FILE_TYPE"
    UNSUPPORTED_IMAGE_FORMAT = "UNSUPPORTED_IMAGE_FORMAT"
    OCR_FAILED = "OCR_FAILED"
    PDF_OCR_FAILED = "PDF_OCR_FAILED"
    PDF_EXTRACTION_FAILED = "PDF_EXTRACTION_FAILED"
    DOCX_EXTRACTION_FAILED = "DOCX_EXTRACTION_FAILED"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"

    # Cloud OCR errors
    VISION_NOT_CONFIGURED = "VISION_NOT_CONFIGURED"
    VISION_RATE_LIMITED = "VISION_RATE_LIMITED"
    VISION_FORBIDDEN = "VISION_FORBIDDEN"
    VISION_API_ERROR = "VISION_API_ERROR"
    VISION_PROCESSING_ERROR = "VISION_PROCESSING_ERROR"
    VISION_NO_TEXT_FOUND = "VISION_NO_TEXT_FOUND"
    VISION_NETWORK_ERROR = "VISION_NETWORK_ERROR"

    # Analysis / LLM errors
    ANALYSIS_INVALID_RESPONSE = "ANALYSIS_INVALID_RESPONSE"
    LLM_UNAVAILABLE = "LLM_UNAVAILABLE"
    LLM_RATE_LIMITED = "LLM_RATE_LIMITED"

    # Security errors
    SECURITY_RATE_LIMITED = "SECURITY_RATE_LIMITED"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


_GENERIC_SUGGESTIONS = [
    "Try uploading the file again",
    "Try a different file format (PDF, Word, or a clear image)",
    "Copy and paste the text directly instead",
]

# code -> (user message, recoverable, suggestions)
_PROCESSING_CATALOG: dict[ErrorCode, tuple[str, bool, list[str]]] = {
    ErrorCode.EMPTY_FILE: (
        "This file doesn't contain enough text to work with.",
        False,
        [
            "Check that you picked the right file",
            "Choose a file with more content",
            "Paste the text directly instead",
        ],
    ),
    ErrorCode.EMPTY_DOCUMENT: (
        "This document appears to be empty or has very little text.",
        False,
        [
            "Open the document and make sure it contains text",
            "Choose a different document",
        ],
    ),
    ErrorCode.FILE_TOO_LARGE: (
        "This file is too large to process.",
        True,
        [
            "Upload a file smaller than the size limit",
            "Split the document into smaller parts",
        ],
    ),
    ErrorCode.UNSUPPORTED_FILE_TYPE: (
        "We can't read this type of file yet.",
        True,
        [
            "Upload a PDF, Word document, text file, or image",
            "Export the file to PDF and try again",
            "Copy and paste the text directly instead",
        ],
    ),
    ErrorCode.UNSUPPORTED_IMAGE_FORMAT: (
        "This image format (HEIC/HEIF) isn't supported.",
        True,
        [
            "Take a screenshot of the image and upload that instead",
            "Convert the photo to JPG or PNG",
            "Try a different photo",
        ],
    ),
    ErrorCode.OCR_FAILED: (
        "We couldn't read the text in this image.",
        True,
        [
            "Retake the photo with better lighting",
            "Make sure the text fills the frame and is in focus",
            "Type the content in manually",
        ],
    ),
    ErrorCode.PDF_OCR_FAILED: (
        "This PDF looks scanned and we couldn't read its text.",
        True,
        [
            "Upload screenshots of the pages instead",
            "Try a higher-quality scan",
            "Enter the content manually",
        ],
    ),
    ErrorCode.PDF_EXTRACTION_FAILED: (
        "We couldn't open this PDF. It may be damaged or password-protected.",
        True,
        [
            "Export or save the PDF again and re-upload it",
            "Remove any password protection",
            "Copy and paste the text directly instead",
        ],
    ),
    ErrorCode.DOCX_EXTRACTION_FAILED: (
        "We couldn't read this Word document.",
        True,
        [
            "Save the document as .docx and try again",
            "Export the document to PDF",
            "Copy and paste the text directly instead",
        ],
    ),
    ErrorCode.EXTRACTION_FAILED: (
        "Something went wrong while reading this file.",
        True,
        _GENERIC_SUGGESTIONS,
    ),
}


class IntakeError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class ProcessingError(IntakeError):
    """
    Typed document-processing failure.

    ``message`` is diagnostic and only logged; ``user_message`` and
    ``suggestions`` are what an end user sees. Defaults come from the catalog
    for ``code`` and can be overridden per call site.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        user_message: str | None = None,
        is_recoverable: bool | None = None,
        suggestions: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        default_message, default_recoverable, default_suggestions = _PROCESSING_CATALOG.get(
            code, _PROCESSING_CATALOG[ErrorCode.EXTRACTION_FAILED]
        )
        super().__init__(code, message, details)
        self.user_message = user_message or default_message
        self.is_recoverable = (
            default_recoverable if is_recoverable is None else is_recoverable
        )
        self.suggestions = list(suggestions if suggestions is not None else default_suggestions)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "userMessage": self.user_message,
                "isRecoverable": self.is_recoverable,
                "suggestions": self.suggestions,
            }
        )
        return data


class VisionError(IntakeError):
    """Cloud OCR failure, distinct from document-processing failures."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        is_retryable: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(code, message, details)
        self.is_retryable = is_retryable

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["isRetryable"] = self.is_retryable
        return data


class LLMError(IntakeError):
    """Classification oracle errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.LLM_UNAVAILABLE,
    ) -> None:
        super().__init__(code, message, details)


def is_processing_error(error: object) -> bool:
    """Return True if ``error`` is an already-classified processing failure."""
    return isinstance(error, ProcessingError)
