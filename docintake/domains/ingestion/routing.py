"""
Routing - Pick an extractor branch from the declared MIME type and file name.

The MIME type is caller supplied and untrusted; it only selects a branch.
Rules are checked in order and the first match wins.
"""

from __future__ import annotations

from pathlib import PurePath

from .models import DocumentKind

__all__ = ["detect_document_kind"]

WORD_EXTENSIONS = {".doc", ".docx"}
TEXT_EXTENSIONS = {".txt", ".md", ".csv"}
RASTER_SUBTYPES = {"png", "jpeg", "jpg", "pjpeg", "gif", "webp", "bmp", "x-ms-bmp", "tiff"}
RASTER_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp", ".tif", ".tiff"}
HEIC_EXTENSIONS = {".heic", ".heif"}


def _extension(file_name: str | None) -> str:
    if not file_name:
        return ""
    return PurePath(file_name.strip()).suffix.lower()


def detect_document_kind(mime_type: str | None, file_name: str | None) -> DocumentKind:
    """
    Classify an upload for routing.

    Example:
        >>> detect_document_kind("application/pdf", "plan.pdf")
        <DocumentKind.PDF: 'pdf'>
        >>> detect_document_kind("application/octet-stream", "photo.heic")
        <DocumentKind.HEIC: 'heic'>
    """
    mime = (mime_type or "").strip().lower()
    ext = _extension(file_name)

    if "pdf" in mime or ext == ".pdf":
        return DocumentKind.PDF

    if "word" in mime or ext in WORD_EXTENSIONS:
        return DocumentKind.WORD

    if "text/" in mime or "plain" in mime or ext in TEXT_EXTENSIONS:
        return DocumentKind.TEXT

    # Image MIME signals outrank the file extension
    subtype = mime.split("/", 1)[1].split(";", 1)[0].strip() if mime.startswith("image/") else ""
    if subtype in RASTER_SUBTYPES:
        return DocumentKind.IMAGE
    if "heic" in mime or "heif" in mime:
        return DocumentKind.HEIC

    if ext in RASTER_EXTENSIONS:
        return DocumentKind.IMAGE
    if ext in HEIC_EXTENSIONS:
        return DocumentKind.HEIC

    return DocumentKind.UNSUPPORTED
