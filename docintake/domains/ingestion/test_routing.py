"""
Tests for upload routing.
"""

from __future__ import annotations

import pytest

from .models import DocumentKind
from .routing import detect_document_kind


@pytest.mark.parametrize(
    ("mime_type", "file_name", "expected"),
    [
        ("application/pdf", "plan.pdf", DocumentKind.PDF),
        ("application/octet-stream", "plan.PDF", DocumentKind.PDF),
        (
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "plan.docx",
            DocumentKind.WORD,
        ),
        ("application/msword", "old.doc", DocumentKind.WORD),
        ("", "notes.docx", DocumentKind.WORD),
        ("text/plain", "notes.txt", DocumentKind.TEXT),
        ("text/markdown", "notes.md", DocumentKind.TEXT),
        (None, "meals.csv", DocumentKind.TEXT),
        ("image/png", "scan.png", DocumentKind.IMAGE),
        ("image/jpeg", "photo.jpg", DocumentKind.IMAGE),
        ("IMAGE/WEBP", None, DocumentKind.IMAGE),
        ("application/octet-stream", "scan.tiff", DocumentKind.IMAGE),
        ("image/heic", "IMG_0001.HEIC", DocumentKind.HEIC),
        ("application/octet-stream", "photo.heif", DocumentKind.HEIC),
        ("image/heic", "IMG_0001.jpg", DocumentKind.HEIC),
        ("image/png", "photo.heic", DocumentKind.IMAGE),
        ("application/zip", "archive.zip", DocumentKind.UNSUPPORTED),
        (None, None, DocumentKind.UNSUPPORTED),
    ],
)
def test_detect_document_kind(mime_type, file_name, expected) -> None:
    """Test each routing rule."""
    assert detect_document_kind(mime_type, file_name) is expected


def test_pdf_mime_wins_over_extension() -> None:
    """Test first matching rule wins."""
    assert detect_document_kind("application/pdf", "notes.txt") is DocumentKind.PDF
    assert detect_document_kind("text/plain", "scan.png") is DocumentKind.TEXT


def test_routing_is_deterministic() -> None:
    """Test same input always routes the same way."""
    pairs = [
        ("application/pdf", "plan.pdf"),
        ("image/heic", "photo.heic"),
        ("application/zip", "archive.zip"),
    ]
    for mime_type, file_name in pairs:
        kinds = {detect_document_kind(mime_type, file_name) for _ in range(5)}
        assert len(kinds) == 1
