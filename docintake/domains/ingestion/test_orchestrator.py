"""
Tests for the document extractor dispatcher.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from docintake.adapters.pdf import PdfTextLayer
from docintake.adapters.tesseract import TesseractResult
from docintake.config.errors import ErrorCode, IntakeError, ProcessingError, is_processing_error

from .models import ExtractionMethod
from .orchestrator import DocumentExtractor, extract_text_from_buffer

TEXT = "Evening routine: phone away at 9, read for 20 minutes, sleep by 10."


@pytest.fixture
def parts() -> dict[str, MagicMock]:
    """Mocked collaborators for a DocumentExtractor."""
    pdf = MagicMock()
    pdf.parse = AsyncMock(return_value=PdfTextLayer(text=TEXT, page_count=1))
    pdf.page_count = AsyncMock(return_value=1)
    pdf.render_page = AsyncMock(return_value=b"png")

    word = MagicMock()
    word.extract_raw_text = AsyncMock(return_value=TEXT)

    local = MagicMock()
    local.recognize = AsyncMock(return_value=TesseractResult(text=TEXT, confidence=91.0))

    return {"pdf": pdf, "word": word, "local": local}


@pytest.fixture
def extractor(parts: dict[str, MagicMock]) -> DocumentExtractor:
    return DocumentExtractor(
        pdf_parser=parts["pdf"],
        pdf_rasterizer=parts["pdf"],
        word_reader=parts["word"],
        local_engine=parts["local"],
    )


async def test_routes_pdf(extractor: DocumentExtractor, parts) -> None:
    result = await extractor.extract(b"%PDF-1.7", "application/pdf", "plan.pdf")
    assert result.extraction_method == ExtractionMethod.NATIVE
    parts["pdf"].parse.assert_awaited_once()


async def test_routes_word(extractor: DocumentExtractor, parts) -> None:
    result = await extractor.extract(b"PK", "application/msword", "plan.doc")
    assert result.text == TEXT
    parts["word"].extract_raw_text.assert_awaited_once_with(b"PK")


async def test_routes_text(extractor: DocumentExtractor) -> None:
    result = await extractor.extract(TEXT.encode(), "text/plain", "notes.txt")
    assert result.text == TEXT


async def test_routes_image(extractor: DocumentExtractor, parts) -> None:
    result = await extractor.extract(b"\x89PNG", "image/png", "scan.png")
    assert result.extraction_method == ExtractionMethod.TESSERACT
    parts["local"].recognize.assert_awaited_once()


async def test_heic_is_never_attempted(extractor: DocumentExtractor, parts) -> None:
    """Test HEIC uploads fail without touching OCR."""
    with pytest.raises(ProcessingError) as exc_info:
        await extractor.extract(b"ftypheic", "image/heic", "IMG_0001.heic")

    assert exc_info.value.code == ErrorCode.UNSUPPORTED_IMAGE_FORMAT
    assert exc_info.value.is_recoverable is True
    parts["local"].recognize.assert_not_called()


async def test_heic_mime_with_raster_extension(extractor: DocumentExtractor, parts) -> None:
    """Test a HEIC MIME type wins over a .jpg file name."""
    with pytest.raises(ProcessingError) as exc_info:
        await extractor.extract(b"ftypheic", "image/heic", "IMG_0001.jpg")

    assert exc_info.value.code == ErrorCode.UNSUPPORTED_IMAGE_FORMAT
    parts["local"].recognize.assert_not_called()


async def test_unsupported_type(extractor: DocumentExtractor) -> None:
    with pytest.raises(ProcessingError) as exc_info:
        await extractor.extract(b"PK\x03\x04", "application/zip", "archive.zip")

    assert exc_info.value.code == ErrorCode.UNSUPPORTED_FILE_TYPE
    assert exc_info.value.details["file_name"] == "archive.zip"


async def test_zero_bytes(extractor: DocumentExtractor) -> None:
    with pytest.raises(ProcessingError) as exc_info:
        await extractor.extract(b"", "application/pdf", "empty.pdf")

    assert exc_info.value.code == ErrorCode.EMPTY_FILE


async def test_untyped_error_wrapped_once(extractor: DocumentExtractor) -> None:
    """Test unexpected exceptions become EXTRACTION_FAILED with the cause kept."""
    extractor.images.extract = AsyncMock(side_effect=KeyError("boom"))

    with pytest.raises(ProcessingError) as exc_info:
        await extractor.extract(b"\x89PNG", "image/png", "scan.png")

    error = exc_info.value
    assert error.code == ErrorCode.EXTRACTION_FAILED
    assert error.is_recoverable is True
    assert len(error.suggestions) == 3
    assert error.details["error_type"] == "KeyError"
    assert isinstance(error.__cause__, KeyError)


async def test_processing_error_not_rewrapped(extractor: DocumentExtractor) -> None:
    """Test typed failures pass through unchanged."""
    original = ProcessingError(ErrorCode.OCR_FAILED, "nothing legible")
    extractor.images.extract = AsyncMock(side_effect=original)

    with pytest.raises(ProcessingError) as exc_info:
        await extractor.extract(b"\x89PNG", "image/png", "scan.png")

    assert exc_info.value is original


@pytest.mark.parametrize(
    ("data", "mime_type", "file_name"),
    [
        (b"", "text/plain", "a.txt"),
        (b"short", "text/plain", "a.txt"),
        (b"x", "image/heif", "a.heif"),
        (b"x", "video/mp4", "a.mp4"),
        (b"%PDF", "application/pdf", "a.pdf"),
    ],
)
async def test_every_failure_is_processing_error(
    extractor: DocumentExtractor, parts, data, mime_type, file_name
) -> None:
    """Test no raw exception escapes the extractor."""
    parts["pdf"].parse = AsyncMock(side_effect=OSError("disk"))
    parts["pdf"].page_count = AsyncMock(side_effect=OSError("disk"))

    with pytest.raises(IntakeError) as exc_info:
        await extractor.extract(data, mime_type, file_name)

    assert is_processing_error(exc_info.value)


async def test_extract_text_from_buffer_uses_given_extractor(
    extractor: DocumentExtractor,
) -> None:
    result = await extract_text_from_buffer(TEXT.encode(), "text/plain", "n.txt", extractor)
    assert result.text == TEXT
