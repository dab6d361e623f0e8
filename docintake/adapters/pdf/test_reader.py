"""
Tests for the PyMuPDF reader adapter.
"""

from __future__ import annotations

import io

import pymupdf as fitz
import pytest
from PIL import Image

from .reader import PdfReadError, PyMuPDFReader


def _make_pdf(pages: list[str], title: str = "", author: str = "") -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    doc.set_metadata({"title": title, "author": author})
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def reader() -> PyMuPDFReader:
    return PyMuPDFReader()


async def test_parse_text_and_metadata(reader: PyMuPDFReader) -> None:
    data = _make_pdf(
        ["Week 1 meal plan", "Week 2 workout plan"],
        title="Spring Reset",
        author="Coach Sam",
    )
    layer = await reader.parse(data)

    assert "Week 1 meal plan" in layer.text
    assert "Week 2 workout plan" in layer.text
    assert layer.page_count == 2
    assert layer.title == "Spring Reset"
    assert layer.author == "Coach Sam"


async def test_parse_missing_metadata_is_none(reader: PyMuPDFReader) -> None:
    layer = await reader.parse(_make_pdf(["hello"]))
    assert layer.title is None
    assert layer.author is None


async def test_parse_blank_pdf_has_empty_text(reader: PyMuPDFReader) -> None:
    layer = await reader.parse(_make_pdf(["", ""]))
    assert layer.text == ""
    assert layer.page_count == 2


async def test_parse_corrupt_raises(reader: PyMuPDFReader) -> None:
    with pytest.raises(PdfReadError):
        await reader.parse(b"definitely not a pdf document")


async def test_page_count(reader: PyMuPDFReader) -> None:
    assert await reader.page_count(_make_pdf(["a", "b", "c"])) == 3


async def test_render_page_returns_png(reader: PyMuPDFReader) -> None:
    data = _make_pdf(["Page one"])
    png = await reader.render_page(data, 0, scale=2.0)
    assert png.startswith(b"\x89PNG")


async def test_render_page_scale_changes_size(reader: PyMuPDFReader) -> None:
    data = _make_pdf(["Page one"])
    with Image.open(io.BytesIO(await reader.render_page(data, 0, scale=1.0))) as small:
        small_width = small.width
    with Image.open(io.BytesIO(await reader.render_page(data, 0, scale=2.0))) as large:
        large_width = large.width
    assert large_width == pytest.approx(small_width * 2, abs=2)
