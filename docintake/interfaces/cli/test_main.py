"""Tests for CLI commands."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

from docintake import __version__
from docintake.config import Settings

from .main import app

runner = CliRunner()

PLAN = "Morning routine: glass of water, ten minutes of stretching, journal."


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_extract_text_file(tmp_path: Path) -> None:
    """Test extracting a local text file and saving JSON."""
    source = tmp_path / "routine.txt"
    source.write_text(PLAN)
    output = tmp_path / "out.json"

    result = runner.invoke(app, ["extract", str(source), "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert "native" in result.output
    assert PLAN in output.read_text()


def test_extract_closes_vision_client(tmp_path: Path) -> None:
    """Test the cloud OCR HTTP client is closed after the run, even on failure."""
    good = tmp_path / "routine.txt"
    good.write_text(PLAN)
    bad = tmp_path / "empty.txt"
    bad.write_text("hi")

    with patch(
        "docintake.adapters.vision.CloudVisionClient.close", new_callable=AsyncMock
    ) as close:
        assert runner.invoke(app, ["extract", str(good)]).exit_code == 0
        assert runner.invoke(app, ["extract", str(bad)]).exit_code == 1

    assert close.await_count == 2


def test_extract_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["extract", str(tmp_path / "nope.pdf")])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_extract_unsupported_shows_suggestions(tmp_path: Path) -> None:
    """Test processing errors print the user message and suggestions."""
    source = tmp_path / "archive.zip"
    source.write_bytes(b"PK\x03\x04 not really a zip")

    result = runner.invoke(app, ["extract", str(source)])

    assert result.exit_code == 1
    assert "UNSUPPORTED_FILE_TYPE" in result.output
    assert "Export the file to PDF" in result.output


def test_doctor_without_any_ocr() -> None:
    settings = Settings(google_vision_api_key=None)
    with (
        patch("docintake.interfaces.cli.main.get_settings", return_value=settings),
        patch("docintake.adapters.tesseract.TesseractEngine.is_available", return_value=False),
    ):
        result = runner.invoke(app, ["doctor"])

    assert result.exit_code == 1
    assert "GOOGLE_VISION_API_KEY" in result.output
