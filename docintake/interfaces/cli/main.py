"""
CLI Main - Typer-based command-line interface.

Usage:
    docintake extract path/to/plan.pdf
    docintake analyze path/to/plan.docx -o analysis.json
    docintake doctor
    docintake serve
"""

from __future__ import annotations

import asyncio
import json
import logging
import mimetypes
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from docintake.config import IntakeError, get_settings, is_processing_error

app = typer.Typer(
    name="docintake",
    help="docintake - Document text extraction and analysis",
    add_completion=False,
)
console = Console()


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Configure logging for every command."""
    level = logging.DEBUG if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _read_upload(path: Path, mime: str | None) -> tuple[bytes, str | None]:
    if not path.exists():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)
    return path.read_bytes(), mime or mimetypes.guess_type(path.name)[0]


def _vision_client(settings):
    """Cloud Vision client the caller must close."""
    from docintake.adapters.vision import CloudVisionClient, VisionConfig

    return CloudVisionClient(
        VisionConfig(
            api_key=settings.google_vision_api_key,
            endpoint=settings.vision_endpoint,
            timeout_seconds=settings.vision_timeout_seconds,
        )
    )


def _print_error(error: IntakeError) -> None:
    """Show a failure the way an end user would see it."""
    if is_processing_error(error):
        lines = [f"[bold]{error.user_message}[/bold]"]
        lines.extend(f"  - {suggestion}" for suggestion in error.suggestions)
        lines.append(f"\n[dim]{error.code.value}: {error.message}[/dim]")
        console.print(Panel("\n".join(lines), title="Could not process file", style="red"))
    else:
        console.print(f"[red]Error:[/red] [{error.code.value}] {error.message}")


@app.command()
def extract(
    path: Path = typer.Argument(..., help="Document to extract (PDF, Word, text, image)"),
    mime: str | None = typer.Option(None, "--mime", "-m", help="Override detected MIME type"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON path"),
    show_text: bool = typer.Option(False, "--text", "-t", help="Print the extracted text"),
) -> None:
    """Extract plain text from a document."""
    data, mime_type = _read_upload(path, mime)
    asyncio.run(_extract_async(path, data, mime_type, output, show_text))


async def _extract_async(
    path: Path,
    data: bytes,
    mime_type: str | None,
    output: Path | None,
    show_text: bool,
) -> None:
    """Async extraction implementation."""
    from docintake.domains.ingestion import DocumentExtractor

    settings = get_settings()
    vision = _vision_client(settings)
    extractor = DocumentExtractor.from_settings(settings, cloud_service=vision)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"Extracting {path.name}...", total=None)
        try:
            result = await extractor.extract(data, mime_type, path.name)
        except IntakeError as e:
            progress.stop()
            _print_error(e)
            raise typer.Exit(1)
        finally:
            await vision.close()

    console.print("\n[green]Extraction Complete[/green]\n")

    table = Table(title="Extraction Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("File", path.name)
    table.add_row("MIME Type", mime_type or "unknown")
    table.add_row("Method", result.extraction_method.value)
    table.add_row("Characters", str(result.char_count))
    if result.used_ocr and result.ocr_confidence is not None:
        table.add_row("OCR Confidence", f"{result.ocr_confidence:.1f}")
    if result.metadata is not None:
        if result.metadata.page_count is not None:
            table.add_row("Pages", str(result.metadata.page_count))
        if result.metadata.title:
            table.add_row("Title", result.metadata.title)
        if result.metadata.author:
            table.add_row("Author", result.metadata.author)

    console.print(table)

    if show_text:
        console.print(Panel(result.text, title=path.name))

    if output:
        output.write_text(json.dumps(result.model_dump(mode="json"), indent=2))
        console.print(f"\n[green]Saved to:[/green] {output}")


@app.command()
def analyze(
    path: Path = typer.Argument(..., help="Document to analyze"),
    mime: str | None = typer.Option(None, "--mime", "-m", help="Override detected MIME type"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON path"),
) -> None:
    """Extract a document and classify it into meals, workouts, routines and events."""
    data, mime_type = _read_upload(path, mime)
    asyncio.run(_analyze_async(path, data, mime_type, output))


async def _analyze_async(
    path: Path,
    data: bytes,
    mime_type: str | None,
    output: Path | None,
) -> None:
    """Async analysis implementation."""
    from docintake.adapters.gemini import GeminiClient, GeminiConfig
    from docintake.domains.analysis import AnalysisConfig, DocumentAnalyzer
    from docintake.domains.ingestion import DocumentExtractor

    settings = get_settings()
    vision = _vision_client(settings)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(f"Extracting {path.name}...", total=None)
        try:
            extraction = await DocumentExtractor.from_settings(
                settings, cloud_service=vision
            ).extract(data, mime_type, path.name)

            progress.update(task, description="Analyzing...")
            gemini = GeminiClient(
                GeminiConfig(
                    model=settings.gemini_model,
                    temperature=settings.gemini_temperature,
                    rate_limit_rpm=settings.gemini_rate_limit_rpm,
                )
            )
            analyzer = DocumentAnalyzer(
                gemini, AnalysisConfig(majority_threshold=settings.category_majority_threshold)
            )
            result = await analyzer.analyze(extraction.text)
        except IntakeError as e:
            progress.stop()
            _print_error(e)
            raise typer.Exit(1)
        finally:
            await vision.close()

    if result is None:
        console.print("[red]Error:[/red] The classifier returned output that could not be used")
        raise typer.Exit(1)

    console.print(
        Panel(
            f"[bold]{result.document_title}[/bold]\n{result.summary}\n\n"
            f"Category: [cyan]{result.primary_category.value}[/cyan]  "
            f"Confidence: {result.confidence:.0f}",
            title="Analysis",
        )
    )

    table = Table(title=f"{result.item_count} Items ({len(result.selected_items)} selected)")
    table.add_column("Type", style="cyan")
    table.add_column("Title")
    table.add_column("Destination", style="dim")
    table.add_column("Confidence", justify="right", style="green")
    for item in result.items:
        table.add_row(
            item.item_type.value,
            item.title,
            item.destination_system,
            f"{item.confidence:.0f}",
        )
    console.print(table)

    if result.clarifying_questions:
        console.print("\n[bold yellow]Clarifying Questions:[/bold yellow]")
        for i, question in enumerate(result.clarifying_questions, 1):
            console.print(f"  {i}. {question}")

    if output:
        output.write_text(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
        console.print(f"\n[green]Saved to:[/green] {output}")


@app.command()
def doctor() -> None:
    """Check which OCR tiers are available."""
    from docintake.adapters.tesseract import TesseractConfig, TesseractEngine

    settings = get_settings()
    local = TesseractEngine(TesseractConfig(language=settings.tesseract_language)).is_available()
    cloud = bool(settings.google_vision_api_key)

    table = Table(title="OCR Tiers")
    table.add_column("Tier", style="cyan")
    table.add_column("Status")
    table.add_column("Notes", style="dim")

    table.add_row(
        "Local (Tesseract)",
        "[green]available[/green]" if local else "[red]missing[/red]",
        f"language={settings.tesseract_language}",
    )
    table.add_row(
        "Cloud (Google Vision)",
        "[green]configured[/green]" if cloud else "[yellow]disabled[/yellow]",
        "" if cloud else "set GOOGLE_VISION_API_KEY to enable",
    )
    console.print(table)

    if not local and not cloud:
        console.print("\n[red]No OCR tier available:[/red] images and scanned PDFs will fail")
        raise typer.Exit(1)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print("\n[green]Starting docintake API server[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "docintake.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from docintake import __version__

    console.print(f"docintake v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
