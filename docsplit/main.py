"""
Command-line entry point for splitting a PDF bundle.

    docsplit BUNDLE.pdf [--output-dir DIR] [--window-size N]

Flow: load bundle → classify pages (windowed) → segment → write one PDF
per segment, then print the result as JSON on stdout.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from .app_logging import configure_logging
from .application.commands.split_bundle import SplitBundleCommand, SplitBundleHandler
from .config import get_settings
from .domain.exceptions import BundleReadError, ConfigurationError
from .domain.services.segmentation_engine import SegmentationEngine, SegmentationRules
from .infrastructure.pdf.page_extractor import PageExtractor
from .infrastructure.vision.azure_vision_client import AzureVisionClient

app = typer.Typer(help="Split a multi-document PDF bundle into one PDF per document.")

def build_handler() -> SplitBundleHandler:
    """Wire the production collaborators from settings."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc
    page_extractor = PageExtractor(zoom=settings.page_render_zoom)
    return SplitBundleHandler(
        AzureVisionClient(settings=settings, page_extractor=page_extractor),
        page_extractor=page_extractor,
        engine=SegmentationEngine(SegmentationRules.from_settings(settings)),
        default_window_size=settings.classification_window_size,
    )


@app.command()
def split(
    bundle: Path = typer.Argument(..., help="PDF bundle to split."),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the split files (default: <bundle>-split next to the input).",
    ),
    window_size: Optional[int] = typer.Option(
        None,
        "--window-size",
        "-w",
        min=1,
        help="Pages classified concurrently per window.",
    ),
    plain_logs: bool = typer.Option(False, "--plain-logs", help="Human-readable logs instead of JSON."),
) -> None:
    """Split BUNDLE and print the produced files as JSON."""
    configure_logging(structured=not plain_logs)

    target_dir = output_dir or bundle.parent / f"{bundle.stem}-split"
    try:
        handler = build_handler()
        result = handler.handle(
            SplitBundleCommand(pdf_path=str(bundle), output_dir=str(target_dir), window_size=window_size)
        )
    except BundleReadError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    except ConfigurationError as exc:
        typer.echo(f"configuration error: {exc}", err=True)
        raise typer.Exit(code=2)

    typer.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    app()
