"""CLI principal (Typer).

Por qué Typer:
- Opciones tipadas que se mapean 1:1 sobre `AppSettings`.
- La CLI solo presenta: toda la lógica vive en `core.services.registry_pipeline`.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.cloudflare_client import CloudflareModelSource
from adapters.document_writer import FileSystemDocumentSink
from cli import doctor
from cli.ui_components import (
    build_registry_table,
    build_warnings_panel,
    configure_logging,
    describe_settings_error,
    print_banner,
)
from core.config import AppSettings
from core.domain.errors import TaskSchemasError, TransportError
from core.services.registry_pipeline import (
    PipelineHooks,
    PipelineResult,
    generate_registry,
    write_registry,
)

app = typer.Typer(no_args_is_help=True, help="Generate model registry pages from the Workers AI catalog.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
logger = logging.getLogger(__name__)

# Sustituible en tests por una fuente en memoria.
source_factory: Callable[[AppSettings], Any] = CloudflareModelSource


async def _run_pipeline(settings: AppSettings) -> PipelineResult:
    source = source_factory(settings)
    hooks = PipelineHooks(
        schema_progress=lambda done, total: logger.debug("Schemas fetched: %d/%d", done, total),
    )
    async with source:
        return await generate_registry(settings=settings, source=source, hooks=hooks)


@app.command()
def generate(
    output_root: Path | None = typer.Option(
        None,
        "--output-root",
        "-o",
        help="Content directory for generated pages (default: MODEL_DOCS_OUTPUT_ROOT).",
    ),
    filter_experimental: bool = typer.Option(
        False,
        "--filter-experimental",
        help="Skip models tagged `experimental` (default: MODEL_DOCS_FILTER_EXPERIMENTAL).",
    ),
    batch_size: int | None = typer.Option(
        None,
        "--batch-size",
        min=1,
        help="Concurrent schema requests per batch.",
    ),
    task_schemas: Path | None = typer.Option(
        None,
        "--task-schemas",
        exists=True,
        dir_okay=False,
        help="JSON file with schemas keyed by task type (skips the schema API).",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Build the registry but write nothing."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No banner or summary table."),
) -> None:
    """Fetch the model catalog and write one page per model."""

    configure_logging(verbose=verbose)

    overrides: dict[str, Any] = {}
    if output_root is not None:
        overrides["output_root"] = output_root
    if filter_experimental:
        overrides["filter_experimental"] = True
    if batch_size is not None:
        overrides["schema_batch_size"] = batch_size
    if task_schemas is not None:
        overrides["task_schemas_path"] = task_schemas

    try:
        settings = AppSettings(**overrides)
    except ValidationError as exc:
        _console.print(f"[red]Invalid configuration:[/red] {describe_settings_error(exc)}")
        raise typer.Exit(code=2)

    if not quiet:
        print_banner(_console)

    try:
        result = asyncio.run(_run_pipeline(settings))
    except TransportError as exc:
        _console.print(f"[red]Fetch failed:[/red] {exc}")
        raise typer.Exit(code=1)
    except TaskSchemasError as exc:
        _console.print(f"[red]Invalid task schemas:[/red] {exc}")
        raise typer.Exit(code=2)

    if not quiet:
        _console.print(build_registry_table(result.registry))
        if result.warnings:
            _console.print(build_warnings_panel(result.warnings))
        _console.print(f"Task types: {', '.join(result.task_types) or '-'}")

    if dry_run:
        _console.print(f"[yellow]Dry run:[/yellow] {len(result.registry)} documents not written.")
        return

    report = write_registry(
        registry=result.registry,
        output_root=settings.output_root,
        sink=FileSystemDocumentSink(),
    )
    _console.print(f"[green]Wrote {len(report.written)} documents to[/green] {settings.output_root}")
    if not report.ok:
        _console.print(f"[red]{len(report.failures)} documents could not be written.[/red]")
        raise typer.Exit(code=1)


def run() -> None:
    app()
