"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

import logging
from typing import Mapping

from pydantic import ValidationError
from rich.align import Align
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from adapters.front_matter import parse_front_matter
from core.domain.models import RegistryWarning


def configure_logging(*, verbose: bool = False, console: Console | None = None) -> None:
    """Diagnósticos (warnings, ficheros escritos) a stderr vía Rich."""

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # httpx registra cada request a INFO; solo lo queremos en modo verbose.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("model-docs", style="bold cyan")
    subtitle = Text("Model catalog • JSON schemas • Front matter", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_registry_table(registry: Mapping[str, str]) -> Table:
    """Una fila por documento generado."""

    table = Table(title="Model Registry")
    table.add_column("File", style="cyan", no_wrap=True)
    table.add_column("Model", style="white")
    table.add_column("Task type", style="magenta")
    table.add_column("Weight", style="green", justify="right")

    for filename in sorted(registry):
        front = parse_front_matter(registry[filename])
        model = front.get("model") or {}
        table.add_row(
            filename,
            str(model.get("name", "")),
            str(front.get("task_type", "")),
            str(front.get("weight", "")),
        )
    return table


def build_warnings_panel(warnings: list[RegistryWarning]) -> Panel:
    body = Text()
    for warning in warnings:
        body.append(f"[{warning.kind.value}] ", style="bold yellow")
        body.append(f"{warning.message}\n")
    return Panel(body, title=Text("Warnings", style="bold yellow"), border_style="yellow")


def describe_settings_error(exc: ValidationError) -> str:
    """Lista compacta de campos de configuración inválidos o ausentes."""

    fields = []
    for err in exc.errors():
        loc = err.get("loc") or ("?",)
        fields.append(f"{loc[0]} ({err.get('msg', 'invalid')})")
    return ", ".join(fields)
