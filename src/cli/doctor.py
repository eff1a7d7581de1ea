"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from adapters.cloudflare_client import CloudflareModelSource
from cli.ui_components import describe_settings_error
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import TransportError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with CloudflareModelSource(settings) as source:
            models = await source.fetch_models()
        return True, f"{len(models)} models visible"
    except TransportError as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    table = Table(title="model-docs Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    try:
        settings = AppSettings()
    except ValidationError as exc:
        table.add_row("Config", "FAIL", f"Invalid or missing: {describe_settings_error(exc)}")
        _console.print(table)
        _console.print("\n[yellow]Hint:[/yellow] run `doctor configure` or set MODEL_DOCS_* env vars.")
        raise typer.Exit(code=2)

    table.add_row("Account", "OK", settings.account_id)
    table.add_row("API base_url", "OK", settings.api_base_url)
    table.add_row("Output root", "OK" if settings.output_root.is_dir() else "MISSING", str(settings.output_root))
    table.add_row(
        "Schemas",
        "OK",
        f"task file {settings.task_schemas_path}" if settings.task_schemas_path else f"API, batches of {settings.schema_batch_size}",
    )

    ok_api, detail_api = asyncio.run(_check_api(settings))
    table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)
    if not ok_api:
        raise typer.Exit(code=1)


@app.command()
def configure() -> None:
    """Interactive setup (stores credentials in the user config .env)."""

    account_id = typer.prompt("Account ID").strip()
    auth_token = typer.prompt("API token", hide_input=True, confirmation_prompt=False).strip()
    output_root = typer.prompt("Output root directory", default="", show_default=False).strip()

    if not account_id or not auth_token:
        raise typer.BadParameter("account id and token are required")

    values = {
        "MODEL_DOCS_ACCOUNT_ID": account_id,
        "MODEL_DOCS_AUTH_TOKEN": auth_token,
    }
    if output_root:
        values["MODEL_DOCS_OUTPUT_ROOT"] = output_root

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved config to:[/green] {env_path}")
