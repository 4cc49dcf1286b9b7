"""
CLI for easy-config.

Commands:
    easy-config get KEY - Print the value of KEY
    easy-config set KEY VALUE - Create or overwrite KEY
    easy-config remove KEY - Delete KEY
    easy-config list - List every item of the module
    easy-config config - Show current configuration
    easy-config version - Print version
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Annotated, Generator, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from easyconfig import __version__
from easyconfig.config import Settings, clear_settings_cache, get_settings
from easyconfig.exceptions import EasyConfigError
from easyconfig.handlers.base import Handler
from easyconfig.logging import setup_logging
from easyconfig.storage import initialize

app = typer.Typer(
    name="easy-config",
    help="Easy Config - module-scoped key/value configuration",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)

ModuleOption = Annotated[
    Optional[str],
    typer.Option("--module", "-m", help="Module namespace (defaults to CONFIG_MODULE)"),
]


def _get_settings_safe() -> Settings | None:
    """Get settings, returning None if configuration is invalid."""
    try:
        clear_settings_cache()
        return get_settings()
    except ValidationError:
        return None


@contextmanager
def _open_handler(module: str | None) -> Generator[Handler, None, None]:
    """Load settings, open a handler and close it afterwards.

    Exits with status 1 on invalid settings or backend failures.
    """
    settings = _get_settings_safe()
    if settings is None:
        error_console.print(
            "[red]Error:[/red] Configuration is invalid. "
            "Run 'easy-config config' to see what's missing."
        )
        raise typer.Exit(1)

    setup_logging(log_level=settings.LOG_LEVEL, log_file=settings.LOG_FILE)

    try:
        handler = initialize(settings.build_storage(), module or settings.CONFIG_MODULE)
    except EasyConfigError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    try:
        yield handler
    except EasyConfigError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    finally:
        handler.close()


@app.command()
def get(
    key: Annotated[str, typer.Argument(help="Key to read")],
    module: ModuleOption = None,
) -> None:
    """Print the value of KEY. Exits with status 1 if it is not set."""
    with _open_handler(module) as handler:
        value = handler.get(key)
    if not value:
        error_console.print(f"[yellow]{key} is not set[/yellow]")
        raise typer.Exit(1)
    console.print(value, markup=False, highlight=False)


@app.command("set")
def set_item(
    key: Annotated[str, typer.Argument(help="Key to write")],
    value: Annotated[str, typer.Argument(help="New value")],
    module: ModuleOption = None,
) -> None:
    """Create or overwrite KEY."""
    with _open_handler(module) as handler:
        handler.set(key, value)
        console.print(f"[green]Set[/green] {handler.module}.{key}")


@app.command()
def remove(
    key: Annotated[str, typer.Argument(help="Key to delete")],
    module: ModuleOption = None,
) -> None:
    """Delete KEY."""
    with _open_handler(module) as handler:
        handler.remove(key)
        console.print(f"[green]Removed[/green] {handler.module}.{key}")


@app.command("list")
def list_items(module: ModuleOption = None) -> None:
    """List every item of the module, ordered by key."""
    with _open_handler(module) as handler:
        items = handler.list()
        title = f"Module {handler.module}"

    table = Table(title=title, show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    for item in items:
        table.add_row(item.key, item.value)
    console.print(table)


@app.command()
def config() -> None:
    """Show current configuration with the database password redacted."""
    console.print()
    console.print("[bold]Easy Config Configuration[/bold]")
    console.print()

    settings = _get_settings_safe()

    if settings is None:
        error_console.print("[red]Configuration is invalid or incomplete.[/red]")
        error_console.print()
        error_console.print("STORAGE_BACKEND must be one of: properties, mysql, sqlite")
        error_console.print("  - mysql requires DB_USER and DB_NAME")
        error_console.print("  - DB_TABLE must be a plain SQL identifier")
        error_console.print()
        error_console.print("Create a .env file or set environment variables.")
        raise typer.Exit(1)

    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.redacted_display().items():
        display_value = str(value) if value is not None else "[dim]not set[/dim]"
        table.add_row(key, display_value)

    console.print(table)
    console.print()


@app.command()
def version() -> None:
    """Print the version number."""
    console.print(f"easy-config version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
