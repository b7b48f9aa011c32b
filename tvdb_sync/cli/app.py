"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
from datetime import timedelta
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from tvdb_sync import __version__
from tvdb_sync.api.request_pool import RequestPool
from tvdb_sync.core.sync_task import SeriesSyncTask
from tvdb_sync.exceptions import TvdbSyncError
from tvdb_sync.storage.config_manager import ConfigManager
from tvdb_sync.storage.series_cache import SeriesCache
from tvdb_sync.storage.watermark import WatermarkStore
from tvdb_sync.utils.path import get_config_dir

from .formatters import (
    format_error_with_suggestions,
    print_config,
    print_status_table,
    print_summary_panel,
    print_validation_table,
)
from .progress_manager import ProgressManager

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("tvdb_sync")

app = typer.Typer(
    name="tvdb-sync",
    help=(
        "Keeps a local TheTVDB series metadata cache up to date, downloading only"
        " what changed since the last run."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)

CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """TheTVDB series cache updater"""
    if version:
        console.print(f"[bold]tvdb-sync[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("tvdb_sync").setLevel(log_level)

    if show_config:
        if not CONFIG_FILE.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]tvdb-sync init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        config_manager = ConfigManager(CONFIG_FILE)
        print_config(CONFIG_FILE, config_manager.get_config_as_dict())
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    api_key: str = typer.Argument(..., help="Your TheTVDB API key."),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration without asking."
    ),
):
    """Initialize configuration with a TheTVDB API key."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    config_manager = ConfigManager(CONFIG_FILE)
    config_manager.save_new_config({"api_key": api_key.strip()})
    console.print(f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")
    console.print(
        f"Describe your library in [cyan]{CONFIG_DIR / 'library.json'}[/cyan], then"
        " run [cyan]tvdb-sync run[/cyan]."
    )


@app.command(name="run")
def run_command(
    workers: int | None = typer.Option(
        None,
        "-w",
        "--workers",
        help="Number of series updated simultaneously (default 1).",
    ),
    library: Path | None = typer.Option(  # noqa: B008
        None, "--library", "-l", help="JSON library file to read series ids from."
    ),
    data_path: Path | None = typer.Option(  # noqa: B008
        None, "--data-path", help="Directory holding the series cache."
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide the progress bar."),
):
    """Run one update pass against TheTVDB."""
    cli_options = {
        key: value
        for key, value in {
            "max_workers": workers,
            "library_file": str(library) if library else None,
            "data_path": str(data_path) if data_path else None,
        }.items()
        if value is not None
    }

    async def _run_async():
        config = ConfigManager(CONFIG_FILE).load_config(cli_options)
        async with RequestPool(
            max_connections=max(2, config.max_workers),
            requests_per_second=config.requests_per_second,
            timeout_s=config.request_timeout,
        ) as pool:
            task = SeriesSyncTask.from_config(config, pool)
            with ProgressManager(console, quiet=quiet) as progress:
                return await task.run(progress)

    try:
        stats = asyncio.run(_run_async())
    except TvdbSyncError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    print_summary_panel(stats)


@app.command()
def status():
    """Show the watermark and the state of the series cache."""
    try:
        config = ConfigManager(CONFIG_FILE).load_config()
    except TvdbSyncError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e

    data_path = config.series_data_path
    store = WatermarkStore(
        data_path, min_interval=timedelta(hours=config.update_interval_hours)
    )
    print_status_table(
        watermark=asyncio.run(store.read()),
        age=store.age(),
        throttled=store.is_throttled(),
        cached_series=len(SeriesCache(data_path).list_cached_ids()),
        data_path=data_path,
    )


@app.command()
def reset(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Bypass the confirmation prompt.",
    ),
):
    """Forget the watermark so the next run refreshes every library series."""
    if not force and not typer.confirm(
        "Are you sure you want to reset the update watermark? "
        "The next run will download every series in the library again."
    ):
        console.print("[yellow]Operation cancelled.[/yellow]")
        raise typer.Abort()

    try:
        config = ConfigManager(CONFIG_FILE).load_config()
    except TvdbSyncError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e

    if WatermarkStore(config.series_data_path).clear():
        console.print("[green]✓ Watermark removed.[/green]")
    else:
        console.print("[yellow]No watermark to remove.[/yellow]")


@app.command()
def validate():
    """Validate the current configuration."""
    try:
        config_manager = ConfigManager(CONFIG_FILE)
        config = config_manager.load_config()
        print_validation_table(config)
    except TvdbSyncError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e
