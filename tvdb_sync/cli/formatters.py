"""
Functions for formatting and displaying data in the console using Rich.
"""

from datetime import timedelta
from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tvdb_sync.models.config import SyncConfig
from tvdb_sync.models.stats import SyncStats
from tvdb_sync.utils.formatting import format_duration, format_watermark


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Run `tvdb-sync init <API_KEY>` to create a configuration file.",
            "• Run `tvdb-sync validate` to see which setting is rejected.",
        ],
        "LibraryIndexError": [
            "• Check the `library_file` setting or pass --library.",
            "• The file must be a JSON list of {name, tvdb_id, language} objects.",
        ],
        "FeedError": [
            "• TheTVDB update feed could not be read. Check your connection.",
            "• The watermark was not changed; the next run will retry.",
        ],
        "ProviderTimeoutError": [
            "• A series download timed out, so the pass was aborted.",
            "• The watermark was not changed; the next run will retry.",
            "• Consider raising `request_timeout` or lowering `--workers`.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration, hiding sensitive data."""
    console = Console()
    content = ""
    for key, value in config_data.items():
        if key == "api_key" and value:
            value = "********"
        elif isinstance(value, list):
            value = ", ".join(value)
        content += f"{key} = {value}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_validation_table(config: SyncConfig):
    """Displays a summary of the current settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row(
        "Provider:",
        "[green]✓ Enabled[/green]" if config.provider_enabled else "[yellow]✗ Disabled[/yellow]",
    )
    table.add_row("Base URL:", config.base_url)
    table.add_row("Series Data:", f"[dim]{config.series_data_path}[/dim]")
    table.add_row("Library File:", f"[dim]{config.library_path}[/dim]")
    table.add_row("Default Language:", config.preferred_language)
    table.add_row("Max Workers:", str(config.max_workers))
    table.add_row("Update Interval:", f"{config.update_interval_hours}h")

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_status_table(
    watermark: str,
    age: timedelta | None,
    throttled: bool,
    cached_series: int,
    data_path: Path,
):
    """Displays the state of the local series cache."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column()

    table.add_row("Series Data:", f"[dim]{data_path}[/dim]")
    table.add_row("Watermark:", format_watermark(watermark))
    table.add_row(
        "Last Update:",
        f"{format_duration(age)} ago" if age is not None else "never",
    )
    table.add_row(
        "Next Run:",
        "[yellow]throttled[/yellow]" if throttled else "[green]due[/green]",
    )
    table.add_row("Cached Series:", str(cached_series))

    console.print(Panel(table, title="[bold]Series Cache Status[/bold]", border_style="cyan"))


def print_summary_panel(stats: SyncStats):
    """Displays the final summary of a synchronization pass."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    if stats.outcome != "completed":
        reason = {
            "disabled": "TheTVDB is disabled in the configuration.",
            "throttled": "The last update is more recent than the update interval.",
        }.get(stats.outcome, stats.outcome)
        console.print(
            Panel(
                Text(reason, style="yellow"),
                title="[bold]Nothing To Do[/bold]",
                border_style="yellow",
                expand=False,
            )
        )
        return

    mode = stats.mode.value.replace("_", " ") if stats.mode else "unknown"
    stats_table.add_row("Mode:", f"[cyan]{mode}[/cyan]")
    stats_table.add_row("Planned:", str(stats.planned))
    stats_table.add_row(
        "✓ Updated:", f"[bold green]{len(stats.series_completed)}[/bold green]"
    )
    stats_table.add_row("Fetches:", str(stats.attempts))

    if stats.transient_failures:
        stats_table.add_row(
            "✗ Failed:", f"[bold red]{len(stats.transient_failures)}[/bold red]"
        )
        for series_id, language, error in stats.transient_failures[:5]:
            stats_table.add_row("", f"[dim]{series_id} ({language}): {error}[/dim]")

    stats_table.add_row("", "")  # Spacer
    stats_table.add_row("Watermark:", format_watermark(stats.watermark_after))
    stats_table.add_row(
        "Time Elapsed:", f"[blue]{format_duration(stats.duration_s)}[/blue]"
    )

    console.print()
    console.print(
        Panel(
            stats_table,
            title="📺 [bold]Series Update Complete[/bold]",
            border_style="green" if not stats.transient_failures else "yellow",
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
    console.print()
