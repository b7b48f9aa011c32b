"""
Renders the numeric progress signal of a synchronization pass as a Rich progress bar.
"""

import logging

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

log = logging.getLogger("tvdb_sync")


class ProgressManager:
    """
    A progress sink for `SeriesSyncTask.run`: call the instance with a percentage.
    Values lower than the last one seen are ignored so the bar never moves back.
    """

    def __init__(self, console: Console, quiet: bool = False):
        self.console = console
        self.quiet = quiet
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            TimeElapsedColumn(),
            console=console,
            transient=False,
        )
        self._task_id: TaskID | None = None
        self._last_percent = 0.0
        self.reports: list[float] = []

    @property
    def last_percent(self) -> float:
        return self._last_percent

    def __call__(self, percent: float) -> None:
        self.reports.append(percent)
        if percent < self._last_percent:
            log.debug(f"Ignoring out-of-order progress report {percent:.1f}%")
            return
        self._last_percent = min(100.0, percent)
        if self._task_id is not None:
            self.progress.update(self._task_id, completed=self._last_percent)

    def __enter__(self) -> "ProgressManager":
        if not self.quiet:
            self._task_id = self.progress.add_task("Updating series", total=100)
            self.progress.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._task_id is not None:
            if exc_type is not None:
                self.progress.update(self._task_id, description="[red]Aborted")
            self.progress.stop()
