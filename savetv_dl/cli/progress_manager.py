"""
Manages a Rich progress display for the video currently being downloaded.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

from savetv_dl.utils.formatting import shorten


class ProgressManager:
    """
    Shows a progress bar for each download while it runs.

    With `enabled=False` every call is a no-op.
    """

    def __init__(self, console: Console, enabled: bool = True):
        self.console = console
        self.enabled = enabled

        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}", justify="left"),
            BarColumn(bar_width=40),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
            "•",
            TimeRemainingColumn(),
            console=console,
            transient=True,
        )

    def add_download_task(self, description: str, total_size: int) -> TaskID | None:
        if not self.enabled:
            return None
        return self.progress.add_task(
            shorten(description), total=total_size or None, start=True
        )

    def update_task_progress(self, task_id: TaskID | None, completed: int):
        if task_id is not None and self.enabled:
            self.progress.update(task_id, completed=completed)

    def remove_task(self, task_id: TaskID | None, success: bool = True):
        if task_id is None or not self.enabled:
            return
        if not success:
            for task in self.progress.tasks:
                if task.id == task_id:
                    self.console.print(f"  [red]✗ Aborted:[/] {task.description}")
        try:
            self.progress.remove_task(task_id)
        except KeyError:
            pass

    async def __aenter__(self):
        if self.enabled:
            self.progress.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.enabled:
            self.progress.stop()
