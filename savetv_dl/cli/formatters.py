"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from savetv_dl.models.stats import DownloadStats
from savetv_dl.utils.formatting import format_duration, format_size


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "AuthenticationError": [
            "• Verify your username and password.",
            "• Check that you can log in on www.save.tv.",
            "• Update stored credentials with `savetv-dl init`.",
        ],
        "CatalogError": [
            "• Save.TV may have changed its video archive API.",
            "• Please try again in a few minutes.",
        ],
        "ConfigurationError": [
            "• Pass --user and --password, or run `savetv-dl init`.",
            "• Check the values with `savetv-dl --show-config`.",
        ],
        "LedgerError": [
            "• The download archive database could not be used.",
            "• Make sure the working directory is writable.",
        ],
        "TransportError": [
            "• A network connection issue occurred.",
            "• Save.TV might be temporarily unavailable.",
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
        if key == "password":
            value = "[hidden]" if value else ""
        content += f"{key} = {escape(str(value))}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_stats_table(stats_data: dict[str, Any]):
    """Displays download archive statistics."""
    console = Console()
    console.print(
        "\n[bold]Total Recordings in Archive:[/] "
        f"[green]{stats_data['total_recordings']}[/green]\n"
    )

    if recent := stats_data.get("recent"):
        table = Table(title="Recently Downloaded")
        table.add_column("Telecast ID", style="dim")
        table.add_column("Title", style="cyan")
        table.add_column("Downloaded", justify="right", style="green")
        for telecast_id, title, downloaded_at in recent:
            table.add_row(str(telecast_id), escape(title or ""), str(downloaded_at))
        console.print(table)
    else:
        console.print("[dim]No recordings in the archive yet.[/dim]")


def print_summary_panel(stats: DownloadStats, duration_s: float):
    """Displays the final summary of the download session."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row("In Collection:", str(stats.recordings_total))
    stats_table.add_row(
        "✓ Downloaded:", f"[bold green]{stats.recordings_downloaded}[/bold green]"
    )

    # Skip metrics (only show if non-zero)
    skip_sections = []
    if stats.recordings_skipped_archive > 0:
        skip_sections.append(
            f"[yellow]{stats.recordings_skipped_archive} (archive)[/yellow]"
        )
    if stats.recordings_skipped_quality > 0:
        skip_sections.append(
            f"[yellow]{stats.recordings_skipped_quality} (no ad-free)[/yellow]"
        )
    if skip_sections:
        stats_table.add_row("○ Skipped:", " + ".join(skip_sections))

    if stats.recordings_removed > 0:
        stats_table.add_row("Removed Online:", str(stats.recordings_removed))

    if stats.recordings_failed > 0:
        stats_table.add_row(
            "✗ Failed:", f"[bold red]{stats.recordings_failed}[/bold red]"
        )

    stats_table.add_row("", "")  # Spacer
    stats_table.add_row(
        "Total Size:", f"[cyan]{format_size(stats.total_size_downloaded)}[/cyan]"
    )
    avg_speed = stats.total_size_downloaded / duration_s if duration_s > 0 else 0
    stats_table.add_row(
        "Avg. Speed:", f"[magenta]{format_size(int(avg_speed))}/s[/magenta]"
    )
    stats_table.add_row("Time Elapsed:", f"[blue]{format_duration(duration_s)}[/blue]")

    console.print()
    console.print(
        Panel(
            stats_table,
            title="📼 [bold]Download Complete![/bold]",
            border_style="green",
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
    console.print()
