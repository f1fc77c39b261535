"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from savetv_dl import __version__
from savetv_dl.api.client import SaveTvAPIClient
from savetv_dl.core.download_manager import DownloadManager
from savetv_dl.exceptions import SaveTvError
from savetv_dl.storage.archive import RecordingArchive
from savetv_dl.storage.config_manager import ConfigManager

from .formatters import (
    format_error_with_suggestions,
    print_config,
    print_stats_table,
    print_summary_panel,
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
log = logging.getLogger("savetv_dl")

app = typer.Typer(
    name="savetv-dl",
    help=(
        "Downloads your Save.TV recordings, one after another, without ads."
        " Use 'savetv-dl <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "savetv-dl"


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
    """Save.TV Downloader CLI"""
    if version:
        console.print(f"[bold]savetv-dl[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("savetv_dl").setLevel(log_level)

    if show_config:
        config_manager = ConfigManager(CONFIG_FILE)
        print_config(CONFIG_FILE, config_manager.get_config_as_dict())
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    username: str = typer.Argument(..., help="Save.TV username."),
    password: str = typer.Argument(..., help="Save.TV password."),
    directory: str = typer.Option(
        ".", "-d", "--directory", help="Default target directory for videos."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite existing credentials without asking."
    ),
):
    """Store Save.TV credentials in the configuration file."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm(
            "Configuration file already exists. Overwrite the credentials?"
        )
    ):
        raise typer.Abort()

    try:
        ConfigManager(CONFIG_FILE).save_new_config(
            {"username": username, "password": password, "directory": directory}
        )
    except SaveTvError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")
    console.print("Ready to download! Try: [cyan]savetv-dl download[/cyan]")


@app.command(name="download")
def download_command(
    user: str | None = typer.Option(None, "-u", "--user", help="Save.TV username."),
    password: str | None = typer.Option(
        None, "-p", "--password", help="Save.TV password."
    ),
    directory: str | None = typer.Option(
        None,
        "-d",
        "--directory",
        help="Target directory for downloaded video files.",
    ),
    remove: bool | None = typer.Option(
        None,
        "-r",
        "--remove/--keep",
        help="Delete recordings from Save.TV after a successful download.",
    ),
    no_progress: bool | None = typer.Option(
        None,
        "-n",
        "--no-progress/--progress",
        help="Don't show a progress bar while downloading.",
    ),
):
    """Download all new recordings from the Save.TV video archive."""
    cli_options = {
        key: value
        for key, value in {
            "username": user,
            "password": password,
            "directory": directory,
            "remove": remove,
            "no_progress": no_progress,
        }.items()
        if value is not None
    }

    try:
        config = ConfigManager(CONFIG_FILE).load_config(cli_options)
        archive = RecordingArchive(Path.cwd())
    except SaveTvError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    async def _download_async():
        api_client = SaveTvAPIClient(config.base_url)
        try:
            async with ProgressManager(
                console=console, enabled=not config.no_progress
            ) as progress_manager:
                manager = DownloadManager(config, api_client, archive, progress_manager)
                return await manager.run()
        finally:
            await api_client.close()

    start_time = time.monotonic()
    try:
        stats = asyncio.run(_download_async())
    except SaveTvError as e:
        log.error(f"[red]Whoops: {e}[/red]")
        log.debug("Full traceback:", exc_info=True)
        raise typer.Exit(code=1) from e

    print_summary_panel(stats, time.monotonic() - start_time)


@app.command()
def stats():
    """Show statistics from the download archive."""

    async def _get_stats():
        try:
            archive = RecordingArchive(Path.cwd())
            stats_data = await archive.get_stats()
            if stats_data:
                print_stats_table(stats_data)
            else:
                console.print("[yellow]Could not retrieve stats.[/yellow]")
        except SaveTvError as e:
            console.print(f"[red]Error accessing archive: {e}[/red]")

    asyncio.run(_get_stats())


@app.command()
def vacuum():
    """Optimize the download archive database."""

    async def _vacuum():
        console.print("[cyan]Optimizing archive database...[/cyan]")
        archive = RecordingArchive(Path.cwd())
        if await archive.vacuum():
            console.print("[green]✓ Database optimized.[/green]")
        else:
            console.print("[red]✗ Optimization failed.[/red]")

    asyncio.run(_vacuum())


@app.command(name="clear-archive")
def clear_archive(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Bypass the confirmation prompt.",
    ),
):
    """Clear the entire download archive database."""
    if not force and not typer.confirm(
        "Are you sure you want to clear the entire download archive? "
        "Every recording still online will be downloaded again."
    ):
        console.print("[yellow]Operation cancelled.[/yellow]")
        raise typer.Abort()

    async def _clear_archive_async():
        console.print("[cyan]Clearing download archive...[/cyan]")
        archive = RecordingArchive(Path.cwd())
        if await archive.clear():
            console.print("[green]✓ Download archive cleared successfully.[/green]")
        else:
            console.print("[red]✗ Failed to clear download archive.[/red]")

    asyncio.run(_clear_archive_async())
