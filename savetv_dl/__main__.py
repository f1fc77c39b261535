"""
Console entry point for savetv-dl.

Runs the typer application and turns anything that escapes it into an exit
code and a readable error panel.
"""

import asyncio
import logging
import os
import sys
from typing import NoReturn

import typer
from rich.console import Console

from savetv_dl.cli.app import app
from savetv_dl.cli.formatters import format_error_with_suggestions
from savetv_dl.exceptions import SaveTvError

log = logging.getLogger("savetv_dl")


def _use_utf8_streams() -> None:
    """Lets the Windows console print the status symbols."""
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.reconfigure(encoding="utf-8")
        except (TypeError, AttributeError):
            pass


def _fail(console: Console, error: Exception, context: dict | None = None) -> NoReturn:
    console.print()
    console.print(format_error_with_suggestions(error, context))
    sys.exit(1)


def main() -> None:
    if os.name == "nt":
        _use_utf8_streams()

    console = Console()
    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except (KeyboardInterrupt, asyncio.CancelledError):
        # Partial downloads are removed at the start of the next run
        console.print("\n[yellow]⚠️  Download interrupted.[/yellow]")
        sys.exit(0)
    except SaveTvError as e:
        _fail(console, e)
    except Exception as e:
        log.debug("Full traceback:", exc_info=True)
        _fail(console, e, {"type": "Unexpected"})


if __name__ == "__main__":
    main()
