"""
Utilities for handling file paths, temporary download files and file names.
"""

import logging
import os
from pathlib import Path

from pathvalidate import sanitize_filename

log = logging.getLogger(__name__)

# Marks a file that is still being downloaded
TEMP_SUFFIX = ".savetv_temp"

_DISPOSITION_PREFIX = "attachment; filename="


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def temp_path_for(directory: Path, filename: str) -> Path:
    """Returns the in-progress path used while downloading `filename`."""
    return directory / f"{filename}{TEMP_SUFFIX}"


def filename_from_content_disposition(header: str | None) -> str | None:
    """
    Extracts the file name from a Save.TV 'Content-Disposition' header.

    Save.TV answers with 'attachment; filename=NAME.mp4'. The name is reduced
    to a plain file name so it cannot point outside the target directory.

    Returns:
        The sanitized file name, or None if the header does not name a file.
    """
    if not header:
        return None
    value = header.strip()
    if value.lower().startswith(_DISPOSITION_PREFIX):
        value = value[len(_DISPOSITION_PREFIX) :]
    value = value.strip().strip('"')
    filename = sanitize_filename(os.path.basename(value.replace("\\", "/")))
    return filename or None


def purge_temp_files(directory: Path) -> list[Path]:
    """
    Deletes partial downloads left behind by an interrupted previous run.

    Only the top level of `directory` is scanned.

    Returns:
        The paths of the removed files.
    """
    removed = []
    for entry in directory.iterdir():
        if entry.suffix == TEMP_SUFFIX and entry.is_file():
            log.info(f"[yellow]Removing old tempfile:[/yellow] {entry.name}")
            entry.unlink()
            removed.append(entry)
    return removed
