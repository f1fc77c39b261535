"""
Dataclass for tracking download session statistics.
"""

from dataclasses import dataclass


@dataclass
class DownloadStats:
    """Tracks statistics for a download session."""

    recordings_total: int = 0
    recordings_downloaded: int = 0
    recordings_skipped_archive: int = 0
    recordings_skipped_quality: int = 0
    recordings_failed: int = 0
    recordings_removed: int = 0
    total_size_downloaded: int = 0
