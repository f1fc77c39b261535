"""
Storage Layer.

This package handles all data persistence: the configuration file and the
download archive database.
"""

from .archive import RecordingArchive
from .config_manager import ConfigManager

__all__ = ["ConfigManager", "RecordingArchive"]
