"""
Media Layer.

This package is responsible for saving video files to disk.
"""

from .downloader import Downloader

__all__ = ["Downloader"]
