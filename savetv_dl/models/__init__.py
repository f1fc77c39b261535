"""
Data Models Layer.

This package contains the data structures used throughout the application,
such as the Save.TV session, catalog items, configuration and statistics.
"""

from .catalog import CatalogItem, EncodingOption, Session, parse_catalog
from .config import DownloadConfig
from .stats import DownloadStats

__all__ = [
    "CatalogItem",
    "DownloadConfig",
    "DownloadStats",
    "EncodingOption",
    "Session",
    "parse_catalog",
]
