"""
Manages the SQLite database that archives downloaded telecast IDs to prevent redownloading.
"""

import asyncio
import logging
import sqlite3
from pathlib import Path
from typing import Any

from savetv_dl.exceptions import LedgerError
from savetv_dl.models.catalog import CatalogItem

log = logging.getLogger(__name__)

ARCHIVE_FILENAME = "savetv-dl.sqlite"


class RecordingArchive:
    """
    A SQLite archive of recordings that were saved completely.

    An entry means "never download again", whether or not the file still
    exists on disk.
    """

    def __init__(self, work_dir: Path):
        self.db_path = work_dir / ARCHIVE_FILENAME
        self._initialize_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Gets a new database connection."""
        try:
            conn = sqlite3.connect(self.db_path, timeout=30)
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            return conn
        except sqlite3.Error as e:
            log.error(f"Failed to connect to archive database: {e}")
            raise LedgerError(f"Cannot open archive database: {e}") from e

    def _initialize_db(self) -> None:
        """Creates the database and table if they don't exist."""
        try:
            with self._get_connection() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS downloaded_telecasts (
                        telecast_id TEXT PRIMARY KEY NOT NULL,
                        title TEXT,
                        quality INTEGER,
                        file_path TEXT,
                        downloaded_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )
                conn.commit()
        except sqlite3.Error as e:
            log.error(f"Failed to initialize archive database at '{self.db_path}': {e}")
            raise LedgerError(f"Cannot initialize archive database: {e}") from e

    def _has_sync(self, telecast_id: str) -> bool:
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    "SELECT 1 FROM downloaded_telecasts WHERE telecast_id = ?",
                    (str(telecast_id),),
                )
                return cursor.fetchone() is not None
        except sqlite3.Error as e:
            log.error(f"Archive lookup failed for telecast {telecast_id}: {e}")
            raise LedgerError(f"Archive lookup failed: {e}") from e

    async def has(self, telecast_id: str) -> bool:
        """Checks whether a telecast was already downloaded."""
        return await asyncio.to_thread(self._has_sync, telecast_id)

    def _record_sync(self, item: CatalogItem, file_path: Path | None) -> None:
        try:
            with self._get_connection() as conn:
                conn.execute(
                    "INSERT OR IGNORE INTO downloaded_telecasts "
                    "(telecast_id, title, quality, file_path) VALUES (?, ?, ?, ?)",
                    (
                        str(item.telecast_id),
                        item.display_name,
                        item.quality_tier,
                        str(file_path) if file_path else None,
                    ),
                )
                conn.commit()
        except sqlite3.Error as e:
            log.error(f"Insert into archive failed for telecast {item.telecast_id}: {e}")
            raise LedgerError(f"Could not record download: {e}") from e

    async def record(self, item: CatalogItem, file_path: Path | None = None) -> None:
        """
        Marks a telecast as downloaded.

        Raises:
            LedgerError: If the entry could not be written.
        """
        await asyncio.to_thread(self._record_sync, item, file_path)

    def _get_stats_sync(self) -> dict[str, Any] | None:
        """Synchronous implementation for getting archive statistics."""
        try:
            with self._get_connection() as conn:
                cur = conn.cursor()
                cur.execute("SELECT COUNT(*) FROM downloaded_telecasts")
                total_recordings = cur.fetchone()[0]
                cur.execute(
                    """
                    SELECT telecast_id, title, downloaded_at
                    FROM downloaded_telecasts
                    ORDER BY downloaded_at DESC, rowid DESC
                    LIMIT 10
                    """
                )
                recent = cur.fetchall()
                return {"total_recordings": total_recordings, "recent": recent}
        except (sqlite3.Error, LedgerError) as e:
            log.error(f"Failed to get archive stats: {e}")
            return None

    async def get_stats(self) -> dict[str, Any] | None:
        """Retrieves statistics from the download archive."""
        return await asyncio.to_thread(self._get_stats_sync)

    def _vacuum_sync(self) -> bool:
        """Synchronous implementation for optimizing the database."""
        try:
            with self._get_connection() as conn:
                conn.execute("VACUUM;")
                conn.execute("ANALYZE;")
                conn.commit()
            log.info("Archive database optimized successfully.")
            return True
        except (sqlite3.Error, LedgerError) as e:
            log.error(f"Database vacuum failed: {e}")
            return False

    async def vacuum(self) -> bool:
        """Optimizes the database file by rebuilding it."""
        return await asyncio.to_thread(self._vacuum_sync)

    def _clear_sync(self) -> bool:
        try:
            with self._get_connection() as conn:
                conn.execute("DELETE FROM downloaded_telecasts;")
                conn.commit()
            return True
        except (sqlite3.Error, LedgerError) as e:
            log.error(f"Clearing the archive failed: {e}")
            return False

    async def clear(self) -> bool:
        """Removes every entry, so all recordings are downloaded again."""
        return await asyncio.to_thread(self._clear_sync)
