"""
The main orchestrator: logs in, lists the video archive and downloads every new
recording, one after another.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from rich.markup import escape

from savetv_dl.api.client import SaveTvAPIClient
from savetv_dl.cli.progress_manager import ProgressManager
from savetv_dl.exceptions import (
    CatalogError,
    NoQualityError,
    NoSessionError,
    RemoveError,
    SaveTvError,
    TransportError,
)
from savetv_dl.media import Downloader
from savetv_dl.models.catalog import CatalogItem, Session
from savetv_dl.models.config import DownloadConfig, get_quality_info
from savetv_dl.models.stats import DownloadStats
from savetv_dl.storage.archive import RecordingArchive
from savetv_dl.utils.path import purge_temp_files

log = logging.getLogger(__name__)


class DownloadManager:
    """Orchestrates the entire download process."""

    def __init__(
        self,
        config: DownloadConfig,
        api_client: SaveTvAPIClient,
        archive: RecordingArchive,
        progress_manager: Optional[ProgressManager] = None,
        work_dir: Optional[Path] = None,
        downloader: Optional[Downloader] = None,
    ):
        self.config = config
        self.api_client = api_client
        self.archive = archive
        self.progress_manager = progress_manager
        self.work_dir = work_dir or Path.cwd()
        self.downloader = downloader or Downloader(
            api_client.transport,
            destination_dir=Path(config.directory),
            temp_dir=self.work_dir,
            port=config.download_port,
        )
        self.stats = DownloadStats()

    async def run(self) -> DownloadStats:
        """
        Runs a complete session.

        Only a failed login or a failed listing ends the run early; problems
        with a single recording are logged and the next one is processed.

        Raises:
            AuthenticationError: If the login fails.
            CatalogError: If the video archive cannot be listed.
        """
        await asyncio.to_thread(purge_temp_files, self.work_dir)

        session = await self.api_client.authenticator.login(
            self.config.username, self.config.password
        )
        log.info("[green]✓ Login successful.[/green]")

        try:
            recordings = await self.api_client.list_recordings(session)
        except TransportError as e:
            raise CatalogError(f"Could not fetch the video archive: {e}") from e

        self.stats.recordings_total = len(recordings)
        log.info(f"You have {len(recordings)} videos in your collection.")

        # One at a time, so slow downloads don't compete for bandwidth
        for index, item in enumerate(recordings, 1):
            log.info(
                f"\n[bold cyan][Video {index}/{len(recordings)}, ID "
                f"{escape(item.telecast_id)}]:[/] {escape(item.display_name)}"
            )
            await self._process_safely(session, item)

        return self.stats

    async def _process_safely(self, session: Session, item: CatalogItem) -> None:
        try:
            await self.process_recording(session, item)
        except NoQualityError as e:
            self.stats.recordings_skipped_quality += 1
            log.warning(f"  [yellow]○ Skipping:[/] {e}")
        except SaveTvError as e:
            self.stats.recordings_failed += 1
            log.error(f"  [red]✗ Error:[/] {escape(str(e))}")
        except Exception as e:
            self.stats.recordings_failed += 1
            log.error(
                f"  [red]✗ An unexpected error occurred:[/] {escape(str(e))}",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )

    async def process_recording(
        self, session: Session, item: CatalogItem
    ) -> Optional[Path]:
        """
        Downloads a single recording unless the archive already lists it.

        The archive entry is written only after the file is complete, and the
        remote copy is deleted only after the entry was written.

        Returns:
            The path of the saved video, or None if it was already downloaded.
        """
        if await self.archive.has(item.telecast_id):
            self.stats.recordings_skipped_archive += 1
            log.info("  [dim]Video was already downloaded.[/dim]")
            return None

        if item.quality_tier is None:
            raise NoQualityError("No ad-free download available.")

        quality_name = get_quality_info(item.quality_tier)["name"]
        log.info(f"  Video is new, starting download. (Using quality: {quality_name})")

        download_url = await self.api_client.resolve_download_url(session, item)
        destination = await self.downloader.download_video(
            download_url, self.progress_manager
        )
        log.info(
            f"  [green]✓ Download complete,[/green] saved video to "
            f"[dim]{escape(str(destination))}[/dim]"
        )

        await self.archive.record(item, destination)
        self.stats.recordings_downloaded += 1
        if destination.exists():
            self.stats.total_size_downloaded += destination.stat().st_size

        if await self.remove_recording(session, item.telecast_id):
            self.stats.recordings_removed += 1
            log.info("  Removed video from online collection.")

        return destination

    async def remove_recording(
        self, session: Optional[Session], telecast_id: str
    ) -> bool:
        """
        Deletes a recording from Save.TV if removal is enabled.

        Returns:
            True if the recording was deleted, False if removal is disabled.

        Raises:
            NoSessionError: If removal is enabled but there is no session.
            RemoveError: If the delete request fails.
        """
        if not self.config.remove:
            return False
        if not session:
            raise NoSessionError()
        try:
            await self.api_client.delete_recording(session, telecast_id)
        except TransportError as e:
            raise RemoveError(f"Could not delete recording {telecast_id}: {e}") from e
        return True
