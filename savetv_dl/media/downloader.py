"""
Saves a recording from its resolved download URL to the target directory.
"""

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional
from urllib.parse import urlsplit

from savetv_dl.api.transport import HttpTransport
from savetv_dl.exceptions import TransportError
from savetv_dl.utils.path import create_dir

if TYPE_CHECKING:
    from savetv_dl.cli.progress_manager import ProgressManager

log = logging.getLogger(__name__)


class Downloader:
    """Downloads videos over plain HTTP, one file per call, without retries."""

    def __init__(
        self,
        transport: HttpTransport,
        destination_dir: Path,
        temp_dir: Path,
        port: int = 80,
    ):
        """
        Args:
            transport: The HTTP transport used for the transfer.
            destination_dir: Where finished videos are saved.
            temp_dir: Where the in-progress file is written.
            port: The port video servers are contacted on.
        """
        self.transport = transport
        self.destination_dir = destination_dir
        self.temp_dir = temp_dir
        self.port = port

    def video_url(self, download_url: str) -> str:
        """
        Rewrites a download URL to plain HTTP on the configured port.

        Only the host, path and query of the URL Save.TV hands out are kept.
        """
        parts = urlsplit(download_url)
        if not parts.hostname:
            raise TransportError(f"Invalid download url: {download_url}")
        host = parts.hostname
        if ":" in host:
            host = f"[{host}]"
        path = parts.path or "/"
        if parts.query:
            path = f"{path}?{parts.query}"
        return f"http://{host}:{self.port}{path}"

    async def download_video(
        self,
        download_url: str,
        progress_manager: Optional["ProgressManager"] = None,
    ) -> Path:
        """
        Downloads a video and returns the path it was saved to.

        Raises:
            TransportError: If the transfer fails. No final file is left behind.
        """
        url = self.video_url(download_url)
        await asyncio.to_thread(create_dir, self.destination_dir)
        log.debug(f"Downloading video from {url}")
        return await self.transport.stream_to_file(
            url,
            temp_dir=self.temp_dir,
            destination_dir=self.destination_dir,
            progress_manager=progress_manager,
        )
