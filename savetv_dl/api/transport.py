"""
Performs the HTTP exchanges with Save.TV: API calls whose body is read as text,
and video downloads that are streamed to disk.
"""

import asyncio
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Optional

import aiofiles
import aiohttp
from multidict import CIMultiDictProxy

from savetv_dl.exceptions import MissingFilenameError, TransportError
from savetv_dl.utils.path import filename_from_content_disposition, temp_path_for

if TYPE_CHECKING:
    from savetv_dl.cli.progress_manager import ProgressManager

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Status, headers and text body of an API response."""

    status: int
    headers: CIMultiDictProxy[str]
    body: str


def content_length(headers: Mapping[str, str]) -> int:
    """The announced body size, or 0 when it is missing or malformed."""
    try:
        return max(int(headers.get("Content-Length", 0)), 0)
    except ValueError:
        return 0


class HttpTransport:
    """
    Thin wrapper around an aiohttp session.

    Cookies are never stored between requests; callers pass the session
    cookie explicitly. No timeouts are applied, so a stalled server stalls
    the caller.
    """

    CHUNK_SIZE = 262144  # 256 KB

    def __init__(self) -> None:
        self._session: Optional[aiohttp.ClientSession] = None

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                cookie_jar=aiohttp.DummyCookieJar(),
                headers={
                    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
                },
                timeout=aiohttp.ClientTimeout(total=None),
            )

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def request(
        self,
        url: str,
        method: str = "GET",
        data: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> TransportResponse:
        """
        Sends an API request and collects the complete response body.

        The status code is not checked; Save.TV signals most outcomes in the
        body.

        Args:
            url: The absolute URL to request.
            method: The HTTP method.
            data: Optional form fields, sent url-encoded.
            headers: Optional extra request headers.

        Raises:
            TransportError: On connection failure or an incomplete response.
        """
        await self._initialize_session()
        try:
            async with self._session.request(
                method, url, data=data, headers=headers, allow_redirects=False
            ) as r:
                body = await r.text(errors="replace")
                log.debug(f"{method} {url} -> {r.status} ({len(body)} chars)")
                return TransportResponse(status=r.status, headers=r.headers, body=body)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.debug(f"Request {method} {url} failed: {e}")
            raise TransportError(f"Request to {url} failed: {e}") from e

    async def stream_to_file(
        self,
        url: str,
        temp_dir: Path,
        destination_dir: Path,
        progress_manager: Optional["ProgressManager"] = None,
    ) -> Path:
        """
        Downloads a video into `destination_dir` by way of a temporary file.

        The body is written to '<name>.savetv_temp' in `temp_dir`. When the
        transfer is complete the file is copied to its destination, which may
        be on another filesystem, and the temporary file is deleted.

        Returns:
            The path of the saved video.

        Raises:
            MissingFilenameError: If the response carries no file name.
            TransportError: If the transfer or the copy fails.
        """
        await self._initialize_session()
        temp_path: Optional[Path] = None
        task_id = None
        success = False
        try:
            async with self._session.get(url, allow_redirects=False) as response:
                filename = filename_from_content_disposition(
                    response.headers.get("Content-Disposition")
                )
                if not filename:
                    raise MissingFilenameError("Server didn't respond with video file.")

                temp_path = temp_path_for(temp_dir, filename)
                total_size = content_length(response.headers)
                if progress_manager:
                    task_id = progress_manager.add_download_task(filename, total_size)

                bytes_downloaded = 0
                async with aiofiles.open(temp_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                        await f.write(chunk)
                        bytes_downloaded += len(chunk)
                        if progress_manager:
                            progress_manager.update_task_progress(
                                task_id, completed=bytes_downloaded
                            )

            destination_path = destination_dir / filename
            try:
                await asyncio.to_thread(shutil.copyfile, temp_path, destination_path)
            except OSError:
                self._discard(destination_path)
                raise
            await asyncio.to_thread(os.remove, temp_path)
            success = True
            return destination_path

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"Video download failed: {e}") from e
        except OSError as e:
            raise TransportError(f"Could not save video: {e}") from e
        finally:
            if progress_manager:
                progress_manager.remove_task(task_id, success=success)
            if not success:
                self._discard(temp_path)

    @staticmethod
    def _discard(path: Optional[Path]) -> None:
        """Removes a leftover file, ignoring failures."""
        if path is not None and path.exists():
            try:
                os.remove(path)
            except OSError:
                pass
