import asyncio

import pytest
from aiohttp.test_utils import TestServer

from savetv_dl.api.transport import HttpTransport, content_length
from savetv_dl.exceptions import MissingFilenameError, TransportError
from savetv_dl.media.downloader import Downloader


class RecordingProgress:
    def __init__(self):
        self.tasks = []
        self.updates = []
        self.removed = []

    def add_download_task(self, description, total_size):
        self.tasks.append((description, total_size))
        return len(self.tasks)

    def update_task_progress(self, task_id, completed):
        self.updates.append(completed)

    def remove_task(self, task_id, success=True):
        self.removed.append((task_id, success))


def stream(fake, path, temp_dir, destination_dir, progress=None):
    async def runner():
        async with TestServer(fake.make_app()) as server:
            transport = HttpTransport()
            try:
                return await transport.stream_to_file(
                    str(server.make_url(path)),
                    temp_dir=temp_dir,
                    destination_dir=destination_dir,
                    progress_manager=progress,
                )
            finally:
                await transport.close()

    return asyncio.run(runner())


def test_stream_saves_file_and_removes_temp(fake_savetv, work_dir, tmp_path):
    destination_dir = tmp_path / "external"
    destination_dir.mkdir()
    content = b"\x00\x01video" * 100_000
    fake_savetv.add_recording(5, "Tatort", "tatort.mp4", content)
    progress = RecordingProgress()

    path = stream(fake_savetv, "/video/5", work_dir, destination_dir, progress)

    assert path == destination_dir / "tatort.mp4"
    assert path.read_bytes() == content
    assert list(work_dir.iterdir()) == []
    assert progress.tasks == [("tatort.mp4", len(content))]
    assert progress.updates[-1] == len(content)
    assert progress.removed == [(1, True)]


def test_stream_without_filename(fake_savetv, work_dir, tmp_path):
    with pytest.raises(MissingFilenameError):
        stream(fake_savetv, "/no-filename", work_dir, tmp_path)

    assert list(work_dir.iterdir()) == []


def test_stream_to_missing_directory_leaves_nothing_behind(fake_savetv, work_dir, tmp_path):
    fake_savetv.add_recording(5, "Tatort", "tatort.mp4", b"video")
    progress = RecordingProgress()

    with pytest.raises(TransportError):
        stream(fake_savetv, "/video/5", work_dir, tmp_path / "missing", progress)

    assert list(work_dir.iterdir()) == []
    assert progress.removed == [(1, False)]


def test_connection_dropped_mid_video_leaves_nothing_behind(fake_savetv, work_dir, tmp_path):
    progress = RecordingProgress()

    with pytest.raises(TransportError):
        stream(fake_savetv, "/truncated", work_dir, tmp_path, progress)

    assert list(work_dir.iterdir()) == []
    assert not (tmp_path / "cut.mp4").exists()
    assert progress.removed == [(1, False)]


@pytest.mark.parametrize(
    "headers, expected",
    [
        ({"Content-Length": "2048"}, 2048),
        ({}, 0),
        ({"Content-Length": "lots"}, 0),
        ({"Content-Length": "-5"}, 0),
    ],
)
def test_content_length(headers, expected):
    assert content_length(headers) == expected


def test_request_collects_headers_and_body(fake_savetv):
    async def runner():
        async with TestServer(fake_savetv.make_app()) as server:
            transport = HttpTransport()
            try:
                return await transport.request(
                    str(server.make_url("/STV/M/Index.cfm")),
                    method="POST",
                    data={"sUsername": "nobody", "sPassword": "x"},
                )
            finally:
                await transport.close()

    response = asyncio.run(runner())

    assert response.status == 200
    assert "Login failed" in response.body
    assert "Set-Cookie" not in response.headers


def test_request_connection_failure():
    async def runner():
        transport = HttpTransport()
        try:
            await transport.request("http://127.0.0.1:1/")
        finally:
            await transport.close()

    with pytest.raises(TransportError):
        asyncio.run(runner())


@pytest.mark.parametrize(
    "download_url, expected",
    [
        ("https://dl.save.tv/file/abc.mp4?token=1", "http://dl.save.tv:80/file/abc.mp4?token=1"),
        ("http://dl.save.tv:8080/file", "http://dl.save.tv:80/file"),
        ("https://dl.save.tv", "http://dl.save.tv:80/"),
        ("https://[2001:db8::1]:443/file", "http://[2001:db8::1]:80/file"),
    ],
)
def test_video_url_is_forced_to_plain_http(tmp_path, download_url, expected):
    downloader = Downloader(HttpTransport(), tmp_path, tmp_path)
    assert downloader.video_url(download_url) == expected


def test_video_url_without_host(tmp_path):
    downloader = Downloader(HttpTransport(), tmp_path, tmp_path)
    with pytest.raises(TransportError):
        downloader.video_url("not a url")
