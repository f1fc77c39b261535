import json
from pathlib import Path

import pytest
from aiohttp import web

from savetv_dl.models.config import DownloadConfig

USERNAME = "alice"
PASSWORD = "s3cret"
COOKIE = "SNUUID=0123456789abcdef"


def archive_entry(telecast_id, title, subtitle=None, formats=((True, 6),)):
    """Builds one element of the Save.TV video archive response."""
    return {
        "STRTELECASTENTRY": {
            "ITELECASTID": telecast_id,
            "STITLE": title,
            "SSUBTITLE": subtitle,
            "ARRALLOWDDOWNLOADFORMATS": [
                {"BADCUTENABLED": ad_free, "RECORDINGFORMATID": rank}
                for ad_free, rank in formats
            ],
        }
    }


class FakeSaveTv:
    """An in-process stand-in for the Save.TV website."""

    def __init__(self):
        self.entries = []
        self.videos = {}
        self.url_status = "OK"
        self.deleted = []
        self.resolved = []
        self.downloaded = []

    def add_recording(self, telecast_id, title, filename, content, **kwargs):
        self.entries.append(archive_entry(telecast_id, title, **kwargs))
        self.videos[str(telecast_id)] = (filename, content)

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/STV/M/Index.cfm", self.login)
        app.router.add_get(
            "/STV/M/obj/archive/JSON/VideoArchiveApi.cfm", self.video_archive
        )
        app.router.add_get(
            "/STV/M/obj/cRecordOrder/croGetDownloadUrl.cfm", self.download_url
        )
        app.router.add_get("/STV/M/obj/cRecordOrder/croDelete.cfm", self.delete)
        app.router.add_get("/video/{telecast_id}", self.video)
        app.router.add_get("/no-filename", self.no_filename)
        app.router.add_get("/truncated", self.truncated)
        return app

    def _authorized(self, request) -> bool:
        return request.headers.get("Cookie") == COOKIE

    async def login(self, request):
        form = await request.post()
        if form.get("sUsername") == USERNAME and form.get("sPassword") == PASSWORD:
            return web.Response(
                text="<html>Login_Succeed</html>",
                headers={"Set-Cookie": f"{COOKIE}; path=/"},
            )
        return web.Response(text="<html>Login failed</html>")

    async def video_archive(self, request):
        if not self._authorized(request):
            return web.Response(status=403, text="")
        return web.Response(text=json.dumps({"ARRVIDEOARCHIVEENTRIES": self.entries}))

    async def download_url(self, request):
        if not self._authorized(request):
            return web.Response(status=403, text="")
        telecast_id = request.query["TelecastId"]
        self.resolved.append((telecast_id, request.query["iFormat"]))
        url = f"https://{request.host.split(':')[0]}/video/{telecast_id}?fmt=1"
        return web.Response(
            text=json.dumps({"ARRVIDEOURL": [telecast_id, self.url_status, url]})
        )

    async def delete(self, request):
        if not self._authorized(request):
            return web.Response(status=403, text="")
        self.deleted.append(request.query["TelecastID"])
        return web.Response(text="{}")

    async def video(self, request):
        telecast_id = request.match_info["telecast_id"]
        self.downloaded.append(telecast_id)
        filename, content = self.videos[telecast_id]
        return web.Response(
            body=content,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    async def no_filename(self, request):
        return web.Response(body=b"<html>error</html>")

    async def truncated(self, request):
        """Announces a large video, sends a few bytes and hangs up."""
        response = web.StreamResponse(
            headers={"Content-Disposition": "attachment; filename=cut.mp4"}
        )
        response.content_length = 1_000_000
        await response.prepare(request)
        await response.write(b"only the beginning")
        request.transport.close()
        return response


@pytest.fixture
def fake_savetv():
    return FakeSaveTv()


@pytest.fixture
def work_dir(tmp_path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def video_dir(tmp_path) -> Path:
    return tmp_path / "videos"


def make_config(server, video_dir, **overrides) -> DownloadConfig:
    settings = {
        "username": USERNAME,
        "password": PASSWORD,
        "directory": str(video_dir),
        "base_url": str(server.make_url("/")),
        "download_port": server.port,
        "config_path": str(video_dir.parent),
    }
    settings.update(overrides)
    return DownloadConfig(**settings)
