import pytest
from typer.testing import CliRunner

from savetv_dl import __version__
from savetv_dl.cli import app as cli_app
from savetv_dl.models.catalog import CatalogItem
from savetv_dl.storage.archive import RecordingArchive

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_app, "CONFIG_FILE", tmp_path / "config" / "config.ini")
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    monkeypatch.chdir(work_dir)
    return work_dir


def test_version():
    result = runner.invoke(cli_app.app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_download_without_credentials_fails_before_any_work(isolated):
    (isolated / "foo.mp4.savetv_temp").write_bytes(b"partial")

    result = runner.invoke(cli_app.app, ["download"])

    assert result.exit_code == 1
    assert (isolated / "foo.mp4.savetv_temp").exists()


def test_init_writes_config(tmp_path):
    result = runner.invoke(cli_app.app, ["init", "alice", "secret", "-d", "/videos"])

    assert result.exit_code == 0
    content = (tmp_path / "config" / "config.ini").read_text()
    assert "username = alice" in content
    assert "directory = /videos" in content

    result = runner.invoke(cli_app.app, ["--show-config"])
    assert "alice" in result.output
    assert "secret" not in result.output


def test_stats_and_clear_archive(isolated):
    import asyncio

    asyncio.run(RecordingArchive(isolated).record(CatalogItem("1", "Tatort", 6)))

    result = runner.invoke(cli_app.app, ["stats"])
    assert result.exit_code == 0
    assert "Tatort" in result.output

    result = runner.invoke(cli_app.app, ["clear-archive", "--force"])
    assert result.exit_code == 0
    assert not asyncio.run(RecordingArchive(isolated).has("1"))
