import pytest

from savetv_dl.utils.formatting import format_duration, format_size, shorten


@pytest.mark.parametrize(
    "num_bytes, expected",
    [(0, "0 B"), (512, "512.0 B"), (1024, "1.0 KB"), (1_523_000_000, "1.4 GB")],
)
def test_format_size(num_bytes, expected):
    assert format_size(num_bytes) == expected


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "0s"), (59.9, "59s"), (3600, "1h"), (3903, "1h 5m 3s")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_shorten_long_titles():
    assert shorten("Tatort", width=10) == "Tatort"
    assert shorten("Der Tatortreiniger - Staffel 7", width=10) == "Der Tator…"
