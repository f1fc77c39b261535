import pytest
from conftest import archive_entry

from savetv_dl.exceptions import CatalogError
from savetv_dl.models.catalog import EncodingOption, Session, parse_catalog
from savetv_dl.utils.quality import select_best_encoding


def test_best_ad_free_option_wins_over_better_option_with_ads():
    options = [
        EncodingOption(ad_free=True, quality_rank=4),
        EncodingOption(ad_free=False, quality_rank=6),
        EncodingOption(ad_free=True, quality_rank=6),
    ]
    assert select_best_encoding(options) == EncodingOption(True, 6)


def test_no_option_when_every_encoding_has_ads():
    assert select_best_encoding([EncodingOption(ad_free=False, quality_rank=6)]) is None
    assert select_best_encoding([]) is None


def test_lower_ad_free_option_is_used_when_it_is_the_only_one():
    options = [EncodingOption(False, 6), EncodingOption(True, 5), EncodingOption(False, 4)]
    assert select_best_encoding(options).quality_rank == 5


def test_parse_catalog_keeps_server_order_and_picks_quality():
    payload = {
        "ARRVIDEOARCHIVEENTRIES": [
            archive_entry(3, "Tatort", "Borowski", formats=[(True, 5), (False, 6)]),
            archive_entry(1, "Tagesschau", formats=[(True, 4), (True, 6)]),
            archive_entry(2, "Werbung pur", formats=[(False, 6)]),
        ]
    }

    items = parse_catalog(payload)

    assert [item.telecast_id for item in items] == ["3", "1", "2"]
    assert items[0].display_name == "Tatort - Borowski"
    assert items[0].quality_tier == 5
    assert items[1].display_name == "Tagesschau"
    assert items[1].quality_tier == 6
    assert items[2].quality_tier is None


def test_parse_catalog_without_download_formats():
    entry = archive_entry(7, "Doku")
    entry["STRTELECASTENTRY"]["ARRALLOWDDOWNLOADFORMATS"] = None

    (item,) = parse_catalog({"ARRVIDEOARCHIVEENTRIES": [entry]})

    assert item.quality_tier is None


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"ARRVIDEOARCHIVEENTRIES": [{"unexpected": True}]},
        ["not", "a", "dict"],
        {"ARRVIDEOARCHIVEENTRIES": [{"STRTELECASTENTRY": []}]},
        {
            "ARRVIDEOARCHIVEENTRIES": [
                {"STRTELECASTENTRY": {"ITELECASTID": 1, "ARRALLOWDDOWNLOADFORMATS": [None]}}
            ]
        },
    ],
)
def test_parse_catalog_rejects_unexpected_structure(payload):
    with pytest.raises(CatalogError):
        parse_catalog(payload)


def test_session_sends_its_cookie():
    assert Session("SNUUID=abc").headers == {"Cookie": "SNUUID=abc"}
