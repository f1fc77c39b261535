"""
Data structures describing a Save.TV session and the recordings in its archive.
"""

from dataclasses import dataclass
from typing import Any

from savetv_dl.exceptions import CatalogError
from savetv_dl.utils.quality import select_best_encoding


@dataclass(frozen=True)
class Session:
    """An authenticated Save.TV session, identified by its cookie."""

    token: str

    @property
    def headers(self) -> dict[str, str]:
        """Headers that authenticate a request with this session."""
        return {"Cookie": self.token}


@dataclass(frozen=True)
class EncodingOption:
    """One of the download formats Save.TV offers for a recording."""

    ad_free: bool
    quality_rank: int

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "EncodingOption":
        return cls(
            ad_free=bool(data.get("BADCUTENABLED")),
            quality_rank=int(data.get("RECORDINGFORMATID", 0)),
        )


@dataclass(frozen=True)
class CatalogItem:
    """A recording that can be downloaded, with the best ad-free quality chosen."""

    telecast_id: str
    display_name: str
    quality_tier: int | None = None

    @classmethod
    def from_archive_entry(cls, entry: dict[str, Any]) -> "CatalogItem":
        """
        Builds an item from one element of the archive's entry list.

        Args:
            entry: An element of 'ARRVIDEOARCHIVEENTRIES'.

        Returns:
            The normalized catalog item.
        """
        telecast = entry["STRTELECASTENTRY"]

        title = telecast.get("STITLE", "")
        if subtitle := telecast.get("SSUBTITLE"):
            display_name = f"{title} - {subtitle}"
        else:
            display_name = title

        options = [
            EncodingOption.from_api(fmt)
            for fmt in telecast.get("ARRALLOWDDOWNLOADFORMATS") or []
        ]
        best = select_best_encoding(options)

        return cls(
            telecast_id=str(telecast["ITELECASTID"]),
            display_name=display_name,
            quality_tier=best.quality_rank if best else None,
        )


def parse_catalog(payload: Any) -> list[CatalogItem]:
    """
    Converts the decoded video archive response into catalog items.

    The order of the server's response is kept, as it is the download order.
    """
    try:
        entries = payload["ARRVIDEOARCHIVEENTRIES"]
        return [CatalogItem.from_archive_entry(entry) for entry in entries]
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise CatalogError(f"Unexpected video archive response: {e!r}") from e
