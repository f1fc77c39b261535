"""
Utility for choosing the download format of a recording.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from savetv_dl.models.catalog import EncodingOption


def select_best_encoding(
    options: Iterable["EncodingOption"],
) -> "EncodingOption | None":
    """
    Returns the highest quality ad-free option, or None if there is none.

    Options containing ads are never chosen, even if nothing else is left.
    When several ad-free options share the highest rank, the first of them
    is returned.
    """
    ad_free = [option for option in options if option.ad_free]
    if not ad_free:
        return None
    return max(ad_free, key=lambda option: option.quality_rank)
