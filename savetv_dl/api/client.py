"""
Client for the (undocumented) Save.TV web API used by the video archive pages.
"""

import json
import logging
from typing import Any, Optional

from savetv_dl.exceptions import (
    CatalogError,
    NoQualityError,
    NoSessionError,
    NoUrlError,
)
from savetv_dl.models.catalog import CatalogItem, Session, parse_catalog

from .auth import SaveTvAuthenticator
from .transport import HttpTransport

log = logging.getLogger(__name__)

ENDPOINTS = {
    "login": "/STV/M/Index.cfm?sk=PREMIUM",
    "list": (
        "/STV/M/obj/archive/JSON/VideoArchiveApi.cfm"
        "?bAggregateEntries=false&iEntriesPerPage=1000&iRecordingState=1"
    ),
    "download": (
        "/STV/M/obj/cRecordOrder/croGetDownloadUrl.cfm"
        "?TelecastId={telecast_id}&iFormat={quality}&bAdFree=true"
    ),
    "remove": "/STV/M/obj/cRecordOrder/croDelete.cfm?TelecastID={telecast_id}",
}

# Second field of the ARRVIDEOURL array when a download URL was issued
DOWNLOAD_URL_OK = "OK"


def extract_download_url(payload: Any) -> str:
    """
    Reads the download URL from a 'croGetDownloadUrl' response.

    The response holds a positional array under 'ARRVIDEOURL' whose second
    field is the status and whose third field is the URL.

    Raises:
        NoUrlError: If the status is not 'OK' or the payload is malformed.
    """
    fields = payload.get("ARRVIDEOURL") if isinstance(payload, dict) else payload
    if (
        isinstance(fields, list)
        and len(fields) > 2
        and fields[1] == DOWNLOAD_URL_OK
        and fields[2]
    ):
        return str(fields[2])
    raise NoUrlError("No download url from server.")


class SaveTvAPIClient:
    """
    Async client for the Save.TV video archive API.

    Every call that needs a login takes the Session explicitly.
    """

    BASE_URL = "https://www.save.tv"

    def __init__(self, base_url: str = BASE_URL, transport: Optional[HttpTransport] = None):
        """
        Initializes the API client.

        Args:
            base_url: Scheme and host of the Save.TV website.
            transport: The HTTP transport to use; a new one is created if omitted.
        """
        self.base_url = base_url.rstrip("/")
        self.transport = transport or HttpTransport()
        self._authenticator = SaveTvAuthenticator(self)

    @property
    def authenticator(self) -> SaveTvAuthenticator:
        """Provides access to the authentication helper."""
        return self._authenticator

    def url_for(self, endpoint: str, **params: Any) -> str:
        """Builds the absolute URL of a named endpoint."""
        return self.base_url + ENDPOINTS[endpoint].format(**params)

    async def close(self) -> None:
        await self.transport.close()

    async def _api_call(self, session: Optional[Session], endpoint: str, **params: Any):
        if not session:
            raise NoSessionError()
        return await self.transport.request(
            self.url_for(endpoint, **params), headers=session.headers
        )

    # Public API Methods
    async def list_recordings(self, session: Optional[Session]) -> list[CatalogItem]:
        """
        Fetches all finished recordings in the user's video archive.

        Returns:
            The recordings in the order Save.TV lists them.

        Raises:
            NoSessionError: If no session is given.
            CatalogError: If the response cannot be parsed.
        """
        result = await self._api_call(session, "list")
        try:
            payload = json.loads(result.body)
        except ValueError as e:
            raise CatalogError(f"Video archive response is not valid JSON: {e}") from e
        return parse_catalog(payload)

    async def resolve_download_url(
        self, session: Optional[Session], item: CatalogItem
    ) -> str:
        """
        Requests a one-time download URL for a recording in its chosen quality.

        Raises:
            NoSessionError: If no session is given.
            NoQualityError: If the recording has no ad-free download option.
            NoUrlError: If Save.TV does not issue a URL.
        """
        if not session:
            raise NoSessionError()
        if item.quality_tier is None:
            raise NoQualityError("No ad-free download available.")

        result = await self._api_call(
            session,
            "download",
            telecast_id=item.telecast_id,
            quality=item.quality_tier,
        )
        try:
            payload = json.loads(result.body)
        except ValueError as e:
            raise NoUrlError(f"Download url response is not valid JSON: {e}") from e
        return extract_download_url(payload)

    async def delete_recording(self, session: Optional[Session], telecast_id: str) -> None:
        """Deletes a recording from the user's video archive."""
        await self._api_call(session, "remove", telecast_id=telecast_id)
