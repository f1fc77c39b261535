"""
Handles authentication with Save.TV, exchanging credentials for a session cookie.
"""

import logging
from typing import TYPE_CHECKING

from savetv_dl.exceptions import AuthenticationError, TransportError
from savetv_dl.models.catalog import Session

if TYPE_CHECKING:
    from .client import SaveTvAPIClient

log = logging.getLogger(__name__)

# Save.TV shows this marker on the page it returns after a successful login
LOGIN_SUCCESS_MARKER = "Login_Succeed"


class SaveTvAuthenticator:
    """
    Manages the login flow for the Save.TV API client.
    """

    def __init__(self, api_client: "SaveTvAPIClient"):
        """
        Initializes the authenticator.

        Args:
            api_client: A reference to the main SaveTvAPIClient instance.
        """
        self._api_client = api_client

    async def login(self, username: str, password: str) -> Session:
        """
        Logs in with a username and password.

        Args:
            username: The Save.TV username.
            password: The Save.TV password, in plain text.

        Returns:
            The session to use for all further requests.

        Raises:
            AuthenticationError: If the login is denied or fails.
        """
        log.info(f"Logging in as: {username}")

        login_payload = {
            "sUsername": username,
            "sPassword": password,
            "value": "Login",
        }

        try:
            result = await self._api_client.transport.request(
                self._api_client.url_for("login"),
                method="POST",
                data=login_payload,
            )
        except TransportError as e:
            raise AuthenticationError(f"Login request failed: {e}") from e

        if LOGIN_SUCCESS_MARKER not in result.body:
            raise AuthenticationError("Login denied.")

        cookies = result.headers.getall("Set-Cookie", [])
        if not cookies:
            raise AuthenticationError("Login succeeded but no session cookie was set.")

        # 'SNUUID=xxx; path=/' -> 'SNUUID=xxx'
        token = cookies[0].split(";")[0].strip()
        log.debug(f"Session cookie received: {token[:12]}...")
        return Session(token=token)
