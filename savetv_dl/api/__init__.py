"""
Save.TV API Layer.

This package handles all communication with the Save.TV website.
"""

from .auth import SaveTvAuthenticator
from .client import SaveTvAPIClient
from .transport import HttpTransport, TransportResponse

__all__ = [
    "HttpTransport",
    "SaveTvAPIClient",
    "SaveTvAuthenticator",
    "TransportResponse",
]
