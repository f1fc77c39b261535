"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class SaveTvError(Exception):
    """Base exception for all application-specific errors."""


class AuthenticationError(SaveTvError):
    """Raised when the Save.TV login is denied or returns no session cookie."""


class CatalogError(SaveTvError):
    """Raised when the recording list cannot be fetched or understood."""


class NoSessionError(SaveTvError):
    """Raised when an authenticated call is attempted without a session."""

    def __init__(self, message: str = "No auth cookie set, did you login?"):
        super().__init__(message)


class NoQualityError(SaveTvError):
    """Raised when a recording has no ad-free download option."""


class ResolveError(SaveTvError):
    """Raised when a download URL cannot be obtained for a recording."""


class NoUrlError(ResolveError):
    """Raised when Save.TV does not answer a download request with a URL."""


class TransportError(SaveTvError):
    """Raised for connection failures and incomplete responses."""


class MissingFilenameError(TransportError):
    """
    Raised when a video download response does not name the file to save.
    """


class LedgerError(SaveTvError):
    """Raised when the download archive cannot be read or updated."""


class RemoveError(SaveTvError):
    """Raised when a recording could not be deleted from Save.TV."""


class ConfigurationError(SaveTvError):
    """Raised for issues related to configuration loading or validation."""
