"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, Field, field_validator

# Higher RECORDINGFORMATID means better quality
QUALITY_MAP = {
    6: {"name": "H264 HD", "short": "HD", "color": "magenta"},
    5: {"name": "H264 SD high quality", "short": "SD", "color": "cyan"},
    4: {"name": "H264 SD mobile", "short": "Mobile", "color": "yellow"},
}


def get_quality_info(quality_id: int) -> dict[str, str]:
    """Gets all information for a given quality ID from the central map."""
    return QUALITY_MAP.get(
        quality_id,
        {"name": str(quality_id), "short": str(quality_id), "color": "white"},
    )


class DownloadConfig(BaseModel):
    """A validated configuration model for the application."""

    # Authentication
    username: str
    password: str = Field(..., repr=False)

    # Download Settings
    directory: str = "."
    remove: bool = False
    no_progress: bool = False

    # Service endpoints
    base_url: str = "https://www.save.tv"
    download_port: int = 80

    # Internal fields not loaded from INI file
    config_path: str = Field(..., repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("username", "password")
    @classmethod
    def validate_credentials(cls, v: str) -> str:
        """Ensures the Save.TV credentials are present."""
        if not v:
            raise ValueError(
                "Credentials are missing. Provide --user and --password or run"
                " 'savetv-dl init'."
            )
        return v

    @field_validator("directory")
    @classmethod
    def validate_directory(cls, v: str) -> str:
        """Ensures the target directory is not empty."""
        if not v:
            raise ValueError("Target directory cannot be empty.")
        return v

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Strips a trailing slash so endpoint paths can be appended."""
        if not v.startswith(("https://", "http://")):
            raise ValueError(f"Base URL must be an http(s) URL, but got: {v}")
        return v.rstrip("/")

    @field_validator("download_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError("Download port must be between 1 and 65535.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path", "base_url", "download_port"}
        return {key for key in cls.model_fields if key not in internal_fields}
