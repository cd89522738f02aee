"""Connection settings for the CVP REST transport."""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict
from typing_extensions import Self


class _ProgrammaticSettings(BaseSettings):
    """Base class to disable environment variable loading for settings."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Disable all settings sources except for programmatic initialization."""
        return (init_settings,)


class CvpConnectionConfig(_ProgrammaticSettings):
    """How to reach and authenticate against a CloudVision Portal server."""

    model_config = SettingsConfigDict(validate_assignment=True)

    base_url: str = Field(
        ...,
        description="Origin of the CVP server, e.g. https://cvp.example.com (must use HTTPS).",
    )
    api_root: str = Field(
        default="/web",
        description="Path prefix under which the CVP REST services are mounted.",
    )
    api_token: str | None = Field(
        default=None,
        description="Service account bearer token. Takes precedence over username/password.",
    )
    username: str | None = Field(default=None, description="CVP user for session login.")
    password: str | None = Field(default=None, description="Password for session login.")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds.")
    verify_tls: bool = Field(default=True, description="Verify the server TLS certificate.")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require HTTPS and strip trailing slashes.

        Raises:
            ValueError: If base_url is empty or doesn't use HTTPS
        """
        if not v:
            raise ValueError("base_url cannot be empty")

        if not v.startswith("https://"):
            raise ValueError("base_url must use HTTPS protocol")

        return v.rstrip("/")

    @field_validator("api_root")
    @classmethod
    def validate_api_root(cls, v: str) -> str:
        """Normalize api_root to a single leading slash and no trailing slash.

        An empty or "/" root means the services live directly under base_url.
        """
        stripped = v.strip("/")
        return f"/{stripped}" if stripped else ""

    @model_validator(mode="after")
    def validate_credentials(self) -> Self:
        """Require a bearer token or a complete username/password pair."""
        if self.api_token:
            return self
        if self.username and self.password:
            return self
        raise ValueError("either api_token or both username and password must be provided")

    @property
    def uses_token(self) -> bool:
        """Whether requests authenticate with a bearer token instead of a session."""
        return bool(self.api_token)

    @property
    def full_url(self) -> str:
        """Get the URL all service paths are relative to."""
        return f"{self.base_url}{self.api_root}"
