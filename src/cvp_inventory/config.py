"""Application configuration loaded from environment variables.

``Settings`` reads the ``CVPINV_*`` variables and validates them at startup;
``Settings.connection_config()`` turns them into the programmatic
``CvpConnectionConfig`` the REST transport takes.
"""

import logging
from functools import lru_cache
from typing import ClassVar, Final

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cvp_inventory.libs.rest.config import CvpConnectionConfig

logger = logging.getLogger(__name__)

# Environment variable prefix constants
ENV_PREFIX_NAME: Final[str] = "CVPINV"
ENV_PREFIX_DELIMITER: Final[str] = "_"
ENV_PREFIX: Final[str] = f"{ENV_PREFIX_NAME}{ENV_PREFIX_DELIMITER}"

BASE_URL_ENV: Final[str] = f"{ENV_PREFIX}BASE_URL"
API_ROOT_ENV: Final[str] = f"{ENV_PREFIX}API_ROOT"
API_TOKEN_ENV: Final[str] = f"{ENV_PREFIX}API_TOKEN"
USERNAME_ENV: Final[str] = f"{ENV_PREFIX}USERNAME"
PASSWORD_ENV: Final[str] = f"{ENV_PREFIX}PASSWORD"
TIMEOUT_ENV: Final[str] = f"{ENV_PREFIX}TIMEOUT"
VERIFY_TLS_ENV: Final[str] = f"{ENV_PREFIX}VERIFY_TLS"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(
        ...,
        description="Origin of the CloudVision Portal server",
        validation_alias=BASE_URL_ENV,
    )
    api_root: str = Field(
        default="/web",
        description="Path prefix of the CVP REST services",
        validation_alias=API_ROOT_ENV,
    )
    api_token: str | None = Field(
        default=None,
        description="Service account token for bearer authentication",
        validation_alias=API_TOKEN_ENV,
    )
    username: str | None = Field(
        default=None,
        description="CVP user for session login",
        validation_alias=USERNAME_ENV,
    )
    password: str | None = Field(
        default=None,
        description="Password for session login",
        validation_alias=PASSWORD_ENV,
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds",
        validation_alias=TIMEOUT_ENV,
    )
    verify_tls: bool = Field(
        default=True,
        description="Verify the CVP server certificate",
        validation_alias=VERIFY_TLS_ENV,
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate that the base URL is an HTTPS origin."""
        if not v.startswith("https://"):
            raise ValueError("CVP base URL must use HTTPS (https://)")
        return v.rstrip("/")

    def connection_config(self) -> CvpConnectionConfig:
        """Build the transport configuration from these settings.

        Raises:
            ValidationError: If neither a token nor a username/password pair is set
        """
        return CvpConnectionConfig(
            base_url=self.base_url,
            api_root=self.api_root,
            api_token=self.api_token,
            username=self.username,
            password=self.password,
            timeout=self.timeout,
            verify_tls=self.verify_tls,
        )

    def model_post_init(self, __context: object, /) -> None:
        """Log configuration after initialization."""
        logger.info("CVP base URL configured", extra={"base_url": self.base_url})
        if self.api_token:
            logger.info("%sAPI_TOKEN is configured, using bearer authentication", ENV_PREFIX)
        elif self.username:
            logger.info("Using session login", extra={"username": self.username})


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: The application settings

    Raises:
        ValidationError: If required settings are missing or invalid
    """
    try:
        settings = Settings()
    except Exception:
        logger.critical("Failed to initialize application configuration", exc_info=True)
        raise

    from cvp_inventory.logging_security import register_secret

    register_secret(settings.api_token)
    register_secret(settings.password)
    return settings
