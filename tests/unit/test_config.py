"""Tests for cvp_inventory.config module."""

import logging

import pytest
from pydantic import ValidationError

from cvp_inventory.config import ENV_PREFIX, Settings, get_settings
from cvp_inventory.logging_security import REDACTED, install_filter


def test_defaults(token_env: dict[str, str]) -> None:
    """Only the base URL and a credential are required."""
    settings = Settings()

    assert settings.base_url == "https://cvp.example.test"
    assert settings.api_token == "test-token-123"
    assert settings.api_root == "/web"
    assert settings.username is None
    assert settings.password is None
    assert settings.timeout == 30.0
    assert settings.verify_tls is True


def test_optional_values_from_env(
    token_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
) -> None:
    """Timeout, TLS verification and API root are read and coerced from the environment."""
    monkeypatch.setenv(f"{ENV_PREFIX}TIMEOUT", "5")
    monkeypatch.setenv(f"{ENV_PREFIX}VERIFY_TLS", "false")
    monkeypatch.setenv(f"{ENV_PREFIX}API_ROOT", "/cvpservice")

    settings = Settings()

    assert settings.timeout == 5.0
    assert settings.verify_tls is False
    assert settings.api_root == "/cvpservice"


def test_env_vars_are_case_insensitive(
    clean_env: dict[str, str | None], monkeypatch: pytest.MonkeyPatch
) -> None:
    """Lower-case variable names are accepted."""
    monkeypatch.setenv(f"{ENV_PREFIX}base_url", "https://cvp.example.test")
    monkeypatch.setenv(f"{ENV_PREFIX}api_token", "tok")

    settings = Settings()

    assert settings.base_url == "https://cvp.example.test"
    assert settings.api_token == "tok"


def test_missing_base_url(clean_env: dict[str, str | None]) -> None:
    """Settings without a base URL are rejected."""
    with pytest.raises(ValidationError):
        Settings()


def test_base_url_requires_https(
    token_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
) -> None:
    """Plain HTTP is rejected and a trailing slash is stripped."""
    monkeypatch.setenv(f"{ENV_PREFIX}BASE_URL", "http://cvp.example.test")
    with pytest.raises(ValidationError, match="HTTPS"):
        Settings()

    monkeypatch.setenv(f"{ENV_PREFIX}BASE_URL", "https://cvp.example.test/")
    assert Settings().base_url == "https://cvp.example.test"


def test_timeout_must_be_positive(
    token_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
) -> None:
    """A non-positive timeout is rejected."""
    monkeypatch.setenv(f"{ENV_PREFIX}TIMEOUT", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_connection_config_session(
    clean_env: dict[str, str | None], monkeypatch: pytest.MonkeyPatch
) -> None:
    """Username and password flow through to the transport config."""
    monkeypatch.setenv(f"{ENV_PREFIX}BASE_URL", "https://cvp.example.test")
    monkeypatch.setenv(f"{ENV_PREFIX}USERNAME", "cvpadmin")
    monkeypatch.setenv(f"{ENV_PREFIX}PASSWORD", "s3cret-pw")

    config = Settings().connection_config()

    assert config.uses_token is False
    assert config.username == "cvpadmin"
    assert config.password == "s3cret-pw"
    assert config.full_url == "https://cvp.example.test/web"


def test_connection_config_without_credentials(
    clean_env: dict[str, str | None], monkeypatch: pytest.MonkeyPatch
) -> None:
    """Settings load without credentials, but the transport config cannot be built."""
    monkeypatch.setenv(f"{ENV_PREFIX}BASE_URL", "https://cvp.example.test")

    settings = Settings()

    with pytest.raises(ValidationError, match="api_token or both username and password"):
        settings.connection_config()


def test_get_settings_is_cached(token_env: dict[str, str]) -> None:
    """get_settings returns the same instance until the cache is cleared."""
    first = get_settings()
    assert get_settings() is first

    get_settings.cache_clear()
    assert get_settings() is not first


def test_get_settings_registers_secrets(
    clean_env: dict[str, str | None], monkeypatch: pytest.MonkeyPatch
) -> None:
    """Configured token and password are redacted from logs."""
    monkeypatch.setenv(f"{ENV_PREFIX}BASE_URL", "https://cvp.example.test")
    monkeypatch.setenv(f"{ENV_PREFIX}API_TOKEN", "token-to-hide")
    monkeypatch.setenv(f"{ENV_PREFIX}PASSWORD", "password-to-hide")

    secret_filter = install_filter()
    get_settings()

    assert secret_filter.redact("token-to-hide") == REDACTED
    assert secret_filter.redact("password-to-hide") == REDACTED


def test_get_settings_logs_failure(
    clean_env: dict[str, str | None], caplog: pytest.LogCaptureFixture
) -> None:
    """A configuration failure is logged as critical and re-raised."""
    with caplog.at_level(logging.CRITICAL, logger="cvp_inventory.config"):
        with pytest.raises(ValidationError):
            get_settings()

    assert any(
        record.levelno == logging.CRITICAL
        and "Failed to initialize application configuration" in record.message
        for record in caplog.records
    )
