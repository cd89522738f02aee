"""Pytest configuration and shared fixtures for the cvp-inventory test suite."""

import os
from collections.abc import Callable, Generator

import pytest

from cvp_inventory.config import ENV_PREFIX
from cvp_inventory.libs.rest.config import CvpConnectionConfig

BASE_URL = "https://cvp.example.test"
API_URL = f"{BASE_URL}/web"

CONFIG_ENV_VARS = [
    f"{ENV_PREFIX}BASE_URL",
    f"{ENV_PREFIX}API_ROOT",
    f"{ENV_PREFIX}API_TOKEN",
    f"{ENV_PREFIX}USERNAME",
    f"{ENV_PREFIX}PASSWORD",
    f"{ENV_PREFIX}TIMEOUT",
    f"{ENV_PREFIX}VERIFY_TLS",
    f"{ENV_PREFIX}DEBUG_UNSAFE_LOGGING",
]


@pytest.fixture
def clean_env() -> Generator[dict[str, str | None], None, None]:
    """Clear the CVPINV_* variables for the duration of a test, then restore them."""
    original_env = {var: os.environ.get(var) for var in CONFIG_ENV_VARS}
    for var in CONFIG_ENV_VARS:
        os.environ.pop(var, None)

    yield original_env

    for var, value in original_env.items():
        if value is not None:
            os.environ[var] = value
        else:
            os.environ.pop(var, None)


@pytest.fixture
def token_env(clean_env: dict[str, str | None]) -> dict[str, str]:
    """Provide a valid token-based environment configuration."""
    config = {
        f"{ENV_PREFIX}BASE_URL": BASE_URL,
        f"{ENV_PREFIX}API_TOKEN": "test-token-123",
    }
    os.environ.update(config)
    return config


@pytest.fixture
def token_config() -> CvpConnectionConfig:
    """Connection config using bearer-token authentication."""
    return CvpConnectionConfig(base_url=BASE_URL, api_token="test-token-123")


@pytest.fixture
def session_config() -> CvpConnectionConfig:
    """Connection config using username/password session login."""
    return CvpConnectionConfig(base_url=BASE_URL, username="cvpadmin", password="s3cret-pw")


@pytest.fixture
def api_url() -> Callable[[str], str]:
    """Build the absolute URL of a CVP service path."""

    def _api_url(path: str) -> str:
        return f"{API_URL}{path}"

    return _api_url


@pytest.fixture(autouse=True)
def reset_caches() -> Generator[None, None, None]:
    """Reset cached settings between tests."""
    yield

    from cvp_inventory.config import get_settings

    get_settings.cache_clear()


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (no external dependencies)"
    )
