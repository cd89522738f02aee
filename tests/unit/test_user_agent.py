"""Tests for the user_agent module."""

import sys
from collections.abc import Generator
from types import ModuleType
from unittest.mock import patch

import pytest

from cvp_inventory.user_agent import get_user_agent, get_version


@pytest.fixture(autouse=True)
def clear_caches() -> Generator[None, None, None]:
    """Clear the version and User-Agent caches around each test."""
    get_version.cache_clear()
    get_user_agent.cache_clear()
    yield
    get_version.cache_clear()
    get_user_agent.cache_clear()


class TestGetVersion:
    """Tests for get_version function."""

    def test_get_version_success(self) -> None:
        """Test successful version retrieval from __version__."""
        with patch("cvp_inventory.__version__", "0.1.0"):
            assert get_version() == "0.1.0"

    def test_get_version_missing_attribute(self) -> None:
        """Test that a package without __version__ reports 'unknown'."""
        with patch.dict(sys.modules, {"cvp_inventory": ModuleType("cvp_inventory")}):
            assert get_version() == "unknown"

    def test_get_version_cached(self) -> None:
        """Test that the first version read is kept."""
        with patch("cvp_inventory.__version__", "1.2.3"):
            assert get_version() == "1.2.3"
        with patch("cvp_inventory.__version__", "9.9.9"):
            assert get_version() == "1.2.3"


class TestGetUserAgent:
    """Tests for get_user_agent function."""

    def test_get_user_agent_with_version(self) -> None:
        """Test user agent string generation with version."""
        with patch("cvp_inventory.__version__", "0.1.0"):
            assert get_user_agent() == "cvp-inventory (version 0.1.0)"

    def test_get_user_agent_unknown_version(self) -> None:
        """Test user agent string when the version cannot be read."""
        with patch.dict(sys.modules, {"cvp_inventory": ModuleType("cvp_inventory")}):
            assert get_user_agent() == "cvp-inventory (version unknown)"
