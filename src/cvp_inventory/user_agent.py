"""User-Agent header for requests sent to CloudVision Portal."""

import logging
from functools import cache

logger = logging.getLogger(__name__)


@cache
def get_version() -> str:
    """Return the installed cvp_inventory version, or "unknown"."""
    try:
        from cvp_inventory import __version__
    except (ImportError, AttributeError):
        logger.debug("Could not read __version__ from cvp_inventory")
        return "unknown"
    return __version__


@cache
def get_user_agent() -> str:
    """Build the User-Agent value, e.g. ``cvp-inventory (version 0.1.0)``."""
    user_agent = f"cvp-inventory (version {get_version()})"
    logger.debug("Built User-Agent string", extra={"user_agent": user_agent})
    return user_agent
