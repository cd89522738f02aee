"""Redaction of CVP credentials from log output.

CVP passwords and bearer tokens end up in request headers and login payloads,
so anything that logs a request risks leaking them. ``install_filter`` attaches
a ``SecretFilter`` to every handler of the root logger; ``register_secret`` adds
a value to redact. Secrets registered before installation are queued.

Example:
    >>> from cvp_inventory.logging_security import install_filter, register_secret
    >>> logging.basicConfig(level=logging.INFO)
    >>> install_filter()
    >>> register_secret("s3cret")
    >>> logging.info("password=s3cret")  # password=[REDACTED]
"""

import logging
import os
import threading
from typing import Final

REDACTED: Final[str] = "[REDACTED]"


class SecretFilter(logging.Filter):
    """Replace registered secrets in rendered messages and tracebacks."""

    def __init__(self) -> None:
        """Create a filter with no registered secrets."""
        super().__init__()
        self._secrets: set[str] = set()
        self._lock = threading.Lock()

    def register_secret(self, secret: str | None) -> None:
        """Add *secret* to the redaction set. Empty values are ignored."""
        if secret:
            with self._lock:
                self._secrets.add(secret)

    def redact(self, text: str) -> str:
        """Return *text* with every registered secret replaced."""
        with self._lock:
            secrets = sorted(self._secrets, key=len, reverse=True)
        for secret in secrets:
            text = text.replace(secret, REDACTED)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        """Render the record's message once, redact it, and drop the args."""
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            message = str(record.msg)
        record.msg = self.redact(message)
        record.args = None

        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = self.redact(record.exc_text)
        return True


_filter: SecretFilter | None = None
_pending_secrets: list[str] = []


def install_filter() -> SecretFilter:
    """Attach the shared ``SecretFilter`` to the root logger and its handlers.

    Safe to call more than once; handlers added since the previous call get
    the filter too.

    Returns:
        The shared filter instance.
    """
    global _filter
    if _filter is None:
        _filter = SecretFilter()
        for secret in _pending_secrets:
            _filter.register_secret(secret)
        _pending_secrets.clear()

    root = logging.getLogger()
    if _filter not in root.filters:
        root.addFilter(_filter)
    for handler in root.handlers:
        if _filter not in handler.filters:
            handler.addFilter(_filter)
    return _filter


def register_secret(secret: str | None) -> None:
    """Redact *secret* from all log output, now or once the filter is installed."""
    if not secret:
        return
    if _filter is not None:
        _filter.register_secret(secret)
    else:
        _pending_secrets.append(secret)


UNSAFE_LOGGING_ENV: Final[str] = "CVPINV_DEBUG_UNSAFE_LOGGING"


def unsafe_logging_enabled() -> bool:
    """Whether debug logs may include query values and request payloads."""
    return os.environ.get(UNSAFE_LOGGING_ENV) == "1"
