"""Authenticated REST transport for CloudVision Portal."""

from cvp_inventory.libs.rest.config import CvpConnectionConfig
from cvp_inventory.libs.rest.exceptions import CvpAuthenticationError, CvpTransportError
from cvp_inventory.libs.rest.transport import CvpRestTransport, Transport

__all__ = [
    "CvpAuthenticationError",
    "CvpConnectionConfig",
    "CvpRestTransport",
    "CvpTransportError",
    "Transport",
]
