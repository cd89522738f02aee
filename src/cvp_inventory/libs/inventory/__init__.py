"""Inventory library for CloudVision Portal devices and containers."""

from cvp_inventory.libs.inventory.client import InventoryClient
from cvp_inventory.libs.inventory.exceptions import (
    InventoryDecodeError,
    InventoryError,
    InventoryNotFoundError,
    InventoryServerError,
    InventoryTransportError,
)
from cvp_inventory.libs.inventory.models import (
    UNDEFINED_CONTAINER_ID,
    Container,
    ContainerPage,
    CvpResponse,
    Device,
    DeviceConfig,
    InventoryPage,
    PendingAction,
    SaveResult,
)

__all__ = [
    "UNDEFINED_CONTAINER_ID",
    "Container",
    "ContainerPage",
    "CvpResponse",
    "Device",
    "DeviceConfig",
    "InventoryClient",
    "InventoryDecodeError",
    "InventoryError",
    "InventoryNotFoundError",
    "InventoryPage",
    "InventoryServerError",
    "InventoryTransportError",
    "PendingAction",
    "SaveResult",
]
