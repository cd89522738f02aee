"""Client for the CloudVision Portal inventory REST API."""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import TypeVar

from pydantic import ValidationError

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
    NonConnectedDeviceCount,
    SaveInventoryResponse,
    SaveResult,
)
from cvp_inventory.libs.rest.exceptions import CvpTransportError
from cvp_inventory.libs.rest.transport import Transport
from cvp_inventory.logging_security import unsafe_logging_enabled
from cvp_inventory.type_defs import JsonDict, QueryParams

logger = logging.getLogger(__name__)

INVENTORY_PATH = "/inventory/getInventory.do"
INVENTORY_CONFIGURATION_PATH = "/inventory/getInventoryConfiguration.do"
SEARCH_CONTAINERS_PATH = "/inventory/add/searchContainers.do"
NON_CONNECTED_COUNT_PATH = "/inventory/add/getNonConnectedDeviceCount.do"
SAVE_INVENTORY_PATH = "/inventory/v2/saveInventory.do"
ADD_TO_INVENTORY_PATH = "/inventory/add/addToInventory.do"
DELETE_DEVICES_PATH = "/inventory/deleteDevices.do"

# Query string CVP matches against devices sitting in the Undefined container
UNDEFINED_QUERY = "undefined"

ResponseT = TypeVar("ResponseT", bound=CvpResponse)


@contextmanager
def _operation(name: str) -> Iterator[None]:
    """Prefix the operation context of inventory errors raised inside the block."""
    try:
        yield
    except InventoryError as e:
        e.operation = f"{name}: {e.operation}" if e.operation else name
        raise


def _range_params(query: str, start_index: int, end_index: int) -> QueryParams:
    return {
        "queryparam": query,
        "startIndex": str(start_index),
        "endIndex": str(end_index),
    }


class InventoryClient:
    """Client for the CVP inventory endpoints.

    Every method is one request/response round trip (the convenience lookups
    chain two at most) over the supplied transport. Nothing is cached and
    nothing is retried. Lookups that find nothing return ``None`` or an empty
    list; only ``get_device_container`` treats a miss as an error.

    Example:
        >>> with CvpRestTransport(config) as transport:
        ...     client = InventoryClient(transport)
        ...     device = client.get_device_by_name("leaf1.example.com")
    """

    def __init__(self, transport: Transport):
        """Initialize the inventory client.

        Args:
            transport: Authenticated transport used for every request
        """
        self.transport = transport

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    def _get(self, operation: str, path: str, query: QueryParams | None = None) -> bytes:
        self._log_request(operation, "GET", path, query, None)
        try:
            return self.transport.get(path, query)
        except CvpTransportError as e:
            logger.exception(
                "Transport error calling CVP inventory API",
                extra={"operation": operation, "path": path},
            )
            raise InventoryTransportError(str(e), operation) from e

    def _post(
        self,
        operation: str,
        path: str,
        query: QueryParams | None = None,
        body: object = None,
    ) -> bytes:
        self._log_request(operation, "POST", path, query, body)
        try:
            return self.transport.post(path, query, body)
        except CvpTransportError as e:
            logger.exception(
                "Transport error calling CVP inventory API",
                extra={"operation": operation, "path": path},
            )
            raise InventoryTransportError(str(e), operation) from e

    @staticmethod
    def _log_request(
        operation: str, method: str, path: str, query: QueryParams | None, body: object
    ) -> None:
        if unsafe_logging_enabled():
            logger.debug(
                "Calling CVP inventory API",
                extra={
                    "operation": operation,
                    "method": method,
                    "path": path,
                    "query": query,
                    "body": body,
                },
            )
        else:
            logger.debug(
                "Calling CVP inventory API",
                extra={
                    "operation": operation,
                    "method": method,
                    "path": path,
                    "query_keys": list(query) if query else [],
                },
            )

    def _decode(self, operation: str, raw: bytes, model: type[ResponseT]) -> ResponseT:
        """Decode *raw* into *model* and check its error envelope.

        Raises:
            InventoryDecodeError: If the body is not JSON of the expected shape
            InventoryServerError: If the envelope carries an error
        """
        try:
            response = model.model_validate_json(raw)
        except ValidationError as e:
            logger.exception(
                "Failed to parse CVP inventory response",
                extra={
                    "operation": operation,
                    "model": model.__name__,
                    "response": raw[:500].decode(errors="replace"),
                },
            )
            raise InventoryDecodeError(
                f"Failed to parse response as {model.__name__}",
                operation,
                details=str(e),
            ) from e

        if response.error is not None:
            logger.error(
                "CVP inventory API returned an error",
                extra={
                    "operation": operation,
                    "error_code": response.error_code,
                    "error_message": response.error_message,
                },
            )
            raise InventoryServerError(
                response.error,
                operation,
                error_code=response.error_code,
                error_message=response.error_message,
            )
        return response

    def _check_write(self, operation: str, raw: bytes) -> None:
        """Check the reply to an add/delete call, which may have no body at all."""
        if raw.strip():
            self._decode(operation, raw, CvpResponse)

    # ------------------------------------------------------------------
    # Devices
    # ------------------------------------------------------------------

    def query_inventory(
        self, query: str = "", start_index: int = 0, end_index: int = 0
    ) -> InventoryPage:
        """Search the inventory.

        CVP matches *query* against device names, addresses and containers.
        A search that matches nothing returns an empty page, not an error.

        Args:
            query: Search string ("" matches everything)
            start_index: First result index, passed through verbatim
            end_index: Last result index, passed through verbatim (0 = all)

        Returns:
            The devices found plus a device-key to container-name mapping

        Raises:
            InventoryTransportError: If the request fails
            InventoryDecodeError: If the response cannot be parsed
            InventoryServerError: If CVP reports an error
        """
        operation = "query_inventory"
        raw = self._get(
            operation, INVENTORY_PATH, _range_params(query, start_index, end_index)
        )
        page = self._decode(operation, raw, InventoryPage)
        logger.debug(
            "Inventory query returned",
            extra={"device_count": len(page.net_element_list), "total": page.total},
        )
        return page

    def get_inventory_configuration(self, mac_address: str) -> DeviceConfig:
        """Fetch the running configuration of the device with *mac_address*.

        An unknown device yields empty output rather than an error.
        """
        operation = "get_inventory_configuration"
        raw = self._get(operation, INVENTORY_CONFIGURATION_PATH, {"netElementId": mac_address})
        return self._decode(operation, raw, DeviceConfig)

    def list_all_devices(self) -> list[Device]:
        """Return every device in the inventory, or an empty list."""
        with _operation("list_all_devices"):
            page = self.query_inventory("", 0, 0)
        return list(page.net_element_list)

    def get_device_by_name(self, fqdn: str) -> Device | None:
        """Return the device whose FQDN is exactly *fqdn*.

        The server-side search also matches partial names, so the results are
        filtered again for an exact match.
        """
        with _operation("get_device_by_name"):
            page = self.query_inventory(fqdn, 0, 0)

        for device in page.net_element_list:
            if device.fqdn == fqdn:
                return device
        logger.debug("Device not found by name", extra={"match_count": page.total})
        return None

    def list_devices_in_container(self, container_name: str) -> list[Device]:
        """Return the devices whose parent container is *container_name*.

        Resolves the container first, then lists all devices and filters them
        locally, so the cost grows with the size of the inventory. A missing
        container yields an empty list.
        """
        with _operation("list_devices_in_container"):
            container = self.get_container_by_name(container_name)
            if container is None:
                logger.debug("Container not found", extra={"container_name": container_name})
                return []
            devices = self.list_all_devices()

        return [device for device in devices if device.parent_container_id == container.key]

    def list_undefined_devices(self) -> list[Device]:
        """Return the devices sitting in the Undefined container."""
        with _operation("list_undefined_devices"):
            page = self.query_inventory(UNDEFINED_QUERY, 0, 0)

        return [
            device
            for device in page.net_element_list
            if device.parent_container_id == UNDEFINED_CONTAINER_ID
        ]

    def get_device_container(self, mac_address: str) -> Container | None:
        """Return the container holding the device with *mac_address*.

        Returns:
            The container, or ``None`` if the inventory search finds no devices

        Raises:
            InventoryNotFoundError: If the device is not mapped to any container
        """
        operation = "get_device_container"
        with _operation(operation):
            page = self.query_inventory(mac_address, 0, 0)
            if not page.net_element_list:
                return None

            device_key = next(
                (
                    device.key
                    for device in page.net_element_list
                    if device.system_mac_address == mac_address
                ),
                None,
            )
            container_name = page.container_list.get(device_key or "")
            if container_name is None:
                logger.warning(
                    "Device is not in any container", extra={"mac_address": mac_address}
                )
                raise InventoryNotFoundError(f"Device [{mac_address}] not of any container")

            return self.get_container_by_name(container_name)

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def query_containers(
        self, query: str = "", start_index: int = 0, end_index: int = 0
    ) -> ContainerPage:
        """Search containers by name.

        CVP never returns the Undefined container from this endpoint; callers
        that need it must handle it themselves.
        """
        operation = "query_containers"
        raw = self._get(
            operation, SEARCH_CONTAINERS_PATH, _range_params(query, start_index, end_index)
        )
        return self._decode(operation, raw, ContainerPage)

    def list_all_containers(self) -> list[Container]:
        """Return every container except Undefined."""
        with _operation("list_all_containers"):
            page = self.query_containers("", 0, 0)
        return list(page.data)

    def get_container_by_name(self, name: str) -> Container | None:
        """Return the container named exactly *name*, or ``None``."""
        with _operation("get_container_by_name"):
            page = self.query_containers(name, 0, 0)

        for container in page.data:
            if container.name == name:
                return container
        return None

    # ------------------------------------------------------------------
    # Inventory management
    # ------------------------------------------------------------------

    def count_non_connected_devices(self) -> int:
        """Return how many inventory devices are not connected to CVP."""
        operation = "count_non_connected_devices"
        raw = self._get(operation, NON_CONNECTED_COUNT_PATH)
        return self._decode(operation, raw, NonConnectedDeviceCount).data

    def save_inventory(self) -> SaveResult:
        """Commit devices added to the inventory and report their status counts."""
        operation = "save_inventory"
        raw = self._post(operation, SAVE_INVENTORY_PATH, body=[])
        result = self._decode(operation, raw, SaveInventoryResponse).data
        logger.info(
            "Inventory saved",
            extra={"total": result.total, "connected": result.connected},
        )
        return result

    def add_device(
        self, ip_address: str, parent_container_name: str, parent_container_id: str
    ) -> None:
        """Add the device at *ip_address* to an existing container.

        The parent container is not looked up first; passing a container that
        does not exist is the caller's mistake.
        """
        operation = "add_device"
        body: JsonDict = {
            "data": [
                {
                    "containerName": parent_container_name,
                    "containerId": parent_container_id,
                    "containerType": "Existing",
                    "ipAddress": ip_address,
                    "containerList": [],
                }
            ]
        }
        raw = self._post(
            operation, ADD_TO_INVENTORY_PATH, {"startIndex": "0", "endIndex": "0"}, body
        )
        self._check_write(operation, raw)
        logger.info("Device added to inventory", extra={"container": parent_container_name})

    def remove_device(self, mac_address: str) -> None:
        """Remove a single device from the inventory."""
        with _operation("remove_device"):
            self.remove_devices([mac_address])

    def remove_devices(self, mac_addresses: Sequence[str]) -> None:
        """Remove the devices with the given system MAC addresses from the inventory."""
        operation = "remove_devices"
        raw = self._post(operation, DELETE_DEVICES_PATH, body={"data": list(mac_addresses)})
        self._check_write(operation, raw)
        logger.info("Devices removed from inventory", extra={"count": len(mac_addresses)})
