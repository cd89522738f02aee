"""Pydantic models for the CVP inventory API."""

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

UNDEFINED_CONTAINER_ID = "undefined_container"


class CvpResponse(BaseModel):
    """Error envelope shared by every CVP response body.

    CVP reports most failures with HTTP 200 and an ``errorCode`` in the body,
    so a decoded response is only usable once ``error`` is ``None``.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    error_code: str | None = Field(None, alias="errorCode")
    error_message: str | None = Field(None, alias="errorMessage")

    @field_validator("error_code", mode="before")
    @classmethod
    def stringify_error_code(cls, v: object) -> object:
        """Accept numeric error codes; some CVP services send them unquoted."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def error(self) -> str | None:
        """Describe the server-side error, or ``None`` if the response is clean."""
        if not self.error_code and not self.error_message:
            return None
        if self.error_code and self.error_message:
            return f"{self.error_message} (errorCode {self.error_code})"
        return self.error_message or f"errorCode {self.error_code}"


class PendingAction(BaseModel):
    """A queued change-control action (CVP ``tempAction``) for a device or container."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    cc_id: str | None = Field(None, alias="ccId")
    session_id: str | None = Field(None, alias="sessionId")
    container_key: str | None = Field(None, alias="containerKey")
    task_id: int | None = Field(None, alias="taskId")
    info: str | None = None
    info_preview: str | None = Field(None, alias="infoPreview")
    note: str | None = None
    action: str | None = None
    node_type: str | None = Field(None, alias="nodeType")
    node_id: str | None = Field(None, alias="nodeId")
    to_id: str | None = Field(None, alias="toId")
    from_id: str | None = Field(None, alias="fromId")
    node_name: str | None = Field(None, alias="nodeName")
    to_name: str | None = Field(None, alias="toName")
    from_name: str | None = Field(None, alias="fromName")
    child_tasks: list[str] | None = Field(None, alias="childTasks")
    parent_task: str | None = Field(None, alias="parentTask")
    old_node_name: str | None = Field(None, alias="oldNodeName")
    to_id_type: str | None = Field(None, alias="toIdType")

    # Configlet and node relationships
    configlet_list: list[str] | None = Field(None, alias="configletList")
    ignore_configlet_list: list[str] | None = Field(None, alias="ignoreConfigletList")
    configlet_names_list: list[str] | None = Field(None, alias="configletNamesList")
    ignore_configlet_names_list: list[str] | None = Field(None, alias="ignoreConfigletNamesList")
    node_list: list[str] | None = Field(None, alias="nodeList")
    ignore_node_list: list[str] | None = Field(None, alias="ignoreNodeList")
    node_names_list: list[str] | None = Field(None, alias="nodeNamesList")
    ignore_node_names_list: list[str] | None = Field(None, alias="ignoreNodeNamesList")
    node_ip_address: str | None = Field(None, alias="nodeIpAddress")
    node_target_ip_address: str | None = Field(None, alias="nodeTargetIpAddress")
    key: str | None = None
    ignore_node_id: str | None = Field(None, alias="ignoreNodeId")
    ignore_node_name: str | None = Field(None, alias="ignoreNodeName")
    image_bundle_id: str | None = Field(None, alias="imageBundleId")
    mode: str | None = None
    timestamp: int | None = None
    configlet_builder_list: list[str] | None = Field(None, alias="configletBuilderList")
    configlet_builder_names_list: list[str] | None = Field(
        None, alias="configletBuilderNamesList"
    )
    ignore_configlet_builder_list: list[str] | None = Field(
        None, alias="ignoreConfigletBuilderList"
    )
    ignore_configlet_builder_names_list: list[str] | None = Field(
        None, alias="ignoreConfigletBuilderNamesList"
    )
    page_type: str | None = Field(None, alias="pageType")
    via_container: bool | None = Field(None, alias="viaContainer")
    best_image_container_id: str | None = Field(None, alias="bestImageContainerId")
    user: str | None = None
    factory_id: int | None = Field(None, alias="factoryId")
    id: int | None = None


class Device(BaseModel):
    """A managed network element (CVP ``NetElement``) as reported by inventory queries."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    # Identity
    ip_address: str | None = Field(None, alias="ipAddress")
    system_mac_address: str | None = Field(None, alias="systemMacAddress")
    key: str | None = None
    serial_number: str | None = Field(None, alias="serialNumber")
    fqdn: str | None = None

    # Platform
    model_name: str | None = Field(None, alias="modelName")
    type: str | None = None
    version: str | None = None
    internal_version: str | None = Field(None, alias="internalVersion")
    internal_build_id: str | None = Field(None, alias="internalBuildId")
    architecture: str | None = None
    hardware_revision: str | None = Field(None, alias="hardwareRevision")

    # Runtime
    mem_total: int | None = Field(None, alias="memTotal")
    mem_free: int | None = Field(None, alias="memFree")
    bootup_time_stamp: float | None = Field(None, alias="bootupTimeStamp")
    last_sync_up: int | None = Field(None, alias="lastSyncUp")

    # Status and compliance
    ztp_mode: str | None = Field(None, alias="ztpMode")
    is_danz_enabled: str | None = Field(None, alias="isDANZEnabled")
    is_mlag_enabled: str | None = Field(None, alias="isMLAGEnabled")
    compliance_indication: str | None = Field(None, alias="complianceIndication")
    compliance_code: str | None = Field(None, alias="complianceCode")
    un_authorized: bool | None = Field(None, alias="unAuthorized")
    device_info: str | None = Field(None, alias="deviceInfo")
    device_status: str | None = Field(None, alias="deviceStatus")

    # Membership
    parent_container_id: str | None = Field(None, alias="parentContainerId")
    container_name: str | None = Field(None, alias="containerName")

    # Pending work
    task_id_list: list[dict[str, object]] | None = Field(None, alias="taskIdList")
    temp_action: list[PendingAction] | None = Field(None, alias="tempAction")


class Container(BaseModel):
    """A node of the CVP container hierarchy."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    child_container_id: bool | None = Field(None, alias="childContainerId")
    factory_id: int | None = Field(None, alias="factoryId")
    id: int | None = None
    key: str | None = None
    name: str | None = None
    parent_id: str | None = Field(None, alias="parentId")
    type: str | None = None
    user_id: str | None = Field(None, alias="userId")


class InventoryPage(CvpResponse):
    """Result of an inventory query.

    ``container_list`` maps a device key to the name of the container holding it.
    """

    total: int = 0
    container_list: dict[str, str] = Field(default_factory=dict, alias="containerList")
    net_element_list: list[Device] = Field(default_factory=list, alias="netElementList")

    @field_validator("total", "container_list", "net_element_list", mode="before")
    @classmethod
    def null_as_empty(cls, v: object, info: ValidationInfo) -> object:
        """Treat JSON null like the empty value CVP returns for a failed search."""
        if v is not None:
            return v
        if info.field_name == "total":
            return 0
        if info.field_name == "container_list":
            return {}
        return []


class ContainerPage(CvpResponse):
    """Result of a container search. Never includes the Undefined container."""

    total: int = 0
    data: list[Container] = Field(default_factory=list)

    @field_validator("total", "data", mode="before")
    @classmethod
    def null_as_empty(cls, v: object, info: ValidationInfo) -> object:
        """Treat JSON null like the empty value CVP returns for a failed search."""
        if v is None:
            return 0 if info.field_name == "total" else []
        return v


class DeviceConfig(CvpResponse):
    """Running configuration and warnings for one device."""

    output: str | None = None
    warnings: list[str] | None = None


class NonConnectedDeviceCount(CvpResponse):
    """Count of devices that are not streaming to CVP."""

    data: int = 0


class SaveResult(BaseModel):
    """Per-status counts reported by a save of the inventory.

    CVP reports every count as a string; they are kept as received.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    total: str | None = None
    upgrade_required: str | None = Field(None, alias="Upgrade required")
    invalid_container: str | None = Field(None, alias="Invalid-Container")
    connected: str | None = Field(None, alias="Connected")
    registration_in_process_by_other_user: str | None = Field(
        None, alias="Registration in process by other user"
    )
    duplicate: str | None = Field(None, alias="Duplicate")
    retry: str | None = Field(None, alias="Retry")
    unauthorized_access: str | None = Field(None, alias="Unauthorized access")
    message: str | None = None
    connecting: str | None = Field(None, alias="Connecting")


class SaveInventoryResponse(CvpResponse):
    """Envelope around ``SaveResult``."""

    data: SaveResult = Field(default_factory=SaveResult)
