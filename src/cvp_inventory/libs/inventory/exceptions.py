"""Exceptions for inventory operations."""


class InventoryError(Exception):
    """Base exception for all inventory-related errors.

    ``operation`` names the client method the error surfaced from, so that an
    error raised deep inside ``get_device_container`` still reads as such.
    """

    def __init__(
        self, message: str, operation: str | None = None, details: str | None = None
    ) -> None:
        """Initialize the exception.

        Args:
            message: The main error message.
            operation: Name of the client operation that failed.
            details: Optional additional details about the error.
        """
        self.message = message
        self.operation = operation
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        """Return a string representation of the error."""
        base_message = f"{self.operation}: {self.message}" if self.operation else self.message
        if self.details:
            return f"{base_message}. Details: {self.details}"
        return base_message


class InventoryTransportError(InventoryError):
    """The request could not be sent or the server answered with an HTTP error."""

    pass


class InventoryDecodeError(InventoryError):
    """The response body is not JSON or does not have the expected shape."""

    pass


class InventoryServerError(InventoryError):
    """The response decoded cleanly but its error envelope reports a failure."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        error_code: str | None = None,
        error_message: str | None = None,
    ) -> None:
        """Initialize the server error.

        Args:
            message: The main error message.
            operation: Name of the client operation that failed.
            error_code: ``errorCode`` from the response body.
            error_message: ``errorMessage`` from the response body.
        """
        self.error_code = error_code
        self.error_message = error_message
        super().__init__(message, operation)


class InventoryNotFoundError(InventoryError):
    """A lookup that must resolve did not, e.g. a device with no container."""

    pass
