"""Exceptions raised by the CVP REST transport."""


class CvpTransportError(Exception):
    """HTTP or network failure while talking to CloudVision Portal."""

    def __init__(
        self, message: str, status_code: int | None = None, details: str | None = None
    ) -> None:
        """Initialize the transport error.

        Args:
            message: The main error message.
            status_code: HTTP status code if the server answered.
            details: Optional additional details about the error.
        """
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        """Return a string representation of the error."""
        base_message = self.message
        if self.status_code:
            base_message = f"{base_message} (HTTP {self.status_code})"
        if self.details:
            base_message = f"{base_message}. Details: {self.details}"
        return base_message


class CvpAuthenticationError(CvpTransportError):
    """Login was rejected or the session/token is not authorized."""

    pass
