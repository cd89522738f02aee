"""Authenticated synchronous HTTP transport for CloudVision Portal."""

import json
import logging
from typing import Protocol

import httpx

from cvp_inventory.libs.rest.config import CvpConnectionConfig
from cvp_inventory.libs.rest.exceptions import CvpAuthenticationError, CvpTransportError
from cvp_inventory.logging_security import unsafe_logging_enabled
from cvp_inventory.type_defs import QueryParams
from cvp_inventory.user_agent import get_user_agent

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login/authenticate.do"
LOGOUT_PATH = "/login/logout.do"


class Transport(Protocol):
    """What ``InventoryClient`` needs from a transport.

    Both methods return the raw response body and raise ``CvpTransportError``
    when the request could not be completed.
    """

    def get(self, path: str, query: QueryParams | None = None) -> bytes:
        """Send a GET request to *path* with optional query parameters."""
        ...

    def post(self, path: str, query: QueryParams | None = None, body: object = None) -> bytes:
        """Send a POST request to *path* with an optional JSON body."""
        ...


class CvpRestTransport:
    """httpx-backed transport that handles CVP authentication.

    With an ``api_token`` every request carries a bearer header. Otherwise the
    transport logs in on ``__enter__`` and relies on the ``session_id`` cookie,
    logging out again on ``__exit__``.
    """

    def __init__(self, config: CvpConnectionConfig):
        """Initialize the transport.

        Args:
            config: Server location and credentials
        """
        self.config = config
        self._client: httpx.Client | None = None
        logger.debug(
            "Initialized CVP transport",
            extra={"base_url": config.base_url, "api_root": config.api_root},
        )

    def __enter__(self) -> "CvpRestTransport":
        """Open the HTTP client and authenticate."""
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": get_user_agent(),
        }
        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"

        logger.debug("Opening HTTP client connection", extra={"url": self.config.full_url})
        self._client = httpx.Client(
            base_url=self.config.full_url,
            headers=headers,
            timeout=httpx.Timeout(self.config.timeout),
            verify=self.config.verify_tls,
        )
        if not self.config.uses_token:
            try:
                self.login()
            except CvpTransportError:
                self._close()
                raise
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Log out of a session login and close the HTTP client."""
        if self._client and not self.config.uses_token:
            try:
                self._request("POST", LOGOUT_PATH, None, {})
            except CvpTransportError as e:
                logger.warning("CVP logout failed", extra={"error": str(e)})
        self._close()

    def _close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None
            logger.debug("HTTP client connection closed")

    def login(self) -> None:
        """Open a CVP session with the configured username and password.

        Raises:
            CvpAuthenticationError: If CVP rejects the credentials
            CvpTransportError: If the login request fails
        """
        logger.debug("Logging in to CVP", extra={"username": self.config.username})
        try:
            raw = self._request(
                "POST",
                LOGIN_PATH,
                None,
                {"userId": self.config.username, "password": self.config.password},
            )
        except CvpAuthenticationError:
            logger.error("CVP login rejected", extra={"username": self.config.username})
            raise

        try:
            reply = json.loads(raw)
        except ValueError as e:
            raise CvpAuthenticationError(
                "Login response is not valid JSON", details=raw[:200].decode(errors="replace")
            ) from e

        if not isinstance(reply, dict) or reply.get("errorCode"):
            message = reply.get("errorMessage") if isinstance(reply, dict) else None
            logger.error(
                "CVP login failed",
                extra={"username": self.config.username, "error": message},
            )
            raise CvpAuthenticationError("Login failed", details=message or None)

        session_id = reply.get("sessionId")
        if session_id and self._client is not None and "session_id" not in self._client.cookies:
            self._client.cookies.set("session_id", session_id)
        logger.info("Logged in to CVP", extra={"username": self.config.username})

    def get(self, path: str, query: QueryParams | None = None) -> bytes:
        """Send a GET request and return the response body."""
        return self._request("GET", path, query, None)

    def post(self, path: str, query: QueryParams | None = None, body: object = None) -> bytes:
        """Send a POST request with *body* encoded as JSON and return the response body."""
        return self._request("POST", path, query, body)

    def _request(
        self, method: str, path: str, query: QueryParams | None, body: object
    ) -> bytes:
        if not self._client:
            raise CvpTransportError("Transport not initialized. Use it as a context manager.")

        if unsafe_logging_enabled():
            logger.debug(
                "Sending request to CVP",
                extra={"method": method, "path": path, "query": query, "body": body},
            )
        else:
            logger.debug(
                "Sending request to CVP",
                extra={
                    "method": method,
                    "path": path,
                    "query_keys": list(query) if query else [],
                    "has_body": body is not None,
                },
            )

        try:
            if body is None:
                response = self._client.request(method, path, params=query)
            else:
                response = self._client.request(method, path, params=query, json=body)
        except httpx.TimeoutException as e:
            logger.exception("Timeout talking to CVP", extra={"method": method, "path": path})
            raise CvpTransportError(f"Request timeout: {e}") from e
        except httpx.RequestError as e:
            logger.exception(
                "Network error talking to CVP", extra={"method": method, "path": path}
            )
            raise CvpTransportError(f"Network error: {e}") from e

        logger.debug(
            "Received response from CVP",
            extra={"status_code": response.status_code, "url": str(response.url)},
        )
        self._raise_for_status(response)
        return response.content

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Map HTTP error statuses to transport exceptions.

        Raises:
            CvpAuthenticationError: On 401/403
            CvpTransportError: On any other status >= 400
        """
        if response.status_code in (401, 403):
            logger.error(
                "Authentication failed",
                extra={"status_code": response.status_code, "url": str(response.url)},
            )
            raise CvpAuthenticationError(
                "Authentication failed", status_code=response.status_code
            )

        if response.status_code >= 400:
            raw_body = response.text
            logger.error(
                "CVP returned an HTTP error",
                extra={"status_code": response.status_code, "url": str(response.url)},
            )
            raise CvpTransportError(
                f"HTTP error from {response.url.path}",
                status_code=response.status_code,
                details=raw_body[:200] or None,
            )
