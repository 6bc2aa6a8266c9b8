"""Transport seam between the signing client and an HTTP library.

Executors receive a finished, signed request body and return what the
exchange answered. They never interpret the response.
"""

from abc import ABC, abstractmethod
from typing import Any

from hibachi_signing.errors import BadHttpStatus, MissingCredentialsError
from hibachi_signing.helpers import deserialize_response, get_client_id


class HttpResponse:
    """Raw response from the exchange: status, body bytes and headers."""

    status: int
    body: bytes
    headers: dict[str, str] | None
    url: str

    __slots__ = ("status", "body", "headers", "url")

    def __init__(
        self,
        *,
        status: int,
        body: bytes = b"",
        headers: dict[str, str] | None = None,
        url: str = "",
    ) -> None:
        self.status = status
        self.body = body
        self.headers = headers
        self.url = url

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Decode the body.

        Raises:
            DeserializationError: If the body is not valid JSON

        """
        return deserialize_response(self.body, self.url)

    def raise_for_status(self) -> None:
        """Raise :class:`BadHttpStatus` unless the status is 2XX.

        Raises:
            BadHttpStatus: With the status and the decoded body text

        """
        if not self.ok:
            raise BadHttpStatus(self.status, self.body.decode(errors="replace"))

    def __repr__(self) -> str:
        return f"HttpResponse(status={self.status}, url={self.url!r})"


class HttpExecutor(ABC):
    """Sends signed request bodies to the exchange."""

    api_key: str | None = None

    @abstractmethod
    def __init__(self, api_url: str, api_key: str | None):
        """Initialize the executor.

        Args:
            api_url: Base URL that request paths are appended to.
            api_key: Value of the Authorization header; required before sending.

        """
        ...

    @abstractmethod
    def send_authorized_request(
        self,
        method: str,
        path: str,
        json: Any | None = None,
    ) -> HttpResponse:
        """Send one signed request.

        Args:
            method: HTTP method, e.g. 'POST' or 'DELETE'.
            path: Endpoint path such as '/trade/order'.
            json: The signed request body.

        Returns:
            The exchange's response, whatever its status.

        """
        ...


def authorized_headers(api_key: str | None) -> dict[str, str]:
    """Headers sent with every signed request.

    Raises:
        MissingCredentialsError: If no API key is configured

    """
    if api_key is None:
        raise MissingCredentialsError("API key")
    return {
        "Authorization": api_key,
        "Content-Type": "application/json",
        "Accept": "application/json",
        "Hibachi-Client": get_client_id(),
    }
