"""Default executor, backed by a synchronous ``httpx.Client``."""

import logging
from typing import override

import httpx

from hibachi_signing.errors import (
    HttpConnectionError,
    TransportError,
    TransportTimeoutError,
)
from hibachi_signing.executors.interface import (
    HttpExecutor,
    HttpResponse,
    authorized_headers,
)
from hibachi_signing.helpers import DEFAULT_API_URL, serialize_request
from hibachi_signing.types import Json

log = logging.getLogger(__name__)


class HttpxHttpExecutor(HttpExecutor):
    """Sends signed requests with httpx.

    Timeouts, proxies and test transports are configured on the client::

        executor = HttpxHttpExecutor(api_key="...", client=httpx.Client(timeout=5))

    """

    @override
    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        api_key: str | None = None,
        client: httpx.Client | None = None,
    ):
        """Initialize the executor.

        Args:
            api_url: Base URL of the Hibachi API.
            api_key: Authorization header value; sending fails without it.
            client: Preconfigured client; a default one is created otherwise.

        """
        self.api_url = api_url
        self.api_key = api_key
        self.client = client if client is not None else httpx.Client()

    @override
    def send_authorized_request(
        self,
        method: str,
        path: str,
        json: Json | None = None,
    ) -> HttpResponse:
        """Send a signed body to ``api_url + path``.

        Returns:
            The response as received; non-2XX statuses are logged, not raised.

        Raises:
            MissingCredentialsError: If the api_key is not set.
            SerializationError: If the body cannot be encoded.
            TransportTimeoutError: If the exchange does not answer in time.
            HttpConnectionError: If the connection fails.
            TransportError: For any other httpx failure.

        """
        headers = authorized_headers(self.api_key)
        url = f"{self.api_url}{path}"
        content = serialize_request(json)
        try:
            response = self.client.request(method, url, headers=headers, content=content)
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(f"{method} {url} timed out") from e
        except httpx.NetworkError as e:
            raise HttpConnectionError(f"{method} {url} failed to connect", url=url) from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if not response.is_success:
            log.warning("%s %s returned status %d", method, url, response.status_code)
        return HttpResponse(
            status=response.status_code,
            body=response.content,
            headers=dict(response.headers),
            url=url,
        )

    def __del__(self) -> None:
        client = getattr(self, "client", None)
        if client is not None:
            client.close()
