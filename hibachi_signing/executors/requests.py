"""Alternative executor for callers already standardized on requests."""

import logging
from typing import override

import requests

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


class RequestsHttpExecutor(HttpExecutor):
    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        api_key: str | None = None,
        session: requests.Session | None = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.session = session if session is not None else requests.Session()

    @override
    def send_authorized_request(
        self, method: str, path: str, json: Json | None = None
    ) -> HttpResponse:
        headers = authorized_headers(self.api_key)
        url = f"{self.api_url}{path}"
        data = serialize_request(json)
        try:
            response = self.session.request(method, url, headers=headers, data=data)
        except requests.Timeout as e:
            raise TransportTimeoutError(f"{method} {url} timed out") from e
        except requests.ConnectionError as e:
            raise HttpConnectionError(f"{method} {url} failed to connect", url=url) from e
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if not response.ok:
            log.warning("%s %s returned status %d", method, url, response.status_code)
        return HttpResponse(
            status=response.status_code,
            body=response.content,
            headers=dict(response.headers),
            url=url,
        )
