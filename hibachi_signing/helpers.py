"""Small utilities shared by the client, executors and examples.

JSON goes through orjson. Decimals are written as plain strings so no
precision is lost between the digest and the body that carries it.
"""

import logging
from dataclasses import asdict, is_dataclass
from decimal import Decimal
from functools import lru_cache
from time import time_ns
from typing import Any

import orjson
from prettyprinter import cpprint

from hibachi_signing.errors import DeserializationError, SerializationError
from hibachi_signing.types import Json, Nonce

log = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

DEFAULT_API_URL: str = "https://api.hibachi.xyz"


# ============================================================================
# CLIENT IDENTIFICATION
# ============================================================================


@lru_cache(maxsize=1)
def get_client_id() -> str:
    """Value of the ``Hibachi-Client`` header."""
    import hibachi_signing

    return f"HibachiPythonSigning/{hibachi_signing.__version__}"


# ============================================================================
# NONCES
# ============================================================================


def current_nonce() -> Nonce:
    """Millisecond timestamp used as a request nonce.

    Uniqueness across concurrent callers is the caller's concern.
    """
    return time_ns() // 1_000_000


# ============================================================================
# JSON
# ============================================================================


def decimal_as_str(obj: object) -> str:
    """orjson ``default`` hook: Decimals become fixed-point strings, anything else is refused."""
    if isinstance(obj, Decimal):
        return format(obj, "f")
    raise TypeError(f"{type(obj).__name__} is not JSON serializable")


def serialize_request(request: Json | None) -> bytes | None:
    """Encode a request body, or return None when there is no body.

    Raises:
        SerializationError: If a value in the body cannot be encoded

    """
    if request is None:
        return None
    try:
        return orjson.dumps(request, default=decimal_as_str)
    except orjson.JSONEncodeError as e:
        raise SerializationError(f"Cannot encode request body: {e}") from e


def deserialize_response(response_body: bytes, url: str) -> Any:
    """Decode a response body.

    Args:
        response_body: Raw bytes as received
        url: Where the body came from, for the error message

    Raises:
        DeserializationError: If the body is not valid JSON

    """
    try:
        return orjson.loads(response_body)
    except orjson.JSONDecodeError as e:
        raise DeserializationError(f"Invalid JSON from {url}: {e}") from e


# ============================================================================
# DISPLAY UTILITIES
# ============================================================================


def print_data(data: Any) -> None:
    """Pretty-print a body, response or dataclass (dataclasses print as dicts)."""
    cpprint(asdict(data) if is_dataclass(data) and not isinstance(data, type) else data)
