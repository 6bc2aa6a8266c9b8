"""Exceptions raised by hibachi_signing.

Everything derives from :class:`BaseError`, so callers can catch the whole
package with one clause, or pick a branch:

Exception Hierarchy
-------------------
BaseError
├── ExchangeError - the exchange answered, but not with a 2XX
│   └── BadHttpStatus
├── TransportError - the request or its response never made it intact
│   ├── HttpConnectionError
│   ├── TransportTimeoutError
│   ├── SerializationError
│   └── DeserializationError
└── ValidationError - bad input, nothing was signed
    ├── InvalidNumericInput
    ├── IntegerTooLarge
    ├── InvalidPublicKey
    ├── InvalidAddress
    ├── PublicKeyMismatch
    ├── UnsupportedAction
    └── MissingCredentialsError
"""


class BaseError(Exception):
    """Root of the hibachi_signing exceptions.

    Not raised directly; every raise site uses a subclass.
    """

    pass


# ============================================================================
# EXCHANGE ERROR
# ============================================================================


class ExchangeError(BaseError):
    """The exchange rejected a request.

    Executors hand responses back untouched, so these are only raised on
    request, through :meth:`HttpResponse.raise_for_status`.
    """

    pass


class BadHttpStatus(ExchangeError):
    """A response carried a non-2XX status."""

    status_code: int
    message: str

    def __init__(self, status_code: int, message: str):
        """Initialize a BadHttpStatus error.

        Args:
            status_code: Status of the rejected response.
            message: Body of the response, or a summary of it.

        """
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


# ============================================================================
# TRANSPORT ERROR
# ============================================================================


class TransportError(BaseError):
    """A request could not be delivered, or its answer could not be read.

    The signed body itself was valid. Whether to resend it (with a fresh
    nonce) is left to the caller; nothing here retries.
    """

    pass


class HttpConnectionError(TransportError):
    """The connection to the exchange failed or dropped."""

    def __init__(self, message: str, url: str | None = None):
        self.message = message
        self.url = url
        super().__init__(f"{message} (url: {url})" if url else message)


class TransportTimeoutError(TransportError):
    """The exchange did not answer in time."""

    def __init__(self, message: str, timeout_seconds: float | None = None):
        self.message = message
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"{message} (timeout: {timeout_seconds}s)" if timeout_seconds else message
        )


class SerializationError(TransportError):
    """A request body could not be encoded as JSON."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class DeserializationError(TransportError):
    """A response body is not valid JSON."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ============================================================================
# VALIDATION ERROR
# ============================================================================


class ValidationError(BaseError):
    """The caller supplied input that cannot be turned into a digest.

    Raised before anything is signed or sent; fixing the input fixes the error.
    """

    pass


class InvalidNumericInput(ValidationError):
    """A decimal value is unparseable, negative, NaN or infinite."""

    pass


class IntegerTooLarge(ValidationError):
    """An integer does not fit the fixed width of its digest field."""

    value: int
    width: int

    def __init__(self, value: int, width: int):
        """Initialize an IntegerTooLarge error.

        Args:
            value: The integer that failed to encode.
            width: The field width in bytes.

        """
        self.value = value
        self.width = width
        super().__init__(f"{value} does not fit in {width} bytes")


class InvalidPublicKey(ValidationError):
    """A public key does not decode to a point on secp256k1."""

    pass


class InvalidAddress(ValidationError):
    """A withdrawal address is not exactly 20 bytes of hex."""

    pass


class PublicKeyMismatch(ValidationError):
    """The configured private key does not belong to the configured public key."""

    pass


class UnsupportedAction(ValidationError):
    """A batch element is not a place, modify or cancel action."""

    def __init__(self, action: object):
        self.action = action
        super().__init__(f"Unknown action type: {action!r}")


class MissingCredentialsError(ValidationError):
    """A key, secret or account setting needed for the request is not configured."""

    def __init__(self, credential_type: str = "API key"):
        """Initialize a MissingCredentialsError.

        Args:
            credential_type: What is missing, e.g. "API key" or "public key".

        """
        self.credential_type = credential_type
        super().__init__(f"{credential_type} is not set")
