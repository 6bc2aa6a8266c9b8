from importlib.metadata import PackageNotFoundError, version

from hibachi_signing.client import HibachiSigningClient
from hibachi_signing.digest import (
    serialize_batch_action,
    serialize_cancel,
    serialize_nonce,
    serialize_order,
    serialize_order_id,
    serialize_transfer,
    serialize_withdraw,
)
from hibachi_signing.encoding import encode_fixed_width
from hibachi_signing.errors import (
    BadHttpStatus,
    BaseError,
    ExchangeError,
    IntegerTooLarge,
    InvalidAddress,
    InvalidNumericInput,
    InvalidPublicKey,
    MissingCredentialsError,
    PublicKeyMismatch,
    TransportError,
    UnsupportedAction,
    ValidationError,
)
from hibachi_signing.fixed_point import (
    FEE_PERCENT_MULTIPLIER,
    PRICE_MULTIPLIER,
    fee_percent_to_integer,
    price_to_integer,
    quantity_to_integer,
)
from hibachi_signing.keys import compress_public_key, decompress_public_key
from hibachi_signing.signers import (
    EcdsaSigner,
    HmacSigner,
    Signer,
    signer_from_private_key,
    verify_ecdsa_signature,
)
from hibachi_signing.types import (
    BatchAction,
    CancelAction,
    CancelDigestInput,
    ContractSpec,
    ModifyAction,
    OrderDigestInput,
    OrderType,
    PlaceAction,
    Side,
    SignedPayload,
    TransferDigestInput,
    WithdrawDigestInput,
)


def get_version() -> str:
    try:
        return version("hibachi-signing")
    except PackageNotFoundError:
        return "unknown"


__version__ = get_version()

__all__ = [
    "BadHttpStatus",
    "BaseError",
    "BatchAction",
    "CancelAction",
    "CancelDigestInput",
    "ContractSpec",
    "EcdsaSigner",
    "ExchangeError",
    "FEE_PERCENT_MULTIPLIER",
    "HibachiSigningClient",
    "HmacSigner",
    "IntegerTooLarge",
    "InvalidAddress",
    "InvalidNumericInput",
    "InvalidPublicKey",
    "MissingCredentialsError",
    "ModifyAction",
    "OrderDigestInput",
    "OrderType",
    "PRICE_MULTIPLIER",
    "PlaceAction",
    "PublicKeyMismatch",
    "Side",
    "SignedPayload",
    "Signer",
    "TransferDigestInput",
    "TransportError",
    "UnsupportedAction",
    "ValidationError",
    "WithdrawDigestInput",
    "compress_public_key",
    "decompress_public_key",
    "encode_fixed_width",
    "fee_percent_to_integer",
    "get_version",
    "price_to_integer",
    "quantity_to_integer",
    "serialize_batch_action",
    "serialize_cancel",
    "serialize_nonce",
    "serialize_order",
    "serialize_order_id",
    "serialize_transfer",
    "serialize_withdraw",
    "signer_from_private_key",
    "verify_ecdsa_signature",
]
