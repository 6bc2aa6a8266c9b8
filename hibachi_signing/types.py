"""Type definitions for the Hibachi signing package.

This module contains type aliases, enums and the immutable value objects that
flow through the digest and signing pipeline, organized into logical sections.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, ClassVar, Self, TypeAlias, overload

from hibachi_signing.errors import InvalidNumericInput

# ============================================================================
# TYPE ALIASES
# ============================================================================

# Core ID types. Nonces are millisecond timestamps, unique and increasing per
# signing key; the caller guarantees that, the digest treats them as opaque.
Nonce: TypeAlias = int
OrderId: TypeAlias = int

# JSON type hierarchy
JsonObject: TypeAlias = dict[str, "JsonValue"]
JsonArray: TypeAlias = list["JsonValue"]
JsonValue: TypeAlias = None | bool | int | float | str | JsonObject | JsonArray
Json: TypeAlias = JsonObject

# Accepted inputs
IntegralInput: TypeAlias = str | int
NumericInput: TypeAlias = Decimal | str | float | int


# ============================================================================
# NUMERIC CONVERSION UTILITIES
# ============================================================================

DECIMAL_PATTERN = re.compile(r"^[0-9]+(\.[0-9]+)?$")


@overload
def numeric_to_decimal(n: NumericInput) -> Decimal: ...


@overload
def numeric_to_decimal(n: None) -> None: ...


def numeric_to_decimal(n: NumericInput | None) -> Decimal | None:
    """Convert various numeric input types to a non-negative finite Decimal, or None if input is None.

    Strings must be plain decimals (``"100004.0"``, ``"0.00001"``); signs and
    exponents are rejected. Floats go through ``str`` so ``0.1`` stays ``0.1``.

    Raises:
        InvalidNumericInput: If the value cannot be parsed, is not finite, or is negative.

    """
    if n is None:
        return n
    if isinstance(n, bool):
        raise InvalidNumericInput(f"Invalid numeric input type {n} - {type(n)}")
    if isinstance(n, str):
        if not DECIMAL_PATTERN.match(n):
            raise InvalidNumericInput(f"Invalid numeric input {n!r}")
        return Decimal(n)
    if isinstance(n, (int, float)):
        try:
            n = Decimal(str(n))
        except InvalidOperation as e:
            raise InvalidNumericInput(f"Invalid numeric input {n!r}") from e
    if not isinstance(n, Decimal):
        raise InvalidNumericInput(f"Invalid numeric input type {n} - {type(n)}")
    if not n.is_finite():
        raise InvalidNumericInput(f"Numeric input must be finite, got {n}")
    if n.is_signed() and n != 0:
        raise InvalidNumericInput(f"Numeric input must not be negative, got {n}")
    return n


def full_precision_string(n: NumericInput) -> str:
    """Convert a numeric input to a full precision string representation."""
    return format(numeric_to_decimal(n), "f")


def integral_to_int(n: IntegralInput) -> int:
    """Convert an integer or decimal-digit string (such as an order id) to int."""
    if isinstance(n, bool):
        raise InvalidNumericInput(f"Invalid integral input type {n} - {type(n)}")
    if isinstance(n, str):
        if not (n.isascii() and n.isdigit()):
            raise InvalidNumericInput(f"Invalid integral input {n!r}")
        return int(n)
    if isinstance(n, int):
        if n < 0:
            raise InvalidNumericInput(f"Integral input must not be negative, got {n}")
        return n
    raise InvalidNumericInput(f"Invalid integral input type {n} - {type(n)}")


# ============================================================================
# CORE ENUMS
# ============================================================================


class Side(Enum):
    """Order side (buy/sell)."""

    BID = "BID"
    ASK = "ASK"
    SELL = "SELL"
    BUY = "BUY"

    def normalized(self) -> "Side":
        """Map BUY/SELL onto the exchange's BID/ASK."""
        if self is Side.BUY:
            return Side.BID
        if self is Side.SELL:
            return Side.ASK
        return self

    @property
    def digest_value(self) -> int:
        """Value written into the 4-byte side field: ASK=0, BID=1."""
        return 0 if self.normalized() is Side.ASK else 1


class OrderType(Enum):
    """Order type."""

    LIMIT = "LIMIT"
    MARKET = "MARKET"


# ============================================================================
# MARKET METADATA
# ============================================================================


@dataclass(frozen=True)
class ContractSpec:
    """The slice of a future contract's metadata needed to build order digests."""

    id: int
    symbol: str
    underlying_decimals: int

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Self:
        """Build from a ``futureContracts`` entry of the exchange-info response."""
        return cls(
            id=int(data["id"]),
            symbol=str(data["symbol"]),
            underlying_decimals=int(data["underlyingDecimals"]),
        )


# ============================================================================
# DIGEST INPUTS
# ============================================================================


@dataclass(frozen=True)
class OrderDigestInput:
    """Fields covered by a place or modify order signature.

    ``price`` is None for MARKET orders, in which case the price field is
    left out of the digest entirely.
    """

    nonce: Nonce
    contract_id: int
    side: Side
    quantity: NumericInput
    max_fees_percent: NumericInput
    underlying_decimals: int
    price: NumericInput | None = None

    @property
    def order_type(self) -> OrderType:
        return OrderType.MARKET if self.price is None else OrderType.LIMIT


@dataclass(frozen=True)
class CancelDigestInput:
    """Cancel-by-id request."""

    order_id: IntegralInput


@dataclass(frozen=True)
class WithdrawDigestInput:
    """Withdrawal request. Quantity and fees are scaled with the asset's decimals."""

    asset_id: int
    quantity: NumericInput
    max_fees: NumericInput
    withdrawal_address: str
    decimals: int


@dataclass(frozen=True)
class TransferDigestInput:
    """Internal transfer to the account owning ``dst_public_key`` (33-byte compressed hex)."""

    nonce: Nonce
    asset_id: int
    quantity: NumericInput
    max_fees_percent: NumericInput
    dst_public_key: str


# ============================================================================
# SIGNING OUTPUT
# ============================================================================


@dataclass(frozen=True)
class SignedPayload:
    """A hex signature together with the exact digest bytes it covers."""

    signature: str
    digest: bytes = field(repr=False)

    @property
    def digest_hex(self) -> str:
        return self.digest.hex()


# ============================================================================
# BATCH ACTIONS
# ============================================================================


@dataclass(frozen=True)
class PlaceAction:
    """Place a new order inside a batch."""

    action: ClassVar[str] = "place"

    contract: ContractSpec
    side: Side
    quantity: NumericInput
    max_fees_percent: NumericInput
    price: NumericInput | None = None
    nonce: Nonce | None = None


@dataclass(frozen=True)
class ModifyAction:
    """Modify an existing order inside a batch.

    The order id does not carry the side, so the caller supplies it; it is
    part of the digest but not of the request body.
    """

    action: ClassVar[str] = "modify"

    order_id: OrderId
    contract: ContractSpec
    side: Side
    quantity: NumericInput
    max_fees_percent: NumericInput
    price: NumericInput | None = None
    nonce: Nonce | None = None


@dataclass(frozen=True)
class CancelAction:
    """Cancel an order inside a batch, by order id or by the order's nonce."""

    action: ClassVar[str] = "cancel"

    order_id: OrderId | None = None
    nonce: Nonce | None = None


BatchAction: TypeAlias = PlaceAction | ModifyAction | CancelAction
