"""Signed request bodies handed to the transport layer.

Each builder serializes the canonical digest for its instruction, signs it
and attaches the signature to the JSON body the exchange expects. Builders
return the body together with the :class:`SignedPayload`, so callers can
audit exactly which bytes were signed.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from hibachi_signing.digest import (
    serialize_batch_action,
    serialize_nonce,
    serialize_order,
    serialize_order_id,
    serialize_transfer,
    serialize_withdraw,
)
from hibachi_signing.errors import UnsupportedAction, ValidationError
from hibachi_signing.keys import (
    decompress_public_key,
    normalize_public_key,
    strip_hex_prefix,
)
from hibachi_signing.signers import Signer
from hibachi_signing.types import (
    BatchAction,
    CancelAction,
    ContractSpec,
    JsonObject,
    ModifyAction,
    Nonce,
    NumericInput,
    OrderDigestInput,
    OrderId,
    OrderType,
    PlaceAction,
    Side,
    SignedPayload,
    TransferDigestInput,
    WithdrawDigestInput,
    full_precision_string,
)

log = logging.getLogger(__name__)


# ============================================================================
# ORDERS
# ============================================================================


def _place_fields(
    contract: ContractSpec,
    side: Side,
    quantity: NumericInput,
    max_fees_percent: NumericInput,
    price: NumericInput | None,
    nonce: Nonce,
    signature: str,
) -> JsonObject:
    request: JsonObject = {
        "nonce": nonce,
        "symbol": contract.symbol,
        "quantity": full_precision_string(quantity),
        "orderType": OrderType.MARKET.value,
        "side": side.normalized().value,
        "maxFeesPercent": full_precision_string(max_fees_percent),
        "signature": signature,
    }
    if price is not None:
        request["orderType"] = OrderType.LIMIT.value
        request["price"] = full_precision_string(price)
    return request


def _modify_fields(
    order_id: OrderId,
    quantity: NumericInput,
    max_fees_percent: NumericInput,
    price: NumericInput | None,
    nonce: Nonce,
    signature: str,
) -> JsonObject:
    # side is signed over but never sent
    request: JsonObject = {
        "orderId": str(order_id),
        "nonce": nonce,
        "updatedQuantity": full_precision_string(quantity),
        "quantity": full_precision_string(quantity),
        "maxFeesPercent": full_precision_string(max_fees_percent),
        "signature": signature,
    }
    if price is not None:
        request["updatedPrice"] = full_precision_string(price)
        request["price"] = full_precision_string(price)
    return request


def _cancel_fields(
    order_id: OrderId | None, nonce: Nonce | None, signature: str
) -> JsonObject:
    request: JsonObject = {"signature": signature}
    if order_id is not None:
        request["orderId"] = str(order_id)
    else:
        request["nonce"] = str(nonce)
    return request


def order_request(
    signer: Signer,
    account_id: int,
    contract: ContractSpec,
    side: Side,
    quantity: NumericInput,
    max_fees_percent: NumericInput,
    nonce: Nonce,
    price: NumericInput | None = None,
) -> tuple[JsonObject, SignedPayload]:
    """Build a signed place-order body.

    Args:
        signer: Signing backend of the account
        account_id: The account placing the order
        contract: Contract metadata (id, symbol, underlying decimals)
        side: Order side; BUY/SELL are normalized to BID/ASK
        quantity: Order quantity
        max_fees_percent: Maximum fees as a percentage
        nonce: Unique nonce for this order
        price: Limit price, or None for a market order

    Returns:
        tuple: The request body and the signed digest

    """
    signed = signer.sign(
        serialize_order(
            OrderDigestInput(
                nonce=nonce,
                contract_id=contract.id,
                side=side,
                quantity=quantity,
                max_fees_percent=max_fees_percent,
                underlying_decimals=contract.underlying_decimals,
                price=price,
            )
        )
    )
    request = {"accountId": account_id} | _place_fields(
        contract, side, quantity, max_fees_percent, price, nonce, signed.signature
    )
    return request, signed


def update_order_request(
    signer: Signer,
    account_id: int,
    order_id: OrderId,
    contract: ContractSpec,
    side: Side,
    quantity: NumericInput,
    max_fees_percent: NumericInput,
    nonce: Nonce,
    price: NumericInput | None = None,
) -> tuple[JsonObject, SignedPayload]:
    """Build a signed modify-order body.

    The digest reuses the order layout with the new quantity and price. The
    order id does not identify the side, so the caller passes the side of
    the existing order.
    """
    signed = signer.sign(
        serialize_order(
            OrderDigestInput(
                nonce=nonce,
                contract_id=contract.id,
                side=side,
                quantity=quantity,
                max_fees_percent=max_fees_percent,
                underlying_decimals=contract.underlying_decimals,
                price=price,
            )
        )
    )
    request = {"accountId": account_id} | _modify_fields(
        order_id, quantity, max_fees_percent, price, nonce, signed.signature
    )
    return request, signed


def cancel_order_request(
    signer: Signer,
    account_id: int,
    order_id: OrderId | None = None,
    nonce: Nonce | None = None,
) -> tuple[JsonObject, SignedPayload]:
    """Build a signed cancel body, by order id or by the nonce the order was placed with.

    Raises:
        ValidationError: If neither order_id nor nonce is provided

    """
    if order_id is not None:
        digest = serialize_order_id(order_id)
    elif nonce is not None:
        digest = serialize_nonce(nonce)
    else:
        raise ValidationError from ValueError(
            "either of 'order_id' or 'nonce' must be non-None"
        )
    signed = signer.sign(digest)
    request = {"accountId": account_id} | _cancel_fields(
        order_id, nonce, signed.signature
    )
    return request, signed


def cancel_all_orders_request(
    signer: Signer, account_id: int, nonce: Nonce
) -> tuple[JsonObject, SignedPayload]:
    """Build a signed cancel-all body; only the nonce is signed."""
    signed = signer.sign(serialize_nonce(nonce))
    request: JsonObject = {
        "accountId": account_id,
        "nonce": nonce,
        "signature": signed.signature,
    }
    return request, signed


# ============================================================================
# CAPITAL
# ============================================================================


def withdraw_request(
    signer: Signer,
    account_id: int,
    coin: str,
    asset_id: int,
    quantity: NumericInput,
    max_fees: NumericInput,
    withdraw_address: str,
    decimals: int,
    network: str = "arbitrum",
) -> tuple[JsonObject, SignedPayload]:
    """Build a signed withdrawal body.

    Args:
        signer: Signing backend of the account
        account_id: The account withdrawing
        coin: The coin to withdraw (e.g., "USDT")
        asset_id: Exchange id of the coin
        quantity: Amount to withdraw
        max_fees: Maximum fees, in units of the coin
        withdraw_address: Destination address, 20 bytes of hex with or without 0x
        decimals: The coin's decimal precision
        network: The blockchain network to withdraw on (default: "arbitrum")

    """
    address = strip_hex_prefix(withdraw_address)
    signed = signer.sign(
        serialize_withdraw(
            WithdrawDigestInput(
                asset_id=asset_id,
                quantity=quantity,
                max_fees=max_fees,
                withdrawal_address=address,
                decimals=decimals,
            )
        )
    )
    request: JsonObject = {
        "accountId": account_id,
        "coin": coin,
        "network": network,
        "withdrawAddress": address,
        "quantity": full_precision_string(quantity),
        "maxFees": full_precision_string(max_fees),
        "signature": signed.signature,
    }
    return request, signed


def transfer_request(
    signer: Signer,
    account_id: int,
    coin: str,
    asset_id: int,
    quantity: NumericInput,
    max_fees_percent: NumericInput,
    dst_public_key: str,
    nonce: Nonce,
) -> tuple[JsonObject, SignedPayload]:
    """Build a signed transfer body.

    ``dst_public_key`` may be compressed or uncompressed hex, with or
    without 0x; the body carries the 64-byte decompressed form.
    """
    compressed = normalize_public_key(dst_public_key)
    signed = signer.sign(
        serialize_transfer(
            TransferDigestInput(
                nonce=nonce,
                asset_id=asset_id,
                quantity=quantity,
                max_fees_percent=max_fees_percent,
                dst_public_key=compressed,
            )
        )
    )
    request: JsonObject = {
        "accountId": account_id,
        "coin": coin,
        "fees": full_precision_string(max_fees_percent),
        "nonce": nonce,
        "quantity": full_precision_string(quantity),
        "dstPublicKey": decompress_public_key(compressed),
        "signature": signed.signature,
    }
    return request, signed


# ============================================================================
# BATCH
# ============================================================================


def _batch_entry(
    signer: Signer, action: BatchAction, nonce: Nonce
) -> tuple[JsonObject, SignedPayload]:
    signed = signer.sign(serialize_batch_action(action, nonce))
    if isinstance(action, PlaceAction):
        request = _place_fields(
            action.contract,
            action.side,
            action.quantity,
            action.max_fees_percent,
            action.price,
            nonce,
            signed.signature,
        )
    elif isinstance(action, ModifyAction):
        request = _modify_fields(
            action.order_id,
            action.quantity,
            action.max_fees_percent,
            action.price,
            nonce,
            signed.signature,
        )
    else:
        request = _cancel_fields(action.order_id, action.nonce, signed.signature)
    request["action"] = action.action
    return request, signed


def batch_request(
    signer: Signer,
    account_id: int,
    actions: Sequence[BatchAction],
    base_nonce: Nonce,
) -> tuple[JsonObject, list[SignedPayload]]:
    """Build a signed batch body; every element is signed on its own.

    Place and modify actions without an explicit nonce get ``base_nonce + index``,
    bumped past the previous place/modify nonce when an explicit one sits above it.
    Cancel actions are signed over the targeted order id or nonce.

    Raises:
        ValidationError: If explicit place/modify nonces are not strictly increasing
        UnsupportedAction: If an element is not a place, modify or cancel action

    """
    entries: list[JsonObject] = []
    signatures: list[SignedPayload] = []
    previous: Nonce | None = None
    for index, action in enumerate(actions):
        nonce = base_nonce + index
        if isinstance(action, (PlaceAction, ModifyAction)):
            if action.nonce is None:
                if previous is not None:
                    nonce = max(nonce, previous + 1)
            elif previous is not None and action.nonce <= previous:
                raise ValidationError(
                    f"Batch nonces must be strictly increasing, got {action.nonce} after {previous}"
                )
            else:
                nonce = action.nonce
            previous = nonce
        entry, signed = _batch_entry(signer, action, nonce)
        log.debug("Batch element %d (%s) uses nonce %d", index, action.action, nonce)
        entries.append(entry)
        signatures.append(signed)

    request: JsonObject = {"accountId": account_id, "orders": entries}  # type: ignore
    return request, signatures


def batch_action_from_dict(
    record: Mapping[str, Any], contracts: Mapping[str, ContractSpec]
) -> BatchAction:
    """Parse a loosely typed batch record into a typed action.

    Records use the exchange's field names: ``action``, ``symbol``, ``side``,
    ``quantity`` or ``updatedQuantity``, ``price`` or ``updatedPrice``,
    ``maxFeesPercent``, ``orderId`` and ``nonce``.

    Args:
        record: The record to parse
        contracts: Contract metadata keyed by symbol

    Raises:
        UnsupportedAction: If the action tag is not place, modify or cancel
        ValidationError: If a required field is missing or the symbol is unknown

    """
    action = record.get("action")
    if action not in ("place", "modify", "cancel"):
        raise UnsupportedAction(action)

    try:
        if action == "cancel":
            order_id = record.get("orderId")
            nonce = record.get("nonce")
            return CancelAction(
                order_id=int(order_id) if order_id is not None else None,
                nonce=int(nonce) if nonce is not None else None,
            )

        symbol = record["symbol"]
        if symbol not in contracts:
            raise ValidationError(f"Unknown contract {symbol!r}")
        contract = contracts[symbol]
        nonce = record.get("nonce")
        common: dict[str, Any] = {
            "contract": contract,
            "side": Side(record["side"]),
            "max_fees_percent": record["maxFeesPercent"],
            "nonce": int(nonce) if nonce is not None else None,
        }
        if action == "place":
            return PlaceAction(
                quantity=record["quantity"], price=record.get("price"), **common
            )
        return ModifyAction(
            order_id=int(record["orderId"]),
            quantity=(
                record["updatedQuantity"]
                if "updatedQuantity" in record
                else record["quantity"]
            ),
            price=record.get("updatedPrice", record.get("price")),
            **common,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid {action} record {dict(record)}") from e
