"""Canonical digest layouts, one per instruction kind.

Every layout is a fixed sequence of big-endian, fixed-width fields. Field
order and widths are part of the contract with the exchange's verifier:

==============  ===========================================================
Instruction     Fields (bytes)
==============  ===========================================================
Order           nonce(8) contractId(4) quantity(8) side(4) [price(8)] maxFeesPercent(8)
Cancel          orderId(8), or the order's nonce(8)
Cancel all      nonce(8)
Withdraw        assetId(4) quantity(8) maxFees(8) address(20)
Transfer        nonce(8) assetId(4) quantity(8) dstPublicKey(64) maxFeesPercent(8)
==============  ===========================================================

The price field is absent, not zero, for orders without a price.
"""

import logging

from hibachi_signing.encoding import (
    AMOUNT_WIDTH,
    ID_WIDTH,
    NONCE_WIDTH,
    ORDER_ID_WIDTH,
    SIDE_WIDTH,
    encode_address,
    encode_fixed_width,
)
from hibachi_signing.errors import UnsupportedAction, ValidationError
from hibachi_signing.fixed_point import (
    TRANSFER_QUANTITY_DECIMALS,
    fee_percent_to_integer,
    price_to_integer,
    quantity_to_integer,
)
from hibachi_signing.keys import decompress_public_key, normalize_public_key
from hibachi_signing.types import (
    BatchAction,
    CancelAction,
    CancelDigestInput,
    IntegralInput,
    ModifyAction,
    Nonce,
    OrderDigestInput,
    PlaceAction,
    TransferDigestInput,
    WithdrawDigestInput,
    integral_to_int,
)

log = logging.getLogger(__name__)


def serialize_order(order: OrderDigestInput) -> bytes:
    """Build the digest of a place or modify order instruction."""
    price_bytes = (
        b""
        if order.price is None
        else encode_fixed_width(
            price_to_integer(order.price, order.underlying_decimals), AMOUNT_WIDTH
        )
    )
    return (
        encode_fixed_width(order.nonce, NONCE_WIDTH)
        + encode_fixed_width(order.contract_id, ID_WIDTH)
        + encode_fixed_width(
            quantity_to_integer(order.quantity, order.underlying_decimals),
            AMOUNT_WIDTH,
        )
        + encode_fixed_width(order.side.digest_value, SIDE_WIDTH)
        + price_bytes
        + encode_fixed_width(
            fee_percent_to_integer(order.max_fees_percent), AMOUNT_WIDTH
        )
    )


def serialize_order_id(order_id: IntegralInput) -> bytes:
    """Build the digest of a cancel-by-id instruction.

    Order ids exceed 2^53, so decimal strings are accepted as well as ints.
    """
    return encode_fixed_width(integral_to_int(order_id), ORDER_ID_WIDTH)


def serialize_cancel(cancel: CancelDigestInput) -> bytes:
    return serialize_order_id(cancel.order_id)


def serialize_nonce(nonce: Nonce) -> bytes:
    """Build the digest of a cancel-by-nonce or cancel-all instruction."""
    return encode_fixed_width(integral_to_int(nonce), NONCE_WIDTH)


def serialize_withdraw(withdraw: WithdrawDigestInput) -> bytes:
    """Build the digest of a withdrawal.

    Quantity and max fees are both scaled with the asset's decimals. The
    address is copied as its 20 raw bytes.
    """
    return (
        encode_fixed_width(withdraw.asset_id, ID_WIDTH)
        + encode_fixed_width(
            quantity_to_integer(withdraw.quantity, withdraw.decimals), AMOUNT_WIDTH
        )
        + encode_fixed_width(
            quantity_to_integer(withdraw.max_fees, withdraw.decimals), AMOUNT_WIDTH
        )
        + encode_address(withdraw.withdrawal_address)
    )


def serialize_transfer(transfer: TransferDigestInput) -> bytes:
    """Build the digest of an internal transfer.

    The destination key is embedded as its 64-byte decompressed ``x || y``.
    """
    dst_public_key = decompress_public_key(
        normalize_public_key(transfer.dst_public_key)
    )
    return (
        encode_fixed_width(transfer.nonce, NONCE_WIDTH)
        + encode_fixed_width(transfer.asset_id, ID_WIDTH)
        + encode_fixed_width(
            quantity_to_integer(transfer.quantity, TRANSFER_QUANTITY_DECIMALS),
            AMOUNT_WIDTH,
        )
        + bytes.fromhex(dst_public_key)
        + encode_fixed_width(
            fee_percent_to_integer(transfer.max_fees_percent), AMOUNT_WIDTH
        )
    )


def order_digest_input(
    action: PlaceAction | ModifyAction, nonce: Nonce
) -> OrderDigestInput:
    """Map a place/modify batch action onto the order layout."""
    return OrderDigestInput(
        nonce=nonce,
        contract_id=action.contract.id,
        side=action.side,
        quantity=action.quantity,
        max_fees_percent=action.max_fees_percent,
        underlying_decimals=action.contract.underlying_decimals,
        price=action.price,
    )


def serialize_batch_action(action: BatchAction, nonce: Nonce) -> bytes:
    """Build the digest of one batch element.

    A batch adds no bytes of its own; each element uses the layout of its
    action. ``nonce`` is the element's nonce and is ignored for cancels.

    Raises:
        UnsupportedAction: If ``action`` is not a place, modify or cancel action
        ValidationError: If a cancel names neither an order id nor a nonce

    """
    if isinstance(action, (PlaceAction, ModifyAction)):
        return serialize_order(order_digest_input(action, nonce))
    if isinstance(action, CancelAction):
        if action.order_id is not None:
            return serialize_order_id(action.order_id)
        if action.nonce is not None:
            return serialize_nonce(action.nonce)
        raise ValidationError from ValueError(
            "either of 'order_id' or 'nonce' must be non-None"
        )
    raise UnsupportedAction(getattr(action, "action", type(action).__name__))
