import pytest

from hibachi_signing.digest import (
    serialize_nonce,
    serialize_order,
    serialize_order_id,
)
from hibachi_signing.envelopes import (
    batch_action_from_dict,
    batch_request,
    cancel_all_orders_request,
    cancel_order_request,
    order_request,
    transfer_request,
    update_order_request,
    withdraw_request,
)
from hibachi_signing.errors import UnsupportedAction, ValidationError
from hibachi_signing.signers import EcdsaSigner, HmacSigner, verify_ecdsa_signature
from hibachi_signing.types import (
    CancelAction,
    ModifyAction,
    OrderDigestInput,
    PlaceAction,
    Side,
)
from tests.unit.conftest import (
    BTC_CONTRACT,
    COMPRESSED_PUBLIC_KEY_TWO,
    ETH_CONTRACT,
    PUBLIC_KEY_ONE,
    PUBLIC_KEY_TWO,
)

ACCOUNT_ID = 128
NONCE = 1_700_000_000_000
ORDER_ID = 590413829735318528

CONTRACTS = {c.symbol: c for c in (BTC_CONTRACT, ETH_CONTRACT)}


def test_order_request_limit(ecdsa_signer: EcdsaSigner):
    request, signed = order_request(
        ecdsa_signer,
        ACCOUNT_ID,
        BTC_CONTRACT,
        Side.SELL,
        "0.00001",
        "0.045",
        nonce=NONCE,
        price="100004.0",
    )

    assert request == {
        "accountId": ACCOUNT_ID,
        "nonce": NONCE,
        "symbol": "BTC/USDT-P",
        "quantity": "0.00001",
        "orderType": "LIMIT",
        "side": "ASK",
        "price": "100004.0",
        "maxFeesPercent": "0.045",
        "signature": signed.signature,
    }
    assert signed.digest_hex == (
        "0000018bcfe568000000000200000000000003e800000000"
        "000003e80a3d70a3000000000044aa20"
    )
    assert verify_ecdsa_signature(signed, PUBLIC_KEY_ONE)


def test_order_request_market(hmac_signer: HmacSigner):
    request, signed = order_request(
        hmac_signer, ACCOUNT_ID, BTC_CONTRACT, Side.BUY, 0.5, "0.0005", nonce=NONCE
    )

    assert request["orderType"] == "MARKET"
    assert request["side"] == "BID"
    assert request["quantity"] == "0.5"
    assert "price" not in request
    assert len(signed.digest) == 32
    assert request["signature"] == signed.signature


def test_update_order_request_signs_side_but_omits_it(ecdsa_signer: EcdsaSigner):
    request, signed = update_order_request(
        ecdsa_signer,
        ACCOUNT_ID,
        ORDER_ID,
        BTC_CONTRACT,
        Side.BID,
        "0.002",
        "0.045",
        nonce=NONCE,
        price="60000",
    )

    assert request == {
        "accountId": ACCOUNT_ID,
        "orderId": str(ORDER_ID),
        "nonce": NONCE,
        "updatedQuantity": "0.002",
        "quantity": "0.002",
        "updatedPrice": "60000",
        "price": "60000",
        "maxFeesPercent": "0.045",
        "signature": signed.signature,
    }
    assert signed.digest == serialize_order(
        OrderDigestInput(
            nonce=NONCE,
            contract_id=BTC_CONTRACT.id,
            side=Side.BID,
            quantity="0.002",
            max_fees_percent="0.045",
            underlying_decimals=BTC_CONTRACT.underlying_decimals,
            price="60000",
        )
    )


def test_cancel_order_request(hmac_signer: HmacSigner):
    by_id, signed_by_id = cancel_order_request(
        hmac_signer, ACCOUNT_ID, order_id=ORDER_ID
    )
    by_nonce, signed_by_nonce = cancel_order_request(
        hmac_signer, ACCOUNT_ID, nonce=NONCE
    )

    assert by_id == {
        "accountId": ACCOUNT_ID,
        "orderId": str(ORDER_ID),
        "signature": signed_by_id.signature,
    }
    assert signed_by_id.digest == serialize_order_id(ORDER_ID)
    assert by_nonce == {
        "accountId": ACCOUNT_ID,
        "nonce": str(NONCE),
        "signature": signed_by_nonce.signature,
    }
    assert signed_by_nonce.digest == serialize_nonce(NONCE)


def test_cancel_order_request_requires_target(hmac_signer: HmacSigner):
    with pytest.raises(ValidationError):
        cancel_order_request(hmac_signer, ACCOUNT_ID)
    assert hmac_signer.last_signed is None


def test_cancel_all_orders_request(hmac_signer: HmacSigner):
    request, signed = cancel_all_orders_request(hmac_signer, ACCOUNT_ID, NONCE)

    assert request == {
        "accountId": ACCOUNT_ID,
        "nonce": NONCE,
        "signature": signed.signature,
    }
    assert signed.digest_hex == "0000018bcfe56800"


def test_withdraw_request(ecdsa_signer: EcdsaSigner):
    address = "5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"
    request, signed = withdraw_request(
        ecdsa_signer,
        ACCOUNT_ID,
        "USDT",
        1,
        "1",
        "0.5",
        "0x" + address,
        decimals=6,
    )

    assert request == {
        "accountId": ACCOUNT_ID,
        "coin": "USDT",
        "network": "arbitrum",
        "withdrawAddress": address,
        "quantity": "1",
        "maxFees": "0.5",
        "signature": signed.signature,
    }
    assert signed.digest_hex == (
        "00000001" "00000000000f4240" "000000000007a120" + address
    )


def test_transfer_request(ecdsa_signer: EcdsaSigner):
    request, signed = transfer_request(
        ecdsa_signer,
        ACCOUNT_ID,
        "USDT",
        1,
        "2.5",
        "0.001",
        "0x" + COMPRESSED_PUBLIC_KEY_TWO,
        NONCE,
    )

    assert request == {
        "accountId": ACCOUNT_ID,
        "coin": "USDT",
        "fees": "0.001",
        "nonce": NONCE,
        "quantity": "2.5",
        "dstPublicKey": PUBLIC_KEY_TWO,
        "signature": signed.signature,
    }
    assert PUBLIC_KEY_TWO in signed.digest_hex


def test_batch_request(ecdsa_signer: EcdsaSigner):
    actions = [
        PlaceAction(BTC_CONTRACT, Side.ASK, "0.00001", "0.045", price="100004.0"),
        ModifyAction(ORDER_ID, BTC_CONTRACT, Side.BID, "0.002", "0.045"),
        CancelAction(order_id=ORDER_ID),
        CancelAction(nonce=NONCE - 5),
    ]

    request, signatures = batch_request(ecdsa_signer, ACCOUNT_ID, actions, NONCE)

    assert request["accountId"] == ACCOUNT_ID
    orders = request["orders"]
    assert [order["action"] for order in orders] == [
        "place",
        "modify",
        "cancel",
        "cancel",
    ]
    assert [order["signature"] for order in orders] == [
        s.signature for s in signatures
    ]
    assert orders[0]["nonce"] == NONCE
    assert orders[1]["nonce"] == NONCE + 1
    assert "side" not in orders[1]
    assert orders[2] == {
        "action": "cancel",
        "orderId": str(ORDER_ID),
        "signature": signatures[2].signature,
    }
    assert orders[3]["nonce"] == str(NONCE - 5)

    assert signatures[0].digest_hex.startswith("0000018bcfe56800")
    assert signatures[1].digest_hex.startswith("0000018bcfe56801")
    assert signatures[2].digest == serialize_order_id(ORDER_ID)
    assert signatures[3].digest == serialize_nonce(NONCE - 5)
    assert all(verify_ecdsa_signature(s, PUBLIC_KEY_ONE) for s in signatures)


def test_batch_request_explicit_nonces(hmac_signer: HmacSigner):
    actions = [
        PlaceAction(BTC_CONTRACT, Side.ASK, "1", "0.045", nonce=NONCE + 10),
        CancelAction(order_id=ORDER_ID),
        PlaceAction(ETH_CONTRACT, Side.BID, "1", "0.045", nonce=NONCE + 20),
    ]

    request, _ = batch_request(hmac_signer, ACCOUNT_ID, actions, NONCE)

    assert request["orders"][0]["nonce"] == NONCE + 10
    assert request["orders"][2]["nonce"] == NONCE + 20


def test_batch_request_mixed_nonces(hmac_signer: HmacSigner):
    """Assigned nonces continue above an earlier explicit one."""
    actions = [
        PlaceAction(BTC_CONTRACT, Side.ASK, "1", "0.045", nonce=NONCE + 10),
        PlaceAction(BTC_CONTRACT, Side.ASK, "1", "0.045"),
        CancelAction(order_id=ORDER_ID),
        ModifyAction(ORDER_ID, BTC_CONTRACT, Side.BID, "2", "0.045"),
    ]

    request, signatures = batch_request(hmac_signer, ACCOUNT_ID, actions, NONCE)

    orders = request["orders"]
    assert [orders[i]["nonce"] for i in (0, 1, 3)] == [
        NONCE + 10,
        NONCE + 11,
        NONCE + 12,
    ]
    assert signatures[1].digest[:8] == serialize_nonce(NONCE + 11)
    assert signatures[3].digest[:8] == serialize_nonce(NONCE + 12)


def test_batch_request_implicit_nonce_keeps_base_offset(hmac_signer: HmacSigner):
    actions = [
        PlaceAction(BTC_CONTRACT, Side.ASK, "1", "0.045", nonce=NONCE - 10),
        PlaceAction(BTC_CONTRACT, Side.ASK, "1", "0.045"),
    ]

    request, _ = batch_request(hmac_signer, ACCOUNT_ID, actions, NONCE)

    assert request["orders"][1]["nonce"] == NONCE + 1


def test_batch_request_rejects_non_increasing_nonces(hmac_signer: HmacSigner):
    actions = [
        PlaceAction(BTC_CONTRACT, Side.ASK, "1", "0.045", nonce=NONCE + 10),
        PlaceAction(BTC_CONTRACT, Side.ASK, "1", "0.045", nonce=NONCE + 5),
    ]

    with pytest.raises(ValidationError):
        batch_request(hmac_signer, ACCOUNT_ID, actions, NONCE)


def test_batch_request_unknown_action(hmac_signer: HmacSigner):
    with pytest.raises(UnsupportedAction):
        batch_request(hmac_signer, ACCOUNT_ID, [object()], NONCE)  # type: ignore[list-item]


def test_batch_request_empty(hmac_signer: HmacSigner):
    request, signatures = batch_request(hmac_signer, ACCOUNT_ID, [], NONCE)

    assert request == {"accountId": ACCOUNT_ID, "orders": []}
    assert signatures == []


def test_batch_action_from_dict():
    place = batch_action_from_dict(
        {
            "action": "place",
            "symbol": "BTC/USDT-P",
            "side": "BID",
            "quantity": "0.001",
            "price": "60000",
            "maxFeesPercent": "0.045",
        },
        CONTRACTS,
    )
    modify = batch_action_from_dict(
        {
            "action": "modify",
            "orderId": str(ORDER_ID),
            "symbol": "ETH/USDT-P",
            "side": "ASK",
            "updatedQuantity": "2",
            "updatedPrice": "3000.5",
            "maxFeesPercent": "0.045",
            "nonce": NONCE,
        },
        CONTRACTS,
    )
    cancel = batch_action_from_dict(
        {"action": "cancel", "orderId": str(ORDER_ID)}, CONTRACTS
    )

    assert place == PlaceAction(
        BTC_CONTRACT, Side.BID, "0.001", "0.045", price="60000"
    )
    assert modify == ModifyAction(
        ORDER_ID, ETH_CONTRACT, Side.ASK, "2", "0.045", price="3000.5", nonce=NONCE
    )
    assert cancel == CancelAction(order_id=ORDER_ID)


@pytest.mark.parametrize(
    "record,error",
    [
        ({"action": "liquidate"}, UnsupportedAction),
        ({}, UnsupportedAction),
        (
            {
                "action": "place",
                "symbol": "DOGE/USDT-P",
                "side": "BID",
                "quantity": "1",
                "maxFeesPercent": "0.045",
            },
            ValidationError,
        ),
        ({"action": "place", "symbol": "BTC/USDT-P"}, ValidationError),
        (
            {
                "action": "place",
                "symbol": "BTC/USDT-P",
                "side": "UP",
                "quantity": "1",
                "maxFeesPercent": "0.045",
            },
            ValidationError,
        ),
        ({"action": "modify", "symbol": "BTC/USDT-P"}, ValidationError),
    ],
)
def test_batch_action_from_dict_invalid(record, error):
    with pytest.raises(error):
        batch_action_from_dict(record, CONTRACTS)
