"""
Signing Example

This example shows how Hibachi trading instructions are turned into canonical
digests and signed, without sending anything to the exchange:

- Place a limit order and a market order
- Cancel an order by id, and cancel all orders
- Batch place, modify and cancel actions
- Transfer to another account (ECDSA accounts only)

Set SEND_REQUESTS = True at the bottom to submit the limit order for real.

Environment Variables Required (suffixed with ENVIRONMENT, e.g. HIBACHI_API_KEY_PRODUCTION):
- HIBACHI_API_ENDPOINT: API endpoint URL
- HIBACHI_API_KEY: Your API key
- HIBACHI_ACCOUNT_ID: Your account ID
- HIBACHI_PRIVATE_KEY: Your private key (0x... for wallet accounts) or HMAC key
- HIBACHI_PUBLIC_KEY: Your public key (wallet accounts only)
- HIBACHI_TRANSFER_DST_ACCOUNT_PUBLIC_KEY: Destination of the transfer example
"""

import logging

from hibachi_signing import (
    CancelAction,
    ContractSpec,
    EcdsaSigner,
    HibachiSigningClient,
    ModifyAction,
    PlaceAction,
    Side,
    signer_from_private_key,
)
from hibachi_signing.env_setup import setup_environment
from hibachi_signing.envelopes import (
    batch_request,
    cancel_all_orders_request,
    cancel_order_request,
    order_request,
    transfer_request,
)
from hibachi_signing.helpers import current_nonce, print_data

BTC = ContractSpec(id=2, symbol="BTC/USDT-P", underlying_decimals=8)


def example_signing(send_requests: bool = False) -> None:
    """Build and print signed request bodies for each instruction kind."""

    print("=" * 70)
    print("Hibachi Signing Example")
    print("=" * 70)

    config = setup_environment()
    print(f"[Setup] Account ID: {config.account_id}")
    print(f"[Setup] API Endpoint: {config.api_endpoint}\n")

    signer = signer_from_private_key(config.private_key, config.public_key or None)
    print(f"[Setup] Signer: {signer!r}\n")

    nonce = current_nonce()

    print("[1] Limit order")
    body, signed = order_request(
        signer, config.account_id, BTC, Side.BID, "0.0001", "0.00045", nonce, "60000"
    )
    print(f"  digest: {signed.digest_hex}")
    print_data(body)

    print("\n[2] Market order (no price field in the digest)")
    body, signed = order_request(
        signer, config.account_id, BTC, Side.ASK, "0.0001", "0.00045", nonce + 1
    )
    print(f"  digest: {signed.digest_hex}")
    print_data(body)

    print("\n[3] Cancel by order id, then cancel all")
    body, signed = cancel_order_request(signer, config.account_id, order_id=1)
    print(f"  digest: {signed.digest_hex}")
    body, signed = cancel_all_orders_request(signer, config.account_id, nonce + 2)
    print(f"  digest: {signed.digest_hex}")

    print("\n[4] Batch")
    body, signatures = batch_request(
        signer,
        config.account_id,
        [
            PlaceAction(BTC, Side.ASK, "0.0001", "0.00045", price="90000"),
            ModifyAction(1, BTC, Side.BID, "0.0002", "0.00045", price="59000"),
            CancelAction(nonce=nonce),
        ],
        nonce + 10,
    )
    for entry, signed in zip(body["orders"], signatures):  # type: ignore
        print(f"  {entry['action']:>6}: {signed.digest_hex}")

    if isinstance(signer, EcdsaSigner) and config.dst_public_key:
        print("\n[5] Transfer")
        body, signed = transfer_request(
            signer,
            config.account_id,
            "USDT",
            1,
            "1",
            "0.0001",
            config.dst_public_key,
            nonce + 20,
        )
        print(f"  digest: {signed.digest_hex}")

    if send_requests:
        print("\n[6] Submitting the limit order")
        client = HibachiSigningClient(
            api_url=config.api_endpoint,
            account_id=config.account_id,
            api_key=config.api_key,
            signer=signer,
        )
        response = client.place_order(BTC, Side.BID, "0.0001", "0.00045", price="60000")
        print(f"  status: {response.status}")
        print_data(response.json())

    print("\n" + "=" * 70)
    print("EXAMPLE COMPLETE")
    print("=" * 70)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    SEND_REQUESTS = False
    example_signing(SEND_REQUESTS)
