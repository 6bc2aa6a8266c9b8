"""Signing client for the Hibachi trading API.

This module provides :class:`HibachiSigningClient`, which holds an account's
credentials, builds signed request bodies and hands them to an HTTP executor.
Responses are returned as received; interpreting them is up to the caller.
"""

import logging
from collections.abc import Sequence
from typing import Any, cast

from hibachi_signing.encoding import encode_address
from hibachi_signing.envelopes import (
    batch_request,
    cancel_all_orders_request,
    cancel_order_request,
    order_request,
    transfer_request,
    update_order_request,
    withdraw_request,
)
from hibachi_signing.errors import (
    DeserializationError,
    MissingCredentialsError,
    ValidationError,
)
from hibachi_signing.executors import DEFAULT_HTTP_EXECUTOR, HttpExecutor
from hibachi_signing.executors.interface import HttpResponse
from hibachi_signing.helpers import DEFAULT_API_URL, current_nonce
from hibachi_signing.keys import normalize_public_key
from hibachi_signing.signers import Signer, signer_from_private_key
from hibachi_signing.types import (
    BatchAction,
    ContractSpec,
    JsonObject,
    Nonce,
    NumericInput,
    OrderId,
    Side,
    SignedPayload,
)

log = logging.getLogger(__name__)


class HibachiSigningClient:
    """Signs trading instructions and submits them to the exchange.

    Examples:
        .. code-block:: python

            from hibachi_signing import ContractSpec, HibachiSigningClient, Side

            client = HibachiSigningClient(
                account_id=123,
                api_key="your-api-key",
                private_key="0x...",
                public_key="0x...",
            )
            btc = ContractSpec(id=2, symbol="BTC/USDT-P", underlying_decimals=8)
            response = client.place_order(btc, Side.ASK, "0.00001", "0.045", price="100004.0")
            print(response.status, response.json())

    """

    _account_id: int | None = None
    _signer: Signer | None = None
    _http_executor: HttpExecutor

    # Signature of the most recent request, for introspection
    last_signed: SignedPayload | None = None

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        account_id: int | str | None = None,
        api_key: str | None = None,
        private_key: str | None = None,
        public_key: str | None = None,
        executor: HttpExecutor | None = None,
        signer: Signer | None = None,
    ):
        """Initialize the signing client.

        Args:
            api_url: Base URL for the Hibachi API (default: production URL)
            account_id: Your Hibachi account ID (optional, can be set later)
            api_key: Your API key for authentication (optional, can be set later)
            private_key: ``0x``-prefixed ECDSA private key for wallet accounts,
                or the HMAC key of a web account
            public_key: The account's public key, required with an ECDSA private key
            executor: Custom HTTP executor (optional, uses default if not provided)
            signer: Prebuilt signer, used instead of ``private_key``

        """
        self._http_executor = (
            executor
            if executor is not None
            else DEFAULT_HTTP_EXECUTOR(api_url=api_url, api_key=api_key)
        )
        if api_key is not None:
            self._http_executor.api_key = api_key
        self.set_account_id(account_id)
        if signer is not None:
            self._signer = signer
        elif private_key is not None:
            self.set_private_key(private_key, public_key)

    @property
    def account_id(self) -> int:
        """Get the current account ID.

        Raises:
            ValidationError: If account_id has not been set

        """
        if self._account_id is None:
            raise ValidationError("account_id has not been set")
        return self._account_id

    @property
    def signer(self) -> Signer:
        """Get the configured signer.

        Raises:
            MissingCredentialsError: If no private key has been set

        """
        if self._signer is None:
            raise MissingCredentialsError("private key")
        return self._signer

    def set_account_id(self, account_id: int | str | None) -> None:
        """Set the account ID for API requests.

        Args:
            account_id: The account ID (int, numeric string, or None)

        Raises:
            ValidationError: If the account_id is an invalid type or format

        """
        _account_id = cast(Any, account_id)
        if isinstance(_account_id, str):
            if not (_account_id.isascii() and _account_id.isdigit()):
                raise ValidationError(f"Invalid {account_id=}")
            self._account_id = int(_account_id)
        elif _account_id is None or (
            isinstance(_account_id, int) and not isinstance(_account_id, bool)
        ):
            self._account_id = _account_id
        else:
            raise ValidationError from TypeError(
                f"Unexpected type for account_id {type(account_id)}"
            )

    def set_private_key(self, private_key: str, public_key: str | None = None) -> None:
        """Set the signing key; the backend follows from the key's format.

        Args:
            private_key: ``0x``-prefixed ECDSA key, or an HMAC key
            public_key: The account's public key, required for ECDSA keys

        """
        self._signer = signer_from_private_key(private_key, public_key)

    """ Trade endpoints """

    def place_order(
        self,
        contract: ContractSpec,
        side: Side,
        quantity: NumericInput,
        max_fees_percent: NumericInput,
        price: NumericInput | None = None,
        nonce: Nonce | None = None,
    ) -> HttpResponse:
        """Place a limit order, or a market order when ``price`` is None.

        Endpoint:
            POST /trade/order

        """
        request, signed = order_request(
            self.signer,
            self.account_id,
            contract,
            side,
            quantity,
            max_fees_percent,
            nonce=current_nonce() if nonce is None else nonce,
            price=price,
        )
        return self.__send("POST", "/trade/order", request, signed)

    def update_order(
        self,
        order_id: OrderId,
        contract: ContractSpec,
        side: Side,
        quantity: NumericInput,
        max_fees_percent: NumericInput,
        price: NumericInput | None = None,
        nonce: Nonce | None = None,
    ) -> HttpResponse:
        """Modify an existing order.

        ``side`` must be the side of the existing order; it is signed but not sent.

        Endpoint:
            PUT /trade/order

        """
        request, signed = update_order_request(
            self.signer,
            self.account_id,
            order_id,
            contract,
            side,
            quantity,
            max_fees_percent,
            nonce=current_nonce() if nonce is None else nonce,
            price=price,
        )
        return self.__send("PUT", "/trade/order", request, signed)

    def cancel_order(
        self, order_id: OrderId | None = None, nonce: Nonce | None = None
    ) -> HttpResponse:
        """Cancel an order by id, or by the nonce it was placed with.

        Raises:
            ValidationError: If neither order_id nor nonce is provided

        Endpoint:
            DELETE /trade/order

        """
        request, signed = cancel_order_request(
            self.signer, self.account_id, order_id=order_id, nonce=nonce
        )
        return self.__send("DELETE", "/trade/order", request, signed)

    def cancel_all_orders(self, nonce: Nonce | None = None) -> HttpResponse:
        """Cancel all pending orders of the account.

        Endpoint:
            DELETE /trade/orders

        """
        request, signed = cancel_all_orders_request(
            self.signer,
            self.account_id,
            current_nonce() if nonce is None else nonce,
        )
        return self.__send("DELETE", "/trade/orders", request, signed)

    def batch_orders(
        self, actions: Sequence[BatchAction], base_nonce: Nonce | None = None
    ) -> HttpResponse:
        """Submit place, modify and cancel actions in a single request.

        Example::

            client.batch_orders([
                PlaceAction(btc, Side.ASK, "0.001", "0.0005", price="90000"),
                ModifyAction(order_id, btc, Side.BID, "0.001", "0.0005", price="60000"),
                CancelAction(order_id=other_order_id),
            ])

        Endpoint:
            POST /trade/orders

        """
        request, signatures = batch_request(
            self.signer,
            self.account_id,
            actions,
            current_nonce() if base_nonce is None else base_nonce,
        )
        return self.__send(
            "POST", "/trade/orders", request, signatures[-1] if signatures else None
        )

    """ Capital endpoints """

    def withdraw(
        self,
        coin: str,
        asset_id: int,
        quantity: NumericInput,
        max_fees: NumericInput,
        withdraw_address: str,
        decimals: int,
        network: str = "arbitrum",
    ) -> HttpResponse:
        """Withdraw funds to an external address.

        Endpoint:
            POST /capital/withdraw

        """
        request, signed = withdraw_request(
            self.signer,
            self.account_id,
            coin,
            asset_id,
            quantity,
            max_fees,
            withdraw_address,
            decimals,
            network=network,
        )
        return self.__send("POST", "/capital/withdraw", request, signed)

    def get_transfer_public_key(self, receiving_address: str) -> str:
        """Look up the public key that receives transfers sent to an address.

        Endpoint:
            GET /capital/transfer-info

        Args:
            receiving_address: The destination account's 20-byte hex address

        Returns:
            str: The destination key as compressed hex, ready for :meth:`transfer`

        Raises:
            InvalidAddress: If the address is not 20 bytes of hex
            BadHttpStatus: If the exchange rejects the lookup
            DeserializationError: If the response carries no public key
            InvalidPublicKey: If the returned key is not on the curve

        """
        encode_address(receiving_address)
        path = (
            f"/capital/transfer-info?receivingAddress={receiving_address.lower()}"
            f"&accountId={self.account_id}"
        )
        log.debug("Looking up transfer key for %s", receiving_address)
        response = self._http_executor.send_authorized_request("GET", path)
        response.raise_for_status()
        info = response.json()
        if not isinstance(info, dict) or not isinstance(info.get("publicKey"), str):
            raise DeserializationError(f"No publicKey in transfer info from {path}")
        return normalize_public_key(info["publicKey"])

    def transfer(
        self,
        coin: str,
        asset_id: int,
        quantity: NumericInput,
        max_fees_percent: NumericInput,
        dst_public_key: str,
        nonce: Nonce | None = None,
    ) -> HttpResponse:
        """Transfer funds to the account owning ``dst_public_key``.

        Endpoint:
            POST /capital/transfer

        """
        request, signed = transfer_request(
            self.signer,
            self.account_id,
            coin,
            asset_id,
            quantity,
            max_fees_percent,
            dst_public_key,
            current_nonce() if nonce is None else nonce,
        )
        return self.__send("POST", "/capital/transfer", request, signed)

    """ Deferred helpers """

    def __send(
        self,
        method: str,
        path: str,
        request: JsonObject,
        signed: SignedPayload | None,
    ) -> HttpResponse:
        self.last_signed = signed
        log.debug("Sending %s %s", method, path)
        return self._http_executor.send_authorized_request(method, path, json=request)
