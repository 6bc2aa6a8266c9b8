"""Signing backends for canonical digests.

Two interchangeable backends consume the digest bytes produced by
:mod:`hibachi_signing.digest`:

* :class:`EcdsaSigner` for self-custody (wallet) accounts: SHA-256 of the
  digest, deterministic low-S secp256k1 ECDSA, ``r || s || v`` hex.
* :class:`HmacSigner` for exchange-custodied (web) accounts: HMAC-SHA256
  keyed with the account's shared secret.

The backend is chosen once, when the signer is built, and never mixed.
"""

import hmac
import logging
from abc import ABC, abstractmethod
from hashlib import sha256
from typing import override

import eth_keys.datatypes
from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as EthKeysValidationError

from hibachi_signing.errors import (
    MissingCredentialsError,
    PublicKeyMismatch,
    ValidationError,
)
from hibachi_signing.keys import (
    compress_public_key,
    normalize_public_key,
    strip_hex_prefix,
)
from hibachi_signing.types import SignedPayload

log = logging.getLogger(__name__)

SIGNATURE_COMPONENT_SIZE = 32


def ecdsa_signature_payload(r: int, s: int, recovery_id: int | None) -> str:
    """Serialize an ECDSA signature as ``r || s`` hex plus a 1-byte recovery id.

    ``r`` and ``s`` are 32-byte big-endian, zero-padded. The recovery id is
    appended whenever present, including 0; a missing one yields a bare
    64-byte signature.
    """
    signature = r.to_bytes(SIGNATURE_COMPONENT_SIZE, "big") + s.to_bytes(
        SIGNATURE_COMPONENT_SIZE, "big"
    )
    if recovery_id is None:
        return signature.hex()
    return signature.hex() + recovery_id.to_bytes(1, "big").hex()


class Signer(ABC):
    """Signs canonical digest bytes and returns a :class:`SignedPayload`."""

    # Most recent signature, for caller introspection only
    last_signed: SignedPayload | None = None

    @abstractmethod
    def _sign_digest(self, digest: bytes) -> str:
        """Return the hex signature of ``digest``."""
        ...

    def sign(self, digest: bytes) -> SignedPayload:
        """Sign the digest bytes.

        Args:
            digest: Canonical digest from the digest serializer

        Returns:
            SignedPayload: The hex signature together with the digest it covers

        """
        digest = bytes(digest)
        signed = SignedPayload(signature=self._sign_digest(digest), digest=digest)
        log.debug(
            "%s signed %d byte digest %s",
            type(self).__name__,
            len(digest),
            signed.digest_hex,
        )
        self.last_signed = signed
        return signed


class EcdsaSigner(Signer):
    """secp256k1 ECDSA signer for self-custody accounts.

    Examples:
        .. code-block:: python

            signer = EcdsaSigner(private_key="0x...", public_key="0x04...")
            signed = signer.sign(serialize_order(order))
            signed.signature  # 130 hex characters

    """

    _private_key: eth_keys.datatypes.PrivateKey
    _expected_public_key: str

    def __init__(self, private_key: str, public_key: str):
        """Initialize an ECDSA signer.

        Args:
            private_key: 32-byte private key as hex, with or without ``0x``
            public_key: The account's public key in compressed or uncompressed hex,
                with or without ``0x``; checked against the private key on every signature

        Raises:
            ValidationError: If the private key is not a valid secp256k1 scalar
            InvalidPublicKey: If the public key is not a point on secp256k1

        """
        try:
            private_key_bytes = bytes.fromhex(strip_hex_prefix(private_key))
            self._private_key = eth_keys.datatypes.PrivateKey(private_key_bytes)
        except (TypeError, ValueError, EthKeysValidationError) as e:
            raise ValidationError("Invalid ECDSA private key") from e
        self._expected_public_key = normalize_public_key(public_key)

    def __repr__(self) -> str:
        return f"EcdsaSigner(public_key={self._expected_public_key!r})"

    @property
    def public_key(self) -> str:
        """The configured public key, compressed hex without ``0x``."""
        return self._expected_public_key

    def verify_identity(self) -> None:
        """Check that the private key derives the configured public key.

        Raises:
            PublicKeyMismatch: If it does not

        """
        derived = compress_public_key(self._private_key.public_key.to_bytes().hex())
        if derived != self._expected_public_key:
            raise PublicKeyMismatch(
                f"Private key derives public key {derived}, "
                f"configured public key is {self._expected_public_key}"
            )

    @override
    def _sign_digest(self, digest: bytes) -> str:
        self.verify_identity()
        message_hash = sha256(digest).digest()
        # eth_keys signs deterministically and normalizes s to the lower half
        signed_message = self._private_key.sign_msg_hash(message_hash)
        return ecdsa_signature_payload(
            signed_message.r, signed_message.s, signed_message.v
        )


class HmacSigner(Signer):
    """HMAC-SHA256 signer for exchange-custodied accounts."""

    _secret: bytes

    def __init__(self, secret: str | bytes):
        """Initialize an HMAC signer.

        Args:
            secret: The account's shared secret; strings are UTF-8 encoded

        Raises:
            MissingCredentialsError: If the secret is empty

        """
        if not secret:
            raise MissingCredentialsError("HMAC secret")
        self._secret = secret.encode() if isinstance(secret, str) else bytes(secret)

    def __repr__(self) -> str:
        return "HmacSigner()"

    @override
    def _sign_digest(self, digest: bytes) -> str:
        return hmac.new(self._secret, digest, sha256).hexdigest()


def signer_from_private_key(private_key: str, public_key: str | None = None) -> Signer:
    """Pick the signing backend from the shape of the configured key.

    A ``0x``-prefixed key is a wallet (ECDSA) key and needs the account's
    public key; anything else is the HMAC secret of a web account.

    Raises:
        MissingCredentialsError: If the key is empty, or an ECDSA key comes without a public key

    """
    if not private_key:
        raise MissingCredentialsError("private key")
    if private_key.startswith("0x"):
        if not public_key:
            raise MissingCredentialsError("public key")
        log.debug("Using ECDSA signer")
        return EcdsaSigner(private_key, public_key)
    log.debug("Using HMAC signer")
    return HmacSigner(private_key)


def verify_ecdsa_signature(signed: SignedPayload, public_key: str) -> bool:
    """Verify an ECDSA signature against the SHA-256 hash of its digest.

    Args:
        signed: Output of :meth:`EcdsaSigner.sign`
        public_key: The signer's public key in any hex encoding

    Returns:
        bool: True if the signature is valid for ``public_key``

    Raises:
        InvalidPublicKey: If the key is not a point on secp256k1

    """
    raw = bytes.fromhex(signed.signature)
    if len(raw) == 2 * SIGNATURE_COMPONENT_SIZE:
        raw += b"\x00"
    if len(raw) != 2 * SIGNATURE_COMPONENT_SIZE + 1:
        return False
    compressed = bytes.fromhex(normalize_public_key(public_key))
    try:
        key = eth_keys.datatypes.PublicKey.from_compressed_bytes(compressed)
        signature = eth_keys.datatypes.Signature(raw)
        return key.verify_msg_hash(sha256(signed.digest).digest(), signature)
    except (BadSignature, EthKeysValidationError) as e:
        log.debug("Signature rejected: %s", e)
        return False
