"""secp256k1 public key compression and decompression.

Internally public keys are handled as 64-byte ``x || y`` hex (no ``04``
marker); on the wire they are 33-byte compressed hex. Both directions check
that the key is a point on the curve, since eth_keys only validates lengths
and prefixes.
"""

import logging

from eth_keys.constants import SECPK1_A, SECPK1_B, SECPK1_P
from eth_keys.datatypes import PublicKey
from eth_keys.exceptions import ValidationError as EthKeysValidationError

from hibachi_signing.errors import InvalidPublicKey

log = logging.getLogger(__name__)

COMPRESSED_KEY_SIZE = 33
UNCOMPRESSED_KEY_SIZE = 64
UNCOMPRESSED_MARKER = 0x04
COMPRESSED_MARKERS = (0x02, 0x03)


def strip_hex_prefix(value: str) -> str:
    """Remove a leading ``0x``/``0X`` if present."""
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def _decode_hex(key: str) -> bytes:
    try:
        return bytes.fromhex(strip_hex_prefix(key))
    except (TypeError, ValueError) as e:
        raise InvalidPublicKey(f"Public key is not valid hex: {key!r}") from e


def _ensure_on_curve(raw: bytes) -> None:
    x = int.from_bytes(raw[:32], "big")
    y = int.from_bytes(raw[32:], "big")
    if not (0 <= x < SECPK1_P and 0 <= y < SECPK1_P):
        raise InvalidPublicKey("Public key coordinates are out of range")
    if (y * y - (x * x * x + SECPK1_A * x + SECPK1_B)) % SECPK1_P != 0:
        raise InvalidPublicKey("Public key is not a point on secp256k1")


def _public_key_from_raw(raw: bytes) -> PublicKey:
    _ensure_on_curve(raw)
    try:
        return PublicKey(raw)
    except (EthKeysValidationError, ValueError) as e:
        raise InvalidPublicKey(f"Invalid public key: {e}") from e


def compress_public_key(uncompressed_hex: str) -> str:
    """Compress a 64-byte ``x || y`` public key to 33-byte compressed hex.

    Args:
        uncompressed_hex: The key as 128 hex characters, without the ``04`` marker

    Returns:
        str: 66 hex characters starting with ``02`` or ``03``

    Raises:
        InvalidPublicKey: If the input is not a point on secp256k1

    """
    raw = _decode_hex(uncompressed_hex)
    if len(raw) != UNCOMPRESSED_KEY_SIZE:
        raise InvalidPublicKey(
            f"Uncompressed public key must be {UNCOMPRESSED_KEY_SIZE} bytes, got {len(raw)}"
        )
    return _public_key_from_raw(raw).to_compressed_bytes().hex()


def decompress_public_key(compressed_hex: str) -> str:
    """Decompress a 33-byte compressed public key to 64-byte ``x || y`` hex.

    Raises:
        InvalidPublicKey: If the input is not a point on secp256k1

    """
    raw = _decode_hex(compressed_hex)
    if len(raw) != COMPRESSED_KEY_SIZE or raw[0] not in COMPRESSED_MARKERS:
        raise InvalidPublicKey(
            f"Compressed public key must be {COMPRESSED_KEY_SIZE} bytes "
            "starting with 02 or 03"
        )
    try:
        public_key = PublicKey.from_compressed_bytes(raw)
    except (EthKeysValidationError, ValueError) as e:
        raise InvalidPublicKey(f"Invalid compressed public key: {e}") from e
    # eth_keys takes a square root without checking x is on the curve
    uncompressed = public_key.to_bytes()
    _ensure_on_curve(uncompressed)
    return uncompressed.hex()


def normalize_public_key(key: str) -> str:
    """Return the compressed hex form of a key given in any of its hex encodings.

    Accepts 33-byte compressed, 64-byte raw and 65-byte ``04``-prefixed keys,
    each with or without ``0x``.

    Raises:
        InvalidPublicKey: If the key is none of those or is not on the curve

    """
    raw = _decode_hex(key)
    if len(raw) == COMPRESSED_KEY_SIZE:
        # round trip to validate
        return compress_public_key(decompress_public_key(raw.hex()))
    if len(raw) == UNCOMPRESSED_KEY_SIZE + 1 and raw[0] == UNCOMPRESSED_MARKER:
        raw = raw[1:]
    return compress_public_key(raw.hex())
