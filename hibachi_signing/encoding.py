"""Fixed-width big-endian packing of digest fields.

Field widths are part of the wire contract and never depend on the value:
there are no variable-length integers anywhere in a digest.
"""

from hibachi_signing.errors import IntegerTooLarge, InvalidAddress
from hibachi_signing.keys import strip_hex_prefix

NONCE_WIDTH = 8
ID_WIDTH = 4  # contract and asset ids
ORDER_ID_WIDTH = 8
AMOUNT_WIDTH = 8  # scaled quantities, prices and fees
SIDE_WIDTH = 4
ADDRESS_WIDTH = 20


def encode_fixed_width(value: int, width: int) -> bytes:
    """Render a non-negative integer as big-endian bytes, left-padded with zeros to ``width``.

    Args:
        value: The integer to encode
        width: Exact output length in bytes

    Returns:
        bytes: ``width`` bytes

    Raises:
        IntegerTooLarge: If the value is negative or needs more than ``width`` bytes

    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected int, got {type(value)}")
    try:
        return value.to_bytes(width, "big", signed=False)
    except OverflowError as e:
        raise IntegerTooLarge(value, width) from e


def encode_address(address: str) -> bytes:
    """Decode a hex address (``0x`` prefix optional) to its 20 raw bytes.

    Raises:
        InvalidAddress: If the address is not hex or does not decode to exactly 20 bytes

    """
    try:
        raw = bytes.fromhex(strip_hex_prefix(address))
    except (TypeError, ValueError) as e:
        raise InvalidAddress(f"Invalid address {address!r}") from e
    if len(raw) != ADDRESS_WIDTH:
        raise InvalidAddress(
            f"Address must be {ADDRESS_WIDTH} bytes, got {len(raw)}: {address!r}"
        )
    return raw
