import pytest

from hibachi_signing.encoding import encode_address, encode_fixed_width
from hibachi_signing.errors import IntegerTooLarge, InvalidAddress


@pytest.mark.parametrize(
    "value,width,expected",
    [
        (0, 8, "0000000000000000"),
        (2, 4, "00000002"),
        (1000, 8, "00000000000003e8"),
        (1_700_000_000_000, 8, "0000018bcfe56800"),
        (2**64 - 1, 8, "ffffffffffffffff"),
        (2**32 - 1, 4, "ffffffff"),
    ],
)
def test_encode_fixed_width(value, width, expected):
    encoded = encode_fixed_width(value, width)
    assert len(encoded) == width
    assert encoded.hex() == expected


def test_nine_byte_value_in_eight_byte_field():
    with pytest.raises(IntegerTooLarge) as exc_info:
        encode_fixed_width(2**64, 8)

    assert exc_info.value.width == 8
    assert exc_info.value.value == 2**64


def test_four_byte_overflow():
    with pytest.raises(IntegerTooLarge):
        encode_fixed_width(2**32, 4)


def test_negative_value_rejected():
    with pytest.raises(IntegerTooLarge):
        encode_fixed_width(-1, 8)


def test_non_int_rejected():
    with pytest.raises(TypeError):
        encode_fixed_width("1", 8)  # type: ignore


@pytest.mark.parametrize(
    "address",
    [
        "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
        "5aaeb6053f3e94c9b9a09f33669435e7ef1beaed",
    ],
)
def test_encode_address(address):
    raw = encode_address(address)
    assert raw == bytes.fromhex("5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")


@pytest.mark.parametrize(
    "address",
    [
        "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeA",  # 19 bytes
        "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed00",  # 21 bytes
        "0xzzAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
        "",
    ],
)
def test_encode_address_invalid(address):
    with pytest.raises(InvalidAddress):
        encode_address(address)
