from decimal import Decimal

import pytest

from hibachi_signing.errors import InvalidNumericInput
from hibachi_signing.fixed_point import (
    FEE_PERCENT_MULTIPLIER,
    PRICE_MULTIPLIER,
    fee_percent_to_integer,
    price_to_integer,
    quantity_to_integer,
)


def test_multipliers():
    assert PRICE_MULTIPLIER == 4_294_967_296
    assert FEE_PERCENT_MULTIPLIER == 100_000_000


@pytest.mark.parametrize(
    "value,decimals,expected",
    [
        ("0.00001", 8, 1000),
        ("1", 6, 1_000_000),
        ("2.5", 6, 2_500_000),
        ("0.123456789", 8, 12_345_678),  # truncated, not rounded
        ("0.999999999", 8, 99_999_999),
        (0.1, 9, 100_000_000),
        (Decimal("3"), 0, 3),
        (7, 2, 700),
        ("0", 8, 0),
    ],
)
def test_quantity_to_integer(value, decimals, expected):
    assert quantity_to_integer(value, decimals) == expected


def test_price_to_integer_uses_binary_multiplier():
    # 100004.0 * 10^(6 - 8) * 2^32, truncated
    assert price_to_integer("100004.0", 8) == 4_295_139_094_691
    assert price_to_integer("100004.0", 8) == int(
        Decimal("100004.0") * Decimal("0.01") * PRICE_MULTIPLIER
    )


@pytest.mark.parametrize(
    "value,decimals,expected",
    [
        ("1", 6, 2**32),
        ("1", 5, 10 * 2**32),
        ("3000.5", 9, 12_887_049_371),  # 3.0005 * 2^32 = 12887049371.648
        ("0.1", 6, 429_496_729),  # 0.1 * 2^32 = 429496729.6
        ("0.0000001", 6, 429),
    ],
)
def test_price_to_integer_truncates(value, decimals, expected):
    assert price_to_integer(value, decimals) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("0.045", 4_500_000),
        (0.045, 4_500_000),
        ("0.0005", 50_000),
        ("0", 0),
        ("0.000000019", 1),
    ],
)
def test_fee_percent_to_integer(value, expected):
    assert fee_percent_to_integer(value) == expected


def test_conversion_keeps_full_precision():
    """Digits beyond the default decimal context must not round the result up."""
    value = "0." + "9" * 40
    assert quantity_to_integer(value, 8) == 99_999_999
    assert fee_percent_to_integer(value) == 99_999_999


@pytest.mark.parametrize(
    "value",
    [
        "-1",
        "abc",
        "",
        "1e5",
        "1.",
        ".5",
        "1,000",
        "\u00b2",
        "\uff11\uff12",
        "1.\u0663",
        float("nan"),
        float("inf"),
        True,
    ],
)
def test_invalid_quantity_rejected(value):
    with pytest.raises(InvalidNumericInput):
        quantity_to_integer(value, 8)


def test_negative_inputs_rejected():
    with pytest.raises(InvalidNumericInput):
        quantity_to_integer("-1", 8)
    with pytest.raises(InvalidNumericInput):
        price_to_integer(Decimal("-100"), 8)
    with pytest.raises(InvalidNumericInput):
        fee_percent_to_integer(-0.1)


def test_out_of_range_exponent_rejected():
    with pytest.raises(InvalidNumericInput):
        quantity_to_integer(Decimal("1E+999999"), 8)
    with pytest.raises(InvalidNumericInput):
        price_to_integer(Decimal("9E+999999"), 8)
    with pytest.raises(InvalidNumericInput):
        fee_percent_to_integer(Decimal("1E+999999"))


def test_decimals_must_be_int():
    with pytest.raises(InvalidNumericInput):
        quantity_to_integer("1", "8")  # type: ignore
