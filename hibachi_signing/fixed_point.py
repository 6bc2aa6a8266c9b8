"""Fixed-point conversion of human-readable decimals into digest integers.

Three unit systems are in use on the wire:

* quantities: ``value * 10**decimals`` where ``decimals`` is the asset's
  ``underlyingDecimals`` (orders, withdrawals) or 6 (transfers);
* prices: normalized to ``PRICE_DECIMALS`` implied decimals, i.e. shifted by
  ``10**(PRICE_DECIMALS - underlyingDecimals)``, then multiplied by the binary
  ``PRICE_MULTIPLIER`` (``2**32``);
* fee percentages: ``value * FEE_PERCENT_MULTIPLIER`` (``10**8``), independent
  of any asset.

Every conversion truncates toward zero. Values are never rounded up.
"""

import logging
from decimal import ROUND_DOWN, Decimal, InvalidOperation, Overflow, localcontext

from hibachi_signing.errors import InvalidNumericInput
from hibachi_signing.types import NumericInput, numeric_to_decimal

log = logging.getLogger(__name__)

# Binary fixed-point multiplier applied to prices (2^32), NOT a power of ten.
PRICE_MULTIPLIER: int = 2**32

# Prices are expressed with this many implied decimals before the binary scaling.
PRICE_DECIMALS: int = 6

# Fee percentages carry 8 implied decimals.
FEE_PERCENT_MULTIPLIER: int = 10**8

# Transfers always scale the quantity with 6 decimals.
TRANSFER_QUANTITY_DECIMALS: int = 6


def _scale(value: Decimal, exponent: int, multiplier: int = 1) -> int:
    # Enough precision that neither the shift nor the multiplication rounds.
    with localcontext() as ctx:
        ctx.prec = len(value.as_tuple().digits) + abs(exponent) + 64
        try:
            scaled = value.scaleb(exponent) * multiplier
        except (Overflow, InvalidOperation) as e:
            raise InvalidNumericInput(
                f"{value} is out of range when scaled by 10**{exponent}"
            ) from e
        return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def _check_decimals(decimals: int) -> None:
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise InvalidNumericInput(f"Decimal precision must be an int, got {decimals!r}")


def quantity_to_integer(value: NumericInput, underlying_decimals: int) -> int:
    """Scale a quantity by ``10**underlying_decimals``, truncating toward zero.

    Args:
        value: Human-readable quantity, e.g. ``"0.00001"``
        underlying_decimals: The asset's declared decimal precision

    Returns:
        int: The scaled integer (``quantity_to_integer("0.00001", 8) == 1000``)

    Raises:
        InvalidNumericInput: If the value is unparseable, negative, not finite or out of range

    """
    _check_decimals(underlying_decimals)
    return _scale(numeric_to_decimal(value), underlying_decimals)


def price_to_integer(value: NumericInput, underlying_decimals: int) -> int:
    """Scale a price by ``10**(6 - underlying_decimals) * 2**32``, truncating toward zero.

    Args:
        value: Human-readable price, e.g. ``"100004.0"``
        underlying_decimals: The contract's underlying asset precision

    Returns:
        int: The scaled integer

    Raises:
        InvalidNumericInput: If the value is unparseable, negative, not finite or out of range

    """
    _check_decimals(underlying_decimals)
    return _scale(
        numeric_to_decimal(value),
        PRICE_DECIMALS - underlying_decimals,
        PRICE_MULTIPLIER,
    )


def fee_percent_to_integer(value: NumericInput) -> int:
    """Scale a fee percentage by ``10**8``, truncating toward zero.

    Raises:
        InvalidNumericInput: If the value is unparseable, negative, not finite or out of range

    """
    return _scale(numeric_to_decimal(value), 0, FEE_PERCENT_MULTIPLIER)
