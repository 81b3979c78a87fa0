"""
Conversion between whole-unit decimal strings and minor units.

One whole unit is 10**9 minor units. Conversions are exact: anything that
would need rounding or that overflows a signed 63-bit integer is rejected.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

from .errors import AmountTooLarge, InvalidAmount, PrecisionExceeded

DECIMALS = 9
MINOR_UNITS_PER_UNIT = 10 ** DECIMALS
MAX_AMOUNT = (1 << 63) - 1


def to_minor_units(value: Union[str, int, Decimal]) -> int:
    """
    Convert a whole-unit amount to minor units.

    Args:
        value: Decimal string such as ``"1.5"``, an int, or a Decimal

    Returns:
        Amount in minor units

    Raises:
        InvalidAmount: If value is not a finite, non-negative number
        PrecisionExceeded: If value has more than 9 decimals
        AmountTooLarge: If the result needs more than 63 bits
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidAmount(f"Amount must be a decimal string, got {type(value).__name__}")
    try:
        amount = Decimal(value.strip()) if isinstance(value, str) else Decimal(value)
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmount(f"Invalid amount: {value!r}", cause=e)
    if not amount.is_finite():
        raise InvalidAmount(f"Invalid amount: {value!r}")
    if amount < 0:
        raise InvalidAmount("Amount cannot be negative", details={"amount": str(value)})

    # Work on the digit tuple: Decimal arithmetic would round to context precision.
    _, digits, exponent = amount.as_tuple()
    if not any(digits):
        return 0
    while exponent < 0 and digits[-1] == 0:
        digits = digits[:-1]
        exponent += 1
    if exponent < -DECIMALS:
        raise PrecisionExceeded(
            "Amount precision exceeds minor unit",
            details={"amount": str(value), "decimals": DECIMALS},
        )

    shift = exponent + DECIMALS
    if len(digits) + shift > len(str(MAX_AMOUNT)):
        raise AmountTooLarge("Amount too large", details={"amount": str(value)})
    result = int("".join(map(str, digits))) * 10 ** shift
    if result > MAX_AMOUNT:
        raise AmountTooLarge("Amount too large", details={"amount": str(value)})
    return result


def from_minor_units(value: int) -> str:
    """Render minor units as a whole-unit decimal string without trailing zeros."""
    if value < 0:
        raise InvalidAmount("Amount cannot be negative", details={"amount": value})
    whole, frac = divmod(value, MINOR_UNITS_PER_UNIT)
    if not frac:
        return str(whole)
    return f"{whole}.{frac:0{DECIMALS}d}".rstrip("0")


__all__ = [
    "DECIMALS",
    "MINOR_UNITS_PER_UNIT",
    "MAX_AMOUNT",
    "to_minor_units",
    "from_minor_units",
]
