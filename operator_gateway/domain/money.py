"""Exact-decimal amount helpers shared by fee and commission calculations"""

from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP

ZERO = Decimal("0")
UNIT = Decimal("1")
CENT = Decimal("0.01")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert to Decimal without binary float artifacts (0.1 -> Decimal('0.1'))"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def ceil_to_unit(amount: Decimal) -> Decimal:
    """
    Round up to a whole currency unit.

    Fees always round up: rounding down or to nearest under-collects.
    """
    return amount.quantize(UNIT, rounding=ROUND_CEILING)


def percent_of(amount: Decimal, percent: Decimal) -> Decimal:
    """amount * percent / 100, kept to 2 decimal places (HALF_UP)"""
    return (amount * percent / Decimal("100")).quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal) -> str:
    """Render an amount with space-grouped thousands: 1500000 -> '1 500 000'"""
    whole = amount.quantize(UNIT, rounding=ROUND_HALF_UP)
    return f"{whole:,}".replace(",", " ")
