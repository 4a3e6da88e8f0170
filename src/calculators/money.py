"""Parsing, rounding and display helpers for monetary amounts.

Amounts arrive as free text typed by the user (``"50,000.00"``), are held
as ``Decimal`` and leave again as display strings with thousands separators
and two fraction digits.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

ZERO = Decimal("0")
WHOLE = Decimal("1")
CENT = Decimal("0.01")

THOUSANDS_SEPARATOR = ","

# Inputs at or above 10**18 are rejected as unparsable.
MAX_INPUT_EXPONENT = 18


def parse_amount(raw: str | int | float | Decimal | None) -> Decimal | None:
    """Parse user text into a Decimal.

    Thousands separators and surrounding whitespace are ignored.

    Returns:
        The parsed value, or None when the text is empty, not a number,
        not finite, or implausibly large.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, (int, float)):
        value = Decimal(str(raw))
    else:
        text = raw.strip().replace(THOUSANDS_SEPARATOR, "")
        # Decimal also accepts "1_000"; only "," is a separator here
        if not text or "_" in text:
            return None
        try:
            value = Decimal(text)
        except InvalidOperation:
            return None

    if not value.is_finite():
        return None
    if value and value.adjusted() >= MAX_INPUT_EXPONENT:
        return None
    return value


def round_to_whole(amount: Decimal) -> Decimal:
    """Round half away from zero to a whole currency unit."""
    rounded = amount.quantize(WHOLE, rounding=ROUND_HALF_UP)
    # -0 displays as "-0.00"
    return ZERO if rounded.is_zero() else rounded


def format_amount(amount: Decimal) -> str:
    """Render an amount rounded to whole units, e.g. ``1234 -> "1,234.00"``."""
    return f"{round_to_whole(amount):,.2f}"


def format_decimal(value: Decimal) -> str:
    """Render a value rounded to cents (not whole units), e.g. ``"1,234.57"``."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        rounded = value.quantize(CENT, rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        rounded = abs(rounded)
    return f"{rounded:,.2f}"
