"""Accounting helper: two running differences over three amounts.

``difference = first - second`` and ``balance = first - second - third``.
A result stays blank until at least one of its inputs has been supplied;
unparsable inputs count as zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from src.calculators.money import ZERO, format_decimal, parse_amount


@dataclass(frozen=True)
class AccountingResult:
    """Formatted inputs and results; blank strings mean "not supplied"."""

    first: str
    second: str
    third: str
    difference: str
    balance: str


def _supplied(raw: str | None) -> bool:
    return bool(raw and raw.strip())


def _normalize(raw: str | None) -> str:
    """Reformat a supplied input; unparsable text is cleared."""
    value = parse_amount(raw)
    return "" if value is None else format_decimal(value)


def reconcile(first: str | None, second: str | None, third: str | None) -> AccountingResult:
    """Compute the difference and balance for the three amount fields."""
    a = parse_amount(first) or ZERO
    b = parse_amount(second) or ZERO
    c = parse_amount(third) or ZERO

    difference: Decimal | None = None
    if _supplied(first) or _supplied(second):
        difference = a - b

    balance: Decimal | None = None
    if _supplied(first) or _supplied(second) or _supplied(third):
        balance = a - b - c

    return AccountingResult(
        first=_normalize(first),
        second=_normalize(second),
        third=_normalize(third),
        difference="" if difference is None else format_decimal(difference),
        balance="" if balance is None else format_decimal(balance),
    )
