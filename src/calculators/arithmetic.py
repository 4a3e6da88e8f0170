"""Two-operand arithmetic calculator.

Results are reported as display text: either a formatted number or a short
message ("Invalid input", "Cannot divide by 0", "Invalid operator") that
the page shows in place of the result.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal, DecimalException

from src.calculators.money import format_decimal, parse_amount

INVALID_INPUT = "Invalid input"
DIVIDE_BY_ZERO = "Cannot divide by 0"
INVALID_OPERATOR = "Invalid operator"

# Results beyond the double range are treated as non-finite.
MAX_RESULT_EXPONENT = 308

OPERATORS: dict[str, Callable[[Decimal, Decimal], Decimal]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": lambda a, b: a / b,
    "^": lambda a, b: a**b,
}


@dataclass(frozen=True)
class CalculatorResult:
    """Outcome of one calculation.

    Attributes:
        value: Numeric result, or None when the calculation failed.
        display: Text for the result field.
    """

    value: Decimal | None
    display: str

    @property
    def ok(self) -> bool:
        return self.value is not None


def calculate(num1: str | None, num2: str | None, operator: str | None) -> CalculatorResult:
    """Apply ``operator`` to two operands typed as text."""
    left = parse_amount(num1)
    right = parse_amount(num2)
    if left is None or right is None:
        return CalculatorResult(None, INVALID_INPUT)

    op = (operator or "").strip()
    func = OPERATORS.get(op)
    if func is None:
        return CalculatorResult(None, INVALID_OPERATOR)
    if op == "/" and right.is_zero():
        return CalculatorResult(None, DIVIDE_BY_ZERO)
    if op == "^" and right.is_zero():
        # Decimal rejects 0 ** 0; any base to the power 0 is 1
        return CalculatorResult(Decimal("1"), format_decimal(Decimal("1")))

    try:
        value = func(left, right)
    except DecimalException:
        # 0 ** -1, (-8) ** 0.5, overflow
        return CalculatorResult(None, INVALID_INPUT)

    if not value.is_finite() or (
        not value.is_zero() and value.adjusted() > MAX_RESULT_EXPONENT
    ):
        return CalculatorResult(None, INVALID_INPUT)
    return CalculatorResult(value, format_decimal(value))
