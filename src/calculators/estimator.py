"""Federal and state tax estimator.

Turns raw form text into taxable income, then state tax, federal tax and
the refund or balance due for each jurisdiction. Every monetary value is
rounded to a whole unit before it is combined with another one:

    taxable = round(round(gross) - round(deductions))

Recomputation follows one fixed graph, evaluated top-down on every call:

    gross, deductions -> taxable -> {state tax, federal tax} -> refund

Nothing here performs I/O; the functions are safe to call per request.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

from src.calculators.errors import (
    InvalidNumericInput,
    UnknownState,
    UnselectedFilingStatus,
)
from src.calculators.money import ZERO, format_amount, parse_amount, round_to_whole
from src.core.config import settings
from src.tax.state_rates import get_state_rates, normalize_state_code
from src.tax.year_config import TaxYearConfig, get_tax_year_config


# =============================================================================
# Data Structures
# =============================================================================


class FilingStatus(enum.Enum):
    """Filing status selecting the federal bracket table."""

    SINGLE = "S"
    MARRIED_FILING_JOINTLY = "M"

    @classmethod
    def from_selection(cls, value: FilingStatus | str | None) -> FilingStatus:
        """Resolve a form selection (``"S"``, ``"M"``, ``"single"``, ``"mfj"``).

        Raises:
            UnselectedFilingStatus: If the value is empty or unrecognized.
        """
        if isinstance(value, FilingStatus):
            return value
        key = (value or "").strip().lower()
        status = _FILING_STATUS_ALIASES.get(key)
        if status is None:
            raise UnselectedFilingStatus(value)
        return status


_FILING_STATUS_ALIASES: dict[str, FilingStatus] = {
    "s": FilingStatus.SINGLE,
    "single": FilingStatus.SINGLE,
    "m": FilingStatus.MARRIED_FILING_JOINTLY,
    "mfj": FilingStatus.MARRIED_FILING_JOINTLY,
    "married_filing_jointly": FilingStatus.MARRIED_FILING_JOINTLY,
}


@dataclass(frozen=True)
class EstimatorInput:
    """Raw form values, exactly as typed or selected by the user.

    Attributes:
        gross_income: Gross income text, thousands separators allowed.
        deductions: Total deductions text.
        filing_status: Filing status selection ("S" or "M").
        state: State code selection (e.g. "CA").
        state_withheld: State tax withheld text.
        federal_withheld: Federal tax withheld text.
    """

    gross_income: str | None = None
    deductions: str | None = None
    filing_status: str | None = None
    state: str | None = None
    state_withheld: str | None = None
    federal_withheld: str | None = None


@dataclass(frozen=True)
class JurisdictionEstimate:
    """Tax and refund for one jurisdiction.

    ``refund`` is positive for a refund and negative for a balance due.
    """

    taxable_income: Decimal
    tax: Decimal
    withheld: Decimal
    refund: Decimal

    def formatted(self) -> dict[str, str]:
        return {
            "taxable_income": format_amount(self.taxable_income),
            "tax": format_amount(self.tax),
            "withheld": format_amount(self.withheld),
            "refund": format_amount(self.refund),
        }


@dataclass(frozen=True)
class CalculationResult:
    """Both jurisdictions computed from the same taxable income."""

    taxable_income: Decimal
    state: JurisdictionEstimate
    federal: JurisdictionEstimate

    def formatted(self) -> dict[str, object]:
        """Render every amount for display."""
        return {
            "taxable_income": format_amount(self.taxable_income),
            "state": self.state.formatted(),
            "federal": self.federal.formatted(),
        }


# =============================================================================
# Calculation Functions
# =============================================================================


def read_amount(raw: str | None, field: str) -> Decimal:
    """Read an amount field; empty counts as zero.

    Raises:
        InvalidNumericInput: If the field is non-empty but not a number.
    """
    value = parse_amount(raw)
    if value is not None:
        return value
    if raw is not None and str(raw).strip():
        raise InvalidNumericInput(field, str(raw))
    return ZERO


def compute_taxable_income(gross: Decimal, deduction: Decimal) -> Decimal:
    """Taxable income from rounded inputs. Negative results are kept."""
    return round_to_whole(round_to_whole(gross) - round_to_whole(deduction))


def compute_state_tax(
    taxable: Decimal,
    state: str | None,
    rates: Mapping[str, Decimal] | None = None,
) -> Decimal:
    """Flat-rate state tax.

    Args:
        taxable: Taxable income (whole units).
        state: State code selection.
        rates: State rate table; defaults to the configured table.

    Raises:
        UnknownState: If no state is selected or it has no rate.
    """
    code = normalize_state_code(state)
    table = get_state_rates() if rates is None else rates
    if not code or code not in table:
        raise UnknownState(code)
    return round_to_whole(taxable * table[code] / Decimal("100"))


def compute_federal_tax(
    taxable: Decimal,
    status: FilingStatus | str | None,
    config: TaxYearConfig | None = None,
) -> Decimal:
    """Federal tax from the published bracket table.

    The first bracket whose upper limit is >= taxable income is used, so an
    income exactly on a boundary belongs to the lower bracket. Negative
    income lands in the first bracket and produces a negative tax.

    Example:
        >>> compute_federal_tax(Decimal("40000"), "S")
        Decimal('4562')
    """
    filing_status = FilingStatus.from_selection(status)
    year_config = config or get_tax_year_config(settings.tax_year)
    brackets = (
        year_config.single_brackets
        if filing_status is FilingStatus.SINGLE
        else year_config.mfj_brackets
    )

    lower_limit = ZERO
    for bracket in brackets:
        if bracket.upper_limit is None or taxable <= bracket.upper_limit:
            return round_to_whole(
                bracket.cumulative_base_tax
                + (taxable - lower_limit) * bracket.marginal_rate
            )
        lower_limit = bracket.upper_limit

    raise ValueError(f"Bracket table for {year_config.tax_year} has no top bracket")


def compute_refund(tax_owed: Decimal, withheld: Decimal) -> Decimal:
    """Withheld minus owed: positive is a refund, negative a balance due."""
    return round_to_whole(withheld - tax_owed)


# =============================================================================
# Estimator
# =============================================================================


class TaxEstimator:
    """Evaluates the estimator graph for one set of form inputs.

    A failed call raises before producing anything, so callers never see a
    partially computed result.
    """

    def __init__(
        self,
        config: TaxYearConfig | None = None,
        state_rates: Mapping[str, Decimal] | None = None,
    ) -> None:
        self.config = config or get_tax_year_config(settings.tax_year)
        self.state_rates = get_state_rates() if state_rates is None else state_rates

    def taxable_income(self, inputs: EstimatorInput) -> Decimal:
        gross = read_amount(inputs.gross_income, "gross_income")
        deductions = read_amount(inputs.deductions, "deductions")
        return compute_taxable_income(gross, deductions)

    def estimate_state(self, inputs: EstimatorInput) -> JurisdictionEstimate:
        """Compute taxable income, state tax and state refund."""
        taxable = self.taxable_income(inputs)
        withheld = round_to_whole(read_amount(inputs.state_withheld, "state_withheld"))
        tax = compute_state_tax(taxable, inputs.state, self.state_rates)
        return JurisdictionEstimate(
            taxable_income=taxable,
            tax=tax,
            withheld=withheld,
            refund=compute_refund(tax, withheld),
        )

    def estimate_federal(self, inputs: EstimatorInput) -> JurisdictionEstimate:
        """Compute taxable income, federal tax and federal refund."""
        taxable = self.taxable_income(inputs)
        withheld = round_to_whole(
            read_amount(inputs.federal_withheld, "federal_withheld")
        )
        tax = compute_federal_tax(taxable, inputs.filing_status, self.config)
        return JurisdictionEstimate(
            taxable_income=taxable,
            tax=tax,
            withheld=withheld,
            refund=compute_refund(tax, withheld),
        )

    def estimate(self, inputs: EstimatorInput) -> CalculationResult:
        """Compute both jurisdictions; any input error aborts the whole call."""
        state = self.estimate_state(inputs)
        federal = self.estimate_federal(inputs)
        return CalculationResult(
            taxable_income=state.taxable_income,
            state=state,
            federal=federal,
        )
