"""Pure calculation code behind the site's calculator pages.

Exports the tax estimator, the arithmetic calculator and the accounting
helper, plus the shared money helpers and input errors.
"""

from src.calculators.accounting import AccountingResult, reconcile
from src.calculators.arithmetic import CalculatorResult, calculate
from src.calculators.errors import (
    EstimatorError,
    InvalidNumericInput,
    UnknownState,
    UnselectedFilingStatus,
)
from src.calculators.estimator import (
    CalculationResult,
    EstimatorInput,
    FilingStatus,
    JurisdictionEstimate,
    TaxEstimator,
    compute_federal_tax,
    compute_refund,
    compute_state_tax,
    compute_taxable_income,
    read_amount,
)
from src.calculators.money import (
    format_amount,
    format_decimal,
    parse_amount,
    round_to_whole,
)

__all__ = [
    # Estimator
    "TaxEstimator",
    "EstimatorInput",
    "CalculationResult",
    "JurisdictionEstimate",
    "FilingStatus",
    "compute_taxable_income",
    "compute_state_tax",
    "compute_federal_tax",
    "compute_refund",
    "read_amount",
    # Money
    "parse_amount",
    "round_to_whole",
    "format_amount",
    "format_decimal",
    # Errors
    "EstimatorError",
    "InvalidNumericInput",
    "UnknownState",
    "UnselectedFilingStatus",
    # Other calculators
    "calculate",
    "CalculatorResult",
    "reconcile",
    "AccountingResult",
]
