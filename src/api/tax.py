"""Tax estimator API endpoints.

Input errors (unparsable amounts, missing state or filing status) are raised
as ``EstimatorError`` and rendered as 422 responses by the app-level
handler in ``src.main``; no partial result is ever returned.
"""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from src.calculators.estimator import (
    EstimatorInput,
    JurisdictionEstimate,
    TaxEstimator,
)
from src.calculators.money import format_amount
from src.core.config import settings
from src.core.logging import get_logger
from src.tax.state_rates import get_state_rates
from src.tax.year_config import (
    TAX_YEAR_CONFIGS,
    TaxBracket,
    TaxYearConfig,
    get_tax_year_config,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/tax", tags=["tax"])


class EstimateRequest(BaseModel):
    """Raw estimator form values; numbers are accepted and treated as text."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    gross_income: str | None = Field(default=None, max_length=64)
    deductions: str | None = Field(default=None, max_length=64)
    filing_status: str | None = Field(default=None, max_length=32)
    state: str | None = Field(default=None, max_length=8)
    state_withheld: str | None = Field(default=None, max_length=64)
    federal_withheld: str | None = Field(default=None, max_length=64)
    tax_year: int | None = None

    def to_input(self) -> EstimatorInput:
        return EstimatorInput(
            gross_income=self.gross_income,
            deductions=self.deductions,
            filing_status=self.filing_status,
            state=self.state,
            state_withheld=self.state_withheld,
            federal_withheld=self.federal_withheld,
        )


class JurisdictionResponse(BaseModel):
    """Formatted amounts for one jurisdiction."""

    taxable_income: str
    tax: str
    withheld: str
    refund: str


class EstimateResponse(BaseModel):
    """Formatted amounts for both jurisdictions."""

    tax_year: int
    taxable_income: str
    state: JurisdictionResponse
    federal: JurisdictionResponse


class BranchResponse(JurisdictionResponse):
    """Single-jurisdiction result with its tax year."""

    tax_year: int


class StateRateItem(BaseModel):
    code: str
    rate: Decimal


class StateRatesResponse(BaseModel):
    states: list[StateRateItem]


class BracketItem(BaseModel):
    upper_limit: Decimal | None
    marginal_rate: Decimal
    cumulative_base_tax: Decimal


class BracketTableResponse(BaseModel):
    tax_year: int
    single: list[BracketItem]
    married_filing_jointly: list[BracketItem]


def _resolve_config(tax_year: int | None) -> TaxYearConfig:
    """Load the bracket config for a requested year or the configured default."""
    try:
        return get_tax_year_config(tax_year or settings.tax_year)
    except ValueError as exc:
        raise HTTPException(
            status_code=422,
            detail=str(exc),
        ) from exc


def _to_jurisdiction_response(estimate: JurisdictionEstimate) -> JurisdictionResponse:
    return JurisdictionResponse(**estimate.formatted())


def _to_bracket_items(brackets: tuple[TaxBracket, ...]) -> list[BracketItem]:
    return [
        BracketItem(
            upper_limit=bracket.upper_limit,
            marginal_rate=bracket.marginal_rate,
            cumulative_base_tax=bracket.cumulative_base_tax,
        )
        for bracket in brackets
    ]


@router.post("/estimate", response_model=EstimateResponse)
async def estimate_taxes(payload: EstimateRequest) -> EstimateResponse:
    """Compute taxable income, state and federal tax, and both refunds."""
    config = _resolve_config(payload.tax_year)
    result = TaxEstimator(config=config).estimate(payload.to_input())
    logger.debug("tax_estimate_computed", tax_year=config.tax_year)

    return EstimateResponse(
        tax_year=config.tax_year,
        taxable_income=format_amount(result.taxable_income),
        state=_to_jurisdiction_response(result.state),
        federal=_to_jurisdiction_response(result.federal),
    )


@router.post("/state", response_model=BranchResponse)
async def estimate_state_tax(payload: EstimateRequest) -> BranchResponse:
    """Compute the state branch only (filing status not required)."""
    config = _resolve_config(payload.tax_year)
    estimate = TaxEstimator(config=config).estimate_state(payload.to_input())
    return BranchResponse(tax_year=config.tax_year, **estimate.formatted())


@router.post("/federal", response_model=BranchResponse)
async def estimate_federal_tax(payload: EstimateRequest) -> BranchResponse:
    """Compute the federal branch only (state not required)."""
    config = _resolve_config(payload.tax_year)
    estimate = TaxEstimator(config=config).estimate_federal(payload.to_input())
    return BranchResponse(tax_year=config.tax_year, **estimate.formatted())


@router.get("/states", response_model=StateRatesResponse)
async def list_state_rates() -> StateRatesResponse:
    """Return the flat state rate table, sorted by state code."""
    rates = get_state_rates()
    return StateRatesResponse(
        states=[StateRateItem(code=code, rate=rates[code]) for code in sorted(rates)]
    )


@router.get("/brackets", response_model=BracketTableResponse)
async def get_brackets(
    year: int | None = Query(default=None, description="Tax year; defaults to configured year"),
) -> BracketTableResponse:
    """Return the federal bracket tables for a tax year."""
    config = _resolve_config(year)
    return BracketTableResponse(
        tax_year=config.tax_year,
        single=_to_bracket_items(config.single_brackets),
        married_filing_jointly=_to_bracket_items(config.mfj_brackets),
    )


@router.get("/years", response_model=list[int])
async def list_tax_years() -> list[int]:
    """Return the tax years with bracket tables."""
    return sorted(TAX_YEAR_CONFIGS)
