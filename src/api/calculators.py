"""Arithmetic calculator and accounting helper endpoints."""

from decimal import Decimal

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from src.calculators.accounting import reconcile
from src.calculators.arithmetic import calculate

router = APIRouter(prefix="/api/calculators", tags=["calculators"])


class ArithmeticRequest(BaseModel):
    """Two operands as typed, plus an operator (+, -, *, /, ^)."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    num1: str | None = Field(default=None, max_length=64)
    num2: str | None = Field(default=None, max_length=64)
    operator: str | None = Field(default=None, max_length=4)


class ArithmeticResponse(BaseModel):
    """Result text for the display, plus the numeric value when there is one."""

    value: Decimal | None
    display: str


class AccountingRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    first: str | None = Field(default=None, max_length=64)
    second: str | None = Field(default=None, max_length=64)
    third: str | None = Field(default=None, max_length=64)


class AccountingResponse(BaseModel):
    first: str
    second: str
    third: str
    difference: str
    balance: str


@router.post("/arithmetic", response_model=ArithmeticResponse)
async def arithmetic(payload: ArithmeticRequest) -> ArithmeticResponse:
    """Evaluate ``num1 <operator> num2``.

    Failures (bad operands, division by zero, unknown operator) still return
    200 with a message in ``display`` and a null ``value``.
    """
    result = calculate(payload.num1, payload.num2, payload.operator)
    return ArithmeticResponse(value=result.value, display=result.display)


@router.post("/accounting", response_model=AccountingResponse)
async def accounting(payload: AccountingRequest) -> AccountingResponse:
    """Compute ``first - second`` and ``first - second - third``."""
    result = reconcile(payload.first, payload.second, payload.third)
    return AccountingResponse(
        first=result.first,
        second=result.second,
        third=result.third,
        difference=result.difference,
        balance=result.balance,
    )
