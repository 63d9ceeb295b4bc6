"""
Rental calculation API endpoints.

These endpoints accept property inputs and return calculated metrics.
"""

import logging
import math
from dataclasses import asdict
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta
from fastapi import APIRouter
from pydantic import BaseModel, Field

from rental_calc.calculations import DEFAULT_INPUTS, CalculatorInputs, calculate_all
from rental_calc.calculations.amortization import (
    MAX_LOAN_TERM_YEARS,
    build_amortization,
    calculate_monthly_mortgage,
    calculate_total_interest,
    calculate_total_principal,
)
from rental_calc.calculations.metrics import calculate_total_cash_invested

logger = logging.getLogger(__name__)

router = APIRouter()


def finite_or_none(value: float) -> Optional[float]:
    """JSON has no NaN or infinity; report those as null."""
    return value if math.isfinite(value) else None


class CalculatorRequest(BaseModel):
    """Input for the rental calculator. Percentages are 0-100."""

    # Acquisition
    purchase_price: float = Field(DEFAULT_INPUTS.purchase_price, allow_inf_nan=False)
    down_payment_percent: float = Field(
        DEFAULT_INPUTS.down_payment_percent, ge=0, le=100, allow_inf_nan=False
    )
    closing_costs: float = Field(DEFAULT_INPUTS.closing_costs, allow_inf_nan=False)
    rehab_budget: float = Field(DEFAULT_INPUTS.rehab_budget, allow_inf_nan=False)

    # Financing
    interest_rate_annual_percent: float = Field(
        DEFAULT_INPUTS.interest_rate_annual_percent,
        ge=0,
        le=100,
        allow_inf_nan=False,
    )
    loan_term_years: float = Field(
        DEFAULT_INPUTS.loan_term_years,
        gt=0,
        le=MAX_LOAN_TERM_YEARS,
        allow_inf_nan=False,
    )

    # Revenue
    monthly_rent: float = Field(DEFAULT_INPUTS.monthly_rent, allow_inf_nan=False)

    # Variable expenses
    vacancy_percent: float = Field(
        DEFAULT_INPUTS.vacancy_percent, ge=0, le=100, allow_inf_nan=False
    )
    maintenance_percent: float = Field(
        DEFAULT_INPUTS.maintenance_percent, ge=0, le=100, allow_inf_nan=False
    )
    management_percent: float = Field(
        DEFAULT_INPUTS.management_percent, ge=0, le=100, allow_inf_nan=False
    )

    # Fixed expenses
    taxes_monthly: float = Field(DEFAULT_INPUTS.taxes_monthly, allow_inf_nan=False)
    insurance_monthly: float = Field(
        DEFAULT_INPUTS.insurance_monthly, allow_inf_nan=False
    )
    other_fixed_monthly: float = Field(
        DEFAULT_INPUTS.other_fixed_monthly, allow_inf_nan=False
    )

    def to_inputs(self) -> CalculatorInputs:
        return CalculatorInputs(**self.model_dump())


class ExpenseBreakdownResponse(BaseModel):
    """Monthly expense totals."""

    fixed: Optional[float]
    variable: Optional[float]
    total: Optional[float]


class AmortizationRowResponse(BaseModel):
    """One month of the amortization schedule."""

    month: int
    payment_date: Optional[date] = None
    principal: Optional[float]
    interest: Optional[float]
    balance: Optional[float]


class CalculatorResponse(BaseModel):
    """Calculated metrics. Values that are not finite are returned as null."""

    loan_amount: Optional[float]
    monthly_mortgage: Optional[float]
    noi_monthly: Optional[float]
    noi_annual: Optional[float]
    cash_flow_monthly: Optional[float]
    total_cash_invested: Optional[float]
    cash_on_cash_return_percent: Optional[float]
    cap_rate_percent: Optional[float]
    annualized_five_year_return_percent: Optional[float]
    expense_breakdown_monthly: ExpenseBreakdownResponse
    amortization: List[AmortizationRowResponse]


def _row_response(row, first_payment_date: Optional[date] = None) -> AmortizationRowResponse:
    row_date = None
    if first_payment_date is not None:
        row_date = first_payment_date + relativedelta(months=row.month - 1)

    return AmortizationRowResponse(
        month=row.month,
        payment_date=row_date,
        principal=finite_or_none(row.principal),
        interest=finite_or_none(row.interest),
        balance=finite_or_none(row.balance),
    )


@router.get("/defaults", response_model=CalculatorRequest)
async def get_defaults():
    """Return the default scenario used to pre-fill the calculator."""
    return CalculatorRequest(**asdict(DEFAULT_INPUTS))


@router.post("/rental", response_model=CalculatorResponse)
async def calculate_rental(inputs: CalculatorRequest):
    """Calculate all rental metrics and the amortization schedule."""
    calculator_inputs = inputs.to_inputs()
    outputs = calculate_all(calculator_inputs)

    logger.debug(
        "Calculated rental metrics: price=%s rent=%s cash_flow=%s",
        calculator_inputs.purchase_price,
        calculator_inputs.monthly_rent,
        outputs.cash_flow_monthly,
    )

    expenses = outputs.expense_breakdown_monthly
    return CalculatorResponse(
        loan_amount=finite_or_none(outputs.loan_amount),
        monthly_mortgage=finite_or_none(outputs.monthly_mortgage),
        noi_monthly=finite_or_none(outputs.noi_monthly),
        noi_annual=finite_or_none(outputs.noi_annual),
        cash_flow_monthly=finite_or_none(outputs.cash_flow_monthly),
        total_cash_invested=finite_or_none(
            calculate_total_cash_invested(calculator_inputs)
        ),
        cash_on_cash_return_percent=finite_or_none(
            outputs.cash_on_cash_return_percent
        ),
        cap_rate_percent=finite_or_none(outputs.cap_rate_percent),
        annualized_five_year_return_percent=finite_or_none(
            outputs.annualized_five_year_return_percent
        ),
        expense_breakdown_monthly=ExpenseBreakdownResponse(
            fixed=finite_or_none(expenses.fixed),
            variable=finite_or_none(expenses.variable),
            total=finite_or_none(expenses.total),
        ),
        amortization=[_row_response(row) for row in outputs.amortization],
    )


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    loan_amount: float = Field(ge=0, allow_inf_nan=False)
    annual_rate_percent: float = Field(ge=0, le=100, allow_inf_nan=False)
    term_years: float = Field(gt=0, le=MAX_LOAN_TERM_YEARS, allow_inf_nan=False)
    first_payment_date: Optional[date] = None


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Generate a loan amortization schedule."""
    schedule = build_amortization(
        inputs.loan_amount, inputs.annual_rate_percent, inputs.term_years
    )
    monthly_payment = calculate_monthly_mortgage(
        inputs.loan_amount, inputs.annual_rate_percent, inputs.term_years
    )

    logger.debug(
        "Generated %d-month schedule for loan of %s", len(schedule), inputs.loan_amount
    )

    return {
        "monthly_payment": finite_or_none(monthly_payment),
        "schedule": [
            _row_response(row, inputs.first_payment_date).model_dump(mode="json")
            for row in schedule
        ],
        "total_interest": finite_or_none(calculate_total_interest(schedule)),
        "total_principal": finite_or_none(calculate_total_principal(schedule)),
    }
