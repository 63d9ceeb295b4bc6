"""
Rental Property Metrics

Combines rent, operating expenses and financing into the standard
investment metrics for a single rental property: NOI, cash flow,
cap rate, cash-on-cash return and a 5-year annualized return.

NOI is unlevered (excludes the mortgage) while cash flow and the fixed
expense total are levered (include it).
"""

from typing import List
from dataclasses import dataclass

import numpy as np

from rental_calc.calculations.amortization import (
    AmortizationRow,
    build_amortization,
    calculate_monthly_mortgage,
    floor_at_zero,
    percent_to_decimal,
)

HOLD_YEARS = 5
MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class CalculatorInputs:
    """Property, financing and operating assumptions. Percentages are 0-100."""

    purchase_price: float
    down_payment_percent: float
    interest_rate_annual_percent: float
    loan_term_years: float
    monthly_rent: float
    vacancy_percent: float
    maintenance_percent: float
    management_percent: float
    taxes_monthly: float
    insurance_monthly: float
    other_fixed_monthly: float  # utilities, HOA, etc.
    closing_costs: float
    rehab_budget: float


@dataclass(frozen=True)
class ExpenseBreakdown:
    """Monthly expenses. Fixed includes the mortgage payment."""

    fixed: float
    variable: float
    total: float


@dataclass(frozen=True)
class CalculatorOutputs:
    """Calculated metrics for one set of inputs."""

    loan_amount: float
    monthly_mortgage: float
    noi_monthly: float
    noi_annual: float
    cash_flow_monthly: float
    cash_on_cash_return_percent: float
    cap_rate_percent: float
    annualized_five_year_return_percent: float
    expense_breakdown_monthly: ExpenseBreakdown
    amortization: List[AmortizationRow]


DEFAULT_INPUTS = CalculatorInputs(
    purchase_price=300000,
    down_payment_percent=20,
    interest_rate_annual_percent=6.5,
    loan_term_years=30,
    monthly_rent=2400,
    vacancy_percent=5,
    maintenance_percent=5,
    management_percent=8,
    taxes_monthly=300,
    insurance_monthly=120,
    other_fixed_monthly=0,
    closing_costs=6000,
    rehab_budget=0,
)


def calculate_down_payment(inputs: CalculatorInputs) -> float:
    """Calculate the cash down payment."""
    return inputs.purchase_price * percent_to_decimal(inputs.down_payment_percent)


def calculate_loan_amount(inputs: CalculatorInputs) -> float:
    """Calculate the amount financed, never below zero."""
    return floor_at_zero(inputs.purchase_price - calculate_down_payment(inputs))


def calculate_total_cash_invested(inputs: CalculatorInputs) -> float:
    """Cash invested: down payment + closing costs + rehab budget."""
    return calculate_down_payment(inputs) + inputs.closing_costs + inputs.rehab_budget


def annualize_return(total_return: float, years: float) -> float:
    """
    Convert a cumulative return into a compound annual rate.

    Args:
        total_return: Cumulative return as decimal (e.g., 0.40 for 40%)
        years: Holding period in years

    Returns:
        Annual rate as decimal. NaN when the holding lost more than
        everything invested, since no real root exists.
    """
    with np.errstate(invalid="ignore"):
        growth = np.power(np.float64(1 + total_return), 1 / years)
    return float(growth) - 1


def calculate_all(inputs: CalculatorInputs) -> CalculatorOutputs:
    """
    Calculate every metric for a rental property.

    Pure function: recomputes the full result, amortization schedule
    included, from the inputs alone.

    Args:
        inputs: Property, financing and operating assumptions

    Returns:
        CalculatorOutputs. Ratios whose denominator is not positive
        (purchase price, cash invested) are reported as 0.
    """
    loan_amount = calculate_loan_amount(inputs)
    monthly_mortgage = calculate_monthly_mortgage(
        loan_amount, inputs.interest_rate_annual_percent, inputs.loan_term_years
    )

    # === VARIABLE EXPENSES (percent of rent) ===
    vacancy = inputs.monthly_rent * percent_to_decimal(inputs.vacancy_percent)
    maintenance = inputs.monthly_rent * percent_to_decimal(inputs.maintenance_percent)
    management = inputs.monthly_rent * percent_to_decimal(inputs.management_percent)
    variable = vacancy + maintenance + management

    fixed = (
        inputs.taxes_monthly
        + inputs.insurance_monthly
        + inputs.other_fixed_monthly
        + monthly_mortgage
    )
    total_expenses = fixed + variable

    # === NOI (before debt service) ===
    noi_monthly = inputs.monthly_rent - (
        inputs.taxes_monthly
        + inputs.insurance_monthly
        + inputs.other_fixed_monthly
        + vacancy
        + maintenance
        + management
    )
    noi_annual = noi_monthly * MONTHS_PER_YEAR

    # === CASH FLOW (after debt service) ===
    cash_flow_monthly = inputs.monthly_rent - total_expenses

    total_cash_invested = calculate_total_cash_invested(inputs)

    if total_cash_invested > 0:
        cash_on_cash_return_percent = (
            (cash_flow_monthly * MONTHS_PER_YEAR) / total_cash_invested
        ) * 100
    else:
        cash_on_cash_return_percent = 0.0

    if inputs.purchase_price > 0:
        cap_rate_percent = (noi_annual / inputs.purchase_price) * 100
    else:
        cap_rate_percent = 0.0

    # === 5-YEAR RETURN: cash flow plus principal paydown ===
    schedule = build_amortization(
        loan_amount, inputs.interest_rate_annual_percent, inputs.loan_term_years
    )
    hold_months = HOLD_YEARS * MONTHS_PER_YEAR
    principal_paid = sum(row.principal for row in schedule[:hold_months])
    five_year_profit = cash_flow_monthly * MONTHS_PER_YEAR * HOLD_YEARS + principal_paid

    if total_cash_invested > 0:
        annualized_five_year_return_percent = (
            annualize_return(five_year_profit / total_cash_invested, HOLD_YEARS) * 100
        )
    else:
        annualized_five_year_return_percent = 0.0

    return CalculatorOutputs(
        loan_amount=loan_amount,
        monthly_mortgage=monthly_mortgage,
        noi_monthly=noi_monthly,
        noi_annual=noi_annual,
        cash_flow_monthly=cash_flow_monthly,
        cash_on_cash_return_percent=cash_on_cash_return_percent,
        cap_rate_percent=cap_rate_percent,
        annualized_five_year_return_percent=annualized_five_year_return_percent,
        expense_breakdown_monthly=ExpenseBreakdown(
            fixed=fixed,
            variable=variable,
            total=total_expenses,
        ),
        amortization=schedule,
    )
