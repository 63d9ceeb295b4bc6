"""
Loan Amortization Calculations

Implements the fixed-rate mortgage payment and the month-by-month
amortization schedule built on it.

Arithmetic follows IEEE-754 semantics throughout: degenerate inputs
(a zero-length term, NaN, infinity) produce inf/NaN results rather than
exceptions. numpy scalars are used where plain Python floats would raise.
"""

from typing import Iterator, List
from dataclasses import dataclass

import numpy as np

# Longest term the web layer will amortize; the schedule is built month by month
MAX_LOAN_TERM_YEARS = 100


@dataclass(frozen=True)
class AmortizationRow:
    """One period of an amortization schedule."""

    month: int
    principal: float
    interest: float
    balance: float


def percent_to_decimal(percent: float) -> float:
    """Convert a 0-100 percentage to a decimal rate (e.g. 6.5 -> 0.065)."""
    return percent / 100


def floor_at_zero(value: float) -> float:
    """Clamp negative values to zero, letting NaN through untouched."""
    return float(np.maximum(0.0, value))


def calculate_monthly_mortgage(
    loan_amount: float, annual_rate_percent: float, term_years: float
) -> float:
    """
    Calculate the monthly principal and interest payment.

    Args:
        loan_amount: Amount borrowed
        annual_rate_percent: Annual interest rate as a percentage (e.g., 6.5)
        term_years: Loan term in years

    Returns:
        Monthly payment. A zero-rate loan is repaid straight-line.
    """
    monthly_rate = percent_to_decimal(annual_rate_percent) / 12
    periods = term_years * 12

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        if monthly_rate == 0:
            payment = np.float64(loan_amount) / periods
        else:
            factor = np.power(1 + np.float64(monthly_rate), periods)
            payment = loan_amount * monthly_rate * factor / (factor - 1)

    return float(payment)


def iter_amortization(
    loan_amount: float, annual_rate_percent: float, term_years: float
) -> Iterator[AmortizationRow]:
    """
    Lazily yield the amortization schedule, one row per month.

    Each call starts a fresh schedule from the full loan amount.
    """
    payment = calculate_monthly_mortgage(loan_amount, annual_rate_percent, term_years)
    monthly_rate = percent_to_decimal(annual_rate_percent) / 12
    periods = term_years * 12

    balance = loan_amount
    month = 1
    while month <= periods:
        interest = balance * monthly_rate
        # Payment below the period's interest pays no principal
        principal = floor_at_zero(payment - interest)
        balance = floor_at_zero(balance - principal)

        yield AmortizationRow(
            month=month,
            principal=principal,
            interest=interest,
            balance=balance,
        )
        month += 1


def build_amortization(
    loan_amount: float, annual_rate_percent: float, term_years: float
) -> List[AmortizationRow]:
    """Generate the full amortization schedule."""
    return list(iter_amortization(loan_amount, annual_rate_percent, term_years))


def calculate_total_interest(schedule: List[AmortizationRow]) -> float:
    """Calculate total interest paid over the schedule."""
    return sum(row.interest for row in schedule)


def calculate_total_principal(schedule: List[AmortizationRow]) -> float:
    """Calculate total principal repaid over the schedule."""
    return sum(row.principal for row in schedule)
