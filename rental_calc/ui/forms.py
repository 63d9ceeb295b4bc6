"""
Calculator form definition and parsing.

The page submits every input on each change. Values are coerced rather
than rejected so the results panel always renders.
"""

import logging
import math
from dataclasses import dataclass, fields, replace
from typing import List, Mapping

from rental_calc.calculations import DEFAULT_INPUTS, CalculatorInputs
from rental_calc.calculations.amortization import MAX_LOAN_TERM_YEARS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormField:
    """A numeric input on the calculator form."""

    name: str
    label: str
    step: float = 1


INPUT_FIELDS: List[FormField] = [
    FormField("purchase_price", "Purchase price", 1000),
    FormField("down_payment_percent", "Down payment %", 0.1),
    FormField("interest_rate_annual_percent", "Interest rate %", 0.1),
    FormField("loan_term_years", "Loan term (years)"),
    FormField("monthly_rent", "Monthly rent", 50),
    FormField("vacancy_percent", "Vacancy %", 0.5),
    FormField("maintenance_percent", "Maintenance %", 0.5),
    FormField("management_percent", "Management %", 0.5),
    FormField("taxes_monthly", "Taxes (monthly)", 10),
    FormField("insurance_monthly", "Insurance (monthly)", 10),
    FormField("other_fixed_monthly", "Other fixed (monthly)", 10),
    FormField("closing_costs", "Closing costs", 500),
    FormField("rehab_budget", "Rehab budget", 500),
]


def coerce_number(raw, name: str = "value") -> float:
    """Parse a form value, treating blank, malformed and non-finite input as 0."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        value = math.nan

    if not math.isfinite(value):
        if str(raw).strip():
            logger.info("Coerced form field %s=%r to 0", name, raw)
        return 0.0
    return value


def parse_form(params: Mapping[str, str]) -> CalculatorInputs:
    """
    Build calculator inputs from submitted form values.

    Fields missing from the submission keep their default value.
    """
    values = {}
    for field in fields(CalculatorInputs):
        if field.name not in params:
            continue
        values[field.name] = coerce_number(params[field.name], field.name)

    if values.get("loan_term_years", 0) > MAX_LOAN_TERM_YEARS:
        logger.info(
            "Capped loan_term_years %s at %s",
            values["loan_term_years"],
            MAX_LOAN_TERM_YEARS,
        )
        values["loan_term_years"] = MAX_LOAN_TERM_YEARS

    return replace(DEFAULT_INPUTS, **values)
