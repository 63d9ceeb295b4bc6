"""
Rental Property Calculation Engine

Pure calculation modules for single-property rental analysis.
No I/O: every function maps numbers to numbers.
"""

from rental_calc.calculations import amortization, metrics
from rental_calc.calculations.metrics import (
    DEFAULT_INPUTS,
    CalculatorInputs,
    CalculatorOutputs,
    calculate_all,
)

__all__ = [
    "amortization",
    "metrics",
    "DEFAULT_INPUTS",
    "CalculatorInputs",
    "CalculatorOutputs",
    "calculate_all",
]
