"""
API routes for the rental calculator.
"""

from fastapi import APIRouter

from rental_calc.api import calculations

router = APIRouter()

router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
