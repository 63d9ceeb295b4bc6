"""Rental property investment calculator."""

__version__ = "0.1.0"
