"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from rental_calc.main import app
from rental_calc.calculations import DEFAULT_INPUTS


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def default_inputs():
    """The scenario the calculator page opens with."""
    return DEFAULT_INPUTS
