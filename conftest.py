"""Pytest hooks for the validation layer. Keeps the project root importable and pins a reference date."""

import sys
from datetime import date
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent

REFERENCE_DATE = date(2025, 6, 15)


def pytest_configure(config):
    """Make `validations` and `scripts` importable when pytest is run from any directory."""
    if str(PROJECT_ROOT) not in sys.path:
        sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def reference_date():
    """Fixed 'today' so age checks never depend on the wall clock."""
    return REFERENCE_DATE
