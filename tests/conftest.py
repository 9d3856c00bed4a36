"""Shared fixtures for the loan tenure comparator tests."""

from __future__ import annotations

import pytest

from comparison import ComparisonInputs, compare

# Four-and-a-half million rupees (45 lakhs) at 9%, 5 vs 10 years.
LOAN = 4_500_000
RATE = 9.0


@pytest.fixture
def default_inputs() -> ComparisonInputs:
    return ComparisonInputs(
        loan_amount=LOAN,
        annual_rate_pct=RATE,
        tenure_a_years=5,
        tenure_b_years=10,
        expected_growth_pct=12.0,
    )


@pytest.fixture
def default_result():
    return compare(LOAN, RATE, 5, 10, 12)


@pytest.fixture
def mixed_result():
    # Steep rate, long gap: only an aggressive 70% return pays off.
    return compare(LOAN, 20, 5, 30, 70)


@pytest.fixture
def degenerate_result():
    return compare(LOAN, RATE, 7, 7, 12)
