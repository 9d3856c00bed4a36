"""
Loan and investment maths for the Loan Tenure vs Invest comparator.

Three closed-form models:
  - amortize: fixed monthly instalment (EMI) and totals for a loan
  - future_value_of_contributions: future value of equal monthly investments
  - project_forward: compound growth of a lump sum

Rates are annual percentages throughout (12 means 12% p.a.). The scalar
functions are pure Python; the ``*_path`` helpers return numpy arrays of
year-end values for charting.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

import config as cfg


UNBOUNDED = float("inf")


# ─── Helpers ─────────────────────────────────────────────────────────

def monthly_rate(annual_rate_pct: float) -> float:
    """Convert an annual percentage rate to a monthly decimal rate."""
    return annual_rate_pct / (cfg.MONTHS_PER_YEAR * 100)


def is_unbounded(value: float) -> bool:
    return value == UNBOUNDED


# ─── Amortization ────────────────────────────────────────────────────

@dataclass(frozen=True)
class Amortization:
    """Payment totals for one loan."""

    periodic_payment: float   # monthly EMI
    total_payment: float      # EMI x months
    total_interest: float     # total payment minus principal


def emi(principal: float, annual_rate_pct: float, term_months: int) -> float:
    """Monthly instalment that fully amortises *principal* over *term_months*.

    A non-positive term cannot repay a positive principal in finite time,
    so the payment is ``UNBOUNDED``; with nothing borrowed it is zero.

    Uses the discount form ``P * r / (1 - (1 + r)^-n)``: on very long terms
    the discount factor underflows to 0 and the payment tends to the
    interest-only ``P * r``.
    """
    if term_months <= 0:
        return UNBOUNDED if principal > 0 else 0.0
    r = monthly_rate(annual_rate_pct)
    if r == 0:
        return principal / term_months
    return principal * r / (1 - (1 + r) ** -term_months)


def amortize(principal: float, annual_rate_pct: float, term_months: int) -> Amortization:
    """Compute EMI, total payment and total interest for a loan.

    Parameters
    ----------
    principal : float
        Amount borrowed.
    annual_rate_pct : float
        Nominal annual interest rate in percent.
    term_months : int
        Loan term in months.

    Returns
    -------
    Amortization
        When the payment is unbounded the totals are unbounded too.
    """
    payment = emi(principal, annual_rate_pct, term_months)
    if is_unbounded(payment):
        return Amortization(UNBOUNDED, UNBOUNDED, UNBOUNDED)
    total = payment * term_months
    return Amortization(
        periodic_payment=payment,
        total_payment=total,
        total_interest=total - principal,
    )


# ─── Investment growth ───────────────────────────────────────────────

def future_value_of_contributions(
    monthly_contribution: float,
    annual_rate_pct: float,
    years: float,
) -> float:
    """Future value of an ordinary annuity of monthly contributions.

    FV = C * ((1 + r)^n - 1) / r with r the monthly rate and n = years * 12.
    A zero rate is straight accumulation; zero (or negative) years gives 0.
    Negative contributions are allowed and simply carry their sign through.
    Growth too large for a float gives ``UNBOUNDED`` with the contribution's
    sign.
    """
    if years <= 0 or monthly_contribution == 0:
        return 0.0
    r = monthly_rate(annual_rate_pct)
    months = years * cfg.MONTHS_PER_YEAR
    if r == 0:
        return monthly_contribution * months
    try:
        growth = (1 + r) ** months
    except OverflowError:
        return math.copysign(UNBOUNDED, monthly_contribution)
    return monthly_contribution * (growth - 1) / r


def project_forward(
    present_value: float,
    annual_rate_pct: float,
    years: float,
    periods_per_year: int = cfg.COMPOUNDING_PERIODS_PER_YEAR,
) -> float:
    """Grow *present_value* at *annual_rate_pct* for *years*.

    Degenerate inputs (no time, no growth, nothing to grow) return
    *present_value* unchanged. Growth past the float range is ``UNBOUNDED``.
    """
    if years <= 0 or annual_rate_pct <= 0 or present_value <= 0:
        return present_value
    rate_per_period = annual_rate_pct / (100 * periods_per_year)
    total_periods = years * periods_per_year
    try:
        return present_value * (1 + rate_per_period) ** total_periods
    except OverflowError:
        return UNBOUNDED


# ─── Year-by-year paths (charts) ─────────────────────────────────────

def contribution_growth_path(
    monthly_contribution: float,
    annual_rate_pct: float,
    years: int,
) -> np.ndarray:
    """Year-end value of the contribution pot for years 0..*years*.

    Element ``y`` equals ``future_value_of_contributions(c, rate, y)``,
    including the ``UNBOUNDED`` values once growth leaves the float range.
    """
    t = np.arange(max(years, 0) + 1, dtype=float)
    months = t * cfg.MONTHS_PER_YEAR
    r = monthly_rate(annual_rate_pct)
    if monthly_contribution == 0:
        return np.zeros_like(t)
    if r == 0:
        return monthly_contribution * months
    with np.errstate(over="ignore"):
        return monthly_contribution * ((1 + r) ** months - 1) / r


def compound_growth_path(
    present_value: float,
    annual_rate_pct: float,
    years: int,
    periods_per_year: int = cfg.COMPOUNDING_PERIODS_PER_YEAR,
) -> np.ndarray:
    """Year-end value of a lump sum for years 0..*years*.

    Follows the same passthrough rules as :func:`project_forward`.
    """
    t = np.arange(max(years, 0) + 1, dtype=float)
    if annual_rate_pct <= 0 or present_value <= 0:
        return np.full_like(t, present_value)
    rate_per_period = annual_rate_pct / (100 * periods_per_year)
    with np.errstate(over="ignore"):
        return present_value * (1 + rate_per_period) ** (t * periods_per_year)
