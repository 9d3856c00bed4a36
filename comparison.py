"""
Comparison engine for the Loan Tenure vs Invest comparator.

Compares two loans for the same principal and rate that differ only in
tenure, and asks whether investing the monthly EMI saving of the longer
loan (for the duration of the shorter one) beats the extra interest the
longer loan costs. The saving is evaluated across a fixed set of annual
return scenarios plus the user's own expectation:

  A) Shorter loan: higher EMI, less total interest
  B) Longer loan: lower EMI, invest the difference every month

Everything here is a pure function of its inputs.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Union

import config as cfg
import finance

logger = logging.getLogger(__name__)


# ─── Errors ──────────────────────────────────────────────────────────

class ValidationFailure(ValueError):
    """Raised when an input to :func:`compare` is unusable."""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(message)
        self.field = field_name
        self.message = message


# ─── Data Classes ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class ComparisonInputs:
    """The five numbers the form layer hands to the engine."""

    loan_amount: float            # principal in rupees (already converted from lakhs)
    annual_rate_pct: float        # loan interest rate, % p.a.
    tenure_a_years: int
    tenure_b_years: int
    expected_growth_pct: float    # expected annualised investment return, %


class Recommendation(str, enum.Enum):
    """Overall verdict across every tested return scenario."""

    FAVORABLE = "favorable"       # longer loan + invest wins in every scenario
    MIXED = "mixed"               # wins in some scenarios only
    UNFAVORABLE = "unfavorable"   # shorter loan wins in every scenario


@dataclass(frozen=True)
class LoanResult:
    """EMI and totals for one tenure."""

    tenure_years: int
    periodic_payment: float
    total_payment: float
    total_interest: float

    @property
    def term_months(self) -> int:
        return self.tenure_years * cfg.MONTHS_PER_YEAR

    @classmethod
    def for_tenure(cls, principal: float, annual_rate_pct: float, tenure_years: int) -> "LoanResult":
        am = finance.amortize(principal, annual_rate_pct, tenure_years * cfg.MONTHS_PER_YEAR)
        return cls(
            tenure_years=tenure_years,
            periodic_payment=am.periodic_payment,
            total_payment=am.total_payment,
            total_interest=am.total_interest,
        )


@dataclass(frozen=True)
class ScenarioResult:
    """Outcome of investing the EMI difference at one annual return."""

    growth_rate_pct: float
    total_contributed: float          # EMI difference x shorter-tenure months
    future_value_short_term: float    # pot when the shorter loan would have ended
    investment_gain: float            # pot minus contributions
    roi_pct: float                    # gain / contributions, 0 if nothing contributed
    net_financial_position: float     # pot minus extra interest cost
    effective_interest_saved: float   # gain minus extra interest cost
    # Only when the tenures differ: pot left compounding until the longer
    # loan ends, and that value net of the remaining longer-loan EMIs.
    future_value_long_term: Optional[float] = None
    net_worth_impact_long_term: Optional[float] = None
    is_user_expectation: bool = False

    @property
    def strategy_wins(self) -> bool:
        """True when the invested pot outgrows the extra interest paid."""
        return self.net_financial_position > 0


@dataclass(frozen=True)
class ComparisonResult:
    """Full comparison of the two tenures with scenario analysis."""

    shorter_loan: LoanResult
    longer_loan: LoanResult
    monthly_payment_difference: float       # EMI(shorter) - EMI(longer)
    extra_interest_cost: float              # interest(longer) - interest(shorter)
    remaining_payments_after_short_term: float
    expected_growth_rate_pct: float
    scenarios: tuple[ScenarioResult, ...] = field(repr=False)
    recommendation: Recommendation

    is_degenerate = False

    def __post_init__(self) -> None:
        if self.shorter_loan.tenure_years > self.longer_loan.tenure_years:
            raise ValueError("Shorter tenure must not exceed longer tenure")
        if not self.scenarios:
            raise ValueError("A comparison needs at least one scenario")

    @property
    def shorter_tenure_years(self) -> int:
        return self.shorter_loan.tenure_years

    @property
    def longer_tenure_years(self) -> int:
        return self.longer_loan.tenure_years

    @property
    def tenure_gap_years(self) -> int:
        return self.longer_tenure_years - self.shorter_tenure_years

    @property
    def profitable_rates(self) -> list[float]:
        """Scenario rates where choosing the longer loan comes out ahead."""
        return [s.growth_rate_pct for s in self.scenarios if s.strategy_wins]

    @property
    def user_scenario(self) -> ScenarioResult:
        return next(s for s in self.scenarios if s.is_user_expectation)


@dataclass(frozen=True)
class DegenerateComparison:
    """Returned when the 'longer' loan does not lower the EMI.

    Only the two loans are reported; there is nothing to invest, so no
    scenarios and no recommendation.
    """

    shorter_loan: LoanResult
    longer_loan: LoanResult
    monthly_payment_difference: float

    is_degenerate = True
    scenarios = ()
    recommendation = None


Comparison = Union[ComparisonResult, DegenerateComparison]


# ─── Validation ──────────────────────────────────────────────────────

def _parse_number(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ValidationFailure(name, f"{name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationFailure(name, f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValidationFailure(name, f"{name} must be finite")
    return number


def _parse_tenure(value: Any, name: str) -> int:
    number = _parse_number(value, name)
    if number <= 0 or not number.is_integer():
        raise ValidationFailure(name, f"{name} must be a positive whole number of years")
    # month counts feed float maths
    if not math.isfinite(number * cfg.MONTHS_PER_YEAR):
        raise ValidationFailure(name, f"{name} is too large")
    return int(number)


def validate_inputs(
    loan_amount: Any,
    annual_rate_pct: Any,
    tenure_a_years: Any,
    tenure_b_years: Any,
    expected_growth_pct: Any,
) -> tuple[float, float, int, int, float]:
    """Check and coerce the five comparison inputs.

    Raises
    ------
    ValidationFailure
        On the first input that is not a finite number or violates its
        range (loan > 0, rate >= 0, tenures positive integers, growth >= 0).
    """
    amount = _parse_number(loan_amount, "loan_amount")
    if amount <= 0:
        raise ValidationFailure("loan_amount", "loan_amount must be greater than zero")

    rate = _parse_number(annual_rate_pct, "annual_rate_pct")
    if rate < 0:
        raise ValidationFailure("annual_rate_pct", "annual_rate_pct cannot be negative")

    tenure_a = _parse_tenure(tenure_a_years, "tenure_a_years")
    tenure_b = _parse_tenure(tenure_b_years, "tenure_b_years")

    growth = _parse_number(expected_growth_pct, "expected_growth_pct")
    if growth < 0:
        raise ValidationFailure("expected_growth_pct", "expected_growth_pct cannot be negative")

    return amount, rate, tenure_a, tenure_b, growth


# ─── Scenario policy & verdict ───────────────────────────────────────

def build_scenario_rates(expected_growth_pct: float) -> tuple[float, ...]:
    """Default return scenarios plus the user's own, deduplicated, ascending."""
    rates = {float(r) for r in cfg.DEFAULT_SCENARIO_RATES}
    rates.add(float(expected_growth_pct))
    return tuple(sorted(rates))


def classify_recommendation(scenarios: Sequence[ScenarioResult]) -> Recommendation:
    """Favorable if every scenario has a positive net position, Unfavorable
    if none does, Mixed otherwise."""
    if not scenarios:
        raise ValueError("Cannot classify an empty scenario list")
    winners = sum(1 for s in scenarios if s.net_financial_position > 0)
    if winners == len(scenarios):
        return Recommendation.FAVORABLE
    if winners == 0:
        return Recommendation.UNFAVORABLE
    return Recommendation.MIXED


def _scenario(
    rate: float,
    emi_difference: float,
    shorter: LoanResult,
    longer: LoanResult,
    extra_interest: float,
    remaining_payments: float,
    expected_growth_pct: float,
) -> ScenarioResult:
    total_contributed = emi_difference * shorter.term_months
    fv_short = finance.future_value_of_contributions(emi_difference, rate, shorter.tenure_years)
    gain = fv_short - total_contributed
    roi = (gain / total_contributed * 100) if total_contributed > 0 else 0.0

    fv_long: Optional[float] = None
    impact_long: Optional[float] = None
    if shorter.tenure_years < longer.tenure_years:
        fv_long = finance.project_forward(
            fv_short, rate, longer.tenure_years - shorter.tenure_years,
        )
        impact_long = fv_long - remaining_payments

    return ScenarioResult(
        growth_rate_pct=rate,
        total_contributed=total_contributed,
        future_value_short_term=fv_short,
        investment_gain=gain,
        roi_pct=roi,
        net_financial_position=fv_short - extra_interest,
        effective_interest_saved=gain - extra_interest,
        future_value_long_term=fv_long,
        net_worth_impact_long_term=impact_long,
        is_user_expectation=rate == expected_growth_pct,
    )


# ─── Core comparison ─────────────────────────────────────────────────

def compare(
    loan_amount: Any,
    annual_rate_pct: Any,
    tenure_a_years: Any,
    tenure_b_years: Any,
    expected_growth_pct: Any,
) -> Comparison:
    """Compare two tenures and evaluate investing the EMI difference.

    Tenures may be given in either order; the shorter one always ends up
    as ``shorter_loan``.

    Returns
    -------
    ComparisonResult
        Both loans, derived differences, one ``ScenarioResult`` per
        return scenario and the overall recommendation.
    DegenerateComparison
        When the longer tenure does not reduce the EMI (equal tenures).

    Raises
    ------
    ValidationFailure
        If any input is invalid. Nothing is computed in that case.
    """
    try:
        amount, rate, tenure_a, tenure_b, growth = validate_inputs(
            loan_amount, annual_rate_pct, tenure_a_years, tenure_b_years, expected_growth_pct,
        )
    except ValidationFailure as exc:
        logger.debug("Rejected comparison input %s: %s", exc.field, exc.message)
        raise

    if tenure_a > tenure_b:
        tenure_a, tenure_b = tenure_b, tenure_a

    shorter = LoanResult.for_tenure(amount, rate, tenure_a)
    longer = LoanResult.for_tenure(amount, rate, tenure_b)

    emi_difference = shorter.periodic_payment - longer.periodic_payment
    if emi_difference <= 0:
        logger.debug(
            "Degenerate comparison: %dy EMI %.2f vs %dy EMI %.2f",
            tenure_a, shorter.periodic_payment, tenure_b, longer.periodic_payment,
        )
        return DegenerateComparison(
            shorter_loan=shorter,
            longer_loan=longer,
            monthly_payment_difference=emi_difference,
        )

    extra_interest = longer.total_interest - shorter.total_interest
    remaining = longer.periodic_payment * (longer.term_months - shorter.term_months)

    scenarios = tuple(
        _scenario(r, emi_difference, shorter, longer, extra_interest, remaining, growth)
        for r in build_scenario_rates(growth)
    )
    recommendation = classify_recommendation(scenarios)
    logger.debug(
        "Compared %dy vs %dy: EMI saving %.2f, extra interest %.2f, verdict %s",
        tenure_a, tenure_b, emi_difference, extra_interest, recommendation.value,
    )

    return ComparisonResult(
        shorter_loan=shorter,
        longer_loan=longer,
        monthly_payment_difference=emi_difference,
        extra_interest_cost=extra_interest,
        remaining_payments_after_short_term=remaining,
        expected_growth_rate_pct=growth,
        scenarios=scenarios,
        recommendation=recommendation,
    )


def run_comparison(inputs: ComparisonInputs) -> Comparison:
    """Convenience wrapper: :func:`compare` on a :class:`ComparisonInputs`."""
    return compare(
        inputs.loan_amount,
        inputs.annual_rate_pct,
        inputs.tenure_a_years,
        inputs.tenure_b_years,
        inputs.expected_growth_pct,
    )
