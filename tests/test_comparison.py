"""Tests for the tenure comparison engine."""

import logging
import math

import pytest

from comparison import (
    ComparisonResult,
    DegenerateComparison,
    LoanResult,
    Recommendation,
    ScenarioResult,
    ValidationFailure,
    build_scenario_rates,
    classify_recommendation,
    compare,
    run_comparison,
    validate_inputs,
)

LOAN = 4_500_000
RATE = 9.0


def _scenario(net: float, rate: float = 10.0) -> ScenarioResult:
    return ScenarioResult(
        growth_rate_pct=rate,
        total_contributed=100.0,
        future_value_short_term=100.0 + net,
        investment_gain=net,
        roi_pct=net,
        net_financial_position=net,
        effective_interest_saved=net,
    )


class TestCompare:
    def test_default_case_loans(self, default_result):
        assert isinstance(default_result, ComparisonResult)
        assert not default_result.is_degenerate
        assert default_result.shorter_loan.tenure_years == 5
        assert default_result.longer_loan.tenure_years == 10
        assert default_result.shorter_loan.periodic_payment == pytest.approx(93_412.7, rel=1e-4)
        assert default_result.longer_loan.periodic_payment == pytest.approx(57_004.1, rel=1e-4)

    def test_default_case_derived_values(self, default_result):
        r = default_result
        assert r.monthly_payment_difference == pytest.approx(
            r.shorter_loan.periodic_payment - r.longer_loan.periodic_payment
        )
        assert r.monthly_payment_difference == pytest.approx(36_408.6, rel=1e-4)
        assert r.extra_interest_cost == pytest.approx(
            r.longer_loan.total_interest - r.shorter_loan.total_interest
        )
        assert r.remaining_payments_after_short_term == pytest.approx(
            r.longer_loan.periodic_payment * 60
        )
        assert r.tenure_gap_years == 5

    def test_default_case_is_favorable(self, default_result):
        assert default_result.recommendation is Recommendation.FAVORABLE
        assert [s.growth_rate_pct for s in default_result.scenarios] == [10.0, 11.0, 12.0]
        assert default_result.profitable_rates == [10.0, 11.0, 12.0]

    def test_user_scenario_values(self, default_result):
        s = default_result.user_scenario
        assert s.growth_rate_pct == 12.0
        assert s.total_contributed == pytest.approx(default_result.monthly_payment_difference * 60)
        assert s.future_value_short_term == pytest.approx(
            default_result.monthly_payment_difference * (1.01 ** 60 - 1) / 0.01
        )
        assert s.investment_gain == pytest.approx(s.future_value_short_term - s.total_contributed)
        assert s.roi_pct == pytest.approx(36.12, abs=0.01)
        assert s.net_financial_position == pytest.approx(
            s.future_value_short_term - default_result.extra_interest_cost
        )
        assert s.effective_interest_saved == pytest.approx(
            s.investment_gain - default_result.extra_interest_cost
        )
        assert s.strategy_wins

    def test_long_term_projection(self, default_result):
        s = default_result.user_scenario
        assert s.future_value_long_term == pytest.approx(s.future_value_short_term * 1.12 ** 5)
        assert s.net_worth_impact_long_term == pytest.approx(
            s.future_value_long_term - default_result.remaining_payments_after_short_term
        )

    def test_tenure_order_is_normalised(self):
        assert compare(LOAN, RATE, 10, 5, 12) == compare(LOAN, RATE, 5, 10, 12)

    def test_unfavorable(self):
        result = compare(LOAN, 20, 5, 30, 12)
        assert result.recommendation is Recommendation.UNFAVORABLE
        assert result.profitable_rates == []
        assert all(s.net_financial_position <= 0 for s in result.scenarios)

    def test_mixed(self, mixed_result):
        assert mixed_result.recommendation is Recommendation.MIXED
        assert mixed_result.profitable_rates == [70.0]
        assert mixed_result.user_scenario.growth_rate_pct == 70.0

    def test_zero_interest_loan(self):
        result = compare(1_200_000, 0, 5, 10, 12)
        assert result.shorter_loan.periodic_payment == 20_000
        assert result.longer_loan.periodic_payment == 10_000
        assert result.extra_interest_cost == 0
        assert result.recommendation is Recommendation.FAVORABLE

    def test_zero_expected_growth_adds_flat_scenario(self):
        result = compare(LOAN, RATE, 5, 10, 0)
        flat = result.scenarios[0]
        assert flat.growth_rate_pct == 0.0
        assert flat.is_user_expectation
        assert flat.future_value_short_term == pytest.approx(flat.total_contributed)
        assert flat.investment_gain == pytest.approx(0, abs=1e-6)
        # Projecting forward at 0% leaves the pot untouched.
        assert flat.future_value_long_term == flat.future_value_short_term

    def test_recommendation_matches_classification(self, default_result, mixed_result):
        for result in (default_result, mixed_result):
            assert result.recommendation is classify_recommendation(result.scenarios)

    def test_numeric_strings_are_accepted(self, default_result):
        assert compare(str(LOAN), "9", "5", "10.0", "12") == default_result

    def test_run_comparison_wraps_compare(self, default_inputs, default_result):
        assert run_comparison(default_inputs) == default_result

    def test_logs_verdict(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="comparison"):
            compare(LOAN, RATE, 5, 10, 12)
        assert "favorable" in caplog.text


class TestExtremeInputs:
    def test_very_long_tenure(self):
        result = compare(LOAN, RATE, 5, 10_000, 12)
        assert isinstance(result, ComparisonResult)
        assert result.longer_loan.periodic_payment == pytest.approx(LOAN * 0.0075)
        assert math.isfinite(result.extra_interest_cost)
        assert result.recommendation is Recommendation.UNFAVORABLE
        s = result.user_scenario
        assert math.isfinite(s.future_value_short_term)
        assert s.future_value_long_term == math.inf
        assert s.net_worth_impact_long_term == math.inf

    def test_high_growth_over_long_gap(self):
        result = compare(LOAN, RATE, 5, 1_100, 100)
        s = result.user_scenario
        assert s.growth_rate_pct == 100.0
        assert math.isfinite(s.net_financial_position)
        assert s.future_value_long_term == math.inf
        assert result.recommendation is Recommendation.UNFAVORABLE

    def test_growth_overflow_within_short_tenure(self):
        result = compare(LOAN, RATE, 5, 10, 1_000_000)
        s = result.user_scenario
        assert s.future_value_short_term == math.inf
        assert s.roi_pct == math.inf
        assert s.strategy_wins
        assert result.recommendation is Recommendation.FAVORABLE


class TestDegenerate:
    def test_equal_tenures(self, degenerate_result):
        assert isinstance(degenerate_result, DegenerateComparison)
        assert degenerate_result.is_degenerate
        assert degenerate_result.monthly_payment_difference == 0
        assert degenerate_result.scenarios == ()
        assert degenerate_result.recommendation is None
        assert degenerate_result.shorter_loan == degenerate_result.longer_loan

    def test_loans_still_reported(self, degenerate_result):
        loan = degenerate_result.shorter_loan
        assert loan.tenure_years == 7
        assert loan.periodic_payment > 0
        assert loan.total_interest > 0


class TestValidation:
    @pytest.mark.parametrize(
        "args, field",
        [
            ((0, 9, 5, 10, 12), "loan_amount"),
            ((-1, 9, 5, 10, 12), "loan_amount"),
            (("abc", 9, 5, 10, 12), "loan_amount"),
            ((float("nan"), 9, 5, 10, 12), "loan_amount"),
            ((float("inf"), 9, 5, 10, 12), "loan_amount"),
            ((None, 9, 5, 10, 12), "loan_amount"),
            ((True, 9, 5, 10, 12), "loan_amount"),
            ((LOAN, -0.5, 5, 10, 12), "annual_rate_pct"),
            ((LOAN, "nine", 5, 10, 12), "annual_rate_pct"),
            ((LOAN, 9, 0, 10, 12), "tenure_a_years"),
            ((LOAN, 9, 5.5, 10, 12), "tenure_a_years"),
            ((LOAN, 9, 5, -10, 12), "tenure_b_years"),
            ((LOAN, 9, 5, "x", 12), "tenure_b_years"),
            ((LOAN, 9, 5, 1e308, 12), "tenure_b_years"),
            ((LOAN, 9, 5, 10, -1), "expected_growth_pct"),
            ((LOAN, 9, 5, 10, float("nan")), "expected_growth_pct"),
        ],
    )
    def test_rejects(self, args, field):
        with pytest.raises(ValidationFailure) as excinfo:
            compare(*args)
        assert excinfo.value.field == field
        assert excinfo.value.message == str(excinfo.value)

    def test_validation_failure_is_value_error(self):
        with pytest.raises(ValueError):
            compare(LOAN, 9, 5, 10, -1)

    def test_coerces(self):
        assert validate_inputs("100000", 0, 5.0, "10", "0") == (100_000.0, 0.0, 5, 10, 0.0)


class TestScenarioRates:
    def test_default_rate_not_duplicated(self):
        assert build_scenario_rates(12) == (10.0, 11.0, 12.0)

    def test_user_rate_inserted_in_order(self):
        assert build_scenario_rates(11.5) == (10.0, 11.0, 11.5, 12.0)
        assert build_scenario_rates(3) == (3.0, 10.0, 11.0, 12.0)
        assert build_scenario_rates(15) == (10.0, 11.0, 12.0, 15.0)

    @pytest.mark.parametrize("growth", [0, 10, 11.5, 12, 15])
    def test_exactly_one_user_scenario(self, growth):
        result = compare(LOAN, RATE, 5, 10, growth)
        flagged = [s for s in result.scenarios if s.is_user_expectation]
        assert len(flagged) == 1
        assert flagged[0].growth_rate_pct == growth
        rates = [s.growth_rate_pct for s in result.scenarios]
        assert rates == sorted(set(rates))


class TestClassifyRecommendation:
    def test_all_positive(self):
        assert classify_recommendation([_scenario(1), _scenario(5)]) is Recommendation.FAVORABLE

    def test_none_positive(self):
        assert classify_recommendation([_scenario(-1), _scenario(0)]) is Recommendation.UNFAVORABLE

    def test_some_positive(self):
        assert classify_recommendation([_scenario(-1), _scenario(2)]) is Recommendation.MIXED

    def test_zero_is_not_a_win(self):
        assert not _scenario(0).strategy_wins
        assert classify_recommendation([_scenario(0)]) is Recommendation.UNFAVORABLE

    def test_empty(self):
        with pytest.raises(ValueError):
            classify_recommendation([])


class TestResultInvariants:
    def test_rejects_inverted_tenures(self):
        short = LoanResult.for_tenure(LOAN, RATE, 10)
        long_ = LoanResult.for_tenure(LOAN, RATE, 5)
        with pytest.raises(ValueError):
            ComparisonResult(
                shorter_loan=short,
                longer_loan=long_,
                monthly_payment_difference=1.0,
                extra_interest_cost=1.0,
                remaining_payments_after_short_term=0.0,
                expected_growth_rate_pct=12.0,
                scenarios=(_scenario(1),),
                recommendation=Recommendation.FAVORABLE,
            )

    def test_rejects_empty_scenarios(self):
        loan = LoanResult.for_tenure(LOAN, RATE, 5)
        with pytest.raises(ValueError):
            ComparisonResult(
                shorter_loan=loan,
                longer_loan=loan,
                monthly_payment_difference=0.0,
                extra_interest_cost=0.0,
                remaining_payments_after_short_term=0.0,
                expected_growth_rate_pct=12.0,
                scenarios=(),
                recommendation=Recommendation.FAVORABLE,
            )

    def test_roi_zero_without_contributions(self):
        from comparison import _scenario as build

        loan = LoanResult.for_tenure(LOAN, RATE, 5)
        s = build(12.0, 0.0, loan, loan, 0.0, 0.0, 12.0)
        assert s.roi_pct == 0.0
        assert s.future_value_long_term is None
        assert s.net_worth_impact_long_term is None

    def test_loan_term_months(self):
        loan = LoanResult.for_tenure(LOAN, RATE, 7)
        assert loan.term_months == 84
        assert math.isclose(loan.total_payment, loan.periodic_payment * 84)
