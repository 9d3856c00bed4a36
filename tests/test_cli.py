"""Tests for display data, narrative text and the terminal flow."""

import cli
from comparison import ComparisonInputs, compare
from formatting import fmt


class TestDisplayData:
    def test_full_comparison(self, default_inputs, default_result):
        d = cli.compute_display_data(default_inputs, default_result)
        assert d["degenerate"] is False
        assert d["loan_lakhs"] == 45
        assert d["shorter_tenure"] == 5
        assert d["longer_tenure"] == 10
        assert d["investment_months"] == 60
        assert d["tenure_gap"] == 5
        assert d["recommendation"] == "favorable"
        assert [s["rate_label"] for s in d["scenarios"]] == ["10%", "11%", "12%"]
        assert d["scenarios"][-1]["is_user"]
        assert d["short"]["emi"] == default_result.shorter_loan.periodic_payment

    def test_degenerate(self, degenerate_result):
        inputs = ComparisonInputs(4_500_000, 9.0, 7, 7, 12.0)
        d = cli.compute_display_data(inputs, degenerate_result)
        assert d["degenerate"] is True
        assert "scenarios" not in d
        assert "recommendation" not in d
        assert "no EMI difference to invest" in d["message"]
        assert fmt(degenerate_result.shorter_loan.periodic_payment) in d["message"]

    def test_scenario_summary_lines(self, default_result):
        line = cli.scenario_summary_line(default_result.user_scenario)
        assert line.startswith("At 12% expected annualised return (your expectation):")
        assert "benefit" in line

        losing = compare(4_500_000, 20, 5, 30, 12).scenarios[0]
        assert "additional cost" in cli.scenario_summary_line(losing)


class TestRecommendationText:
    def _text(self, result):
        inputs = ComparisonInputs(4_500_000, 20.0, 5, 30, 12.0)
        return cli.generate_recommendation_text(cli.compute_display_data(inputs, result))

    def test_favorable(self, default_inputs, default_result):
        d = cli.compute_display_data(default_inputs, default_result)
        assert cli.generate_recommendation_text(d).startswith("Choose the 10-year loan")

    def test_mixed_lists_profitable_rates(self, mixed_result):
        text = self._text(mixed_result)
        assert "depends on your expected investment returns" in text
        assert "(70%)" in text

    def test_unfavorable(self):
        text = self._text(compare(4_500_000, 20, 5, 30, 12))
        assert text.startswith("Choose the 5-year loan")

    def test_core_question(self, default_inputs, default_result):
        d = cli.compute_display_data(default_inputs, default_result)
        q = cli.core_question_text(d)
        assert fmt(d["extra_interest"]) in q
        assert "10-year loan" in q


class TestRunCli:
    @staticmethod
    def _feed(monkeypatch, answers):
        it = iter(answers)
        monkeypatch.setattr("builtins.input", lambda _prompt="": next(it))

    def test_defaults_produce_report(self, monkeypatch, tmp_path, capsys):
        self._feed(monkeypatch, [""] * 5)
        pdf = tmp_path / "report.pdf"
        cli.run_cli(pdf_path=str(pdf))
        out = capsys.readouterr().out
        assert "LOAN OPTION 1: 5 YEARS" in out
        assert "STRATEGIC RECOMMENDATION" in out
        assert pdf.exists()

    def test_equal_tenures_skip_report(self, monkeypatch, tmp_path, capsys):
        self._feed(monkeypatch, ["", "", "7", "7", ""])
        pdf = tmp_path / "report.pdf"
        cli.run_cli(pdf_path=str(pdf))
        out = capsys.readouterr().out
        assert "NO EMI DIFFERENCE TO INVEST" in out
        assert "STRATEGIC RECOMMENDATION" not in out
        assert not pdf.exists()

    def test_prompt_retries_bad_input(self, monkeypatch, capsys):
        self._feed(monkeypatch, ["abc", "-3", "₹1,50"])
        assert cli._prompt_float("Amount", 10, 0) == 150.0
        out = capsys.readouterr().out
        assert "Invalid number" in out
        assert "Must be at least 0" in out

    def test_prompt_int_default(self, monkeypatch):
        self._feed(monkeypatch, [""])
        assert cli._prompt_int("Years", 5, 1) == 5

    def test_collect_inputs_converts_lakhs(self, monkeypatch):
        self._feed(monkeypatch, ["30", "8.5", "15", "20", "10"])
        inputs = cli.collect_inputs()
        assert inputs == ComparisonInputs(3_000_000, 8.5, 15, 20, 10.0)


def test_display_data_for_unbounded_projection():
    inputs = ComparisonInputs(4_500_000, 9.0, 5, 10_000, 12.0)
    d = cli.compute_display_data(inputs, compare(4_500_000, 9, 5, 10_000, 12))
    user = d["scenarios"][-1]
    assert user["is_user"]
    assert fmt(user["fv_long"]) == "N/A (check inputs)"
    assert cli.generate_recommendation_text(d).startswith("Choose the 5-year loan")
