"""
CLI interface and shared display-data computation for the
Loan Tenure vs Invest comparator.
"""

from __future__ import annotations

import math
import sys
from typing import Any, Dict, List

import config as cfg
from comparison import (
    Comparison,
    ComparisonInputs,
    ComparisonResult,
    DegenerateComparison,
    Recommendation,
    ScenarioResult,
    ValidationFailure,
    run_comparison,
)
from formatting import fmt, pct, rate_label
import report


DISCLAIMER = (
    "This analysis assumes consistent monthly investments and does not "
    "account for market volatility, investment fees, or tax implications. "
    "It's a projection based on your input. Consider your risk tolerance "
    "and consult a financial advisor for personalised advice."
)


# ═══════════════════════════════════════════════════════════════════
# Input collection (CLI)
# ═══════════════════════════════════════════════════════════════════

def _strip_currency(s: str) -> str:
    """Remove currency symbols, commas, spaces."""
    return s.replace(cfg.CURRENCY_SYMBOL, "").replace(",", "").replace(" ", "")


def _prompt_float(
    label: str,
    default: Any,
    min_val: float | None = None,
    max_val: float | None = None,
) -> float:
    while True:
        raw = input(f"  {label} [{default}]: ").strip()
        if not raw:
            return float(default)
        try:
            val = float(_strip_currency(raw).replace("%", ""))
            if not math.isfinite(val):
                raise ValueError(raw)
            if min_val is not None and val < min_val:
                print(f"    Must be at least {min_val}")
                continue
            if max_val is not None and val > max_val:
                print(f"    Must be at most {max_val}")
                continue
            return val
        except ValueError:
            print("    Invalid number, try again.")


def _prompt_int(
    label: str,
    default: int,
    min_val: int | None = None,
    max_val: int | None = None,
) -> int:
    while True:
        raw = input(f"  {label} [{default}]: ").strip()
        if not raw:
            return default
        try:
            val = int(_strip_currency(raw))
            if min_val is not None and val < min_val:
                print(f"    Must be at least {min_val}")
                continue
            if max_val is not None and val > max_val:
                print(f"    Must be at most {max_val}")
                continue
            return val
        except ValueError:
            print("    Invalid whole number, try again.")


def collect_inputs() -> ComparisonInputs:
    """Prompt the user for the five comparison inputs."""
    print("\n  Enter your loan details (press Enter for defaults):\n")

    lakhs = _prompt_float("Loan amount (₹ lakhs)", cfg.DEFAULT_LOAN_LAKHS, 0.01)
    rate = _prompt_float("Interest rate % p.a.", cfg.DEFAULT_INTEREST_RATE, 0)
    tenure_a = _prompt_int("Loan tenure 1 (years)", cfg.DEFAULT_TENURE_A, 1)
    tenure_b = _prompt_int("Loan tenure 2 (years)", cfg.DEFAULT_TENURE_B, 1)
    growth = _prompt_float(
        "Expected annualised investment return %", cfg.DEFAULT_EXPECTED_GROWTH, 0,
    )

    return ComparisonInputs(
        loan_amount=lakhs * cfg.RUPEES_PER_LAKH,
        annual_rate_pct=rate,
        tenure_a_years=tenure_a,
        tenure_b_years=tenure_b,
        expected_growth_pct=growth,
    )


# ═══════════════════════════════════════════════════════════════════
# Shared display-data computation (used by CLI and web app)
# ═══════════════════════════════════════════════════════════════════

def _loan_data(loan) -> Dict[str, Any]:
    return {
        "tenure_years": loan.tenure_years,
        "emi": loan.periodic_payment,
        "total_payment": loan.total_payment,
        "total_interest": loan.total_interest,
    }


def scenario_summary_line(s: ScenarioResult) -> str:
    """One sentence on what choosing the longer loan means at this rate."""
    mine = " (your expectation)" if s.is_user_expectation else ""
    head = f"At {rate_label(s.growth_rate_pct)} expected annualised return{mine}:"
    if s.strategy_wins:
        return (
            f"{head} you could benefit by {fmt(s.net_financial_position)} by "
            f"choosing the longer loan and investing the EMI difference."
        )
    return (
        f"{head} you could incur an additional cost of "
        f"{fmt(abs(s.net_financial_position))} compared to taking the shorter loan."
    )


def _scenario_data(s: ScenarioResult) -> Dict[str, Any]:
    return {
        "rate": s.growth_rate_pct,
        "rate_label": rate_label(s.growth_rate_pct),
        "is_user": s.is_user_expectation,
        "total_contributed": s.total_contributed,
        "fv_short": s.future_value_short_term,
        "gain": s.investment_gain,
        "roi_pct": s.roi_pct,
        "net": s.net_financial_position,
        "effective_interest_saved": s.effective_interest_saved,
        "wins": s.strategy_wins,
        "fv_long": s.future_value_long_term,
        "impact_long": s.net_worth_impact_long_term,
        "summary": scenario_summary_line(s),
    }


def degenerate_message(result: DegenerateComparison) -> str:
    """Diagnostic shown instead of the analysis when there is no EMI saving."""
    s, lg = result.shorter_loan, result.longer_loan
    return (
        f"The {s.tenure_years}-year tenure results in a lower or equal EMI than "
        f"the {lg.tenure_years}-year tenure, so there is no EMI difference to "
        f"invest. Please choose two different tenures for the investment "
        f"analysis to be meaningful. Current EMI for the {s.tenure_years}-year "
        f"loan: {fmt(s.periodic_payment)}. Current EMI for the "
        f"{lg.tenure_years}-year loan: {fmt(lg.periodic_payment)}."
    )


def compute_display_data(inputs: ComparisonInputs, result: Comparison) -> Dict[str, Any]:
    """Extract every value needed for the output sections."""
    d: Dict[str, Any] = {
        # Inputs echo
        "loan_amount": inputs.loan_amount,
        "loan_lakhs": inputs.loan_amount / cfg.RUPEES_PER_LAKH,
        "interest_rate": inputs.annual_rate_pct,
        "expected_growth": inputs.expected_growth_pct,
        # Loans
        "short": _loan_data(result.shorter_loan),
        "long": _loan_data(result.longer_loan),
        "shorter_tenure": result.shorter_loan.tenure_years,
        "longer_tenure": result.longer_loan.tenure_years,
        "emi_difference": result.monthly_payment_difference,
        "degenerate": result.is_degenerate,
    }
    if isinstance(result, DegenerateComparison):
        d["message"] = degenerate_message(result)
        return d

    d.update({
        "extra_interest": result.extra_interest_cost,
        "remaining_payments": result.remaining_payments_after_short_term,
        "investment_months": result.shorter_tenure_years * cfg.MONTHS_PER_YEAR,
        "tenure_gap": result.tenure_gap_years,
        "scenarios": [_scenario_data(s) for s in result.scenarios],
        "recommendation": result.recommendation.value,
        "profitable_rates": result.profitable_rates,
    })
    return d


def core_question_text(d: Dict[str, Any]) -> str:
    return (
        f"Should you pay an extra {fmt(d['extra_interest'])} in interest "
        f"(by choosing the {d['longer_tenure']}-year loan) to free up "
        f"{fmt(d['emi_difference'])} monthly for investment over "
        f"{d['shorter_tenure']} years?"
    )


def generate_recommendation_text(d: Dict[str, Any]) -> str:
    """Build the plain-English final recommendation."""
    short, long_ = d["shorter_tenure"], d["longer_tenure"]
    rec = d["recommendation"]

    if rec == Recommendation.FAVORABLE.value:
        return (
            f"Choose the {long_}-year loan and invest the EMI difference. "
            f"This strategy shows consistent positive returns across all "
            f"tested scenarios, so the investment approach appears to be the "
            f"better financial strategy given your expected returns."
        )
    if rec == Recommendation.MIXED.value:
        rates = ", ".join(rate_label(r) for r in d["profitable_rates"])
        return (
            f"The decision depends on your expected investment returns. If "
            f"you're confident of consistently achieving higher annualised "
            f"returns ({rates}), choose the {long_}-year loan. Otherwise the "
            f"{short}-year loan provides more financial certainty by "
            f"minimising total interest paid."
        )
    return (
        f"Choose the {short}-year loan. Based on the tested scenarios, the "
        f"shorter loan term appears more cost-effective: the potential "
        f"investment gains are not sufficient to offset the extra interest "
        f"cost of the longer loan."
    )


def _wrap(text: str, width: int) -> List[str]:
    lines: List[str] = []
    line = ""
    for word in text.split():
        if len(line) + len(word) + 1 <= width:
            line = f"{line} {word}" if line else word
        else:
            lines.append(line)
            line = word
    if line:
        lines.append(line)
    return lines


# ═══════════════════════════════════════════════════════════════════
# Box-drawing CLI output
# ═══════════════════════════════════════════════════════════════════

W = 78  # box width (characters)
H = "═"


def _box_top(title: str) -> str:
    inner = W - 2
    return (
        f"╔{H * inner}╗\n"
        f"║  {title:<{inner - 2}}║\n"
        f"╠{H * inner}╣"
    )


def _box_line(text: str = "") -> str:
    inner = W - 4
    if len(text) > inner:
        text = text[:inner]
    return f"║  {text:<{inner}}║"


def _box_row(label: str, value: str, lw: int = 40) -> str:
    return _box_line(f"{label:<{lw}}{value}")


def _box_text(text: str) -> List[str]:
    return [_box_line(line) for line in _wrap(text, W - 6)]


def _box_bottom() -> str:
    return f"╚{H * (W - 2)}╝"


def _print_section(title: str, rows: List[str]) -> None:
    """Print a titled box with content rows."""
    print(_box_top(title))
    for r in rows:
        print(r)
    print(_box_bottom())
    print()


# ═══════════════════════════════════════════════════════════════════
# CLI Section Printers
# ═══════════════════════════════════════════════════════════════════

def _print_loan(label: str, loan: Dict[str, Any]) -> None:
    rows = [
        _box_row("Monthly EMI", fmt(loan["emi"])),
        _box_row("Total payment", fmt(loan["total_payment"])),
        _box_row("Total interest", fmt(loan["total_interest"])),
    ]
    _print_section(f"{label}: {loan['tenure_years']} YEARS", rows)


def _print_key_metrics(d: Dict[str, Any]) -> None:
    short, long_ = d["shorter_tenure"], d["longer_tenure"]
    rows = [
        _box_row("Monthly EMI saving", f"{fmt(d['emi_difference'])} ({long_}-year loan)"),
        _box_row("Investment period", f"{short} years ({d['investment_months']} months)"),
        _box_row("Extra interest cost", fmt(d["extra_interest"])),
    ]
    if d["tenure_gap"] > 0:
        rows.append(_box_row(
            "Remaining payments",
            f"{fmt(d['remaining_payments'])} (years {short + 1}-{long_})",
        ))
    rows.append(_box_line())
    rows.extend(_box_text(core_question_text(d)))
    _print_section("KEY FINANCIAL METRICS", rows)


def _print_scenarios(d: Dict[str, Any]) -> None:
    short, long_ = d["shorter_tenure"], d["longer_tenure"]
    for s in d["scenarios"]:
        rows = [
            _box_row("Total amount invested", fmt(s["total_contributed"])),
            _box_row(f"Investment value (after {short} years)", fmt(s["fv_short"])),
            _box_row("Investment gains", f"{fmt(s['gain'])} ({pct(s['roi_pct'])})"),
            _box_row("Extra interest cost (longer loan)", fmt(d["extra_interest"])),
            _box_row("Net financial position", fmt(s["net"])),
            _box_row(
                "Break-even analysis",
                "Investment strategy wins" if s["wins"] else "Shorter loan better",
            ),
        ]
        if s["fv_long"] is not None:
            rows.extend([
                _box_line(),
                _box_row(f"Future value (after {long_} years)", fmt(s["fv_long"])),
                _box_row("Remaining loan payments", fmt(d["remaining_payments"])),
                _box_row(f"Net worth impact (after {long_} years)", fmt(s["impact_long"])),
            ])
        title = f"EXPECTED RETURN: {s['rate_label']}"
        if s["is_user"]:
            title += " (YOUR EXPECTATION)"
        _print_section(title, rows)


def _print_recommendation(d: Dict[str, Any]) -> None:
    labels = {
        Recommendation.FAVORABLE.value: "LONGER LOAN + INVEST",
        Recommendation.MIXED.value: "DEPENDS ON YOUR RETURNS",
        Recommendation.UNFAVORABLE.value: "SHORTER LOAN",
    }
    rows = [_box_row("Verdict", labels[d["recommendation"]]), _box_line()]
    for s in d["scenarios"]:
        rows.extend(_box_text(s["summary"]))
    rows.append(_box_line())
    rows.extend(_box_text(generate_recommendation_text(d)))
    rows.append(_box_line())
    rows.extend(_box_text(f"Important: {DISCLAIMER}"))
    _print_section("STRATEGIC RECOMMENDATION", rows)


def _print_degenerate(d: Dict[str, Any]) -> None:
    _print_section("NO EMI DIFFERENCE TO INVEST", _box_text(d["message"]))


def _print_charts(pdf_path: str | None) -> None:
    rows = []
    if pdf_path:
        rows.append(_box_line(f"PDF report saved to: {pdf_path}"))
    else:
        rows.append(_box_line("Charts available in the web app:"))
        rows.append(_box_line("  python main.py  (opens localhost:5000)"))
    _print_section("CHARTS", rows)


def print_results(d: Dict[str, Any]) -> None:
    """Print every output section for an already computed comparison."""
    _print_loan("LOAN OPTION 1", d["short"])
    _print_loan("LOAN OPTION 2", d["long"])
    if d["degenerate"]:
        _print_degenerate(d)
        return
    _print_key_metrics(d)
    _print_scenarios(d)
    _print_recommendation(d)


# ═══════════════════════════════════════════════════════════════════
# Main CLI entry point
# ═══════════════════════════════════════════════════════════════════

def run_cli(pdf_path: str = cfg.REPORT_FILENAME) -> None:
    """Run the full CLI workflow."""
    # Ensure box-drawing characters render on Windows
    try:
        sys.stdout.reconfigure(encoding="utf-8")
    except (AttributeError, OSError):
        pass
    print()
    print("=" * W)
    print("  Loan Tenure Comparison: Shorter Loan vs Longer Loan + Invest")
    print("=" * W)

    inputs = collect_inputs()

    try:
        result = run_comparison(inputs)
    except ValidationFailure as exc:
        print(f"\n  Cannot compare: {exc.message}\n")
        return

    d = compute_display_data(inputs, result)
    print()
    print_results(d)

    if isinstance(result, ComparisonResult):
        print("  Generating PDF report...")
        saved = report.generate_pdf(
            inputs, result, d, generate_recommendation_text(d), pdf_path,
        )
        print(f"  Saved to {saved}\n")
        _print_charts(saved)
    else:
        _print_charts(None)


if __name__ == "__main__":
    run_cli()
