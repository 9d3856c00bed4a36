"""
PDF report generation and reusable chart rendering for the
Loan Tenure vs Invest comparator.

Provides:
  - Multi-page PDF report (generate_pdf)
  - Base64-encoded chart images for web embedding (get_web_charts)
  - Individual chart renderers reusable by both CLI and web
"""

from __future__ import annotations

import base64
import io
from typing import Any, Dict, List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.ticker import FuncFormatter
import numpy as np

import config as cfg
import finance
from comparison import ComparisonInputs, ComparisonResult
from formatting import fmt

# ═══════════════════════════════════════════════════════════════════
# Style constants
# ═══════════════════════════════════════════════════════════════════

BG = "#0a101f"
CARD = "#131b2e"
TEXT = "#f1f5f9"
TEXT2 = "#cbd5e1"
INDIGO = "#818cf8"
EMERALD = "#34d399"
AMBER = "#fbbf24"
RED = "#f87171"
SLATE = "#94a3b8"
BORDER = "#1e293b"
INDIGO_DEEP = "#6366f1"
EMERALD_DEEP = "#10b981"

SCENARIO_COLORS = [INDIGO, EMERALD, AMBER, "#c4b5fd", "#60a5fa"]

A4W, A4H = 8.27, 11.69
WEB_W, WEB_H = 10, 7


# ═══════════════════════════════════════════════════════════════════
# Axis formatters
# ═══════════════════════════════════════════════════════════════════

def _inr_fmt(x, _):
    """Compact rupee label: crore, lakh, thousand."""
    if abs(x) >= 1e11:
        return f"{cfg.CURRENCY_SYMBOL}{x / 1e7:.3g}Cr"
    if abs(x) >= 1e7:
        return f"{cfg.CURRENCY_SYMBOL}{x / 1e7:.1f}Cr"
    if abs(x) >= 1e5:
        return f"{cfg.CURRENCY_SYMBOL}{x / 1e5:.0f}L"
    if abs(x) >= 1e3:
        return f"{cfg.CURRENCY_SYMBOL}{x / 1e3:.0f}k"
    return f"{cfg.CURRENCY_SYMBOL}{x:.0f}"


INR_FMT = FuncFormatter(_inr_fmt)


def _plottable(values, fill=np.nan) -> np.ndarray:
    """Replace overflowed or unbounded magnitudes so matplotlib can draw the rest."""
    arr = np.asarray(values, dtype=float)
    return np.where(np.isfinite(arr), arr, fill)


# ═══════════════════════════════════════════════════════════════════
# Style helpers
# ═══════════════════════════════════════════════════════════════════

def _style(fig, *axes):
    """Apply dark theme to figure and all axes."""
    fig.patch.set_facecolor(BG)
    for ax in axes:
        ax.set_facecolor(CARD)
        ax.tick_params(colors=TEXT, labelsize=8)
        ax.xaxis.label.set_color(TEXT)
        ax.yaxis.label.set_color(TEXT)
        ax.title.set_color(TEXT)
        for spine in ax.spines.values():
            spine.set_color(BORDER)
        ax.grid(True, alpha=0.15, color=SLATE)


def _legend(ax, loc="upper left"):
    ax.legend(loc=loc, fontsize=8, facecolor=CARD, edgecolor=BORDER, labelcolor=TEXT)


def _rate_label(rate: float, is_user: bool) -> str:
    return f"{rate:g}%" + (" (yours)" if is_user else "")


# ═══════════════════════════════════════════════════════════════════
# Page 1: summary (text only, dark background)
# ═══════════════════════════════════════════════════════════════════

def _page1_summary(inputs: ComparisonInputs, d: Dict,
                   recommendation_text: str) -> plt.Figure:
    fig = plt.figure(figsize=(A4W, A4H))
    fig.patch.set_facecolor(BG)

    fig.text(0.50, 0.93, "Loan Tenure Comparison",
             ha="center", fontsize=18, color=TEXT, fontweight="bold")
    fig.text(0.50, 0.91, "Shorter loan vs longer loan + invest the EMI difference",
             ha="center", fontsize=11, color=TEXT2)

    y = 0.86
    fig.text(0.08, y, "Your Parameters", fontsize=13, color=TEXT, fontweight="bold")
    y -= 0.028
    params = [
        f"Loan: {fmt(inputs.loan_amount)}  |  Rate: {inputs.annual_rate_pct:g}% p.a.  |  "
        f"Tenures: {d['shorter_tenure']} vs {d['longer_tenure']} years",
        f"Expected annualised investment return: {inputs.expected_growth_pct:g}%",
    ]
    for p in params:
        fig.text(0.10, y, p, fontsize=9, color=TEXT2)
        y -= 0.024

    for label, key, color in (("Loan Option 1", "short", INDIGO),
                              ("Loan Option 2", "long", EMERALD)):
        loan = d[key]
        y -= 0.02
        fig.text(0.08, y, f"{label}: {loan['tenure_years']} Years",
                 fontsize=13, color=color, fontweight="bold")
        y -= 0.028
        for line in (f"Monthly EMI: {fmt(loan['emi'])}",
                     f"Total payment: {fmt(loan['total_payment'])}",
                     f"Total interest: {fmt(loan['total_interest'])}"):
            fig.text(0.10, y, line, fontsize=9.5, color=TEXT2)
            y -= 0.024

    y -= 0.02
    fig.text(0.08, y, "Key Financial Metrics", fontsize=13, color=TEXT, fontweight="bold")
    y -= 0.028
    metrics = [
        f"Monthly EMI saving: {fmt(d['emi_difference'])}",
        f"Investment period: {d['shorter_tenure']} years ({d['investment_months']} months)",
        f"Extra interest cost: {fmt(d['extra_interest'])}",
    ]
    if d["tenure_gap"] > 0:
        metrics.append(
            f"Remaining payments (years {d['shorter_tenure'] + 1}-{d['longer_tenure']}): "
            f"{fmt(d['remaining_payments'])}"
        )
    for line in metrics:
        fig.text(0.10, y, line, fontsize=9.5, color=TEXT2)
        y -= 0.024

    y -= 0.02
    fig.text(0.08, y, "Scenarios", fontsize=13, color=TEXT, fontweight="bold")
    y -= 0.028
    for s in d["scenarios"]:
        color = EMERALD if s["wins"] else RED
        fig.text(0.10, y,
                 f"{_rate_label(s['rate'], s['is_user'])}: value {fmt(s['fv_short'])}, "
                 f"net position {fmt(s['net'])}",
                 fontsize=9.5, color=color)
        y -= 0.024

    y -= 0.03
    rec_color = {"favorable": EMERALD, "mixed": AMBER}.get(d["recommendation"], INDIGO)
    fig.text(0.08, y, "Recommendation", fontsize=13, color=TEXT, fontweight="bold")
    y -= 0.03

    words = recommendation_text.split()
    line = ""
    for word in words:
        if len(line) + len(word) + 1 <= 85:
            line = f"{line} {word}" if line else word
        else:
            fig.text(0.10, y, line, fontsize=9.5, color=rec_color)
            y -= 0.022
            line = word
    if line:
        fig.text(0.10, y, line, fontsize=9.5, color=rec_color)

    fig.text(0.50, 0.03,
             "Assumes steady monthly investing. No volatility, fees or tax modelled. "
             "This is not financial advice.",
             ha="center", fontsize=8, color=SLATE, style="italic")
    return fig


# ═══════════════════════════════════════════════════════════════════
# Net financial position by scenario
# ═══════════════════════════════════════════════════════════════════

def _chart_net_position(result: ComparisonResult,
                        figsize=(WEB_W, WEB_H - 1)) -> plt.Figure:
    """Bar per scenario: invested pot minus the extra interest cost."""
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    _style(fig, ax)

    labels = [_rate_label(s.growth_rate_pct, s.is_user_expectation)
              for s in result.scenarios]
    nets = np.array([s.net_financial_position for s in result.scenarios])
    colors = np.where(nets > 0, EMERALD, RED).tolist()
    heights = _plottable(nets, fill=0.0)

    x = np.arange(len(labels))
    bars = ax.bar(x, heights, 0.55, color=colors, edgecolor=BORDER, linewidth=0.5)
    for i, s in enumerate(result.scenarios):
        if s.is_user_expectation:
            bars[i].set_edgecolor(AMBER)
            bars[i].set_linewidth(2)
        if not np.isfinite(nets[i]):
            ax.annotate(fmt(nets[i]), xy=(i, 0), xytext=(0, 6),
                        textcoords="offset points", ha="center",
                        fontsize=8, color=TEXT)
    ax.axhline(0, color=SLATE, linewidth=1)
    ax.set_xticks(x)
    ax.set_xticklabels(labels, fontsize=9)
    ax.yaxis.set_major_formatter(INR_FMT)
    ax.set_xlabel("Expected annualised return")
    ax.set_ylabel("Net financial position")
    ax.set_title(
        f"Investing the EMI saving for {result.shorter_tenure_years} years "
        f"vs {fmt(result.extra_interest_cost)} extra interest",
        fontsize=12, pad=12,
    )
    return fig


# ═══════════════════════════════════════════════════════════════════
# Investment value over time
# ═══════════════════════════════════════════════════════════════════

def investment_path(result: ComparisonResult, rate: float) -> np.ndarray:
    """Year-end pot value from year 0 to the longer tenure.

    Monthly contributions until the shorter loan would have ended, then the
    pot compounds untouched for the remaining years.
    """
    short_years = result.shorter_tenure_years
    building = finance.contribution_growth_path(
        result.monthly_payment_difference, rate, short_years,
    )
    if result.tenure_gap_years <= 0:
        return building
    holding = finance.compound_growth_path(building[-1], rate, result.tenure_gap_years)
    return np.concatenate([building, holding[1:]])


def _chart_growth(result: ComparisonResult,
                  figsize=(WEB_W, WEB_H - 1)) -> plt.Figure:
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    _style(fig, ax)

    years = np.arange(result.longer_tenure_years + 1)
    for i, s in enumerate(result.scenarios):
        path = investment_path(result, s.growth_rate_pct)
        ax.plot(years[:len(path)], _plottable(path),
                color=SCENARIO_COLORS[i % len(SCENARIO_COLORS)],
                linewidth=2.6 if s.is_user_expectation else 1.6,
                label=_rate_label(s.growth_rate_pct, s.is_user_expectation))

    if np.isfinite(result.extra_interest_cost):
        ax.axhline(result.extra_interest_cost, color=RED, linestyle="--", linewidth=1.2,
                   label="Extra interest cost")
    if result.tenure_gap_years > 0:
        ax.axvline(result.shorter_tenure_years, color=SLATE, linestyle=":", linewidth=1)
        ax.annotate(
            "Contributions stop", xy=(result.shorter_tenure_years, 0),
            xytext=(4, 8), textcoords="offset points",
            fontsize=8, color=SLATE,
        )
    ax.yaxis.set_major_formatter(INR_FMT)
    ax.set_xlabel("Years")
    ax.set_ylabel("Investment value")
    ax.set_title("Investment Value Over Time", fontsize=13, pad=12)
    _legend(ax)
    return fig


# ═══════════════════════════════════════════════════════════════════
# Loan cost breakdown
# ═══════════════════════════════════════════════════════════════════

def _chart_loan_costs(result: ComparisonResult,
                      figsize=(WEB_W, WEB_H - 1)) -> plt.Figure:
    """Stacked principal + interest bars for both tenures."""
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    _style(fig, ax)

    loans = [result.shorter_loan, result.longer_loan]
    interest = _plottable([ln.total_interest for ln in loans], fill=0.0)
    principal = _plottable([ln.total_payment - ln.total_interest for ln in loans], fill=0.0)

    x = np.arange(len(loans))
    ax.bar(x, principal, 0.5, color=INDIGO, label="Principal",
           edgecolor=INDIGO_DEEP, linewidth=0.5)
    ax.bar(x, interest, 0.5, bottom=principal, color=AMBER, label="Interest")
    for i, ln in enumerate(loans):
        ax.annotate(f"EMI {fmt(ln.periodic_payment)}",
                    xy=(i, principal[i] + interest[i]), xytext=(0, 6),
                    textcoords="offset points", ha="center",
                    fontsize=9, color=TEXT)
    ax.set_xticks(x)
    ax.set_xticklabels([f"{ln.tenure_years} years" for ln in loans])
    ax.yaxis.set_major_formatter(INR_FMT)
    ax.set_ylabel("Total paid")
    ax.set_title("What Each Tenure Costs", fontsize=13, pad=12)
    _legend(ax)
    return fig


# ═══════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════

def figure_to_base64(fig: plt.Figure) -> str:
    """Convert a matplotlib figure to a base64-encoded PNG string."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", facecolor=fig.get_facecolor(),
                dpi=150, bbox_inches="tight")
    buf.seek(0)
    b64 = base64.b64encode(buf.read()).decode()
    buf.close()
    return b64


def generate_pdf(
    inputs: ComparisonInputs,
    result: ComparisonResult,
    d: Dict[str, Any],
    recommendation_text: str,
    path: str = cfg.REPORT_FILENAME,
) -> str:
    """Generate the full PDF report. Returns the file path."""
    pages = [
        _page1_summary(inputs, d, recommendation_text),
        _chart_net_position(result, figsize=(A4W, A4H * 0.55)),
        _chart_growth(result, figsize=(A4W, A4H * 0.55)),
        _chart_loan_costs(result, figsize=(A4W, A4H * 0.55)),
    ]

    try:
        with PdfPages(path) as pdf:
            for fig in pages:
                pdf.savefig(fig, facecolor=fig.get_facecolor())
    finally:
        for fig in pages:
            plt.close(fig)
    return path


def get_web_charts(result: ComparisonResult) -> List[str]:
    """Return base64-encoded PNG chart images for web embedding.

    Returns 3 charts:
      [0] Net financial position by scenario
      [1] Investment value over time
      [2] Loan cost breakdown
    """
    chart_figs = [
        _chart_net_position(result),
        _chart_growth(result),
        _chart_loan_costs(result),
    ]

    try:
        images = [figure_to_base64(f) for f in chart_figs]
    finally:
        for f in chart_figs:
            plt.close(f)
    return images
