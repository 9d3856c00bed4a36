"""
Flask web application for the Loan Tenure vs Invest comparator.

Single-file app using render_template_string.  Run via ``python main.py``
which starts the dev server on localhost:5000.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

from flask import Flask, render_template_string, request, send_file

import config as cfg
from comparison import (
    ComparisonInputs,
    ComparisonResult,
    ValidationFailure,
    run_comparison,
)
from cli import (
    DISCLAIMER,
    compute_display_data,
    core_question_text,
    generate_recommendation_text,
)
from formatting import fmt, pct
import report

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["REPORT_PATH"] = cfg.REPORT_FILENAME

# ═══════════════════════════════════════════════════════════════════
# Form parsing
# ═══════════════════════════════════════════════════════════════════

FORM_DEFAULTS = {
    "loan_lakhs": str(cfg.DEFAULT_LOAN_LAKHS),
    "interest_rate": str(cfg.DEFAULT_INTEREST_RATE),
    "tenure_a": str(cfg.DEFAULT_TENURE_A),
    "tenure_b": str(cfg.DEFAULT_TENURE_B),
    "expected_growth": str(cfg.DEFAULT_EXPECTED_GROWTH),
}


def _parse_number(form: dict, key: str, field_name: str, label: str) -> float:
    raw = str(form.get(key, FORM_DEFAULTS[key]))
    cleaned = raw.replace(cfg.CURRENCY_SYMBOL, "").replace(",", "").replace("%", "").strip()
    try:
        return float(cleaned)
    except ValueError:
        raise ValidationFailure(field_name, f"{label} must be a number") from None


def parse_form(form: dict) -> ComparisonInputs:
    """Parse the HTML form into ComparisonInputs (loan amount is in lakhs)."""
    lakhs = _parse_number(form, "loan_lakhs", "loan_amount", "Loan amount")
    return ComparisonInputs(
        loan_amount=lakhs * cfg.RUPEES_PER_LAKH,
        annual_rate_pct=_parse_number(form, "interest_rate", "annual_rate_pct", "Interest rate"),
        tenure_a_years=_parse_number(form, "tenure_a", "tenure_a_years", "Loan tenure 1"),
        tenure_b_years=_parse_number(form, "tenure_b", "tenure_b_years", "Loan tenure 2"),
        expected_growth_pct=_parse_number(form, "expected_growth", "expected_growth_pct",
                                          "Expected return"),
    )


# ═══════════════════════════════════════════════════════════════════
# HTML Template
# ═══════════════════════════════════════════════════════════════════

HTML_TEMPLATE = r"""
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Loan Tenure Comparison: Shorter Loan vs Invest the Difference</title>
<style>
  *{margin:0;padding:0;box-sizing:border-box}
  :root{
    --bg-deep:#050816;
    --bg-surface:rgba(15,23,42,0.55);
    --bg-input:rgba(8,11,22,0.85);
    --border-subtle:rgba(99,102,241,0.1);
    --text-primary:#f1f5f9;
    --text-secondary:#94a3b8;
    --text-muted:#64748b;
    --indigo:#818cf8;
    --indigo-deep:#6366f1;
    --violet:#8b5cf6;
    --emerald:#34d399;
    --emerald-deep:#10b981;
    --amber:#fbbf24;
    --red:#f87171;
    --radius-lg:16px;
    --radius-md:10px;
  }
  body{
    background:var(--bg-deep);color:var(--text-primary);
    font-family:system-ui,-apple-system,sans-serif;line-height:1.6;min-height:100vh;
  }
  .container{max-width:1140px;margin:0 auto;padding:2rem 1.5rem}
  .hero{text-align:center;padding:1.5rem 0 2.5rem}
  .hero h1{font-size:clamp(1.5rem,4vw,2.3rem);font-weight:800;letter-spacing:-.03em}
  .hero-sub{color:var(--text-secondary);margin-top:.6rem;font-size:.92rem}
  .card{
    background:var(--bg-surface);border:1px solid var(--border-subtle);
    border-radius:var(--radius-lg);padding:1.6rem;margin-bottom:1.4rem;
  }
  h2{font-size:1.1rem;font-weight:700;margin-bottom:1rem}
  h3{font-size:.95rem;font-weight:700;margin-bottom:.6rem}
  .form-grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(220px,1fr));gap:1rem 1.5rem}
  .form-group{display:flex;flex-direction:column}
  .form-group label{font-size:.78rem;color:var(--text-secondary);margin-bottom:.3rem;font-weight:500}
  .form-group input{
    background:var(--bg-input);border:1px solid rgba(71,85,105,.35);border-radius:var(--radius-md);
    color:var(--text-primary);padding:.6rem .85rem;font-size:.88rem;font-family:inherit;
  }
  .btn{
    display:inline-flex;align-items:center;justify-content:center;padding:.75rem 2rem;border:none;
    border-radius:var(--radius-md);font-size:.95rem;font-weight:600;cursor:pointer;text-decoration:none;
  }
  .btn-primary{background:linear-gradient(135deg,var(--indigo-deep),var(--violet));color:#fff}
  .btn-success{background:linear-gradient(135deg,var(--emerald-deep),var(--emerald));color:#fff}
  .options-grid{display:grid;grid-template-columns:1fr 1fr;gap:1.4rem;margin-bottom:1.4rem}
  .scenario-grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(320px,1fr));gap:1.4rem}
  @media(max-width:768px){.options-grid{grid-template-columns:1fr}}
  .stat-row{
    display:flex;justify-content:space-between;align-items:center;gap:1rem;
    padding:.45rem 0;border-bottom:1px solid rgba(51,65,85,.3);
  }
  .stat-row:last-child{border-bottom:none}
  .stat-label{color:var(--text-secondary);font-size:.86rem}
  .stat-value{font-weight:600;font-size:.86rem;font-variant-numeric:tabular-nums;text-align:right}
  .pos{color:var(--emerald)}
  .neg{color:var(--red)}
  .user-pick{border-color:rgba(251,191,36,.45)}
  .highlight{color:var(--text-secondary);font-size:.88rem;line-height:1.75}
  .highlight strong{color:var(--text-primary)}
  .summary-line{padding:.5rem .8rem;margin:.35rem 0;border-radius:8px;font-size:.86rem}
  .summary-line.pos{background:rgba(52,211,153,.08);border-left:4px solid var(--emerald);color:var(--text-primary)}
  .summary-line.neg{background:rgba(248,113,113,.08);border-left:4px solid var(--red);color:var(--text-primary)}
  .verdict{font-size:1.05rem;font-weight:700;margin:.8rem 0}
  .verdict.favorable{color:var(--emerald)}
  .verdict.mixed{color:var(--amber)}
  .verdict.unfavorable{color:var(--indigo)}
  .warning{
    background:rgba(245,158,11,.06);border:1px solid rgba(245,158,11,.18);border-radius:var(--radius-md);
    padding:.9rem 1rem;font-size:.88rem;color:#fcd34d;line-height:1.6;
  }
  .error{
    background:rgba(248,113,113,.08);border:1px solid rgba(248,113,113,.25);border-radius:var(--radius-md);
    padding:.75rem 1rem;margin-top:1rem;font-size:.86rem;color:var(--red);
  }
  .disclaimer{color:var(--text-muted);font-size:.8rem;margin-top:1rem;line-height:1.6}
  .chart-img{width:100%;border-radius:var(--radius-md);margin-bottom:.5rem}
  .dl-section{text-align:center;padding:1.5rem 0 2rem}
  .footer{text-align:center;padding:1rem 0 2rem;color:var(--text-muted);font-size:.78rem}
</style>
</head>
<body>
<div class="container">

<header class="hero">
  <h1>Loan Tenure Comparison</h1>
  <p class="hero-sub">Take the shorter loan, or take the longer one and invest the EMI difference?</p>
</header>

<!-- Input Form -->
<div class="card">
  <h2>Your Loan</h2>
  <form method="POST" id="compare-form">
    <div class="form-grid">
      <div class="form-group">
        <label for="loan_lakhs">Loan Amount (&#8377; Lakhs)</label>
        <input type="number" step="0.1" id="loan_lakhs" name="loan_lakhs" value="{{ form.loan_lakhs }}">
      </div>
      <div class="form-group">
        <label for="interest_rate">Interest Rate (% p.a.)</label>
        <input type="number" step="0.1" id="interest_rate" name="interest_rate" value="{{ form.interest_rate }}">
      </div>
      <div class="form-group">
        <label for="tenure_a">Loan Tenure 1 (Years)</label>
        <input type="number" step="1" id="tenure_a" name="tenure_a" value="{{ form.tenure_a }}">
      </div>
      <div class="form-group">
        <label for="tenure_b">Loan Tenure 2 (Years)</label>
        <input type="number" step="1" id="tenure_b" name="tenure_b" value="{{ form.tenure_b }}">
      </div>
      <div class="form-group">
        <label for="expected_growth">Expected Annualised Investment Return (%)</label>
        <input type="number" step="0.1" id="expected_growth" name="expected_growth" value="{{ form.expected_growth }}">
      </div>
    </div>
    <div style="margin-top:1.2rem">
      <button type="submit" class="btn btn-primary">Calculate Comparison</button>
    </div>
  </form>
  {% if error %}
  <div class="error">{{ error }}</div>
  {% endif %}
</div>

{% if d %}
<!-- Loan options side by side -->
<div class="options-grid">
  {% for key, title in [("short", "Loan Option 1"), ("long", "Loan Option 2")] %}
  {% set loan = d[key] %}
  <div class="card">
    <h2>{{ title }} ({{ loan.tenure_years }} Years)</h2>
    <div class="stat-row"><span class="stat-label">Monthly EMI</span><span class="stat-value">{{ fmt(loan.emi) }}</span></div>
    <div class="stat-row"><span class="stat-label">Total Payment</span><span class="stat-value">{{ fmt(loan.total_payment) }}</span></div>
    <div class="stat-row"><span class="stat-label">Total Interest</span><span class="stat-value">{{ fmt(loan.total_interest) }}</span></div>
  </div>
  {% endfor %}
</div>

{% if d.degenerate %}
<div class="card"><div class="warning">{{ d.message }}</div></div>
{% else %}
<!-- Key metrics -->
<div class="card">
  <h2>Investment Analysis</h2>
  <p class="highlight">
    <strong>Monthly EMI saving:</strong> {{ fmt(d.emi_difference) }} (by choosing the {{ d.longer_tenure }}-year loan)<br>
    <strong>Total investment period:</strong> {{ d.shorter_tenure }} years ({{ d.investment_months }} months)<br>
    <strong>Extra interest cost:</strong> {{ fmt(d.extra_interest) }} (for the longer loan)<br>
    {% if d.tenure_gap > 0 %}
    <strong>Remaining payments:</strong> {{ fmt(d.remaining_payments) }} (years {{ d.shorter_tenure + 1 }}-{{ d.longer_tenure }})<br>
    {% endif %}
  </p>
</div>

<!-- Scenarios -->
<div class="scenario-grid">
  {% for s in d.scenarios %}
  <div class="card {{ 'user-pick' if s.is_user }}">
    <h3>Expected Return: {{ s.rate_label }}{{ " (Your Expectation)" if s.is_user }}</h3>
    <div class="stat-row"><span class="stat-label">Total Amount Invested</span><span class="stat-value">{{ fmt(s.total_contributed) }}</span></div>
    <div class="stat-row"><span class="stat-label">Investment Value (after {{ d.shorter_tenure }} years)</span><span class="stat-value">{{ fmt(s.fv_short) }}</span></div>
    <div class="stat-row"><span class="stat-label">Investment Gains</span><span class="stat-value {{ 'pos' if s.gain > 0 else 'neg' }}">{{ fmt(s.gain) }} ({{ pct(s.roi_pct) }})</span></div>
    <div class="stat-row"><span class="stat-label">Extra Interest Cost (Longer Loan)</span><span class="stat-value neg">{{ fmt(d.extra_interest) }}</span></div>
    <div class="stat-row"><span class="stat-label">Net Financial Position</span><span class="stat-value {{ 'pos' if s.wins else 'neg' }}">{{ fmt(s.net) }}</span></div>
    <div class="stat-row"><span class="stat-label">Break-even Analysis</span><span class="stat-value {{ 'pos' if s.wins else 'neg' }}">{{ "Investment Strategy Wins" if s.wins else "Shorter Loan Better" }}</span></div>
    {% if s.fv_long is not none %}
    <div class="stat-row"><span class="stat-label">Future Value (after {{ d.longer_tenure }} years)</span><span class="stat-value">{{ fmt(s.fv_long) }}</span></div>
    <div class="stat-row"><span class="stat-label">Remaining Loan Payments</span><span class="stat-value">{{ fmt(d.remaining_payments) }}</span></div>
    <div class="stat-row"><span class="stat-label">Net Worth Impact (after {{ d.longer_tenure }} years)</span><span class="stat-value {{ 'pos' if s.impact_long > 0 else 'neg' }}">{{ fmt(s.impact_long) }}</span></div>
    {% endif %}
  </div>
  {% endfor %}
</div>

<!-- Recommendation -->
<div class="card">
  <h2>Strategic Financial Recommendation</h2>
  <p class="highlight"><strong>The core question:</strong> {{ core_question }}</p>
  <div style="margin-top:1rem">
    {% for s in d.scenarios %}
    <p class="summary-line {{ 'pos' if s.wins else 'neg' }}">{{ s.summary }}</p>
    {% endfor %}
  </div>
  <p class="verdict {{ d.recommendation }}">{{ recommendation_text }}</p>
  <p class="disclaimer"><strong>Important:</strong> {{ disclaimer }}</p>
</div>

{% for title, img in charts %}
<div class="card">
  <h2>{{ title }}</h2>
  <img class="chart-img" src="data:image/png;base64,{{ img }}" alt="{{ title }}">
</div>
{% endfor %}

<div class="dl-section">
  <a href="/download-pdf" class="btn btn-success">Download PDF Report</a>
</div>
{% endif %}
{% endif %}

<div class="footer">Closed-form EMI and annuity maths &middot; for illustration only</div>
</div>
</body>
</html>
"""

CHART_TITLES = [
    "Net Financial Position by Scenario",
    "Investment Value Over Time",
    "What Each Tenure Costs",
]


# ═══════════════════════════════════════════════════════════════════
# Routes
# ═══════════════════════════════════════════════════════════════════

def _render(form: Dict[str, Any], **context: Any) -> str:
    params = {
        "form": {**FORM_DEFAULTS, **form},
        "d": None,
        "error": None,
        "charts": [],
        "core_question": "",
        "recommendation_text": "",
        "disclaimer": DISCLAIMER,
        "fmt": fmt,
        "pct": pct,
    }
    params.update(context)
    return render_template_string(HTML_TEMPLATE, **params)


def _clear_report() -> None:
    """Drop the PDF left over from an earlier comparison."""
    path = app.config["REPORT_PATH"]
    if os.path.exists(path):
        os.remove(path)


@app.route("/", methods=["GET", "POST"])
def index():
    if request.method == "GET":
        return _render({})

    # POST: run comparison
    form = request.form.to_dict()
    try:
        inputs = parse_form(form)
        result = run_comparison(inputs)
    except ValidationFailure as exc:
        logger.info("Rejected form input %s: %s", exc.field, exc.message)
        _clear_report()
        return _render(form, error=exc.message), 400

    d = compute_display_data(inputs, result)
    if not isinstance(result, ComparisonResult):
        _clear_report()
        return _render(form, d=d)

    recommendation_text = generate_recommendation_text(d)
    charts = list(zip(CHART_TITLES, report.get_web_charts(result)))
    report.generate_pdf(inputs, result, d, recommendation_text,
                        app.config["REPORT_PATH"])

    return _render(
        form,
        d=d,
        charts=charts,
        core_question=core_question_text(d),
        recommendation_text=recommendation_text,
    )


@app.route("/download-pdf")
def download_pdf():
    path = app.config["REPORT_PATH"]
    if os.path.exists(path):
        return send_file(os.path.abspath(path), as_attachment=True,
                         download_name=cfg.REPORT_FILENAME)
    return "No report generated yet. Run a comparison first.", 404


# ═══════════════════════════════════════════════════════════════════
# Entry point
# ═══════════════════════════════════════════════════════════════════

def run_web(debug: bool = True) -> None:
    """Start the Flask development server and open browser."""
    import webbrowser
    import threading

    url = f"http://localhost:{cfg.WEB_PORT}"
    print(f"Starting web app at {url}")
    threading.Timer(1.0, lambda: webbrowser.open(url)).start()
    app.run(host=cfg.WEB_HOST, port=cfg.WEB_PORT, debug=debug)


if __name__ == "__main__":
    run_web()
