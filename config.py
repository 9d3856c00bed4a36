"""
Constants for the Loan Tenure vs Invest comparator.

All monetary values in INR. Rates are annual percentages (9 means 9% p.a.)
unless stated otherwise.
"""

# ── Calendar ─────────────────────────────────────────────────────────
MONTHS_PER_YEAR = 12

# ── Growth scenarios ─────────────────────────────────────────────────
# Annualised return scenarios always tested alongside the user's own
# expectation (which is added if not already present).
DEFAULT_SCENARIO_RATES = (10.0, 11.0, 12.0)

# Lump-sum projection compounds once a year unless told otherwise.
COMPOUNDING_PERIODS_PER_YEAR = 1

# ── Default inputs (match the web form and CLI prompts) ──────────────
RUPEES_PER_LAKH = 100_000
DEFAULT_LOAN_LAKHS = 45.0
DEFAULT_INTEREST_RATE = 9.0        # % p.a.
DEFAULT_TENURE_A = 5               # years
DEFAULT_TENURE_B = 10              # years
DEFAULT_EXPECTED_GROWTH = 12.0     # % p.a.

# ── Display ──────────────────────────────────────────────────────────
CURRENCY_SYMBOL = "₹"
UNBOUNDED_LABEL = "N/A (check inputs)"

# ── Output / web ─────────────────────────────────────────────────────
REPORT_FILENAME = "loan_tenure_report.pdf"
WEB_HOST = "127.0.0.1"
WEB_PORT = 5000
