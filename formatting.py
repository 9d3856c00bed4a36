"""
Number formatting shared by the CLI, the web app and the PDF report.

Rupee amounts use en-IN grouping (``₹45,00,000``) with no decimals; any
non-finite value renders as ``cfg.UNBOUNDED_LABEL``.
"""

from __future__ import annotations

import math

import config as cfg


def _group_indian(digits: str) -> str:
    """Insert Indian-style separators: 4500000 -> 45,00,000."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def fmt(val: float) -> str:
    """Format number as ₹XX,XX,XXX (whole rupees)."""
    if not math.isfinite(val):
        return cfg.UNBOUNDED_LABEL
    whole = int(math.floor(abs(val) + 0.5))
    sign = "-" if val < 0 and whole else ""
    return f"{sign}{cfg.CURRENCY_SYMBOL}{_group_indian(str(whole))}"


def pct(val: float, decimals: int = 2) -> str:
    if not math.isfinite(val):
        return cfg.UNBOUNDED_LABEL
    return f"{val:.{decimals}f}%"


def rate_label(rate: float) -> str:
    """Scenario rate as typed: 12 -> '12%', 12.5 -> '12.5%'."""
    return f"{rate:g}%"
