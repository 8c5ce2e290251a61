"""Chi-square-like significance flags for breakdown buckets.

The score is ``exp(-chi / 2)`` with ``chi = (observed - expected)^2 / expected``.
It is not a calibrated p-value: there is no reference distribution and no
degrees of freedom. Rows expose it as ``p_approx`` and it is kept as-is so the
flags stay comparable with earlier reports.
"""

from __future__ import annotations

import math

from skills.search_analytics.types import BreakdownRow, SignificanceRow

SIGNIFICANCE_MIN_TOTAL = 3
SIGNIFICANCE_ALPHA = 0.05


def chi_square_like(observed: float, expected: float) -> float:
    if expected == 0:
        return 0.0
    return (observed - expected) ** 2 / expected


def approximate_p_value(chi: float) -> float:
    return math.exp(-chi / 2.0)


def evaluate_row(row: BreakdownRow, baseline_rate: float) -> SignificanceRow:
    expected = row.total * (baseline_rate / 100.0)
    observed = row.total * (row.success_rate / 100.0)
    chi = chi_square_like(observed, expected)
    p_approx = approximate_p_value(chi)
    return SignificanceRow(
        key=row.key,
        total=row.total,
        success_rate=row.success_rate,
        interview_rate=row.interview_rate,
        rejection_rate=row.rejection_rate,
        expected=expected,
        observed=observed,
        chi_square_like=chi,
        p_approx=p_approx,
        significant=p_approx < SIGNIFICANCE_ALPHA,
    )


def evaluate_significance(rows: list[BreakdownRow], baseline_rate: float) -> list[SignificanceRow]:
    return [evaluate_row(r, baseline_rate) for r in rows if r.total >= SIGNIFICANCE_MIN_TOTAL]
