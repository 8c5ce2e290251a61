"""Percentage rates over bucket counts with zero-denominator guards."""

from __future__ import annotations

from skills.search_analytics.types import AnalysisTotals, BreakdownRow, BucketCounts


def pct(num: float, den: float) -> float:
    return num / den * 100.0 if den else 0.0


def clamp_pct(value: float) -> float:
    return max(0.0, min(100.0, value))


def success_rate(counts: BucketCounts) -> float:
    return pct(counts.success_count, counts.total)


def interview_rate(counts: BucketCounts) -> float:
    return pct(counts.interview_count, counts.total)


def rejection_rate(counts: BucketCounts) -> float:
    return pct(counts.rejected_count, counts.total)


def breakdown_row(key: str, counts: BucketCounts) -> BreakdownRow:
    return BreakdownRow(
        key=key,
        total=counts.total,
        success_rate=success_rate(counts),
        interview_rate=interview_rate(counts),
        rejection_rate=rejection_rate(counts),
    )


def baseline_rate(population: BucketCounts) -> float:
    return success_rate(population)


def compute_totals(population: BucketCounts) -> AnalysisTotals:
    return AnalysisTotals(
        total_applications=population.total,
        successful_applications=population.success_count,
        interviewed_applications=population.interview_count,
        rejected_applications=population.rejected_count,
        overall_success_rate=success_rate(population),
        overall_interview_rate=interview_rate(population),
        overall_rejection_rate=rejection_rate(population),
    )
