"""Per-dimension success breakdowns with minimum-sample gating."""

from __future__ import annotations

from skills.search_analytics.aggregation import KeyFn, group_records
from skills.search_analytics.classifiers.rules import ClassifiedRecord
from skills.search_analytics.rates import breakdown_row
from skills.search_analytics.types import BreakdownRow

DIMENSION_KEYS: dict[str, KeyFn] = {
    "industry": lambda r: r.industry,
    "company_size": lambda r: r.company_size,
    "role_type": lambda r: r.role_type,
    "source": lambda r: r.source,
}

# Smaller buckets still count toward the baseline but are not reported.
MIN_BUCKET_TOTAL: dict[str, int] = {
    "industry": 2,
    "company_size": 2,
    "role_type": 2,
    "source": 1,
}


def _sort_key(row: BreakdownRow) -> tuple[float, str]:
    return (-row.success_rate, row.key)


def build_breakdown(records: list[ClassifiedRecord], dimension: str) -> list[BreakdownRow]:
    if dimension not in DIMENSION_KEYS:
        raise ValueError(f"Unknown breakdown dimension: {dimension}")
    min_total = MIN_BUCKET_TOTAL[dimension]
    buckets = group_records(records, DIMENSION_KEYS[dimension])
    rows = [breakdown_row(key, counts) for key, counts in buckets.items() if counts.total >= min_total]
    return sorted(rows, key=_sort_key)


def build_all_breakdowns(records: list[ClassifiedRecord]) -> dict[str, list[BreakdownRow]]:
    return {dimension: build_breakdown(records, dimension) for dimension in DIMENSION_KEYS}
