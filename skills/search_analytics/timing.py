"""Weekday and hour-of-day bucketing of applications."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional

from skills.search_analytics.aggregation import group_records
from skills.search_analytics.classifiers.rules import ClassifiedRecord
from skills.search_analytics.rates import breakdown_row
from skills.search_analytics.types import BreakdownRow, TimingReport

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# (exclusive upper hour, label); hours past the last bound are night.
HOUR_RANGES: list[tuple[int, str]] = [
    (9, "Early Morning (6-9)"),
    (12, "Morning (9-12)"),
    (14, "Lunch (12-14)"),
    (17, "Afternoon (14-17)"),
    (20, "Evening (17-20)"),
]
NIGHT_LABEL = "Night (20+)"
HOUR_LABEL_ORDER = [label for _, label in HOUR_RANGES] + [NIGHT_LABEL]


def _local(dt: datetime, tz: Optional[tzinfo]) -> datetime:
    if tz is not None and dt.tzinfo is not None:
        return dt.astimezone(tz)
    return dt


def weekday_label(dt: datetime) -> str:
    # strftime("%A") follows the process locale; the table does not.
    return WEEKDAY_NAMES[dt.weekday()]


def hour_range_label(hour: int) -> str:
    for upper, label in HOUR_RANGES:
        if hour < upper:
            return label
    return NIGHT_LABEL


def best_bucket(rows: list[BreakdownRow]) -> Optional[str]:
    """Highest interview rate among buckets with data; ties go to the smallest label."""
    candidates = [r for r in rows if r.total > 0]
    if not candidates:
        return None
    return min(candidates, key=lambda r: (-r.interview_rate, r.key)).key


def _ordered_rows(buckets: dict, order: list[str]) -> list[BreakdownRow]:
    return [breakdown_row(label, buckets[label]) for label in order if label in buckets]


def analyze_timing(records: list[ClassifiedRecord], tz: Optional[tzinfo] = None) -> TimingReport:
    day_buckets = group_records(records, lambda r: weekday_label(_local(r.record.created_at, tz)))
    hour_buckets = group_records(records, lambda r: hour_range_label(_local(r.record.created_at, tz).hour))

    by_day = _ordered_rows(day_buckets, list(WEEKDAY_NAMES))
    by_hour = _ordered_rows(hour_buckets, HOUR_LABEL_ORDER)
    return TimingReport(
        by_day=by_day,
        by_hour=by_hour,
        best_day=best_bucket(by_day),
        best_hour=best_bucket(by_hour),
    )
