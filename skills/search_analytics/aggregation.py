"""Group classified records into per-bucket outcome counts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from skills.search_analytics.classifiers.rules import (
    INTERVIEWING_STATUSES,
    REJECTED_STATUSES,
    SUCCESSFUL_STATUSES,
    ClassifiedRecord,
    is_application,
)
from skills.search_analytics.types import ApplicationStatus, BucketCounts

KeyFn = Callable[[ClassifiedRecord], str]


@dataclass(slots=True, frozen=True)
class StatusCategories:
    """Which statuses count as successful, interviewing and rejected for one pass.

    The sets are checked independently, so a status may land in several.
    """

    successful: frozenset[ApplicationStatus] = SUCCESSFUL_STATUSES
    interviewing: frozenset[ApplicationStatus] = INTERVIEWING_STATUSES
    rejected: frozenset[ApplicationStatus] = REJECTED_STATUSES


DEFAULT_CATEGORIES = StatusCategories()


def count_record(counts: BucketCounts, status: ApplicationStatus, categories: StatusCategories = DEFAULT_CATEGORIES) -> None:
    counts.total += 1
    if status in categories.successful:
        counts.success_count += 1
    if status in categories.interviewing:
        counts.interview_count += 1
    if status in categories.rejected:
        counts.rejected_count += 1


def group_records(
    records: Iterable[ClassifiedRecord],
    key_fn: KeyFn,
    categories: StatusCategories = DEFAULT_CATEGORIES,
) -> dict[str, BucketCounts]:
    buckets: dict[str, BucketCounts] = {}
    for rec in records:
        if not is_application(rec.status):
            continue
        key = key_fn(rec)
        if key not in buckets:
            buckets[key] = BucketCounts()
        count_record(buckets[key], rec.status, categories)
    return buckets


def overall_counts(records: Iterable[ClassifiedRecord], categories: StatusCategories = DEFAULT_CATEGORIES) -> BucketCounts:
    """Counts over the whole ungated population of applications."""
    counts = BucketCounts()
    for rec in records:
        if is_application(rec.status):
            count_record(counts, rec.status, categories)
    return counts
