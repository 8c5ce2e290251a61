"""Descriptive cohort comparison: successful vs rejected applications."""

from __future__ import annotations

import math
from typing import Callable

from skills.search_analytics.classifiers.rules import REJECTED_STATUSES, SUCCESSFUL_STATUSES
from skills.search_analytics.rates import pct
from skills.search_analytics.types import (
    ApplicationPackage,
    ApplicationRecord,
    CohortStats,
    CustomizationImpact,
    PatternSummary,
)

LENGTH_DELTA_THRESHOLD = 50

TextLength = Callable[[ApplicationRecord], int]
Flag = Callable[[ApplicationRecord], bool]


def _text_length(r: ApplicationRecord) -> int:
    return r.description_length


def _has_notes(r: ApplicationRecord) -> bool:
    return r.has_notes


def _has_salary(r: ApplicationRecord) -> bool:
    return r.has_salary


def _has_location(r: ApplicationRecord) -> bool:
    return r.has_location


def cohort_stats(
    cohort: list[ApplicationRecord],
    text_length: TextLength = _text_length,
    has_notes: Flag = _has_notes,
    has_salary: Flag = _has_salary,
    has_location: Flag = _has_location,
) -> CohortStats:
    size = len(cohort)
    avg = sum(text_length(r) for r in cohort) / size if size else 0.0
    return CohortStats(
        size=size,
        avg_text_length=avg,
        has_notes=sum(1 for r in cohort if has_notes(r)),
        has_salary=sum(1 for r in cohort if has_salary(r)),
        has_location=sum(1 for r in cohort if has_location(r)),
    )


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def comparative_note(a: CohortStats, b: CohortStats, threshold: float = LENGTH_DELTA_THRESHOLD) -> str:
    delta = a.avg_text_length - b.avg_text_length
    if delta > threshold:
        return (
            f"Successful applications have {_round_half_up(delta)} more characters in job descriptions on average "
            "- researching roles thoroughly may correlate with success."
        )
    if -delta > threshold:
        return (
            f"Rejected applications have {_round_half_up(-delta)} more characters in job descriptions on average. "
            "This might indicate over-analysis of unsuitable roles."
        )
    return (
        "Description lengths are similar between successful and rejected applications "
        f"({_round_half_up(a.avg_text_length)} vs {_round_half_up(b.avg_text_length)} chars)."
    )


def _detail_notes(a: CohortStats, b: CohortStats) -> list[str]:
    if not a.size or not b.size:
        return ["Complete more applications with different statuses to see detailed patterns."]
    return [
        f"Personal notes added: {a.has_notes} of {a.size} successful vs {b.has_notes} of {b.size} rejected",
        f"Salary info tracked: {a.has_salary} of {a.size} successful vs {b.has_salary} of {b.size} rejected",
        f"Location specified: {a.has_location} of {a.size} successful vs {b.has_location} of {b.size} rejected",
    ]


def compare_cohorts(
    successful: list[ApplicationRecord],
    rejected: list[ApplicationRecord],
    text_length: TextLength = _text_length,
    has_notes: Flag = _has_notes,
    has_salary: Flag = _has_salary,
    has_location: Flag = _has_location,
) -> PatternSummary:
    a = cohort_stats(successful, text_length, has_notes, has_salary, has_location)
    b = cohort_stats(rejected, text_length, has_notes, has_salary, has_location)
    return PatternSummary(
        successful=a,
        rejected=b,
        comparative_note=comparative_note(a, b),
        length_delta=a.avg_text_length - b.avg_text_length,
        detail_notes=_detail_notes(a, b),
    )


def build_pattern_summary(jobs: list[ApplicationRecord]) -> PatternSummary:
    successful = [j for j in jobs if j.status in SUCCESSFUL_STATUSES]
    rejected = [j for j in jobs if j.status in REJECTED_STATUSES]
    return compare_cohorts(successful, rejected)


def _is_customized(p: ApplicationPackage) -> bool:
    return bool(p.resume_id or p.cover_letter_id)


def compute_customization_impact(packages: list[ApplicationPackage], jobs: list[ApplicationRecord]) -> CustomizationImpact:
    status_by_job = {j.id: j.status for j in jobs}

    def _succeeded(p: ApplicationPackage) -> bool:
        return status_by_job.get(p.job_id) in SUCCESSFUL_STATUSES

    customized = [p for p in packages if _is_customized(p)]
    plain = [p for p in packages if not _is_customized(p)]
    return CustomizationImpact(
        customized_success_rate=pct(sum(1 for p in customized if _succeeded(p)), len(customized)),
        non_customized_success_rate=pct(sum(1 for p in plain if _succeeded(p)), len(plain)),
        jobs_with_custom_resume=sum(1 for p in packages if p.resume_id),
        jobs_with_custom_cover_letter=sum(1 for p in packages if p.cover_letter_id),
    )
