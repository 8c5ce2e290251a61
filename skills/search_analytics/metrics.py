"""Conversion funnel and time-to-outcome metrics from jobs, interviews and status history."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime

from skills.search_analytics.classifiers.rules import is_application
from skills.search_analytics.rates import clamp_pct, pct
from skills.search_analytics.types import (
    ApplicationRecord,
    ApplicationStatus,
    FunnelStage,
    InterviewRecord,
    PerformanceMetrics,
    StatusTransition,
)

FUNNEL_STAGES = ("Applied", "Response", "Interview", "Offer")

# A transition into any other status counts as a response.
NON_RESPONSE_STATUSES = frozenset({ApplicationStatus.INTERESTED, ApplicationStatus.APPLIED})

OFFER_STATUS = ApplicationStatus.OFFER_RECEIVED


def count_applications(jobs: list[ApplicationRecord]) -> int:
    return sum(1 for j in jobs if is_application(j.status))


def count_responses(status_history: list[StatusTransition]) -> int:
    return sum(1 for h in status_history if h.to_status not in NON_RESPONSE_STATUSES)


def count_offers(jobs: list[ApplicationRecord]) -> int:
    return sum(1 for j in jobs if j.status == OFFER_STATUS)


def _days_between(start: datetime, end: datetime) -> int:
    return (end - start).days


def _average(total: float, count: int) -> float:
    return total / count if count else 0.0


def _avg_days_to_response(jobs: list[ApplicationRecord], status_history: list[StatusTransition]) -> float:
    first_change: dict[str, datetime] = {}
    for h in status_history:
        prev = first_change.get(h.job_id)
        if prev is None or h.changed_at < prev:
            first_change[h.job_id] = h.changed_at

    responded = [j for j in jobs if j.id in first_change]
    total = sum(_days_between(j.created_at, first_change[j.id]) for j in responded)
    return _average(total, len(responded))


def _avg_days_to_interview(jobs: list[ApplicationRecord], interviews: list[InterviewRecord]) -> float:
    by_job: dict[str, list[InterviewRecord]] = defaultdict(list)
    for i in interviews:
        by_job[i.job_id].append(i)

    interviewed = [j for j in jobs if j.id in by_job]
    total = 0
    for job in interviewed:
        scheduled = [i.scheduled_at for i in by_job[job.id] if i.scheduled_at is not None]
        # Jobs without a scheduled date stay in the denominator.
        if scheduled:
            total += _days_between(job.created_at, min(scheduled))
    return _average(total, len(interviewed))


def _avg_days_to_offer(jobs: list[ApplicationRecord], status_history: list[StatusTransition]) -> float:
    first_offer: dict[str, datetime] = {}
    for h in status_history:
        if h.to_status != OFFER_STATUS:
            continue
        prev = first_offer.get(h.job_id)
        if prev is None or h.changed_at < prev:
            first_offer[h.job_id] = h.changed_at

    offered = [j for j in jobs if j.status == OFFER_STATUS]
    total = sum(_days_between(j.created_at, first_offer[j.id]) for j in offered if j.id in first_offer)
    return _average(total, len(offered))


def compute_performance_metrics(
    jobs: list[ApplicationRecord],
    interviews: list[InterviewRecord],
    status_history: list[StatusTransition],
) -> PerformanceMetrics:
    applications = count_applications(jobs)
    responses = count_responses(status_history)
    offers = count_offers(jobs)
    return PerformanceMetrics(
        total_applications=applications,
        interviews_scheduled=len(interviews),
        offers_received=offers,
        responses=responses,
        response_rate=clamp_pct(pct(responses, applications)),
        interview_conversion_rate=clamp_pct(pct(len(interviews), applications)),
        offer_conversion_rate=clamp_pct(pct(offers, applications)),
        avg_days_to_response=_avg_days_to_response(jobs, status_history),
        avg_days_to_interview=_avg_days_to_interview(jobs, interviews),
        avg_days_to_offer=_avg_days_to_offer(jobs, status_history),
    )


def build_funnel(metrics: PerformanceMetrics) -> list[FunnelStage]:
    """Snapshot funnel: each stage counts "reached at least this far" independently."""
    applied = metrics.total_applications
    counts = {
        "Applied": applied,
        "Response": metrics.responses,
        "Interview": metrics.interviews_scheduled,
        "Offer": metrics.offers_received,
    }
    stages: list[FunnelStage] = []
    for stage in FUNNEL_STAGES:
        percentage = 100.0 if stage == "Applied" else clamp_pct(pct(counts[stage], applied))
        stages.append(FunnelStage(stage=stage, count=counts[stage], percentage=percentage))
    return stages
