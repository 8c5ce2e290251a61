"""Deterministic rules mapping application records to categorical buckets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from skills.search_analytics.types import ApplicationRecord, ApplicationStatus, OutcomeCategory

UNKNOWN_LABEL = "Unknown"
NO_URL_SOURCE = "Direct Application"

NOT_APPLIED_STATUS = ApplicationStatus.INTERESTED

SUCCESSFUL_STATUSES = frozenset({ApplicationStatus.OFFER_RECEIVED, ApplicationStatus.ACCEPTED})
INTERVIEWING_STATUSES = frozenset(
    {
        ApplicationStatus.INTERVIEW_SCHEDULED,
        ApplicationStatus.INTERVIEWING,
        ApplicationStatus.OFFER_RECEIVED,
        ApplicationStatus.ACCEPTED,
    }
)
REJECTED_STATUSES = frozenset({ApplicationStatus.REJECTED, ApplicationStatus.DECLINED})

SourceRule = tuple[Callable[[str], bool], str]


def _url_contains(token: str) -> Callable[[str], bool]:
    return lambda url: token in url


# Evaluated top to bottom; first match wins.
SOURCE_RULES: list[SourceRule] = [
    (_url_contains("linkedin"), "LinkedIn"),
    (_url_contains("indeed"), "Indeed"),
    (_url_contains("glassdoor"), "Glassdoor"),
    (_url_contains("ziprecruiter"), "ZipRecruiter"),
    (lambda url: bool(url), "Company Website"),
]


@dataclass(slots=True, frozen=True)
class ClassifiedRecord:
    record: ApplicationRecord
    industry: str
    company_size: str
    role_type: str
    source: str
    outcome: OutcomeCategory

    @property
    def status(self) -> ApplicationStatus:
        return self.record.status


def category_label(value: str | None) -> str:
    cleaned = (value or "").strip()
    return cleaned or UNKNOWN_LABEL


def infer_source(url: str | None) -> str:
    normalized = (url or "").strip().lower()
    for matches, label in SOURCE_RULES:
        if matches(normalized):
            return label
    return NO_URL_SOURCE


def is_application(status: ApplicationStatus) -> bool:
    return status != NOT_APPLIED_STATUS


def outcome_category(status: ApplicationStatus) -> OutcomeCategory:
    # Category sets overlap; this picks the furthest stage for a single label.
    if status in SUCCESSFUL_STATUSES:
        return "successful"
    if status in INTERVIEWING_STATUSES:
        return "interviewing"
    if status in REJECTED_STATUSES:
        return "rejected"
    return "other"


def classify_record(record: ApplicationRecord) -> ClassifiedRecord:
    return ClassifiedRecord(
        record=record,
        industry=category_label(record.industry),
        company_size=category_label(record.company_size),
        role_type=category_label(record.role_type),
        source=infer_source(record.source_url),
        outcome=outcome_category(record.status),
    )


def classify_records(records: list[ApplicationRecord]) -> list[ClassifiedRecord]:
    return [classify_record(r) for r in records]
