"""Convert exported backend rows (snake_case dictionaries) into typed records."""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Any, Optional

from skills.search_analytics.types import (
    GOAL_TYPES,
    AnalysisInputs,
    ApplicationPackage,
    ApplicationRecord,
    ApplicationStatus,
    Goal,
    InterviewRecord,
    StatusTransition,
)

COLLECTION_KEYS = ("jobs", "interviews", "status_history", "application_packages", "goals")


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    return bool(value)


def _flag(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in {"false", "0", "no", "off"}
    return bool(value)


def parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        raw = _text(value)
        if not raw:
            return None
        try:
            dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = _text(value)
    if not raw:
        return None
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


def job_from_row(row: dict[str, Any], idx: int, warnings: list[str]) -> Optional[ApplicationRecord]:
    job_id = _text(row.get("id")) or f"job-{idx}"
    created_at = parse_timestamp(row.get("created_at"))
    if created_at is None:
        warnings.append(f"job {job_id}: missing or invalid created_at, skipped")
        return None

    status = ApplicationStatus.parse(row.get("status"))
    if status is None:
        warnings.append(f"job {job_id}: unknown status {row.get('status')!r}, treated as Applied")
        status = ApplicationStatus.APPLIED

    return ApplicationRecord(
        id=job_id,
        status=status,
        created_at=created_at,
        industry=_text(row.get("industry")),
        company_size=_text(row.get("company_size")),
        role_type=_text(row.get("job_type")),
        source_url=_text(row.get("job_url")),
        description_length=len(str(row.get("job_description") or "")),
        has_notes=_truthy(row.get("notes")),
        has_salary=_truthy(row.get("salary_range_min")) or _truthy(row.get("salary_range_max")),
        has_location=_truthy(row.get("location")),
    )


def interview_from_row(row: dict[str, Any], idx: int, warnings: list[str]) -> Optional[InterviewRecord]:
    interview_id = _text(row.get("id")) or f"interview-{idx}"
    created_at = parse_timestamp(row.get("created_at"))
    if created_at is None:
        warnings.append(f"interview {interview_id}: missing or invalid created_at, skipped")
        return None
    return InterviewRecord(
        id=interview_id,
        job_id=_text(row.get("job_id")) or "",
        created_at=created_at,
        scheduled_at=parse_timestamp(row.get("interview_date")),
        outcome=_text(row.get("outcome")),
    )


def transition_from_row(row: dict[str, Any], idx: int, warnings: list[str]) -> Optional[StatusTransition]:
    changed_at = parse_timestamp(row.get("changed_at"))
    to_status = ApplicationStatus.parse(row.get("to_status"))
    if changed_at is None or to_status is None:
        warnings.append(f"status_history row {idx}: missing changed_at or unknown to_status, skipped")
        return None
    return StatusTransition(
        job_id=_text(row.get("job_id")) or "",
        to_status=to_status,
        changed_at=changed_at,
        from_status=ApplicationStatus.parse(row.get("from_status")),
    )


def package_from_row(row: dict[str, Any], idx: int) -> ApplicationPackage:
    return ApplicationPackage(
        job_id=_text(row.get("job_id")) or "",
        resume_id=_text(row.get("resume_id")),
        cover_letter_id=_text(row.get("cover_letter_id")),
        id=_text(row.get("id")) or f"package-{idx}",
    )


def goal_from_row(row: dict[str, Any], idx: int, warnings: list[str]) -> Optional[Goal]:
    goal_id = _text(row.get("id")) or f"goal-{idx}"
    goal_type = (_text(row.get("goal_type")) or "").lower()
    if goal_type not in GOAL_TYPES:
        warnings.append(f"goal {goal_id}: unknown goal_type {row.get('goal_type')!r}, skipped")
        return None
    try:
        target = float(row.get("target_value") or 0)
    except (TypeError, ValueError):
        target = math.nan
    if not math.isfinite(target):
        warnings.append(f"goal {goal_id}: invalid target_value {row.get('target_value')!r}, treated as 0")
        target = 0.0
    is_active = row.get("is_active", True)
    return Goal(
        id=goal_id,
        goal_type=goal_type,  # type: ignore[arg-type]
        target_value=target,
        time_period=_text(row.get("time_period")) or "weekly",
        start_date=parse_date(row.get("start_date")),
        is_active=_flag(is_active),
    )


def _rows(payload: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"Expected '{key}' to be a list, got {type(value).__name__}")
    return [r for r in value if isinstance(r, dict)]


def inputs_from_payload(payload: dict[str, Any]) -> AnalysisInputs:
    """Build typed inputs from a {collection: [row, ...]} mapping; absent collections mean no data."""
    if not isinstance(payload, dict):
        raise ValueError("Expected a JSON object with collection arrays")

    warnings: list[str] = []
    jobs = [job_from_row(r, i, warnings) for i, r in enumerate(_rows(payload, "jobs"), start=1)]
    interviews = [interview_from_row(r, i, warnings) for i, r in enumerate(_rows(payload, "interviews"), start=1)]
    history = [transition_from_row(r, i, warnings) for i, r in enumerate(_rows(payload, "status_history"), start=1)]
    packages = [package_from_row(r, i) for i, r in enumerate(_rows(payload, "application_packages"), start=1)]
    goals = [goal_from_row(r, i, warnings) for i, r in enumerate(_rows(payload, "goals"), start=1)]

    return AnalysisInputs(
        jobs=[j for j in jobs if j is not None],
        interviews=[i for i in interviews if i is not None],
        status_history=[h for h in history if h is not None],
        application_packages=packages,
        goals=[g for g in goals if g is not None],
        warnings=warnings,
    )
