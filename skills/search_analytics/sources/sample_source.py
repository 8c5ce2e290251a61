"""Sample source for a local demo without a backend export."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from skills.search_analytics.sources.rows import inputs_from_payload
from skills.search_analytics.types import AnalysisInputs

_INDUSTRIES = ["Technology", "Finance", "Healthcare", "Technology", "Retail", None]
_SIZES = ["Startup (1-50)", "Mid-size (51-500)", "Enterprise (500+)", None]
_ROLE_TYPES = ["Full-time", "Contract", "Full-time", "Internship"]
_URLS = [
    "https://www.linkedin.com/jobs/view/1",
    "https://www.indeed.com/viewjob?jk=2",
    "https://careers.example.com/openings/3",
    None,
    "https://www.glassdoor.com/job-listing/4",
]
_STATUSES = [
    "Applied",
    "Rejected",
    "Interview Scheduled",
    "Offer Received",
    "Interested",
    "Rejected",
    "Interviewing",
    "Accepted",
    "Applied",
    "Declined",
]
_HOURS = [7, 10, 13, 15, 18, 21]


def _sample_rows(start: datetime, end: datetime, count: int) -> dict[str, list[dict[str, Any]]]:
    span = max(end - start, timedelta(days=1))
    jobs: list[dict[str, Any]] = []
    interviews: list[dict[str, Any]] = []
    history: list[dict[str, Any]] = []
    packages: list[dict[str, Any]] = []

    for idx in range(count):
        day = (start + span * idx / count).date()
        created = datetime.combine(day, time(hour=_HOURS[idx % len(_HOURS)], minute=15), tzinfo=timezone.utc)
        status = _STATUSES[idx % len(_STATUSES)]
        job_id = f"sample-job-{idx + 1}"
        jobs.append(
            {
                "id": job_id,
                "status": status,
                "created_at": created.isoformat(),
                "industry": _INDUSTRIES[idx % len(_INDUSTRIES)],
                "company_size": _SIZES[idx % len(_SIZES)],
                "job_type": _ROLE_TYPES[idx % len(_ROLE_TYPES)],
                "job_url": _URLS[idx % len(_URLS)],
                "job_description": "Responsibilities and requirements. " * (4 + (idx * 7) % 30),
                "notes": "Referred by a former colleague" if idx % 3 == 0 else "",
                "salary_range_min": 90000 + idx * 1000 if idx % 2 == 0 else None,
                "location": "Remote" if idx % 4 != 1 else "",
            }
        )
        if status not in {"Interested", "Applied"}:
            history.append(
                {
                    "job_id": job_id,
                    "from_status": "Applied",
                    "to_status": status,
                    "changed_at": (created + timedelta(days=3 + idx % 9)).isoformat(),
                }
            )
        if status in {"Interview Scheduled", "Interviewing", "Offer Received", "Accepted"}:
            interviews.append(
                {
                    "id": f"sample-interview-{idx + 1}",
                    "job_id": job_id,
                    "created_at": (created + timedelta(days=4)).isoformat(),
                    "interview_date": (created + timedelta(days=10)).isoformat(),
                }
            )
        if status != "Interested":
            packages.append(
                {
                    "id": f"sample-package-{idx + 1}",
                    "job_id": job_id,
                    "resume_id": f"resume-{idx % 2}" if idx % 2 == 0 else None,
                    "cover_letter_id": f"cover-{idx}" if idx % 5 == 0 else None,
                }
            )

    goals = [
        {"id": "goal-applications", "goal_type": "applications", "target_value": 20, "time_period": "monthly"},
        {"id": "goal-interviews", "goal_type": "interviews", "target_value": 5, "time_period": "monthly"},
        {"id": "goal-response-rate", "goal_type": "response_rate", "target_value": 30, "time_period": "monthly"},
    ]
    return {
        "jobs": jobs,
        "interviews": interviews,
        "status_history": history,
        "application_packages": packages,
        "goals": goals,
    }


def load_sample_inputs(start_date: date, end_date: date, count: int = 30) -> AnalysisInputs:
    start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
    end = datetime.combine(end_date, time.max, tzinfo=timezone.utc)
    return inputs_from_payload(_sample_rows(start, end, count))
