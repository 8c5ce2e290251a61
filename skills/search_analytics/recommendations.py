"""Serialize analysis outputs for the recommendation service and normalize its reply."""

from __future__ import annotations

import json
from typing import Any

from app.utils.llm_client import DEFAULT_BASE_URL, extract_json_object, extract_output_text, llm_call, require_api_key
from skills.search_analytics.types import AnalysisResult, BreakdownRow, Recommendation, Recommendations

PRIORITIES = ("high", "medium", "low")

SYSTEM_PROMPT = (
    "You are a career analytics expert. Analyze job application data and provide actionable, "
    "data-driven recommendations. Always return valid JSON."
)

# Output label used for the breakdown key in each payload section.
_BREAKDOWN_SECTIONS = {
    "industry": ("industryData", "industry"),
    "company_size": ("companySizeData", "size"),
    "role_type": ("roleTypeData", "roleType"),
    "source": ("sourceData", "source"),
}


def _row_payload(row: BreakdownRow, label: str) -> dict[str, Any]:
    return {
        label: row.key,
        "total": row.total,
        "successRate": row.success_rate,
        "interviewRate": row.interview_rate,
        "rejectionRate": row.rejection_rate,
    }


def build_recommendation_payload(result: AnalysisResult) -> dict[str, Any]:
    totals = result.totals
    payload: dict[str, Any] = {
        "totalApplications": totals.total_applications,
        "successfulApplications": totals.successful_applications,
        "interviewedApplications": totals.interviewed_applications,
        "rejectedApplications": totals.rejected_applications,
    }
    for dimension, (section, label) in _BREAKDOWN_SECTIONS.items():
        payload[section] = [_row_payload(r, label) for r in result.breakdowns.get(dimension, [])]

    patterns = {}
    for name in ("successful", "rejected"):
        cohort = getattr(result.patterns, name)
        patterns[name] = {
            "avgDescriptionLength": cohort.avg_text_length,
            "hasNotes": cohort.has_notes,
            "hasSalary": cohort.has_salary,
            "hasLocation": cohort.has_location,
        }
    payload["patterns"] = patterns

    payload["timingData"] = {
        "dayData": [_row_payload(r, "day") for r in result.timing.by_day],
        "hourData": [_row_payload(r, "hour") for r in result.timing.by_hour],
    }
    c = result.customization
    payload["customizationImpact"] = {
        "customizedSuccessRate": c.customized_success_rate,
        "nonCustomizedSuccessRate": c.non_customized_success_rate,
        "jobsWithCustomResume": c.jobs_with_custom_resume,
        "jobsWithCustomCoverLetter": c.jobs_with_custom_cover_letter,
    }
    return payload


def _rate_lines(rows: list[dict[str, Any]], label: str, limit: int | None = None) -> str:
    picked = rows[:limit] if limit else rows
    if not picked:
        return f"No {label} data"
    return "\n".join(
        f"- {r[label]}: {r['successRate']:.1f}% success, {r['interviewRate']:.1f}% interviews ({r['total']} apps)"
        for r in picked
    )


def _top_labels(rows: list[dict[str, Any]], label: str) -> str:
    ranked = sorted(rows, key=lambda r: (-r["interviewRate"], r[label]))[:2]
    return ", ".join(r[label] for r in ranked) or "N/A"


def build_recommendation_prompt(payload: dict[str, Any]) -> str:
    total = payload["totalApplications"]
    success_pct = payload["successfulApplications"] / total * 100 if total else 0.0
    interview_pct = payload["interviewedApplications"] / total * 100 if total else 0.0
    p = payload["patterns"]
    c = payload["customizationImpact"]
    timing = payload["timingData"]
    return "\n".join(
        [
            "Analyze this job application data and provide actionable recommendations.",
            "",
            "DATA SUMMARY:",
            f"- Total Applications: {total}",
            f"- Successful (Offers): {payload['successfulApplications']} ({success_pct:.1f}%)",
            f"- Interviews: {payload['interviewedApplications']} ({interview_pct:.1f}%)",
            f"- Rejected: {payload['rejectedApplications']}",
            "",
            "INDUSTRY PERFORMANCE:",
            _rate_lines(payload["industryData"], "industry", limit=5),
            "",
            "COMPANY SIZE PERFORMANCE:",
            _rate_lines(payload["companySizeData"], "size"),
            "",
            "ROLE TYPE PERFORMANCE:",
            _rate_lines(payload["roleTypeData"], "roleType"),
            "",
            "APPLICATION SOURCE PERFORMANCE:",
            _rate_lines(payload["sourceData"], "source"),
            "",
            "PATTERNS IN SUCCESSFUL VS REJECTED:",
            f"Successful apps: avg {p['successful']['avgDescriptionLength']:.0f} char descriptions",
            f"Rejected apps: avg {p['rejected']['avgDescriptionLength']:.0f} char descriptions",
            "",
            "MATERIALS CUSTOMIZATION:",
            f"- With custom materials: {c['customizedSuccessRate']:.1f}% success",
            f"- Without custom materials: {c['nonCustomizedSuccessRate']:.1f}% success",
            "",
            "TIMING:",
            f"Best performing days: {_top_labels(timing['dayData'], 'day')}",
            f"Best performing times: {_top_labels(timing['hourData'], 'hour')}",
            "",
            "Generate a JSON response with:",
            '1. "keyFindings": Array of 3-5 key observations from the data',
            '2. "recommendations": Array of objects with {title, description, priority: "high"|"medium"|"low"}',
            '3. "focusAreas": Array of 3-5 areas to focus on',
            "",
            "Be specific and actionable. Reference the actual data.",
        ]
    )


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if str(v).strip()]


def parse_recommendations(parsed: dict[str, Any]) -> Recommendations:
    items: list[Recommendation] = []
    raw_items = parsed.get("recommendations")
    for raw in raw_items if isinstance(raw_items, list) else []:
        if not isinstance(raw, dict):
            continue
        priority = str(raw.get("priority", "")).strip().lower()
        if priority not in PRIORITIES:
            priority = "medium"
        title = str(raw.get("title", "")).strip()
        if not title:
            continue
        items.append(Recommendation(priority=priority, title=title, description=str(raw.get("description", "")).strip()))  # type: ignore[arg-type]
    return Recommendations(
        key_findings=_str_list(parsed.get("keyFindings")),
        recommendations=items,
        focus_areas=_str_list(parsed.get("focusAreas")),
    )


def generate_recommendations(
    payload: dict[str, Any],
    *,
    model: str = "gpt-4.1-mini",
    api_key_env: str = "OPENAI_API_KEY",
    base_url: str = DEFAULT_BASE_URL,
    timeout_sec: int = 60,
) -> Recommendations:
    api_key = require_api_key(api_key_env)
    body = {
        "model": model,
        "temperature": 0.2,
        "text": {"format": {"type": "json_object"}},
        "input": [
            {"role": "system", "content": [{"type": "input_text", "text": SYSTEM_PROMPT}]},
            {"role": "user", "content": [{"type": "input_text", "text": build_recommendation_prompt(payload)}]},
        ],
    }
    data = llm_call(
        "success_recommendations",
        api_key=api_key,
        base_url=base_url,
        timeout_sec=timeout_sec,
        **body,
    )
    return parse_recommendations(extract_json_object(extract_output_text(data)))


def dump_recommendation_payload(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, sort_keys=False)
