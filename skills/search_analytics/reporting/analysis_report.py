"""Markdown and JSON artifacts for an analysis run."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from skills.search_analytics.types import AnalysisResult, BreakdownRow, Recommendations

_DIMENSION_TITLES = {
    "industry": "Industry",
    "company_size": "Company size",
    "role_type": "Role type",
    "source": "Application source",
}


def _md_table(headers: list[str], rows: list[list[str]]) -> str:
    out = ["| " + " | ".join(headers) + " |", "| " + " | ".join(["---"] * len(headers)) + " |"]
    out.extend("| " + " | ".join(r) + " |" for r in rows)
    return "\n".join(out)


def _rate_rows(rows: list[BreakdownRow]) -> list[list[str]]:
    return [
        [r.key, str(r.total), f"{r.success_rate:.1f}%", f"{r.interview_rate:.1f}%", f"{r.rejection_rate:.1f}%"]
        for r in rows
    ]


_RATE_HEADERS = ["bucket", "total", "success", "interview", "rejection"]


def build_analysis_report(
    result: AnalysisResult,
    title: str = "Job Search Analytics",
    recommendations: Optional[Recommendations] = None,
) -> str:
    t = result.totals
    lines: list[str] = [f"# {title}", ""]

    # A) Summary
    lines.extend(
        [
            "## A) Summary",
            f"- total_applications: **{t.total_applications}**",
            f"- successful: **{t.successful_applications}** ({t.overall_success_rate:.1f}%)",
            f"- interviewed: **{t.interviewed_applications}** ({t.overall_interview_rate:.1f}%)",
            f"- rejected: **{t.rejected_applications}** ({t.overall_rejection_rate:.1f}%)",
            "",
        ]
    )

    # B) Breakdowns
    lines.append("## B) Success by dimension")
    for dimension, heading in _DIMENSION_TITLES.items():
        rows = result.breakdowns.get(dimension, [])
        lines.append(f"### {heading}")
        lines.append(_md_table(_RATE_HEADERS, _rate_rows(rows)) if rows else "_Not enough data._")
        lines.append("")

    # C) Significance
    sig_rows = [
        [
            r.key,
            str(r.total),
            f"{r.observed:.0f}",
            f"{r.expected:.2f}",
            f"{r.chi_square_like:.3f}",
            f"{r.p_approx:.3f}",
            "yes" if r.significant else "no",
        ]
        for r in result.significance
    ]
    lines.append("## C) Industry significance (approximate)")
    if sig_rows:
        lines.append(_md_table(["industry", "total", "observed", "expected", "chi", "p_approx", "significant"], sig_rows))
    else:
        lines.append("_No industry has enough applications to test._")
    lines.append("")

    # D) Patterns
    p = result.patterns
    lines.extend(
        [
            "## D) Successful vs rejected",
            _md_table(
                ["cohort", "size", "avg_description_chars", "notes", "salary", "location"],
                [
                    [name, str(c.size), f"{c.avg_text_length:.0f}", str(c.has_notes), str(c.has_salary), str(c.has_location)]
                    for name, c in (("successful", p.successful), ("rejected", p.rejected))
                ],
            ),
            "",
            p.comparative_note,
        ]
    )
    lines.extend(f"- {note}" for note in p.detail_notes)
    c = result.customization
    lines.extend(
        [
            "",
            f"- custom materials success: **{c.customized_success_rate:.1f}%** vs **{c.non_customized_success_rate:.1f}%** without",
            f"- custom resumes: {c.jobs_with_custom_resume}, custom cover letters: {c.jobs_with_custom_cover_letter}",
            "",
        ]
    )

    # E) Timing
    lines.extend(
        [
            "## E) Timing",
            f"- best_day: **{result.timing.best_day or 'N/A'}**",
            f"- best_time: **{result.timing.best_hour or 'N/A'}**",
            "",
            _md_table(["day", "total", "success", "interview", "rejection"], _rate_rows(result.timing.by_day)),
            "",
            _md_table(["time", "total", "success", "interview", "rejection"], _rate_rows(result.timing.by_hour)),
            "",
        ]
    )

    # F) Funnel and performance
    m = result.performance
    lines.extend(
        [
            "## F) Funnel",
            _md_table(["stage", "count", "pct"], [[s.stage, str(s.count), f"{s.percentage:.1f}%"] for s in result.funnel]),
            "",
            f"- response_rate: **{m.response_rate:.1f}%**",
            f"- interview_conversion_rate: **{m.interview_conversion_rate:.1f}%**",
            f"- offer_conversion_rate: **{m.offer_conversion_rate:.1f}%**",
            f"- avg_days_to_response: {m.avg_days_to_response:.1f}",
            f"- avg_days_to_interview: {m.avg_days_to_interview:.1f}",
            f"- avg_days_to_offer: {m.avg_days_to_offer:.1f}",
            "",
        ]
    )

    # G) Trend
    tr = result.trend
    lines.extend(
        [
            "## G) Trend",
            f"- first_half: {tr.first_half}, second_half: {tr.second_half}, trend: **{tr.trend_percent:+.1f}%**",
            "",
        ]
    )
    if tr.weekly_series:
        lines.append(
            _md_table(
                ["week", "start", "end", "applications", "interviews", "offers"],
                [[w.label, w.start, w.end, str(w.applications), str(w.interviews), str(w.offers)] for w in tr.weekly_series],
            )
        )
        lines.append("")

    # H) Goals
    if result.goals:
        lines.append("## H) Goals")
        lines.append(
            _md_table(
                ["goal", "period", "current", "target", "progress", "status"],
                [
                    [g.goal_type, g.time_period, f"{g.current_value:g}", f"{g.target_value:g}", f"{g.progress_percent:.0f}%", g.status_text]
                    for g in result.goals
                ],
            )
        )
        lines.append("")

    # I) Insights
    if result.insights:
        lines.append("## I) Insights")
        lines.extend(f"- **{i.title}** ({i.kind}): {i.message}" for i in result.insights)
        lines.append("")

    if recommendations is not None:
        lines.append("## J) Recommendations")
        lines.extend(f"- {f}" for f in recommendations.key_findings)
        if recommendations.recommendations:
            lines.append("")
            lines.append(
                _md_table(
                    ["priority", "title", "description"],
                    [[r.priority, r.title, r.description] for r in recommendations.recommendations],
                )
            )
        if recommendations.focus_areas:
            lines.append("")
            lines.append("Focus areas: " + ", ".join(recommendations.focus_areas))
        lines.append("")

    if result.warnings:
        lines.append("## Warnings")
        lines.extend(f"- {w}" for w in result.warnings)
        lines.append("")

    return "\n".join(lines)


def write_analysis_report(path: str, markdown: str) -> str:
    out = Path(path).expanduser().resolve()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(markdown, encoding="utf-8")
    return str(out)


def write_analysis_json(path: str, result: AnalysisResult) -> str:
    out = Path(path).expanduser().resolve()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(result.to_dict(), indent=2, default=str), encoding="utf-8")
    return str(out)
