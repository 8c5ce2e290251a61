"""Main analytics orchestrator."""

from __future__ import annotations

import copy
import hashlib
import json
from collections import OrderedDict
from dataclasses import asdict
from datetime import date, datetime, time, timezone, tzinfo
from pathlib import Path
from typing import Literal, Optional

from .breakdown import build_all_breakdowns
from .aggregation import overall_counts
from .classifiers.rules import classify_records
from .goals import track_goals
from .insights import build_insights
from .metrics import build_funnel, compute_performance_metrics
from .patterns import build_pattern_summary, compute_customization_impact
from .rates import baseline_rate, compute_totals
from .recommendations import build_recommendation_payload, dump_recommendation_payload, generate_recommendations
from .reporting.analysis_report import build_analysis_report, write_analysis_json, write_analysis_report
from .significance import evaluate_significance
from .sources.csv_source import load_csv_jobs
from .sources.json_source import load_json_export
from .sources.sample_source import load_sample_inputs
from .timing import analyze_timing
from .trends import build_trend_report
from .types import AnalysisInputs, AnalysisResult, Recommendations, RunResult, TrendReport

SourceName = Literal["json", "csv", "sample"]

_COLLECTIONS = ("jobs", "interviews", "status_history", "application_packages", "goals")


def _check_collections(inputs: AnalysisInputs) -> None:
    for name in _COLLECTIONS:
        value = getattr(inputs, name)
        if not isinstance(value, (list, tuple)):
            raise TypeError(f"{name} must be a list, got {type(value).__name__}")


def _trend_range(inputs: AnalysisInputs, start: Optional[datetime], end: Optional[datetime]) -> Optional[tuple[datetime, datetime]]:
    if start is not None and end is not None:
        return start, end
    stamps = [j.created_at for j in inputs.jobs]
    if not stamps:
        return None
    return (start or min(stamps), end or max(stamps))


def analyze(
    inputs: AnalysisInputs,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> AnalysisResult:
    """Pure analysis pass over already-fetched collections."""
    _check_collections(inputs)
    jobs = list(inputs.jobs)
    classified = classify_records(jobs)

    population = overall_counts(classified)
    breakdowns = build_all_breakdowns(classified)
    performance = compute_performance_metrics(jobs, list(inputs.interviews), list(inputs.status_history))

    trend_range = _trend_range(inputs, start, end)
    if trend_range is None:
        trend = TrendReport(trend_percent=0.0, first_half=0, second_half=0)
    else:
        trend = build_trend_report(jobs, list(inputs.interviews), *trend_range)

    return AnalysisResult(
        totals=compute_totals(population),
        breakdowns=breakdowns,
        significance=evaluate_significance(breakdowns["industry"], baseline_rate(population)),
        patterns=build_pattern_summary(jobs),
        customization=compute_customization_impact(list(inputs.application_packages), jobs),
        timing=analyze_timing(classified, tz),
        performance=performance,
        funnel=build_funnel(performance),
        trend=trend,
        goals=track_goals(list(inputs.goals), performance),
        insights=build_insights(performance, trend.trend_percent),
        warnings=list(inputs.warnings),
    )


def fingerprint(
    inputs: AnalysisInputs,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> str:
    _check_collections(inputs)
    seed = {
        "inputs": {name: [asdict(item) for item in getattr(inputs, name)] for name in _COLLECTIONS},
        "warnings": list(inputs.warnings),
        "range": [start.isoformat() if start else "", end.isoformat() if end else ""],
        "tz": str(tz) if tz else "",
    }
    raw = json.dumps(seed, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()


class AnalysisCache:
    """Memoizes ``analyze`` on a fingerprint of its inputs; least recently used entries are evicted.

    Callers get their own copy of a stored result, so mutating it never leaks into later hits.
    """

    def __init__(self, maxsize: int = 8) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.maxsize = maxsize
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[str, AnalysisResult] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def analyze(
        self,
        inputs: AnalysisInputs,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        tz: Optional[tzinfo] = None,
    ) -> AnalysisResult:
        key = fingerprint(inputs, start, end, tz)
        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            self._entries.move_to_end(key)
            return copy.deepcopy(cached)

        self.misses += 1
        result = analyze(inputs, start, end, tz)
        self._entries[key] = result
        if len(self._entries) > self.maxsize:
            self._entries.popitem(last=False)
        return copy.deepcopy(result)

    def clear(self) -> None:
        self._entries.clear()


def day_bounds(start: Optional[str], end: Optional[str]) -> tuple[Optional[datetime], Optional[datetime]]:
    start_dt = datetime.combine(date.fromisoformat(start), time.min, tzinfo=timezone.utc) if start else None
    end_dt = datetime.combine(date.fromisoformat(end), time.max, tzinfo=timezone.utc) if end else None
    if start_dt and end_dt and end_dt < start_dt:
        raise ValueError("end must not be before start")
    return start_dt, end_dt


def restrict_to_range(inputs: AnalysisInputs, start: Optional[datetime], end: Optional[datetime]) -> AnalysisInputs:
    """Keep jobs, interviews and status changes inside [start, end]; packages and goals are untouched."""

    def _keep(ts: datetime) -> bool:
        return (start is None or ts >= start) and (end is None or ts <= end)

    return AnalysisInputs(
        jobs=[j for j in inputs.jobs if _keep(j.created_at)],
        interviews=[i for i in inputs.interviews if _keep(i.created_at)],
        status_history=[h for h in inputs.status_history if _keep(h.changed_at)],
        application_packages=list(inputs.application_packages),
        goals=list(inputs.goals),
        warnings=list(inputs.warnings),
    )


def load_inputs(source: SourceName, input_path: Optional[str], start: Optional[str], end: Optional[str]) -> AnalysisInputs:
    if source == "json":
        if not input_path:
            raise ValueError("--input is required for the json source")
        return load_json_export(input_path)
    if source == "csv":
        if not input_path:
            raise ValueError("--input is required for the csv source")
        return load_csv_jobs(input_path)
    if source == "sample":
        if not start or not end:
            raise ValueError("sample source needs both start and end dates")
        return load_sample_inputs(date.fromisoformat(start), date.fromisoformat(end))
    raise ValueError(f"Unsupported source: {source}")


def build_console_summary(result: AnalysisResult) -> list[str]:
    t = result.totals
    lines = [
        "Summary",
        (
            f"applications={t.total_applications} successful={t.successful_applications} "
            f"interviewed={t.interviewed_applications} rejected={t.rejected_applications}"
        ),
        (
            f"success_rate_pct={t.overall_success_rate:.1f} interview_rate_pct={t.overall_interview_rate:.1f} "
            f"response_rate_pct={result.performance.response_rate:.1f} trend_pct={result.trend.trend_percent:.1f}"
        ),
        "Funnel: " + " -> ".join(f"{s.stage}={s.count} ({s.percentage:.1f}%)" for s in result.funnel),
    ]
    flagged = [r.key for r in result.significance if r.significant]
    if flagged:
        lines.append("Significant industries: " + ", ".join(flagged))
    if result.timing.best_day or result.timing.best_hour:
        lines.append(f"Best day={result.timing.best_day or 'N/A'} best_time={result.timing.best_hour or 'N/A'}")
    return lines


def _run_id(source: str, start: Optional[str], end: Optional[str]) -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    seed = f"{source}|{start or ''}|{end or ''}|{stamp}"
    return f"{stamp}-{hashlib.sha1(seed.encode('utf-8')).hexdigest()[:8]}"


def run(
    source: SourceName,
    start: Optional[str] = None,
    end: Optional[str] = None,
    out_dir: str = "output",
    title: str = "Job Search Analytics",
    input_path: Optional[str] = None,
    dry_run: bool = False,
    report: bool = False,
    recommend: bool = False,
    ai_model: str = "gpt-4.1-mini",
    ai_api_key_env: str = "OPENAI_API_KEY",
    ai_base_url: str = "https://api.openai.com/v1",
    ai_timeout_sec: int = 60,
    tz: Optional[tzinfo] = None,
) -> RunResult:
    start_dt, end_dt = day_bounds(start, end)
    inputs = restrict_to_range(load_inputs(source, input_path, start, end), start_dt, end_dt)
    result = analyze(inputs, start_dt, end_dt, tz)

    artifacts: dict[str, str] = {}
    warnings = list(result.warnings)
    payload = build_recommendation_payload(result)

    recommendations: Optional[Recommendations] = None
    if recommend:
        try:
            recommendations = generate_recommendations(
                payload,
                model=ai_model,
                api_key_env=ai_api_key_env,
                base_url=ai_base_url,
                timeout_sec=ai_timeout_sec,
            )
        except (RuntimeError, ValueError) as exc:
            warnings.append(f"recommendations unavailable: {exc}")

    if not dry_run:
        out = Path(out_dir).expanduser().resolve()
        out.mkdir(parents=True, exist_ok=True)
        artifacts["json_path"] = write_analysis_json(str(out / "analysis.json"), result)
        payload_path = out / "recommendation_payload.json"
        payload_path.write_text(dump_recommendation_payload(payload), encoding="utf-8")
        artifacts["recommendation_payload_path"] = str(payload_path)
        if report:
            artifacts["report_path"] = write_analysis_report(
                str(out / "analysis_report.md"),
                build_analysis_report(result, title, recommendations=recommendations),
            )
        if recommendations is not None:
            rec_path = out / "recommendations.json"
            rec_path.write_text(json.dumps(recommendations.to_dict(), indent=2), encoding="utf-8")
            artifacts["recommendations_path"] = str(rec_path)

    return RunResult(
        run_id=_run_id(source, start, end),
        result=result,
        artifacts=artifacts,
        warnings=warnings,
        recommendations=recommendations,
    )
