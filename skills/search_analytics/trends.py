"""Period-over-period trend and weekly activity series."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Iterable

from skills.search_analytics.classifiers.rules import is_application
from skills.search_analytics.metrics import OFFER_STATUS
from skills.search_analytics.rates import pct
from skills.search_analytics.types import ApplicationRecord, InterviewRecord, TrendReport, WeeklyPoint

WEEK = timedelta(days=7)


def _in_range(ts: datetime, start: datetime, end: datetime) -> bool:
    return start <= ts <= end


def midpoint(start: datetime, end: datetime) -> datetime:
    return start + (end - start) / 2


def split_halves(timestamps: Iterable[datetime], start: datetime, end: datetime) -> tuple[int, int]:
    mid = midpoint(start, end)
    first = second = 0
    for ts in timestamps:
        if not _in_range(ts, start, end):
            continue
        if ts < mid:
            first += 1
        else:
            second += 1
    return first, second


def trend_percent(first_half: int, second_half: int) -> float:
    if first_half == 0:
        return 0.0
    return pct(second_half - first_half, first_half)


def week_windows(start: datetime, end: datetime) -> list[tuple[datetime, datetime]]:
    if end <= start:
        return []
    weeks = math.ceil((end - start) / WEEK)
    return [(start + i * WEEK, min(start + (i + 1) * WEEK, end)) for i in range(weeks)]


def weekly_series(
    jobs: list[ApplicationRecord],
    interviews: list[InterviewRecord],
    start: datetime,
    end: datetime,
) -> list[WeeklyPoint]:
    windows = week_windows(start, end)
    applications = [j for j in jobs if is_application(j.status)]
    out: list[WeeklyPoint] = []
    for idx, (ws, we) in enumerate(windows):
        last = idx == len(windows) - 1

        def _inside(ts: datetime) -> bool:
            return ws <= ts < we or (last and ts == we)

        week_jobs = [j for j in applications if _inside(j.created_at)]
        out.append(
            WeeklyPoint(
                label=f"Week {idx + 1}",
                start=ws.isoformat(),
                end=we.isoformat(),
                applications=len(week_jobs),
                interviews=sum(1 for i in interviews if _inside(i.created_at)),
                offers=sum(1 for j in week_jobs if j.status == OFFER_STATUS),
            )
        )
    return out


def build_trend_report(
    jobs: list[ApplicationRecord],
    interviews: list[InterviewRecord],
    start: datetime,
    end: datetime,
) -> TrendReport:
    first, second = split_halves((j.created_at for j in jobs if is_application(j.status)), start, end)
    return TrendReport(
        trend_percent=trend_percent(first, second),
        first_half=first,
        second_half=second,
        weekly_series=weekly_series(jobs, interviews, start, end),
    )
