from datetime import datetime, timezone

from skills.search_analytics.trends import build_trend_report, midpoint, split_halves, trend_percent, week_windows
from skills.search_analytics.types import ApplicationRecord, ApplicationStatus, InterviewRecord

S = ApplicationStatus


def _ts(day: int, hour: int = 0) -> datetime:
    return datetime(2026, 3, day, hour, 0, tzinfo=timezone.utc)


def _job(idx: int, created_at: datetime, status: ApplicationStatus = S.APPLIED) -> ApplicationRecord:
    return ApplicationRecord(id=f"j{idx}", status=status, created_at=created_at)


def test_midpoint_split_puts_midpoint_in_second_half():
    start, end = _ts(1), _ts(15)

    assert midpoint(start, end) == _ts(8)
    assert split_halves([_ts(2), _ts(7, 23), _ts(8), _ts(20)], start, end) == (2, 1)


def test_trend_percent():
    assert trend_percent(2, 3) == 50.0
    assert trend_percent(4, 1) == -75.0
    assert trend_percent(0, 5) == 0.0


def test_trend_report_counts_only_applications_in_range():
    jobs = [
        _job(1, _ts(2)),
        _job(2, _ts(5)),
        _job(3, _ts(3), S.INTERESTED),
        _job(4, _ts(8)),
        _job(5, _ts(10), S.OFFER_RECEIVED),
        _job(6, _ts(14)),
        _job(7, _ts(20)),
    ]
    interviews = [InterviewRecord(id="i1", job_id="j5", created_at=_ts(9))]

    report = build_trend_report(jobs, interviews, _ts(1), _ts(15))

    assert (report.first_half, report.second_half) == (2, 3)
    assert report.trend_percent == 50.0
    assert [w.label for w in report.weekly_series] == ["Week 1", "Week 2"]
    assert [w.applications for w in report.weekly_series] == [2, 3]
    assert [w.interviews for w in report.weekly_series] == [0, 1]
    assert [w.offers for w in report.weekly_series] == [0, 1]


def test_last_week_window_is_partial_and_includes_end():
    windows = week_windows(_ts(1), _ts(11))

    assert windows == [(_ts(1), _ts(8)), (_ts(8), _ts(11))]

    report = build_trend_report([_job(1, _ts(11))], [], _ts(1), _ts(11))
    assert report.weekly_series[-1].applications == 1
    assert report.weekly_series[-1].end == _ts(11).isoformat()


def test_empty_range_has_no_weeks():
    assert week_windows(_ts(5), _ts(5)) == []
    assert week_windows(_ts(5), _ts(1)) == []


def test_zero_first_half_yields_zero_trend():
    report = build_trend_report([_job(1, _ts(12))], [], _ts(1), _ts(15))

    assert report.first_half == 0
    assert report.second_half == 1
    assert report.trend_percent == 0.0
