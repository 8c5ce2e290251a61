from skills.search_analytics.goals import goal_metric_value, track_goal, track_goals
from skills.search_analytics.insights import build_insights
from skills.search_analytics.types import Goal, PerformanceMetrics


def _metrics(**overrides) -> PerformanceMetrics:
    values = dict(
        total_applications=10,
        interviews_scheduled=2,
        offers_received=1,
        responses=3,
        response_rate=30.0,
        interview_conversion_rate=10.0,
        offer_conversion_rate=10.0,
        avg_days_to_response=5.0,
        avg_days_to_interview=7.0,
        avg_days_to_offer=20.0,
    )
    values.update(overrides)
    return PerformanceMetrics(**values)


def _goal(goal_type: str = "applications", target: float = 20, **kwargs) -> Goal:
    return Goal(id=kwargs.pop("id", "g1"), goal_type=goal_type, target_value=target, **kwargs)


def test_zero_target_is_degenerate():
    progress = track_goal(_goal(target=0), current_value=5)

    assert progress.degenerate is True
    assert progress.progress_percent == 0.0
    assert progress.achieved is False
    assert progress.status_text == "No target set"


def test_partial_progress_reports_remaining():
    progress = track_goal(_goal(target=20), current_value=5)

    assert progress.progress_percent == 25.0
    assert progress.amount_remaining == 15.0
    assert progress.achieved is False
    assert progress.status_text == "15 applications to go"


def test_overachievement_is_clamped_for_display_only():
    progress = track_goal(_goal(target=4), current_value=6)

    assert progress.progress_percent == 100.0
    assert progress.raw_progress_percent == 150.0
    assert progress.amount_remaining == 0.0
    assert progress.achieved is True
    assert progress.status_text == "Goal achieved!"


def test_response_rate_goal_uses_percent_unit():
    progress = track_goal(_goal("response_rate", target=50), current_value=30.0)

    assert progress.status_text == "20 % to go"


def test_goal_metric_value_lookup():
    m = _metrics()

    assert goal_metric_value("applications", m) == 10.0
    assert goal_metric_value("interviews", m) == 2.0
    assert goal_metric_value("offers", m) == 1.0
    assert goal_metric_value("response_rate", m) == 30.0


def test_inactive_goals_are_skipped():
    goals = [_goal(id="g1"), _goal("offers", target=1, id="g2", is_active=False)]

    assert [p.goal_id for p in track_goals(goals, _metrics())] == ["g1"]


def test_no_applications_means_no_insights():
    assert build_insights(_metrics(total_applications=0, response_rate=0.0), trend_percent=-50.0) == []


def test_low_response_and_slow_responses():
    insights = build_insights(_metrics(response_rate=10.0, avg_days_to_response=21.0), trend_percent=0.0)

    assert [(i.kind, i.title) for i in insights] == [
        ("warning", "Low Response Rate"),
        ("info", "Slow Response Times"),
    ]
    assert "10.0%" in insights[0].message


def test_strong_interviews_and_activity_trend():
    insights = build_insights(_metrics(interview_conversion_rate=20.0), trend_percent=35.0)

    assert [i.title for i in insights] == ["Strong Interview Performance", "Increasing Activity"]


def test_decreasing_activity_warning():
    insights = build_insights(_metrics(), trend_percent=-25.0)

    assert [(i.kind, i.title) for i in insights] == [("warning", "Decreasing Activity")]
    assert "25.0%" in insights[0].message


def test_trend_at_threshold_is_quiet():
    assert build_insights(_metrics(), trend_percent=20.0) == []


def test_non_finite_target_is_degenerate():
    for target in (float("nan"), float("inf")):
        progress = track_goal(_goal(target=target), current_value=5)

        assert progress.degenerate is True
        assert progress.target_value == 0.0
        assert progress.raw_progress_percent == 0.0
        assert progress.amount_remaining == 0.0
        assert progress.status_text == "No target set"
