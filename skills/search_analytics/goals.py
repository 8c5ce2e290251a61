"""Progress of user-defined goals against live metrics."""

from __future__ import annotations

import math

from skills.search_analytics.types import Goal, GoalProgress, PerformanceMetrics

GOAL_UNITS = {
    "applications": "applications",
    "interviews": "interviews",
    "offers": "offers",
    "response_rate": "%",
}


def goal_metric_value(goal_type: str, metrics: PerformanceMetrics) -> float:
    values = {
        "applications": float(metrics.total_applications),
        "interviews": float(metrics.interviews_scheduled),
        "offers": float(metrics.offers_received),
        "response_rate": metrics.response_rate,
    }
    return values.get(goal_type, 0.0)


def track_goal(goal: Goal, current_value: float) -> GoalProgress:
    target = float(goal.target_value)
    unit = GOAL_UNITS.get(goal.goal_type, "")
    degenerate = not math.isfinite(target) or target <= 0
    if degenerate:
        return GoalProgress(
            goal_id=goal.id,
            goal_type=goal.goal_type,
            time_period=goal.time_period,
            current_value=current_value,
            target_value=target if math.isfinite(target) else 0.0,
            progress_percent=0.0,
            raw_progress_percent=0.0,
            amount_remaining=0.0,
            achieved=False,
            degenerate=True,
            status_text="No target set",
        )

    raw = current_value / target * 100.0
    # Remaining is derived from the unclamped values so over-achievement never goes negative.
    remaining = max(0.0, target - current_value)
    achieved = raw >= 100.0
    return GoalProgress(
        goal_id=goal.id,
        goal_type=goal.goal_type,
        time_period=goal.time_period,
        current_value=current_value,
        target_value=target,
        progress_percent=max(0.0, min(raw, 100.0)),
        raw_progress_percent=raw,
        amount_remaining=remaining,
        achieved=achieved,
        degenerate=False,
        status_text="Goal achieved!" if achieved else f"{remaining:.0f} {unit} to go".strip(),
    )


def track_goals(goals: list[Goal], metrics: PerformanceMetrics) -> list[GoalProgress]:
    return [track_goal(g, goal_metric_value(g.goal_type, metrics)) for g in goals if g.is_active]
