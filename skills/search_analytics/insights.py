"""Benchmark-driven insight messages for the performance view."""

from __future__ import annotations

from skills.search_analytics.types import Insight, PerformanceMetrics

BENCHMARKS = {
    "response_rate": 25.0,
    "interview_conversion_rate": 15.0,
    "offer_conversion_rate": 5.0,
    "avg_days_to_response": 14.0,
}

TREND_ALERT_PCT = 20.0


def build_insights(metrics: PerformanceMetrics, trend_percent: float) -> list[Insight]:
    out: list[Insight] = []
    if metrics.total_applications == 0:
        return out

    if metrics.response_rate < BENCHMARKS["response_rate"]:
        out.append(
            Insight(
                kind="warning",
                title="Low Response Rate",
                message=(
                    f"Your response rate ({metrics.response_rate:.1f}%) is below industry average "
                    f"({BENCHMARKS['response_rate']:.0f}%). Consider improving your resume and application materials."
                ),
            )
        )

    if metrics.interview_conversion_rate > BENCHMARKS["interview_conversion_rate"]:
        out.append(
            Insight(
                kind="success",
                title="Strong Interview Performance",
                message=(
                    f"Your interview conversion rate ({metrics.interview_conversion_rate:.1f}%) exceeds industry "
                    f"average ({BENCHMARKS['interview_conversion_rate']:.0f}%). Keep up the great work!"
                ),
            )
        )

    if metrics.avg_days_to_response > BENCHMARKS["avg_days_to_response"]:
        out.append(
            Insight(
                kind="info",
                title="Slow Response Times",
                message=(
                    f"Average time to response is {metrics.avg_days_to_response:.1f} days, above the "
                    f"{BENCHMARKS['avg_days_to_response']:.0f} day benchmark. Consider following up more proactively."
                ),
            )
        )

    if trend_percent > TREND_ALERT_PCT:
        out.append(
            Insight(
                kind="success",
                title="Increasing Activity",
                message=(
                    f"Your application volume has increased by {trend_percent:.1f}% in the selected period. "
                    "Maintain this momentum!"
                ),
            )
        )
    elif trend_percent < -TREND_ALERT_PCT:
        out.append(
            Insight(
                kind="warning",
                title="Decreasing Activity",
                message=(
                    f"Your application volume has decreased by {abs(trend_percent):.1f}%. "
                    "Consider setting daily or weekly application goals to stay on track."
                ),
            )
        )

    return out
