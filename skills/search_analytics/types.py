"""Public typed contracts for search_analytics."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Literal, Optional

GoalType = Literal["applications", "interviews", "offers", "response_rate"]
OutcomeCategory = Literal["successful", "interviewing", "rejected", "other"]
InsightKind = Literal["warning", "success", "info"]
Priority = Literal["high", "medium", "low"]

GOAL_TYPES: tuple[str, ...] = ("applications", "interviews", "offers", "response_rate")


class ApplicationStatus(str, Enum):
    INTERESTED = "Interested"
    APPLIED = "Applied"
    PHONE_SCREEN = "Phone Screen"
    INTERVIEW = "Interview"
    INTERVIEW_SCHEDULED = "Interview Scheduled"
    INTERVIEWING = "Interviewing"
    OFFER_RECEIVED = "Offer Received"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    DECLINED = "Declined"
    WITHDRAWN = "Withdrawn"

    @classmethod
    def parse(cls, raw: object) -> Optional["ApplicationStatus"]:
        """Match a stored status string to a member, ignoring case and outer spaces."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        wanted = raw.strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return None


@dataclass(slots=True, frozen=True)
class ApplicationRecord:
    id: str
    status: ApplicationStatus
    created_at: datetime
    industry: Optional[str] = None
    company_size: Optional[str] = None
    role_type: Optional[str] = None
    source_url: Optional[str] = None
    description_length: int = 0
    has_notes: bool = False
    has_salary: bool = False
    has_location: bool = False


@dataclass(slots=True, frozen=True)
class InterviewRecord:
    id: str
    job_id: str
    created_at: datetime
    scheduled_at: Optional[datetime] = None
    outcome: Optional[str] = None


@dataclass(slots=True, frozen=True)
class StatusTransition:
    job_id: str
    to_status: ApplicationStatus
    changed_at: datetime
    from_status: Optional[ApplicationStatus] = None


@dataclass(slots=True, frozen=True)
class ApplicationPackage:
    job_id: str
    resume_id: Optional[str] = None
    cover_letter_id: Optional[str] = None
    id: str = ""


@dataclass(slots=True, frozen=True)
class Goal:
    id: str
    goal_type: GoalType
    target_value: float
    time_period: str = "weekly"
    start_date: Optional[date] = None
    is_active: bool = True


@dataclass(slots=True)
class AnalysisInputs:
    jobs: list[ApplicationRecord] = field(default_factory=list)
    interviews: list[InterviewRecord] = field(default_factory=list)
    status_history: list[StatusTransition] = field(default_factory=list)
    application_packages: list[ApplicationPackage] = field(default_factory=list)
    goals: list[Goal] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(slots=True)
class BucketCounts:
    total: int = 0
    success_count: int = 0
    interview_count: int = 0
    rejected_count: int = 0


@dataclass(slots=True)
class BreakdownRow:
    key: str
    total: int
    success_rate: float
    interview_rate: float
    rejection_rate: float


@dataclass(slots=True)
class SignificanceRow(BreakdownRow):
    expected: float = 0.0
    observed: float = 0.0
    chi_square_like: float = 0.0
    p_approx: float = 1.0
    significant: bool = False


@dataclass(slots=True)
class AnalysisTotals:
    total_applications: int
    successful_applications: int
    interviewed_applications: int
    rejected_applications: int
    overall_success_rate: float
    overall_interview_rate: float
    overall_rejection_rate: float


@dataclass(slots=True)
class CohortStats:
    size: int
    avg_text_length: float
    has_notes: int
    has_salary: int
    has_location: int

    def _share(self, count: int) -> float:
        return count / self.size * 100.0 if self.size else 0.0

    @property
    def notes_pct(self) -> float:
        return self._share(self.has_notes)

    @property
    def salary_pct(self) -> float:
        return self._share(self.has_salary)

    @property
    def location_pct(self) -> float:
        return self._share(self.has_location)

    @property
    def description_detail(self) -> float:
        return min(self.avg_text_length / 2000.0 * 100.0, 100.0)


@dataclass(slots=True)
class PatternSummary:
    successful: CohortStats
    rejected: CohortStats
    comparative_note: str
    length_delta: float
    detail_notes: list[str] = field(default_factory=list)


@dataclass(slots=True)
class CustomizationImpact:
    customized_success_rate: float
    non_customized_success_rate: float
    jobs_with_custom_resume: int
    jobs_with_custom_cover_letter: int


@dataclass(slots=True)
class TimingReport:
    by_day: list[BreakdownRow]
    by_hour: list[BreakdownRow]
    best_day: Optional[str]
    best_hour: Optional[str]


@dataclass(slots=True)
class PerformanceMetrics:
    total_applications: int
    interviews_scheduled: int
    offers_received: int
    responses: int
    response_rate: float
    interview_conversion_rate: float
    offer_conversion_rate: float
    avg_days_to_response: float
    avg_days_to_interview: float
    avg_days_to_offer: float


@dataclass(slots=True)
class FunnelStage:
    stage: str
    count: int
    percentage: float


@dataclass(slots=True)
class WeeklyPoint:
    label: str
    start: str
    end: str
    applications: int
    interviews: int
    offers: int


@dataclass(slots=True)
class TrendReport:
    trend_percent: float
    first_half: int
    second_half: int
    weekly_series: list[WeeklyPoint] = field(default_factory=list)


@dataclass(slots=True)
class GoalProgress:
    goal_id: str
    goal_type: str
    time_period: str
    current_value: float
    target_value: float
    progress_percent: float
    raw_progress_percent: float
    amount_remaining: float
    achieved: bool
    degenerate: bool
    status_text: str


@dataclass(slots=True)
class Insight:
    kind: InsightKind
    title: str
    message: str


@dataclass(slots=True)
class Recommendation:
    priority: Priority
    title: str
    description: str


@dataclass(slots=True)
class Recommendations:
    key_findings: list[str] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    focus_areas: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "keyFindings": list(self.key_findings),
            "recommendations": [asdict(r) for r in self.recommendations],
            "focusAreas": list(self.focus_areas),
        }


@dataclass(slots=True)
class AnalysisResult:
    totals: AnalysisTotals
    breakdowns: dict[str, list[BreakdownRow]]
    significance: list[SignificanceRow]
    patterns: PatternSummary
    customization: CustomizationImpact
    timing: TimingReport
    performance: PerformanceMetrics
    funnel: list[FunnelStage]
    trend: TrendReport
    goals: list[GoalProgress]
    insights: list[Insight] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        for name in ("successful", "rejected"):
            cohort: CohortStats = getattr(self.patterns, name)
            out["patterns"][name].update(
                {
                    "notes_pct": cohort.notes_pct,
                    "salary_pct": cohort.salary_pct,
                    "location_pct": cohort.location_pct,
                    "description_detail": cohort.description_detail,
                }
            )
        return out


@dataclass(slots=True)
class RunResult:
    run_id: str
    result: AnalysisResult
    artifacts: dict[str, str]
    warnings: list[str] = field(default_factory=list)
    recommendations: Optional[Recommendations] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "result": self.result.to_dict(),
            "artifacts": dict(self.artifacts),
            "warnings": list(self.warnings),
            "recommendations": self.recommendations.to_dict() if self.recommendations else None,
        }
