"""
SLA Application DTOs
=====================

Response models for dashboards and the public statistics page.
"""

from datetime import datetime
from typing import Dict, List, Literal

from pydantic import BaseModel, Field

from civictrack.shared.formatting import format_percentage
from civictrack.sla.domain import DashboardSummary, IssueStats, SLAEvaluation


# ========== Type Aliases for Literals ==========
SLABucketStr = Literal["met", "on-track", "at-risk", "overdue", "overdue-but-closed"]


class SLAStatusResponse(BaseModel):
    """SLA classification of one issue."""
    issue_id: str
    bucket: SLABucketStr
    remaining_hours: int = Field(..., ge=0, description="Whole hours left (0 if overdue or closed)")
    deadline: datetime
    evaluated_at: datetime
    is_breached: bool
    badge: str = Field(..., description="Short label, e.g. '5h left'")

    @classmethod
    def from_domain(cls, evaluation: SLAEvaluation) -> "SLAStatusResponse":
        return cls(
            issue_id=evaluation.issue_id,
            bucket=evaluation.bucket.value,
            remaining_hours=evaluation.remaining_hours,
            deadline=evaluation.deadline,
            evaluated_at=evaluation.evaluated_at,
            is_breached=evaluation.is_breached,
            badge=evaluation.badge_text,
        )


class CategoryCount(BaseModel):
    category: str
    count: int
    share: str = Field(..., description="Rounded percentage of all issues")


class RecentIssue(BaseModel):
    id: str
    title: str
    status: str
    created_at: datetime


class IssueStatsResponse(BaseModel):
    """Public statistics, rates as fractions plus display percentages."""
    total: int
    status_counts: Dict[str, int]
    categories: List[CategoryCount]
    resolution_rate: float
    resolution_rate_display: str
    avg_resolution_hours: int = Field(..., description="Mean resolution time, rounded")
    on_time_rate: float
    on_time_rate_display: str
    recent_count: int
    recent_issues: List[RecentIssue] = Field(default_factory=list)
    generated_at: datetime

    @classmethod
    def from_domain(cls, stats: IssueStats) -> "IssueStatsResponse":
        return cls(
            total=stats.total,
            status_counts={status.value: n for status, n in stats.status_counts.items()},
            categories=[
                CategoryCount(
                    category=category.value,
                    count=n,
                    share=format_percentage(stats.category_share(category)),
                )
                for category, n in stats.category_counts
            ],
            resolution_rate=stats.resolution_rate,
            resolution_rate_display=format_percentage(stats.resolution_rate),
            avg_resolution_hours=int(stats.avg_resolution_hours + 0.5),
            on_time_rate=stats.on_time_rate,
            on_time_rate_display=format_percentage(stats.on_time_rate),
            recent_count=stats.recent_count,
            recent_issues=[
                RecentIssue(id=i.id, title=i.title, status=i.status.value, created_at=i.created_at)
                for i in stats.recent.preview
            ],
            generated_at=stats.generated_at,
        )


class DashboardSummaryResponse(BaseModel):
    """Summary statistics for the staff dashboard."""
    total_issues: int
    submitted_count: int
    in_progress_count: int
    resolved_count: int
    overdue_count: int
    bucket_counts: Dict[str, int]
    breach_rate: float = Field(..., description="Fraction of issues past their deadline")

    @classmethod
    def from_domain(cls, summary: DashboardSummary) -> "DashboardSummaryResponse":
        return cls(
            total_issues=summary.total,
            submitted_count=summary.submitted,
            in_progress_count=summary.in_progress,
            resolved_count=summary.resolved,
            overdue_count=summary.overdue,
            bucket_counts={bucket.value: n for bucket, n in summary.bucket_counts.items()},
            breach_rate=summary.breach_rate,
        )
