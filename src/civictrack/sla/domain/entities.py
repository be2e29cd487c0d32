"""
SLA Domain Entities
====================

Read models produced by the SLA evaluator and the statistics aggregator.

These objects are snapshots computed against a caller-supplied "now"; they
hold no reference back to the collection they were computed from.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Tuple

from civictrack.config import IssueCategory, IssueStatus, SLABucket
from civictrack.issues.domain.entities import Issue


@dataclass(frozen=True)
class RecentActivity:
    """Issues created inside the recent window."""
    window: timedelta
    count: int
    preview: Tuple[Issue, ...] = ()


@dataclass(frozen=True)
class IssueStats:
    """
    Fleet-wide statistics for dashboards and the public statistics page.

    Rates are fractions in ``[0, 1]``; an empty collection yields zeros.
    """
    total: int
    status_counts: Dict[IssueStatus, int]
    category_counts: List[Tuple[IssueCategory, int]]
    resolved_count: int
    on_time_count: int
    resolution_rate: float
    avg_resolution_hours: float
    on_time_rate: float
    recent: RecentActivity
    generated_at: datetime

    @property
    def recent_count(self) -> int:
        return self.recent.count

    @property
    def recent_preview(self) -> Tuple[Issue, ...]:
        return self.recent.preview

    def category_share(self, category: IssueCategory) -> float:
        """Fraction of all issues filed under ``category``."""
        if self.total == 0:
            return 0.0
        return dict(self.category_counts).get(category, 0) / self.total

    def status_share(self, status: IssueStatus) -> float:
        if self.total == 0:
            return 0.0
        return self.status_counts.get(status, 0) / self.total


@dataclass(frozen=True)
class DashboardSummary:
    """
    Staff dashboard counters.

    ``overdue`` counts open issues whose deadline has passed; ``bucket_counts``
    holds every SLA bucket, zero-filled.
    """
    total: int
    submitted: int
    in_progress: int
    resolved: int
    overdue: int
    bucket_counts: Dict[SLABucket, int] = field(default_factory=dict)

    @property
    def breach_rate(self) -> float:
        """Share of issues that missed their deadline, open or closed."""
        if self.total == 0:
            return 0.0
        breached = (self.bucket_counts.get(SLABucket.OVERDUE, 0)
                    + self.bucket_counts.get(SLABucket.OVERDUE_BUT_CLOSED, 0))
        return breached / self.total
