"""
SLA Application Services
=========================

Read-only observers over an issue collection: the SLA evaluator and the
statistics aggregator.

Neither service mutates issues or keeps them. Buckets are recomputed on
every call against the ``now`` the caller passes in (or the injected clock
when it passes none); nothing fires on its own when a deadline passes.
"""

from abc import ABC, abstractmethod
from collections import Counter
from datetime import datetime, timedelta
from typing import Dict, Iterable, Optional

from civictrack.config import IssueStatus, SLABucket, VALID_SLA_BUCKETS, VALID_STATUSES
from civictrack.issues.domain import Issue
from civictrack.shared.formatting import HOUR_SECONDS
from civictrack.shared.infrastructure.clock import IClock, SystemClock, ensure_aware
from civictrack.shared.infrastructure.logging import get_logger, log_latency
from civictrack.sla.domain import (
    DashboardSummary, IssueStats, RecentActivity, SLACalculator, SLAEvaluation, SLAPolicy
)

logger = get_logger(__name__)

DEFAULT_RECENT_WINDOW = timedelta(days=7)
DEFAULT_PREVIEW_LIMIT = 5


# ========== Policy Provider Interface ==========

class ISLAPolicyProvider(ABC):
    """Interface for SLA policy access."""

    @abstractmethod
    def get_policy(self) -> SLAPolicy:
        """Get current SLA policy."""


# ========== Application Services ==========

class SLAEvaluationService:
    """
    Service for classifying issues into SLA buckets.
    """

    def __init__(self, policy: Optional[SLAPolicy] = None, clock: Optional[IClock] = None):
        self._policy = policy or SLAPolicy()
        self._clock = clock or SystemClock()

    def evaluate(self, issue: Issue, now: Optional[datetime] = None) -> SLAEvaluation:
        """
        Classify one issue.

        Args:
            issue: Issue to evaluate
            now: Evaluation time; defaults to the injected clock

        Returns:
            SLAEvaluation with bucket and remaining whole hours
        """
        current_time = self._resolve_now(now)
        bucket, remaining = SLACalculator.classify(
            issue.status,
            issue.updated_at,
            issue.sla_deadline,
            current_time,
            self._policy.warning_threshold_hours,
        )
        return SLAEvaluation(
            issue_id=issue.id,
            bucket=bucket,
            remaining_hours=remaining,
            deadline=issue.sla_deadline,
            evaluated_at=current_time,
        )

    def evaluate_many(
        self,
        issues: Iterable[Issue],
        now: Optional[datetime] = None
    ) -> Dict[str, SLAEvaluation]:
        """Evaluate several issues against one instant, keyed by issue ID."""
        current_time = self._resolve_now(now)
        return {issue.id: self.evaluate(issue, current_time) for issue in issues}

    def bucket_counts(
        self,
        issues: Iterable[Issue],
        now: Optional[datetime] = None
    ) -> Dict[SLABucket, int]:
        """Number of issues per bucket, every bucket present."""
        counts = {bucket: 0 for bucket in VALID_SLA_BUCKETS}
        for evaluation in self.evaluate_many(issues, now).values():
            counts[evaluation.bucket] += 1
        return counts

    def _resolve_now(self, now: Optional[datetime]) -> datetime:
        """Caller's time, naive values read as UTC; the injected clock otherwise."""
        if now is None:
            return self._clock.now()
        return ensure_aware(now)

    def countdown_text(self, issue: Issue, now: Optional[datetime] = None) -> str:
        """Countdown label for an open issue, ``"Met"`` once resolved in time."""
        evaluation = self.evaluate(issue, now)
        if not evaluation.is_open:
            return evaluation.badge_text
        return SLACalculator.countdown_text(issue.sla_deadline, evaluation.evaluated_at)

    def dashboard_summary(
        self,
        issues: Iterable[Issue],
        now: Optional[datetime] = None
    ) -> DashboardSummary:
        """Counters for the staff dashboard header."""
        issues = list(issues)
        current_time = self._resolve_now(now)
        statuses = Counter(issue.status for issue in issues)
        overdue = sum(
            1 for issue in issues
            if issue.is_open and issue.sla_deadline < current_time
        )
        return DashboardSummary(
            total=len(issues),
            submitted=statuses[IssueStatus.SUBMITTED],
            in_progress=statuses[IssueStatus.IN_PROGRESS],
            resolved=statuses[IssueStatus.RESOLVED],
            overdue=overdue,
            bucket_counts=self.bucket_counts(issues, current_time),
        )


class IssueStatsAggregator:
    """
    Fleet-wide statistics for dashboards and the public statistics page.

    Rates resolve to 0 for an empty collection instead of dividing by zero.
    """

    def __init__(
        self,
        window: timedelta = DEFAULT_RECENT_WINDOW,
        preview_limit: int = DEFAULT_PREVIEW_LIMIT
    ):
        self._window = window
        self._preview_limit = preview_limit

    def aggregate(
        self,
        issues: Iterable[Issue],
        now: datetime,
        window: Optional[timedelta] = None
    ) -> IssueStats:
        """
        Compute statistics over a collection.

        Args:
            issues: Issues to aggregate
            now: Reference time for the recent-activity window
            window: Recent-activity window; defaults to 7 days

        Returns:
            IssueStats snapshot
        """
        issues = list(issues)
        now = ensure_aware(now)
        window = window if window is not None else self._window

        with log_latency(logger, "aggregate_stats", issue_count=len(issues)):
            total = len(issues)

            status_counts = {status: 0 for status in VALID_STATUSES}
            for issue in issues:
                status_counts[issue.status] += 1

            category_counts = sorted(
                Counter(issue.category for issue in issues).items(),
                key=lambda item: (-item[1], item[0].value),
            )

            resolved = [i for i in issues if i.status == IssueStatus.RESOLVED]
            on_time = [i for i in resolved if i.updated_at <= i.sla_deadline]

            resolution_rate = len(resolved) / total if total else 0.0
            on_time_rate = len(on_time) / len(resolved) if resolved else 0.0

            if resolved:
                avg_resolution_hours = sum(
                    i.resolution_time.total_seconds() / HOUR_SECONDS for i in resolved
                ) / len(resolved)
            else:
                avg_resolution_hours = 0.0

            return IssueStats(
                total=total,
                status_counts=status_counts,
                category_counts=category_counts,
                resolved_count=len(resolved),
                on_time_count=len(on_time),
                resolution_rate=resolution_rate,
                avg_resolution_hours=avg_resolution_hours,
                on_time_rate=on_time_rate,
                recent=self.recent_activity(issues, now, window),
                generated_at=now,
            )

    def recent_activity(
        self,
        issues: Iterable[Issue],
        now: datetime,
        window: Optional[timedelta] = None
    ) -> RecentActivity:
        """Issues created within ``window`` of ``now``, newest first in the preview."""
        now = ensure_aware(now)
        window = window if window is not None else self._window
        cutoff = now - window
        recent = sorted(
            (issue for issue in issues if issue.created_at >= cutoff),
            key=lambda issue: issue.created_at,
            reverse=True,
        )
        return RecentActivity(
            window=window,
            count=len(recent),
            preview=tuple(recent[:self._preview_limit]),
        )
