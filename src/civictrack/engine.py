"""
CivicTrack Engine
=================

Issue lifecycle and SLA tracking for citizen issue reports.

Composition root: wires settings, clock, SLA policy and the services into
one ``IssueEngine`` that hosts call into.

Operations:
- intake / submit_report: create an issue from a citizen report
- apply_update: move an issue forward, assign it or edit its fields
- evaluate_sla: classify an issue as met, on-track, at-risk or overdue
- aggregate: statistics for dashboards and public reporting

The engine never stores issues. Hosts keep a mapping from ID to issue
(``InMemoryIssueRepository`` is one) and replace entries with the values
the engine returns.
"""

from datetime import datetime, timedelta
from typing import Any, Iterable, List, Mapping, Optional

from civictrack.config import Settings, get_settings
from civictrack.issues.application import (
    IssueLifecycleService, IssueReportRequest, UpdateOutcome
)
from civictrack.issues.application.services import LocationInput, PatchInput
from civictrack.issues.domain import (
    IntakeLimits, Issue, IssueFilters, filter_issues, triage_queue
)
from civictrack.shared.infrastructure.clock import IClock, SystemClock
from civictrack.shared.infrastructure.logging import get_logger, setup_logging
from civictrack.sla.application import (
    ISLAPolicyProvider, IssueStatsAggregator, SLAEvaluationService
)
from civictrack.sla.domain import DashboardSummary, IssueStats, SLAEvaluation, SLAPolicy
from civictrack.sla.infrastructure import SLAPolicyManager

logger = get_logger(__name__)


class IssueEngine:
    """
    Facade over the lifecycle, evaluation and aggregation services.

    Holds no issue state; only its clock and immutable policy.
    """

    def __init__(
        self,
        lifecycle: IssueLifecycleService,
        evaluator: SLAEvaluationService,
        aggregator: IssueStatsAggregator,
        clock: IClock
    ):
        self.lifecycle = lifecycle
        self.evaluator = evaluator
        self.aggregator = aggregator
        self.clock = clock

    # ========== Lifecycle ==========

    def intake(
        self,
        title: str,
        description: str,
        category: Any,
        priority: Any,
        location: LocationInput,
        photos: Iterable[str] = (),
        reported_by: str = ""
    ) -> Issue:
        return self.lifecycle.intake(
            title, description, category, priority, location, photos, reported_by
        )

    def submit_report(self, request: IssueReportRequest) -> Issue:
        """Create an issue from a report form payload."""
        return self.lifecycle.intake(
            title=request.title,
            description=request.description,
            category=request.category,
            priority=request.priority,
            location=request.location.to_domain(),
            photos=request.photos,
            reported_by=request.reported_by,
        )

    def apply_update(
        self,
        issues: Mapping[str, Issue],
        issue_id: str,
        patch: PatchInput,
        actor: str,
        note: Optional[str] = None
    ) -> Issue:
        return self.lifecycle.apply_update(issues, issue_id, patch, actor, note)

    def apply_update_with_events(
        self,
        issues: Mapping[str, Issue],
        issue_id: str,
        patch: PatchInput,
        actor: str,
        note: Optional[str] = None
    ) -> UpdateOutcome:
        return self.lifecycle.apply_update_with_events(issues, issue_id, patch, actor, note)

    # ========== Read side ==========

    def evaluate_sla(self, issue: Issue, now: Optional[datetime] = None) -> SLAEvaluation:
        return self.evaluator.evaluate(issue, now)

    def aggregate(
        self,
        issues: Iterable[Issue],
        now: Optional[datetime] = None,
        window: Optional[timedelta] = None
    ) -> IssueStats:
        if now is None:
            now = self.clock.now()
        return self.aggregator.aggregate(issues, now, window)

    def dashboard_summary(
        self,
        issues: Iterable[Issue],
        now: Optional[datetime] = None
    ) -> DashboardSummary:
        return self.evaluator.dashboard_summary(issues, now)

    def filter(self, issues: Iterable[Issue], filters: IssueFilters) -> List[Issue]:
        return filter_issues(issues, filters)

    def triage_queue(self, issues: Iterable[Issue]) -> List[Issue]:
        return triage_queue(issues)


def build_engine(
    settings: Optional[Settings] = None,
    clock: Optional[IClock] = None,
    policy_provider: Optional[ISLAPolicyProvider] = None,
    configure_logging: bool = False
) -> IssueEngine:
    """
    Build an engine from settings.

    Args:
        settings: Engine settings; defaults to environment-based settings
        clock: Time source; defaults to the UTC wall clock
        policy_provider: SLA policy source; defaults to the YAML file named
            by ``settings.sla_policy_path`` or the built-in allowances
        configure_logging: Install the JSON log handler on the root logger

    Raises:
        ConfigurationException: If the configured SLA policy file is invalid
    """
    settings = settings or get_settings()
    clock = clock or SystemClock()

    if configure_logging:
        setup_logging(settings.log_level, settings.environment)

    if policy_provider is None:
        manager = SLAPolicyManager(
            SLAPolicy(warning_threshold_hours=settings.sla_warning_threshold_hours)
        )
        if settings.sla_policy_path is not None:
            manager.load(settings.sla_policy_path)
        policy_provider = manager

    policy = policy_provider.get_policy()

    lifecycle = IssueLifecycleService(
        clock=clock,
        policy=policy,
        limits=IntakeLimits(
            max_photos=settings.max_photos,
            max_title_length=settings.max_title_length,
            max_description_length=settings.max_description_length,
        ),
        annotate_field_changes=settings.annotate_field_changes,
    )
    evaluator = SLAEvaluationService(policy=policy, clock=clock)
    aggregator = IssueStatsAggregator(
        window=timedelta(days=settings.recent_window_days),
        preview_limit=settings.recent_preview_limit,
    )

    logger.info(
        "Issue engine ready",
        extra={
            "app_name": settings.app_name,
            "environment": settings.environment,
            "allowance_hours": {p.value: h for p, h in policy.allowance_hours.items()},
        },
    )
    return IssueEngine(lifecycle, evaluator, aggregator, clock)
