"""
SLA Application Layer
======================

Application layer for SLA tracking.

Contains:
- Services: SLA evaluation and statistics aggregation
- DTOs: Response models for dashboards and public statistics

This layer depends on the domain layer but not on concrete infrastructure.
"""

from civictrack.sla.application.dto import (
    DashboardSummaryResponse,
    IssueStatsResponse,
    SLAStatusResponse,
)
from civictrack.sla.application.services import (
    ISLAPolicyProvider,
    IssueStatsAggregator,
    SLAEvaluationService,
)

__all__ = [
    # DTOs
    "DashboardSummaryResponse",
    "IssueStatsResponse",
    "SLAStatusResponse",
    # Services
    "IssueStatsAggregator",
    "SLAEvaluationService",
    # Provider Interfaces
    "ISLAPolicyProvider",
]
