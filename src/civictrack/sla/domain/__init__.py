"""
SLA Domain Layer
================

Domain layer for SLA tracking.

Contains:
- Value Objects: Immutable objects defined by attributes (SLAPolicy, SLAEvaluation)
- Domain Services: Stateless business logic (SLACalculator)
- Read models: IssueStats, RecentActivity, DashboardSummary

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from civictrack.sla.domain.entities import DashboardSummary, IssueStats, RecentActivity
from civictrack.sla.domain.value_objects import (
    DEFAULT_ALLOWANCE_HOURS,
    DEFAULT_WARNING_THRESHOLD_HOURS,
    SLACalculator,
    SLAEvaluation,
    SLAPolicy,
)

__all__ = [
    # Read models
    "DashboardSummary",
    "IssueStats",
    "RecentActivity",
    # Value Objects & Services
    "SLACalculator",
    "SLAEvaluation",
    "SLAPolicy",
    "DEFAULT_ALLOWANCE_HOURS",
    "DEFAULT_WARNING_THRESHOLD_HOURS",
]
