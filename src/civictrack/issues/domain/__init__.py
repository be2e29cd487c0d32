"""
Issue Domain Layer
==================

Domain layer for the issue lifecycle.

Contains:
- Entities: Issue, TimelineEvent, Location
- Value Objects: IssuePatch, IssueFilters, IntakeLimits
- Domain Services: LifecycleRules and the pure list helpers

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from civictrack.issues.domain.entities import Issue, Location, TimelineEvent, new_events
from civictrack.issues.domain.value_objects import (
    INTAKE_NOTE,
    STATUS_NOTES,
    IntakeLimits,
    IssueFilters,
    IssuePatch,
    LifecycleRules,
    available_categories,
    available_statuses,
    default_status_note,
    filter_issues,
    parse_category,
    parse_location,
    triage_queue,
    validate_changes,
    validate_report,
)

__all__ = [
    # Entities
    "Issue",
    "Location",
    "TimelineEvent",
    "new_events",
    # Value Objects & Services
    "INTAKE_NOTE",
    "STATUS_NOTES",
    "IntakeLimits",
    "IssueFilters",
    "IssuePatch",
    "LifecycleRules",
    "available_categories",
    "available_statuses",
    "default_status_note",
    "filter_issues",
    "parse_category",
    "parse_location",
    "triage_queue",
    "validate_changes",
    "validate_report",
]
