"""
Issue Application Layer
=======================

Application layer for the issue lifecycle.

Contains:
- Services: the lifecycle state machine (intake and updates)
- DTOs: wire representations of issues and report payloads

This layer depends on the domain layer and repository interfaces,
but not on concrete infrastructure implementations.
"""

from civictrack.issues.application.dto import (
    IssueDTO,
    IssueReportRequest,
    LocationDTO,
    TimelineEventDTO,
)
from civictrack.issues.application.services import (
    IIssueRepository,
    IssueLifecycleService,
    UpdateOutcome,
)

__all__ = [
    # DTOs
    "IssueDTO",
    "IssueReportRequest",
    "LocationDTO",
    "TimelineEventDTO",
    # Services
    "IssueLifecycleService",
    "UpdateOutcome",
    # Repository Interfaces
    "IIssueRepository",
]
