"""
Demonstration dataset used by the demo script and the tests.
"""

from datetime import datetime, timezone
from typing import List

from civictrack.config import IssueCategory, IssueStatus, Priority
from civictrack.issues.domain import Issue, Location, TimelineEvent


def _utc(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


def sample_issues() -> List[Issue]:
    """Two issues: a pothole being repaired and a fixed streetlight."""
    pothole = Issue(
        id="1",
        title="Pothole on Main Street",
        description="Large pothole causing damage to vehicles near the intersection",
        category=IssueCategory.ROADS_INFRASTRUCTURE,
        priority=Priority.HIGH,
        status=IssueStatus.IN_PROGRESS,
        location=Location(40.7128, -74.0060, "123 Main St, New York, NY 10001"),
        photos=("https://images.pexels.com/photos/1647962/pexels-photo-1647962.jpeg",),
        reported_by="John Citizen",
        assigned_to="Road Maintenance Team",
        created_at=_utc("2025-01-20T10:00:00"),
        updated_at=_utc("2025-01-20T14:30:00"),
        sla_deadline=_utc("2025-01-22T10:00:00"),
        timeline=(
            TimelineEvent.status_change(
                _utc("2025-01-20T10:00:00"), IssueStatus.SUBMITTED,
                "John Citizen", "Issue reported by citizen"),
            TimelineEvent.status_change(
                _utc("2025-01-20T11:15:00"), IssueStatus.REVIEWED,
                "City Inspector", "Reviewed and prioritized as high"),
            TimelineEvent.status_change(
                _utc("2025-01-20T14:30:00"), IssueStatus.IN_PROGRESS,
                "Operations Manager", "Assigned to road maintenance team"),
        ),
    )

    streetlight = Issue(
        id="2",
        title="Broken Streetlight",
        description="Streetlight not working, creating safety hazard",
        category=IssueCategory.PUBLIC_SAFETY,
        priority=Priority.MEDIUM,
        status=IssueStatus.RESOLVED,
        location=Location(40.7580, -73.9855, "456 Oak Avenue, New York, NY 10002"),
        reported_by="Sarah Smith",
        assigned_to="Electrical Team",
        created_at=_utc("2025-01-18T09:30:00"),
        updated_at=_utc("2025-01-19T16:00:00"),
        sla_deadline=_utc("2025-01-20T09:30:00"),
        timeline=(
            TimelineEvent.status_change(
                _utc("2025-01-18T09:30:00"), IssueStatus.SUBMITTED,
                "Sarah Smith", "Issue reported"),
            TimelineEvent.status_change(
                _utc("2025-01-18T14:00:00"), IssueStatus.REVIEWED,
                "Safety Coordinator", "Safety priority assigned"),
            TimelineEvent.status_change(
                _utc("2025-01-19T08:30:00"), IssueStatus.IN_PROGRESS,
                "Operations Manager", "Electrical team dispatched"),
            TimelineEvent.status_change(
                _utc("2025-01-19T16:00:00"), IssueStatus.RESOLVED,
                "Electrical Team", "Streetlight repaired and tested"),
        ),
    )

    return [pothole, streetlight]
