"""
Issue Domain Entities
=====================

The issue record and its append-only timeline.

Entities are frozen dataclasses. An update never edits an ``Issue`` in
place; the lifecycle service builds a new one with ``dataclasses.replace``
and the host swaps it into its collection by id.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from civictrack.config import (
    CLOSED_STATUSES, IssueCategory, IssueStatus, Priority, TimelineEventKind
)
from civictrack.shared.formatting import format_duration


@dataclass(frozen=True)
class Location:
    """Where an issue was reported."""
    latitude: float
    longitude: float
    address: str = ""

    def __post_init__(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError("latitude must be between -90 and 90")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError("longitude must be between -180 and 180")


@dataclass(frozen=True)
class TimelineEvent:
    """
    One immutable audit entry.

    A status event carries the ``IssueStatus`` the issue moved into; an
    annotation event carries a free label such as ``"assigned"`` instead.
    """
    timestamp: datetime
    updated_by: str
    status: Optional[IssueStatus] = None
    annotation: Optional[str] = None
    note: Optional[str] = None

    def __post_init__(self):
        if not self.updated_by or not self.updated_by.strip():
            raise ValueError("timeline event requires an actor")
        if (self.status is None) == (self.annotation is None):
            raise ValueError("timeline event needs either a status or an annotation")
        if self.status is not None and not isinstance(self.status, IssueStatus):
            object.__setattr__(self, "status", IssueStatus(self.status))

    @classmethod
    def status_change(
        cls,
        timestamp: datetime,
        status: IssueStatus,
        updated_by: str,
        note: Optional[str] = None
    ) -> "TimelineEvent":
        return cls(timestamp=timestamp, updated_by=updated_by, status=status, note=note)

    @classmethod
    def annotate(
        cls,
        timestamp: datetime,
        annotation: str,
        updated_by: str,
        note: Optional[str] = None
    ) -> "TimelineEvent":
        return cls(timestamp=timestamp, updated_by=updated_by, annotation=str(annotation), note=note)

    @classmethod
    def from_label(
        cls,
        timestamp: datetime,
        label: str,
        updated_by: str,
        note: Optional[str] = None
    ) -> "TimelineEvent":
        """Build an event from its serialized label, recognizing status values."""
        try:
            return cls.status_change(timestamp, IssueStatus(label), updated_by, note)
        except ValueError:
            return cls.annotate(timestamp, label, updated_by, note)

    @property
    def kind(self) -> TimelineEventKind:
        if self.status is not None:
            return TimelineEventKind.STATUS
        return TimelineEventKind.ANNOTATION

    @property
    def label(self) -> str:
        """Status value or annotation label, as shown in the timeline."""
        if self.status is not None:
            return self.status.value
        return self.annotation


@dataclass(frozen=True)
class Issue:
    """
    Issue entity representing a reported municipal problem.

    Invariants checked on every construction:
    - ``created_at <= updated_at``
    - the timeline is never empty
    - timeline timestamps never decrease
    """

    # Core attributes
    id: str
    title: str
    description: str
    category: IssueCategory
    priority: Priority
    status: IssueStatus
    location: Location
    reported_by: str

    # Timestamps
    created_at: datetime
    updated_at: datetime
    sla_deadline: datetime

    timeline: Tuple[TimelineEvent, ...]
    photos: Tuple[str, ...] = ()
    assigned_to: Optional[str] = None

    def __post_init__(self):
        """Validate issue on initialization."""
        object.__setattr__(self, "timeline", tuple(self.timeline))
        object.__setattr__(self, "photos", tuple(self.photos))
        object.__setattr__(self, "category", IssueCategory(self.category))
        object.__setattr__(self, "priority", Priority(self.priority))
        object.__setattr__(self, "status", IssueStatus(self.status))

        if self.updated_at < self.created_at:
            raise ValueError("updated_at cannot be before created_at")

        if not self.timeline:
            raise ValueError("timeline must contain at least the creation event")

        for previous, current in zip(self.timeline, self.timeline[1:]):
            if current.timestamp < previous.timestamp:
                raise ValueError("timeline events must be in chronological order")

    @property
    def is_open(self) -> bool:
        """Check if issue is still awaiting resolution."""
        return self.status not in CLOSED_STATUSES

    @property
    def is_resolved(self) -> bool:
        """Check if issue has been resolved or closed."""
        return self.status in CLOSED_STATUSES

    @property
    def latest_event(self) -> TimelineEvent:
        return self.timeline[-1]

    @property
    def status_history(self) -> List[TimelineEvent]:
        """Status events only, oldest first."""
        return [e for e in self.timeline if e.kind == TimelineEventKind.STATUS]

    @property
    def resolved_at(self) -> Optional[datetime]:
        """Timestamp of the most recent move into ``resolved``."""
        for event in reversed(self.timeline):
            if event.status == IssueStatus.RESOLVED:
                return event.timestamp
        return None

    @property
    def resolution_time(self) -> timedelta:
        """Time from report to last update."""
        return self.updated_at - self.created_at

    def time_deltas(self) -> List[Optional[str]]:
        """
        Elapsed time between consecutive timeline events.

        The first entry is ``None``; later entries read like ``"1h 15m later"``.
        """
        deltas: List[Optional[str]] = [None]
        for previous, current in zip(self.timeline, self.timeline[1:]):
            deltas.append(f"{format_duration(current.timestamp - previous.timestamp)} later")
        return deltas

    def append_events(self, events: Iterable[TimelineEvent], **changes) -> "Issue":
        """Return a copy with ``events`` appended and ``changes`` applied."""
        return replace(self, timeline=self.timeline + tuple(events), **changes)

    def with_changes(self, **changes) -> "Issue":
        return replace(self, **changes)


def new_events(previous: Issue, updated: Issue) -> List[TimelineEvent]:
    """
    Timeline events added between two versions of the same issue.

    Used by notification layers to react to status changes without a push
    callback.
    """
    if previous.id != updated.id:
        raise ValueError("cannot compare timelines of different issues")
    return list(updated.timeline[len(previous.timeline):])
