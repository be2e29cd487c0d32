"""
Issue Application DTOs
======================

Data Transfer Objects for hosts that store or transmit issues.

Field names are camelCase on the wire (``createdAt``, ``slaDeadline``,
``updatedBy``) and map one-to-one onto the domain entities, so an issue
survives a serialize/deserialize round trip unchanged.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from civictrack.config import IssueCategory, IssueStatus, Priority
from civictrack.issues.domain import Issue, Location, TimelineEvent


class CamelModel(BaseModel):
    """Base model accepting both snake_case names and camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        """JSON-compatible dict with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


class LocationDTO(CamelModel):
    """DTO for a report location."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: str = ""

    def to_domain(self) -> Location:
        return Location(latitude=self.lat, longitude=self.lng, address=self.address)

    @classmethod
    def from_domain(cls, location: Location) -> "LocationDTO":
        return cls(lat=location.latitude, lng=location.longitude, address=location.address)


class TimelineEventDTO(CamelModel):
    """
    DTO for one timeline entry.

    ``status`` holds the status value for status events and the annotation
    label (e.g. ``"assigned"``) for annotation events.
    """
    timestamp: datetime
    status: str = Field(..., min_length=1)
    note: Optional[str] = None
    updated_by: str = Field(..., min_length=1)

    def to_domain(self) -> TimelineEvent:
        return TimelineEvent.from_label(self.timestamp, self.status, self.updated_by, self.note)

    @classmethod
    def from_domain(cls, event: TimelineEvent) -> "TimelineEventDTO":
        return cls(
            timestamp=event.timestamp,
            status=event.label,
            note=event.note,
            updated_by=event.updated_by,
        )


class IssueDTO(CamelModel):
    """DTO representing an issue field-for-field."""
    id: str = Field(..., min_length=1)
    title: str
    description: str
    category: IssueCategory
    priority: Priority
    status: IssueStatus
    location: LocationDTO
    photos: List[str] = Field(default_factory=list)
    reported_by: str
    assigned_to: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    sla_deadline: datetime
    timeline: List[TimelineEventDTO] = Field(..., min_length=1)

    def to_domain(self) -> Issue:
        """Convert to domain entity; raises ``ValueError`` on broken invariants."""
        return Issue(
            id=self.id,
            title=self.title,
            description=self.description,
            category=self.category,
            priority=self.priority,
            status=self.status,
            location=self.location.to_domain(),
            reported_by=self.reported_by,
            created_at=self.created_at,
            updated_at=self.updated_at,
            sla_deadline=self.sla_deadline,
            timeline=tuple(event.to_domain() for event in self.timeline),
            photos=tuple(self.photos),
            assigned_to=self.assigned_to,
        )

    @classmethod
    def from_domain(cls, issue: Issue) -> "IssueDTO":
        """Create from domain entity."""
        return cls(
            id=issue.id,
            title=issue.title,
            description=issue.description,
            category=issue.category,
            priority=issue.priority,
            status=issue.status,
            location=LocationDTO.from_domain(issue.location),
            photos=list(issue.photos),
            reported_by=issue.reported_by,
            assigned_to=issue.assigned_to,
            created_at=issue.created_at,
            updated_at=issue.updated_at,
            sla_deadline=issue.sla_deadline,
            timeline=[TimelineEventDTO.from_domain(e) for e in issue.timeline],
        )


class IssueReportRequest(CamelModel):
    """
    Report form payload.

    Fields are deliberately loose; the lifecycle service validates them and
    reports every problem at once.
    """
    title: str = ""
    description: str = ""
    category: str = ""
    priority: str = Priority.MEDIUM.value
    location: LocationDTO
    photos: List[str] = Field(default_factory=list)
    reported_by: str = ""
