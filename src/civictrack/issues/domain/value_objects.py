"""
Issue Value Objects
===================

Lifecycle rules, update patches, intake validation and list filters.

All functions here are pure: they look at values and either return a
result or raise, without touching any collection.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from civictrack.config import (
    IssueCategory, IssueStatus, Priority, STATUS_ORDER
)
from civictrack.core import InvalidTransitionException
from civictrack.issues.domain.entities import Issue, Location

INTAKE_NOTE = "Issue reported by citizen"

STATUS_NOTES: Dict[IssueStatus, str] = {
    IssueStatus.REVIEWED: "Issue reviewed and prioritized by staff",
    IssueStatus.IN_PROGRESS: "Work has begun on this issue",
    IssueStatus.RESOLVED: "Issue has been resolved",
    IssueStatus.CLOSED: "Issue closed and completed",
}


def default_status_note(status: IssueStatus) -> str:
    return STATUS_NOTES.get(status, f"Status updated to {status.value}")


class LifecycleRules:
    """
    Status transition rules.

    Forward jumps are allowed because city workflows vary; moving to a
    status that comes earlier in ``STATUS_ORDER`` is not. ``closed`` is the
    only status with no outgoing transition.
    """

    ORDER: Sequence[IssueStatus] = STATUS_ORDER

    @classmethod
    def ordinal(cls, status: IssueStatus) -> int:
        return cls.ORDER.index(IssueStatus(status))

    @classmethod
    def is_regression(cls, current: IssueStatus, target: IssueStatus) -> bool:
        return cls.ordinal(target) < cls.ordinal(current)

    @classmethod
    def can_transition(cls, current: IssueStatus, target: IssueStatus) -> bool:
        """True when ``target`` is a real move forward from ``current``."""
        return cls.ordinal(target) > cls.ordinal(current)

    @classmethod
    def allowed_targets(cls, current: IssueStatus) -> List[IssueStatus]:
        """Statuses reachable from ``current``, in canonical order."""
        return list(cls.ORDER[cls.ordinal(current) + 1:])

    @classmethod
    def validate_transition(
        cls,
        issue_id: str,
        current: IssueStatus,
        target: IssueStatus
    ) -> None:
        """Raise ``InvalidTransitionException`` if ``target`` is a regression."""
        if cls.is_regression(current, target):
            raise InvalidTransitionException(issue_id, current, target)


def parse_location(location: Union[Location, Mapping[str, Any]]) -> Location:
    """
    Build a ``Location`` from a mapping with ``lat``/``lng`` or
    ``latitude``/``longitude`` keys and an optional ``address``.

    Raises:
        ValueError: If coordinates are missing, not numeric or out of range
    """
    if isinstance(location, Location):
        return location
    if not isinstance(location, Mapping):
        raise ValueError("location is required")

    lat = location.get("lat", location.get("latitude"))
    lng = location.get("lng", location.get("longitude"))
    if lat is None or lng is None:
        raise ValueError("latitude and longitude are required")
    try:
        latitude, longitude = float(lat), float(lng)
    except (TypeError, ValueError) as exc:
        raise ValueError("coordinates must be numbers") from exc

    return Location(latitude, longitude, str(location.get("address") or "").strip())


class IssuePatch(BaseModel):
    """
    Partial update of an issue's mutable fields.

    Only fields the caller actually set are applied. ``assigned_to=None``
    set explicitly unassigns the issue; the identifier, timestamps and
    SLA deadline are not patchable.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    status: Optional[IssueStatus] = None
    assigned_to: Optional[str] = None
    priority: Optional[Priority] = None
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[IssueCategory] = None
    location: Optional[Location] = None
    photos: Optional[List[str]] = None

    NULLABLE_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"assigned_to"})

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        """Strip surrounding whitespace; blank text is rejected like at intake."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty")
        return v

    @field_validator("location", mode="before")
    @classmethod
    def coerce_location(cls, v: Any) -> Any:
        if v is None:
            return v
        return parse_location(v)

    def provided(self) -> Dict[str, Any]:
        """Fields set by the caller, skipping ``None`` for non-nullable fields."""
        changes = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None and name not in self.NULLABLE_FIELDS:
                continue
            if name == "assigned_to" and value is not None:
                value = value.strip() or None
            if name == "photos":
                value = tuple(value)
            changes[name] = value
        return changes


@dataclass(frozen=True)
class IntakeLimits:
    """Size limits applied to incoming reports."""
    max_photos: int = 5
    max_title_length: int = 200
    max_description_length: int = 1000


def parse_category(category: Any) -> Optional[IssueCategory]:
    """Return the matching category or ``None`` if it is not in the fixed set."""
    if isinstance(category, IssueCategory):
        return category
    try:
        return IssueCategory(str(category).strip())
    except ValueError:
        return None


def parse_priority(priority: Any) -> Optional[Priority]:
    try:
        return Priority(priority)
    except ValueError:
        return None


def validate_report(
    title: Optional[str],
    description: Optional[str],
    category: Any,
    priority: Any,
    reported_by: Optional[str],
    photos: Sequence[str],
    limits: IntakeLimits
) -> List[str]:
    """
    Validate a citizen report before an issue is built.

    Returns:
        List of error messages, empty when the report is valid
    """
    errors = []

    required = {"title": title, "description": description, "reported_by": reported_by}
    for name, value in required.items():
        if value is None or not str(value).strip():
            errors.append(f"Field '{name}' cannot be empty")

    if category is None or not str(getattr(category, "value", category)).strip():
        errors.append("Field 'category' cannot be empty")
    elif parse_category(category) is None:
        errors.append(f"Unknown category: {category}")

    if parse_priority(priority) is None:
        errors.append(f"Unknown priority: {priority}")

    if title and len(title.strip()) > limits.max_title_length:
        errors.append(f"Title cannot exceed {limits.max_title_length} characters")

    if description and len(description.strip()) > limits.max_description_length:
        errors.append(f"Description cannot exceed {limits.max_description_length} characters")

    if len(photos) > limits.max_photos:
        errors.append(f"At most {limits.max_photos} photos can be attached")

    return errors


def validate_changes(changes: Mapping[str, Any], limits: IntakeLimits) -> List[str]:
    """Apply the intake size limits to the fields an update changes."""
    errors = []

    if len(changes.get("title") or "") > limits.max_title_length:
        errors.append(f"Title cannot exceed {limits.max_title_length} characters")

    if len(changes.get("description") or "") > limits.max_description_length:
        errors.append(f"Description cannot exceed {limits.max_description_length} characters")

    if len(changes.get("photos") or ()) > limits.max_photos:
        errors.append(f"At most {limits.max_photos} photos can be attached")

    return errors


@dataclass
class IssueFilters:
    """Filters for issue lists."""
    status: Optional[IssueStatus] = None
    priority: Optional[Priority] = None
    category: Optional[IssueCategory] = None
    search_term: Optional[str] = None
    assigned_to: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


def filter_issues(issues: Iterable[Issue], filters: IssueFilters) -> List[Issue]:
    """
    Filter issues based on criteria.

    The search term matches title, description and address, ignoring case.
    """
    filtered = list(issues)

    if filters.status is not None:
        filtered = [i for i in filtered if i.status == filters.status]

    if filters.priority is not None:
        filtered = [i for i in filtered if i.priority == filters.priority]

    if filters.category is not None:
        filtered = [i for i in filtered if i.category == filters.category]

    if filters.assigned_to:
        filtered = [i for i in filtered if i.assigned_to == filters.assigned_to]

    if filters.date_from:
        filtered = [i for i in filtered if i.created_at >= filters.date_from]

    if filters.date_to:
        filtered = [i for i in filtered if i.created_at <= filters.date_to]

    if filters.search_term and filters.search_term.strip():
        term = filters.search_term.strip().lower()
        filtered = [
            i for i in filtered
            if term in i.title.lower()
            or term in i.description.lower()
            or term in i.location.address.lower()
        ]

    return filtered


def available_categories(issues: Iterable[Issue]) -> List[IssueCategory]:
    """Distinct categories present, in first-seen order."""
    return list(dict.fromkeys(i.category for i in issues))


def available_statuses(issues: Iterable[Issue]) -> List[IssueStatus]:
    return list(dict.fromkeys(i.status for i in issues))


def triage_queue(issues: Iterable[Issue]) -> List[Issue]:
    """Issues waiting for staff attention, oldest first."""
    waiting = [i for i in issues if i.status in (IssueStatus.SUBMITTED, IssueStatus.REVIEWED)]
    return sorted(waiting, key=lambda i: i.created_at)
