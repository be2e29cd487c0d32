"""
Issue Application Services
==========================

The lifecycle state machine: intake of new reports and updates of existing
issues.

The service is transition-pure. It reads the injected clock and returns new
``Issue`` values; storing them is the caller's job. Callers that share a
collection between threads serialize around it (see
``InMemoryIssueRepository.replace``).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Union
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from civictrack.config import Annotation, IssueStatus, Priority
from civictrack.core import (
    InvalidTransitionException, UnknownIssueException, ValidationException
)
from civictrack.issues.domain import (
    INTAKE_NOTE, IntakeLimits, Issue, IssueFilters, IssuePatch, LifecycleRules,
    Location, TimelineEvent, default_status_note, parse_category, parse_location,
    validate_changes, validate_report
)
from civictrack.shared.infrastructure.clock import IClock
from civictrack.shared.infrastructure.logging import get_logger
from civictrack.sla.domain import SLAPolicy

logger = get_logger(__name__)


# ========== Repository Interface (Dependency Inversion) ==========

class IIssueRepository(ABC):
    """Interface for the host-owned issue collection."""

    @abstractmethod
    def add(self, issue: Issue) -> Issue:
        """Store a newly created issue."""

    @abstractmethod
    def get_by_id(self, issue_id: str) -> Optional[Issue]:
        """Get issue by ID."""

    @abstractmethod
    def replace(self, issue: Issue, expected_updated_at=None) -> Issue:
        """Replace an existing issue by ID."""

    @abstractmethod
    def list(self, filters: Optional[IssueFilters] = None) -> List[Issue]:
        """List issues with filters."""

    @abstractmethod
    def snapshot(self) -> Mapping[str, Issue]:
        """Read-only view of the collection keyed by issue ID."""


# ========== Results ==========

@dataclass(frozen=True)
class UpdateOutcome:
    """Updated issue plus the timeline events the update appended."""
    issue: Issue
    events: Tuple[TimelineEvent, ...] = ()

    @property
    def status_event(self) -> Optional[TimelineEvent]:
        for event in self.events:
            if event.status is not None:
                return event
        return None

    @property
    def status_changed(self) -> bool:
        return self.status_event is not None


LocationInput = Union[Location, Mapping[str, Any]]
PatchInput = Union[IssuePatch, Mapping[str, Any]]


# ========== Application Services ==========

class IssueLifecycleService:
    """
    Service for creating and updating issues.

    Coordinates intake validation, the SLA policy and the lifecycle rules.
    Holds no state besides its collaborators.
    """

    def __init__(
        self,
        clock: IClock,
        policy: Optional[SLAPolicy] = None,
        limits: Optional[IntakeLimits] = None,
        annotate_field_changes: bool = True,
        id_factory: Optional[Callable[[], str]] = None
    ):
        self._clock = clock
        self._policy = policy or SLAPolicy()
        self._limits = limits or IntakeLimits()
        self._annotate = annotate_field_changes
        self._id_factory = id_factory or (lambda: str(uuid4()))

    @property
    def policy(self) -> SLAPolicy:
        return self._policy

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
        """
        Create a new issue from a citizen report.

        Args:
            title: Short summary
            description: Free-text details
            category: ``IssueCategory`` or its display value
            priority: ``Priority`` or its value
            location: ``Location`` or a mapping with lat/lng/address
            photos: Photo references, at most ``IntakeLimits.max_photos``
            reported_by: Reporter identity, recorded as the first actor

        Returns:
            Issue in ``submitted`` status with its SLA deadline stamped

        Raises:
            ValidationException: If any required field is empty or invalid
        """
        photos = tuple(photos)
        errors = validate_report(
            title, description, category, priority, reported_by, photos, self._limits
        )

        parsed_location = None
        try:
            parsed_location = parse_location(location)
        except ValueError as exc:
            errors.append(f"Invalid location: {exc}")

        if errors:
            logger.info("Issue report rejected", extra={"errors": errors})
            raise ValidationException("Invalid issue report", errors)

        now = self._clock.now()
        priority = Priority(priority)
        reporter = reported_by.strip()

        issue = Issue(
            id=self._id_factory(),
            title=title.strip(),
            description=description.strip(),
            category=parse_category(category),
            priority=priority,
            status=IssueStatus.SUBMITTED,
            location=parsed_location,
            reported_by=reporter,
            created_at=now,
            updated_at=now,
            sla_deadline=self._policy.deadline_for(priority, now),
            timeline=(
                TimelineEvent.status_change(now, IssueStatus.SUBMITTED, reporter, INTAKE_NOTE),
            ),
            photos=photos,
        )

        logger.info(
            "Issue submitted",
            extra={
                "issue_id": issue.id,
                "category": issue.category.value,
                "priority": issue.priority.value,
                "sla_deadline": issue.sla_deadline.isoformat(),
            },
        )
        return issue

    def apply_update(
        self,
        issues: Mapping[str, Issue],
        issue_id: str,
        patch: PatchInput,
        actor: str,
        note: Optional[str] = None
    ) -> Issue:
        """
        Apply a partial update to an issue from the caller's collection.

        Args:
            issues: Caller's view of the collection, keyed by issue ID
            issue_id: Issue to update
            patch: ``IssuePatch`` or a mapping of its fields
            actor: Who made the change; recorded in the timeline
            note: Optional note for the appended event; without a status
                change or field annotation it is kept as an "updated" annotation

        Returns:
            The updated issue; the unchanged issue if the patch changes nothing

        Raises:
            UnknownIssueException: If ``issue_id`` is not in ``issues``
            InvalidTransitionException: If the status would move backwards
            ValidationException: If the patch or actor is invalid
        """
        return self.apply_update_with_events(issues, issue_id, patch, actor, note).issue

    def apply_update_with_events(
        self,
        issues: Mapping[str, Issue],
        issue_id: str,
        patch: PatchInput,
        actor: str,
        note: Optional[str] = None
    ) -> UpdateOutcome:
        """Same as ``apply_update`` but also returns the appended events."""
        if not actor or not actor.strip():
            raise ValidationException("Invalid issue update", ["Field 'actor' cannot be empty"])
        actor = actor.strip()
        patch = _coerce_patch(patch)

        issue = issues.get(issue_id)
        if issue is None:
            logger.warning("Update for unknown issue", extra={"issue_id": issue_id})
            raise UnknownIssueException(issue_id)

        changes = patch.provided()
        errors = validate_changes(changes, self._limits)
        if errors:
            logger.info("Issue update rejected", extra={"issue_id": issue_id, "errors": errors})
            raise ValidationException("Invalid issue update", errors)

        target = changes.pop("status", None)
        status_changed = target is not None and target != issue.status

        if status_changed:
            try:
                LifecycleRules.validate_transition(issue.id, issue.status, target)
            except InvalidTransitionException:
                logger.warning(
                    "Status regression rejected",
                    extra={"issue_id": issue.id, "current": issue.status.value,
                           "target": target.value, "actor": actor},
                )
                raise

        field_changes = {
            name: value for name, value in changes.items()
            if getattr(issue, name) != value
        }
        if not status_changed and not field_changes:
            return UpdateOutcome(issue)

        timestamp = self._next_timestamp(issue)
        events: List[TimelineEvent] = []

        if status_changed:
            events.append(TimelineEvent.status_change(
                timestamp, target, actor, note or default_status_note(target)
            ))

        if self._annotate:
            events.extend(self._annotations(issue, field_changes, timestamp, actor))

        if note and not status_changed:
            if events:
                events[0] = TimelineEvent.annotate(timestamp, events[0].annotation, actor, note)
            else:
                events.append(TimelineEvent.annotate(
                    timestamp, Annotation.UPDATED.value, actor, note
                ))

        updated = issue.append_events(
            events,
            updated_at=timestamp,
            status=target if status_changed else issue.status,
            **field_changes,
        )

        logger.info(
            "Issue updated",
            extra={
                "issue_id": issue.id,
                "actor": actor,
                "status": updated.status.value,
                "status_changed": status_changed,
                "fields": sorted(field_changes),
            },
        )
        return UpdateOutcome(updated, tuple(events))

    def _annotations(
        self,
        issue: Issue,
        field_changes: Mapping[str, Any],
        timestamp,
        actor: str
    ) -> List[TimelineEvent]:
        """Annotation events for assignment and priority changes."""
        events = []

        if "assigned_to" in field_changes:
            assignee = field_changes["assigned_to"]
            if assignee:
                events.append(TimelineEvent.annotate(
                    timestamp, Annotation.ASSIGNED.value, actor, f"Assigned to {assignee}"
                ))
            else:
                events.append(TimelineEvent.annotate(
                    timestamp, Annotation.UNASSIGNED.value, actor,
                    f"Unassigned from {issue.assigned_to}"
                ))

        if "priority" in field_changes:
            # Deadline stays as stamped at intake.
            events.append(TimelineEvent.annotate(
                timestamp, Annotation.REPRIORITIZED.value, actor,
                f"Priority changed from {issue.priority.value} to {field_changes['priority'].value}"
            ))

        return events

    def _next_timestamp(self, issue: Issue):
        """Current time, never earlier than the issue's last recorded change."""
        now = self._clock.now()
        floor = max(issue.updated_at, issue.latest_event.timestamp)
        if now < floor:
            logger.warning(
                "Clock is behind the last recorded change; using last change time",
                extra={"issue_id": issue.id, "now": now.isoformat(), "floor": floor.isoformat()},
            )
            return floor
        return now



def _coerce_patch(patch: PatchInput) -> IssuePatch:
    if isinstance(patch, IssuePatch):
        return patch
    try:
        return IssuePatch.model_validate(dict(patch))
    except PydanticValidationError as exc:
        errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
        raise ValidationException("Invalid issue update", errors) from exc
