"""
Unit tests for issue entities and lifecycle rules.
"""

from datetime import timedelta

import pytest

from civictrack.config import IssueStatus, TimelineEventKind
from civictrack.issues.domain import LifecycleRules, Location, TimelineEvent, new_events


class TestIssueInvariants:
    """Test checks run on every issue construction."""

    def test_updated_before_created_rejected(self, samples):
        pothole = samples[0]
        with pytest.raises(ValueError):
            pothole.with_changes(updated_at=pothole.created_at - timedelta(seconds=1))

    def test_empty_timeline_rejected(self, samples):
        with pytest.raises(ValueError):
            samples[0].with_changes(timeline=())

    def test_out_of_order_timeline_rejected(self, samples):
        pothole = samples[0]
        with pytest.raises(ValueError):
            pothole.with_changes(timeline=tuple(reversed(pothole.timeline)))

    def test_derived_properties(self, samples):
        pothole, streetlight = samples

        assert pothole.is_open and not pothole.is_resolved
        assert streetlight.is_resolved
        assert pothole.resolved_at is None
        assert streetlight.resolved_at == streetlight.updated_at
        assert streetlight.resolution_time == timedelta(hours=30, minutes=30)
        assert pothole.time_deltas() == [None, "1h 15m later", "3h 15m later"]

    def test_new_events_requires_same_issue(self, samples):
        with pytest.raises(ValueError):
            new_events(samples[0], samples[1])


class TestTimelineEvent:
    """Test status and annotation events."""

    def test_needs_exactly_one_of_status_or_annotation(self, clock):
        with pytest.raises(ValueError):
            TimelineEvent(timestamp=clock.now(), updated_by="Clerk")
        with pytest.raises(ValueError):
            TimelineEvent(timestamp=clock.now(), updated_by="Clerk",
                          status=IssueStatus.REVIEWED, annotation="assigned")

    def test_actor_required(self, clock):
        with pytest.raises(ValueError):
            TimelineEvent.status_change(clock.now(), IssueStatus.REVIEWED, "")

    def test_from_label(self, clock):
        status_event = TimelineEvent.from_label(clock.now(), "in-progress", "Clerk")
        annotation = TimelineEvent.from_label(clock.now(), "assigned", "Clerk")

        assert status_event.kind == TimelineEventKind.STATUS
        assert status_event.status == IssueStatus.IN_PROGRESS
        assert annotation.kind == TimelineEventKind.ANNOTATION
        assert annotation.label == "assigned"


class TestLifecycleRules:
    """Test the no-regression transition rule."""

    def test_allowed_targets(self):
        assert LifecycleRules.allowed_targets(IssueStatus.REVIEWED) == [
            IssueStatus.IN_PROGRESS, IssueStatus.RESOLVED, IssueStatus.CLOSED
        ]
        assert LifecycleRules.allowed_targets(IssueStatus.CLOSED) == []

    def test_regression_detection(self):
        assert LifecycleRules.is_regression(IssueStatus.RESOLVED, IssueStatus.SUBMITTED)
        assert not LifecycleRules.is_regression(IssueStatus.SUBMITTED, IssueStatus.RESOLVED)
        assert not LifecycleRules.can_transition(IssueStatus.REVIEWED, IssueStatus.REVIEWED)


def test_location_range():
    with pytest.raises(ValueError):
        Location(91.0, 0.0)
    with pytest.raises(ValueError):
        Location(0.0, -181.0)
