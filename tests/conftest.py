"""
Shared fixtures: a pinned clock, deterministic issue IDs and the sample dataset.
"""

from datetime import datetime, timezone
from itertools import count

import pytest

from civictrack.config import IssueCategory, Priority
from civictrack.issues.application import IssueLifecycleService
from civictrack.issues.domain import Location
from civictrack.issues.infrastructure import InMemoryIssueRepository, sample_issues
from civictrack.shared.infrastructure.clock import FixedClock
from civictrack.sla.application import IssueStatsAggregator, SLAEvaluationService

T0 = datetime(2025, 1, 20, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FixedClock(T0)


@pytest.fixture
def lifecycle(clock):
    ids = count(100)
    return IssueLifecycleService(clock=clock, id_factory=lambda: f"issue-{next(ids)}")


@pytest.fixture
def evaluator(clock):
    return SLAEvaluationService(clock=clock)


@pytest.fixture
def aggregator():
    return IssueStatsAggregator()


@pytest.fixture
def location():
    return Location(40.7128, -74.0060, "123 Main St, New York, NY 10001")


@pytest.fixture
def report(location):
    """Keyword arguments for a valid intake call."""
    return {
        "title": "Overflowing bin",
        "description": "Trash bin at the park entrance has not been emptied",
        "category": IssueCategory.WASTE_MANAGEMENT,
        "priority": Priority.MEDIUM,
        "location": location,
        "photos": [],
        "reported_by": "Jane Resident",
    }


@pytest.fixture
def samples():
    return sample_issues()


@pytest.fixture
def repository(samples):
    return InMemoryIssueRepository(samples)
