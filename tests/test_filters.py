"""
Unit tests for list filters, facets and the triage queue.
"""

from datetime import timedelta

from civictrack.config import IssueCategory, IssueStatus, Priority
from civictrack.issues.domain import (
    IssueFilters, available_categories, available_statuses, filter_issues, triage_queue
)


def test_no_filters_returns_everything(samples):
    assert filter_issues(samples, IssueFilters()) == samples


def test_filter_by_status_priority_category(samples):
    assert [i.id for i in filter_issues(samples, IssueFilters(status=IssueStatus.RESOLVED))] == ["2"]
    assert [i.id for i in filter_issues(samples, IssueFilters(priority=Priority.HIGH))] == ["1"]
    assert filter_issues(
        samples,
        IssueFilters(category=IssueCategory.PUBLIC_SAFETY, priority=Priority.HIGH),
    ) == []


def test_search_matches_title_description_and_address(samples):
    assert [i.id for i in filter_issues(samples, IssueFilters(search_term="POTHOLE"))] == ["1"]
    assert [i.id for i in filter_issues(samples, IssueFilters(search_term="safety hazard"))] == ["2"]
    assert [i.id for i in filter_issues(samples, IssueFilters(search_term="oak avenue"))] == ["2"]
    assert len(filter_issues(samples, IssueFilters(search_term="   "))) == 2


def test_filter_by_assignee_and_dates(samples):
    pothole = samples[0]

    assert [i.id for i in filter_issues(
        samples, IssueFilters(assigned_to="Electrical Team")
    )] == ["2"]
    assert [i.id for i in filter_issues(
        samples, IssueFilters(date_from=pothole.created_at - timedelta(hours=1))
    )] == ["1"]
    assert [i.id for i in filter_issues(
        samples, IssueFilters(date_to=pothole.created_at - timedelta(hours=1))
    )] == ["2"]


def test_facets(samples):
    assert available_categories(samples) == [
        IssueCategory.ROADS_INFRASTRUCTURE, IssueCategory.PUBLIC_SAFETY
    ]
    assert available_statuses(samples) == [IssueStatus.IN_PROGRESS, IssueStatus.RESOLVED]


def test_triage_queue_oldest_first(samples):
    pothole = samples[0]
    newer = pothole.with_changes(id="3", status=IssueStatus.SUBMITTED)
    older = pothole.with_changes(
        id="4", status=IssueStatus.REVIEWED, created_at=pothole.created_at - timedelta(days=1)
    )

    assert [i.id for i in triage_queue([*samples, newer, older])] == ["4", "3"]
