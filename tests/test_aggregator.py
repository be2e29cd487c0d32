"""
Unit tests for fleet-wide statistics.
"""

from datetime import datetime, timedelta, timezone

import pytest

from civictrack.config import IssueCategory, IssueStatus
from civictrack.sla.application import IssueStatsAggregator, IssueStatsResponse


def test_empty_collection(aggregator, clock):
    stats = aggregator.aggregate([], clock.now())

    assert stats.total == 0
    assert stats.resolution_rate == 0
    assert stats.on_time_rate == 0
    assert stats.avg_resolution_hours == 0
    assert stats.recent_count == 0
    assert stats.category_counts == []
    assert all(n == 0 for n in stats.status_counts.values())
    assert stats.category_share(IssueCategory.OTHER) == 0.0


def test_sample_statistics(aggregator, samples):
    now = samples[0].created_at + timedelta(days=1)

    stats = aggregator.aggregate(samples, now)

    assert stats.total == 2
    assert stats.status_counts[IssueStatus.IN_PROGRESS] == 1
    assert stats.status_counts[IssueStatus.RESOLVED] == 1
    assert stats.status_counts[IssueStatus.CLOSED] == 0
    assert stats.resolved_count == 1
    assert stats.resolution_rate == 0.5
    assert stats.on_time_rate == 1.0
    assert stats.avg_resolution_hours == pytest.approx(30.5)
    assert stats.status_share(IssueStatus.RESOLVED) == 0.5


def test_closed_issues_do_not_count_as_resolved(aggregator, samples):
    closed = samples[1].with_changes(status=IssueStatus.CLOSED)

    stats = aggregator.aggregate([samples[0], closed], closed.updated_at)

    assert stats.resolved_count == 0
    assert stats.resolution_rate == 0
    assert stats.on_time_rate == 0


def test_late_resolution_lowers_on_time_rate(aggregator, samples):
    late = samples[1].with_changes(
        id="3", sla_deadline=samples[1].updated_at - timedelta(minutes=1)
    )

    stats = aggregator.aggregate([samples[1], late], late.updated_at)

    assert stats.resolved_count == 2
    assert stats.on_time_count == 1
    assert stats.on_time_rate == 0.5


def test_categories_sorted_by_count(aggregator, samples):
    pothole, streetlight = samples
    issues = [
        pothole,
        streetlight,
        pothole.with_changes(id="3"),
        streetlight.with_changes(id="4", category=IssueCategory.WATER_UTILITIES),
    ]

    stats = aggregator.aggregate(issues, pothole.created_at)

    assert stats.category_counts == [
        (IssueCategory.ROADS_INFRASTRUCTURE, 2),
        (IssueCategory.PUBLIC_SAFETY, 1),
        (IssueCategory.WATER_UTILITIES, 1),
    ]


def test_recent_activity_window_and_preview(samples):
    pothole = samples[0]
    issues = [
        pothole.with_changes(id=str(n), created_at=pothole.created_at - timedelta(days=n),
                             updated_at=pothole.updated_at)
        for n in range(8)
    ]
    aggregator = IssueStatsAggregator(preview_limit=3)

    stats = aggregator.aggregate(issues, pothole.created_at)

    assert stats.recent_count == 8
    assert [i.id for i in stats.recent_preview] == ["0", "1", "2"]

    narrow = aggregator.aggregate(issues, pothole.created_at, window=timedelta(days=2))
    assert narrow.recent_count == 3
    assert narrow.recent.window == timedelta(days=2)


def test_zero_window_counts_nothing(aggregator, samples):
    now = samples[0].created_at + timedelta(hours=1)

    stats = aggregator.aggregate(samples, now, window=timedelta(0))

    assert stats.recent_count == 0
    assert stats.recent.window == timedelta(0)
    assert aggregator.recent_activity(samples, now, window=timedelta(0)).count == 0


def test_naive_now_read_as_utc(aggregator, samples):
    stats = aggregator.aggregate(samples, datetime(2025, 1, 21, 10, 0))

    assert stats.generated_at == datetime(2025, 1, 21, 10, 0, tzinfo=timezone.utc)
    assert stats.recent_count == 2


def test_stats_response(aggregator, samples):
    now = samples[0].created_at + timedelta(days=1)

    response = IssueStatsResponse.from_domain(aggregator.aggregate(samples, now))

    assert response.resolution_rate_display == "50%"
    assert response.on_time_rate_display == "100%"
    assert response.avg_resolution_hours == 31
    assert response.status_counts["in-progress"] == 1
    assert [c.share for c in response.categories] == ["50%", "50%"]
    assert [r.id for r in response.recent_issues] == ["1", "2"]
