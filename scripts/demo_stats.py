#!/usr/bin/env python3
"""
Demo Statistics
===============

Seeds the sample issues, walks one new report through its lifecycle and
prints the dashboard and public statistics as JSON.
"""

import json
from datetime import timedelta

from civictrack.config import get_settings
from civictrack.engine import build_engine
from civictrack.issues.application import IssueDTO, IssueReportRequest
from civictrack.issues.infrastructure import InMemoryIssueRepository, sample_issues
from civictrack.shared.infrastructure.clock import FixedClock
from civictrack.sla.application import DashboardSummaryResponse, IssueStatsResponse, SLAStatusResponse


def main():
    """Run the demo against a clock pinned just after the sample data."""
    samples = sample_issues()
    clock = FixedClock(samples[0].updated_at + timedelta(hours=1))
    engine = build_engine(get_settings(), clock=clock, configure_logging=True)
    repository = InMemoryIssueRepository(samples)

    issue = engine.submit_report(IssueReportRequest(
        title="Water main break",
        description="Water flooding the street near the school",
        category="Water & Utilities",
        priority="urgent",
        location={"lat": 40.7306, "lng": -73.9866, "address": "789 School Rd"},
        reported_by="Maria Lopez",
    ))
    repository.add(issue)

    for hours, patch, actor in [
        (1, {"status": "reviewed"}, "City Inspector"),
        (1, {"status": "in-progress", "assigned_to": "Water Department"}, "Operations Manager"),
    ]:
        clock.advance(timedelta(hours=hours))
        snapshot = repository.snapshot()
        updated = engine.apply_update(snapshot, issue.id, patch, actor)
        repository.replace(updated, expected_updated_at=snapshot[issue.id].updated_at)

    issues = repository.list()
    print(json.dumps({
        "issue": IssueDTO.from_domain(repository.get_by_id(issue.id)).to_wire(),
        "sla": [
            SLAStatusResponse.from_domain(engine.evaluate_sla(i)).model_dump(mode="json")
            for i in issues
        ],
        "dashboard": DashboardSummaryResponse.from_domain(
            engine.dashboard_summary(issues)
        ).model_dump(mode="json"),
        "stats": IssueStatsResponse.from_domain(engine.aggregate(issues)).model_dump(mode="json"),
    }, indent=2))


if __name__ == "__main__":
    main()
