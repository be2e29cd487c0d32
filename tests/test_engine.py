"""
Integration tests for the engine facade and its settings wiring.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from civictrack.config import Priority, SLABucket, Settings
from civictrack.core import ConfigurationException, ValidationException
from civictrack.engine import IssueEngine, build_engine
from civictrack.issues.application import IssueReportRequest
from civictrack.issues.domain import IssueFilters
from civictrack.issues.infrastructure import InMemoryIssueRepository
from civictrack.shared.infrastructure.clock import FixedClock

T0 = datetime(2025, 1, 20, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine(clock):
    return build_engine(Settings(environment="test"), clock=clock)


class TestBuildEngine:
    """Test engine construction from settings."""

    def test_default_wiring(self, engine):
        assert isinstance(engine, IssueEngine)
        assert engine.lifecycle.policy.allowance_for(Priority.HIGH) == timedelta(hours=24)

    def test_policy_file_from_settings(self, tmp_path):
        path = tmp_path / "sla.yaml"
        path.write_text(
            "allowance_hours: {urgent: 1, high: 2, medium: 3, low: 4}\n", encoding="utf-8"
        )
        engine = build_engine(
            Settings(environment="test", sla_policy_path=path), clock=FixedClock(T0)
        )

        issue = engine.intake(
            "Leak", "Water main leaking", "Water & Utilities", "low",
            {"lat": 1.0, "lng": 2.0}, reported_by="Ana",
        )

        assert issue.sla_deadline == T0 + timedelta(hours=4)

    def test_missing_policy_file(self, tmp_path):
        with pytest.raises(ConfigurationException):
            build_engine(Settings(environment="test", sla_policy_path=tmp_path / "missing.yaml"))

    def test_settings_from_environment(self, monkeypatch):
        monkeypatch.setenv("CIVICTRACK_MAX_PHOTOS", "1")
        monkeypatch.setenv("CIVICTRACK_LOG_LEVEL", "debug")

        settings = Settings()

        assert settings.max_photos == 1
        assert settings.log_level == "DEBUG"

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(environment="moon")

    def test_settings_limits_applied(self, clock):
        engine = build_engine(Settings(environment="test", max_photos=0), clock=clock)

        with pytest.raises(ValidationException) as exc_info:
            engine.intake(
                "Leak", "Water main leaking", "Water & Utilities", "low",
                {"lat": 1.0, "lng": 2.0}, photos=["a.jpg"], reported_by="Ana",
            )

        assert exc_info.value.errors == ["At most 0 photos can be attached"]


class TestEngineFlow:
    """Test a report moving through the engine with a host repository."""

    def test_report_to_resolution(self, engine, clock, samples):
        repository = InMemoryIssueRepository(samples)

        issue = engine.submit_report(IssueReportRequest.model_validate({
            "title": "Fallen tree",
            "description": "Tree blocking the bike path",
            "category": "Parks & Recreation",
            "priority": "urgent",
            "location": {"lat": 40.75, "lng": -73.98},
            "reportedBy": "Lee",
        }))
        repository.add(issue)

        assert engine.evaluate_sla(issue).bucket == SLABucket.AT_RISK
        assert [i.id for i in engine.triage_queue(repository.list())] == [issue.id]

        clock.advance(timedelta(hours=2))
        snapshot = repository.snapshot()
        outcome = engine.apply_update_with_events(
            snapshot, issue.id, {"status": "resolved", "assigned_to": "Parks Crew"}, "Dispatcher"
        )
        repository.replace(outcome.issue, expected_updated_at=snapshot[issue.id].updated_at)

        assert outcome.status_changed
        assert engine.evaluate_sla(repository.get_by_id(issue.id)).bucket == SLABucket.MET

        stats = engine.aggregate(repository.list())
        assert stats.total == 3
        assert stats.resolved_count == 2
        assert stats.on_time_rate == 1.0

        summary = engine.dashboard_summary(repository.list())
        assert summary.resolved == 2
        assert summary.overdue == 0

        found = engine.filter(repository.list(), IssueFilters(search_term="bike path"))
        assert [i.id for i in found] == [issue.id]
