"""
Unit tests for the in-memory issue repository.
"""

from datetime import timedelta

import pytest

from civictrack.config import IssueStatus
from civictrack.core import ConcurrentUpdateException, RepositoryException, UnknownIssueException
from civictrack.issues.domain import IssueFilters


class TestInMemoryIssueRepository:
    """Test storage and compare-and-swap replacement."""

    def test_seeded(self, repository):
        assert len(repository) == 2
        assert "1" in repository
        assert repository.get_by_id("2").title == "Broken Streetlight"
        assert repository.get_by_id("missing") is None

    def test_duplicate_id_rejected(self, repository, samples):
        with pytest.raises(RepositoryException):
            repository.add(samples[0])

    def test_list_newest_first(self, repository):
        assert [i.id for i in repository.list()] == ["1", "2"]

    def test_list_filtered(self, repository):
        resolved = repository.list(IssueFilters(status=IssueStatus.RESOLVED))
        assert [i.id for i in resolved] == ["2"]

    def test_snapshot_is_read_only_copy(self, repository, lifecycle, clock):
        snapshot = repository.snapshot()
        with pytest.raises(TypeError):
            snapshot["3"] = snapshot["1"]

        clock.set(snapshot["1"].updated_at + timedelta(hours=1))
        updated = lifecycle.apply_update(snapshot, "1", {"status": "resolved"}, "Crew")
        repository.replace(updated, expected_updated_at=snapshot["1"].updated_at)

        assert snapshot["1"].status == IssueStatus.IN_PROGRESS
        assert repository.get_by_id("1").status == IssueStatus.RESOLVED

    def test_stale_write_rejected(self, repository, lifecycle, clock):
        snapshot = repository.snapshot()
        original = snapshot["1"]

        clock.set(original.updated_at + timedelta(hours=1))
        first = lifecycle.apply_update(snapshot, "1", {"assigned_to": "Crew A"}, "Dispatcher A")
        clock.advance(timedelta(minutes=1))
        second = lifecycle.apply_update(snapshot, "1", {"assigned_to": "Crew B"}, "Dispatcher B")

        repository.replace(first, expected_updated_at=original.updated_at)
        with pytest.raises(ConcurrentUpdateException):
            repository.replace(second, expected_updated_at=original.updated_at)

        assert repository.get_by_id("1").assigned_to == "Crew A"

    def test_replace_unknown(self, repository, samples):
        with pytest.raises(UnknownIssueException):
            repository.replace(samples[0].with_changes(id="99"))
