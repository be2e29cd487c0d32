"""
Issue Infrastructure Repositories
=================================

In-memory implementation of the issue repository interface.

This is the host side of the engine boundary: the engine returns new
``Issue`` values and the repository swaps them in by ID. Replacements use
compare-and-swap on ``updated_at`` so that two writers racing on the same
issue cannot silently overwrite each other.
"""

import threading
from datetime import datetime
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from civictrack.core import ConcurrentUpdateException, RepositoryException, UnknownIssueException
from civictrack.issues.application.services import IIssueRepository
from civictrack.issues.domain import Issue, IssueFilters, filter_issues
from civictrack.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class InMemoryIssueRepository(IIssueRepository):
    """
    Lock-protected mapping from issue ID to issue.

    Issues are never deleted; ``closed`` issues stay for audit and
    statistics.
    """

    def __init__(self, issues: Iterable[Issue] = ()):
        self._issues: Dict[str, Issue] = {}
        self._lock = threading.Lock()
        for issue in issues:
            self.add(issue)

    def add(self, issue: Issue) -> Issue:
        """Store a new issue; IDs must be unique."""
        with self._lock:
            if issue.id in self._issues:
                raise RepositoryException(
                    f"Issue {issue.id} already exists", {"issue_id": issue.id}
                )
            self._issues[issue.id] = issue
        return issue

    def get_by_id(self, issue_id: str) -> Optional[Issue]:
        """Get issue by ID."""
        with self._lock:
            return self._issues.get(issue_id)

    def replace(self, issue: Issue, expected_updated_at: Optional[datetime] = None) -> Issue:
        """
        Replace an existing issue.

        Args:
            issue: Updated issue
            expected_updated_at: ``updated_at`` of the version the update was
                computed from; when given, the write is rejected if the
                stored version differs

        Raises:
            UnknownIssueException: If no issue with that ID is stored
            ConcurrentUpdateException: If the stored version changed meanwhile
        """
        with self._lock:
            current = self._issues.get(issue.id)
            if current is None:
                raise UnknownIssueException(issue.id)

            if expected_updated_at is not None and current.updated_at != expected_updated_at:
                logger.warning(
                    "Stale issue write rejected",
                    extra={"issue_id": issue.id},
                )
                raise ConcurrentUpdateException(issue.id, expected_updated_at, current.updated_at)

            self._issues[issue.id] = issue
        return issue

    def list(self, filters: Optional[IssueFilters] = None) -> List[Issue]:
        """List issues, newest first, optionally filtered."""
        with self._lock:
            issues = list(self._issues.values())

        issues.sort(key=lambda issue: issue.created_at, reverse=True)
        if filters is None:
            return issues
        return filter_issues(issues, filters)

    def snapshot(self) -> Mapping[str, Issue]:
        """Read-only copy of the collection at this instant."""
        with self._lock:
            return MappingProxyType(dict(self._issues))

    def __len__(self) -> int:
        with self._lock:
            return len(self._issues)

    def __contains__(self, issue_id: object) -> bool:
        with self._lock:
            return issue_id in self._issues
