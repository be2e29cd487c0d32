"""
Issue Infrastructure Layer
==========================

Host-side storage for issues and the demonstration dataset.
"""

from civictrack.issues.infrastructure.repositories import InMemoryIssueRepository
from civictrack.issues.infrastructure.sample_data import sample_issues

__all__ = ["InMemoryIssueRepository", "sample_issues"]
