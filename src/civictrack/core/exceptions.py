"""
Core Exceptions
================

Errors raised by the issue engine.

Every failure raised by the engine is recoverable by the caller: a host
re-prompts a form on ``ValidationException``, disables a control on
``InvalidTransitionException`` and drops a stale update on
``UnknownIssueException``. ``to_dict`` gives hosts a payload they can show
or send as-is.
"""

from typing import Any, Dict, List, Optional


class ApplicationException(Exception):
    """Root of the engine's error hierarchy."""

    code = "application_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class DomainException(ApplicationException):
    """A business rule of the issue lifecycle was violated."""
    code = "domain_error"


class RepositoryException(ApplicationException):
    """The host-side issue store rejected an operation."""
    code = "repository_error"


class ConfigurationException(ApplicationException):
    """Settings or the SLA policy file are missing or invalid."""
    code = "configuration_error"


class ValidationException(ApplicationException):
    """
    Input failed validation.

    ``errors`` lists every problem found, not just the first, so a form can
    highlight all offending fields at once.
    """
    code = "validation_error"

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = list(errors or [])
        super().__init__(message, {"errors": self.errors})


class ResourceNotFoundException(ApplicationException):
    """A referenced record does not exist."""
    code = "not_found"

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        subject = f"{resource_type} with id '{resource_id}'" if resource_id else resource_type
        super().__init__(f"{subject} not found", details)


class InvalidTransitionException(DomainException):
    """Raised when a status update would move an issue backwards."""
    code = "invalid_transition"

    def __init__(self, issue_id: str, current: Any, target: Any):
        self.issue_id = issue_id
        self.current = current
        self.target = target
        super().__init__(
            f"Issue {issue_id} cannot move from '{_value(current)}' to '{_value(target)}'",
            {"issue_id": issue_id, "current": _value(current), "target": _value(target)}
        )


class UnknownIssueException(ResourceNotFoundException):
    """Raised when an update references an issue missing from the collection."""
    code = "unknown_issue"

    def __init__(self, issue_id: str):
        super().__init__("Issue", issue_id, {"issue_id": issue_id})


class ConcurrentUpdateException(RepositoryException):
    """Raised when a compare-and-swap replacement finds a newer record."""
    code = "concurrent_update"

    def __init__(self, issue_id: str, expected: Any, actual: Any):
        self.issue_id = issue_id
        super().__init__(
            f"Issue {issue_id} was modified concurrently",
            {"issue_id": issue_id, "expected_updated_at": str(expected),
             "actual_updated_at": str(actual)}
        )


def _value(status: Any) -> str:
    return getattr(status, "value", str(status))
