"""
SLA Value Objects
==================

Immutable value objects for the SLA domain.

Value objects are defined by their attributes rather than an identity.
They are immutable and can be freely shared.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from civictrack.config import (
    CLOSED_STATUSES, IssueStatus, Priority, SLABucket, VALID_PRIORITIES
)
from civictrack.shared.formatting import HOUR_SECONDS, format_duration

DEFAULT_ALLOWANCE_HOURS: Dict[Priority, float] = {
    Priority.URGENT: 4,
    Priority.HIGH: 24,
    Priority.MEDIUM: 72,
    Priority.LOW: 72,
}
DEFAULT_WARNING_THRESHOLD_HOURS = 8


class SLACalculator:
    """
    Pure functions for SLA calculations.

    Stateless utility class - all SLA arithmetic lives here.
    """

    @staticmethod
    def deadline_for(created_at: datetime, allowance: timedelta) -> datetime:
        """Deadline for an issue created at ``created_at``."""
        return created_at + allowance

    @staticmethod
    def hours_left(deadline: datetime, current_time: datetime) -> int:
        """
        Whole hours until the deadline, rounded up.

        Rounding up means 30 minutes left is reported as 1 hour, and 30
        minutes past the deadline as 0 hours.
        """
        return math.ceil((deadline - current_time).total_seconds() / HOUR_SECONDS)

    @staticmethod
    def classify(
        status: IssueStatus,
        updated_at: datetime,
        deadline: datetime,
        current_time: datetime,
        warning_threshold_hours: int = DEFAULT_WARNING_THRESHOLD_HOURS
    ) -> Tuple[SLABucket, int]:
        """
        Classify an issue into an SLA bucket.

        Args:
            status: Current issue status
            updated_at: Last update of the issue (resolution time once closed)
            deadline: The SLA deadline
            current_time: Time of evaluation
            warning_threshold_hours: Hours left at or below which an open
                issue is at risk

        Returns:
            Tuple of (bucket, remaining whole hours)
        """
        if status in CLOSED_STATUSES:
            if updated_at <= deadline:
                return SLABucket.MET, 0
            return SLABucket.OVERDUE_BUT_CLOSED, 0

        hours_left = SLACalculator.hours_left(deadline, current_time)

        if hours_left <= 0:
            return SLABucket.OVERDUE, 0
        elif hours_left <= warning_threshold_hours:
            return SLABucket.AT_RISK, hours_left
        else:
            return SLABucket.ON_TRACK, hours_left

    @staticmethod
    def countdown_text(deadline: datetime, current_time: datetime) -> str:
        """Live countdown shown next to open issues, e.g. ``"4h 30m"``."""
        remaining = deadline - current_time
        if remaining <= timedelta(0):
            return "Overdue"
        return format_duration(remaining)


class SLAPolicy(BaseModel):
    """
    Response-time allowances per priority.

    Loaded from YAML or built from defaults. Every priority must have an
    allowance: extending ``Priority`` without extending the policy fails
    validation instead of falling back to a default.
    """
    model_config = ConfigDict(frozen=True)

    allowance_hours: Dict[Priority, float] = Field(
        default_factory=lambda: dict(DEFAULT_ALLOWANCE_HOURS),
        description="Response-time allowance in hours by priority"
    )
    warning_threshold_hours: int = Field(
        default=DEFAULT_WARNING_THRESHOLD_HOURS,
        ge=1,
        description="Hours left at or below which an open issue is at risk"
    )

    @field_validator("allowance_hours")
    @classmethod
    def validate_allowance_hours(cls, v: Dict[Priority, float]) -> Dict[Priority, float]:
        """Validate that every priority has a positive allowance."""
        missing = [p.value for p in VALID_PRIORITIES if p not in v]
        if missing:
            raise ValueError(f"missing SLA allowance for priorities: {missing}")

        for priority, hours in v.items():
            if hours <= 0:
                raise ValueError(f"SLA allowance for '{priority.value}' must be positive")

        return v

    def allowance_for(self, priority: Priority) -> timedelta:
        return timedelta(hours=self.allowance_hours[Priority(priority)])

    def deadline_for(self, priority: Priority, created_at: datetime) -> datetime:
        """
        Calculate the SLA deadline for a new issue.

        Example:
            Priority "urgent" created at 10:00 -> deadline 14:00 the same day
        """
        return SLACalculator.deadline_for(created_at, self.allowance_for(priority))


@dataclass(frozen=True)
class SLAEvaluation:
    """
    SLA classification of one issue at one instant.

    Derived on every read and never stored: "now" is not a property of the
    issue.
    """
    issue_id: str
    bucket: SLABucket
    remaining_hours: int
    deadline: datetime
    evaluated_at: datetime

    @property
    def is_breached(self) -> bool:
        return self.bucket in (SLABucket.OVERDUE, SLABucket.OVERDUE_BUT_CLOSED)

    @property
    def is_open(self) -> bool:
        return self.bucket in (SLABucket.ON_TRACK, SLABucket.AT_RISK, SLABucket.OVERDUE)

    @property
    def badge_text(self) -> str:
        """Short label for list views."""
        if self.bucket == SLABucket.MET:
            return "Met"
        if self.bucket == SLABucket.OVERDUE_BUT_CLOSED:
            return "Resolved late"
        if self.bucket == SLABucket.OVERDUE:
            return "Overdue"
        return f"{self.remaining_hours}h left"

    def to_dict(self) -> dict:
        """Convert to dictionary for host responses."""
        return {
            "issue_id": self.issue_id,
            "bucket": self.bucket.value,
            "remaining_hours": self.remaining_hours,
            "deadline": self.deadline.isoformat(),
            "evaluated_at": self.evaluated_at.isoformat(),
            "is_breached": self.is_breached,
            "badge": self.badge_text,
        }
