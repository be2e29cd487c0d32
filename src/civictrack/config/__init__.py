"""
Configuration Module
====================

Application settings and domain constants using Pydantic.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    Every variable is prefixed with ``CIVICTRACK_``, e.g.
    ``CIVICTRACK_SLA_POLICY_PATH=/etc/civictrack/sla.yaml``.
    """

    # ========== Application ==========
    app_name: str = Field(default="civictrack", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== SLA ==========
    sla_policy_path: Optional[Path] = Field(
        default=None,
        description="Optional YAML file overriding the default SLA allowances"
    )
    sla_warning_threshold_hours: int = Field(
        default=8,
        description="Hours left at or below which an open issue is at risk",
        ge=1
    )

    # ========== Statistics ==========
    recent_window_days: int = Field(
        default=7,
        description="Window used for recent activity statistics",
        ge=1
    )
    recent_preview_limit: int = Field(
        default=5,
        description="Number of recent issues included in previews",
        ge=0
    )

    # ========== Intake ==========
    max_photos: int = Field(default=5, description="Photos accepted per report", ge=0)
    max_title_length: int = Field(default=200, ge=1)
    max_description_length: int = Field(default=1000, ge=1)

    # ========== Timeline ==========
    annotate_field_changes: bool = Field(
        default=True,
        description="Append annotation events for assignment and priority changes"
    )

    model_config = SettingsConfigDict(
        env_prefix="CIVICTRACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production", "test"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# ========== Constants ==========

class Priority(str, Enum):
    """Issue priority levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class IssueStatus(str, Enum):
    """Issue lifecycle statuses, in canonical order."""
    SUBMITTED = "submitted"
    REVIEWED = "reviewed"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class IssueCategory(str, Enum):
    """Municipal service categories an issue can be filed under."""
    ROADS_INFRASTRUCTURE = "Roads & Infrastructure"
    PUBLIC_SAFETY = "Public Safety"
    PARKS_RECREATION = "Parks & Recreation"
    WATER_UTILITIES = "Water & Utilities"
    WASTE_MANAGEMENT = "Waste Management"
    TRAFFIC_TRANSPORTATION = "Traffic & Transportation"
    BUILDING_ZONING = "Building & Zoning"
    OTHER = "Other"


class SLABucket(str, Enum):
    """SLA compliance buckets."""
    MET = "met"
    ON_TRACK = "on-track"
    AT_RISK = "at-risk"
    OVERDUE = "overdue"
    OVERDUE_BUT_CLOSED = "overdue-but-closed"


class TimelineEventKind(str, Enum):
    """Timeline entry kinds."""
    STATUS = "status"
    ANNOTATION = "annotation"


class Annotation(str, Enum):
    """Labels carried by annotation events."""
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"
    REPRIORITIZED = "reprioritized"
    UPDATED = "updated"


# ========== Lists for validation ==========

VALID_PRIORITIES: List[Priority] = list(Priority)
VALID_STATUSES: List[IssueStatus] = list(IssueStatus)
VALID_CATEGORIES: List[IssueCategory] = list(IssueCategory)
VALID_SLA_BUCKETS: List[SLABucket] = list(SLABucket)

STATUS_ORDER = (
    IssueStatus.SUBMITTED,
    IssueStatus.REVIEWED,
    IssueStatus.IN_PROGRESS,
    IssueStatus.RESOLVED,
    IssueStatus.CLOSED,
)
OPEN_STATUSES = frozenset({
    IssueStatus.SUBMITTED, IssueStatus.REVIEWED, IssueStatus.IN_PROGRESS
})
CLOSED_STATUSES = frozenset({IssueStatus.RESOLVED, IssueStatus.CLOSED})
