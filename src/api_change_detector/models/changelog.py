"""
Changelog data models.

Models representing the assembled changelog and its risk assessment.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from api_change_detector.models.change import BreakingChange, Change, ChangeType, Severity


class RiskLevel(str, Enum):
    """Overall risk level of a set of changes."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class SemverBump(str, Enum):
    """Minimum semantic version bump warranted by a set of changes."""

    MAJOR = "MAJOR"
    MINOR = "MINOR"
    PATCH = "PATCH"


class RiskAssessment(BaseModel):
    """Aggregate risk derived from a list of changes."""

    overall_score: int = Field(ge=0, le=100, description="Overall risk score (0-100)")
    level: RiskLevel = Field(description="Risk level bucket")
    breaking_changes_count: int = Field(default=0, description="Number of BREAKING changes")
    total_changes_count: int = Field(default=0, description="Total number of changes")
    changes_by_severity: dict[Severity, int] = Field(
        default_factory=dict,
        description="Number of changes per severity",
    )
    recommendation: str = Field(default="", description="Human readable recommendation")
    semver_recommendation: SemverBump = Field(description="Recommended version bump")

    class Config:
        frozen = True

    def count(self, severity: Severity) -> int:
        """Number of changes with the given severity."""
        return self.changes_by_severity.get(severity, 0)


class Changelog(BaseModel):
    """The result of comparing two versions of an API."""

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier of this changelog",
    )
    api_name: str = Field(description="Name of the compared API")
    from_version: Optional[str] = Field(default=None, description="Old version")
    to_version: Optional[str] = Field(default=None, description="New version")
    changes: list[Change] = Field(default_factory=list, description="All detected changes")
    breaking_changes: list[BreakingChange] = Field(
        default_factory=list,
        description="Subset of changes worth surfacing prominently",
    )
    risk_assessment: RiskAssessment = Field(description="Aggregate risk")
    generated_at: datetime = Field(
        default_factory=datetime.now,
        description="When the changelog was generated",
    )

    class Config:
        frozen = True

    @property
    def total_changes(self) -> int:
        """Number of detected changes."""
        return len(self.changes)

    @property
    def has_breaking_changes(self) -> bool:
        """Check whether any BREAKING change was detected."""
        return self.risk_assessment.breaking_changes_count > 0

    @property
    def additions(self) -> list[Change]:
        """Informational additions."""
        return [
            c for c in self.changes
            if c.severity == Severity.INFO and c.type == ChangeType.ADDED
        ]

    def get_changes_by_severity(self, severity: Severity) -> list[Change]:
        """Get changes filtered by severity."""
        return [c for c in self.changes if c.severity == severity]
