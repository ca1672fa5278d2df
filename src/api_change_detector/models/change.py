"""
Change data models.

Models representing individual changes detected between two versions
of an API description, and the enumerations used to classify them.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """
    Severity of a detected change.

    Declaration order is the severity order: BREAKING is the worst,
    INFO the mildest. Use ``ordinal`` for sorting and comparisons.
    """

    BREAKING = "BREAKING"
    DANGEROUS = "DANGEROUS"
    WARNING = "WARNING"
    INFO = "INFO"

    @property
    def ordinal(self) -> int:
        """Position in the severity order (0 = worst)."""
        return list(Severity).index(self)

    def is_at_least(self, other: "Severity") -> bool:
        """Check whether this severity is as bad as or worse than ``other``."""
        return self.ordinal <= other.ordinal


class ChangeType(str, Enum):
    """Kind of change applied to an API element."""

    ADDED = "ADDED"
    REMOVED = "REMOVED"
    MODIFIED = "MODIFIED"
    DEPRECATED = "DEPRECATED"


class ChangeCategory(str, Enum):
    """The kind of API element a change applies to."""

    # REST
    ENDPOINT = "ENDPOINT"
    PARAMETER = "PARAMETER"
    REQUEST_BODY = "REQUEST_BODY"
    RESPONSE = "RESPONSE"
    SCHEMA = "SCHEMA"
    # GraphQL
    FIELD = "FIELD"
    TYPE = "TYPE"
    ENUM_VALUE = "ENUM_VALUE"
    UNION_MEMBER = "UNION_MEMBER"
    INTERFACE = "INTERFACE"
    # Protobuf / gRPC
    SERVICE = "SERVICE"
    RPC_METHOD = "RPC_METHOD"
    MESSAGE = "MESSAGE"
    FIELD_NUMBER = "FIELD_NUMBER"
    STREAMING_TYPE = "STREAMING_TYPE"
    PACKAGE = "PACKAGE"
    # AsyncAPI
    SERVER = "SERVER"
    CHANNEL = "CHANNEL"
    OPERATION = "OPERATION"
    PROTOCOL = "PROTOCOL"


class Change(BaseModel):
    """A single classified difference between two API versions."""

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier of this change",
    )
    type: ChangeType = Field(description="Kind of change")
    category: ChangeCategory = Field(description="API element the change applies to")
    severity: Severity = Field(description="How disruptive the change is for consumers")
    path: str = Field(default="", description="Locator of the changed element")
    description: str = Field(default="", description="Human readable description")
    old_value: Optional[Any] = Field(default=None, description="Value before the change")
    new_value: Optional[Any] = Field(default=None, description="Value after the change")
    detected_at: datetime = Field(
        default_factory=datetime.now,
        description="When the change was detected",
    )

    class Config:
        frozen = True

    @property
    def is_breaking(self) -> bool:
        """Check if this change has BREAKING severity."""
        return self.severity == Severity.BREAKING


class BreakingChange(Change):
    """A change worth surfacing prominently, with impact and migration hints."""

    impact_score: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Estimated impact on consumers (0-100)",
    )
    migration_suggestion: Optional[str] = Field(
        default=None,
        description="Suggested migration for API consumers",
    )

    @classmethod
    def from_change(
        cls,
        change: Change,
        impact_score: int,
        migration_suggestion: Optional[str] = None,
    ) -> "BreakingChange":
        """Decorate an existing change with impact information."""
        return cls(
            **change.model_dump(exclude={"impact_score", "migration_suggestion"}),
            impact_score=impact_score,
            migration_suggestion=migration_suggestion,
        )
