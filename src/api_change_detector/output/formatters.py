"""
Base formatter and formatter registry.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from api_change_detector.models.change import Change, ChangeType, Severity

if TYPE_CHECKING:
    from api_change_detector.models.change import BreakingChange
    from api_change_detector.models.changelog import Changelog


# Severity sections in display order: (severity, glyph, title)
SEVERITY_SECTIONS = [
    (Severity.BREAKING, "🔴", "Breaking Changes"),
    (Severity.DANGEROUS, "🟠", "Dangerous Changes"),
    (Severity.WARNING, "🟡", "Warnings"),
    (Severity.INFO, "🟢", "Additions"),
]

OTHER_CHANGES_TITLE = "Other Changes"


def split_info_changes(changes: list[Change]) -> tuple[list[Change], list[Change]]:
    """Split INFO changes into additions and everything else."""
    info = [c for c in changes if c.severity == Severity.INFO]
    additions = [c for c in info if c.type == ChangeType.ADDED]
    others = [c for c in info if c.type != ChangeType.ADDED]
    return additions, others


def change_to_dict(change: Change) -> dict[str, Any]:
    """Convert a change to its serialized form."""
    return {
        "id": change.id,
        "type": change.type.value,
        "category": change.category.value,
        "severity": change.severity.value,
        "path": change.path,
        "description": change.description,
        "oldValue": change.old_value,
        "newValue": change.new_value,
        "detectedAt": change.detected_at.isoformat(),
    }


def breaking_change_to_dict(change: "BreakingChange") -> dict[str, Any]:
    """Convert a surfaced change to its serialized form."""
    data = change_to_dict(change)
    data["impactScore"] = change.impact_score
    data["migrationSuggestion"] = change.migration_suggestion
    return data


def changelog_to_dict(changelog: "Changelog") -> dict[str, Any]:
    """
    Convert a changelog to the serialized form shared by JSON and YAML.

    Args:
        changelog: The changelog to convert.

    Returns:
        A dictionary of plain values.
    """
    risk = changelog.risk_assessment
    return {
        "apiName": changelog.api_name,
        "fromVersion": changelog.from_version,
        "toVersion": changelog.to_version,
        "generatedAt": changelog.generated_at.isoformat(),
        "summary": {
            "totalChanges": changelog.total_changes,
            "breakingChanges": risk.breaking_changes_count,
            "riskLevel": risk.level.value,
            "riskScore": risk.overall_score,
            "semverRecommendation": risk.semver_recommendation.value,
        },
        "changes": [change_to_dict(c) for c in changelog.changes],
        "breakingChanges": [breaking_change_to_dict(c) for c in changelog.breaking_changes],
        "riskAssessment": {
            "overallScore": risk.overall_score,
            "level": risk.level.value,
            "breakingChangesCount": risk.breaking_changes_count,
            "totalChangesCount": risk.total_changes_count,
            "changesBySeverity": {
                severity.value: risk.count(severity) for severity in Severity
            },
            "recommendation": risk.recommendation,
            "semverRecommendation": risk.semver_recommendation.value,
        },
    }


class BaseFormatter(ABC):
    """
    Abstract base class for output formatters.

    Subclasses must implement the format() method.
    """

    @abstractmethod
    def format(self, changelog: "Changelog") -> str:
        """
        Format a changelog.

        Args:
            changelog: The changelog to format.

        Returns:
            Formatted string representation.
        """
        pass


# Formatter registry
_FORMATTERS: dict[str, type[BaseFormatter]] = {}


def register_formatter(name: str) -> callable:
    """
    Decorator to register a formatter.

    Args:
        name: The name to register the formatter under.

    Returns:
        Decorator function.
    """
    def decorator(cls: type[BaseFormatter]) -> type[BaseFormatter]:
        _FORMATTERS[name] = cls
        return cls
    return decorator


def available_formatters() -> list[str]:
    """Names of all registered formatters."""
    _load_formatters()
    return list(_FORMATTERS.keys())


def _load_formatters() -> None:
    # Import formatters to ensure they're registered
    from api_change_detector.output import (  # noqa: F401
        html_output,
        json_output,
        markdown_output,
        text_output,
        yaml_output,
    )


def get_formatter(name: str, **options: Any) -> BaseFormatter:
    """
    Get a formatter instance by name.

    Args:
        name: The formatter name (e.g., "text", "json", "yaml").
        **options: Keyword arguments passed to the formatter constructor.

    Returns:
        An instance of the requested formatter.

    Raises:
        ValueError: If the formatter name is not recognized.
    """
    _load_formatters()

    if name not in _FORMATTERS:
        available = ", ".join(_FORMATTERS.keys())
        raise ValueError(f"Unknown formatter: {name}. Available: {available}")

    return _FORMATTERS[name](**options)
