"""
Changelog assembly.

Dispatches a pair of API descriptions to the matching comparator, then
runs breaking-change detection and risk aggregation over the result.
"""

import logging
from typing import Any, Callable, Optional, Union

from api_change_detector.analyzer.breaking import detect_breaking_changes
from api_change_detector.analyzer.risk import assess_risk
from api_change_detector.comparator import (
    compare_api_specs,
    compare_asyncapi_specs,
    compare_graphql_schemas,
    compare_proto_files,
)
from api_change_detector.config import AnalysisConfig
from api_change_detector.models.asyncapi import AsyncApiSpec
from api_change_detector.models.change import Change
from api_change_detector.models.changelog import Changelog
from api_change_detector.models.graphql import GraphQLSchema
from api_change_detector.models.protobuf import ProtoFile
from api_change_detector.models.spec import ApiSpec

logger = logging.getLogger(__name__)

ApiDescription = Union[ApiSpec, GraphQLSchema, ProtoFile, AsyncApiSpec]
Comparator = Callable[[Any, Any], list[Change]]

COMPARATORS: dict[type, Comparator] = {
    ApiSpec: compare_api_specs,
    GraphQLSchema: compare_graphql_schemas,
    ProtoFile: compare_proto_files,
    AsyncApiSpec: compare_asyncapi_specs,
}

UNKNOWN_API_NAME = "Unknown"


def describe(spec: Optional[ApiDescription]) -> tuple[Optional[str], Optional[str]]:
    """Get the (name, version) pair of an API description."""
    if spec is None:
        return None, None
    if isinstance(spec, ProtoFile):
        return spec.api_name, spec.version or None
    if isinstance(spec, AsyncApiSpec):
        return spec.title, spec.api_version or None
    return spec.name, spec.version or None


def resolve_comparator(
    old: Optional[ApiDescription],
    new: Optional[ApiDescription],
) -> Comparator:
    """
    Pick the comparator for a pair of descriptions.

    Raises:
        TypeError: If the descriptions are of different or unsupported types,
            or both are None.
    """
    present = [spec for spec in (old, new) if spec is not None]
    if not present:
        raise TypeError("At least one API description is required")

    kinds = {type(spec) for spec in present}
    if len(kinds) > 1:
        names = ", ".join(sorted(kind.__name__ for kind in kinds))
        raise TypeError(f"Cannot compare different API description types: {names}")

    kind = kinds.pop()
    for model, comparator in COMPARATORS.items():
        if issubclass(kind, model):
            return comparator
    raise TypeError(f"Unsupported API description type: {kind.__name__}")


class ChangelogGenerator:
    """
    Builds changelogs from pairs of API descriptions.

    Example:
        generator = ChangelogGenerator()
        changelog = generator.generate(old_spec, new_spec)
        print(changelog.risk_assessment.level)
    """

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        """
        Initialize the generator.

        Args:
            config: Analysis settings (risk weights and thresholds).
        """
        self.config = config or AnalysisConfig()

    def generate(
        self,
        old: Optional[ApiDescription],
        new: Optional[ApiDescription],
        comparator: Optional[Comparator] = None,
    ) -> Changelog:
        """
        Compare two versions of an API and assemble the changelog.

        Either side may be None, standing for an absent description.

        Args:
            old: The previous version.
            new: The current version.
            comparator: Override for the comparator picked from the model type.

        Returns:
            The assembled changelog.
        """
        comparator = comparator or resolve_comparator(old, new)
        changes = comparator(old, new)
        return self.build(old, new, changes)

    def build(
        self,
        old: Optional[ApiDescription],
        new: Optional[ApiDescription],
        changes: list[Change],
    ) -> Changelog:
        """Assemble a changelog from already detected changes."""
        old_name, from_version = describe(old)
        new_name, to_version = describe(new)

        breaking_changes = detect_breaking_changes(changes)
        risk = assess_risk(
            changes,
            weights=self.config.weights,
            thresholds=self.config.thresholds,
        )

        logger.debug(
            "Changelog for %s: %d changes, %d surfaced, risk %s (%d)",
            new_name or old_name,
            len(changes),
            len(breaking_changes),
            risk.level.value,
            risk.overall_score,
        )

        return Changelog(
            api_name=new_name or old_name or UNKNOWN_API_NAME,
            from_version=from_version,
            to_version=to_version,
            changes=changes,
            breaking_changes=breaking_changes,
            risk_assessment=risk,
        )


def compare_specs(
    old: Optional[ApiDescription],
    new: Optional[ApiDescription],
    config: Optional[AnalysisConfig] = None,
) -> Changelog:
    """
    Compare two API descriptions with default settings.

    Args:
        old: The previous version.
        new: The current version.
        config: Optional analysis settings.

    Returns:
        The assembled changelog.
    """
    return ChangelogGenerator(config).generate(old, new)
