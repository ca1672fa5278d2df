"""
Risk aggregation.

Turns a flat list of changes into a RiskAssessment: a weighted score,
a risk level and a semantic versioning recommendation.
"""

from collections import Counter
from typing import Optional

from api_change_detector.config import RiskThresholds, RiskWeights
from api_change_detector.models.change import Change, ChangeType, Severity
from api_change_detector.models.changelog import RiskAssessment, RiskLevel, SemverBump

# Change types that warrant at least a MINOR bump
MINOR_CHANGE_TYPES = {ChangeType.ADDED, ChangeType.MODIFIED, ChangeType.DEPRECATED}

NO_CHANGES_RECOMMENDATION = "No changes detected."


def count_by_severity(changes: list[Change]) -> dict[Severity, int]:
    """Count changes per severity; every severity is present in the result."""
    counts = Counter(change.severity for change in changes)
    return {severity: counts.get(severity, 0) for severity in Severity}


def calculate_score(counts: dict[Severity, int], weights: Optional[RiskWeights] = None) -> int:
    """Weighted sum of the severity counts, capped at 100."""
    weights = weights or RiskWeights()
    score = sum(weights.for_severity(severity) * count for severity, count in counts.items())
    return min(100, score)


def determine_level(score: int, thresholds: Optional[RiskThresholds] = None) -> RiskLevel:
    """Map a score onto a risk level."""
    thresholds = thresholds or RiskThresholds()
    if score >= thresholds.critical:
        return RiskLevel.CRITICAL
    if score >= thresholds.high:
        return RiskLevel.HIGH
    if score >= thresholds.medium:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def determine_semver(changes: list[Change]) -> SemverBump:
    """
    Recommend a version bump.

    Any BREAKING change forces MAJOR regardless of the score.
    """
    if any(change.severity == Severity.BREAKING for change in changes):
        return SemverBump.MAJOR
    if any(change.type in MINOR_CHANGE_TYPES for change in changes):
        return SemverBump.MINOR
    return SemverBump.PATCH


def dominant_severity(
    counts: dict[Severity, int],
    weights: Optional[RiskWeights] = None,
) -> Optional[Severity]:
    """
    The severity bucket contributing most to the score.

    Ties go to the worse severity. Returns None when there are no changes.
    """
    weights = weights or RiskWeights()
    present = [severity for severity in Severity if counts.get(severity, 0) > 0]
    if not present:
        return None
    return max(
        present,
        key=lambda s: (counts[s] * weights.for_severity(s), -s.ordinal),
    )


def build_recommendation(
    level: RiskLevel,
    counts: dict[Severity, int],
    weights: Optional[RiskWeights] = None,
) -> str:
    """Templated recommendation naming the dominant severity bucket."""
    total = sum(counts.values())
    dominant = dominant_severity(counts, weights)
    if dominant is None:
        return NO_CHANGES_RECOMMENDATION

    bucket = f"{counts[dominant]} {dominant.value.lower()} change(s)"
    breaking = counts.get(Severity.BREAKING, 0)

    if level == RiskLevel.CRITICAL:
        return (
            f"Critical risk, driven by {bucket}. {breaking} breaking change(s) out of "
            f"{total} total. Release as a new major version and notify all consumers."
        )
    if level == RiskLevel.HIGH:
        return (
            f"High risk, driven by {bucket}. Plan a major version bump and "
            f"publish migration notes."
        )
    if level == RiskLevel.MEDIUM:
        return (
            f"Moderate risk, driven by {bucket}. Review the changes with "
            f"consumers before release."
        )
    return f"Low risk, mostly {bucket}. Safe to release after routine review."


def assess_risk(
    changes: Optional[list[Change]],
    weights: Optional[RiskWeights] = None,
    thresholds: Optional[RiskThresholds] = None,
) -> RiskAssessment:
    """
    Aggregate a change list into a risk assessment.

    Deterministic for a given change list; an empty or missing list
    yields score 0, level LOW and a PATCH recommendation.

    Args:
        changes: Detected changes.
        weights: Score weights per severity. Defaults to 25/10/4/1.
        thresholds: Level thresholds. Defaults to 40/60/85.

    Returns:
        The risk assessment.
    """
    changes = changes or []
    counts = count_by_severity(changes)
    score = calculate_score(counts, weights)
    level = determine_level(score, thresholds)

    return RiskAssessment(
        overall_score=score,
        level=level,
        breaking_changes_count=counts[Severity.BREAKING],
        total_changes_count=len(changes),
        changes_by_severity=counts,
        recommendation=build_recommendation(level, counts, weights),
        semver_recommendation=determine_semver(changes),
    )
