"""
Unit tests for risk aggregation.
"""

from typing import Callable

import pytest

from api_change_detector.analyzer.risk import (
    NO_CHANGES_RECOMMENDATION,
    assess_risk,
    calculate_score,
    count_by_severity,
    determine_level,
    dominant_severity,
)
from api_change_detector.config import RiskThresholds, RiskWeights
from api_change_detector.models.change import Change, ChangeType, Severity
from api_change_detector.models.changelog import RiskLevel, SemverBump


class TestAssessRisk:
    """Tests for assess_risk."""

    def test_one_breaking_two_info(self, make_change: Callable[..., Change]) -> None:
        """Test that a breaking change forces MAJOR even at LOW risk."""
        changes = [
            make_change(Severity.BREAKING, ChangeType.REMOVED),
            make_change(Severity.INFO),
            make_change(Severity.INFO),
        ]

        risk = assess_risk(changes)

        assert risk.overall_score == 27
        assert risk.level == RiskLevel.LOW
        assert risk.semver_recommendation == SemverBump.MAJOR
        assert risk.breaking_changes_count == 1
        assert risk.total_changes_count == 3

    def test_empty(self) -> None:
        """Test that no changes means no risk."""
        risk = assess_risk([])

        assert risk.overall_score == 0
        assert risk.level == RiskLevel.LOW
        assert risk.semver_recommendation == SemverBump.PATCH
        assert risk.recommendation == NO_CHANGES_RECOMMENDATION

    def test_none_is_empty(self) -> None:
        """Test that a missing change list is treated as empty."""
        assert assess_risk(None).total_changes_count == 0

    def test_counts_sum_to_total(self, make_change: Callable[..., Change]) -> None:
        """Test that per-severity counts add up to the total."""
        changes = [make_change(severity) for severity in Severity] + [make_change(Severity.WARNING)]

        risk = assess_risk(changes)

        assert sum(risk.changes_by_severity.values()) == risk.total_changes_count
        assert risk.count(Severity.WARNING) == 2

    def test_score_is_capped(self, make_change: Callable[..., Change]) -> None:
        """Test that the score never exceeds 100."""
        changes = [make_change(Severity.BREAKING, ChangeType.REMOVED) for _ in range(10)]

        risk = assess_risk(changes)

        assert risk.overall_score == 100
        assert risk.level == RiskLevel.CRITICAL

    def test_additions_recommend_minor(self, make_change: Callable[..., Change]) -> None:
        """Test that non-breaking additions warrant a MINOR bump."""
        risk = assess_risk([make_change(Severity.INFO, ChangeType.ADDED)])

        assert risk.semver_recommendation == SemverBump.MINOR

    def test_removal_without_breaking_is_patch(self, make_change: Callable[..., Change]) -> None:
        """Test that only REMOVED changes below BREAKING yield PATCH."""
        risk = assess_risk([make_change(Severity.DANGEROUS, ChangeType.REMOVED)])

        assert risk.semver_recommendation == SemverBump.PATCH

    def test_deterministic(self, make_change: Callable[..., Change]) -> None:
        """Test that the same input yields the same assessment."""
        changes = [make_change(Severity.DANGEROUS), make_change(Severity.WARNING)]

        assert assess_risk(changes) == assess_risk(changes)

    def test_recommendation_names_dominant_bucket(
        self, make_change: Callable[..., Change]
    ) -> None:
        """Test that the recommendation mentions the dominant severity."""
        changes = [make_change(Severity.DANGEROUS) for _ in range(4)]

        risk = assess_risk(changes)

        assert risk.level == RiskLevel.MEDIUM
        assert "4 dangerous change(s)" in risk.recommendation

    def test_custom_weights(self, make_change: Callable[..., Change]) -> None:
        """Test overriding the severity weights."""
        weights = RiskWeights(breaking=50)

        risk = assess_risk([make_change(Severity.BREAKING)], weights=weights)

        assert risk.overall_score == 50
        assert risk.level == RiskLevel.MEDIUM


class TestLevels:
    """Tests for score to level mapping."""

    @pytest.mark.parametrize(
        "score,expected",
        [
            (0, RiskLevel.LOW),
            (39, RiskLevel.LOW),
            (40, RiskLevel.MEDIUM),
            (59, RiskLevel.MEDIUM),
            (60, RiskLevel.HIGH),
            (84, RiskLevel.HIGH),
            (85, RiskLevel.CRITICAL),
            (100, RiskLevel.CRITICAL),
        ],
    )
    def test_default_thresholds(self, score: int, expected: RiskLevel) -> None:
        """Test the default level boundaries."""
        assert determine_level(score) == expected

    def test_custom_thresholds(self) -> None:
        """Test overriding the level boundaries."""
        thresholds = RiskThresholds(medium=10, high=20, critical=30)

        assert determine_level(25, thresholds) == RiskLevel.HIGH


class TestHelpers:
    """Tests for the aggregation helpers."""

    def test_count_by_severity_has_every_bucket(self) -> None:
        """Test that all severities appear in the counts."""
        assert count_by_severity([]) == {severity: 0 for severity in Severity}

    def test_calculate_score(self) -> None:
        """Test the weighted sum."""
        counts = {Severity.BREAKING: 1, Severity.DANGEROUS: 1, Severity.WARNING: 1, Severity.INFO: 1}

        assert calculate_score(counts) == 40

    def test_dominant_severity_prefers_worse_on_tie(self) -> None:
        """Test tie breaking between equally weighted buckets."""
        counts = {Severity.BREAKING: 0, Severity.DANGEROUS: 2, Severity.WARNING: 5, Severity.INFO: 0}

        assert dominant_severity(counts) == Severity.DANGEROUS

        counts = {Severity.BREAKING: 0, Severity.DANGEROUS: 2, Severity.WARNING: 6, Severity.INFO: 0}

        assert dominant_severity(counts) == Severity.WARNING

    def test_dominant_severity_empty(self) -> None:
        """Test that there is no dominant bucket without changes."""
        assert dominant_severity(count_by_severity([])) is None
