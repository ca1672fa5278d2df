"""
Unit tests for configuration loading.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from api_change_detector.config import (
    Config,
    RiskThresholds,
    RiskWeights,
    find_config_file,
    load_config,
)
from api_change_detector.models.change import Severity


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self) -> None:
        """Test that no path yields the default configuration."""
        config = load_config()

        assert config.analysis.weights.breaking == 25
        assert config.analysis.thresholds.critical == 85
        assert config.analysis.fail_on_breaking is False
        assert config.output.format == "text"

    def test_load_yaml(self, tmp_path: Path) -> None:
        """Test loading overrides from YAML."""
        config_path = tmp_path / ".api-change-detector.yaml"
        config_path.write_text(
            "analysis:\n"
            "  fail_on_breaking: true\n"
            "  fail_on_severity: DANGEROUS\n"
            "  weights:\n"
            "    breaking: 30\n"
            "output:\n"
            "  format: markdown\n"
        )

        config = load_config(config_path)

        assert config.analysis.fail_on_breaking is True
        assert config.analysis.fail_on_severity == Severity.DANGEROUS
        assert config.analysis.weights.breaking == 30
        assert config.analysis.weights.dangerous == 10
        assert config.output.format == "markdown"

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test that an empty file yields defaults."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("")

        assert load_config(config_path) == Config()

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test that malformed YAML raises ValueError."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("analysis: [unclosed\n")

        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config(config_path)

    def test_unknown_key(self, tmp_path: Path) -> None:
        """Test that unknown top-level keys are rejected."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("reporting: {}\n")

        with pytest.raises(ValueError, match="Failed to load configuration"):
            load_config(config_path)


class TestRiskSettings:
    """Tests for risk weights and thresholds."""

    def test_for_severity(self) -> None:
        """Test weight lookup per severity."""
        weights = RiskWeights()

        assert [weights.for_severity(s) for s in Severity] == [25, 10, 4, 1]

    def test_negative_weight(self) -> None:
        """Test that negative weights are rejected."""
        with pytest.raises(ValidationError):
            RiskWeights(breaking=-1)

    def test_thresholds_must_ascend(self) -> None:
        """Test that descending thresholds are rejected."""
        with pytest.raises(ValidationError):
            RiskThresholds(medium=70, high=60, critical=85)


class TestFindConfigFile:
    """Tests for find_config_file."""

    def test_finds_in_parent(self, tmp_path: Path) -> None:
        """Test searching parent directories."""
        config_path = tmp_path / ".api-change-detector.yml"
        config_path.write_text("{}\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == config_path.resolve()
