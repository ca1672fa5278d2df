"""
Configuration loading and validation for API Change Detector.

This module handles configuration file parsing, validation, and provides
sensible defaults for all configuration options.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator

from api_change_detector.models.change import Severity

CONFIG_FILE_NAMES = [".api-change-detector.yaml", ".api-change-detector.yml"]


class RiskWeights(BaseModel):
    """Per-severity weights used to compute the overall risk score."""

    breaking: int = Field(default=25, ge=0, description="Points per BREAKING change.")
    dangerous: int = Field(default=10, ge=0, description="Points per DANGEROUS change.")
    warning: int = Field(default=4, ge=0, description="Points per WARNING change.")
    info: int = Field(default=1, ge=0, description="Points per INFO change.")

    def for_severity(self, severity: Severity) -> int:
        """Get the weight for a severity."""
        return {
            Severity.BREAKING: self.breaking,
            Severity.DANGEROUS: self.dangerous,
            Severity.WARNING: self.warning,
            Severity.INFO: self.info,
        }[severity]


class RiskThresholds(BaseModel):
    """Lower score bounds (inclusive) of the risk levels above LOW."""

    medium: int = Field(default=40, ge=0, le=100, description="Lowest MEDIUM score.")
    high: int = Field(default=60, ge=0, le=100, description="Lowest HIGH score.")
    critical: int = Field(default=85, ge=0, le=100, description="Lowest CRITICAL score.")

    @model_validator(mode="after")
    def check_ordering(self) -> "RiskThresholds":
        """Ensure thresholds are ascending."""
        if not self.medium <= self.high <= self.critical:
            raise ValueError("risk thresholds must satisfy medium <= high <= critical")
        return self


class AnalysisConfig(BaseModel):
    """Configuration for change analysis and build gating."""

    weights: RiskWeights = Field(default_factory=RiskWeights)
    thresholds: RiskThresholds = Field(default_factory=RiskThresholds)
    fail_on_breaking: bool = Field(
        default=False,
        description="Exit with a non-zero status when breaking changes are found.",
    )
    fail_on_severity: Optional[Severity] = Field(
        default=None,
        description="Exit with a non-zero status when any change is at least this severe.",
    )


class OutputConfig(BaseModel):
    """Configuration for output formatting."""

    format: str = Field(
        default="text",
        description="Default output format (text, json, yaml, markdown, html).",
    )
    colorize: bool = Field(
        default=True,
        description="Use colors in terminal output.",
    )


class Config(BaseModel):
    """Root configuration model for API Change Detector."""

    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    class Config:
        """Pydantic model configuration."""

        extra = "forbid"


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the configuration file. If None, returns defaults.

    Returns:
        Config object with loaded or default values.

    Raises:
        FileNotFoundError: If the specified config file doesn't exist.
        ValueError: If the config file is invalid.
    """
    if config_path is None:
        return Config()

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return Config(**data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in configuration file: {e}") from e
    except Exception as e:
        raise ValueError(f"Failed to load configuration: {e}") from e


def find_config_file(start_path: Path) -> Optional[Path]:
    """
    Search for a configuration file starting from the given path.

    Searches for `.api-change-detector.yaml` or `.api-change-detector.yml`
    in the start path and parent directories.

    Args:
        start_path: Directory to start searching from.

    Returns:
        Path to the config file if found, None otherwise.
    """
    current = start_path.resolve()
    while current != current.parent:
        for name in CONFIG_FILE_NAMES:
            config_path = current / name
            if config_path.exists():
                return config_path
        current = current.parent

    return None
