"""
Analyzer package for API Change Detector.

This package contains modules for:
- Breaking-change detection (impact scores, migration suggestions)
- Risk aggregation (score, level, semver recommendation)
- Changelog assembly
"""

from api_change_detector.analyzer.breaking import detect_breaking_changes
from api_change_detector.analyzer.changelog import ChangelogGenerator, compare_specs
from api_change_detector.analyzer.risk import assess_risk

__all__ = [
    "ChangelogGenerator",
    "assess_risk",
    "compare_specs",
    "detect_breaking_changes",
]
