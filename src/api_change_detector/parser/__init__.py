"""
Parser package for API Change Detector.

This package contains the loader for serialized canonical models
(JSON or YAML documents selecting their protocol via a `protocol` key).
"""

from api_change_detector.parser.loader import SpecLoadError, load_spec

__all__ = [
    "SpecLoadError",
    "load_spec",
]
