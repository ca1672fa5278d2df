"""
API Change Detector

A library and CLI that compares two versions of an API description
(REST, GraphQL, protobuf/gRPC or AsyncAPI), classifies every difference
by severity and aggregates the result into a risk assessment with a
semantic versioning recommendation.
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("api-change-detector")
except PackageNotFoundError:
    __version__ = "0.1.0"

# Public API exports
__all__ = [
    "__version__",
]
