"""
Comparator package for API Change Detector.

This package contains the structural comparators for each supported
protocol family and the field-level comparators they delegate to.
"""

from api_change_detector.comparator.asyncapi import compare_asyncapi_specs
from api_change_detector.comparator.diffing import diff_keyed, diff_mapping
from api_change_detector.comparator.endpoint import compare_api_specs, compare_endpoint
from api_change_detector.comparator.graphql import compare_graphql_schemas
from api_change_detector.comparator.protobuf import compare_proto_files, is_wire_compatible
from api_change_detector.comparator.schema import compare_schema, compare_schemas

__all__ = [
    "compare_api_specs",
    "compare_asyncapi_specs",
    "compare_endpoint",
    "compare_graphql_schemas",
    "compare_proto_files",
    "compare_schema",
    "compare_schemas",
    "diff_keyed",
    "diff_mapping",
    "is_wire_compatible",
]
