"""
REST structural comparator.

Matches endpoints of two API specifications by method and path and
delegates matched pairs to the field-level comparators.
"""

import logging
from typing import Optional

from api_change_detector.comparator.diffing import (
    deprecation_changes,
    diff_keyed,
    make_change,
    spec_presence_changes,
)
from api_change_detector.comparator.fields import (
    compare_parameters,
    compare_request_body,
    compare_responses,
)
from api_change_detector.comparator.schema import compare_schemas
from api_change_detector.models.change import Change, ChangeCategory, ChangeType, Severity
from api_change_detector.models.spec import ApiSpec, Endpoint

logger = logging.getLogger(__name__)


def compare_endpoint(old: Endpoint, new: Endpoint) -> list[Change]:
    """
    Compare two versions of the same endpoint.

    Args:
        old: The endpoint in the old specification.
        new: The endpoint in the new specification.

    Returns:
        Detected changes, in the order: path, method, deprecation,
        parameters, request body, responses.
    """
    changes: list[Change] = []

    if old.path != new.path:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.ENDPOINT,
                Severity.BREAKING,
                new.path,
                f"Endpoint path changed from {old.path} to {new.path}",
                old_value=old.path,
                new_value=new.path,
            )
        )

    if old.method != new.method:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.ENDPOINT,
                Severity.BREAKING,
                new.path,
                f"HTTP method changed from {old.method.value} to {new.method.value}",
                old_value=old.method.value,
                new_value=new.method.value,
            )
        )

    changes.extend(
        deprecation_changes(
            old.deprecated,
            new.deprecated,
            ChangeCategory.ENDPOINT,
            new.path,
            f"Endpoint '{new.path}'",
        )
    )
    changes.extend(compare_parameters(old.parameters, new.parameters, new.path))
    changes.extend(compare_request_body(old.request_body, new.request_body, new.path))
    changes.extend(compare_responses(old.responses, new.responses, new.path))

    return changes


def compare_api_specs(old_spec: Optional[ApiSpec], new_spec: Optional[ApiSpec]) -> list[Change]:
    """
    Compare two REST (or endpoint-mapped) API specifications.

    Either side may be None, meaning the specification did not exist.

    Args:
        old_spec: The old specification.
        new_spec: The new specification.

    Returns:
        Ordered list of changes: added endpoints, removed endpoints,
        changes inside matched endpoints, then component schema changes.
    """
    presence = spec_presence_changes(old_spec, new_spec, "API", ChangeCategory.ENDPOINT)
    if presence is not None:
        return presence

    def added(endpoint: Endpoint) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.ENDPOINT,
                Severity.INFO,
                endpoint.path,
                f"New endpoint added: {endpoint.display_name}",
                new_value=endpoint.key,
            )
        ]

    def removed(endpoint: Endpoint) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.ENDPOINT,
                Severity.BREAKING,
                endpoint.path,
                f"Endpoint removed: {endpoint.display_name}",
                old_value=endpoint.key,
            )
        ]

    changes = diff_keyed(
        old_spec.endpoints,
        new_spec.endpoints,
        key=lambda e: e.key,
        on_added=added,
        on_removed=removed,
        on_matched=compare_endpoint,
    )
    changes.extend(compare_schemas(old_spec.schemas, new_spec.schemas))

    logger.debug(
        "Compared %s %s -> %s: %d changes",
        new_spec.name,
        old_spec.version,
        new_spec.version,
        len(changes),
    )
    return changes
