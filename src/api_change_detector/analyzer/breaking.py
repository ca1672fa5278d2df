"""
Breaking change detection.

Selects the changes worth surfacing prominently and decorates them with
an impact score and a migration suggestion.
"""

from typing import Optional

from api_change_detector.models.change import (
    BreakingChange,
    Change,
    ChangeCategory,
    ChangeType,
    Severity,
)

SURFACED_SEVERITIES = {Severity.BREAKING, Severity.DANGEROUS}

CATEGORY_WEIGHTS = {
    ChangeCategory.ENDPOINT: 100,
    ChangeCategory.REQUEST_BODY: 90,
    ChangeCategory.PARAMETER: 80,
    ChangeCategory.SCHEMA: 75,
    ChangeCategory.RESPONSE: 70,
}

# Trailing attribute segments of MODIFIED change paths
ATTRIBUTE_SUFFIXES = (".type", ".required", ".schema", ".location", ".contentType", ".format")


def extract_name(path: Optional[str]) -> str:
    """
    Extract the element name from a change path.

    ``/users parameter:filter.type`` gives ``filter`` and
    ``schema:User.email`` gives ``email``.
    """
    if not path:
        return "field"
    for suffix in ATTRIBUTE_SUFFIXES:
        if path.endswith(suffix):
            path = path[: -len(suffix)]
            break
    tail = path.rsplit(".", 1)[-1]
    return tail.rsplit(":", 1)[-1]


def calculate_impact_score(change: Change) -> int:
    """Impact score (0-100) from the change type, severity and category."""
    if change.type == ChangeType.REMOVED:
        base = 100 if change.category == ChangeCategory.ENDPOINT else 80
    elif change.type == ChangeType.ADDED and change.severity == Severity.BREAKING:
        base = 70
    elif change.type == ChangeType.MODIFIED and change.severity == Severity.BREAKING:
        base = 85
    elif change.type == ChangeType.MODIFIED and change.severity == Severity.DANGEROUS:
        base = 60
    else:
        base = 50

    weight = CATEGORY_WEIGHTS.get(change.category, 100)
    return max(0, min(100, base * weight // 100))


def suggest_migration(change: Change) -> str:
    """Suggest how API consumers can adapt to a change."""
    name = extract_name(change.path)
    category = change.category

    if change.type == ChangeType.REMOVED:
        if category == ChangeCategory.ENDPOINT:
            return (
                "Update all API consumers to stop using the removed endpoint. "
                "Consider using an alternative endpoint if available."
            )
        if category == ChangeCategory.PARAMETER:
            return f"Remove the parameter '{name}' from all API calls."
        if category == ChangeCategory.RESPONSE:
            return "Update response handling code to account for the removed response."
        if category == ChangeCategory.REQUEST_BODY:
            return "Remove the request body from API calls to this endpoint."
        if category in (ChangeCategory.FIELD, ChangeCategory.ENUM_VALUE):
            return f"Stop reading or sending '{name}'; it no longer exists."
        return "Update client code to handle the removal."

    if change.type == ChangeType.ADDED:
        if category == ChangeCategory.PARAMETER:
            return f"Add the new required parameter '{name}' to all API calls."
        if category == ChangeCategory.REQUEST_BODY:
            return "Include the required request body in API calls to this endpoint."
        if category == ChangeCategory.FIELD_NUMBER:
            return "Reserve retired field numbers instead of reusing them."
        return "Update client code to provide the new required field."

    if change.type == ChangeType.MODIFIED:
        path = change.path or ""
        if ".type" in path:
            return (
                f"Update the data type for '{name}' from '{change.old_value}' "
                f"to '{change.new_value}'."
            )
        if ".required" in path:
            return "The field is now required. Ensure all API calls include this field."
        if ".schema" in path:
            return "Update request/response handling to match the new schema structure."
        if category == ChangeCategory.FIELD_NUMBER:
            return "Regenerate client stubs; payloads serialized with the old number are unreadable."
        if category == ChangeCategory.STREAMING_TYPE:
            return "Regenerate client stubs and adapt call sites to the new streaming mode."
        if category == ChangeCategory.ENDPOINT:
            return "Update the endpoint path or method in all API consumers."
        if category == ChangeCategory.PARAMETER:
            return "Update parameter handling to match the new specification."
        if category == ChangeCategory.RESPONSE:
            return "Update response parsing to handle the modified structure."

    return "Review and update client code to match the new API specification."


def detect_breaking_changes(changes: Optional[list[Change]]) -> list[BreakingChange]:
    """
    Select BREAKING and DANGEROUS changes, keeping their order.

    Args:
        changes: All detected changes.

    Returns:
        The surfaced subset, each with impact score and migration hint.
    """
    return [
        BreakingChange.from_change(
            change,
            impact_score=calculate_impact_score(change),
            migration_suggestion=suggest_migration(change),
        )
        for change in changes or []
        if change.severity in SURFACED_SEVERITIES
    ]
