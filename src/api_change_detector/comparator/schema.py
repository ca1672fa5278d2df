"""
Generic schema comparator.

Compares bags of named schema definitions (REST component schemas,
AsyncAPI payloads) property by property.
"""

from collections.abc import Mapping
from typing import Optional

from api_change_detector.comparator.diffing import (
    deprecation_changes,
    diff_mapping,
    diff_values,
    make_change,
)
from api_change_detector.models.change import Change, ChangeCategory, ChangeType, Severity
from api_change_detector.models.schema import SchemaDefinition

# (old type, new type) pairs that widen the accepted value space
WIDENING_TYPE_CHANGES = {("integer", "number")}


def schema_path(name: str) -> str:
    """Locator of a top-level named schema."""
    return f"schema:{name}"


def compare_schemas(
    old_schemas: Optional[Mapping[str, SchemaDefinition]],
    new_schemas: Optional[Mapping[str, SchemaDefinition]],
) -> list[Change]:
    """
    Compare two bags of named schemas.

    Args:
        old_schemas: Schemas of the old version keyed by name.
        new_schemas: Schemas of the new version keyed by name.

    Returns:
        Detected schema changes.
    """

    def added(name: str, schema: SchemaDefinition) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.SCHEMA,
                Severity.INFO,
                schema_path(name),
                f"Schema '{name}' added",
            )
        ]

    def removed(name: str, schema: SchemaDefinition) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.SCHEMA,
                Severity.BREAKING,
                schema_path(name),
                f"Schema '{name}' removed",
            )
        ]

    return diff_mapping(
        old_schemas,
        new_schemas,
        on_added=added,
        on_removed=removed,
        on_matched=lambda name, old, new: compare_schema(old, new, schema_path(name)),
    )


def compare_schema(old: SchemaDefinition, new: SchemaDefinition, path: str) -> list[Change]:
    """
    Compare two versions of one schema.

    A type change other than a widening short-circuits the comparison:
    nested properties of unrelated types are not diffed.
    """
    changes: list[Change] = []

    if old.type != new.type:
        widening = (old.type, new.type) in WIDENING_TYPE_CHANGES
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.SCHEMA,
                Severity.WARNING if widening else Severity.BREAKING,
                f"{path}.type",
                f"Type changed from {old.type} to {new.type}",
                old_value=old.type,
                new_value=new.type,
            )
        )
        if not widening:
            return changes

    if old.format != new.format:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.SCHEMA,
                Severity.WARNING,
                f"{path}.format",
                f"Format changed from {old.format} to {new.format}",
                old_value=old.format,
                new_value=new.format,
            )
        )

    if old.ref != new.ref:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.SCHEMA,
                Severity.DANGEROUS,
                f"{path}.$ref",
                f"Schema reference changed from {old.ref} to {new.ref}",
                old_value=old.ref,
                new_value=new.ref,
            )
        )

    changes.extend(
        deprecation_changes(old.deprecated, new.deprecated, ChangeCategory.SCHEMA, path, "Schema")
    )
    changes.extend(_compare_properties(old, new, path))
    changes.extend(_compare_enum_values(old, new, path))

    items_path = f"{path}[]"
    if old.items is None and new.items is not None:
        changes.append(
            make_change(
                ChangeType.ADDED,
                ChangeCategory.SCHEMA,
                Severity.INFO,
                items_path,
                "Array items schema added",
            )
        )
    elif old.items is not None and new.items is None:
        changes.append(
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.SCHEMA,
                Severity.BREAKING,
                items_path,
                "Array items schema removed",
            )
        )
    elif old.items is not None and new.items is not None:
        changes.extend(compare_schema(old.items, new.items, items_path))

    return changes


def _compare_properties(
    old: SchemaDefinition,
    new: SchemaDefinition,
    path: str,
) -> list[Change]:
    """Compare the properties of two object schemas."""

    def added(name: str, prop: SchemaDefinition) -> list[Change]:
        required = new.is_required(name)
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.SCHEMA,
                Severity.BREAKING if required else Severity.INFO,
                f"{path}.{name}",
                f"{'Required' if required else 'Optional'} property '{name}' added",
            )
        ]

    def removed(name: str, prop: SchemaDefinition) -> list[Change]:
        required = old.is_required(name)
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.SCHEMA,
                Severity.BREAKING if required else Severity.DANGEROUS,
                f"{path}.{name}",
                f"{'Required' if required else 'Optional'} property '{name}' removed",
            )
        ]

    def matched(name: str, old_prop: SchemaDefinition, new_prop: SchemaDefinition) -> list[Change]:
        prop_path = f"{path}.{name}"
        changes: list[Change] = []
        was_required, is_required = old.is_required(name), new.is_required(name)
        if not was_required and is_required:
            changes.append(
                make_change(
                    ChangeType.MODIFIED,
                    ChangeCategory.SCHEMA,
                    Severity.BREAKING,
                    f"{prop_path}.required",
                    f"Property '{name}' changed from optional to required",
                    old_value=False,
                    new_value=True,
                )
            )
        elif was_required and not is_required:
            changes.append(
                make_change(
                    ChangeType.MODIFIED,
                    ChangeCategory.SCHEMA,
                    Severity.INFO,
                    f"{prop_path}.required",
                    f"Property '{name}' changed from required to optional",
                    old_value=True,
                    new_value=False,
                )
            )
        changes.extend(compare_schema(old_prop, new_prop, prop_path))
        return changes

    return diff_mapping(
        old.properties,
        new.properties,
        on_added=added,
        on_removed=removed,
        on_matched=matched,
    )


def _compare_enum_values(
    old: SchemaDefinition,
    new: SchemaDefinition,
    path: str,
) -> list[Change]:
    """Compare the allowed values of two enumerations."""
    return diff_values(
        old.enum_values,
        new.enum_values,
        on_added=lambda value: [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.ENUM_VALUE,
                Severity.INFO,
                f"{path}.enum:{value}",
                f"Enum value '{value}' added",
                new_value=value,
            )
        ],
        on_removed=lambda value: [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.ENUM_VALUE,
                Severity.BREAKING,
                f"{path}.enum:{value}",
                f"Enum value '{value}' removed",
                old_value=value,
            )
        ],
    )
