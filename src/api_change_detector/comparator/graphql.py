"""
GraphQL structural comparator.

Compares two GraphQL schema graphs: named types with their fields,
arguments, enum values, union members and interfaces, plus the root
Query, Mutation and Subscription operations.
"""

import logging
from typing import Callable, Optional

from api_change_detector.comparator.diffing import (
    deprecation_changes,
    diff_keyed,
    diff_mapping,
    diff_values,
    make_change,
    spec_presence_changes,
)
from api_change_detector.models.change import Change, ChangeCategory, ChangeType, Severity
from api_change_detector.models.graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLOperation,
    GraphQLOperationKind,
    GraphQLSchema,
    GraphQLType,
    GraphQLTypeKind,
)

logger = logging.getLogger(__name__)

FIELD_BEARING_KINDS = {
    GraphQLTypeKind.OBJECT,
    GraphQLTypeKind.INPUT_OBJECT,
    GraphQLTypeKind.INTERFACE,
}


def _strip_non_null(signature: str) -> str:
    return signature[:-1] if signature.endswith("!") else signature


def _is_required(argument: GraphQLArgument) -> bool:
    return argument.required or argument.type.endswith("!")


def compare_graphql_schemas(
    old_schema: Optional[GraphQLSchema],
    new_schema: Optional[GraphQLSchema],
) -> list[Change]:
    """
    Compare two GraphQL schemas.

    Args:
        old_schema: The old schema, or None if it did not exist.
        new_schema: The new schema, or None if it was removed.

    Returns:
        Type changes followed by operation changes (queries, mutations,
        subscriptions).
    """
    presence = spec_presence_changes(old_schema, new_schema, "GraphQL", ChangeCategory.TYPE)
    if presence is not None:
        return presence

    changes = compare_types(old_schema.types, new_schema.types)
    for kind in GraphQLOperationKind:
        changes.extend(
            compare_operations(old_schema.operations(kind), new_schema.operations(kind), kind)
        )

    logger.debug("Compared GraphQL schema %s: %d changes", new_schema.name, len(changes))
    return changes


def compare_types(
    old_types: dict[str, GraphQLType],
    new_types: dict[str, GraphQLType],
) -> list[Change]:
    """Compare the named types of two schemas."""

    def added(name: str, gql_type: GraphQLType) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.TYPE,
                Severity.INFO,
                name,
                f"Type '{name}' added",
                new_value=gql_type.kind.value,
            )
        ]

    def removed(name: str, gql_type: GraphQLType) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.TYPE,
                Severity.BREAKING,
                name,
                f"Type '{name}' removed",
                old_value=gql_type.kind.value,
            )
        ]

    return diff_mapping(
        old_types,
        new_types,
        on_added=added,
        on_removed=removed,
        on_matched=lambda name, old, new: compare_type(old, new),
    )


def compare_type(old: GraphQLType, new: GraphQLType) -> list[Change]:
    """
    Compare two versions of one named type.

    A kind change (e.g. OBJECT to ENUM) is reported alone; members of
    types with different kinds are not compared.
    """
    name = new.name
    if old.kind != new.kind:
        return [
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.TYPE,
                Severity.BREAKING,
                name,
                f"Type '{name}' kind changed from {old.kind.value} to {new.kind.value}",
                old_value=old.kind.value,
                new_value=new.kind.value,
            )
        ]

    changes: list[Change] = []

    if new.kind in FIELD_BEARING_KINDS:
        changes.extend(compare_fields(old.fields, new.fields, name))

    if new.kind in (GraphQLTypeKind.OBJECT, GraphQLTypeKind.INTERFACE):
        changes.extend(
            _compare_members(
                old.interfaces,
                new.interfaces,
                ChangeCategory.INTERFACE,
                lambda iface: f"{name} implements {iface}",
                lambda iface: f"Interface '{iface}'",
            )
        )
    elif new.kind == GraphQLTypeKind.UNION:
        changes.extend(
            _compare_members(
                old.possible_types,
                new.possible_types,
                ChangeCategory.UNION_MEMBER,
                lambda member: f"{name}.{member}",
                lambda member: f"Union member '{member}'",
            )
        )
    elif new.kind == GraphQLTypeKind.ENUM:
        changes.extend(
            _compare_members(
                old.enum_values,
                new.enum_values,
                ChangeCategory.ENUM_VALUE,
                lambda value: f"{name}.{value}",
                lambda value: f"Enum value '{value}'",
            )
        )

    return changes


def _compare_members(
    old_members: list[str],
    new_members: list[str],
    category: ChangeCategory,
    path_for: Callable[[str], str],
    label_for: Callable[[str], str],
) -> list[Change]:
    # Additions are INFO, removals BREAKING for every member container.
    return diff_values(
        old_members,
        new_members,
        on_added=lambda member: [
            make_change(
                ChangeType.ADDED,
                category,
                Severity.INFO,
                path_for(member),
                f"{label_for(member)} added",
                new_value=member,
            )
        ],
        on_removed=lambda member: [
            make_change(
                ChangeType.REMOVED,
                category,
                Severity.BREAKING,
                path_for(member),
                f"{label_for(member)} removed",
                old_value=member,
            )
        ],
    )


def compare_fields(
    old_fields: list[GraphQLField],
    new_fields: list[GraphQLField],
    parent: str,
) -> list[Change]:
    """Compare the fields of two versions of a type, matched by name."""

    def added(field: GraphQLField) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.FIELD,
                Severity.INFO,
                f"{parent}.{field.name}",
                f"Field '{field.name}' added",
                new_value=field.type_signature,
            )
        ]

    def removed(field: GraphQLField) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.FIELD,
                Severity.BREAKING,
                f"{parent}.{field.name}",
                f"Field '{field.name}' removed",
                old_value=field.type_signature,
            )
        ]

    return diff_keyed(
        old_fields,
        new_fields,
        key=lambda f: f.name,
        on_added=added,
        on_removed=removed,
        on_matched=lambda old, new: compare_field(old, new, parent),
    )


def compare_field(old: GraphQLField, new: GraphQLField, parent: str) -> list[Change]:
    """Compare two versions of the same field."""
    path = f"{parent}.{new.name}"
    changes: list[Change] = []

    if old.base_type_signature != new.base_type_signature:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.FIELD,
                Severity.BREAKING,
                path,
                f"Field '{new.name}' type changed from {old.type_signature} "
                f"to {new.type_signature}",
                old_value=old.type_signature,
                new_value=new.type_signature,
            )
        )
    elif not old.required and new.required:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.FIELD,
                Severity.DANGEROUS,
                path,
                f"Field '{new.name}' changed from nullable to non-null",
                old_value=old.type_signature,
                new_value=new.type_signature,
            )
        )
    elif old.required and not new.required:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.FIELD,
                Severity.WARNING,
                path,
                f"Field '{new.name}' changed from non-null to nullable",
                old_value=old.type_signature,
                new_value=new.type_signature,
            )
        )

    changes.extend(
        deprecation_changes(
            old.deprecated,
            new.deprecated,
            ChangeCategory.FIELD,
            path,
            f"Field '{new.name}'",
        )
    )
    changes.extend(compare_arguments(old.arguments, new.arguments, path))
    return changes


def compare_arguments(
    old_args: list[GraphQLArgument],
    new_args: list[GraphQLArgument],
    owner: str,
) -> list[Change]:
    """
    Compare the arguments of a field or operation.

    Args:
        old_args: Arguments of the old version.
        new_args: Arguments of the new version.
        owner: Locator of the owning field or operation.

    Returns:
        Detected argument changes, with paths like ``Query.user(id)``.
    """

    def added(arg: GraphQLArgument) -> list[Change]:
        if _is_required(arg) and not arg.has_default:
            severity = Severity.BREAKING
            description = f"Required argument '{arg.name}' added"
        else:
            severity = Severity.INFO
            description = f"Optional argument '{arg.name}' added"
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.PARAMETER,
                severity,
                f"{owner}({arg.name})",
                description,
                new_value=arg.type,
            )
        ]

    def removed(arg: GraphQLArgument) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.PARAMETER,
                Severity.DANGEROUS,
                f"{owner}({arg.name})",
                f"Argument '{arg.name}' removed",
                old_value=arg.type,
            )
        ]

    return diff_keyed(
        old_args,
        new_args,
        key=lambda a: a.name,
        on_added=added,
        on_removed=removed,
        on_matched=lambda old, new: compare_argument(old, new, owner),
    )


def compare_argument(old: GraphQLArgument, new: GraphQLArgument, owner: str) -> list[Change]:
    """Compare two versions of the same argument."""
    path = f"{owner}({new.name})"
    changes: list[Change] = []

    if _strip_non_null(old.type) != _strip_non_null(new.type):
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.PARAMETER,
                Severity.BREAKING,
                path,
                f"Argument '{new.name}' type changed from {old.type} to {new.type}",
                old_value=old.type,
                new_value=new.type,
            )
        )
    elif not _is_required(old) and _is_required(new) and not new.has_default:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.PARAMETER,
                Severity.BREAKING,
                path,
                f"Argument '{new.name}' changed from optional to required",
                old_value=old.type,
                new_value=new.type,
            )
        )

    if old.default_value != new.default_value:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.PARAMETER,
                Severity.DANGEROUS,
                path,
                f"Argument '{new.name}' default value changed from "
                f"{old.default_value} to {new.default_value}",
                old_value=old.default_value,
                new_value=new.default_value,
            )
        )

    return changes


def compare_operations(
    old_ops: dict[str, GraphQLOperation],
    new_ops: dict[str, GraphQLOperation],
    kind: GraphQLOperationKind,
) -> list[Change]:
    """Compare the operations of one root type (Query, Mutation or Subscription)."""
    root = kind.root_name

    def added(name: str, op: GraphQLOperation) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.ENDPOINT,
                Severity.INFO,
                f"{root}.{name}",
                f"{root} '{name}' added",
                new_value=op.return_type,
            )
        ]

    def removed(name: str, op: GraphQLOperation) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.ENDPOINT,
                Severity.BREAKING,
                f"{root}.{name}",
                f"{root} '{name}' removed",
                old_value=op.return_type,
            )
        ]

    return diff_mapping(
        old_ops,
        new_ops,
        on_added=added,
        on_removed=removed,
        on_matched=lambda name, old, new: compare_operation(old, new, f"{root}.{name}"),
    )


def compare_operation(old: GraphQLOperation, new: GraphQLOperation, path: str) -> list[Change]:
    """Compare two versions of the same root operation."""
    changes: list[Change] = []

    if old.return_type != new.return_type:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.ENDPOINT,
                Severity.BREAKING,
                path,
                f"Return type of '{new.name}' changed from {old.return_type} "
                f"to {new.return_type}",
                old_value=old.return_type,
                new_value=new.return_type,
            )
        )

    changes.extend(
        deprecation_changes(
            old.deprecated,
            new.deprecated,
            ChangeCategory.ENDPOINT,
            path,
            f"Operation '{new.name}'",
        )
    )
    changes.extend(compare_arguments(old.arguments, new.arguments, path))
    return changes
