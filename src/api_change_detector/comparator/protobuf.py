"""
Protobuf structural comparator.

Compares two parsed .proto files with wire-compatibility semantics:
fields are identified by name, but their numbers are the wire identity,
so renumbering or reusing a number is always breaking.
"""

import logging
from typing import Optional

from api_change_detector.comparator.diffing import (
    deprecation_changes,
    diff_keyed,
    make_change,
    spec_presence_changes,
)
from api_change_detector.models.change import Change, ChangeCategory, ChangeType, Severity
from api_change_detector.models.protobuf import (
    FieldRule,
    ProtoEnum,
    ProtoEnumValue,
    ProtoField,
    ProtoFile,
    ProtoMessage,
    ProtoRpcMethod,
    ProtoService,
)

logger = logging.getLogger(__name__)

# Scalar types sharing a wire encoding; values round-trip between members
# of the same group (possibly with truncation).
WIRE_COMPATIBLE_GROUPS: list[frozenset[str]] = [
    frozenset({"int32", "uint32", "int64", "uint64", "bool", "enum"}),
    frozenset({"sint32", "sint64"}),
    frozenset({"string", "bytes"}),
    frozenset({"fixed32", "sfixed32"}),
    frozenset({"fixed64", "sfixed64"}),
]


def is_wire_compatible(
    old_type: str,
    new_type: str,
    enum_names: frozenset[str] = frozenset(),
) -> bool:
    """
    Check whether a field type change keeps the wire encoding.

    Args:
        old_type: Previous type name.
        new_type: New type name.
        enum_names: Names of enums known in either file; those fields are
            encoded as varints like ``int32``.

    Returns:
        True if serialized payloads stay readable after the change.
    """
    if old_type == new_type:
        return True

    def wire_name(type_name: str) -> str:
        return "enum" if type_name in enum_names else type_name

    old_wire, new_wire = wire_name(old_type), wire_name(new_type)
    return any(old_wire in group and new_wire in group for group in WIRE_COMPATIBLE_GROUPS)


def _collect_enum_names(proto: ProtoFile) -> set[str]:
    names: set[str] = set()

    def visit_enum(enum: ProtoEnum) -> None:
        names.add(enum.name)
        names.add(enum.qualified_name)

    def visit_message(message: ProtoMessage) -> None:
        for enum in message.nested_enums:
            visit_enum(enum)
        for nested in message.nested_messages:
            visit_message(nested)

    for enum in proto.enums:
        visit_enum(enum)
    for message in proto.messages:
        visit_message(message)
    return names


def compare_proto_files(
    old_file: Optional[ProtoFile],
    new_file: Optional[ProtoFile],
) -> list[Change]:
    """
    Compare two versions of a .proto file.

    Args:
        old_file: The old file, or None if it did not exist.
        new_file: The new file, or None if it was removed.

    Returns:
        File-level changes (package, syntax), then services, messages
        and enums.
    """
    presence = spec_presence_changes(old_file, new_file, "Protobuf", ChangeCategory.PACKAGE)
    if presence is not None:
        return presence

    changes: list[Change] = []

    if old_file.package != new_file.package:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.PACKAGE,
                Severity.BREAKING,
                "package",
                f"Package changed from {old_file.package} to {new_file.package}",
                old_value=old_file.package,
                new_value=new_file.package,
            )
        )

    if old_file.syntax != new_file.syntax:
        # proto2 -> proto3 drops required/default semantics; the reverse adds them.
        severity = Severity.WARNING if new_file.syntax == "proto3" else Severity.BREAKING
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.SCHEMA,
                severity,
                "syntax",
                f"Syntax changed from {old_file.syntax} to {new_file.syntax}",
                old_value=old_file.syntax,
                new_value=new_file.syntax,
            )
        )

    enum_names = frozenset(_collect_enum_names(old_file) | _collect_enum_names(new_file))
    package = new_file.package

    changes.extend(compare_services(old_file.services, new_file.services, package))
    changes.extend(compare_messages(old_file.messages, new_file.messages, package, enum_names))
    changes.extend(compare_enums(old_file.enums, new_file.enums, package))

    logger.debug("Compared proto file %s: %d changes", new_file.api_name, len(changes))
    return changes


def _qualify(prefix: Optional[str], name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def service_path(package: Optional[str], service: str) -> str:
    """Locator of a service, e.g. ``/pkg.UserService``."""
    return f"/{_qualify(package, service)}"


def compare_services(
    old_services: list[ProtoService],
    new_services: list[ProtoService],
    package: Optional[str] = None,
) -> list[Change]:
    """Compare the services of two files, matched by name."""

    def added(service: ProtoService) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.SERVICE,
                Severity.INFO,
                service_path(package, service.name),
                f"Service '{service.name}' added",
            )
        ]

    def removed(service: ProtoService) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.SERVICE,
                Severity.BREAKING,
                service_path(package, service.name),
                f"Service '{service.name}' removed",
            )
        ]

    return diff_keyed(
        old_services,
        new_services,
        key=lambda s: s.name,
        on_added=added,
        on_removed=removed,
        on_matched=lambda old, new: compare_service(old, new, package),
    )


def compare_service(
    old: ProtoService,
    new: ProtoService,
    package: Optional[str] = None,
) -> list[Change]:
    """Compare two versions of one service and its RPC methods."""
    path = service_path(package, new.name)
    changes = deprecation_changes(
        old.deprecated,
        new.deprecated,
        ChangeCategory.SERVICE,
        path,
        f"Service '{new.name}'",
    )

    def added(method: ProtoRpcMethod) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.RPC_METHOD,
                Severity.INFO,
                f"{path}/{method.name}",
                f"RPC method '{method.name}' added",
            )
        ]

    def removed(method: ProtoRpcMethod) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.RPC_METHOD,
                Severity.BREAKING,
                f"{path}/{method.name}",
                f"RPC method '{method.name}' removed",
            )
        ]

    changes.extend(
        diff_keyed(
            old.methods,
            new.methods,
            key=lambda m: m.name,
            on_added=added,
            on_removed=removed,
            on_matched=lambda old_m, new_m: compare_rpc_method(old_m, new_m, f"{path}/{new_m.name}"),
        )
    )
    return changes


def compare_rpc_method(old: ProtoRpcMethod, new: ProtoRpcMethod, path: str) -> list[Change]:
    """
    Compare two versions of one RPC method.

    A streaming mode change is reported even when the message types
    are unchanged.
    """
    changes: list[Change] = []

    if old.input_type != new.input_type:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.RPC_METHOD,
                Severity.BREAKING,
                path,
                f"Input type of '{new.name}' changed from {old.input_type} to {new.input_type}",
                old_value=old.input_type,
                new_value=new.input_type,
            )
        )

    if old.output_type != new.output_type:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.RPC_METHOD,
                Severity.BREAKING,
                path,
                f"Output type of '{new.name}' changed from {old.output_type} "
                f"to {new.output_type}",
                old_value=old.output_type,
                new_value=new.output_type,
            )
        )

    if old.streaming_mode != new.streaming_mode:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.STREAMING_TYPE,
                Severity.BREAKING,
                path,
                f"Streaming mode of '{new.name}' changed from "
                f"{old.streaming_mode.value} to {new.streaming_mode.value}",
                old_value=old.streaming_mode.value,
                new_value=new.streaming_mode.value,
            )
        )

    changes.extend(
        deprecation_changes(
            old.deprecated,
            new.deprecated,
            ChangeCategory.RPC_METHOD,
            path,
            f"RPC method '{new.name}'",
        )
    )
    return changes


def compare_messages(
    old_messages: list[ProtoMessage],
    new_messages: list[ProtoMessage],
    prefix: Optional[str] = None,
    enum_names: frozenset[str] = frozenset(),
) -> list[Change]:
    """
    Compare the messages declared at one level (file or parent message).

    Args:
        old_messages: Messages of the old version.
        new_messages: Messages of the new version.
        prefix: Package or parent message name used to qualify paths.
        enum_names: Enum type names, for wire compatibility checks.

    Returns:
        Detected message changes, including nested declarations.
    """

    def added(message: ProtoMessage) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.MESSAGE,
                Severity.INFO,
                _qualify(prefix, message.name),
                f"Message '{message.name}' added",
            )
        ]

    def removed(message: ProtoMessage) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.MESSAGE,
                Severity.BREAKING,
                _qualify(prefix, message.name),
                f"Message '{message.name}' removed",
            )
        ]

    return diff_keyed(
        old_messages,
        new_messages,
        key=lambda m: m.name,
        on_added=added,
        on_removed=removed,
        on_matched=lambda old, new: compare_message(
            old, new, _qualify(prefix, new.name), enum_names
        ),
    )


def compare_message(
    old: ProtoMessage,
    new: ProtoMessage,
    path: str,
    enum_names: frozenset[str] = frozenset(),
) -> list[Change]:
    """Compare two versions of one message."""
    changes = deprecation_changes(
        old.deprecated,
        new.deprecated,
        ChangeCategory.MESSAGE,
        path,
        f"Message '{new.name}'",
    )

    old_numbers = {f.number: f for f in old.fields}
    new_names = {f.name for f in new.fields}

    def added(field: ProtoField) -> list[Change]:
        field_path = f"{path}.{field.name}"
        reused = old_numbers.get(field.number)
        if reused is not None and reused.name not in new_names:
            return [
                make_change(
                    ChangeType.ADDED,
                    ChangeCategory.FIELD_NUMBER,
                    Severity.BREAKING,
                    field_path,
                    f"Field number {field.number} reused by '{field.name}' "
                    f"(previously '{reused.name}')",
                    old_value=reused.name,
                    new_value=field.name,
                )
            ]
        required = field.rule == FieldRule.REQUIRED
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.FIELD,
                Severity.BREAKING if required else Severity.INFO,
                field_path,
                f"{'Required field' if required else 'Field'} '{field.name}' added",
                new_value=field.number,
            )
        ]

    def removed(field: ProtoField) -> list[Change]:
        required = field.rule == FieldRule.REQUIRED
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.FIELD,
                Severity.BREAKING if required else Severity.DANGEROUS,
                f"{path}.{field.name}",
                f"{'Required field' if required else 'Field'} '{field.name}' removed",
                old_value=field.number,
            )
        ]

    changes.extend(
        diff_keyed(
            old.fields,
            new.fields,
            key=lambda f: f.name,
            on_added=added,
            on_removed=removed,
            on_matched=lambda old_f, new_f: compare_field(
                old_f, new_f, f"{path}.{new_f.name}", enum_names
            ),
        )
    )

    old_reserved = set(old.reserved_numbers)
    for number in new.reserved_numbers:
        if number in old_reserved:
            continue
        changes.append(
            make_change(
                ChangeType.ADDED,
                ChangeCategory.FIELD_NUMBER,
                Severity.INFO,
                f"{path}.reserved:{number}",
                f"Field number {number} reserved",
                new_value=number,
            )
        )

    changes.extend(compare_messages(old.nested_messages, new.nested_messages, path, enum_names))
    changes.extend(compare_enums(old.nested_enums, new.nested_enums, path))
    return changes


def compare_field(
    old: ProtoField,
    new: ProtoField,
    path: str,
    enum_names: frozenset[str] = frozenset(),
) -> list[Change]:
    """
    Compare two versions of the same (same-name) field.

    Args:
        old: The field in the old message.
        new: The field in the new message.
        path: Locator of the field, e.g. ``pkg.User.name``.
        enum_names: Enum type names, for wire compatibility checks.

    Returns:
        Detected field changes.
    """
    changes: list[Change] = []

    if old.number != new.number:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.FIELD_NUMBER,
                Severity.BREAKING,
                path,
                f"Field number changed from {old.number} to {new.number}",
                old_value=old.number,
                new_value=new.number,
            )
        )

    if old.type != new.type:
        compatible = is_wire_compatible(old.type, new.type, enum_names)
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.FIELD,
                Severity.DANGEROUS if compatible else Severity.BREAKING,
                f"{path}.type",
                f"Field '{new.name}' type changed from {old.type} to {new.type}"
                + ("" if compatible else " (wire incompatible)"),
                old_value=old.type,
                new_value=new.type,
            )
        )

    if old.is_map or new.is_map:
        if (old.map_key_type, old.map_value_type) != (new.map_key_type, new.map_value_type):
            changes.append(
                make_change(
                    ChangeType.MODIFIED,
                    ChangeCategory.FIELD,
                    Severity.BREAKING,
                    f"{path}.type",
                    f"Map field '{new.name}' changed from "
                    f"map<{old.map_key_type}, {old.map_value_type}> to "
                    f"map<{new.map_key_type}, {new.map_value_type}>",
                    old_value=f"{old.map_key_type},{old.map_value_type}",
                    new_value=f"{new.map_key_type},{new.map_value_type}",
                )
            )

    rule_change = _rule_change_severity(old.rule, new.rule)
    if rule_change is not None:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.FIELD,
                rule_change,
                f"{path}.rule",
                f"Field '{new.name}' rule changed from {old.rule.value} to {new.rule.value}",
                old_value=old.rule.value,
                new_value=new.rule.value,
            )
        )

    if old.default_value != new.default_value:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.FIELD,
                Severity.DANGEROUS,
                f"{path}.default",
                f"Field '{new.name}' default value changed from {old.default_value} "
                f"to {new.default_value}",
                old_value=old.default_value,
                new_value=new.default_value,
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
    return changes


def _rule_change_severity(old: FieldRule, new: FieldRule) -> Optional[Severity]:
    if old == new:
        return None
    if new == FieldRule.REQUIRED:
        return Severity.BREAKING
    if old == FieldRule.REPEATED:
        return Severity.BREAKING
    if new == FieldRule.REPEATED:
        return Severity.DANGEROUS
    if old == FieldRule.REQUIRED:
        return Severity.INFO
    # SINGULAR <-> OPTIONAL only toggles presence tracking
    return Severity.INFO


def compare_enums(
    old_enums: list[ProtoEnum],
    new_enums: list[ProtoEnum],
    prefix: Optional[str] = None,
) -> list[Change]:
    """Compare the enums declared at one level (file or parent message)."""

    def added(enum: ProtoEnum) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.TYPE,
                Severity.INFO,
                _qualify(prefix, enum.name),
                f"Enum '{enum.name}' added",
            )
        ]

    def removed(enum: ProtoEnum) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.TYPE,
                Severity.BREAKING,
                _qualify(prefix, enum.name),
                f"Enum '{enum.name}' removed",
            )
        ]

    return diff_keyed(
        old_enums,
        new_enums,
        key=lambda e: e.name,
        on_added=added,
        on_removed=removed,
        on_matched=lambda old, new: compare_enum(old, new, _qualify(prefix, new.name)),
    )


def compare_enum(old: ProtoEnum, new: ProtoEnum, path: str) -> list[Change]:
    """Compare two versions of one enum and its values."""
    changes = deprecation_changes(
        old.deprecated,
        new.deprecated,
        ChangeCategory.TYPE,
        path,
        f"Enum '{new.name}'",
    )

    old_by_number = {v.number: v.name for v in old.values}
    new_names = {v.name for v in new.values}

    def added(value: ProtoEnumValue) -> list[Change]:
        previous = old_by_number.get(value.number)
        if previous is not None and previous not in new_names:
            return [
                make_change(
                    ChangeType.ADDED,
                    ChangeCategory.ENUM_VALUE,
                    Severity.BREAKING,
                    f"{path}.{value.name}",
                    f"Enum number {value.number} reused by '{value.name}' "
                    f"(previously '{previous}')",
                    old_value=previous,
                    new_value=value.name,
                )
            ]
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.ENUM_VALUE,
                Severity.INFO,
                f"{path}.{value.name}",
                f"Enum value '{value.name}' added",
                new_value=value.number,
            )
        ]

    def removed(value: ProtoEnumValue) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.ENUM_VALUE,
                Severity.BREAKING,
                f"{path}.{value.name}",
                f"Enum value '{value.name}' removed",
                old_value=value.number,
            )
        ]

    def matched(old_value: ProtoEnumValue, new_value: ProtoEnumValue) -> list[Change]:
        if old_value.number == new_value.number:
            return []
        return [
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.ENUM_VALUE,
                Severity.BREAKING,
                f"{path}.{new_value.name}",
                f"Enum value '{new_value.name}' number changed from "
                f"{old_value.number} to {new_value.number}",
                old_value=old_value.number,
                new_value=new_value.number,
            )
        ]

    changes.extend(
        diff_keyed(
            old.values,
            new.values,
            key=lambda v: v.name,
            on_added=added,
            on_removed=removed,
            on_matched=matched,
        )
    )
    return changes
