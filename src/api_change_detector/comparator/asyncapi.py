"""
AsyncAPI structural comparator.

Compares two AsyncAPI documents: servers, channels with their
operations and bindings, component messages and v3 operations.
Message payloads are compared with the generic schema comparator.
"""

import logging
from typing import Any, Optional

from api_change_detector.comparator.diffing import (
    deprecation_changes,
    diff_mapping,
    diff_values,
    make_change,
    spec_presence_changes,
)
from api_change_detector.comparator.schema import compare_schema, compare_schemas
from api_change_detector.models.asyncapi import (
    AsyncApiSpec,
    AsyncChannel,
    AsyncMessage,
    AsyncOperation,
    AsyncServer,
    ServerVariable,
)
from api_change_detector.models.change import Change, ChangeCategory, ChangeType, Severity

logger = logging.getLogger(__name__)


def compare_asyncapi_specs(
    old_spec: Optional[AsyncApiSpec],
    new_spec: Optional[AsyncApiSpec],
) -> list[Change]:
    """
    Compare two AsyncAPI documents.

    Args:
        old_spec: The old document, or None if it did not exist.
        new_spec: The new document, or None if it was removed.

    Returns:
        Version changes, then servers, channels, operations, messages
        and component schemas.
    """
    presence = spec_presence_changes(old_spec, new_spec, "AsyncAPI", ChangeCategory.ENDPOINT)
    if presence is not None:
        return presence

    changes: list[Change] = []

    if old_spec.major_version != new_spec.major_version:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.SCHEMA,
                Severity.BREAKING,
                "asyncapi",
                f"AsyncAPI version changed from {old_spec.asyncapi_version} "
                f"to {new_spec.asyncapi_version}",
                old_value=old_spec.asyncapi_version,
                new_value=new_spec.asyncapi_version,
            )
        )

    if old_spec.api_version != new_spec.api_version:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.SCHEMA,
                Severity.INFO,
                "info.version",
                f"API version changed from {old_spec.api_version} to {new_spec.api_version}",
                old_value=old_spec.api_version,
                new_value=new_spec.api_version,
            )
        )

    changes.extend(compare_servers(old_spec.servers, new_spec.servers))
    changes.extend(compare_channels(old_spec.channels, new_spec.channels))
    changes.extend(compare_operations(old_spec.operations, new_spec.operations))
    changes.extend(compare_messages(old_spec.messages, new_spec.messages))
    changes.extend(compare_schemas(old_spec.schemas, new_spec.schemas))

    logger.debug("Compared AsyncAPI document %s: %d changes", new_spec.title, len(changes))
    return changes


def compare_servers(
    old_servers: dict[str, AsyncServer],
    new_servers: dict[str, AsyncServer],
) -> list[Change]:
    """Compare the servers of two documents, matched by name."""

    def added(name: str, server: AsyncServer) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.SERVER,
                Severity.INFO,
                f"server:{name}",
                f"Server '{name}' added",
                new_value=server.url,
            )
        ]

    def removed(name: str, server: AsyncServer) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.SERVER,
                Severity.BREAKING,
                f"server:{name}",
                f"Server '{name}' removed",
                old_value=server.url,
            )
        ]

    return diff_mapping(
        old_servers,
        new_servers,
        on_added=added,
        on_removed=removed,
        on_matched=lambda name, old, new: compare_server(old, new, f"server:{name}"),
    )


def compare_server(old: AsyncServer, new: AsyncServer, path: str) -> list[Change]:
    """Compare two versions of one server."""
    changes: list[Change] = []

    if old.url != new.url:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.SERVER,
                Severity.WARNING,
                f"{path}.url",
                f"Server URL changed from {old.url} to {new.url}",
                old_value=old.url,
                new_value=new.url,
            )
        )

    if old.protocol.lower() != new.protocol.lower():
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.PROTOCOL,
                Severity.BREAKING,
                f"{path}.protocol",
                f"Server protocol changed from {old.protocol} to {new.protocol}",
                old_value=old.protocol,
                new_value=new.protocol,
            )
        )
    elif old.protocol_version != new.protocol_version:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.PROTOCOL,
                Severity.WARNING,
                f"{path}.protocolVersion",
                f"Protocol version changed from {old.protocol_version} "
                f"to {new.protocol_version}",
                old_value=old.protocol_version,
                new_value=new.protocol_version,
            )
        )

    changes.extend(
        deprecation_changes(
            old.deprecated,
            new.deprecated,
            ChangeCategory.SERVER,
            path,
            f"Server '{new.name}'",
        )
    )
    changes.extend(_compare_server_variables(old.variables, new.variables, path))
    return changes


def _compare_server_variables(
    old_vars: dict[str, ServerVariable],
    new_vars: dict[str, ServerVariable],
    path: str,
) -> list[Change]:
    def added(name: str, variable: ServerVariable) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.SERVER,
                Severity.INFO,
                f"{path}.variables.{name}",
                f"Server variable '{name}' added",
            )
        ]

    def removed(name: str, variable: ServerVariable) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.SERVER,
                Severity.DANGEROUS,
                f"{path}.variables.{name}",
                f"Server variable '{name}' removed",
            )
        ]

    def matched(name: str, old: ServerVariable, new: ServerVariable) -> list[Change]:
        var_path = f"{path}.variables.{name}"
        changes: list[Change] = []
        if old.default_value != new.default_value:
            changes.append(
                make_change(
                    ChangeType.MODIFIED,
                    ChangeCategory.SERVER,
                    Severity.WARNING,
                    f"{var_path}.default",
                    f"Default of server variable '{name}' changed from "
                    f"{old.default_value} to {new.default_value}",
                    old_value=old.default_value,
                    new_value=new.default_value,
                )
            )
        changes.extend(
            diff_values(
                old.allowed_values,
                new.allowed_values,
                on_added=lambda value: [],
                on_removed=lambda value: [
                    make_change(
                        ChangeType.REMOVED,
                        ChangeCategory.SERVER,
                        Severity.BREAKING,
                        f"{var_path}.enum:{value}",
                        f"Allowed value '{value}' removed from server variable '{name}'",
                        old_value=value,
                    )
                ],
            )
        )
        return changes

    return diff_mapping(old_vars, new_vars, on_added=added, on_removed=removed, on_matched=matched)


def compare_channels(
    old_channels: dict[str, AsyncChannel],
    new_channels: dict[str, AsyncChannel],
) -> list[Change]:
    """Compare the channels of two documents, matched by name."""

    def added(name: str, channel: AsyncChannel) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.CHANNEL,
                Severity.INFO,
                f"channel:{name}",
                f"Channel '{name}' added",
            )
        ]

    def removed(name: str, channel: AsyncChannel) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.CHANNEL,
                Severity.BREAKING,
                f"channel:{name}",
                f"Channel '{name}' removed",
            )
        ]

    return diff_mapping(
        old_channels,
        new_channels,
        on_added=added,
        on_removed=removed,
        on_matched=lambda name, old, new: compare_channel(old, new, f"channel:{name}"),
    )


def compare_channel(old: AsyncChannel, new: AsyncChannel, path: str) -> list[Change]:
    """Compare two versions of one channel."""
    changes: list[Change] = []

    if old.address != new.address:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.CHANNEL,
                Severity.BREAKING,
                f"{path}.address",
                f"Channel address changed from {old.address} to {new.address}",
                old_value=old.address,
                new_value=new.address,
            )
        )

    changes.extend(
        deprecation_changes(
            old.deprecated,
            new.deprecated,
            ChangeCategory.CHANNEL,
            path,
            f"Channel '{new.name}'",
        )
    )

    if old.description != new.description:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.CHANNEL,
                Severity.INFO,
                f"{path}.description",
                "Channel description changed",
                old_value=old.description,
                new_value=new.description,
            )
        )

    changes.extend(_compare_channel_operation(old.publish, new.publish, f"{path}.publish"))
    changes.extend(_compare_channel_operation(old.subscribe, new.subscribe, f"{path}.subscribe"))

    changes.extend(
        diff_values(
            old.parameters,
            new.parameters,
            on_added=lambda param: [
                make_change(
                    ChangeType.ADDED,
                    ChangeCategory.PARAMETER,
                    Severity.BREAKING,
                    f"{path}.parameters.{param}",
                    f"Channel parameter '{param}' added",
                )
            ],
            on_removed=lambda param: [
                make_change(
                    ChangeType.REMOVED,
                    ChangeCategory.PARAMETER,
                    Severity.BREAKING,
                    f"{path}.parameters.{param}",
                    f"Channel parameter '{param}' removed",
                )
            ],
        )
    )
    changes.extend(_compare_bindings(old.bindings, new.bindings, path))
    return changes


def _compare_channel_operation(
    old: Optional[AsyncOperation],
    new: Optional[AsyncOperation],
    path: str,
) -> list[Change]:
    if old is None and new is None:
        return []
    if old is None:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.OPERATION,
                Severity.INFO,
                path,
                f"Operation {new.action.value.lower()} added",
            )
        ]
    if new is None:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.OPERATION,
                Severity.BREAKING,
                path,
                f"Operation {old.action.value.lower()} removed",
            )
        ]

    changes: list[Change] = []
    if old.operation_id != new.operation_id:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.OPERATION,
                Severity.WARNING,
                f"{path}.operationId",
                f"Operation id changed from {old.operation_id} to {new.operation_id}",
                old_value=old.operation_id,
                new_value=new.operation_id,
            )
        )
    changes.extend(
        deprecation_changes(
            old.deprecated,
            new.deprecated,
            ChangeCategory.OPERATION,
            path,
            "Operation",
        )
    )
    changes.extend(_compare_operation_message(old.message, new.message, f"{path}.message"))
    return changes


def _compare_operation_message(
    old: Optional[AsyncMessage],
    new: Optional[AsyncMessage],
    path: str,
) -> list[Change]:
    if old is None and new is None:
        return []
    if old is None:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.MESSAGE,
                Severity.INFO,
                path,
                f"Message '{new.name}' added to operation",
            )
        ]
    if new is None:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.MESSAGE,
                Severity.BREAKING,
                path,
                f"Message '{old.name}' removed from operation",
            )
        ]
    return compare_message(old, new, path)


def _compare_bindings(old: dict[str, Any], new: dict[str, Any], path: str) -> list[Change]:
    def matched(protocol: str, old_binding: Any, new_binding: Any) -> list[Change]:
        if old_binding == new_binding:
            return []
        return [
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.CHANNEL,
                Severity.WARNING,
                f"{path}.bindings.{protocol}",
                f"Binding '{protocol}' changed",
                old_value=old_binding,
                new_value=new_binding,
            )
        ]

    return diff_mapping(
        old,
        new,
        on_added=lambda protocol, binding: [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.CHANNEL,
                Severity.INFO,
                f"{path}.bindings.{protocol}",
                f"Binding '{protocol}' added",
            )
        ],
        on_removed=lambda protocol, binding: [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.CHANNEL,
                Severity.DANGEROUS,
                f"{path}.bindings.{protocol}",
                f"Binding '{protocol}' removed",
            )
        ],
        on_matched=matched,
    )


def compare_operations(
    old_ops: dict[str, AsyncOperation],
    new_ops: dict[str, AsyncOperation],
) -> list[Change]:
    """Compare AsyncAPI 3.x top-level operations, matched by name."""

    def added(name: str, op: AsyncOperation) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.OPERATION,
                Severity.INFO,
                f"operation:{name}",
                f"Operation '{name}' added",
            )
        ]

    def removed(name: str, op: AsyncOperation) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.OPERATION,
                Severity.BREAKING,
                f"operation:{name}",
                f"Operation '{name}' removed",
            )
        ]

    def matched(name: str, old: AsyncOperation, new: AsyncOperation) -> list[Change]:
        path = f"operation:{name}"
        changes: list[Change] = []
        if old.action != new.action:
            changes.append(
                make_change(
                    ChangeType.MODIFIED,
                    ChangeCategory.OPERATION,
                    Severity.BREAKING,
                    f"{path}.action",
                    f"Operation '{name}' action changed from {old.action.value} "
                    f"to {new.action.value}",
                    old_value=old.action.value,
                    new_value=new.action.value,
                )
            )
        if old.channel_ref != new.channel_ref:
            changes.append(
                make_change(
                    ChangeType.MODIFIED,
                    ChangeCategory.OPERATION,
                    Severity.BREAKING,
                    f"{path}.channel",
                    f"Operation '{name}' channel changed from {old.channel_ref} "
                    f"to {new.channel_ref}",
                    old_value=old.channel_ref,
                    new_value=new.channel_ref,
                )
            )
        changes.extend(
            deprecation_changes(
                old.deprecated,
                new.deprecated,
                ChangeCategory.OPERATION,
                path,
                f"Operation '{name}'",
            )
        )
        changes.extend(_compare_operation_message(old.message, new.message, f"{path}.message"))
        return changes

    return diff_mapping(old_ops, new_ops, on_added=added, on_removed=removed, on_matched=matched)


def compare_messages(
    old_messages: dict[str, AsyncMessage],
    new_messages: dict[str, AsyncMessage],
) -> list[Change]:
    """Compare component messages, matched by name."""

    def added(name: str, message: AsyncMessage) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.MESSAGE,
                Severity.INFO,
                f"message:{name}",
                f"Message '{name}' added",
            )
        ]

    def removed(name: str, message: AsyncMessage) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.MESSAGE,
                Severity.BREAKING,
                f"message:{name}",
                f"Message '{name}' removed",
            )
        ]

    return diff_mapping(
        old_messages,
        new_messages,
        on_added=added,
        on_removed=removed,
        on_matched=lambda name, old, new: compare_message(old, new, f"message:{name}"),
    )


def compare_message(old: AsyncMessage, new: AsyncMessage, path: str) -> list[Change]:
    """
    Compare two versions of one message.

    Args:
        old: The old message.
        new: The new message.
        path: Locator of the message.

    Returns:
        Envelope changes (content type, schema format, correlation id),
        then payload and header changes.
    """
    changes: list[Change] = []

    if old.content_type != new.content_type:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.MESSAGE,
                Severity.BREAKING,
                f"{path}.contentType",
                f"Content type changed from {old.content_type} to {new.content_type}",
                old_value=old.content_type,
                new_value=new.content_type,
            )
        )

    if old.schema_format != new.schema_format:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.MESSAGE,
                Severity.BREAKING,
                f"{path}.schemaFormat",
                f"Schema format changed from {old.schema_format} to {new.schema_format}",
                old_value=old.schema_format,
                new_value=new.schema_format,
            )
        )

    changes.extend(
        deprecation_changes(
            old.deprecated,
            new.deprecated,
            ChangeCategory.MESSAGE,
            path,
            f"Message '{new.name}'",
        )
    )

    if old.correlation_id != new.correlation_id:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.MESSAGE,
                Severity.DANGEROUS,
                f"{path}.correlationId",
                f"Correlation id changed from {old.correlation_id} to {new.correlation_id}",
                old_value=old.correlation_id,
                new_value=new.correlation_id,
            )
        )

    payload_path = f"{path}.payload"
    if old.payload is None and new.payload is not None:
        changes.append(
            make_change(
                ChangeType.ADDED,
                ChangeCategory.SCHEMA,
                Severity.INFO,
                payload_path,
                "Payload schema added",
            )
        )
    elif old.payload is not None and new.payload is None:
        changes.append(
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.SCHEMA,
                Severity.BREAKING,
                payload_path,
                "Payload schema removed",
            )
        )
    elif old.payload is not None and new.payload is not None:
        changes.extend(compare_schema(old.payload, new.payload, payload_path))

    headers_path = f"{path}.headers"
    if old.headers is None and new.headers is not None:
        changes.append(
            make_change(
                ChangeType.ADDED,
                ChangeCategory.SCHEMA,
                Severity.INFO,
                headers_path,
                "Headers schema added",
            )
        )
    elif old.headers is not None and new.headers is None:
        changes.append(
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.SCHEMA,
                Severity.DANGEROUS,
                headers_path,
                "Headers schema removed",
            )
        )
    elif old.headers is not None and new.headers is not None:
        changes.extend(compare_schema(old.headers, new.headers, headers_path))

    return changes
