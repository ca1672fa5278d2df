"""
Unit tests for the protobuf structural comparator.
"""

import pytest

from api_change_detector.comparator.protobuf import (
    compare_enum,
    compare_message,
    compare_proto_files,
    is_wire_compatible,
)
from api_change_detector.models.change import ChangeCategory, ChangeType, Severity
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


def _message(*fields: ProtoField, **overrides) -> ProtoMessage:
    return ProtoMessage(name="User", fields=list(fields), **overrides)


class TestCompareProtoFiles:
    """Tests for compare_proto_files."""

    def test_identical(self, proto_file: ProtoFile) -> None:
        """Test that comparing a file to itself yields no changes."""
        assert compare_proto_files(proto_file, proto_file) == []

    def test_field_renumbered(self, proto_file: ProtoFile) -> None:
        """Test moving User.name from number 2 to 3."""
        renumbered = _message(
            ProtoField(name="id", number=1, type="int64"),
            ProtoField(name="name", number=3, type="string"),
        )
        new = proto_file.model_copy(update={"messages": [renumbered]})

        changes = compare_proto_files(proto_file, new)

        assert len(changes) == 1
        assert changes[0].category == ChangeCategory.FIELD_NUMBER
        assert changes[0].severity == Severity.BREAKING
        assert changes[0].path == "acme.users.User.name"

    def test_package_changed(self, proto_file: ProtoFile) -> None:
        """Test renaming the package."""
        new = proto_file.model_copy(update={"package": "acme.accounts"})

        changes = compare_proto_files(proto_file, new)

        assert changes[0].category == ChangeCategory.PACKAGE
        assert changes[0].severity == Severity.BREAKING

    def test_rpc_method_removed(self, proto_file: ProtoFile) -> None:
        """Test removing an RPC method."""
        service = proto_file.services[0].model_copy(update={"methods": []})
        new = proto_file.model_copy(update={"services": [service]})

        changes = compare_proto_files(proto_file, new)

        assert len(changes) == 1
        assert changes[0].category == ChangeCategory.RPC_METHOD
        assert changes[0].severity == Severity.BREAKING
        assert changes[0].path == "/acme.users.UserService/GetUser"

    def test_streaming_mode_changed(self, proto_file: ProtoFile) -> None:
        """Test turning a unary call into a server stream."""
        method = ProtoRpcMethod(
            name="GetUser",
            input_type="GetUserRequest",
            output_type="User",
            server_streaming=True,
        )
        service = ProtoService(name="UserService", package="acme.users", methods=[method])
        new = proto_file.model_copy(update={"services": [service]})

        changes = compare_proto_files(proto_file, new)

        assert len(changes) == 1
        assert changes[0].category == ChangeCategory.STREAMING_TYPE
        assert changes[0].severity == Severity.BREAKING

    def test_service_added(self, proto_file: ProtoFile) -> None:
        """Test adding a service."""
        new = proto_file.model_copy(
            update={"services": proto_file.services + [ProtoService(name="AdminService")]}
        )

        changes = compare_proto_files(proto_file, new)

        assert len(changes) == 1
        assert changes[0].category == ChangeCategory.SERVICE
        assert changes[0].severity == Severity.INFO

    def test_file_removed(self, proto_file: ProtoFile) -> None:
        """Test comparing against a missing new file."""
        changes = compare_proto_files(proto_file, None)

        assert len(changes) == 1
        assert changes[0].category == ChangeCategory.PACKAGE
        assert changes[0].severity == Severity.BREAKING


class TestCompareMessage:
    """Tests for compare_message."""

    def test_field_type_wire_compatible(self) -> None:
        """Test a type change within the same wire encoding."""
        changes = compare_message(
            _message(ProtoField(name="id", number=1, type="int32")),
            _message(ProtoField(name="id", number=1, type="int64")),
            "User",
        )

        assert len(changes) == 1
        assert changes[0].severity == Severity.DANGEROUS
        assert changes[0].path == "User.id.type"

    def test_field_type_wire_incompatible(self) -> None:
        """Test a type change across wire encodings."""
        changes = compare_message(
            _message(ProtoField(name="id", number=1, type="int64")),
            _message(ProtoField(name="id", number=1, type="string")),
            "User",
        )

        assert len(changes) == 1
        assert changes[0].severity == Severity.BREAKING
        assert "wire incompatible" in changes[0].description

    def test_field_number_reused(self) -> None:
        """Test a removed field's number being taken by a new field."""
        changes = compare_message(
            _message(ProtoField(name="name", number=2, type="string")),
            _message(ProtoField(name="title", number=2, type="string")),
            "User",
        )

        assert [(c.category, c.type, c.severity) for c in changes] == [
            (ChangeCategory.FIELD_NUMBER, ChangeType.ADDED, Severity.BREAKING),
            (ChangeCategory.FIELD, ChangeType.REMOVED, Severity.DANGEROUS),
        ]

    def test_optional_field_added(self) -> None:
        """Test adding a new optional field."""
        changes = compare_message(
            _message(),
            _message(ProtoField(name="email", number=3, type="string")),
            "User",
        )

        assert len(changes) == 1
        assert changes[0].category == ChangeCategory.FIELD
        assert changes[0].severity == Severity.INFO

    def test_required_field_removed(self) -> None:
        """Test removing a proto2 required field."""
        changes = compare_message(
            _message(ProtoField(name="id", number=1, type="int64", rule=FieldRule.REQUIRED)),
            _message(),
            "User",
        )

        assert changes[0].severity == Severity.BREAKING

    @pytest.mark.parametrize(
        "old_rule,new_rule,expected",
        [
            (FieldRule.OPTIONAL, FieldRule.REQUIRED, Severity.BREAKING),
            (FieldRule.REQUIRED, FieldRule.OPTIONAL, Severity.INFO),
            (FieldRule.REPEATED, FieldRule.SINGULAR, Severity.BREAKING),
            (FieldRule.SINGULAR, FieldRule.REPEATED, Severity.DANGEROUS),
            (FieldRule.REQUIRED, FieldRule.REPEATED, Severity.DANGEROUS),
            (FieldRule.SINGULAR, FieldRule.OPTIONAL, Severity.INFO),
        ],
    )
    def test_rule_changes(self, old_rule: FieldRule, new_rule: FieldRule, expected: Severity) -> None:
        """Test field cardinality changes."""
        changes = compare_message(
            _message(ProtoField(name="tags", number=4, type="string", rule=old_rule)),
            _message(ProtoField(name="tags", number=4, type="string", rule=new_rule)),
            "User",
        )

        assert len(changes) == 1
        assert changes[0].severity == expected

    def test_number_reserved(self) -> None:
        """Test reserving a field number."""
        changes = compare_message(_message(), _message(reserved_numbers=[7]), "User")

        assert len(changes) == 1
        assert changes[0].path == "User.reserved:7"
        assert changes[0].severity == Severity.INFO

    def test_nested_message_removed(self) -> None:
        """Test removing a nested message."""
        changes = compare_message(
            _message(nested_messages=[ProtoMessage(name="Address")]),
            _message(),
            "User",
        )

        assert len(changes) == 1
        assert changes[0].category == ChangeCategory.MESSAGE
        assert changes[0].path == "User.Address"


class TestCompareEnum:
    """Tests for compare_enum."""

    def test_value_removed_and_added(self) -> None:
        """Test enum value removal and addition."""
        old = ProtoEnum(name="Status", values=[ProtoEnumValue(name="ACTIVE", number=0)])
        new = ProtoEnum(
            name="Status",
            values=[
                ProtoEnumValue(name="ACTIVE", number=0),
                ProtoEnumValue(name="BANNED", number=1),
            ],
        )

        added = compare_enum(old, new, "Status")
        removed = compare_enum(new, old, "Status")

        assert added[0].severity == Severity.INFO
        assert removed[0].severity == Severity.BREAKING

    def test_value_renumbered(self) -> None:
        """Test changing the number of an enum value."""
        changes = compare_enum(
            ProtoEnum(name="Status", values=[ProtoEnumValue(name="ACTIVE", number=1)]),
            ProtoEnum(name="Status", values=[ProtoEnumValue(name="ACTIVE", number=2)]),
            "Status",
        )

        assert len(changes) == 1
        assert changes[0].category == ChangeCategory.ENUM_VALUE
        assert changes[0].severity == Severity.BREAKING


class TestWireCompatibility:
    """Tests for is_wire_compatible."""

    @pytest.mark.parametrize(
        "old_type,new_type,expected",
        [
            ("int32", "int64", True),
            ("uint64", "bool", True),
            ("sint32", "sint64", True),
            ("string", "bytes", True),
            ("fixed32", "sfixed32", True),
            ("int32", "sint32", False),
            ("int64", "string", False),
            ("fixed32", "fixed64", False),
            ("double", "double", True),
        ],
    )
    def test_scalar_groups(self, old_type: str, new_type: str, expected: bool) -> None:
        """Test scalar wire compatibility groups."""
        assert is_wire_compatible(old_type, new_type) is expected

    def test_enum_is_varint(self) -> None:
        """Test that enums are compatible with varint integers."""
        assert is_wire_compatible("Status", "int32", frozenset({"Status"}))
        assert not is_wire_compatible("Status", "string", frozenset({"Status"}))
