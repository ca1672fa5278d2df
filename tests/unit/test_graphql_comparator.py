"""
Unit tests for the GraphQL structural comparator.
"""

from api_change_detector.comparator.graphql import (
    compare_arguments,
    compare_graphql_schemas,
    compare_type,
)
from api_change_detector.models.change import ChangeCategory, ChangeType, Severity
from api_change_detector.models.graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLOperation,
    GraphQLOperationKind,
    GraphQLSchema,
    GraphQLType,
    GraphQLTypeKind,
)


def _user_type(*fields: GraphQLField, **overrides) -> GraphQLType:
    return GraphQLType(name="User", kind=GraphQLTypeKind.OBJECT, fields=list(fields), **overrides)


class TestCompareGraphQLSchemas:
    """Tests for compare_graphql_schemas."""

    def test_identical(self, graphql_schema: GraphQLSchema) -> None:
        """Test that comparing a schema to itself yields no changes."""
        assert compare_graphql_schemas(graphql_schema, graphql_schema) == []

    def test_field_removed(self, graphql_schema: GraphQLSchema) -> None:
        """Test removing User.email."""
        new = graphql_schema.model_copy(
            update={"types": {"User": _user_type(GraphQLField(name="id", type="ID", required=True))}}
        )

        changes = compare_graphql_schemas(graphql_schema, new)

        assert len(changes) == 1
        assert changes[0].type == ChangeType.REMOVED
        assert changes[0].category == ChangeCategory.FIELD
        assert changes[0].severity == Severity.BREAKING
        assert "User.email" in changes[0].path

    def test_operation_removed(self, graphql_schema: GraphQLSchema) -> None:
        """Test removing a query."""
        new = graphql_schema.model_copy(update={"queries": {}})

        changes = compare_graphql_schemas(graphql_schema, new)

        assert len(changes) == 1
        assert changes[0].path == "Query.user"
        assert changes[0].severity == Severity.BREAKING

    def test_mutation_added(self, graphql_schema: GraphQLSchema) -> None:
        """Test adding a mutation."""
        mutation = GraphQLOperation(
            name="createUser",
            kind=GraphQLOperationKind.MUTATION,
            return_type="User",
        )
        new = graphql_schema.model_copy(update={"mutations": {"createUser": mutation}})

        changes = compare_graphql_schemas(graphql_schema, new)

        assert len(changes) == 1
        assert changes[0].path == "Mutation.createUser"
        assert changes[0].severity == Severity.INFO

    def test_return_type_changed(self, graphql_schema: GraphQLSchema) -> None:
        """Test changing the return type of a query."""
        query = graphql_schema.queries["user"].model_copy(update={"return_type": "Account"})
        new = graphql_schema.model_copy(update={"queries": {"user": query}})

        changes = compare_graphql_schemas(graphql_schema, new)

        assert len(changes) == 1
        assert changes[0].type == ChangeType.MODIFIED
        assert changes[0].severity == Severity.BREAKING

    def test_schema_created(self, graphql_schema: GraphQLSchema) -> None:
        """Test comparing against a missing old schema."""
        changes = compare_graphql_schemas(None, graphql_schema)

        assert len(changes) == 1
        assert changes[0].category == ChangeCategory.TYPE
        assert changes[0].severity == Severity.INFO


class TestCompareType:
    """Tests for compare_type."""

    def test_kind_change_short_circuits(self) -> None:
        """Test that a kind change hides member-level differences."""
        old = _user_type(GraphQLField(name="id", type="ID"))
        new = GraphQLType(name="User", kind=GraphQLTypeKind.INTERFACE)

        changes = compare_type(old, new)

        assert len(changes) == 1
        assert changes[0].category == ChangeCategory.TYPE
        assert changes[0].severity == Severity.BREAKING

    def test_field_type_changed(self) -> None:
        """Test changing the named type of a field."""
        changes = compare_type(
            _user_type(GraphQLField(name="age", type="Int")),
            _user_type(GraphQLField(name="age", type="String")),
        )

        assert len(changes) == 1
        assert changes[0].severity == Severity.BREAKING

    def test_nullability(self) -> None:
        """Test nullable to non-null and back."""
        nullable = _user_type(GraphQLField(name="name", type="String"))
        non_null = _user_type(GraphQLField(name="name", type="String", required=True))

        tightened = compare_type(nullable, non_null)
        relaxed = compare_type(non_null, nullable)

        assert tightened[0].severity == Severity.DANGEROUS
        assert relaxed[0].severity == Severity.WARNING

    def test_field_deprecated(self) -> None:
        """Test deprecating a field."""
        changes = compare_type(
            _user_type(GraphQLField(name="name", type="String")),
            _user_type(GraphQLField(name="name", type="String", deprecated=True)),
        )

        assert len(changes) == 1
        assert changes[0].type == ChangeType.DEPRECATED
        assert changes[0].severity == Severity.WARNING

    def test_enum_value_removed(self) -> None:
        """Test removing an enum value."""
        old = GraphQLType(name="Role", kind=GraphQLTypeKind.ENUM, enum_values=["ADMIN", "USER"])
        new = GraphQLType(name="Role", kind=GraphQLTypeKind.ENUM, enum_values=["USER"])

        changes = compare_type(old, new)

        assert len(changes) == 1
        assert changes[0].category == ChangeCategory.ENUM_VALUE
        assert changes[0].path == "Role.ADMIN"
        assert changes[0].severity == Severity.BREAKING

    def test_union_member_added(self) -> None:
        """Test adding a union member."""
        old = GraphQLType(name="Result", kind=GraphQLTypeKind.UNION, possible_types=["User"])
        new = GraphQLType(name="Result", kind=GraphQLTypeKind.UNION, possible_types=["User", "Bot"])

        changes = compare_type(old, new)

        assert len(changes) == 1
        assert changes[0].category == ChangeCategory.UNION_MEMBER
        assert changes[0].severity == Severity.INFO

    def test_interface_removed(self) -> None:
        """Test dropping an implemented interface."""
        changes = compare_type(
            _user_type(interfaces=["Node"]),
            _user_type(),
        )

        assert len(changes) == 1
        assert changes[0].category == ChangeCategory.INTERFACE
        assert changes[0].severity == Severity.BREAKING


class TestCompareArguments:
    """Tests for compare_arguments."""

    def test_required_argument_added(self) -> None:
        """Test adding a required argument without default."""
        changes = compare_arguments([], [GraphQLArgument(name="id", type="ID!", required=True)], "Query.user")

        assert len(changes) == 1
        assert changes[0].severity == Severity.BREAKING
        assert changes[0].path == "Query.user(id)"

    def test_required_argument_with_default_added(self) -> None:
        """Test that a default value makes a new required argument safe."""
        argument = GraphQLArgument(name="limit", type="Int!", required=True, default_value=10)

        changes = compare_arguments([], [argument], "Query.users")

        assert changes[0].severity == Severity.INFO

    def test_argument_removed(self) -> None:
        """Test removing an argument."""
        changes = compare_arguments([GraphQLArgument(name="id", type="ID")], [], "Query.user")

        assert changes[0].type == ChangeType.REMOVED
        assert changes[0].severity == Severity.DANGEROUS

    def test_default_changed(self) -> None:
        """Test changing an argument default."""
        changes = compare_arguments(
            [GraphQLArgument(name="limit", type="Int", default_value=10)],
            [GraphQLArgument(name="limit", type="Int", default_value=20)],
            "Query.users",
        )

        assert len(changes) == 1
        assert changes[0].severity == Severity.DANGEROUS
