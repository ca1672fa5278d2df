"""
Pytest configuration and shared fixtures.
"""

import json
from pathlib import Path
from typing import Any, Callable

import pytest

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
from api_change_detector.models.protobuf import (
    ProtoField,
    ProtoFile,
    ProtoMessage,
    ProtoRpcMethod,
    ProtoService,
)
from api_change_detector.models.schema import SchemaDefinition
from api_change_detector.models.spec import (
    ApiSpec,
    Endpoint,
    HttpMethod,
    Parameter,
    ParameterLocation,
    Response,
)


@pytest.fixture
def users_endpoint() -> Endpoint:
    """GET /api/users with a paging parameter and a 200 response."""
    return Endpoint(
        path="/api/users",
        method=HttpMethod.GET,
        operation_id="listUsers",
        parameters=[Parameter(name="page", location=ParameterLocation.QUERY, type="integer")],
        responses=[Response(status_code="200", content_type="application/json", schema_ref="UserList")],
    )


@pytest.fixture
def rest_spec(users_endpoint: Endpoint) -> ApiSpec:
    """A small REST API with one endpoint and one component schema."""
    return ApiSpec(
        name="Users API",
        version="1.0.0",
        endpoints=[
            users_endpoint,
            Endpoint(path="/api/users/{id}", method=HttpMethod.GET),
        ],
        schemas={
            "User": SchemaDefinition(
                name="User",
                type="object",
                required=["id"],
                properties={
                    "id": SchemaDefinition(type="integer"),
                    "email": SchemaDefinition(type="string", format="email"),
                },
            ),
        },
    )


@pytest.fixture
def graphql_schema() -> GraphQLSchema:
    """A GraphQL schema with a User type and a user query."""
    return GraphQLSchema(
        name="Users Graph",
        version="1",
        types={
            "User": GraphQLType(
                name="User",
                kind=GraphQLTypeKind.OBJECT,
                fields=[
                    GraphQLField(name="id", type="ID", required=True),
                    GraphQLField(name="email", type="String", required=True),
                ],
            ),
        },
        queries={
            "user": GraphQLOperation(
                name="user",
                kind=GraphQLOperationKind.QUERY,
                return_type="User",
                arguments=[GraphQLArgument(name="id", type="ID!", required=True)],
            ),
        },
    )


@pytest.fixture
def proto_file() -> ProtoFile:
    """A proto3 file with a User message and a UserService."""
    return ProtoFile(
        file_name="user.proto",
        package="acme.users",
        version="1",
        messages=[
            ProtoMessage(
                name="User",
                fields=[
                    ProtoField(name="id", number=1, type="int64"),
                    ProtoField(name="name", number=2, type="string"),
                ],
            ),
        ],
        services=[
            ProtoService(
                name="UserService",
                package="acme.users",
                methods=[ProtoRpcMethod(name="GetUser", input_type="GetUserRequest", output_type="User")],
            ),
        ],
    )


@pytest.fixture
def make_change() -> Callable[..., Change]:
    """Factory for change records with sensible defaults."""

    def factory(
        severity: Severity = Severity.INFO,
        change_type: ChangeType = ChangeType.ADDED,
        category: ChangeCategory = ChangeCategory.ENDPOINT,
        path: str = "/things",
        description: str = "Something changed",
    ) -> Change:
        return Change(
            type=change_type,
            category=category,
            severity=severity,
            path=path,
            description=description,
        )

    return factory


@pytest.fixture
def write_spec(tmp_path: Path) -> Callable[[str, dict[str, Any]], Path]:
    """Write a canonical document as JSON into the temporary directory."""

    def writer(file_name: str, data: dict[str, Any]) -> Path:
        path = tmp_path / file_name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return writer
