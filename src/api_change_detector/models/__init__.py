"""
Data models for API Change Detector.

This package contains Pydantic models for the canonical API descriptions
(REST, GraphQL, protobuf, AsyncAPI), detected changes, and changelogs.
"""

from api_change_detector.models.asyncapi import (
    AsyncApiSpec,
    AsyncChannel,
    AsyncMessage,
    AsyncOperation,
    AsyncServer,
    OperationAction,
    ServerVariable,
)
from api_change_detector.models.change import (
    BreakingChange,
    Change,
    ChangeCategory,
    ChangeType,
    Severity,
)
from api_change_detector.models.changelog import (
    Changelog,
    RiskAssessment,
    RiskLevel,
    SemverBump,
)
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
    FieldRule,
    ProtoEnum,
    ProtoEnumValue,
    ProtoField,
    ProtoFile,
    ProtoMessage,
    ProtoRpcMethod,
    ProtoService,
    StreamingMode,
)
from api_change_detector.models.schema import SchemaDefinition
from api_change_detector.models.spec import (
    ApiSpec,
    ApiType,
    Endpoint,
    HttpMethod,
    Parameter,
    ParameterLocation,
    RequestBody,
    Response,
)

__all__ = [
    # Change models
    "BreakingChange",
    "Change",
    "ChangeCategory",
    "ChangeType",
    "Severity",
    # Changelog models
    "Changelog",
    "RiskAssessment",
    "RiskLevel",
    "SemverBump",
    # REST models
    "ApiSpec",
    "ApiType",
    "Endpoint",
    "HttpMethod",
    "Parameter",
    "ParameterLocation",
    "RequestBody",
    "Response",
    "SchemaDefinition",
    # GraphQL models
    "GraphQLArgument",
    "GraphQLField",
    "GraphQLOperation",
    "GraphQLOperationKind",
    "GraphQLSchema",
    "GraphQLType",
    "GraphQLTypeKind",
    # Protobuf models
    "FieldRule",
    "ProtoEnum",
    "ProtoEnumValue",
    "ProtoField",
    "ProtoFile",
    "ProtoMessage",
    "ProtoRpcMethod",
    "ProtoService",
    "StreamingMode",
    # AsyncAPI models
    "AsyncApiSpec",
    "AsyncChannel",
    "AsyncMessage",
    "AsyncOperation",
    "AsyncServer",
    "OperationAction",
    "ServerVariable",
]
