"""
GraphQL data models.

Models representing a GraphQL schema graph: types, fields, arguments
and root operations.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class GraphQLTypeKind(str, Enum):
    """Kind of a GraphQL named type."""

    OBJECT = "OBJECT"
    INPUT_OBJECT = "INPUT_OBJECT"
    INTERFACE = "INTERFACE"
    UNION = "UNION"
    ENUM = "ENUM"
    SCALAR = "SCALAR"


class GraphQLOperationKind(str, Enum):
    """Root operation a field belongs to."""

    QUERY = "QUERY"
    MUTATION = "MUTATION"
    SUBSCRIPTION = "SUBSCRIPTION"

    @property
    def root_name(self) -> str:
        """Conventional root type name, e.g. ``Query``."""
        return self.value.capitalize()


class GraphQLArgument(BaseModel):
    """An argument of a field or operation."""

    name: str = Field(description="Argument name")
    type: str = Field(description="Type signature, e.g. 'ID!' or '[String]'")
    required: bool = Field(default=False, description="Whether the argument is non-null")
    default_value: Optional[Any] = Field(default=None, description="Default value")
    description: Optional[str] = Field(default=None, description="Argument description")

    class Config:
        frozen = True

    @property
    def has_default(self) -> bool:
        """Check if the argument declares a default value."""
        return self.default_value is not None


class GraphQLField(BaseModel):
    """A field of an object, interface or input type."""

    name: str = Field(description="Field name")
    type: str = Field(description="Named type of the field (without modifiers)")
    required: bool = Field(default=False, description="Whether the field is non-null")
    is_list: bool = Field(default=False, description="Whether the field is a list")
    list_item_required: bool = Field(
        default=False,
        description="Whether list items are non-null",
    )
    deprecated: bool = Field(default=False, description="Whether the field is deprecated")
    deprecation_reason: Optional[str] = Field(default=None, description="Deprecation reason")
    description: Optional[str] = Field(default=None, description="Field description")
    arguments: list[GraphQLArgument] = Field(
        default_factory=list,
        description="Field arguments",
    )

    class Config:
        frozen = True

    @property
    def type_signature(self) -> str:
        """Full type signature, e.g. ``[String!]!``."""
        signature = self.type
        if self.is_list:
            item = f"{signature}!" if self.list_item_required else signature
            signature = f"[{item}]"
        if self.required:
            signature = f"{signature}!"
        return signature

    @property
    def base_type_signature(self) -> str:
        """Type signature ignoring the outer non-null modifier."""
        signature = self.type_signature
        return signature[:-1] if self.required else signature


class GraphQLType(BaseModel):
    """A named type in the schema."""

    name: str = Field(description="Type name")
    kind: GraphQLTypeKind = Field(description="Type kind")
    description: Optional[str] = Field(default=None, description="Type description")
    fields: list[GraphQLField] = Field(
        default_factory=list,
        description="Fields (objects, interfaces and input objects)",
    )
    interfaces: list[str] = Field(
        default_factory=list,
        description="Implemented interfaces (objects)",
    )
    possible_types: list[str] = Field(
        default_factory=list,
        description="Member types (unions)",
    )
    enum_values: list[str] = Field(default_factory=list, description="Values (enums)")

    class Config:
        frozen = True


class GraphQLOperation(BaseModel):
    """A root field of Query, Mutation or Subscription."""

    name: str = Field(description="Operation name")
    kind: GraphQLOperationKind = Field(description="Root operation kind")
    return_type: str = Field(description="Return type signature")
    arguments: list[GraphQLArgument] = Field(
        default_factory=list,
        description="Operation arguments",
    )
    deprecated: bool = Field(default=False, description="Whether the operation is deprecated")
    description: Optional[str] = Field(default=None, description="Operation description")

    class Config:
        frozen = True


class GraphQLSchema(BaseModel):
    """A complete GraphQL schema."""

    name: str = Field(default="GraphQL API", description="API name")
    version: str = Field(default="", description="API version")
    types: dict[str, GraphQLType] = Field(
        default_factory=dict,
        description="Named types keyed by name",
    )
    queries: dict[str, GraphQLOperation] = Field(default_factory=dict, description="Query fields")
    mutations: dict[str, GraphQLOperation] = Field(
        default_factory=dict,
        description="Mutation fields",
    )
    subscriptions: dict[str, GraphQLOperation] = Field(
        default_factory=dict,
        description="Subscription fields",
    )

    class Config:
        frozen = True

    def operations(self, kind: GraphQLOperationKind) -> dict[str, GraphQLOperation]:
        """Get the operation map for a root kind."""
        return {
            GraphQLOperationKind.QUERY: self.queries,
            GraphQLOperationKind.MUTATION: self.mutations,
            GraphQLOperationKind.SUBSCRIPTION: self.subscriptions,
        }[kind]
