"""
Protobuf data models.

Models representing a parsed .proto file: services, RPC methods,
messages, fields and enums.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class FieldRule(str, Enum):
    """Cardinality rule of a message field."""

    SINGULAR = "SINGULAR"
    OPTIONAL = "OPTIONAL"
    REQUIRED = "REQUIRED"
    REPEATED = "REPEATED"


class StreamingMode(str, Enum):
    """Streaming shape of an RPC method."""

    UNARY = "UNARY"
    CLIENT_STREAMING = "CLIENT_STREAMING"
    SERVER_STREAMING = "SERVER_STREAMING"
    BIDIRECTIONAL = "BIDIRECTIONAL"


class ProtoField(BaseModel):
    """A field of a message."""

    name: str = Field(description="Field name")
    number: int = Field(description="Field number (wire identity)")
    type: str = Field(description="Scalar type name or message/enum reference")
    rule: FieldRule = Field(default=FieldRule.SINGULAR, description="Cardinality rule")
    map_key_type: Optional[str] = Field(default=None, description="Key type for map fields")
    map_value_type: Optional[str] = Field(default=None, description="Value type for map fields")
    default_value: Optional[Any] = Field(default=None, description="proto2 default value")
    deprecated: bool = Field(default=False, description="Whether the field is deprecated")

    class Config:
        frozen = True

    @property
    def is_map(self) -> bool:
        """Check if this is a map field."""
        return self.map_key_type is not None


class ProtoEnumValue(BaseModel):
    """A value of an enum."""

    name: str = Field(description="Value name")
    number: int = Field(description="Value number")

    class Config:
        frozen = True


class ProtoEnum(BaseModel):
    """An enum definition."""

    name: str = Field(description="Enum name")
    full_name: Optional[str] = Field(default=None, description="Fully qualified name")
    values: list[ProtoEnumValue] = Field(default_factory=list, description="Enum values")
    deprecated: bool = Field(default=False, description="Whether the enum is deprecated")

    class Config:
        frozen = True

    @property
    def qualified_name(self) -> str:
        """Fully qualified name, falling back to the simple name."""
        return self.full_name or self.name


class ProtoMessage(BaseModel):
    """A message definition."""

    name: str = Field(description="Message name")
    full_name: Optional[str] = Field(default=None, description="Fully qualified name")
    fields: list[ProtoField] = Field(default_factory=list, description="Message fields")
    nested_messages: list["ProtoMessage"] = Field(
        default_factory=list,
        description="Messages declared inside this message",
    )
    nested_enums: list[ProtoEnum] = Field(
        default_factory=list,
        description="Enums declared inside this message",
    )
    reserved_numbers: list[int] = Field(default_factory=list, description="Reserved numbers")
    reserved_names: list[str] = Field(default_factory=list, description="Reserved names")
    deprecated: bool = Field(default=False, description="Whether the message is deprecated")

    class Config:
        frozen = True

    @property
    def qualified_name(self) -> str:
        """Fully qualified name, falling back to the simple name."""
        return self.full_name or self.name


class ProtoRpcMethod(BaseModel):
    """An RPC method of a service."""

    name: str = Field(description="Method name")
    input_type: str = Field(description="Request message type")
    output_type: str = Field(description="Response message type")
    client_streaming: bool = Field(default=False, description="Client streams requests")
    server_streaming: bool = Field(default=False, description="Server streams responses")
    deprecated: bool = Field(default=False, description="Whether the method is deprecated")

    class Config:
        frozen = True

    @property
    def streaming_mode(self) -> StreamingMode:
        """Streaming shape derived from the two streaming flags."""
        if self.client_streaming and self.server_streaming:
            return StreamingMode.BIDIRECTIONAL
        if self.client_streaming:
            return StreamingMode.CLIENT_STREAMING
        if self.server_streaming:
            return StreamingMode.SERVER_STREAMING
        return StreamingMode.UNARY


class ProtoService(BaseModel):
    """A gRPC service definition."""

    name: str = Field(description="Service name")
    package: Optional[str] = Field(default=None, description="Owning package")
    methods: list[ProtoRpcMethod] = Field(default_factory=list, description="RPC methods")
    deprecated: bool = Field(default=False, description="Whether the service is deprecated")

    class Config:
        frozen = True

    @property
    def full_name(self) -> str:
        """Package-qualified service name."""
        return f"{self.package}.{self.name}" if self.package else self.name


class ProtoFile(BaseModel):
    """A parsed .proto file."""

    file_name: str = Field(default="", description="Source file name")
    name: str = Field(default="", description="API name")
    version: str = Field(default="", description="API version")
    syntax: str = Field(default="proto3", description="proto2 or proto3")
    package: Optional[str] = Field(default=None, description="Package name")
    imports: list[str] = Field(default_factory=list, description="Imported files")
    options: dict[str, Any] = Field(default_factory=dict, description="File options")
    messages: list[ProtoMessage] = Field(default_factory=list, description="Top-level messages")
    enums: list[ProtoEnum] = Field(default_factory=list, description="Top-level enums")
    services: list[ProtoService] = Field(default_factory=list, description="Services")

    class Config:
        frozen = True

    @property
    def api_name(self) -> str:
        """Display name: explicit name, else package, else file name."""
        return self.name or self.package or self.file_name


ProtoMessage.model_rebuild()
