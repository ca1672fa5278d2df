"""
AsyncAPI data models.

Models representing an AsyncAPI document: servers, channels,
operations and messages.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from api_change_detector.models.schema import SchemaDefinition


class OperationAction(str, Enum):
    """Direction of an AsyncAPI operation."""

    PUBLISH = "PUBLISH"
    SUBSCRIBE = "SUBSCRIBE"
    SEND = "SEND"
    RECEIVE = "RECEIVE"


class ServerVariable(BaseModel):
    """A templated variable in a server URL."""

    default_value: Optional[str] = Field(default=None, description="Default value")
    allowed_values: list[str] = Field(default_factory=list, description="Allowed values")
    description: Optional[str] = Field(default=None, description="Variable description")

    class Config:
        frozen = True


class AsyncServer(BaseModel):
    """A message broker server."""

    name: str = Field(description="Server name")
    url: str = Field(default="", description="Server URL or host")
    protocol: str = Field(default="", description="Protocol, e.g. kafka, amqp, mqtt")
    protocol_version: Optional[str] = Field(default=None, description="Protocol version")
    description: Optional[str] = Field(default=None, description="Server description")
    variables: dict[str, ServerVariable] = Field(
        default_factory=dict,
        description="URL variables keyed by name",
    )
    deprecated: bool = Field(default=False, description="Whether the server is deprecated")

    class Config:
        frozen = True


class AsyncMessage(BaseModel):
    """A message exchanged over a channel."""

    name: str = Field(description="Message name")
    content_type: Optional[str] = Field(default=None, description="Payload media type")
    schema_format: Optional[str] = Field(default=None, description="Payload schema format")
    correlation_id: Optional[str] = Field(default=None, description="Correlation id location")
    payload: Optional[SchemaDefinition] = Field(default=None, description="Payload schema")
    headers: Optional[SchemaDefinition] = Field(default=None, description="Headers schema")
    deprecated: bool = Field(default=False, description="Whether the message is deprecated")

    class Config:
        frozen = True


class AsyncOperation(BaseModel):
    """A publish/subscribe (2.x) or send/receive (3.x) operation."""

    operation_id: Optional[str] = Field(default=None, description="Operation identifier")
    action: OperationAction = Field(description="Operation direction")
    channel_ref: Optional[str] = Field(default=None, description="Channel reference (3.x)")
    message: Optional[AsyncMessage] = Field(default=None, description="Carried message")
    deprecated: bool = Field(default=False, description="Whether the operation is deprecated")

    class Config:
        frozen = True


class AsyncChannel(BaseModel):
    """A named channel (topic, queue, routing key)."""

    name: str = Field(description="Channel name")
    address: Optional[str] = Field(default=None, description="Channel address (3.x)")
    description: Optional[str] = Field(default=None, description="Channel description")
    publish: Optional[AsyncOperation] = Field(default=None, description="Publish operation (2.x)")
    subscribe: Optional[AsyncOperation] = Field(
        default=None,
        description="Subscribe operation (2.x)",
    )
    parameters: list[str] = Field(default_factory=list, description="Channel parameter names")
    bindings: dict[str, Any] = Field(
        default_factory=dict,
        description="Protocol bindings keyed by protocol",
    )
    deprecated: bool = Field(default=False, description="Whether the channel is deprecated")

    class Config:
        frozen = True


class AsyncApiSpec(BaseModel):
    """A complete AsyncAPI document."""

    title: str = Field(default="AsyncAPI", description="API title")
    api_version: str = Field(default="", description="API version (info.version)")
    asyncapi_version: str = Field(default="2.6.0", description="AsyncAPI spec version")
    description: Optional[str] = Field(default=None, description="API description")
    servers: dict[str, AsyncServer] = Field(default_factory=dict, description="Servers")
    channels: dict[str, AsyncChannel] = Field(default_factory=dict, description="Channels")
    operations: dict[str, AsyncOperation] = Field(
        default_factory=dict,
        description="Operations (3.x)",
    )
    messages: dict[str, AsyncMessage] = Field(
        default_factory=dict,
        description="Component messages",
    )
    schemas: dict[str, SchemaDefinition] = Field(
        default_factory=dict,
        description="Component schemas",
    )

    class Config:
        frozen = True

    @property
    def major_version(self) -> str:
        """Major AsyncAPI version, e.g. ``2`` or ``3``."""
        return self.asyncapi_version.split(".", 1)[0]
