"""
REST API data models.

Protocol-neutral models representing an API specification and its
endpoints, as produced by an external parser.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from api_change_detector.models.schema import SchemaDefinition


class ApiType(str, Enum):
    """Protocol family of an API specification."""

    REST = "REST"
    GRAPHQL = "GRAPHQL"
    GRPC = "GRPC"
    ASYNC = "ASYNC"


class HttpMethod(str, Enum):
    """HTTP methods supported by endpoints."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


class ParameterLocation(str, Enum):
    """Where a parameter is transmitted."""

    PATH = "PATH"
    QUERY = "QUERY"
    HEADER = "HEADER"
    COOKIE = "COOKIE"
    BODY = "BODY"


class Parameter(BaseModel):
    """A parameter accepted by an endpoint."""

    name: str = Field(description="Parameter name")
    location: ParameterLocation = Field(
        default=ParameterLocation.QUERY,
        description="Where the parameter is sent",
    )
    type: str = Field(default="string", description="Type name")
    required: bool = Field(default=False, description="Whether the parameter is required")
    default_value: Optional[Any] = Field(default=None, description="Default value")
    description: Optional[str] = Field(default=None, description="Parameter description")

    class Config:
        frozen = True


class RequestBody(BaseModel):
    """The request body accepted by an endpoint."""

    content_type: Optional[str] = Field(
        default="application/json",
        description="Media type of the body",
    )
    schema_ref: Optional[str] = Field(default=None, description="Referenced schema")
    required: bool = Field(default=False, description="Whether the body is required")

    class Config:
        frozen = True


class Response(BaseModel):
    """A documented response of an endpoint."""

    status_code: str = Field(description="HTTP status code, e.g. '200' or 'default'")
    description: Optional[str] = Field(default=None, description="Response description")
    content_type: Optional[str] = Field(default=None, description="Media type of the body")
    schema_ref: Optional[str] = Field(default=None, description="Referenced schema")

    class Config:
        frozen = True


class Endpoint(BaseModel):
    """An operation exposed by the API."""

    id: Optional[str] = Field(default=None, description="Parser-assigned identifier")
    path: str = Field(description="URL path, or /pkg.Service/Method for gRPC")
    method: HttpMethod = Field(default=HttpMethod.GET, description="HTTP method")
    operation_id: Optional[str] = Field(default=None, description="Operation identifier")
    summary: Optional[str] = Field(default=None, description="Short summary")
    description: Optional[str] = Field(default=None, description="Long description")
    deprecated: bool = Field(default=False, description="Whether the endpoint is deprecated")
    tags: list[str] = Field(default_factory=list, description="Grouping tags")
    parameters: list[Parameter] = Field(
        default_factory=list,
        description="Parameters accepted by the endpoint",
    )
    request_body: Optional[RequestBody] = Field(default=None, description="Request body")
    responses: list[Response] = Field(
        default_factory=list,
        description="Documented responses",
    )

    class Config:
        frozen = True

    @property
    def key(self) -> str:
        """Identity key used to match the endpoint across versions."""
        return f"{self.method.value}:{self.path}"

    @property
    def display_name(self) -> str:
        """Method and path, e.g. ``GET /users``."""
        return f"{self.method.value} {self.path}"


class ApiSpec(BaseModel):
    """Root of the REST / gRPC canonical view of an API."""

    name: str = Field(description="API name")
    version: str = Field(default="", description="API version")
    type: ApiType = Field(default=ApiType.REST, description="Protocol family")
    endpoints: list[Endpoint] = Field(default_factory=list, description="Endpoints")
    schemas: dict[str, SchemaDefinition] = Field(
        default_factory=dict,
        description="Component schemas keyed by name",
    )
    metadata: dict[str, Any] = Field(default_factory=dict, description="Free-form metadata")
    parsed_at: Optional[datetime] = Field(default=None, description="When the spec was parsed")

    class Config:
        frozen = True

    def find_endpoint(self, method: HttpMethod, path: str) -> Optional[Endpoint]:
        """Find an endpoint by method and path."""
        for endpoint in self.endpoints:
            if endpoint.method == method and endpoint.path == path:
                return endpoint
        return None
