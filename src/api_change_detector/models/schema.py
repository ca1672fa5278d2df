"""
Schema data models.

A JSON-Schema-like definition shared by REST component schemas and
AsyncAPI payloads.
"""

from typing import Optional

from pydantic import BaseModel, Field


class SchemaDefinition(BaseModel):
    """A named schema object with its properties and constraints."""

    name: str = Field(default="", description="Schema name")
    type: Optional[str] = Field(
        default=None,
        description="Base type (object, string, integer, number, array, ...)",
    )
    format: Optional[str] = Field(default=None, description="Format hint, e.g. date-time")
    ref: Optional[str] = Field(default=None, description="$ref target, if any")
    description: Optional[str] = Field(default=None, description="Schema description")
    required: list[str] = Field(
        default_factory=list,
        description="Names of required properties",
    )
    properties: dict[str, "SchemaDefinition"] = Field(
        default_factory=dict,
        description="Property schemas keyed by property name",
    )
    items: Optional["SchemaDefinition"] = Field(
        default=None,
        description="Item schema for arrays",
    )
    enum_values: list[str] = Field(
        default_factory=list,
        description="Allowed values for enumerations",
    )
    deprecated: bool = Field(default=False, description="Whether the schema is deprecated")

    class Config:
        frozen = True

    def is_required(self, property_name: str) -> bool:
        """Check if a property is listed as required."""
        return property_name in self.required


SchemaDefinition.model_rebuild()
