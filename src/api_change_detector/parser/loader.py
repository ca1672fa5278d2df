"""
Canonical document loader.

Reads JSON or YAML documents holding a serialized canonical model and
validates them into the matching pydantic model. The top-level
``protocol`` key selects the model; it defaults to ``rest``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ValidationError

from api_change_detector.models.asyncapi import AsyncApiSpec
from api_change_detector.models.graphql import GraphQLSchema
from api_change_detector.models.protobuf import ProtoFile
from api_change_detector.models.spec import ApiSpec

logger = logging.getLogger(__name__)

LoadedSpec = Union[ApiSpec, GraphQLSchema, ProtoFile, AsyncApiSpec]

PROTOCOL_KEY = "protocol"
DEFAULT_PROTOCOL = "rest"

PROTOCOL_MODELS: dict[str, type[BaseModel]] = {
    "rest": ApiSpec,
    "graphql": GraphQLSchema,
    "grpc": ProtoFile,
    "asyncapi": AsyncApiSpec,
}

JSON_SUFFIXES = {".json"}
YAML_SUFFIXES = {".yaml", ".yml"}


class SpecLoadError(ValueError):
    """Raised when a canonical document cannot be read or validated."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"{path.name}: {message}")


def read_document(path: Path) -> dict[str, Any]:
    """
    Read a JSON or YAML document into a dictionary.

    Args:
        path: Path to the document.

    Returns:
        The parsed top-level mapping.

    Raises:
        SpecLoadError: If the file is missing, unreadable, malformed or
            does not hold a mapping.
    """
    suffix = path.suffix.lower()
    if suffix not in JSON_SUFFIXES | YAML_SUFFIXES:
        raise SpecLoadError(path, f"unsupported file type '{suffix or path.name}'")

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise SpecLoadError(path, "file not found") from e
    except (OSError, UnicodeDecodeError) as e:
        raise SpecLoadError(path, f"cannot read file: {e}") from e

    try:
        if suffix in JSON_SUFFIXES:
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SpecLoadError(path, f"malformed document: {e}") from e

    if not isinstance(data, dict):
        raise SpecLoadError(path, "document must contain a mapping at the top level")
    return data


def parse_spec(data: dict[str, Any], path: Path) -> LoadedSpec:
    """
    Validate a document mapping into its canonical model.

    Args:
        data: The parsed document.
        path: Source path, used in error messages.

    Returns:
        The validated canonical model.

    Raises:
        SpecLoadError: If the protocol is unknown or validation fails.
    """
    body = dict(data)
    protocol = str(body.pop(PROTOCOL_KEY, DEFAULT_PROTOCOL)).lower()
    model = PROTOCOL_MODELS.get(protocol)
    if model is None:
        available = ", ".join(PROTOCOL_MODELS)
        raise SpecLoadError(path, f"unknown protocol '{protocol}'. Available: {available}")

    try:
        spec = model.model_validate(body)
    except ValidationError as e:
        raise SpecLoadError(path, f"invalid {protocol} document: {e}") from e

    logger.debug("Loaded %s document from %s", protocol, path)
    return spec


def load_spec(path: Union[str, Path]) -> LoadedSpec:
    """
    Load a canonical API description from a JSON or YAML file.

    Args:
        path: Path to the document.

    Returns:
        An ApiSpec, GraphQLSchema, ProtoFile or AsyncApiSpec.

    Raises:
        SpecLoadError: If the document cannot be loaded.
    """
    path = Path(path)
    return parse_spec(read_document(path), path)
