"""Parse analysis schema documents into :class:`SchemaConfig`."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from hextext.core.exceptions import SchemaParseError
from hextext.core.logging import get_logger
from hextext.core.schema.models import SchemaConfig

logger = get_logger(__name__)

YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def _format_errors(error: ValidationError) -> list[str]:
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        lines.append(f"{location}: {item['msg']}")
    return lines


def parse_schema(document: str | bytes | Mapping[str, Any] | SchemaConfig) -> SchemaConfig:
    """Parse a JSON analysis schema.

    Parameters
    ----------
    document : str | bytes | Mapping | SchemaConfig
        Raw JSON text, an already-decoded JSON object, or a parsed schema
        (returned unchanged)

    Returns
    -------
    SchemaConfig
        The immutable parsed schema

    Raises
    ------
    SchemaParseError
        If the document is not valid JSON or does not have the documented
        shape (missing ``fields``, a pipeline without ``tokenizer``, a
        component without ``type``, non-string parameter values, ...)
    """
    if isinstance(document, SchemaConfig):
        return document

    if isinstance(document, str | bytes):
        try:
            data = json.loads(document)
        except json.JSONDecodeError as e:
            raise SchemaParseError(f"malformed JSON ({e})") from e
    else:
        data = document

    if not isinstance(data, Mapping):
        raise SchemaParseError(f"expected a JSON object at top level, got {type(data).__name__}")

    try:
        schema = SchemaConfig.model_validate(dict(data))
    except ValidationError as e:
        errors = _format_errors(e)
        raise SchemaParseError("; ".join(errors), errors) from e

    logger.debug(
        "Parsed analysis schema with {pipelines} pipelines and {rules} field rules",
        pipelines=len(schema.analyzers),
        rules=len(schema.field_rules),
    )
    return schema


def parse_schema_file(path: str | Path) -> SchemaConfig:
    """Read and parse an analysis schema file.

    JSON by default; files ending in ``.yaml`` or ``.yml`` hold the same
    document in YAML. YAML scalars must still be strings where the JSON
    shape requires strings (quote ``"4.10"`` and ``"2"``).

    Raises
    ------
    SchemaParseError
        If the file cannot be read or its contents cannot be parsed
    """
    schema_path = Path(path)
    try:
        text = schema_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaParseError(f"cannot read {schema_path}: {e}") from e

    if schema_path.suffix.lower() not in YAML_SUFFIXES:
        return parse_schema(text)

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SchemaParseError(f"malformed YAML ({e})") from e
    if not isinstance(data, Mapping):
        raise SchemaParseError(f"expected a mapping at top level, got {type(data).__name__}")
    return parse_schema(data)
