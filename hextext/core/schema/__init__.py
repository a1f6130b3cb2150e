"""Analysis schema models and parsing."""

from hextext.core.schema.models import ComponentSpec, FieldRule, PipelineSpec, SchemaConfig
from hextext.core.schema.parser import parse_schema, parse_schema_file

__all__ = [
    "ComponentSpec",
    "FieldRule",
    "PipelineSpec",
    "SchemaConfig",
    "parse_schema",
    "parse_schema_file",
]
