"""hextext core: schema model, validation, pipeline building and the analysis facade."""

from hextext.core.analysis import Pipeline, PipelineBuilder, TokenStream
from hextext.core.exceptions import (
    ComponentConfigError,
    ComponentNotFoundError,
    ConfigurationError,
    HexTextError,
    InvalidSchemaError,
    NoAnalyzerError,
    PipelineBuildError,
    SchemaParseError,
)
from hextext.core.registry import ComponentRegistry, ComponentType, get_registry
from hextext.core.schema import SchemaConfig, parse_schema, parse_schema_file
from hextext.core.text_analyzer import TextAnalyzer
from hextext.core.version import MatchVersion

__all__ = [
    "ComponentConfigError",
    "ComponentNotFoundError",
    "ComponentRegistry",
    "ComponentType",
    "ConfigurationError",
    "HexTextError",
    "InvalidSchemaError",
    "MatchVersion",
    "NoAnalyzerError",
    "Pipeline",
    "PipelineBuildError",
    "PipelineBuilder",
    "SchemaConfig",
    "SchemaParseError",
    "TextAnalyzer",
    "TokenStream",
    "get_registry",
    "parse_schema",
    "parse_schema_file",
]
