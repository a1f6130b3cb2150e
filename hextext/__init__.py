"""hextext - schema-driven text analysis.

Maps document field names to tokenization pipelines declared in a JSON schema
and turns field values into token sequences, using whoosh analyzers.
"""

# Version is defined in pyproject.toml and read dynamically
try:
    from importlib.metadata import version

    __version__ = version("hextext")
except Exception:
    __version__ = "0.0.0.dev0"  # Fallback for development installs

from hextext.core import (
    ComponentRegistry,
    ComponentType,
    HexTextError,
    InvalidSchemaError,
    NoAnalyzerError,
    SchemaParseError,
    TextAnalyzer,
    get_registry,
)

__all__ = [
    "ComponentRegistry",
    "ComponentType",
    "HexTextError",
    "InvalidSchemaError",
    "NoAnalyzerError",
    "SchemaParseError",
    "TextAnalyzer",
    "__version__",
    "get_registry",
]
