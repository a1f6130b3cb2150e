"""Core exception hierarchy for hextext.

All hextext exceptions inherit from HexTextError for easy exception handling.
Errors raised by the public analyze operations also inherit from ValueError so
callers that treat a bad field or an unusable schema as an illegal argument
can keep catching the builtin type.
"""

from __future__ import annotations

# ============================================================================
# Base Exception
# ============================================================================


class HexTextError(Exception):
    """Base exception for all hextext errors.

    Catch this to handle all hextext-specific errors.
    """

    pass


# ============================================================================
# Configuration & Schema Errors
# ============================================================================


class ConfigurationError(HexTextError):
    """Raised when hextext configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("logging", "unknown format 'xml'")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the configuration section
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


class SchemaParseError(HexTextError):
    """Raised when an analysis schema document does not match the documented shape.

    This is the only schema error raised at construction time: malformed JSON,
    missing required keys and wrong value types are not recoverable.

    Examples
    --------
    Example usage::

        raise SchemaParseError("fields: Field required")
    """

    def __init__(self, reason: str, errors: list[str] | None = None) -> None:
        """Initialize schema parse error.

        Args
        ----
            reason: Summary of the structural problem
            errors: Individual error lines (optional)
        """
        super().__init__(f"Invalid analysis schema: {reason}")
        self.reason = reason
        self.errors = errors or []


class InvalidSchemaError(HexTextError, ValueError):
    """Raised when an operation is attempted on an invalid analysis schema.

    The message is the full accumulated list of validity messages, one per line.
    """

    def __init__(self, messages: str) -> None:
        super().__init__(messages)
        self.messages = messages


class NoAnalyzerError(HexTextError, ValueError):
    """Raised when no field rule governs the requested field.

    Examples
    --------
    Example usage::

        raise NoAnalyzerError("body")
    """

    def __init__(self, field: str) -> None:
        super().__init__(f"No analyzer defined for field '{field}'")
        self.field = field


# ============================================================================
# Component & Build Errors
# ============================================================================


class ComponentNotFoundError(HexTextError):
    """Raised when no factory is registered under a component name."""

    def __init__(self, component_type: str, name: str, available: list[str] | None = None) -> None:
        """Initialize component not found error.

        Args
        ----
            component_type: Kind of component (e.g. "tokenizer")
            name: The name that was looked up
            available: Registered names of that kind (optional)
        """
        msg = f"Unknown {component_type.replace('_', ' ')} type '{name}'"
        if available:
            msg += f". Available: {', '.join(sorted(available)[:10])}"
            if len(available) > 10:
                msg += f" ... and {len(available) - 10} more"
        super().__init__(msg)
        self.component_type = component_type
        self.name = name
        self.available = available


class ComponentAlreadyRegisteredError(HexTextError):
    """Raised when a component name is registered twice for the same kind."""

    def __init__(self, component_type: str, name: str) -> None:
        kind = component_type.replace("_", " ").title()
        super().__init__(f"{kind} '{name}' is already registered")
        self.component_type = component_type
        self.name = name


class ComponentConfigError(HexTextError, ValueError):
    """Raised by a component factory when its parameters are missing or rejected.

    Examples
    --------
    Example usage::

        raise ComponentConfigError("length", "Unknown parameters: {'mni': '2'}")
    """

    def __init__(self, component: str, reason: str) -> None:
        super().__init__(f"Cannot configure '{component}': {reason}")
        self.component = component
        self.reason = reason


class AnalyzerCapabilityError(HexTextError):
    """Raised when a fallback analyzer reference resolves to something that cannot analyze text."""

    def __init__(self, identifier: str, actual: str) -> None:
        super().__init__(
            f"'{identifier}' is not a whoosh.analysis.Analyzer or Tokenizer (got {actual})"
        )
        self.identifier = identifier
        self.actual = actual


class PipelineBuildError(HexTextError):
    """Raised when a declared pipeline cannot be built from its components."""

    def __init__(self, pipeline: str, reason: str) -> None:
        """Initialize pipeline build error.

        Args
        ----
            pipeline: Name of the pipeline (or fallback analyzer identifier)
            reason: Why the build failed
        """
        super().__init__(f"Exception initializing analyzer '{pipeline}': {reason}")
        self.pipeline = pipeline
        self.reason = reason


class TokenStreamStateError(HexTextError):
    """Raised when a token stream is consumed out of protocol order."""

    pass


__all__ = [
    "HexTextError",
    "ConfigurationError",
    "SchemaParseError",
    "InvalidSchemaError",
    "NoAnalyzerError",
    "ComponentNotFoundError",
    "ComponentAlreadyRegisteredError",
    "ComponentConfigError",
    "AnalyzerCapabilityError",
    "PipelineBuildError",
    "TokenStreamStateError",
]
