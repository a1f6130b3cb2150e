"""Schema-driven text analysis: resolve a field to a pipeline and tokenize values.

:class:`TextAnalyzer` is the public entry point. It parses and statically
validates a JSON schema once, then builds pipelines lazily the first time a
field that needs them is analyzed:

>>> analyzer = TextAnalyzer('''{
...   "analyzers": [{"name": "ws", "tokenizer": {"type": "whitespace"},
...                  "filters": [{"type": "lowercase"}]}],
...   "fields": [{"regex": ".+", "analyzer": "ws"}]
... }''')
>>> analyzer.is_valid
True
>>> analyzer.analyze("title", "Hello World")
['hello', 'world']

Schema consistency problems and pipeline build failures never raise where
they are detected. They mark the instance invalid and add a message to
:attr:`TextAnalyzer.invalid_messages`; the next analyze call then raises
:class:`InvalidSchemaError` with the accumulated messages. Validity never
recovers: one pipeline that fails to build invalidates the instance for all
fields.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from threading import Lock
from typing import Any

from hextext.core.analysis.builder import build_fallback_pipeline, build_pipeline
from hextext.core.analysis.pipeline import Pipeline, TokenStream
from hextext.core.exceptions import InvalidSchemaError, NoAnalyzerError, PipelineBuildError
from hextext.core.field_resolver import FieldResolver
from hextext.core.logging import get_logger
from hextext.core.registry import ComponentRegistry, get_registry
from hextext.core.schema.models import FieldRule, SchemaConfig
from hextext.core.schema.parser import parse_schema, parse_schema_file
from hextext.core.validation import SchemaValidator, ValidityState
from hextext.core.version import MatchVersion

logger = get_logger(__name__)


class TextAnalyzer:
    """Resolve document fields to analysis pipelines and analyze their values.

    Parameters
    ----------
    schema : str | bytes | Mapping | SchemaConfig
        JSON analysis schema (text, decoded object, or parsed model)
    registry : ComponentRegistry | None
        Component factories to build pipelines from. Defaults to the global
        registry with the builtin components loaded.
    allow_dynamic_import : bool
        Whether fallback analyzer identifiers that are not registered may be
        imported by module path

    Raises
    ------
    SchemaParseError
        If the schema is not JSON of the documented shape. This is the only
        error raised at construction; everything else is reported through
        :attr:`is_valid` and :attr:`invalid_messages`.

    Notes
    -----
    Instances are safe to share between threads. At most one build happens per
    field and per named pipeline, even under concurrent first use; once a
    field's pipeline is cached, analyze calls for it do not take the lock.
    Instances can be pickled: only the schema and options travel, caches and
    validity are rebuilt on the receiving side.
    """

    def __init__(
        self,
        schema: str | bytes | Mapping[str, Any] | SchemaConfig,
        *,
        registry: ComponentRegistry | None = None,
        allow_dynamic_import: bool = True,
    ) -> None:
        self._schema = parse_schema(schema)
        self._custom_registry = registry
        self._allow_dynamic_import = allow_dynamic_import
        self._initialize()

    def _initialize(self) -> None:
        self._registry = (
            self._custom_registry if self._custom_registry is not None else get_registry()
        )
        self._named_specs = self._schema.named_pipelines
        self._field_resolver = FieldResolver(self._schema)
        self._default_version = self._parse_default_version()

        report = SchemaValidator(self._registry, self._allow_dynamic_import).validate(self._schema)
        self._validity = ValidityState(report)

        self._lock = Lock()
        self._field_cache: dict[str, Pipeline] = {}
        self._pipeline_cache: dict[str, Pipeline] = {}

        if report.is_valid:
            logger.debug(
                "Analysis schema is valid: {pipelines} pipelines, {rules} field rules",
                pipelines=len(self._schema.analyzers),
                rules=len(self._schema.field_rules),
            )
        else:
            logger.warning(
                "Analysis schema is invalid ({count} problems): {messages}",
                count=len(report.issues),
                messages=self._validity.joined(),
            )

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        *,
        registry: ComponentRegistry | None = None,
        allow_dynamic_import: bool = True,
    ) -> TextAnalyzer:
        """Create an analyzer from a JSON schema file."""
        return cls(
            parse_schema_file(path),
            registry=registry,
            allow_dynamic_import=allow_dynamic_import,
        )

    def _parse_default_version(self) -> MatchVersion | None:
        if self._schema.default_match_version is None:
            return None
        try:
            return MatchVersion.parse_leniently(self._schema.default_match_version)
        except ValueError:
            # Reported by the validator
            return None

    # ========================================================================
    # Validity
    # ========================================================================

    @property
    def schema(self) -> SchemaConfig:
        return self._schema

    @property
    def is_valid(self) -> bool:
        """False once any static check or lazy pipeline build has failed."""
        return self._validity.is_valid

    @property
    def invalid_messages(self) -> str:
        """Every validity message so far, newline-joined (empty when valid)."""
        return self._validity.joined()

    def _ensure_valid(self) -> None:
        if not self._validity.is_valid:
            raise InvalidSchemaError(self._validity.joined())

    # ========================================================================
    # Resolution
    # ========================================================================

    def _resolve(self, field: str) -> Pipeline:
        pipeline = self._field_cache.get(field)
        if pipeline is not None:
            return pipeline

        with self._lock:
            pipeline = self._field_cache.get(field)
            if pipeline is not None:
                return pipeline

            self._ensure_valid()
            rule = self._field_resolver.resolve_rule(field)
            if rule is None:
                raise NoAnalyzerError(field)

            pipeline = self._pipeline_for(rule)
            self._field_cache[field] = pipeline
            logger.debug(
                "Field '{field}' resolved to pipeline '{pipeline}'",
                field=field,
                pipeline=pipeline.name,
            )
            return pipeline

    def _pipeline_for(self, rule: FieldRule) -> Pipeline:
        """Build (or reuse) the pipeline for a rule. Caller holds the lock."""
        spec = self._named_specs.get(rule.analyzer)
        try:
            if spec is not None:
                pipeline = self._pipeline_cache.get(spec.name)
                if pipeline is None:
                    pipeline = build_pipeline(spec, self._registry, self._default_version)
                    self._pipeline_cache[spec.name] = pipeline
                return pipeline

            return build_fallback_pipeline(
                rule.analyzer,
                self._registry,
                self._default_version,
                self._allow_dynamic_import,
            )
        except PipelineBuildError as e:
            logger.opt(exception=e).error(
                "Failed to build analyzer '{name}'; schema is now invalid", name=e.pipeline
            )
            self._validity.invalidate(str(e))
            raise InvalidSchemaError(self._validity.joined()) from e

    def get_field_analyzer(self, field: str) -> Pipeline | None:
        """Return the pipeline for ``field``, building it if needed, or None if no rule matches.

        Raises
        ------
        InvalidSchemaError
            If the schema is (or becomes, because the build fails) invalid
        """
        self._ensure_valid()
        try:
            return self._resolve(field)
        except NoAnalyzerError:
            return None

    def token_stream(self, field: str, text: str) -> TokenStream:
        """Return a fresh, not yet reset, token stream for ``text`` under ``field``'s pipeline.

        For callers that want whoosh ``Token`` objects (positions, character
        offsets) rather than plain strings. The caller owns the stream and must
        close it.
        """
        self._ensure_valid()
        return self._resolve(field).token_stream(text)

    # ========================================================================
    # Analysis
    # ========================================================================

    def analyze(self, field: str, text: str | None) -> list[str]:
        """Analyze one value of ``field`` into its ordered token texts.

        A None value produces no tokens and is not resolved.

        Raises
        ------
        InvalidSchemaError
            If the schema is invalid
        NoAnalyzerError
            If no field rule matches ``field``
        """
        self._ensure_valid()
        if text is None:
            return []

        with self.token_stream(field, text) as stream:
            stream.reset()
            tokens = [token.text for token in stream]
            stream.end()
        return tokens

    def analyze_fields(self, field_values: Mapping[str, str | None]) -> dict[str, list[str]]:
        """Analyze a ``field -> value`` mapping into ``field -> tokens``."""
        return {field: self.analyze(field, value) for field, value in field_values.items()}

    def analyze_multi_value(self, field: str, values: Iterable[str | None] | None) -> list[str]:
        """Analyze several values of one field and concatenate their tokens in value order."""
        self._ensure_valid()
        if values is None:
            return []
        tokens: list[str] = []
        for value in values:
            tokens.extend(self.analyze(field, value))
        return tokens

    def analyze_multi_value_fields(
        self, field_values: Mapping[str, Iterable[str | None] | None]
    ) -> dict[str, list[str]]:
        """Analyze a ``field -> values`` mapping into ``field -> concatenated tokens``."""
        return {
            field: self.analyze_multi_value(field, values) for field, values in field_values.items()
        }

    # ========================================================================
    # Pickling
    # ========================================================================

    def __getstate__(self) -> dict[str, Any]:
        return {
            "schema": self._schema,
            "registry": self._custom_registry,
            "allow_dynamic_import": self._allow_dynamic_import,
        }

    def __setstate__(self, state: dict[str, Any]) -> None:
        self._schema = state["schema"]
        self._custom_registry = state["registry"]
        self._allow_dynamic_import = state["allow_dynamic_import"]
        self._initialize()

    def __repr__(self) -> str:
        return (
            f"TextAnalyzer(pipelines={len(self._schema.analyzers)}, "
            f"rules={len(self._schema.field_rules)}, valid={self.is_valid})"
        )
