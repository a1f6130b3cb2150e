"""Build runnable pipelines from schema declarations.

:class:`PipelineBuilder` assembles one pipeline step by step from registry
factories, in the order the schema declares them::

    pipeline = (
        PipelineBuilder("html", registry)
        .with_default_match_version(MatchVersion(4, 10, 4))
        .add_char_filter("htmlStrip")
        .with_tokenizer("standard")
        .add_token_filter("lowercase")
        .build()
    )

:func:`build_pipeline` does the same for a :class:`PipelineSpec` and
:func:`build_fallback_pipeline` wraps a fallback analyzer referenced by
identifier. Both raise :class:`PipelineBuildError` naming the pipeline.
"""

from __future__ import annotations

import functools
import operator
from collections.abc import Callable, Mapping
from typing import Any, Self

from whoosh.analysis import Filter, Tokenizer

from hextext.core.analysis.pipeline import CharFilter, Pipeline, is_analyzer, is_analyzer_factory
from hextext.core.exceptions import (
    AnalyzerCapabilityError,
    ComponentConfigError,
    ComponentNotFoundError,
    PipelineBuildError,
)
from hextext.core.logging import get_logger
from hextext.core.registry import ComponentRegistry, ComponentType
from hextext.core.resolver import ResolveError, resolve
from hextext.core.schema.models import PipelineSpec
from hextext.core.version import MatchVersion

logger = get_logger(__name__)

MATCH_VERSION_PARAM = "luceneMatchVersion"


class PipelineBuilder:
    """Fluent builder for a single :class:`Pipeline`."""

    def __init__(self, name: str, registry: ComponentRegistry) -> None:
        self._name = name
        self._registry = registry
        self._match_version: MatchVersion | None = None
        self._char_filters: list[CharFilter] = []
        self._tokenizer: Tokenizer | None = None
        self._filters: list[Filter] = []

    def with_default_match_version(self, version: MatchVersion) -> Self:
        self._match_version = version
        return self

    def add_char_filter(self, type_name: str, params: Mapping[str, str] | None = None) -> Self:
        char_filter = self._create(ComponentType.CHAR_FILTER, type_name, params)
        if not callable(char_filter):
            raise ComponentConfigError(
                type_name, f"char filter factory returned non-callable {type(char_filter).__name__}"
            )
        self._char_filters.append(char_filter)
        return self

    def with_tokenizer(self, type_name: str, params: Mapping[str, str] | None = None) -> Self:
        if self._tokenizer is not None:
            raise ComponentConfigError(type_name, "a pipeline takes exactly one tokenizer")
        tokenizer = self._create(ComponentType.TOKENIZER, type_name, params)
        if not isinstance(tokenizer, Tokenizer):
            raise ComponentConfigError(
                type_name, f"tokenizer factory returned {type(tokenizer).__name__}, not a Tokenizer"
            )
        self._tokenizer = tokenizer
        return self

    def add_token_filter(self, type_name: str, params: Mapping[str, str] | None = None) -> Self:
        token_filter = self._create(ComponentType.TOKEN_FILTER, type_name, params)
        if not isinstance(token_filter, Filter):
            raise ComponentConfigError(
                type_name,
                f"token filter factory returned {type(token_filter).__name__}, not a Filter",
            )
        self._filters.append(token_filter)
        return self

    def build(self) -> Pipeline:
        if self._tokenizer is None:
            raise ComponentConfigError(self._name, "no tokenizer was set")
        analyzer = functools.reduce(operator.or_, self._filters, self._tokenizer)
        return Pipeline(
            name=self._name,
            analyzer=analyzer,
            char_filters=tuple(self._char_filters),
            match_version=self._match_version,
        )

    def _create(
        self, component_type: ComponentType, type_name: str, params: Mapping[str, str] | None
    ) -> Any:
        factory_params = dict(params or {})
        # Consumed here; factories never see it
        if (version := factory_params.pop(MATCH_VERSION_PARAM, None)) is not None:
            try:
                MatchVersion.parse_leniently(version)
            except ValueError as e:
                raise ComponentConfigError(type_name, f"{MATCH_VERSION_PARAM}: {e}") from e
        return self._registry.create(component_type, type_name, factory_params)


def build_pipeline(
    spec: PipelineSpec,
    registry: ComponentRegistry,
    default_version: MatchVersion | None = None,
) -> Pipeline:
    """Build the pipeline declared by ``spec``.

    Raises
    ------
    PipelineBuildError
        If any component cannot be created (unknown type tag, rejected
        parameter, factory failure)
    """
    try:
        builder = PipelineBuilder(spec.name, registry)
        if default_version is not None:
            builder.with_default_match_version(default_version)
        for char_filter in spec.char_filters:
            builder.add_char_filter(char_filter.type, char_filter.params)
        builder.with_tokenizer(spec.tokenizer.type, spec.tokenizer.params)
        for token_filter in spec.filters:
            builder.add_token_filter(token_filter.type, token_filter.params)
        pipeline = builder.build()
    except Exception as e:
        # Factories come from plugins, so anything they raise is a build failure
        raise PipelineBuildError(spec.name, str(e) or type(e).__name__) from e

    logger.debug(
        "Built pipeline '{name}': {char_filters} char filters, tokenizer {tokenizer}, "
        "{filters} token filters",
        name=spec.name,
        char_filters=len(spec.char_filters),
        tokenizer=spec.tokenizer.type,
        filters=len(spec.filters),
    )
    return pipeline


def lookup_analyzer_factory(
    identifier: str,
    registry: ComponentRegistry,
    allow_dynamic_import: bool = True,
) -> Callable[[], Any]:
    """Find the factory for a fallback analyzer identifier.

    Registered analyzers win; otherwise the identifier is imported when
    ``allow_dynamic_import`` is set.

    Raises
    ------
    ComponentNotFoundError
        If the identifier is neither registered nor importable
    AnalyzerCapabilityError
        If it resolves to something that cannot produce an analyzer
    """
    if registry.contains(ComponentType.ANALYZER, identifier):
        return functools.partial(registry.create_analyzer, identifier)

    if not allow_dynamic_import:
        raise ComponentNotFoundError(
            ComponentType.ANALYZER.value, identifier, registry.names(ComponentType.ANALYZER)
        )

    try:
        target = resolve(identifier)
    except ResolveError as e:
        raise ComponentNotFoundError(ComponentType.ANALYZER.value, identifier) from e

    if not is_analyzer_factory(target):
        raise AnalyzerCapabilityError(identifier, type(target).__name__)
    return target


def build_fallback_pipeline(
    identifier: str,
    registry: ComponentRegistry,
    default_version: MatchVersion | None = None,
    allow_dynamic_import: bool = True,
) -> Pipeline:
    """Instantiate a fallback analyzer and wrap it as a pipeline.

    Raises
    ------
    PipelineBuildError
        If the analyzer cannot be found, created, or does not analyze text
    """
    try:
        factory = lookup_analyzer_factory(identifier, registry, allow_dynamic_import)
        analyzer = factory()
        if not is_analyzer(analyzer):
            raise AnalyzerCapabilityError(identifier, type(analyzer).__name__)
    except Exception as e:
        raise PipelineBuildError(identifier, str(e) or type(e).__name__) from e

    logger.debug("Instantiated fallback analyzer '{identifier}'", identifier=identifier)
    return Pipeline(name=identifier, analyzer=analyzer, match_version=default_version)
