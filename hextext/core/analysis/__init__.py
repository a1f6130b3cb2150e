"""Pipelines, token streams and the pipeline builder."""

from hextext.core.analysis.builder import (
    PipelineBuilder,
    build_fallback_pipeline,
    build_pipeline,
    lookup_analyzer_factory,
)
from hextext.core.analysis.pipeline import (
    CharFilter,
    Pipeline,
    TokenStream,
    is_analyzer,
    is_analyzer_factory,
)

__all__ = [
    "CharFilter",
    "Pipeline",
    "PipelineBuilder",
    "TokenStream",
    "build_fallback_pipeline",
    "build_pipeline",
    "is_analyzer",
    "is_analyzer_factory",
    "lookup_analyzer_factory",
]
