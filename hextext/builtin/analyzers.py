"""Fallback analyzers: complete whoosh analyzers referenced by identifier.

A field rule whose ``analyzer`` names no declared pipeline is looked up here by
its fully-qualified identifier, so schemas can use a stock analyzer without
declaring its parts.
"""

from __future__ import annotations

from whoosh import analysis

ANALYZERS = {
    f"whoosh.analysis.{factory.__name__}": factory
    for factory in (
        analysis.StandardAnalyzer,
        analysis.SimpleAnalyzer,
        analysis.KeywordAnalyzer,
        analysis.StemmingAnalyzer,
        analysis.FancyAnalyzer,
    )
}
