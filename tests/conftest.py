"""Shared fixtures for the hextext test suite.

- registry: a fresh registry with the builtin components
- whitespace_schema / html_schema: small analysis schemas used across modules
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from hextext.core.registry import ComponentRegistry


@pytest.fixture
def registry() -> ComponentRegistry:
    """Fresh registry with the builtin components, isolated from the global one."""
    return ComponentRegistry.with_builtins()


@pytest.fixture
def whitespace_schema() -> dict[str, Any]:
    """One whitespace + lowercase pipeline matched by every field."""
    return {
        "analyzers": [
            {
                "name": "ws",
                "tokenizer": {"type": "whitespace"},
                "filters": [{"type": "lowercase"}],
            }
        ],
        "fields": [{"regex": ".+", "analyzer": "ws"}],
    }


@pytest.fixture
def html_schema() -> str:
    """Schema with exact names, an html regex, a catch-all and a fallback analyzer."""
    return json.dumps({
        "defaultLuceneMatchVersion": "4.10.4",
        "analyzers": [
            {
                "name": "html",
                "charFilters": [{"type": "htmlStrip"}],
                "tokenizer": {"type": "standard"},
                "filters": [{"type": "lowercase"}],
            },
            {"name": "ws", "tokenizer": {"type": "whitespace"}},
            {"name": "exact", "tokenizer": {"type": "keyword"}},
        ],
        "fields": [
            {"regex": ".*html.*", "analyzer": "html"},
            {"regex": ".+", "analyzer": "ws"},
            {"name": "id", "analyzer": "exact"},
            {"name": "summary", "analyzer": "whoosh.analysis.StandardAnalyzer"},
        ],
    })
