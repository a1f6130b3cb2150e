"""Builtin components backed by whoosh.

Char filters, tokenizers and token filters are registered under their short
type tags; fallback analyzers under their fully-qualified identifiers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hextext.builtin.analyzers import ANALYZERS
from hextext.builtin.char_filters import CHAR_FILTERS
from hextext.builtin.token_filters import TOKEN_FILTERS
from hextext.builtin.tokenizers import TOKENIZERS
from hextext.core.registry.models import ComponentType

if TYPE_CHECKING:
    from hextext.core.registry import ComponentRegistry

BUILTIN_NAMESPACE = "builtin"


def register_components(registry: ComponentRegistry) -> int:
    """Register every builtin component into ``registry``.

    Returns
    -------
    int
        Number of components registered
    """
    tables = (
        (ComponentType.CHAR_FILTER, CHAR_FILTERS),
        (ComponentType.TOKENIZER, TOKENIZERS),
        (ComponentType.TOKEN_FILTER, TOKEN_FILTERS),
        (ComponentType.ANALYZER, ANALYZERS),
    )
    count = 0
    for component_type, factories in tables:
        for name, factory in factories.items():
            registry.register(component_type, name, factory, namespace=BUILTIN_NAMESPACE)
            count += 1
    return count


__all__ = ["BUILTIN_NAMESPACE", "register_components"]
