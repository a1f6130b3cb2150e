"""Component registry for char filters, tokenizers, token filters and fallback analyzers."""

from hextext.core.registry.models import ComponentMetadata, ComponentType, normalize_name
from hextext.core.registry.registry import ComponentRegistry, get_registry, registry

__all__ = [
    "ComponentMetadata",
    "ComponentRegistry",
    "ComponentType",
    "get_registry",
    "normalize_name",
    "registry",
]
