"""Component registry - the name-to-factory lookup behind every pipeline build.

Schemas refer to char filters, tokenizers and token filters by short type tags
(``"standard"``, ``"lowercase"``) and to fallback analyzers by fully-qualified
identifiers (``"whoosh.analysis.StandardAnalyzer"``). The hosting application
populates a registry before use; the builtin whoosh-backed components are
loaded into the global registry on first access.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from threading import Lock
from typing import TypeVar

from hextext.core.exceptions import ComponentAlreadyRegisteredError, ComponentNotFoundError
from hextext.core.logging import get_logger
from hextext.core.registry.models import ComponentMetadata, ComponentType, normalize_name

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., object])


class ComponentRegistry:
    """Registry of component factories keyed by (component type, name).

    Names are unique per component type, so ``patternReplace`` can exist both
    as a char filter and as a token filter.
    """

    def __init__(self) -> None:
        self._components: dict[tuple[ComponentType, str], ComponentMetadata] = {}
        self._lock = Lock()

    @classmethod
    def with_builtins(cls) -> ComponentRegistry:
        """Create a registry pre-populated with the builtin components."""
        new_registry = cls()
        _register_builtins(new_registry)
        return new_registry

    # ========================================================================
    # Registration
    # ========================================================================

    def register(
        self,
        component_type: ComponentType | str,
        name: str,
        factory: Callable[..., object],
        *,
        namespace: str = "user",
        description: str = "",
        replace: bool = False,
    ) -> ComponentMetadata:
        """Register a component factory.

        Parameters
        ----------
        component_type : ComponentType | str
            Kind of component the factory produces
        name : str
            Type tag (or analyzer identifier) used in schemas
        factory : Callable
            ``factory(params: dict[str, str])`` for char filters, tokenizers and
            token filters; ``factory()`` for analyzers
        namespace : str
            Informational grouping shown by ``hextext components``
        description : str
            One-line description (defaults to the factory docstring)
        replace : bool
            Allow overriding an existing registration

        Returns
        -------
        ComponentMetadata
            Metadata for the registered component

        Raises
        ------
        ComponentAlreadyRegisteredError
            If the name is taken for this component type and ``replace`` is False
        """
        component_type = ComponentType(component_type)
        metadata = ComponentMetadata(
            name=name,
            component_type=component_type,
            factory=factory,
            namespace=namespace,
            description=description,
        )
        key = (component_type, metadata.key)

        with self._lock:
            if key in self._components and not replace:
                raise ComponentAlreadyRegisteredError(component_type.value, name)
            self._components[key] = metadata

        logger.debug(
            "Registered {component_type} {name} (namespace: {namespace})",
            component_type=component_type.value,
            name=name,
            namespace=namespace,
        )
        return metadata

    def component(
        self,
        component_type: ComponentType | str,
        name: str,
        *,
        namespace: str = "user",
        description: str = "",
    ) -> Callable[[F], F]:
        """Decorator form of :meth:`register`.

        Examples
        --------
        >>> custom = ComponentRegistry()
        >>> @custom.component(ComponentType.TOKEN_FILTER, "noop")
        ... def noop(params):
        ...     return PassFilter()  # doctest: +SKIP
        """

        def decorator(factory: F) -> F:
            self.register(
                component_type, name, factory, namespace=namespace, description=description
            )
            return factory

        return decorator

    def unregister(self, component_type: ComponentType | str, name: str) -> bool:
        """Remove a registration. Returns False if nothing was registered."""
        key = (ComponentType(component_type), normalize_name(name))
        with self._lock:
            return self._components.pop(key, None) is not None

    # ========================================================================
    # Lookup & Instantiation
    # ========================================================================

    def contains(self, component_type: ComponentType | str, name: str) -> bool:
        return (ComponentType(component_type), normalize_name(name)) in self._components

    def get_metadata(self, component_type: ComponentType | str, name: str) -> ComponentMetadata:
        """Get component metadata without instantiation.

        Raises
        ------
        ComponentNotFoundError
            If nothing is registered under ``name`` for this component type
        """
        component_type = ComponentType(component_type)
        metadata = self._components.get((component_type, normalize_name(name)))
        if metadata is None:
            raise ComponentNotFoundError(component_type.value, name, self.names(component_type))
        return metadata

    def create(
        self,
        component_type: ComponentType | str,
        name: str,
        params: Mapping[str, str] | None = None,
    ) -> object:
        """Instantiate a char filter, tokenizer or token filter.

        The factory receives its own mutable copy of ``params``.
        """
        metadata = self.get_metadata(component_type, name)
        return metadata.factory(dict(params or {}))

    def create_analyzer(self, name: str) -> object:
        """Instantiate a registered fallback analyzer."""
        metadata = self.get_metadata(ComponentType.ANALYZER, name)
        return metadata.factory()

    # ========================================================================
    # Listing
    # ========================================================================

    def names(self, component_type: ComponentType | str) -> list[str]:
        component_type = ComponentType(component_type)
        return [m.name for (kind, _), m in self._components.items() if kind == component_type]

    def list_components(
        self, component_type: ComponentType | str | None = None
    ) -> list[ComponentMetadata]:
        """List registrations, optionally filtered by component type, sorted by name."""
        wanted = ComponentType(component_type) if component_type else None
        results = [
            metadata
            for (kind, _), metadata in self._components.items()
            if wanted is None or kind == wanted
        ]
        return sorted(results, key=lambda m: (m.component_type.value, m.key))

    def __len__(self) -> int:
        return len(self._components)

    def __getstate__(self) -> dict[str, object]:
        return {"components": dict(self._components)}

    def __setstate__(self, state: dict[str, object]) -> None:
        self._components = state["components"]  # type: ignore[assignment]
        self._lock = Lock()

    # ========================================================================
    # Testing Support
    # ========================================================================

    def _reset_for_testing(self) -> None:
        """Reset registry state (for testing only)."""
        with self._lock:
            self._components.clear()


# Global registry instance
registry = ComponentRegistry()

_builtins_loaded = False
_bootstrap_lock = Lock()


def _register_builtins(target: ComponentRegistry) -> None:
    # Imported lazily: the builtin package depends on this module
    from hextext.builtin import register_components

    count = register_components(target)
    logger.debug("Registered {count} builtin components", count=count)


def get_registry() -> ComponentRegistry:
    """Return the global registry, loading the builtin components on first use."""
    global _builtins_loaded
    if not _builtins_loaded:
        with _bootstrap_lock:
            if not _builtins_loaded:
                _register_builtins(registry)
                _builtins_loaded = True
    return registry
