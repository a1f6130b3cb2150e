"""Typed access to the string parameters of a component declaration."""

from __future__ import annotations

from collections.abc import Mapping

from hextext.core.exceptions import ComponentConfigError


class ComponentParams:
    """Consumes a component's parameters; anything left over is rejected by :meth:`finish`.

    Examples
    --------
    >>> args = ComponentParams("length", {"min": "2", "max": "10"})
    >>> args.get_int("min"), args.get_int("max")
    (2, 10)
    >>> args.finish()
    """

    def __init__(self, component: str, params: Mapping[str, str]) -> None:
        self._component = component
        self._params = dict(params)

    def require(self, name: str) -> str:
        if name not in self._params:
            raise ComponentConfigError(
                self._component, f"Configuration Error: missing parameter '{name}'"
            )
        return self._params.pop(name)

    def get(self, name: str, default: str | None = None) -> str | None:
        return self._params.pop(name, default)

    def get_int(self, name: str, default: int | None = None) -> int:
        value = self.get_optional_int(name)
        if value is not None:
            return value
        if default is None:
            raise ComponentConfigError(
                self._component, f"Configuration Error: missing parameter '{name}'"
            )
        return default

    def get_optional_int(self, name: str) -> int | None:
        raw = self._params.pop(name, None)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError as e:
            raise ComponentConfigError(
                self._component, f"parameter '{name}' must be an integer, got {raw!r}"
            ) from e

    def get_list(self, name: str, separator: str = ",") -> list[str] | None:
        """Split a separated list, dropping blanks; None when the parameter is absent."""
        raw = self._params.pop(name, None)
        if raw is None:
            return None
        return [item.strip() for item in raw.split(separator) if item.strip()]

    def finish(self) -> None:
        """Reject any parameter the factory did not consume."""
        if self._params:
            raise ComponentConfigError(self._component, f"Unknown parameters: {self._params}")


def check_gram_sizes(component: str, min_size: int, max_size: int) -> None:
    """Validate ``minGramSize``/``maxGramSize`` of the n-gram components."""
    if min_size < 1:
        raise ComponentConfigError(component, f"minGramSize must be at least 1, got {min_size}")
    if max_size < min_size:
        raise ComponentConfigError(
            component, f"maxGramSize ({max_size}) must not be less than minGramSize ({min_size})"
        )
