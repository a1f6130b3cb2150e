"""Module path resolver for fallback analyzers.

A field rule whose analyzer is not a declared pipeline is treated as the
fully-qualified identifier of an analyzer. Registered analyzers are looked up
in the component registry first; when dynamic import is enabled, anything else
is resolved through Python's import system.

Examples
--------
>>> from hextext.core.resolver import resolve
>>> StandardAnalyzer = resolve("whoosh.analysis.StandardAnalyzer")
"""

from __future__ import annotations

import importlib
from typing import Any

from hextext.core.exceptions import HexTextError


class ResolveError(HexTextError):
    """Raised when a module path cannot be resolved."""

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"Cannot resolve '{kind}': {reason}")


def resolve(path: str) -> Any:
    """Resolve ``package.module.Name`` to the named module attribute.

    Parameters
    ----------
    path : str
        Full module path to a class or factory function

    Returns
    -------
    Any
        The resolved attribute

    Raises
    ------
    ResolveError
        If the path is malformed, or the module or attribute cannot be found
    """
    if "." not in path:
        raise ResolveError(
            path, "Must be a full module path (e.g., 'whoosh.analysis.StandardAnalyzer')"
        )

    module_path, attr_name = path.rsplit(".", 1)
    if not attr_name or not all(module_path.split(".")):
        raise ResolveError(path, "Invalid format - expected 'module.path.Name'")

    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as e:
        raise ResolveError(path, f"Module '{module_path}' not found: {e}") from e
    except Exception as e:
        # Errors raised while the module body runs
        raise ResolveError(path, f"Failed to import '{module_path}': {e}") from e

    try:
        return getattr(module, attr_name)
    except AttributeError as e:
        available = [name for name in dir(module) if not name.startswith("_")]
        raise ResolveError(
            path,
            f"'{attr_name}' not found in '{module_path}'. Available: {', '.join(available[:10])}",
        ) from e
