"""Models and type definitions for the component registry."""

from __future__ import annotations

import inspect
from collections.abc import Callable  # noqa: TC003 - needed at runtime by pydantic
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hextext.core.exceptions import ComponentConfigError


class ComponentType(StrEnum):
    """Kinds of component a schema can refer to by name."""

    CHAR_FILTER = "char_filter"
    TOKENIZER = "tokenizer"
    TOKEN_FILTER = "token_filter"
    ANALYZER = "analyzer"  # Fallback analyzers referenced by fully-qualified identifier


class ComponentMetadata(BaseModel):
    """A registered factory and what it was registered as.

    Char filter, tokenizer and token filter factories are called with the
    component's string parameters (``factory(params)``); analyzer factories
    are called without arguments.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str
    component_type: ComponentType
    factory: Callable[..., object]
    namespace: str = Field(default="user")
    description: str = Field(default="")

    @field_validator("factory")
    @classmethod
    def validate_is_callable(cls, v: object) -> object:
        if not callable(v):
            raise ComponentConfigError("factory", f"expected a callable, got {type(v).__name__}")
        return v

    @property
    def key(self) -> str:
        """Case-insensitive lookup key."""
        return normalize_name(self.name)

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}:{self.name}"

    @property
    def summary(self) -> str:
        """Description, or the first line of the factory's docstring."""
        if self.description:
            return self.description
        doc = inspect.getdoc(self.factory) or ""
        return doc.splitlines()[0] if doc else ""


def normalize_name(name: str) -> str:
    """Component names are matched case-insensitively (``htmlStrip`` == ``htmlstrip``)."""
    return name.strip().lower()
