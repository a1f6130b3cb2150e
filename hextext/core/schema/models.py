"""Pydantic models for the JSON analysis schema.

A schema declares named analysis pipelines and the rules that map document
field names onto them::

    {
      "defaultLuceneMatchVersion": "4.10.4",
      "analyzers": [{
        "name": "html",
        "charFilters": [{"type": "htmlStrip"}],
        "tokenizer": {"type": "standard"},
        "filters": [{"type": "lowercase"}, {"type": "stop", "words": "a,an,the"}]
      }],
      "fields": [
        {"name": "keywords", "analyzer": "whoosh.analysis.KeywordAnalyzer"},
        {"regex": ".*html.*", "analyzer": "html"}
      ]
    }

The models only describe the document's shape. Consistency rules (exactly one
of ``name``/``regex``, resolvable analyzer references, version baseline) are
checked by :mod:`hextext.core.validation` so that every violation is reported
instead of the first.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, model_validator

_TYPE_KEY = "type"


class ComponentSpec(BaseModel):
    """One char filter, tokenizer or token filter declaration.

    The JSON object carries a ``type`` tag plus arbitrary string-valued
    parameters; the tag is kept apart from the parameters handed to the
    component factory.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: StrictStr = Field(description="Registered component type tag, e.g. 'standard'")
    params: dict[StrictStr, StrictStr] = Field(
        default_factory=dict, description="Factory parameters (type tag excluded)"
    )

    @model_validator(mode="before")
    @classmethod
    def _split_type_from_params(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "params" in data:
            return data
        params = {key: value for key, value in data.items() if key != _TYPE_KEY}
        result: dict[str, Any] = {"params": params}
        if _TYPE_KEY in data:
            result[_TYPE_KEY] = data[_TYPE_KEY]
        return result


class PipelineSpec(BaseModel):
    """A named pipeline: char filters, exactly one tokenizer, token filters."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: StrictStr
    char_filters: tuple[ComponentSpec, ...] = Field(default=(), alias="charFilters")
    tokenizer: ComponentSpec
    filters: tuple[ComponentSpec, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _absent_lists_as_empty(cls, data: Any) -> Any:
        # JSON null for an optional list means "none declared"
        if isinstance(data, dict):
            data = dict(data)
            for key in ("charFilters", "char_filters", "filters"):
                if key in data and data[key] is None:
                    data[key] = ()
        return data


class FieldRule(BaseModel):
    """Maps an exact field name or a full-match regex to an analyzer reference.

    ``analyzer`` is either the name of a declared :class:`PipelineSpec` or the
    fully-qualified identifier of a fallback analyzer.
    """

    model_config = ConfigDict(frozen=True)

    name: StrictStr | None = None
    regex: StrictStr | None = None
    analyzer: StrictStr

    @property
    def field_ref(self) -> str:
        """Human-readable reference used in messages."""
        if self.name is not None:
            return self.name
        if self.regex is not None:
            return self.regex
        return "<unnamed>"


class SchemaConfig(BaseModel):
    """Parsed analysis schema. Immutable after construction."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    default_match_version: StrictStr | None = Field(
        default=None, alias="defaultLuceneMatchVersion"
    )
    analyzers: tuple[PipelineSpec, ...] = ()
    field_rules: tuple[FieldRule, ...] = Field(alias="fields")

    @model_validator(mode="before")
    @classmethod
    def _absent_analyzers_as_empty(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("analyzers", ()) is None:
            data = {**data, "analyzers": ()}
        return data

    @property
    def named_pipelines(self) -> dict[str, PipelineSpec]:
        """Pipeline specs by name; the first declaration of a name wins."""
        named: dict[str, PipelineSpec] = {}
        for spec in self.analyzers:
            named.setdefault(spec.name, spec)
        return named
