"""Tests for pipeline building and the token stream protocol."""

from __future__ import annotations

import pytest
from whoosh.analysis import SpaceSeparatedTokenizer

from hextext.core.analysis import (
    Pipeline,
    PipelineBuilder,
    build_fallback_pipeline,
    build_pipeline,
    lookup_analyzer_factory,
)
from hextext.core.exceptions import (
    AnalyzerCapabilityError,
    ComponentConfigError,
    ComponentNotFoundError,
    PipelineBuildError,
    TokenStreamStateError,
)
from hextext.core.registry import ComponentRegistry, ComponentType
from hextext.core.schema import PipelineSpec
from hextext.core.version import MatchVersion


def _texts(pipeline: Pipeline, text: str) -> list[str]:
    with pipeline.token_stream(text) as stream:
        stream.reset()
        tokens = [token.text for token in stream]
        stream.end()
    return tokens


class TestPipelineBuilder:
    """Fluent assembly from registry factories."""

    def test_builds_in_declared_order(self, registry: ComponentRegistry) -> None:
        pipeline = (
            PipelineBuilder("html", registry)
            .add_char_filter("htmlStrip")
            .with_tokenizer("standard")
            .add_token_filter("lowercase")
            .add_token_filter("reverseString")
            .build()
        )

        assert pipeline.name == "html"
        assert _texts(pipeline, "<p>Hello <b>World</b></p>") == ["olleh", "dlrow"]

    def test_tokenizer_only(self, registry: ComponentRegistry) -> None:
        pipeline = PipelineBuilder("ws", registry).with_tokenizer("whitespace").build()
        assert _texts(pipeline, "Ab  Cd") == ["Ab", "Cd"]

    def test_type_tags_are_case_insensitive(self, registry: ComponentRegistry) -> None:
        pipeline = (
            PipelineBuilder("p", registry)
            .with_tokenizer("WHITESPACE")
            .add_token_filter("LowerCase")
            .build()
        )
        assert _texts(pipeline, "A B") == ["a", "b"]

    def test_requires_tokenizer(self, registry: ComponentRegistry) -> None:
        with pytest.raises(ComponentConfigError, match="no tokenizer"):
            PipelineBuilder("p", registry).add_token_filter("lowercase").build()

    def test_single_tokenizer(self, registry: ComponentRegistry) -> None:
        builder = PipelineBuilder("p", registry).with_tokenizer("whitespace")
        with pytest.raises(ComponentConfigError, match="exactly one tokenizer"):
            builder.with_tokenizer("keyword")

    def test_unknown_type(self, registry: ComponentRegistry) -> None:
        with pytest.raises(ComponentNotFoundError, match="Unknown tokenizer type 'nope'"):
            PipelineBuilder("p", registry).with_tokenizer("nope")

    def test_tokenizer_factory_must_return_tokenizer(self, registry: ComponentRegistry) -> None:
        registry.register(ComponentType.TOKENIZER, "bogus", lambda params: object())
        with pytest.raises(ComponentConfigError, match="not a Tokenizer"):
            PipelineBuilder("p", registry).with_tokenizer("bogus")

    def test_filter_factory_must_return_filter(self, registry: ComponentRegistry) -> None:
        registry.register(ComponentType.TOKEN_FILTER, "bogus", lambda params: "x")
        builder = PipelineBuilder("p", registry).with_tokenizer("whitespace")
        with pytest.raises(ComponentConfigError, match="not a Filter"):
            builder.add_token_filter("bogus")

    def test_match_version_param_is_consumed(self, registry: ComponentRegistry) -> None:
        pipeline = (
            PipelineBuilder("p", registry)
            .with_default_match_version(MatchVersion(4, 10, 4))
            .with_tokenizer("whitespace", {"luceneMatchVersion": "LUCENE_4_9"})
            .build()
        )
        assert pipeline.match_version == MatchVersion(4, 10, 4)

    def test_bad_match_version_param(self, registry: ComponentRegistry) -> None:
        with pytest.raises(ComponentConfigError, match="luceneMatchVersion"):
            PipelineBuilder("p", registry).with_tokenizer(
                "whitespace", {"luceneMatchVersion": "soon"}
            )

    def test_factory_receives_a_copy_of_params(self, registry: ComponentRegistry) -> None:
        received: list[dict[str, str]] = []

        def factory(params: dict[str, str]) -> object:
            received.append(params)
            params.clear()
            return SpaceSeparatedTokenizer()

        registry.register(ComponentType.TOKENIZER, "spy", factory)
        params = {"a": "1"}
        PipelineBuilder("p", registry).with_tokenizer("spy", params)

        assert received == [{}]
        assert params == {"a": "1"}


class TestBuildPipeline:
    """Building from a PipelineSpec wraps failures with the pipeline name."""

    def test_builds_spec(self, registry: ComponentRegistry) -> None:
        spec = PipelineSpec.model_validate({
            "name": "p",
            "charFilters": [{"type": "mapping", "mapping": "ß=>ss"}],
            "tokenizer": {"type": "whitespace"},
            "filters": [{"type": "lowercase"}],
        })

        pipeline = build_pipeline(spec, registry, MatchVersion(5, 0, 0))

        assert _texts(pipeline, "Straße X") == ["strasse", "x"]
        assert pipeline.match_version == MatchVersion(5, 0, 0)

    def test_unknown_filter(self, registry: ComponentRegistry) -> None:
        spec = PipelineSpec.model_validate({
            "name": "p",
            "tokenizer": {"type": "whitespace"},
            "filters": [{"type": "nope"}],
        })

        with pytest.raises(PipelineBuildError) as exc_info:
            build_pipeline(spec, registry)

        assert exc_info.value.pipeline == "p"
        assert str(exc_info.value).startswith("Exception initializing analyzer 'p':")
        assert "nope" in str(exc_info.value)

    def test_rejected_parameter(self, registry: ComponentRegistry) -> None:
        spec = PipelineSpec.model_validate({
            "name": "p",
            "tokenizer": {"type": "whitespace", "bogus": "1"},
        })
        with pytest.raises(PipelineBuildError, match="Unknown parameters"):
            build_pipeline(spec, registry)

    def test_factory_exception_is_wrapped(self, registry: ComponentRegistry) -> None:
        def explode(params: dict[str, str]) -> object:
            raise RuntimeError("kaboom")

        registry.register(ComponentType.TOKENIZER, "explode", explode)
        spec = PipelineSpec.model_validate({"name": "p", "tokenizer": {"type": "explode"}})

        with pytest.raises(PipelineBuildError, match="kaboom"):
            build_pipeline(spec, registry)


class TestFallbackPipelines:
    """Fallback analyzers referenced by identifier."""

    def test_registered_analyzer(self, registry: ComponentRegistry) -> None:
        pipeline = build_fallback_pipeline("whoosh.analysis.SimpleAnalyzer", registry)

        assert pipeline.name == "whoosh.analysis.SimpleAnalyzer"
        assert pipeline.char_filters == ()
        assert _texts(pipeline, "Hello World") == ["hello", "world"]

    def test_imported_tokenizer_class(self, registry: ComponentRegistry) -> None:
        pipeline = build_fallback_pipeline("whoosh.analysis.IDTokenizer", registry)
        assert _texts(pipeline, "Hello World") == ["Hello World"]

    def test_import_disabled(self, registry: ComponentRegistry) -> None:
        with pytest.raises(ComponentNotFoundError):
            lookup_analyzer_factory("whoosh.analysis.IDTokenizer", registry, False)

    def test_wrong_capability(self, registry: ComponentRegistry) -> None:
        with pytest.raises(AnalyzerCapabilityError):
            lookup_analyzer_factory("collections.OrderedDict", registry)

    @pytest.mark.parametrize("identifier", ["os.getpid", "json.dumps"])
    def test_arbitrary_callables_refused(
        self, registry: ComponentRegistry, identifier: str
    ) -> None:
        with pytest.raises(AnalyzerCapabilityError):
            lookup_analyzer_factory(identifier, registry)

    def test_factory_failure_is_wrapped(self, registry: ComponentRegistry) -> None:
        # LanguageAnalyzer requires a language argument
        with pytest.raises(PipelineBuildError) as exc_info:
            build_fallback_pipeline("whoosh.analysis.LanguageAnalyzer", registry)
        assert exc_info.value.pipeline == "whoosh.analysis.LanguageAnalyzer"

    def test_result_must_analyze(self, registry: ComponentRegistry) -> None:
        registry.register(ComponentType.ANALYZER, "my.Analyzer", dict)
        with pytest.raises(PipelineBuildError, match="is not a whoosh.analysis.Analyzer"):
            build_fallback_pipeline("my.Analyzer", registry)


class TestTokenStream:
    """reset -> iterate -> end -> close."""

    @pytest.fixture
    def pipeline(self, registry: ComponentRegistry) -> Pipeline:
        return PipelineBuilder("ws", registry).with_tokenizer("whitespace").build()

    def test_positions_and_offsets(self, pipeline: Pipeline) -> None:
        with pipeline.token_stream("ab cd") as stream:
            stream.reset()
            tokens = [(t.text, t.pos, t.startchar, t.endchar) for t in stream]
            stream.end()

        assert tokens == [("ab", 0, 0, 2), ("cd", 1, 3, 5)]
        assert stream.final_offset == 5
        assert stream.closed

    def test_iterating_before_reset(self, pipeline: Pipeline) -> None:
        stream = pipeline.token_stream("ab")
        with pytest.raises(TokenStreamStateError, match="call reset"):
            next(stream)

    def test_reset_only_once(self, pipeline: Pipeline) -> None:
        stream = pipeline.token_stream("ab")
        stream.reset()
        with pytest.raises(TokenStreamStateError):
            stream.reset()

    def test_end_requires_reset(self, pipeline: Pipeline) -> None:
        with pytest.raises(TokenStreamStateError):
            pipeline.token_stream("ab").end()

    def test_close_is_idempotent(self, pipeline: Pipeline) -> None:
        stream = pipeline.token_stream("ab cd")
        stream.reset()
        next(stream)
        stream.close()
        stream.close()

        assert stream.closed
        with pytest.raises(TokenStreamStateError):
            next(stream)

    def test_final_offset_counts_filtered_text(self, registry: ComponentRegistry) -> None:
        pipeline = (
            PipelineBuilder("p", registry)
            .add_char_filter("htmlStrip")
            .with_tokenizer("whitespace")
            .build()
        )
        stream = pipeline.token_stream("<b>ab</b>")
        stream.reset()
        list(stream)
        stream.end()

        assert stream.final_offset == 2
