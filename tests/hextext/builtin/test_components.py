"""Tests for the builtin char filters, tokenizers, token filters and analyzers."""

from __future__ import annotations

import pytest

from hextext.builtin import register_components
from hextext.builtin.char_filters import HTMLStripCharFilter, MappingCharFilter
from hextext.builtin.params import ComponentParams
from hextext.core.analysis import Pipeline, PipelineBuilder, build_fallback_pipeline
from hextext.core.exceptions import ComponentConfigError
from hextext.core.registry import ComponentRegistry, ComponentType


def analyze(
    registry: ComponentRegistry,
    text: str,
    tokenizer: str = "whitespace",
    tokenizer_params: dict[str, str] | None = None,
    filters: list[tuple[str, dict[str, str]]] | None = None,
    char_filters: list[tuple[str, dict[str, str]]] | None = None,
) -> list[str]:
    builder = PipelineBuilder("test", registry)
    for name, params in char_filters or []:
        builder.add_char_filter(name, params)
    builder.with_tokenizer(tokenizer, tokenizer_params)
    for name, params in filters or []:
        builder.add_token_filter(name, params)
    return _texts(builder.build(), text)


def _texts(pipeline: Pipeline, text: str) -> list[str]:
    with pipeline.token_stream(text) as stream:
        stream.reset()
        return [token.text for token in stream]


class TestRegistration:
    """register_components populates an empty registry."""

    def test_returns_count(self) -> None:
        registry = ComponentRegistry()
        assert register_components(registry) == len(registry) == 26

    def test_builtin_namespace(self, registry: ComponentRegistry) -> None:
        metadata = registry.get_metadata(ComponentType.TOKENIZER, "standard")
        assert metadata.namespace == "builtin"
        assert metadata.summary


class TestComponentParams:
    """Parameter consumption and rejection."""

    def test_unknown_parameters_rejected(self) -> None:
        args = ComponentParams("lowercase", {"bogus": "1"})
        with pytest.raises(ComponentConfigError, match="Unknown parameters"):
            args.finish()

    def test_missing_required(self) -> None:
        with pytest.raises(ComponentConfigError, match="missing parameter 'pattern'"):
            ComponentParams("pattern", {}).require("pattern")

    def test_int_parsing(self) -> None:
        args = ComponentParams("nGram", {"minGramSize": "x"})
        with pytest.raises(ComponentConfigError, match="must be an integer"):
            args.get_int("minGramSize", 1)

    def test_list_parsing(self) -> None:
        assert ComponentParams("stop", {"words": " a, ,b "}).get_list("words") == ["a", "b"]
        assert ComponentParams("stop", {}).get_list("words") is None


class TestCharFilters:
    """htmlStrip, mapping, patternReplace."""

    def test_html_strip(self) -> None:
        strip = HTMLStripCharFilter()
        assert strip("<p>Fish &amp; <b>Chips</b></p>").split() == ["Fish", "&", "Chips"]

    def test_html_strip_drops_script_and_style(self) -> None:
        strip = HTMLStripCharFilter()
        text = "a<script>var x = 1;</script>b<style>p {}</style>c"
        assert strip(text).split() == ["abc"]

    def test_html_strip_keeps_leading_text_and_comments_out(self) -> None:
        strip = HTMLStripCharFilter()
        assert strip("plain <!-- note --><em>text</em> here").split() == ["plain", "text", "here"]

    def test_html_strip_empty_value(self) -> None:
        assert HTMLStripCharFilter()("") == ""

    def test_html_strip_block_tags_separate_words(self, registry: ComponentRegistry) -> None:
        tokens = analyze(registry, "one<br>two<div>three</div>", char_filters=[("htmlStrip", {})])
        assert tokens == ["one", "two", "three"]

    def test_html_strip_escaped_tags(self) -> None:
        strip = HTMLStripCharFilter(frozenset({"B"}))
        assert strip("<i>x</i><b>y</b>").strip() == "x<b>y</b>"

    def test_html_strip_escaped_tag_attributes(self) -> None:
        strip = HTMLStripCharFilter(frozenset({"a"}))
        assert strip('see <a href="/x">link</a>').strip() == 'see <a href="/x">link</a>'

    def test_mapping_prefers_longest_match(self) -> None:
        mapping = MappingCharFilter({"a": "1", "aa": "2"})
        assert mapping("aaa") == "21"

    def test_mapping_component(self, registry: ComponentRegistry) -> None:
        tokens = analyze(
            registry, "Straße Größe", char_filters=[("mapping", {"mapping": "ß=>ss, ö=>oe"})]
        )
        assert tokens == ["Strasse", "Groesse"]

    def test_mapping_requires_entries(self, registry: ComponentRegistry) -> None:
        with pytest.raises(ComponentConfigError):
            registry.create(ComponentType.CHAR_FILTER, "mapping", {})
        with pytest.raises(ComponentConfigError, match="from=>to"):
            registry.create(ComponentType.CHAR_FILTER, "mapping", {"mapping": "ab"})

    def test_pattern_replace(self, registry: ComponentRegistry) -> None:
        tokens = analyze(
            registry,
            "foo-bar_baz",
            char_filters=[("patternReplace", {"pattern": "[-_]", "replacement": " "})],
        )
        assert tokens == ["foo", "bar", "baz"]

    def test_pattern_replace_invalid_pattern(self, registry: ComponentRegistry) -> None:
        with pytest.raises(ComponentConfigError, match="invalid pattern"):
            registry.create(ComponentType.CHAR_FILTER, "patternReplace", {"pattern": "("})


class TestTokenizers:
    """Each tokenizer tag on representative input."""

    def test_standard(self, registry: ComponentRegistry) -> None:
        assert analyze(registry, "Hello, World! e.g. 3.14", "standard") == [
            "Hello",
            "World",
            "e.g",
            "3.14",
        ]

    def test_whitespace(self, registry: ComponentRegistry) -> None:
        assert analyze(registry, " a\tb\nc, ") == ["a", "b", "c,"]

    def test_keyword(self, registry: ComponentRegistry) -> None:
        assert analyze(registry, "New York City", "keyword") == ["New York City"]

    def test_letter(self, registry: ComponentRegistry) -> None:
        assert analyze(registry, "abc123def_ghi", "letter") == ["abc", "def", "ghi"]

    def test_pattern_split(self, registry: ComponentRegistry) -> None:
        assert analyze(registry, "a,b,,c", "pattern", {"pattern": ","}) == ["a", "b", "c"]

    def test_pattern_match(self, registry: ComponentRegistry) -> None:
        tokens = analyze(registry, "a1b22c", "pattern", {"pattern": r"\d+", "group": "0"})
        assert tokens == ["1", "22"]

    def test_pattern_rejects_other_groups(self, registry: ComponentRegistry) -> None:
        with pytest.raises(ComponentConfigError, match="group"):
            registry.create(ComponentType.TOKENIZER, "pattern", {"pattern": "x", "group": "1"})

    def test_comma(self, registry: ComponentRegistry) -> None:
        assert analyze(registry, " a , b c ,, d ", "comma") == ["a", "b c", "d"]

    def test_path_hierarchy(self, registry: ComponentRegistry) -> None:
        assert analyze(registry, "usr/local/bin", "pathHierarchy") == [
            "usr",
            "usr/local",
            "usr/local/bin",
        ]

    def test_path_hierarchy_delimiter(self, registry: ComponentRegistry) -> None:
        tokens = analyze(registry, "a.b", "pathHierarchy", {"delimiter": "."})
        assert tokens == ["a", "a.b"]

    def test_ngram(self, registry: ComponentRegistry) -> None:
        tokens = analyze(registry, "abc", "nGram", {"minGramSize": "1", "maxGramSize": "2"})
        assert sorted(tokens) == ["a", "ab", "b", "bc", "c"]

    def test_ngram_sizes_validated(self, registry: ComponentRegistry) -> None:
        with pytest.raises(ComponentConfigError, match="maxGramSize"):
            registry.create(
                ComponentType.TOKENIZER, "nGram", {"minGramSize": "3", "maxGramSize": "2"}
            )

    def test_unknown_parameter(self, registry: ComponentRegistry) -> None:
        with pytest.raises(ComponentConfigError, match="Unknown parameters"):
            registry.create(ComponentType.TOKENIZER, "whitespace", {"maxTokenLength": "5"})


class TestTokenFilters:
    """Each token filter tag on representative input."""

    def test_lowercase(self, registry: ComponentRegistry) -> None:
        assert analyze(registry, "ABC dEf", filters=[("lowercase", {})]) == ["abc", "def"]

    def test_stop_default_words(self, registry: ComponentRegistry) -> None:
        assert analyze(registry, "the quick fox", filters=[("stop", {})]) == ["quick", "fox"]

    def test_stop_custom_words(self, registry: ComponentRegistry) -> None:
        tokens = analyze(registry, "the quick a fox", filters=[("stop", {"words": "quick,fox"})])
        assert tokens == ["the", "a"]

    def test_length(self, registry: ComponentRegistry) -> None:
        tokens = analyze(registry, "a bb ccc dddd", filters=[("length", {"min": "2", "max": "3"})])
        assert tokens == ["bb", "ccc"]

    def test_length_requires_bounds(self, registry: ComponentRegistry) -> None:
        with pytest.raises(ComponentConfigError, match="missing parameter 'max'"):
            registry.create(ComponentType.TOKEN_FILTER, "length", {"min": "2"})

    def test_trim(self, registry: ComponentRegistry) -> None:
        assert analyze(registry, "  padded  ", "keyword", filters=[("trim", {})]) == ["padded"]

    def test_ascii_folding(self, registry: ComponentRegistry) -> None:
        tokens = analyze(registry, "café naïve", filters=[("asciiFolding", {})])
        assert tokens == ["cafe", "naive"]

    def test_porter_stem(self, registry: ComponentRegistry) -> None:
        assert analyze(registry, "running cats", filters=[("porterStem", {})]) == ["run", "cat"]

    def test_snowball_default_english(self, registry: ComponentRegistry) -> None:
        assert analyze(registry, "running", filters=[("snowballPorter", {})]) == ["run"]

    def test_reverse_string(self, registry: ComponentRegistry) -> None:
        assert analyze(registry, "abc", filters=[("reverseString", {})]) == ["cba"]

    def test_pattern_replace(self, registry: ComponentRegistry) -> None:
        filters = [("patternReplace", {"pattern": r"\d", "replacement": "#"})]
        assert analyze(registry, "a1b2 c", filters=filters) == ["a#b#", "c"]

    def test_ngram(self, registry: ComponentRegistry) -> None:
        filters = [("nGram", {"minGramSize": "2", "maxGramSize": "2"})]
        assert analyze(registry, "abcd", filters=filters) == ["ab", "bc", "cd"]

    def test_chain_order(self, registry: ComponentRegistry) -> None:
        filters = [("lowercase", {}), ("stop", {"words": "the"}), ("reverseString", {})]
        assert analyze(registry, "The Cat", filters=filters) == ["tac"]


class TestFallbackAnalyzers:
    """Stock whoosh analyzers registered by identifier."""

    @pytest.mark.parametrize(
        ("identifier", "expected"),
        [
            ("whoosh.analysis.StandardAnalyzer", ["running", "cats"]),
            ("whoosh.analysis.SimpleAnalyzer", ["the", "running", "cats"]),
            ("whoosh.analysis.KeywordAnalyzer", ["The", "Running", "cats"]),
            ("whoosh.analysis.StemmingAnalyzer", ["run", "cat"]),
        ],
    )
    def test_analyzers(
        self, registry: ComponentRegistry, identifier: str, expected: list[str]
    ) -> None:
        pipeline = build_fallback_pipeline(identifier, registry)
        assert _texts(pipeline, "The Running cats") == expected

    def test_fancy_analyzer_builds(self, registry: ComponentRegistry) -> None:
        pipeline = build_fallback_pipeline("whoosh.analysis.FancyAnalyzer", registry)
        assert "brown" in _texts(pipeline, "The Quick brown foxes")
