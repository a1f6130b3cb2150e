"""Builtin token filters, each backed by a whoosh filter."""

from __future__ import annotations

import re
from collections.abc import Mapping

from whoosh.analysis import (
    CharsetFilter,
    Filter,
    LowercaseFilter,
    NgramFilter,
    ReverseTextFilter,
    StemFilter,
    StopFilter,
    StripFilter,
    SubstitutionFilter,
)
from whoosh.analysis.filters import STOP_WORDS
from whoosh.support.charset import accent_map

from hextext.builtin.params import ComponentParams, check_gram_sizes
from hextext.core.exceptions import ComponentConfigError


def lowercase(params: Mapping[str, str]) -> Filter:
    """Lowercase every token."""
    ComponentParams("lowercase", params).finish()
    return LowercaseFilter()


def stop(params: Mapping[str, str]) -> Filter:
    """Drop stop words.

    ``words`` is a comma-separated list (whoosh's English list by default).
    ``minLength`` (default 1) and ``maxLength`` also drop tokens by length.
    """
    args = ComponentParams("stop", params)
    words = args.get_list("words")
    min_length = args.get_int("minLength", 1)
    max_length = args.get_optional_int("maxLength")
    args.finish()
    stoplist = STOP_WORDS if words is None else frozenset(words)
    return StopFilter(stoplist=stoplist, minsize=min_length, maxsize=max_length)


def length(params: Mapping[str, str]) -> Filter:
    """Keep tokens whose length lies in ``[min, max]``."""
    args = ComponentParams("length", params)
    min_length = args.get_int("min")
    max_length = args.get_int("max")
    args.finish()
    if min_length < 0 or max_length < min_length:
        raise ComponentConfigError("length", f"invalid bounds min={min_length} max={max_length}")
    return StopFilter(stoplist=(), minsize=min_length, maxsize=max_length, renumber=False)


def trim(params: Mapping[str, str]) -> Filter:
    """Strip leading and trailing whitespace from tokens."""
    ComponentParams("trim", params).finish()
    return StripFilter()


def ascii_folding(params: Mapping[str, str]) -> Filter:
    """Fold accented characters to their unaccented ASCII forms."""
    ComponentParams("asciiFolding", params).finish()
    return CharsetFilter(accent_map)


def porter_stem(params: Mapping[str, str]) -> Filter:
    """English Porter stemming."""
    ComponentParams("porterStem", params).finish()
    return StemFilter()


def snowball_porter(params: Mapping[str, str]) -> Filter:
    """Snowball stemming for ``language`` (default English)."""
    args = ComponentParams("snowballPorter", params)
    language = (args.get("language", "English") or "English").lower()
    args.finish()
    # Raises for languages without a stemmer
    return StemFilter(lang=language)


def reverse_string(params: Mapping[str, str]) -> Filter:
    """Reverse the characters of each token."""
    ComponentParams("reverseString", params).finish()
    return ReverseTextFilter()


def pattern_replace(params: Mapping[str, str]) -> Filter:
    """Regex replace within each token: ``pattern`` (required), ``replacement``."""
    args = ComponentParams("patternReplace", params)
    pattern = args.require("pattern")
    replacement = args.get("replacement", "") or ""
    args.finish()
    try:
        re.compile(pattern)
    except re.error as e:
        raise ComponentConfigError("patternReplace", f"invalid pattern {pattern!r}: {e}") from e
    return SubstitutionFilter(pattern, replacement)


def ngram(params: Mapping[str, str]) -> Filter:
    """Replace each token with its character n-grams."""
    args = ComponentParams("nGram", params)
    min_size = args.get_int("minGramSize", 1)
    max_size = args.get_int("maxGramSize", 2)
    args.finish()
    check_gram_sizes("nGram", min_size, max_size)
    return NgramFilter(minsize=min_size, maxsize=max_size)


TOKEN_FILTERS = {
    "lowercase": lowercase,
    "stop": stop,
    "length": length,
    "trim": trim,
    "asciiFolding": ascii_folding,
    "porterStem": porter_stem,
    "snowballPorter": snowball_porter,
    "reverseString": reverse_string,
    "patternReplace": pattern_replace,
    "nGram": ngram,
}
