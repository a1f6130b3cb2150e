"""Builtin tokenizers, each backed by a whoosh tokenizer."""

from __future__ import annotations

import re
from collections.abc import Mapping

from whoosh.analysis import (
    IDTokenizer,
    NgramTokenizer,
    PathTokenizer,
    RegexTokenizer,
    SpaceSeparatedTokenizer,
    Tokenizer,
)

from hextext.builtin.params import ComponentParams, check_gram_sizes
from hextext.core.exceptions import ComponentConfigError

# Runs of letters, no digits or underscores
LETTER_PATTERN = r"[^\W\d_]+"
# A comma-separated item without its surrounding whitespace
COMMA_ITEM_PATTERN = r"[^,\s](?:[^,]*[^,\s])?"


def standard(params: Mapping[str, str]) -> Tokenizer:
    """Word tokens: runs of word characters, keeping embedded dots (``e.g``, ``3.14``)."""
    ComponentParams("standard", params).finish()
    return RegexTokenizer()


def whitespace(params: Mapping[str, str]) -> Tokenizer:
    """Split on whitespace only."""
    ComponentParams("whitespace", params).finish()
    return SpaceSeparatedTokenizer()


def keyword(params: Mapping[str, str]) -> Tokenizer:
    """Emit the whole value as a single token."""
    ComponentParams("keyword", params).finish()
    return IDTokenizer()


def letter(params: Mapping[str, str]) -> Tokenizer:
    """Runs of letters; digits and punctuation separate tokens."""
    ComponentParams("letter", params).finish()
    return RegexTokenizer(LETTER_PATTERN)


def pattern(params: Mapping[str, str]) -> Tokenizer:
    """Regex tokenizer.

    ``group="-1"`` (the default) splits on ``pattern``; ``group="0"`` emits
    each match of ``pattern`` as a token.
    """
    args = ComponentParams("pattern", params)
    expression = args.require("pattern")
    group = args.get_int("group", -1)
    args.finish()

    if group not in (-1, 0):
        raise ComponentConfigError("pattern", f"group must be -1 (split) or 0 (match), got {group}")
    try:
        compiled = re.compile(expression)
    except re.error as e:
        raise ComponentConfigError("pattern", f"invalid pattern {expression!r}: {e}") from e
    return RegexTokenizer(compiled, gaps=group == -1)


def comma(params: Mapping[str, str]) -> Tokenizer:
    """Comma-separated items, trimmed; empty items are dropped."""
    ComponentParams("comma", params).finish()
    return RegexTokenizer(COMMA_ITEM_PATTERN)


def path_hierarchy(params: Mapping[str, str]) -> Tokenizer:
    """Every ancestor path of the value: ``a/b/c`` gives ``a``, ``a/b``, ``a/b/c``."""
    args = ComponentParams("pathHierarchy", params)
    delimiter = args.get("delimiter", "/") or "/"
    args.finish()
    if len(delimiter) != 1:
        raise ComponentConfigError(
            "pathHierarchy", f"delimiter must be one character, got {delimiter!r}"
        )
    return PathTokenizer(rf"[^{re.escape(delimiter)}]+")


def ngram(params: Mapping[str, str]) -> Tokenizer:
    """Character n-grams of the whole value (``minGramSize`` 1, ``maxGramSize`` 2)."""
    args = ComponentParams("nGram", params)
    min_size = args.get_int("minGramSize", 1)
    max_size = args.get_int("maxGramSize", 2)
    args.finish()
    check_gram_sizes("nGram", min_size, max_size)
    return NgramTokenizer(minsize=min_size, maxsize=max_size)


TOKENIZERS = {
    "standard": standard,
    "whitespace": whitespace,
    "keyword": keyword,
    "letter": letter,
    "pattern": pattern,
    "comma": comma,
    "pathHierarchy": path_hierarchy,
    "nGram": ngram,
}
