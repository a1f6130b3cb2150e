"""Builtin char filters: ``str -> str`` transforms applied before tokenizing.

Whoosh analyzers start at the tokenizer, so char filters are plain callables
run over the raw value by the token stream.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from lxml import etree

from hextext.builtin.params import ComponentParams
from hextext.core.exceptions import ComponentConfigError

# Tags whose boundaries separate words
_BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt", "fieldset",
    "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6", "header",
    "hr", "li", "main", "nav", "ol", "p", "pre", "section", "table", "td", "th", "tr", "ul",
})  # fmt: skip
_SKIPPED_TAGS = frozenset({"script", "style"})
_VOID_TAGS = frozenset({"area", "br", "col", "embed", "hr", "img", "input", "meta", "wbr"})


def make_html_parser() -> etree.HTMLParser:
    """Lenient HTML parser for markup fragments; never touches the network."""
    return etree.HTMLParser(no_network=True, remove_comments=True, remove_pis=True)


def _start_tag(element: etree._Element) -> str:
    attrs = "".join(f' {name}="{value}"' for name, value in element.attrib.items())
    return f"<{element.tag}{attrs}>"


class HTMLStripCharFilter:
    """Remove markup, decode entities, and drop script/style content.

    The value is parsed as the body of an HTML document, so fragments keep
    their leading text as is. Block-level tags become line breaks; tags listed
    in ``escaped_tags`` are written back verbatim around their content.
    """

    def __init__(self, escaped_tags: frozenset[str] = frozenset()) -> None:
        self.escaped_tags = frozenset(tag.lower() for tag in escaped_tags)

    def __call__(self, text: str) -> str:
        if not text:
            return text
        root = etree.HTML(f"<html><body>{text}</body></html>", parser=make_html_parser())
        if root is None:
            return ""
        body = root.find("body")
        if body is None:
            body = root

        parts: list[str] = [body.text or ""]
        for child in body:
            self._collect(child, parts)
        return "".join(parts)

    def _collect(self, element: etree._Element, parts: list[str]) -> None:
        tag = element.tag.lower() if isinstance(element.tag, str) else ""
        if tag in _SKIPPED_TAGS:
            parts.append(element.tail or "")
            return

        escaped = tag in self.escaped_tags
        if escaped:
            parts.append(_start_tag(element))
        elif tag in _BLOCK_TAGS:
            parts.append("\n")

        parts.append(element.text or "")
        for child in element:
            self._collect(child, parts)

        if escaped:
            if tag not in _VOID_TAGS:
                parts.append(f"</{tag}>")
        elif tag in _BLOCK_TAGS and tag not in _VOID_TAGS:
            parts.append("\n")
        parts.append(element.tail or "")

    def __repr__(self) -> str:
        return f"HTMLStripCharFilter(escaped_tags={sorted(self.escaped_tags)})"


class MappingCharFilter:
    """Replace character sequences, preferring the longest match at each position."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        if not mapping:
            raise ComponentConfigError("mapping", "at least one mapping is required")
        self.mapping = dict(mapping)
        alternatives = sorted(self.mapping, key=len, reverse=True)
        self._pattern = re.compile("|".join(re.escape(source) for source in alternatives))

    def __call__(self, text: str) -> str:
        return self._pattern.sub(lambda match: self.mapping[match.group(0)], text)

    def __repr__(self) -> str:
        return f"MappingCharFilter({self.mapping!r})"


class PatternReplaceCharFilter:
    """Regex substitution over the whole value (Python ``re.sub`` replacement syntax)."""

    def __init__(self, pattern: str, replacement: str = "") -> None:
        try:
            self.pattern = re.compile(pattern)
        except re.error as e:
            raise ComponentConfigError("patternReplace", f"invalid pattern {pattern!r}: {e}") from e
        self.replacement = replacement

    def __call__(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)

    def __repr__(self) -> str:
        return f"PatternReplaceCharFilter({self.pattern.pattern!r}, {self.replacement!r})"


# ============================================================================
# Factories
# ============================================================================


def html_strip(params: Mapping[str, str]) -> HTMLStripCharFilter:
    """Strip HTML markup; ``escapedTags`` lists tags to keep verbatim."""
    args = ComponentParams("htmlStrip", params)
    escaped = args.get_list("escapedTags") or []
    args.finish()
    return HTMLStripCharFilter(frozenset(escaped))


def mapping(params: Mapping[str, str]) -> MappingCharFilter:
    """Replace sequences: ``mapping="ä=>a,ö=>o,ß=>ss"``."""
    args = ComponentParams("mapping", params)
    entries = args.get_list("mapping")
    args.finish()
    if not entries:
        raise ComponentConfigError("mapping", "Configuration Error: missing parameter 'mapping'")

    table: dict[str, str] = {}
    for entry in entries:
        source, arrow, target = entry.partition("=>")
        if not arrow or not source.strip():
            raise ComponentConfigError(
                "mapping", f"invalid mapping entry {entry!r}, expected 'from=>to'"
            )
        table[source.strip()] = target.strip()
    return MappingCharFilter(table)


def pattern_replace(params: Mapping[str, str]) -> PatternReplaceCharFilter:
    """Regex replace before tokenizing: ``pattern`` (required), ``replacement``."""
    args = ComponentParams("patternReplace", params)
    pattern = args.require("pattern")
    replacement = args.get("replacement", "") or ""
    args.finish()
    return PatternReplaceCharFilter(pattern, replacement)


CHAR_FILTERS = {
    "htmlStrip": html_strip,
    "mapping": mapping,
    "patternReplace": pattern_replace,
}
