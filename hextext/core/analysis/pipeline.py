"""Runnable analysis pipelines and the token-stream protocol.

A :class:`Pipeline` pairs optional char filters (plain ``str -> str``
callables applied to the raw text) with a whoosh analyzer, i.e. a tokenizer
optionally composed with token filters (``tokenizer | filter | ...``).

Tokens are consumed through a :class:`TokenStream`:

>>> with pipeline.token_stream("Some text") as stream:  # doctest: +SKIP
...     stream.reset()
...     terms = [token.text for token in stream]
...     stream.end()

Whoosh reuses a single mutable ``Token`` object per stream, so read what you
need from each token before pulling the next one (or call ``token.copy()``).
A pipeline may be shared between threads to create streams; each stream must
be consumed by one caller at a time.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from whoosh.analysis import Analyzer, Token, Tokenizer

from hextext.core.exceptions import TokenStreamStateError
from hextext.core.version import MatchVersion

CharFilter = Callable[[str], str]

_WHOOSH_ANALYSIS = "whoosh.analysis"


def is_analyzer(obj: object) -> bool:
    """Whether ``obj`` can turn text into tokens on its own."""
    return isinstance(obj, Analyzer | Tokenizer)


def is_analyzer_factory(obj: object) -> bool:
    """Whether ``obj`` may produce an analyzer when called without arguments.

    Accepts subclasses of whoosh's ``Analyzer`` or ``Tokenizer`` and the factory
    functions defined in ``whoosh.analysis`` (its stock analyzers are functions).
    Other callables are refused and never called.
    """
    if inspect.isclass(obj):
        return issubclass(obj, Analyzer | Tokenizer)
    if not inspect.isfunction(obj):
        return False
    module = obj.__module__ or ""
    return module == _WHOOSH_ANALYSIS or module.startswith(f"{_WHOOSH_ANALYSIS}.")


class _StreamState(StrEnum):
    CREATED = "created"
    RESET = "reset"
    ENDED = "ended"
    CLOSED = "closed"


class TokenStream:
    """Single-use, single-consumer stream of tokens for one text value.

    Protocol: :meth:`reset` once, iterate until exhausted, :meth:`end`, then
    :meth:`close` (or use the stream as a context manager, which always
    closes it).
    """

    def __init__(self, pipeline: Pipeline, text: str) -> None:
        self._pipeline = pipeline
        self._text = text
        self._filtered_text: str | None = None
        self._tokens: Iterator[Token] | None = None
        self._state = _StreamState.CREATED
        self.final_offset: int | None = None

    @property
    def pipeline(self) -> Pipeline:
        return self._pipeline

    def reset(self) -> None:
        """Apply the char filters and start tokenizing. Must precede iteration."""
        if self._state is not _StreamState.CREATED:
            raise TokenStreamStateError(
                f"reset() called on a token stream in state '{self._state}'; "
                "create a new stream for each value"
            )
        text = self._text
        for char_filter in self._pipeline.char_filters:
            text = char_filter(text)
        self._filtered_text = text
        self._tokens = iter(self._pipeline.analyzer(text, positions=True, chars=True))
        self._state = _StreamState.RESET

    def __iter__(self) -> TokenStream:
        return self

    def __next__(self) -> Token:
        if self._state is not _StreamState.RESET or self._tokens is None:
            raise TokenStreamStateError(
                f"Cannot pull tokens from a token stream in state '{self._state}'; "
                "call reset() first"
            )
        return next(self._tokens)

    def end(self) -> None:
        """Signal end of consumption; records the final character offset."""
        if self._state is not _StreamState.RESET:
            raise TokenStreamStateError(f"end() called on a token stream in state '{self._state}'")
        self.final_offset = len(self._filtered_text or "")
        self._state = _StreamState.ENDED

    def close(self) -> None:
        """Release the underlying whoosh generator. Safe to call more than once."""
        close = getattr(self._tokens, "close", None)
        if close is not None:
            close()
        self._tokens = None
        self._state = _StreamState.CLOSED

    @property
    def closed(self) -> bool:
        return self._state is _StreamState.CLOSED

    def __enter__(self) -> TokenStream:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


@dataclass(frozen=True, slots=True, eq=False)
class Pipeline:
    """A built analysis pipeline: char filters followed by a whoosh analyzer.

    Attributes
    ----------
    name : str
        Declared pipeline name, or the fallback analyzer identifier
    analyzer : Analyzer | Tokenizer
        The whoosh tokenizer/filter chain
    char_filters : tuple[CharFilter, ...]
        Text transforms applied, in order, before tokenizing
    match_version : MatchVersion | None
        The match version the pipeline was built for
    """

    name: str
    analyzer: Any
    char_filters: tuple[CharFilter, ...] = ()
    match_version: MatchVersion | None = None

    def token_stream(self, text: str) -> TokenStream:
        """Create a new, not yet reset, token stream over ``text``."""
        return TokenStream(self, text)

    def __repr__(self) -> str:
        return (
            f"Pipeline(name={self.name!r}, char_filters={len(self.char_filters)}, "
            f"analyzer={self.analyzer!r}, match_version={self.match_version})"
        )
