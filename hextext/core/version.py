"""Match versions for analysis components.

Schemas may pin the behaviour of analysis components to a release line with
``defaultLuceneMatchVersion`` (or a per-component ``luceneMatchVersion``
parameter). Version strings are parsed leniently, so all of the following
are accepted and equivalent::

    "4.10.4"    "LUCENE_4_10_4"    "lucene_4_10_4"

and ``"4.10"`` / ``"LUCENE_4_10"`` mean ``4.10.0``. ``"LATEST"`` and
``"LUCENE_CURRENT"`` mean :data:`LATEST_MATCH_VERSION`.
"""

from __future__ import annotations

import re
from typing import NamedTuple

_LUCENE_THREE_PART = re.compile(r"^LUCENE_(\d+)_(\d+)_(\d+)$")
_LUCENE_TWO_PART = re.compile(r"^LUCENE_(\d+)_(\d+)$")
_LUCENE_COMPACT = re.compile(r"^LUCENE_(\d)(\d)$")
_DOTTED = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?(?:\.(\d+))?$")

_LATEST_ALIASES = frozenset({"LATEST", "LUCENE_CURRENT"})


class MatchVersion(NamedTuple):
    """A ``major.minor.bugfix`` release identifier, ordered numerically."""

    major: int
    minor: int
    bugfix: int = 0

    @classmethod
    def parse_leniently(cls, text: str) -> MatchVersion:
        """Parse a version string, accepting dotted and ``LUCENE_X_Y_Z`` forms.

        Raises
        ------
        ValueError
            If the string matches none of the accepted forms
        """
        if not isinstance(text, str):
            raise ValueError(f"Version must be a string, got {type(text).__name__}")

        normalized = text.strip().upper()
        if normalized in _LATEST_ALIASES:
            return LATEST_MATCH_VERSION

        if match := _LUCENE_THREE_PART.match(normalized):
            normalized = "{}.{}.{}".format(*match.groups())
        elif match := _LUCENE_TWO_PART.match(normalized):
            normalized = "{}.{}.0".format(*match.groups())
        elif match := _LUCENE_COMPACT.match(normalized):
            normalized = "{}.{}.0".format(*match.groups())
        else:
            normalized = normalized.replace("_", ".")

        match = _DOTTED.match(normalized)
        if match is None:
            raise ValueError(
                f'Version is not in a correct format: "{text}" '
                "(expected e.g. 4.10.4, 4.10 or LUCENE_4_10_4)"
            )

        major, minor, bugfix, _prerelease = match.groups()
        return cls(int(major), int(minor), int(bugfix or 0))

    def on_or_after(self, other: MatchVersion) -> bool:
        return self >= other

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.bugfix}"


MINIMUM_MATCH_VERSION = MatchVersion(4, 0, 0)
LATEST_MATCH_VERSION = MatchVersion(10, 0, 0)
