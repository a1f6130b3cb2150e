"""Find the field rule that governs a field name.

Exact-name rules always win, wherever they are declared. Otherwise regex rules
are tried in declaration order and the first whose pattern matches the whole
field name wins, which lets schema authors put specific patterns ahead of a
catch-all such as ``.+``.
"""

from __future__ import annotations

import re

from hextext.core.schema.models import FieldRule, SchemaConfig


class FieldResolver:
    """Exact-name lookup followed by an ordered scan of regex rules."""

    def __init__(self, schema: SchemaConfig) -> None:
        self._named: dict[str, FieldRule] = {}
        self._patterns: list[tuple[re.Pattern[str], FieldRule]] = []

        for rule in schema.field_rules:
            if rule.name is not None:
                self._named.setdefault(rule.name, rule)
            if rule.regex is not None:
                try:
                    pattern = re.compile(rule.regex)
                except re.error:
                    # Reported by the validator; an invalid schema never resolves
                    continue
                self._patterns.append((pattern, rule))

    def resolve_rule(self, field: str) -> FieldRule | None:
        """Return the rule governing ``field``, or None if no rule matches."""
        rule = self._named.get(field)
        if rule is not None:
            return rule

        for pattern, rule in self._patterns:
            if pattern.fullmatch(field):
                return rule
        return None
