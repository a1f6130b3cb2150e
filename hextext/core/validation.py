"""Static validation of analysis schemas and the shared validity state.

Validation never raises. Every check contributes zero or more
:class:`ValidationIssue` entries to a :class:`ValidationReport`, in schema
order, so a linter sees every problem at once. Building pipelines is not part
of validation: unknown component type tags and bad parameters only surface
when a field that uses the pipeline is first resolved.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from enum import StrEnum

from hextext.core.analysis.builder import lookup_analyzer_factory
from hextext.core.exceptions import AnalyzerCapabilityError, ComponentNotFoundError
from hextext.core.logging import get_logger
from hextext.core.registry import ComponentRegistry
from hextext.core.schema.models import FieldRule, SchemaConfig
from hextext.core.version import MINIMUM_MATCH_VERSION, MatchVersion

logger = get_logger(__name__)


class IssueKind(StrEnum):
    """Kinds of static schema violation."""

    INVALID_VERSION = "invalid_version"
    DUPLICATE_ANALYZER = "duplicate_analyzer"
    DUPLICATE_FIELD = "duplicate_field"
    BOTH_NAME_AND_REGEX = "both_name_and_regex"
    NEITHER_NAME_NOR_REGEX = "neither_name_nor_regex"
    INVALID_REGEX = "invalid_regex"
    ANALYZER_NOT_FOUND = "analyzer_not_found"
    ANALYZER_WRONG_CAPABILITY = "analyzer_wrong_capability"


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    kind: IssueKind
    message: str


class ValidationReport:
    """Container for validation results."""

    __slots__ = ("_issues",)

    def __init__(self) -> None:
        self._issues: list[ValidationIssue] = []

    @property
    def is_valid(self) -> bool:
        """Check if validation passed (no issues).

        Returns
        -------
        bool
            True if no issues are present, False otherwise
        """
        return len(self._issues) == 0

    def add(self, kind: IssueKind, message: str) -> None:
        self._issues.append(ValidationIssue(kind, message))

    @property
    def issues(self) -> list[ValidationIssue]:
        return list(self._issues)

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self._issues]

    def kinds(self) -> list[IssueKind]:
        return [issue.kind for issue in self._issues]


class ValidityState:
    """Validity flag plus append-only message log, owned by one analyzer instance.

    Starts from the static validation report. Once invalid it stays invalid.
    Mutated only while the owner holds its build lock; reads are lock-free.
    """

    __slots__ = ("_valid", "_messages")

    def __init__(self, report: ValidationReport | None = None) -> None:
        self._valid = True
        self._messages: list[str] = []
        if report is not None:
            for message in report.messages:
                self.invalidate(message)

    @property
    def is_valid(self) -> bool:
        return self._valid

    def invalidate(self, message: str) -> None:
        self._messages.append(message)
        self._valid = False

    @property
    def messages(self) -> list[str]:
        return list(self._messages)

    def joined(self) -> str:
        """All messages, newline-joined."""
        return "\n".join(self._messages)


class SchemaValidator:
    """Statically checkable consistency rules for a parsed schema.

    Parameters
    ----------
    registry : ComponentRegistry
        Where fallback analyzer identifiers are looked up
    allow_dynamic_import : bool
        Whether unregistered fallback identifiers may be imported
    """

    def __init__(self, registry: ComponentRegistry, allow_dynamic_import: bool = True) -> None:
        self._registry = registry
        self._allow_dynamic_import = allow_dynamic_import

    def validate(self, schema: SchemaConfig) -> ValidationReport:
        report = ValidationReport()
        self._check_default_version(schema, report)
        self._check_duplicate_pipelines(schema, report)
        self._check_duplicate_field_names(schema, report)

        declared = schema.named_pipelines
        for rule in schema.field_rules:
            self._check_rule_shape(rule, report)
            if rule.analyzer not in declared:
                self._check_fallback_analyzer(rule, report)

        if not report.is_valid:
            logger.debug("Schema failed {count} static checks", count=len(report.issues))
        return report

    # ========================================================================
    # Checks
    # ========================================================================

    def _check_default_version(self, schema: SchemaConfig, report: ValidationReport) -> None:
        version_text = schema.default_match_version
        if version_text is None:
            return
        try:
            version = MatchVersion.parse_leniently(version_text)
        except ValueError as e:
            report.add(
                IssueKind.INVALID_VERSION,
                f'defaultLuceneMatchVersion "{version_text}" cannot be parsed: {e}',
            )
            return
        if not version.on_or_after(MINIMUM_MATCH_VERSION):
            report.add(
                IssueKind.INVALID_VERSION,
                f'defaultLuceneMatchVersion "{version_text}" is not on or after '
                f"{MINIMUM_MATCH_VERSION}",
            )

    def _check_duplicate_pipelines(self, schema: SchemaConfig, report: ValidationReport) -> None:
        counts = Counter(spec.name for spec in schema.analyzers)
        for name, count in counts.items():
            if count > 1:
                report.add(
                    IssueKind.DUPLICATE_ANALYZER,
                    f'Analyzer name "{name}" is declared {count} times, but must be unique.',
                )

    def _check_duplicate_field_names(self, schema: SchemaConfig, report: ValidationReport) -> None:
        counts = Counter(rule.name for rule in schema.field_rules if rule.name is not None)
        for name, count in counts.items():
            if count > 1:
                report.add(
                    IssueKind.DUPLICATE_FIELD,
                    f'Field name "{name}" is mapped {count} times, but must be unique.',
                )

    def _check_rule_shape(self, rule: FieldRule, report: ValidationReport) -> None:
        if rule.name is not None and rule.regex is not None:
            report.add(
                IssueKind.BOTH_NAME_AND_REGEX,
                'Both "name" and "regex" keys are defined in a field, but only one may be.',
            )
        elif rule.name is None and rule.regex is None:
            report.add(
                IssueKind.NEITHER_NAME_NOR_REGEX,
                'Neither "name" nor "regex" key is defined in a field, but one must be.',
            )

        if rule.regex is not None:
            try:
                re.compile(rule.regex)
            except re.error as e:
                report.add(
                    IssueKind.INVALID_REGEX,
                    f'field "{rule.field_ref}": regex cannot be compiled: {e}',
                )

    def _check_fallback_analyzer(self, rule: FieldRule, report: ValidationReport) -> None:
        prefix = f'field "{rule.field_ref}": analyzer "{rule.analyzer}"'
        try:
            lookup_analyzer_factory(rule.analyzer, self._registry, self._allow_dynamic_import)
        except ComponentNotFoundError:
            report.add(
                IssueKind.ANALYZER_NOT_FOUND,
                f"{prefix} not found: it is neither a declared analyzer nor a registered "
                "or importable analyzer.",
            )
        except AnalyzerCapabilityError as e:
            report.add(
                IssueKind.ANALYZER_WRONG_CAPABILITY,
                f"{prefix} is not an analyzer: {e.actual} does not produce a "
                "whoosh.analysis.Analyzer or Tokenizer.",
            )
        except Exception as e:
            report.add(
                IssueKind.ANALYZER_NOT_FOUND,
                f"{prefix} cannot be loaded: {e or type(e).__name__}",
            )
