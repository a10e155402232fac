"""Reverse parsing of free-text titles back into structured fields.

Titles typed by the user or suggested by the AI service go through
``accept_title``, which parses them against the configured format, checks
type and scope against the configured vocabulary, re-renders them so the
casing matches the format, and finally applies the length gate.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .pattern import CompiledPattern, FieldSegment, KeywordSegment, LiteralSegment
from .renderer import FieldValueSet, FormatGroup, format_commit_title, render
from .validator import valid_title

if TYPE_CHECKING:
    from ..config.settings import CommitConfig

logger = logging.getLogger(__name__)

EXAMPLE_DESCRIPTION = "example change description"

# Tried in order: the most specific shape wins
BUILTIN_MATCHERS: tuple[tuple[FormatGroup, re.Pattern], ...] = (
    (FormatGroup.SCOPE_COLON, re.compile(r"^(?P<type>[^\s():]+)\((?P<scope>[^()]+)\):\s*(?P<message>.+)$")),
    (FormatGroup.SCOPE, re.compile(r"^(?P<type>[^\s():]+)\((?P<scope>[^()]+)\)\s+(?P<message>.+)$")),
    (FormatGroup.COLON, re.compile(r"^(?P<type>[^\s():]+):\s*(?P<message>.+)$")),
    (FormatGroup.PAREN, re.compile(r"^\((?P<type>[^()]+)\)\s+(?P<message>.+)$")),
)


class ErrorKind(Enum):
    """Why a title or pattern was rejected."""

    PATTERN_INVALID = "pattern_invalid"
    FORMAT_MISMATCH = "format_mismatch"
    UNKNOWN_VOCABULARY = "unknown_vocabulary"
    LENGTH_VIOLATION = "length_violation"


@dataclass(frozen=True)
class NormalizationResult:
    """Either a normalized title or an error message, never both."""

    normalized: str | None = None
    error: str | None = None
    kind: ErrorKind | None = None

    @classmethod
    def ok(cls, normalized: str) -> "NormalizationResult":
        return cls(normalized=normalized)

    @classmethod
    def fail(cls, kind: ErrorKind, error: str) -> "NormalizationResult":
        return cls(error=error, kind=kind)

    @property
    def is_valid(self) -> bool:
        return self.error is None


def build_matcher(pattern: CompiledPattern) -> re.Pattern:
    """Build an anchored regex capturing every keyword and field of a pattern.

    Every capture is lazy except the last one, which is greedy so trailing
    text is absorbed by the final placeholder.
    """
    captures = [s for s in pattern.segments if not isinstance(s, LiteralSegment)]
    last_capture = captures[-1] if captures else None

    parts = []
    for segment in pattern.segments:
        if isinstance(segment, LiteralSegment):
            parts.append(re.escape(segment.text))
        elif segment is last_capture:
            parts.append("(.+)")
        else:
            parts.append("(.+?)")
    return re.compile("^" + "".join(parts) + "$")


def parse_title(text: str, pattern: CompiledPattern) -> FieldValueSet | None:
    """Extract keyword and field values from text rendered with ``pattern``.

    Returns ``None`` when the text does not have the shape of the pattern.
    When a keyword or field appears more than once, its first value is kept.
    """
    match = build_matcher(pattern).match(text.strip())
    if not match:
        return None

    keywords: dict[str, str] = {}
    fields: dict[str, str] = {}
    captures = [s for s in pattern.segments if not isinstance(s, LiteralSegment)]
    for segment, value in zip(captures, match.groups()):
        value = value.strip()
        if isinstance(segment, KeywordSegment):
            keywords.setdefault(segment.name, value)
        elif isinstance(segment, FieldSegment):
            fields.setdefault(segment.label, value)

    return FieldValueSet(
        type=keywords.get("type", ""),
        description=keywords.get("description", ""),
        scope=keywords.get("scope"),
        fields=fields,
    )


def example_title(config: "CommitConfig", fields: dict[str, str] | None = None) -> str:
    """Render an example title with the first configured type and scope."""
    type_ = config.types[0].value if config.types else "type"
    scope = config.scopes[0].value if config.scopes else "scope"

    if config.format.is_custom:
        pattern = config.commit_pattern
        if pattern is None:
            return EXAMPLE_DESCRIPTION
        example_fields = {label: "{" + label + "}" for label in pattern.fields}
        example_fields.update(fields or {})
        return render(pattern, FieldValueSet(type_, EXAMPLE_DESCRIPTION, scope, example_fields))

    return format_commit_title(type_, EXAMPLE_DESCRIPTION, config.format, scope)


def _wrong_format(config: "CommitConfig", fields: dict[str, str] | None = None) -> NormalizationResult:
    return NormalizationResult.fail(
        ErrorKind.FORMAT_MISMATCH,
        f'Wrong format. Expected something like: "{example_title(config, fields)}"',
    )


def _resolve_vocabulary(
    config: "CommitConfig", type_: str, scope: str | None
) -> tuple[str, str | None] | NormalizationResult:
    """Map type and scope to their canonical vocabulary spelling."""
    found_type = config.find_type(type_)
    if found_type is None:
        valid = ", ".join(t.value for t in config.types)
        return NormalizationResult.fail(
            ErrorKind.UNKNOWN_VOCABULARY, f'Invalid type "{type_}". Valid types: {valid}'
        )

    if scope is None:
        return found_type.value, None

    if not config.scopes:
        return NormalizationResult.fail(
            ErrorKind.UNKNOWN_VOCABULARY, f'Scope "{scope}" found in title but no scopes are configured'
        )
    found_scope = config.find_scope(scope)
    if found_scope is None:
        valid = ", ".join(s.value for s in config.scopes)
        return NormalizationResult.fail(
            ErrorKind.UNKNOWN_VOCABULARY, f'Invalid scope "{scope}". Valid scopes: {valid}'
        )
    return found_type.value, found_scope.value


def _normalize_custom(
    text: str, config: "CommitConfig", fields: dict[str, str] | None = None
) -> NormalizationResult:
    pattern = config.commit_pattern
    if pattern is None:
        return NormalizationResult.fail(ErrorKind.PATTERN_INVALID, "No custom format pattern is configured")

    values = parse_title(text, pattern)
    if values is None:
        return _wrong_format(config, fields)

    resolved = _resolve_vocabulary(config, values.type, values.scope)
    if isinstance(resolved, NormalizationResult):
        return resolved

    values.type, values.scope = resolved
    # Values collected from the user win over what was parsed
    values.fields.update(fields or {})
    return NormalizationResult.ok(render(pattern, values))


def detect_format_group(text: str) -> tuple[FormatGroup, dict[str, str]] | None:
    """Find which built-in separator style a title uses."""
    for group, matcher in BUILTIN_MATCHERS:
        match = matcher.match(text)
        if match:
            return group, {k: v.strip() for k, v in match.groupdict().items()}
    return None


def _normalize_builtin(text: str, config: "CommitConfig") -> NormalizationResult:
    detected = detect_format_group(text)
    if detected is None:
        return _wrong_format(config)

    group, parts = detected
    expected = config.format.group
    if group != expected:
        logger.debug("Title matched %s but format %s expects %s", group, config.format, expected)
        return NormalizationResult.fail(
            ErrorKind.FORMAT_MISMATCH,
            f'Wrong format: title uses "{group.value}" but the configured format is "{expected.value}". '
            f'Expected something like: "{example_title(config)}"',
        )

    resolved = _resolve_vocabulary(config, parts["type"], parts.get("scope"))
    if isinstance(resolved, NormalizationResult):
        return resolved

    type_, scope = resolved
    return NormalizationResult.ok(format_commit_title(type_, parts["message"], config.format, scope))


def normalize_title(
    text: str, config: "CommitConfig", fields: dict[str, str] | None = None
) -> NormalizationResult:
    """Parse a free-text title and re-render it in the configured format.

    ``fields`` holds custom field values already collected for this commit;
    they replace the values parsed from the text.
    """
    text = text.strip()
    if not text:
        return NormalizationResult.fail(ErrorKind.FORMAT_MISMATCH, "Commit title cannot be empty")
    if config.format.is_custom:
        return _normalize_custom(text, config, fields)
    return _normalize_builtin(text, config)


def accept_title(
    text: str, config: "CommitConfig", fields: dict[str, str] | None = None
) -> NormalizationResult:
    """Normalize a title and check its final length."""
    result = normalize_title(text, config, fields)
    if not result.is_valid:
        return result

    length_error = valid_title(result.normalized, config.min_length, config.max_length)
    if length_error:
        return NormalizationResult.fail(ErrorKind.LENGTH_VIOLATION, length_error)
    return result
