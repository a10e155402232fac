"""Compiler for custom commit and branch format patterns.

A pattern such as ``{Issue ID} - type - scope - Description`` is split into
an ordered list of segments:

- ``LiteralSegment``: separator text emitted verbatim
- ``KeywordSegment``: one of ``type``, ``scope`` or ``description``, with the
  casing inferred from how the keyword is spelled
- ``FieldSegment``: a ``{Label}`` placeholder filled in by the user
"""

import re
from dataclasses import dataclass
from functools import cached_property
from typing import Union

from .casing import Casing, detect_casing

KEYWORDS = ("type", "scope", "description")

TOKEN_RE = re.compile(r"\{([^{}]*)\}|\b(type|scope|description)\b", re.IGNORECASE)


@dataclass(frozen=True)
class LiteralSegment:
    """Fixed text between placeholders."""

    text: str


@dataclass(frozen=True)
class KeywordSegment:
    """A recognized keyword placeholder."""

    name: str
    casing: Casing


@dataclass(frozen=True)
class FieldSegment:
    """A free-form ``{Label}`` placeholder."""

    label: str


Segment = Union[LiteralSegment, KeywordSegment, FieldSegment]


@dataclass(frozen=True)
class CompiledPattern:
    """Immutable result of compiling a pattern string."""

    source: str
    segments: tuple[Segment, ...]

    @cached_property
    def keywords(self) -> tuple[KeywordSegment, ...]:
        return tuple(s for s in self.segments if isinstance(s, KeywordSegment))

    @cached_property
    def fields(self) -> tuple[str, ...]:
        """Distinct field labels in order of first appearance."""
        labels: list[str] = []
        for segment in self.segments:
            if isinstance(segment, FieldSegment) and segment.label not in labels:
                labels.append(segment.label)
        return tuple(labels)

    def has_keyword(self, name: str) -> bool:
        return any(k.name == name for k in self.keywords)

    @property
    def has_scope(self) -> bool:
        return self.has_keyword("scope")


def compile_pattern(pattern: str) -> CompiledPattern:
    """Compile a pattern into segments.

    Never fails: a pattern without keywords compiles to literals and fields
    only, and an unmatched ``{`` is kept as literal text.
    """
    segments: list[Segment] = []
    cursor = 0

    for match in TOKEN_RE.finditer(pattern):
        if match.start() > cursor:
            segments.append(LiteralSegment(pattern[cursor : match.start()]))

        label, keyword = match.group(1), match.group(2)
        if keyword is not None:
            segments.append(KeywordSegment(keyword.lower(), detect_casing(keyword)))
        else:
            segments.append(FieldSegment(label))
        cursor = match.end()

    if cursor < len(pattern):
        segments.append(LiteralSegment(pattern[cursor:]))

    return CompiledPattern(source=pattern, segments=tuple(segments))


def get_custom_fields(pattern: str) -> list[str]:
    """Labels the user must be prompted for before the pattern can be rendered."""
    return list(compile_pattern(pattern).fields)


def pattern_has_scope(pattern: str | None) -> bool:
    if not pattern:
        return False
    return compile_pattern(pattern).has_scope
