"""Rendering of commit titles and branch names."""

import re
from dataclasses import dataclass, field
from enum import Enum

from .casing import Casing, apply_casing
from .pattern import CompiledPattern, FieldSegment, KeywordSegment, LiteralSegment, compile_pattern


class FormatGroup(Enum):
    """Separator style shared by a pair of built-in commit formats."""

    PAREN = "(type) msg"
    COLON = "type: msg"
    SCOPE = "type(scope) msg"
    SCOPE_COLON = "type(scope): msg"


class CommitFormat(Enum):
    """Built-in commit title formats, plus the custom pattern marker."""

    PAREN_SENTENCE = 1
    PAREN_LOWER = 2
    COLON_SENTENCE = 3
    COLON_LOWER = 4
    SCOPE_SENTENCE = 5
    SCOPE_LOWER = 6
    SCOPE_COLON_SENTENCE = 7
    SCOPE_COLON_LOWER = 8
    CUSTOM = "custom"

    @property
    def is_custom(self) -> bool:
        return self is CommitFormat.CUSTOM

    @property
    def group(self) -> FormatGroup | None:
        return _FORMAT_GROUPS.get(self)

    @property
    def lowercase(self) -> bool:
        return not self.is_custom and self.value % 2 == 0

    @property
    def has_scope(self) -> bool:
        return self.group in (FormatGroup.SCOPE, FormatGroup.SCOPE_COLON)

    @property
    def label(self) -> str:
        return _FORMAT_LABELS[self]


_FORMAT_GROUPS = {
    CommitFormat.PAREN_SENTENCE: FormatGroup.PAREN,
    CommitFormat.PAREN_LOWER: FormatGroup.PAREN,
    CommitFormat.COLON_SENTENCE: FormatGroup.COLON,
    CommitFormat.COLON_LOWER: FormatGroup.COLON,
    CommitFormat.SCOPE_SENTENCE: FormatGroup.SCOPE,
    CommitFormat.SCOPE_LOWER: FormatGroup.SCOPE,
    CommitFormat.SCOPE_COLON_SENTENCE: FormatGroup.SCOPE_COLON,
    CommitFormat.SCOPE_COLON_LOWER: FormatGroup.SCOPE_COLON,
}

_FORMAT_LABELS = {
    CommitFormat.PAREN_SENTENCE: "(type) Description",
    CommitFormat.PAREN_LOWER: "(type) description",
    CommitFormat.COLON_SENTENCE: "type: Description",
    CommitFormat.COLON_LOWER: "type: description",
    CommitFormat.SCOPE_SENTENCE: "type(scope) Description",
    CommitFormat.SCOPE_LOWER: "type(scope) description",
    CommitFormat.SCOPE_COLON_SENTENCE: "type(scope): Description",
    CommitFormat.SCOPE_COLON_LOWER: "type(scope): description",
    CommitFormat.CUSTOM: "Custom pattern",
}


class BranchFormat(Enum):
    """Built-in branch name formats, plus the custom pattern marker."""

    TYPE_DESCRIPTION = 1
    TYPE_SCOPE_DESCRIPTION = 2
    CUSTOM = "custom"

    @property
    def is_custom(self) -> bool:
        return self is BranchFormat.CUSTOM

    @property
    def has_scope(self) -> bool:
        return self is BranchFormat.TYPE_SCOPE_DESCRIPTION

    @property
    def label(self) -> str:
        return {
            BranchFormat.TYPE_DESCRIPTION: "type/description",
            BranchFormat.TYPE_SCOPE_DESCRIPTION: "type/scope/description",
            BranchFormat.CUSTOM: "Custom pattern",
        }[self]


@dataclass
class FieldValueSet:
    """Values collected for one commit or branch."""

    type: str
    description: str
    scope: str | None = None
    fields: dict[str, str] = field(default_factory=dict)


def sanitize_branch_value(value: str, preserve_case: bool = False) -> str:
    """Make a free-text value safe to embed in a git branch name."""
    if not preserve_case:
        value = value.lower()
    value = re.sub(r"\s+", "-", value.strip())
    allowed = r"[^A-Za-z0-9-]" if preserve_case else r"[^a-z0-9-]"
    value = re.sub(allowed, "", value)
    value = re.sub(r"-{2,}", "-", value)
    return value.strip("-")


def _keyword_value(segment: KeywordSegment, values: FieldValueSet, branch: bool) -> str:
    if segment.name == "type":
        value = values.type
    elif segment.name == "scope":
        value = values.scope or ""
    elif segment.name == "description":
        value = values.description
        if branch:
            value = sanitize_branch_value(value)
    else:
        raise ValueError(f"Unknown keyword in compiled pattern: {segment.name!r}")
    return apply_casing(value, segment.casing)


def render(pattern: CompiledPattern, values: FieldValueSet, branch: bool = False) -> str:
    """Concatenate the rendered segments of a compiled pattern.

    With ``branch=True`` the description and custom field values are
    sanitized before casing is applied.
    """
    parts = []
    for segment in pattern.segments:
        if isinstance(segment, LiteralSegment):
            parts.append(segment.text)
        elif isinstance(segment, KeywordSegment):
            parts.append(_keyword_value(segment, values, branch))
        elif isinstance(segment, FieldSegment):
            value = values.fields.get(segment.label, "")
            if branch:
                value = sanitize_branch_value(value, preserve_case=True)
            parts.append(value)
        else:
            raise TypeError(f"Not a pattern segment: {segment!r}")
    return "".join(parts)


def _as_compiled(pattern: CompiledPattern | str | None) -> CompiledPattern:
    if pattern is None:
        raise ValueError("A custom format requires a pattern")
    if isinstance(pattern, CompiledPattern):
        return pattern
    return compile_pattern(pattern)


def format_commit_title(
    type_: str,
    title: str,
    fmt: CommitFormat,
    scope: str | None = None,
    pattern: CompiledPattern | str | None = None,
    fields: dict[str, str] | None = None,
) -> str:
    """Build a commit title using a built-in format or a custom pattern."""
    if fmt.is_custom:
        values = FieldValueSet(type=type_, description=title, scope=scope, fields=fields or {})
        return render(_as_compiled(pattern), values)

    message = title.lower() if fmt.lowercase else apply_casing(title, Casing.CAPITALIZE)
    group = fmt.group
    if group == FormatGroup.PAREN:
        return f"({type_}) {message}"
    if group == FormatGroup.COLON:
        return f"{type_}: {message}"
    if group == FormatGroup.SCOPE:
        return f"{type_}({scope or ''}) {message}"
    return f"{type_}({scope or ''}): {message}"


def format_branch_name(
    type_: str,
    description: str,
    fmt: BranchFormat,
    scope: str | None = None,
    pattern: CompiledPattern | str | None = None,
    fields: dict[str, str] | None = None,
) -> str:
    """Build a branch name using a built-in format or a custom pattern."""
    if fmt.is_custom:
        values = FieldValueSet(type=type_, description=description, scope=scope, fields=fields or {})
        return render(_as_compiled(pattern), values, branch=True)

    slug = sanitize_branch_value(description)
    if fmt is BranchFormat.TYPE_SCOPE_DESCRIPTION:
        return f"{type_}/{scope or ''}/{slug}"
    return f"{type_}/{slug}"
