"""Validation of format patterns and interactive answers.

Every validator returns ``None`` when the value is acceptable, or a message
that can be shown to the user as-is before prompting again.
"""

import re
from enum import Enum

from .pattern import FieldSegment, LiteralSegment, compile_pattern
from .renderer import sanitize_branch_value

MAX_SETUP_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 255

SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)

# Characters git refuses in reference names, checked in this order
ILLEGAL_BRANCH_CHARS = ("~", "^", ":", "?", "*", "[", "\\")
ILLEGAL_BRANCH_SEQUENCES = ("..", "//")


class PatternKind(Enum):
    """What a custom pattern is used for."""

    COMMIT = "commit"
    BRANCH = "branch"


def _check_braces(pattern: str) -> str | None:
    depth = 0
    for char in pattern:
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                return "Unbalanced braces: found '}' without a matching '{'"
    if depth != 0:
        return "Unbalanced braces: found '{' without a matching '}'"
    return None


def _check_branch_literal(text: str) -> str | None:
    if any(char.isspace() for char in text):
        return f"Branch separator {text!r} cannot contain spaces"
    for char in ILLEGAL_BRANCH_CHARS:
        if char in text:
            return f"Branch separator {text!r} cannot contain {char!r}"
    for sequence in ILLEGAL_BRANCH_SEQUENCES:
        if sequence in text:
            return f"Branch separator {text!r} cannot contain {sequence!r}"
    return None


def validate_pattern(pattern: str | None, kind: PatternKind = PatternKind.COMMIT) -> str | None:
    """Check that a custom pattern can be compiled, rendered and parsed back.

    Branch patterns only require the ``description`` keyword; commit patterns
    also require ``type``.
    """
    if not pattern or not pattern.strip():
        return "Pattern cannot be empty"

    compiled = compile_pattern(pattern)
    if kind == PatternKind.COMMIT and not compiled.has_keyword("type"):
        return "Pattern must contain the 'type' keyword"
    if not compiled.has_keyword("description"):
        return "Pattern must contain the 'description' keyword"

    brace_error = _check_braces(pattern)
    if brace_error:
        return brace_error

    for segment in compiled.segments:
        if isinstance(segment, FieldSegment) and not segment.label.strip():
            return "Custom field names cannot be empty: use {Field Name}"

    if kind == PatternKind.BRANCH:
        for segment in compiled.segments:
            if isinstance(segment, LiteralSegment):
                literal_error = _check_branch_literal(segment.text)
                if literal_error:
                    return literal_error

    return None


def valid_title(title: str, min_length: int, max_length: int) -> str | None:
    """Length gate applied to the final rendered title."""
    if len(title) < min_length:
        return f"Commit title too short ({len(title)} < {min_length} characters): {title!r}"
    if len(title) > max_length:
        return f"Commit title too long ({len(title)} > {max_length} characters): {title!r}"
    return None


def valid_setup_length(length: int | None) -> str | None:
    if length is None or length < 1:
        return f"{length} isn't a valid length"
    if length > MAX_SETUP_LENGTH:
        return f"Length cannot be higher than {MAX_SETUP_LENGTH}"
    return None


def valid_version(version: str) -> str | None:
    if not SEMVER_RE.match(version):
        return "Version does not respect semantic versioning"
    return None


def valid_commit_description(description: str) -> str | None:
    if len(description) > MAX_DESCRIPTION_LENGTH:
        return f"Commit description too long (max {MAX_DESCRIPTION_LENGTH} characters)"
    return None


def valid_branch_description(description: str, max_length: int) -> str | None:
    if not description.strip():
        return "Branch description cannot be empty"
    if len(description) > max_length:
        return f"Branch description too long ({len(description)} > {max_length} characters)"
    if not sanitize_branch_value(description):
        return "Branch description must contain at least one letter or digit"
    return None


def valid_custom_field(value: str, label: str, branch: bool = False) -> str | None:
    if not value.strip():
        return f"{label} cannot be empty"
    if branch and not sanitize_branch_value(value, preserve_case=True):
        return f"{label} must contain at least one letter or digit"
    return None
