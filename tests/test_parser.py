"""Tests for reverse parsing and title normalization."""

import pytest

from format_commit.core.parser import (
    ErrorKind,
    accept_title,
    build_matcher,
    detect_format_group,
    example_title,
    normalize_title,
    parse_title,
)
from format_commit.core.pattern import compile_pattern
from format_commit.core.renderer import CommitFormat, FieldValueSet, FormatGroup, render


class TestParseTitle:
    """Test parsing against custom patterns."""

    def test_round_trip(self):
        pattern = compile_pattern("{Issue ID} - type - scope - Description")
        values = FieldValueSet(
            type="feat", scope="api", description="Add user endpoint", fields={"Issue ID": "PROJ-123"}
        )

        parsed = parse_title(render(pattern, values), pattern)

        assert parsed == values

    def test_values_are_trimmed(self):
        pattern = compile_pattern("[type]description")

        parsed = parse_title("[ fix ]  resolve crash  ", pattern)

        assert parsed.type == "fix"
        assert parsed.description == "resolve crash"

    def test_no_match_returns_none(self):
        pattern = compile_pattern("{Issue ID} - type - description")

        assert parse_title("feat: something", pattern) is None

    def test_last_capture_is_greedy(self):
        pattern = compile_pattern("type - description")

        parsed = parse_title("feat - add a - b separator", pattern)

        # Earlier captures stop at the first separator, the last takes the rest
        assert parsed.type == "feat"
        assert parsed.description == "add a - b separator"

    def test_lazy_then_greedy_groups(self):
        matcher = build_matcher(compile_pattern("{A}-type-description"))

        assert matcher.pattern == r"^(.+?)\-(.+?)\-(.+)$"

    def test_repeated_keyword_keeps_first_value(self):
        pattern = compile_pattern("type/description/type")

        parsed = parse_title("feat/thing/fix", pattern)

        assert parsed.type == "feat"


class TestNormalizeCustom:
    """Test normalization with custom patterns."""

    def test_normalizes_vocabulary_casing(self, custom_config):
        result = normalize_title("PROJ-123 - FEAT - API - add user endpoint", custom_config)

        assert result.is_valid
        assert result.normalized == "PROJ-123 - feat - api - add user endpoint"

    def test_description_casing_from_pattern(self, make_config):
        config = make_config(CommitFormat.CUSTOM, "{Issue ID} - type - scope - Description")

        result = normalize_title("PROJ-123 - Feat - api - add USER endpoint", config)

        assert result.normalized == "PROJ-123 - feat - api - Add user endpoint"

    def test_wrong_format_includes_example(self, custom_config):
        result = normalize_title("feat: add user endpoint", custom_config)

        assert not result.is_valid
        assert result.normalized is None
        assert result.kind == ErrorKind.FORMAT_MISMATCH
        assert "{Issue ID} - feat - api - example change description" in result.error

    def test_unknown_type(self, custom_config):
        result = normalize_title("PROJ-1 - chore - api - x", custom_config)

        assert result.kind == ErrorKind.UNKNOWN_VOCABULARY
        assert 'Invalid type "chore"' in result.error
        assert "feat, fix" in result.error

    def test_unknown_scope(self, custom_config):
        result = normalize_title("PROJ-1 - feat - db - x", custom_config)

        assert result.kind == ErrorKind.UNKNOWN_VOCABULARY
        assert "api, ui" in result.error

    def test_scope_without_configured_scopes(self, make_config):
        config = make_config(CommitFormat.CUSTOM, "type(scope): description", with_scopes=False)

        result = normalize_title("feat(api): x", config)

        assert result.kind == ErrorKind.UNKNOWN_VOCABULARY
        assert "no scopes are configured" in result.error

    def test_known_fields_override_parsed(self, custom_config):
        result = normalize_title(
            "proj-999 - feat - api - add", custom_config, fields={"Issue ID": "PROJ-123"}
        )

        assert result.normalized == "PROJ-123 - feat - api - add"

    def test_empty_title(self, custom_config):
        assert normalize_title("   ", custom_config).kind == ErrorKind.FORMAT_MISMATCH


class TestNormalizeBuiltin:
    """Test normalization with the numbered formats."""

    @pytest.mark.parametrize(
        "text,group",
        [
            ("feat(api): Add", FormatGroup.SCOPE_COLON),
            ("feat(api) Add", FormatGroup.SCOPE),
            ("feat: Add", FormatGroup.COLON),
            ("(feat) Add", FormatGroup.PAREN),
        ],
    )
    def test_detect_format_group(self, text, group):
        assert detect_format_group(text)[0] == group

    def test_detect_nothing(self):
        assert detect_format_group("just some words") is None

    def test_normalizes_builtin(self, make_config):
        config = make_config(CommitFormat.SCOPE_COLON_SENTENCE)

        result = normalize_title("FEAT(Api): add USER endpoint", config)

        assert result.normalized == "feat(api): Add user endpoint"

    def test_lowercase_format(self, make_config):
        config = make_config(CommitFormat.PAREN_LOWER)

        assert normalize_title("(Fix) Resolve Crash", config).normalized == "(fix) resolve crash"

    def test_format_group_mismatch(self, make_config):
        config = make_config(CommitFormat.SCOPE_COLON_SENTENCE)

        result = normalize_title("feat(api) Add user endpoint", config)

        assert result.kind == ErrorKind.FORMAT_MISMATCH
        assert "feat(api): Example change description" in result.error

    def test_scoped_title_rejected_for_unscoped_format(self, make_config):
        config = make_config(CommitFormat.COLON_SENTENCE)

        result = normalize_title("feat(api): Add user endpoint", config)

        assert result.kind == ErrorKind.FORMAT_MISMATCH

    def test_unknown_type(self, make_config):
        config = make_config(CommitFormat.COLON_SENTENCE)

        result = normalize_title("chore: Bump deps", config)

        assert result.kind == ErrorKind.UNKNOWN_VOCABULARY


class TestAcceptTitle:
    """Test the full acceptance path."""

    def test_accepts(self, make_config):
        config = make_config(CommitFormat.COLON_SENTENCE)

        assert accept_title("feat: add login", config).normalized == "feat: Add login"

    def test_length_checked_after_normalization(self, make_config):
        config = make_config(CommitFormat.COLON_SENTENCE, min_length=5, max_length=12)

        result = accept_title("feat: add login page", config)

        assert result.kind == ErrorKind.LENGTH_VIOLATION
        assert "too long" in result.error

    def test_format_error_before_length(self, make_config):
        config = make_config(CommitFormat.COLON_SENTENCE, max_length=10)

        assert accept_title("a very long invalid title", config).kind == ErrorKind.FORMAT_MISMATCH


def test_example_title_builtin(make_config):
    assert example_title(make_config(CommitFormat.PAREN_SENTENCE)) == "(feat) Example change description"


def test_example_title_with_fields(custom_config):
    example = example_title(custom_config, {"Issue ID": "PROJ-1"})

    assert example == "PROJ-1 - feat - api - example change description"
