"""Tests for configuration loading and saving."""

import json

import pytest

from format_commit.config.settings import (
    DEFAULT_TYPES,
    AIConfig,
    ChoiceItem,
    CommitConfig,
    ConfigError,
    get_config_path,
    version_prompt_mode,
)
from format_commit.core.renderer import BranchFormat, CommitFormat


@pytest.fixture
def config_data():
    return {
        "format": "custom",
        "customFormat": "{Issue ID} - type - scope - Description",
        "branchFormat": 2,
        "types": [{"value": "feat", "description": "New feature(s)"}],
        "scopes": [{"value": "api", "description": "Backend API"}],
        "minLength": 10,
        "maxLength": 72,
        "changeVersion": "releaseBranch",
        "releaseBranch": "master",
        "showAllVersionTypes": True,
        "stageAllChanges": True,
        "ai": {"enabled": True, "provider": "google", "model": "gemini-2.0-flash"},
    }


class TestCommitConfig:
    """Test CommitConfig parsing."""

    def test_from_dict(self, config_data):
        config = CommitConfig.from_dict(config_data)

        assert config.format is CommitFormat.CUSTOM
        assert config.branch_format is BranchFormat.TYPE_SCOPE_DESCRIPTION
        assert config.types == (ChoiceItem("feat", "New feature(s)"),)
        assert config.min_length == 10
        assert config.release_branch == "master"
        assert config.ai.provider == "google"
        assert config.ai.key_name == "GOOGLE_API_KEY"

    def test_defaults(self):
        config = CommitConfig.from_dict({})

        assert config.format is CommitFormat.PAREN_SENTENCE
        assert config.types == DEFAULT_TYPES
        assert config.scopes == ()
        assert (config.min_length, config.max_length) == (8, 80)
        assert config.ai == AIConfig()

    def test_format_given_as_string_number(self):
        assert CommitConfig.from_dict({"format": "7"}).format is CommitFormat.SCOPE_COLON_SENTENCE

    @pytest.mark.parametrize(
        "data",
        [
            {"format": 9},
            {"branchFormat": "weird"},
            {"changeVersion": "sometimes"},
            {"types": [{"description": "no value"}]},
            {"ai": {"provider": "mistral"}},
            {"minLength": "short"},
        ],
    )
    def test_invalid(self, data):
        with pytest.raises(ConfigError):
            CommitConfig.from_dict(data)

    def test_requires_scope(self, config_data):
        config = CommitConfig.from_dict(config_data)

        assert config.requires_scope
        assert config.branch_requires_scope
        assert not CommitConfig(format=CommitFormat.COLON_LOWER).requires_scope
        assert CommitConfig(format=CommitFormat.SCOPE_LOWER).requires_scope

    def test_commit_pattern_compiled_once(self, config_data):
        config = CommitConfig.from_dict(config_data)

        assert config.commit_pattern is config.commit_pattern
        assert config.commit_pattern.fields == ("Issue ID",)
        assert config.branch_pattern is None

    def test_find_vocabulary_case_insensitive(self, config_data):
        config = CommitConfig.from_dict(config_data)

        assert config.find_type("FEAT").value == "feat"
        assert config.find_scope("Api").value == "api"
        assert config.find_type("fix") is None

    def test_placeholder_scope(self):
        assert CommitConfig(scopes=(ChoiceItem("example"),)).uses_placeholder_scope
        assert not CommitConfig().uses_placeholder_scope


class TestPersistence:
    """Test reading and writing the config file."""

    def test_save_and_load(self, tmp_path, config_data):
        path = tmp_path / "commit-config.json"
        config = CommitConfig.from_dict(config_data)

        config.save(path)
        saved = json.loads(path.read_text())

        assert saved["format"] == "custom"
        assert saved["ai"]["envPath"] == ".env"
        assert CommitConfig.load(path) == config

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            CommitConfig.load(tmp_path / "missing.json")

        assert "No configuration found" in str(exc_info.value)

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "commit-config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError):
            CommitConfig.load(path)


def test_get_config_path(monkeypatch):
    monkeypatch.delenv("FORMAT_COMMIT_CONFIG", raising=False)
    assert get_config_path().name == "commit-config.json"

    monkeypatch.setenv("FORMAT_COMMIT_CONFIG", "config/format.json")
    assert str(get_config_path()) == "config/format.json"


@pytest.mark.parametrize(
    "mode,branch,expected",
    [
        ("ignore", "main", "skip"),
        ("never", "main", "ask"),
        ("always", "dev", "required"),
        ("releaseBranch", "main", "required"),
        ("releaseBranch", "dev", "ask"),
    ],
)
def test_version_prompt_mode(mode, branch, expected):
    config = CommitConfig(change_version=mode, release_branch="main")

    assert version_prompt_mode(config, branch) == expected
