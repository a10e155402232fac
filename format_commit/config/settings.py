"""Configuration settings for format-commit."""

import json
import logging
import os
from dataclasses import dataclass, field, replace
from functools import cached_property
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ..core.pattern import CompiledPattern, compile_pattern
from ..core.renderer import BranchFormat, CommitFormat

logger = logging.getLogger(__name__)

# Load environment variables at module level
load_dotenv()

DEFAULT_CONFIG_FILE = "commit-config.json"
PLACEHOLDER_SCOPE = "example"

CHANGE_VERSION_MODES = ("ignore", "never", "releaseBranch", "always")
AI_PROVIDERS = ("anthropic", "openai", "google")
DEFAULT_AI_MODELS = {
    "anthropic": "claude-haiku-4-5",
    "openai": "gpt-4o-mini",
    "google": "gemini-2.0-flash",
}
VERSION_TYPES = ("patch", "minor", "major", "custom")
ALL_VERSION_TYPES = ("prepatch", "preminor", "premajor", "prerelease", "from-git")


class ConfigError(Exception):
    """Configuration file is missing or malformed."""

    pass


@dataclass(frozen=True)
class ChoiceItem:
    """A vocabulary entry: a commit type or a scope."""

    value: str
    description: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ChoiceItem":
        if isinstance(data, str):
            return cls(value=data)
        if not isinstance(data, dict) or not data.get("value"):
            raise ConfigError(f"Invalid type/scope entry: {data!r}")
        return cls(value=str(data["value"]), description=str(data.get("description", "")))

    def to_dict(self) -> dict[str, str]:
        return {"value": self.value, "description": self.description}


DEFAULT_TYPES = (
    ChoiceItem("feat", "New feature(s)"),
    ChoiceItem("fix", "Issue(s) fixing"),
    ChoiceItem("core", "Change(s) on application core"),
    ChoiceItem("test", "Change(s) related to tests"),
    ChoiceItem("config", "Project configuration"),
    ChoiceItem("doc", "Documentation / comment(s)"),
)

DEFAULT_SCOPES = (ChoiceItem(PLACEHOLDER_SCOPE, "Replace with your own scopes"),)


@dataclass(frozen=True)
class AIConfig:
    """Settings for AI title suggestions."""

    enabled: bool = False
    provider: str = "anthropic"
    model: str = DEFAULT_AI_MODELS["anthropic"]
    env_path: str = ".env"
    env_key_name: str | None = None
    large_diff_token_threshold: int = 20000

    @property
    def key_name(self) -> str:
        return self.env_key_name or f"{self.provider.upper()}_API_KEY"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "AIConfig":
        if not data:
            return cls()
        provider = data.get("provider", "anthropic")
        if provider not in AI_PROVIDERS:
            raise ConfigError(f"Unknown AI provider: {provider}")
        return cls(
            enabled=bool(data.get("enabled", False)),
            provider=provider,
            model=data.get("model") or DEFAULT_AI_MODELS[provider],
            env_path=data.get("envPath", ".env"),
            env_key_name=data.get("envKeyName"),
            large_diff_token_threshold=int(data.get("largeDiffTokenThreshold", 20000)),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "enabled": self.enabled,
            "provider": self.provider,
            "model": self.model,
            "envPath": self.env_path,
            "largeDiffTokenThreshold": self.large_diff_token_threshold,
        }
        if self.env_key_name:
            data["envKeyName"] = self.env_key_name
        return data


def _parse_format(enum_cls: type, raw: Any, key: str):
    if isinstance(raw, str) and raw.isdigit():
        raw = int(raw)
    try:
        return enum_cls(raw)
    except ValueError:
        raise ConfigError(f"Invalid {key}: {raw!r}") from None


@dataclass(frozen=True)
class CommitConfig:
    """Project settings read from ``commit-config.json``.

    Immutable: the custom patterns are compiled once, on first use.
    """

    format: CommitFormat = CommitFormat.PAREN_SENTENCE
    custom_format: str | None = None
    branch_format: BranchFormat = BranchFormat.TYPE_DESCRIPTION
    custom_branch_format: str | None = None
    types: tuple[ChoiceItem, ...] = DEFAULT_TYPES
    scopes: tuple[ChoiceItem, ...] = ()
    min_length: int = 8
    max_length: int = 80
    change_version: str = "ignore"
    release_branch: str = "main"
    show_all_version_types: bool = False
    stage_all_changes: bool = False
    ai: AIConfig = field(default_factory=AIConfig)

    @cached_property
    def commit_pattern(self) -> CompiledPattern | None:
        if not self.format.is_custom or not self.custom_format:
            return None
        return compile_pattern(self.custom_format)

    @cached_property
    def branch_pattern(self) -> CompiledPattern | None:
        if not self.branch_format.is_custom or not self.custom_branch_format:
            return None
        return compile_pattern(self.custom_branch_format)

    @property
    def requires_scope(self) -> bool:
        if self.format.is_custom:
            return self.commit_pattern is not None and self.commit_pattern.has_scope
        return self.format.has_scope

    @property
    def branch_requires_scope(self) -> bool:
        if self.branch_format.is_custom:
            return self.branch_pattern is not None and self.branch_pattern.has_scope
        return self.branch_format.has_scope

    @property
    def uses_placeholder_scope(self) -> bool:
        return any(s.value == PLACEHOLDER_SCOPE for s in self.scopes)

    def find_type(self, value: str) -> ChoiceItem | None:
        """Case-insensitive lookup in the type vocabulary."""
        return next((t for t in self.types if t.value.lower() == value.lower()), None)

    def find_scope(self, value: str) -> ChoiceItem | None:
        """Case-insensitive lookup in the scope vocabulary."""
        return next((s for s in self.scopes if s.value.lower() == value.lower()), None)

    def with_changes(self, **changes: Any) -> "CommitConfig":
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CommitConfig":
        """Create configuration from the camelCase JSON layout."""
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a JSON object")

        change_version = data.get("changeVersion", "ignore")
        if change_version not in CHANGE_VERSION_MODES:
            raise ConfigError(f"Invalid changeVersion: {change_version!r}")

        try:
            return cls(
                format=_parse_format(CommitFormat, data.get("format", 1), "format"),
                custom_format=data.get("customFormat"),
                branch_format=_parse_format(BranchFormat, data.get("branchFormat", 1), "branchFormat"),
                custom_branch_format=data.get("customBranchFormat"),
                types=tuple(ChoiceItem.from_dict(t) for t in data["types"]) if data.get("types") else DEFAULT_TYPES,
                scopes=tuple(ChoiceItem.from_dict(s) for s in data.get("scopes") or ()),
                min_length=int(data.get("minLength", 8)),
                max_length=int(data.get("maxLength", 80)),
                change_version=change_version,
                release_branch=data.get("releaseBranch") or "main",
                show_all_version_types=bool(data.get("showAllVersionTypes", False)),
                stage_all_changes=bool(data.get("stageAllChanges", False)),
                ai=AIConfig.from_dict(data.get("ai")),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "format": self.format.value,
            "branchFormat": self.branch_format.value,
            "types": [t.to_dict() for t in self.types],
            "minLength": self.min_length,
            "maxLength": self.max_length,
            "changeVersion": self.change_version,
            "releaseBranch": self.release_branch,
            "showAllVersionTypes": self.show_all_version_types,
            "stageAllChanges": self.stage_all_changes,
            "ai": self.ai.to_dict(),
        }
        if self.custom_format:
            data["customFormat"] = self.custom_format
        if self.custom_branch_format:
            data["customBranchFormat"] = self.custom_branch_format
        if self.scopes:
            data["scopes"] = [s.to_dict() for s in self.scopes]
        return data

    @classmethod
    def load(cls, path: Path) -> "CommitConfig":
        """Load configuration from a JSON file."""
        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigError(f"No configuration found at {path}") from None
        except json.JSONDecodeError as e:
            raise ConfigError(f"Failed to parse {path}: {e}") from e
        logger.debug("Loaded configuration from %s", path)
        return cls.from_dict(data)

    def save(self, path: Path) -> None:
        """Write configuration as indented JSON."""
        with path.open("w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
            f.write("\n")
        logger.debug("Saved configuration to %s", path)


def get_config_path() -> Path:
    """Location of the project configuration file."""
    return Path(os.getenv("FORMAT_COMMIT_CONFIG", DEFAULT_CONFIG_FILE))


def version_prompt_mode(config: CommitConfig, branch: str) -> str:
    """Decide how the commit flow asks about a package version change.

    Returns ``"required"`` when a version change must be chosen, ``"ask"`` when
    the user is asked whether to change it, and ``"skip"`` otherwise.
    """
    if config.change_version == "always":
        return "required"
    if config.change_version == "releaseBranch":
        return "required" if branch == config.release_branch else "ask"
    if config.change_version == "never":
        return "ask"
    return "skip"
