#!/usr/bin/env python3
"""Main CLI module for format-commit."""

import logging
import sys
from dataclasses import dataclass, replace
from pathlib import Path

from ..config.settings import (
    AI_PROVIDERS,
    ALL_VERSION_TYPES,
    DEFAULT_AI_MODELS,
    DEFAULT_SCOPES,
    PLACEHOLDER_SCOPE,
    VERSION_TYPES,
    AIConfig,
    CommitConfig,
    ConfigError,
    get_config_path,
    version_prompt_mode,
)
from ..core.git import GitError, GitOperations
from ..core.npm import NpmError, NpmOperations
from ..core.parser import accept_title
from ..core.pattern import CompiledPattern
from ..core.renderer import BranchFormat, CommitFormat, format_branch_name, format_commit_title
from ..core.validator import (
    PatternKind,
    valid_branch_description,
    valid_commit_description,
    valid_custom_field,
    valid_setup_length,
    valid_version,
    validate_pattern,
)
from ..services.ai_service import AIService, AIServiceError
from ..services.env_store import add_to_gitignore, get_env_key, is_in_gitignore, key_exists_in_env, set_env_key
from . import console

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

CUSTOM_TITLE = "custom"

CHANGE_VERSION_CHOICES = [
    ("ignore", "Never prompt for a version change"),
    ("never", "Ask on every commit whether to change the version"),
    ("releaseBranch", "Require a version change on the release branch"),
    ("always", "Require a version change on every commit"),
]

VERSION_TYPE_LABELS = {
    "patch": "Bug fixes (1.0.0 → 1.0.1)",
    "minor": "New features (1.0.0 → 1.1.0)",
    "major": "Breaking changes (1.0.0 → 2.0.0)",
    "custom": "Enter version manually",
    "prerelease": "Pre-release version",
    "from-git": "Get version from git tag",
}


@dataclass
class SetupResult:
    """Outcome of the interactive configuration."""

    config: CommitConfig
    commit_after: bool = False


@dataclass
class VersionChange:
    """Version bump chosen during a commit."""

    version: str
    preid: str | None = None


class FormatCommit:
    """Main application class."""

    def __init__(self, config_path: Path | None = None, test_mode: bool = False):
        """Initialize format-commit."""
        self.config_path = config_path or get_config_path()
        self.test_mode = test_mode
        self.git = GitOperations()
        self.npm = NpmOperations()

    @staticmethod
    def _check_vocabulary(config: CommitConfig, needs_scope: bool) -> str | None:
        if not config.types:
            return "No types defined - please update config"
        if needs_scope and not config.scopes:
            return "No scopes defined - update config or format option"
        return None

    @staticmethod
    def _collect_custom_fields(pattern: CompiledPattern | None, branch: bool = False) -> dict[str, str]:
        """Prompt once for every custom field of a pattern."""
        if pattern is None:
            return {}
        return {
            label: console.ask_text(
                f"{label}?", validate=lambda value, label=label: valid_custom_field(value, label, branch)
            )
            for label in pattern.fields
        }

    @staticmethod
    def _select_type(config: CommitConfig, message: str) -> str:
        return console.select_choice(message, [(t.value, t.description) for t in config.types])

    @staticmethod
    def _select_scope(config: CommitConfig) -> str:
        return console.select_choice("Scope", [(s.value, s.description) for s in config.scopes])

    def _ai_suggestions(self, config: CommitConfig, fields: dict[str, str]) -> list[str]:
        """Ask the configured AI provider for titles; any failure yields no suggestions."""
        if config.uses_placeholder_scope:
            console.print_warning(
                f'Default scope "{PLACEHOLDER_SCOPE}" in use - update scopes in config to enable AI suggestions'
            )
            return []

        api_key = get_env_key(config.ai.env_path, config.ai.key_name)
        if not api_key:
            console.print_warning(f"AI API key {config.ai.key_name} not found in {config.ai.env_path}")
            return []

        try:
            diff_data = self.git.get_optimized_diff()
        except GitError as e:
            logger.debug("Error getting git diff: %s", e)
            console.print_warning(f"Could not read staged changes for AI suggestions: {e}")
            return []
        if diff_data is None:
            console.print_warning("No staged changes to analyze for AI suggestions")
            return []

        service = AIService(config, api_key)
        prompt = service.build_prompt(diff_data, fields)
        estimated_tokens = service.estimate_tokens(prompt)
        if estimated_tokens > config.ai.large_diff_token_threshold:
            if not console.confirm_action(
                f"Large diff detected (~{estimated_tokens} tokens). Generate AI suggestions?"
            ):
                return []

        try:
            with console.console.status("Generating AI suggestions..."):
                suggestions = service.generate_suggestions(diff_data, fields, prompt)
        except AIServiceError as e:
            console.print_warning(f"AI suggestion failed: {e}")
            return []

        if not suggestions:
            console.print_warning("AI suggestions did not match the configured format")
        return suggestions

    def _manual_title(self, config: CommitConfig, fields: dict[str, str]) -> str:
        type_ = self._select_type(config, "Type of changes")
        scope = self._select_scope(config) if config.requires_scope else None

        def render_title(description: str) -> str:
            return format_commit_title(type_, description, config.format, scope, config.commit_pattern, fields)

        def validate(description: str) -> str | None:
            if not description:
                return "Commit title cannot be empty"
            return accept_title(render_title(description), config, fields).error

        description = console.ask_text("Commit title?", validate=validate)
        return accept_title(render_title(description), config, fields).normalized

    def _choose_title(self, config: CommitConfig, fields: dict[str, str]) -> str:
        """Pick an AI suggestion (editable) or build the title manually."""
        suggestions = self._ai_suggestions(config, fields) if config.ai.enabled else []
        if not suggestions:
            return self._manual_title(config, fields)

        choice = console.select_choice(
            "Commit title",
            [(s, "") for s in suggestions] + [(CUSTOM_TITLE, "Write the title manually")],
        )
        if choice == CUSTOM_TITLE:
            return self._manual_title(config, fields)

        edited = console.ask_text(
            "Commit title?",
            validate=lambda text: accept_title(text, config, fields).error,
            default=choice,
        )
        return accept_title(edited, config, fields).normalized

    def _ask_version(self, config: CommitConfig, branch: str) -> VersionChange | None:
        mode = version_prompt_mode(config, branch)
        if mode == "skip":
            return None
        if mode == "ask" and not console.confirm_action("Change package version?"):
            return None

        version_types = list(VERSION_TYPES)
        if config.show_all_version_types:
            version_types += list(ALL_VERSION_TYPES)
        version = console.select_choice(
            "Type of version change",
            [(v, VERSION_TYPE_LABELS.get(v, "")) for v in version_types],
            default="patch",
        )
        if version == "custom":
            return VersionChange(console.ask_text("Version?", validate=valid_version))
        if version == "prerelease":
            return VersionChange(version, preid=console.ask_text("Pre-release tag?") or None)
        return VersionChange(version)

    def commit(self, config: CommitConfig) -> None:
        """Run the interactive commit flow."""
        console.print_info("New commit")
        if self.test_mode:
            console.print_warning("Test mode enabled - commit will not be created")

        if config.format.is_custom:
            pattern_error = validate_pattern(config.custom_format, PatternKind.COMMIT)
            if pattern_error:
                console.print_error(f"Invalid custom format - {pattern_error}")
                return

        vocabulary_error = self._check_vocabulary(config, config.requires_scope)
        if vocabulary_error:
            console.print_error(vocabulary_error)
            return
        if config.requires_scope and config.uses_placeholder_scope:
            console.print_warning(f'Scopes still use the default "{PLACEHOLDER_SCOPE}" value - update config')

        current_branch = self.git.get_current_branch()
        fields = self._collect_custom_fields(config.commit_pattern)

        if config.stage_all_changes and not self.test_mode:
            self.git.stage_all()

        title = self._choose_title(config, fields)
        description = console.ask_text("Commit description?", validate=valid_commit_description, default="")
        version_change = self._ask_version(config, current_branch)
        push_after_commit = console.confirm_action("Push changes?")

        if self.test_mode:
            console.print_title(title)
            return

        if version_change:
            console.print_info("Update version...")
            new_version = self.npm.version(version_change.version, preid=version_change.preid)
            console.print_info(f"Package updated to {new_version}")

        if not self.git.has_staged_changes():
            console.print_error("No staged changes to commit")
            return

        output = self.git.commit(title, description)
        console.print_success("Commit successfully completed")
        console.print_output(output)

        if push_after_commit:
            console.print_info("Push changes...")
            console.print_output(self.git.push(current_branch))
        console.print_output(self.git.status())

    def create_branch(self, config: CommitConfig) -> None:
        """Run the interactive branch creation flow."""
        console.print_info("New branch")
        if self.test_mode:
            console.print_warning("Test mode enabled - branch will not be created")

        if config.branch_format.is_custom:
            pattern_error = validate_pattern(config.custom_branch_format, PatternKind.BRANCH)
            if pattern_error:
                console.print_error(f"Invalid custom branch format - {pattern_error}")
                return

        vocabulary_error = self._check_vocabulary(config, config.branch_requires_scope)
        if vocabulary_error:
            console.print_error(vocabulary_error)
            return

        fields = self._collect_custom_fields(config.branch_pattern, branch=True)
        type_ = self._select_type(config, "Type of branch")
        scope = self._select_scope(config) if config.branch_requires_scope else None
        description = console.ask_text(
            "Branch description?",
            validate=lambda value: valid_branch_description(value, config.max_length),
        )
        checkout = self.test_mode or console.confirm_action(
            "Switch to the new branch after creation?", default=True
        )

        branch_name = format_branch_name(
            type_, description, config.branch_format, scope, config.branch_pattern, fields
        )

        if self.test_mode:
            console.print_title(branch_name, label="Branch name")
            return

        if self.git.branch_exists(branch_name):
            console.print_error(f'Branch "{branch_name}" already exists')
            return

        output = self.git.create_branch(branch_name, checkout=checkout)
        if checkout:
            console.print_success(f'Branch "{branch_name}" successfully created and checked out')
        else:
            console.print_success(f'Branch "{branch_name}" successfully created')
        console.print_output(output)
        console.print_output(self.git.status())

    def _setup_ai(self, current: AIConfig) -> AIConfig:
        if not console.confirm_action("Enable AI commit title suggestions?", default=current.enabled):
            return replace(current, enabled=False)

        provider = console.select_choice(
            "AI provider", [(p, DEFAULT_AI_MODELS[p]) for p in AI_PROVIDERS], default=current.provider
        )
        model_default = current.model if provider == current.provider else DEFAULT_AI_MODELS[provider]
        model = console.ask_text("AI model?", default=model_default)
        env_path = console.ask_text("Path to .env file?", default=current.env_path)
        ai = AIConfig(
            enabled=True,
            provider=provider,
            model=model,
            env_path=env_path,
            env_key_name=current.env_key_name if provider == current.provider else None,
            large_diff_token_threshold=current.large_diff_token_threshold,
        )

        if not is_in_gitignore(env_path):
            add_to_gitignore(env_path)
            console.print_info(f"{env_path} added to .gitignore")

        if not key_exists_in_env(env_path, ai.key_name):
            api_key = console.ask_secret(f"{ai.key_name} (leave empty to add it later)?")
            if api_key:
                set_env_key(env_path, ai.key_name, api_key)
                console.print_success(f"{ai.key_name} saved to {env_path}")
            else:
                console.print_warning(f"Add {ai.key_name} to {env_path} to use AI suggestions")
        return ai

    def _current_branch_or_default(self) -> str:
        try:
            return self.git.get_current_branch()
        except GitError:
            return "main"

    def setup(self, offer_commit: bool = False) -> SetupResult:
        """Interactively create or update the configuration file."""
        console.print_info("Create config file")

        current = CommitConfig()
        if self.config_path.exists():
            current = CommitConfig.load(self.config_path)

        fmt = CommitFormat(
            _format_value(
                console.select_choice(
                    "Commit format",
                    [(str(f.value), f.label) for f in CommitFormat],
                    default=str(current.format.value),
                )
            )
        )
        custom_format = None
        if fmt.is_custom:
            custom_format = console.ask_text(
                "Custom commit format?",
                validate=lambda p: validate_pattern(p, PatternKind.COMMIT),
                default=current.custom_format or "{Issue ID} - type - Description",
            )

        branch_format = BranchFormat(
            _format_value(
                console.select_choice(
                    "Branch format",
                    [(str(f.value), f.label) for f in BranchFormat],
                    default=str(current.branch_format.value),
                )
            )
        )
        custom_branch_format = None
        if branch_format.is_custom:
            custom_branch_format = console.ask_text(
                "Custom branch format?",
                validate=lambda p: validate_pattern(p, PatternKind.BRANCH),
                default=current.custom_branch_format or "type/{Issue ID}-description",
            )

        min_length = console.ask_int(
            "Commit minimum length?", validate=valid_setup_length, default=current.min_length
        )
        max_length = console.ask_int(
            "Commit maximum length?",
            validate=lambda n: valid_setup_length(n)
            or (f"Maximum length must be at least {min_length}" if n < min_length else None),
            default=max(current.max_length, min_length),
        )
        stage_all_changes = console.confirm_action(
            "Stage all changes before each commit?", default=current.stage_all_changes
        )
        change_version = console.select_choice(
            "Change package version", CHANGE_VERSION_CHOICES, default=current.change_version
        )
        release_branch = current.release_branch
        if change_version == "releaseBranch":
            release_branch = console.ask_text(
                "Release git branch?", default=self._current_branch_or_default()
            )
        show_all_version_types = console.confirm_action(
            "Display all npm version types?", default=current.show_all_version_types
        )
        ai = self._setup_ai(current.ai)

        config = current.with_changes(
            format=fmt,
            custom_format=custom_format,
            branch_format=branch_format,
            custom_branch_format=custom_branch_format,
            min_length=min_length,
            max_length=max_length,
            stage_all_changes=stage_all_changes,
            change_version=change_version,
            release_branch=release_branch,
            show_all_version_types=show_all_version_types,
            ai=ai,
        )
        if (config.requires_scope or config.branch_requires_scope) and not config.scopes:
            config = config.with_changes(scopes=DEFAULT_SCOPES)
            console.print_warning(
                f'Default scope "{PLACEHOLDER_SCOPE}" added - edit scopes in {self.config_path}'
            )

        commit_after = offer_commit and console.confirm_action(
            "Commit your changes now? (or exit the configuration without committing)"
        )

        config.save(self.config_path)
        console.print_success(f"Configuration written to {self.config_path}")
        return SetupResult(config=config, commit_after=commit_after)

    def run(self, branch: bool = False, configure: bool = False, debug: bool = False) -> None:
        """Run the main application logic."""
        try:
            console.setup_logging(debug)

            if configure:
                self.setup()
                return

            if not self.config_path.exists():
                console.print_warning("No configuration found")
                result = self.setup(offer_commit=True)
                if result.commit_after:
                    self.commit(result.config)
                return

            config = CommitConfig.load(self.config_path)
            if branch:
                self.create_branch(config)
            else:
                self.commit(config)

        except ConfigError as e:
            console.print_error(f"Configuration error: {e}")
            sys.exit(1)
        except (GitError, NpmError) as e:
            console.print_error(str(e))
            if debug:
                console.print_debug("Command error details:", exc_info=True)
            sys.exit(1)


def _format_value(raw: str) -> int | str:
    return int(raw) if raw.isdigit() else raw
