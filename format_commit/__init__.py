"""format-commit - Standardize commit titles and branch names."""

from .cli.main import FormatCommit
from .config.settings import AIConfig, ChoiceItem, CommitConfig, ConfigError
from .core.git import GitError, GitOperations
from .core.parser import NormalizationResult, accept_title, normalize_title
from .core.pattern import CompiledPattern, compile_pattern, get_custom_fields
from .core.renderer import BranchFormat, CommitFormat, format_branch_name, format_commit_title
from .core.validator import PatternKind, validate_pattern
from .services.ai_service import AIService, AIServiceError

__version__ = "0.4.0"

__all__ = [
    "FormatCommit",
    "AIConfig",
    "ChoiceItem",
    "CommitConfig",
    "ConfigError",
    "GitError",
    "GitOperations",
    "NormalizationResult",
    "accept_title",
    "normalize_title",
    "CompiledPattern",
    "compile_pattern",
    "get_custom_fields",
    "BranchFormat",
    "CommitFormat",
    "format_branch_name",
    "format_commit_title",
    "PatternKind",
    "validate_pattern",
    "AIService",
    "AIServiceError",
]
