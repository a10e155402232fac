"""Core modules for format-commit.

This module contains the core functionality including:
- Pattern compilation and validation
- Title and branch name rendering
- Reverse parsing and normalization of titles
- Git and npm operations
"""

from .casing import Casing, apply_casing, detect_casing
from .git import DiffData, GitError, GitOperations
from .npm import NpmError, NpmOperations
from .parser import ErrorKind, NormalizationResult, accept_title, normalize_title, parse_title
from .pattern import CompiledPattern, FieldSegment, KeywordSegment, LiteralSegment, compile_pattern, get_custom_fields
from .renderer import BranchFormat, CommitFormat, FieldValueSet, format_branch_name, format_commit_title, render
from .validator import PatternKind, valid_title, validate_pattern

__all__ = [
    "Casing",
    "apply_casing",
    "detect_casing",
    "DiffData",
    "GitError",
    "GitOperations",
    "NpmError",
    "NpmOperations",
    "ErrorKind",
    "NormalizationResult",
    "accept_title",
    "normalize_title",
    "parse_title",
    "CompiledPattern",
    "FieldSegment",
    "KeywordSegment",
    "LiteralSegment",
    "compile_pattern",
    "get_custom_fields",
    "BranchFormat",
    "CommitFormat",
    "FieldValueSet",
    "format_branch_name",
    "format_commit_title",
    "render",
    "PatternKind",
    "valid_title",
    "validate_pattern",
]
