"""
Heuristic commit message suggestions.

This package derives a Conventional Commit type, scope and description
from the list of staged paths. See
:mod:`plm_helper.suggest.change_classifier`,
:mod:`plm_helper.suggest.suggestion_model` and
:mod:`plm_helper.suggest.conventional` for details.
"""

from .change_classifier import FilePatternProfile, analyze_file_patterns, classify  # noqa: F401
from .conventional import (  # noqa: F401
    format_conventional_commit,
    list_commit_types,
    validate_conventional_commit,
)
from .suggestion_model import CommitSuggestion  # noqa: F401
