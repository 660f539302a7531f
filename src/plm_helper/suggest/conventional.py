"""
Conventional Commit vocabulary, formatting and validation.

The ten commit types understood by the heuristic classifier live here
together with their one-line descriptions so that the classifier, the
manual commit builder and the validator all share one enumeration.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional


# Ordered catalog of the commit types the classifier can produce.
TYPE_DESCRIPTIONS: Dict[str, str] = {
    "feat": "A new feature",
    "fix": "A bug fix",
    "docs": "Documentation only changes",
    "style": "Code style changes (formatting, semicolons, etc)",
    "refactor": "Code refactoring without changing functionality",
    "test": "Adding or updating tests",
    "chore": "Maintenance tasks, dependencies, etc",
    "perf": "Performance improvements",
    "build": "Build system or external dependencies",
    "ci": "CI/CD configuration changes",
}

COMMIT_TYPES = tuple(TYPE_DESCRIPTIONS)

# The validator additionally accepts ``revert`` which the classifier never emits.
CONVENTIONAL_TYPES = (
    "feat", "fix", "docs", "style", "refactor",
    "perf", "test", "build", "ci", "chore", "revert",
)

_CONVENTIONAL_RE = re.compile(
    r"^(feat|fix|docs|style|refactor|perf|test|build|ci|chore|revert)(\([a-zA-Z0-9_-]+\))?: .+$"
)


@dataclass(frozen=True)
class CommitTypeInfo:
    """A commit type together with its human readable description."""

    value: str
    description: str

    @property
    def name(self) -> str:
        """Display form used by selection prompts, e.g. ``feat: A new feature``."""
        return f"{self.value}: {self.description}"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of :func:`validate_conventional_commit`."""

    valid: bool
    error: Optional[str] = None


def list_commit_types() -> List[CommitTypeInfo]:
    """Return the commit type catalog in its fixed order."""
    return [CommitTypeInfo(value, description) for value, description in TYPE_DESCRIPTIONS.items()]


def format_conventional_commit(commit_type: str, scope: Optional[str], message: str) -> str:
    """Render a Conventional Commit subject line.

    Parameters
    ----------
    commit_type : str
        The commit type, e.g. ``feat``.
    scope : str or None
        Optional scope. Empty strings are treated as absent.
    message : str
        The description following the colon.

    Returns
    -------
    str
        ``type(scope): message`` or ``type: message``.
    """
    if scope:
        return f"{commit_type}({scope}): {message}"
    return f"{commit_type}: {message}"


def validate_conventional_commit(message: str) -> ValidationResult:
    """Check that ``message`` follows ``type(scope): description``.

    When the message is invalid the result carries the most specific
    error that applies so it can be shown to the user verbatim.
    """
    if _CONVENTIONAL_RE.match(message):
        return ValidationResult(valid=True)

    type_match = re.match(r"^([a-zA-Z]+)", message)
    if not type_match:
        return ValidationResult(False, "Commit message must start with a type (feat, fix, docs, ...)")

    commit_type = type_match.group(1)
    if commit_type not in CONVENTIONAL_TYPES:
        return ValidationResult(
            False,
            f'Invalid type: "{commit_type}". Valid types: {", ".join(CONVENTIONAL_TYPES)}',
        )

    if ":" not in message:
        return ValidationResult(False, 'A ":" is required after the type')

    after_colon = message.split(":")[1]
    if not after_colon.strip():
        return ValidationResult(False, "Description must not be empty")

    return ValidationResult(False, "Invalid format. Example: feat(scope): description")
