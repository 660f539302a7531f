"""
Data model for heuristic commit suggestions.

A :class:`CommitSuggestion` is produced fresh by every classification and
is immutable afterwards. Its ``full_message`` is always derived from the
other fields through :func:`format_conventional_commit`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from plm_helper.suggest.conventional import format_conventional_commit


@dataclass(frozen=True)
class CommitSuggestion:
    """Suggested Conventional Commit for a set of staged files.

    Attributes
    ----------
    type : str
        The Conventional Commit type (feat, fix, docs, etc.).
    message : str
        Description text following the colon.
    scope : str, optional
        Affected area, rendered in parentheses when present.
    full_message : str
        The complete subject line; computed, never passed in.
    """

    type: str
    message: str
    scope: Optional[str] = None
    full_message: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "full_message", format_conventional_commit(self.type, self.scope, self.message)
        )
