"""
Commit message suggestions drafted by a language model.

The staged diff is filtered before it is sent: build output and vendored
dependencies are dropped, sources under ``src/`` go first, and the result
is truncated so that large commits still fit in a prompt.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from plm_helper.llm.base import AIProvider, LLMError
from plm_helper.vcs.git_client import GitClient


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


DIFF_CHAR_LIMIT = 6000
_FILE_SPLIT_RE = re.compile(r"(?=diff --git)")


@dataclass(frozen=True)
class AISuggestionResult:
    suggestion: Optional[str] = None
    error: Optional[str] = None


def filter_diff(diff: str, limit: int = DIFF_CHAR_LIMIT) -> str:
    """Reorder and trim a multi-file unified diff for prompting."""
    prioritized: List[str] = []
    for part in _FILE_SPLIT_RE.split(diff):
        if not part.strip():
            continue
        if "dist/" in part or "node_modules/" in part:
            continue
        if "src/" in part:
            prioritized.insert(0, part)
        else:
            prioritized.append(part)
    return "\n".join(prioritized)[:limit]


def generate_ai_suggestion(client: GitClient, provider: AIProvider) -> AISuggestionResult:
    """Ask ``provider`` for a commit message for the staged changes.

    Provider failures are reported in the result rather than raised, so
    callers can fall back to the heuristic classifier.

    Raises
    ------
    GitError
        If the staged files or diff cannot be read.
    """
    staged_files = client.get_staged_files()
    if not staged_files:
        return AISuggestionResult(error="No staged files")

    diff = filter_diff(client.get_staged_diff())
    source_files = [f for f in staged_files if "dist/" not in f]

    try:
        suggestion = provider.generate_commit_message(diff, source_files)
    except LLMError as exc:
        logger.warning("AI provider %s failed: %s", provider.name, exc)
        return AISuggestionResult(error=str(exc))

    if not suggestion:
        return AISuggestionResult(error=f"{provider.name} returned an empty response")
    return AISuggestionResult(suggestion=suggestion)
