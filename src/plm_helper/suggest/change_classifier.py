"""
Heuristics for turning a set of staged paths into a Conventional Commit.

The classifier looks only at file paths. It never reads file contents,
runs git, or talks to a language model, so the same list of paths always
yields the same :class:`CommitSuggestion`. Three independent passes run
over a :class:`FilePatternProfile` computed once per call:

* :func:`determine_commit_type` picks the type from a priority-ordered
  rule list; the first rule that matches wins.
* :func:`determine_scope` picks a scope from :data:`SCOPE_PATTERNS` or
  from the name of a lone source file.
* :func:`generate_message` writes the description text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from plm_helper.suggest.suggestion_model import CommitSuggestion


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# Scope name -> substrings. A scope applies when every staged path contains
# at least one of its substrings. Iteration order decides ties.
SCOPE_PATTERNS: Dict[str, Tuple[str, ...]] = {
    "api": ("/api/", "Controller", "Service"),
    "ui": ("/components/", ".tsx", ".jsx"),
    "docs": (".md", "/docs/"),
    "config": (".json", ".yml", ".yaml", ".env"),
    "test": (".test.", ".spec.", "__tests__"),
    "ci": (".github/", "workflow"),
}

DEPENDENCY_FILES = frozenset({"package.json", "package-lock.json"})

_SOURCE_NAME_RE = re.compile(r"/([^/]+)\.(tsx|ts|js|jsx)$")
_KNOWN_EXTENSION_RE = re.compile(r"\.(ts|tsx|js|jsx|md|json|yml|yaml|css|scss)$")
_COMPONENT_DIR_RE = re.compile(r"/components/([^/]+)")
_CAMEL_BOUNDARY_RE = re.compile(r"([a-z])([A-Z])")


@dataclass(frozen=True)
class FilePatternProfile:
    """Boolean features derived from the full list of staged paths.

    ``has_new_files`` and ``has_deleted_files`` are not consulted by any
    rule; they are kept so callers relying on the full flag set still work.
    """

    has_new_files: bool = False
    has_deleted_files: bool = False
    has_test_files: bool = False
    has_doc_files: bool = False
    has_config_files: bool = False
    has_style_files: bool = False
    has_api_files: bool = False
    has_component_files: bool = False
    has_workflow_files: bool = False
    has_dependency_files: bool = False


def analyze_file_patterns(files: Sequence[str]) -> FilePatternProfile:
    """Compute the :class:`FilePatternProfile` for ``files``."""
    return FilePatternProfile(
        has_new_files=any("new" in f or "add" in f for f in files),
        # Deletions are not visible from paths alone.
        has_deleted_files=False,
        has_test_files=any(".test." in f or ".spec." in f or "__tests__" in f for f in files),
        has_doc_files=any(f.endswith(".md") or "docs/" in f for f in files),
        has_config_files=any(
            "config" in f or f.endswith((".json", ".yml", ".yaml")) or ".env" in f
            for f in files
        ),
        has_style_files=any(f.endswith((".css", ".scss", ".less")) for f in files),
        has_api_files=any("/api/" in f or "Controller" in f or "Service" in f for f in files),
        has_component_files=any("/components/" in f or f.endswith((".tsx", ".jsx")) for f in files),
        # NOTE: bare "ci"/"cd" also match paths such as src/circle.ts.
        has_workflow_files=any(".github/workflows" in f or "ci" in f or "cd" in f for f in files),
        has_dependency_files=any(f in DEPENDENCY_FILES or f.endswith(".csproj") for f in files),
    )


def determine_commit_type(patterns: FilePatternProfile, files: Sequence[str]) -> str:
    """Pick the commit type. Rules are checked in priority order."""
    if patterns.has_workflow_files:
        return "ci"
    if patterns.has_test_files:
        return "test"
    if patterns.has_doc_files and all(f.endswith(".md") for f in files):
        return "docs"
    if patterns.has_dependency_files and len(files) == 1:
        return "chore"
    if patterns.has_style_files and all(f.endswith((".css", ".scss")) for f in files):
        return "style"

    lowered = [f.lower() for f in files]
    if any("fix" in f or "bug" in f or "patch" in f for f in lowered):
        return "fix"

    if patterns.has_component_files or patterns.has_api_files:
        return "feat"
    if patterns.has_config_files:
        return "chore"
    return "feat"


def _to_kebab_case(name: str) -> str:
    return _CAMEL_BOUNDARY_RE.sub(r"\1-\2", name).lower()


def determine_scope(files: Sequence[str]) -> Optional[str]:
    """Infer a scope for ``files`` or return ``None``.

    The first entry of :data:`SCOPE_PATTERNS` covering every path wins.
    Failing that, for one to three paths the name of the first path's
    source file is used, converted from camelCase to kebab-case.
    """
    if not files:
        return None

    for scope, substrings in SCOPE_PATTERNS.items():
        if all(any(s in f for s in substrings) for f in files):
            return scope

    match = _SOURCE_NAME_RE.search(files[0])
    if match and len(files) <= 3:
        return _to_kebab_case(match.group(1))

    return None


def _single_file_message(path: str, commit_type: str) -> str:
    file_name = path.split("/")[-1] or path
    base_name = _KNOWN_EXTENSION_RE.sub("", file_name, count=1)

    if commit_type == "docs":
        return f"update {base_name} documentation"
    if commit_type == "test":
        return f"add tests for {base_name}"
    if commit_type == "style":
        return f"update {base_name} styles"
    if commit_type == "chore":
        if file_name == "package.json":
            return "update dependencies"
        return f"update {base_name} configuration"
    if commit_type == "ci":
        return f"update {base_name} workflow"
    return f"update {base_name}"


def generate_message(patterns: FilePatternProfile, files: Sequence[str], commit_type: str) -> str:
    """Write the description part of the commit subject."""
    if len(files) == 1:
        return _single_file_message(files[0], commit_type)

    if patterns.has_component_files:
        component_files = [f for f in files if "/components/" in f]
        if component_files:
            match = _COMPONENT_DIR_RE.search(component_files[0])
            if match:
                return f"update {match.group(1)} component"
        return "update components"

    if patterns.has_api_files:
        return "update API endpoints"
    if patterns.has_doc_files:
        return "update documentation"
    if patterns.has_config_files:
        return "update configuration"

    return f"update {len(files)} files"


def classify(staged_files: Sequence[str]) -> CommitSuggestion:
    """Classify staged paths into a :class:`CommitSuggestion`.

    Parameters
    ----------
    staged_files : Sequence[str]
        Repository-relative paths using ``/`` separators. May be empty.

    Returns
    -------
    CommitSuggestion
        Always a well-formed suggestion; an empty list yields
        ``feat: update 0 files``.
    """
    files: List[str] = list(staged_files)
    patterns = analyze_file_patterns(files)
    commit_type = determine_commit_type(patterns, files)
    scope = determine_scope(files)
    message = generate_message(patterns, files, commit_type)
    logger.debug("Classified %d file(s) as %s (scope=%s)", len(files), commit_type, scope)
    return CommitSuggestion(type=commit_type, scope=scope, message=message)
