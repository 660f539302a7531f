"""
Git client implementation for plm_helper.

This module wraps the Git operations the assistant needs: reading the
repository status and staged files, staging, committing, pushing and
pulling, plus branch, stash, tag and merge helpers. All subprocess calls
go through :meth:`GitClient._run` so that unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


_AHEAD_RE = re.compile(r"ahead (\d+)")
_BEHIND_RE = re.compile(r"behind (\d+)")

# Field separator for ``git log --format`` output.
_LOG_SEP = "\x1f"

# Porcelain XY codes of paths with unresolved merge conflicts.
UNMERGED_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})

RESET_MODES = ("soft", "mixed", "hard")


@dataclass
class RepoStatus:
    """Summary of the working tree and index."""

    branch: str = "unknown"
    staged: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    untracked: List[str] = field(default_factory=list)
    conflicted: List[str] = field(default_factory=list)
    ahead: int = 0
    behind: int = 0

    @property
    def is_clean(self) -> bool:
        return not (self.staged or self.modified or self.untracked or self.conflicted)


@dataclass
class CommitInfo:
    """A single entry of the commit log."""

    hash: str
    date: str
    message: str
    author: str


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


def _parse_branch_header(header: str) -> str:
    # e.g. "main...origin/main [ahead 1]", "No commits yet on main", "HEAD (no branch)"
    for prefix in ("No commits yet on ", "Initial commit on "):
        if header.startswith(prefix):
            header = header[len(prefix):]
    return header.split("...", 1)[0].split(" ", 1)[0] or "unknown"


def parse_status(output: str) -> RepoStatus:
    """Parse ``git status --porcelain=v1 -z --branch`` output.

    Records are NUL separated and paths are never quoted. The index
    column (X) marks staged changes, the work-tree column (Y) marks
    unstaged modifications, ``??`` marks untracked files and the
    unmerged codes in :data:`UNMERGED_CODES` mark conflicts. A rename or
    copy record is followed by an extra record holding the source path;
    the new path is reported.
    """
    status = RepoStatus()
    records = iter(output.split("\0"))
    for record in records:
        if record.startswith("## "):
            header = record[3:].strip()
            status.branch = _parse_branch_header(header)
            ahead = _AHEAD_RE.search(header)
            behind = _BEHIND_RE.search(header)
            status.ahead = int(ahead.group(1)) if ahead else 0
            status.behind = int(behind.group(1)) if behind else 0
            continue

        if len(record) < 4:
            continue

        code = record[:2]
        index_status, worktree_status = code
        path = record[3:]
        if index_status in "RC":
            next(records, None)

        if code == "??":
            status.untracked.append(path)
            continue
        if code in UNMERGED_CODES:
            status.conflicted.append(path)
            continue
        if index_status not in (" ", "?", "!"):
            status.staged.append(path)
        if worktree_status not in (" ", "?", "!"):
            status.modified.append(path)
    return status


class GitClient:
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    @property
    def project_name(self) -> str:
        return self.repo_root.name

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If git cannot be started, or if the command exits with a
            non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            logger.error("Failed to execute git: %s", exc)
            raise GitError(f"Failed to execute git: {exc}") from exc

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Status and change detection
    # ------------------------------------------------------------------
    def get_status(self) -> RepoStatus:
        result = self._run(["status", "--porcelain=v1", "-z", "--branch"])
        return parse_status(result.stdout)

    def get_staged_files(self) -> List[str]:
        """Return the staged paths in the order git reports them."""
        return self.get_status().staged

    def get_modified_files(self) -> List[str]:
        """Return unstaged modifications followed by untracked files."""
        status = self.get_status()
        return status.modified + status.untracked

    def get_diff(self, staged: bool = False) -> str:
        args = ["diff"]
        if staged:
            args.append("--cached")
        return self._run(args).stdout

    def get_staged_diff(self) -> str:
        return self.get_diff(staged=True)

    def get_recent_commits(self, count: int = 10) -> List[CommitInfo]:
        fmt = _LOG_SEP.join(["%H", "%ad", "%s", "%an"])
        result = self._run(
            ["log", f"--max-count={count}", "--date=short", f"--format={fmt}"],
            check=False,
        )
        if result.returncode != 0:
            # An empty repository has no log yet.
            logger.debug("git log failed: %s", result.stderr.strip())
            return []
        commits = []
        for line in result.stdout.splitlines():
            parts = line.split(_LOG_SEP)
            if len(parts) != 4:
                continue
            commit_hash, date, message, author = parts
            commits.append(CommitInfo(hash=commit_hash[:7], date=date, message=message, author=author))
        return commits

    def get_remote_url(self, remote: str = "origin") -> str:
        result = self._run(["remote", "get-url", remote], check=False)
        url = result.stdout.strip()
        if result.returncode != 0 or not url:
            return "unknown"
        return url

    # ------------------------------------------------------------------
    # Staging, committing, pushing
    # ------------------------------------------------------------------
    def stage_files(self, files: List[str]) -> None:
        """Stage the given paths. ``git add -A`` also records deletions."""
        if not files:
            return
        self._run(["add", "-A", "--"] + list(files))

    def stage_all(self) -> None:
        self._run(["add", "-A"])

    def commit(self, message: str) -> str:
        """Create a commit with the given message and return its short hash."""
        self._run(["commit", "-m", message])
        return self._run(["rev-parse", "--short", "HEAD"]).stdout.strip()

    def push(self, remote: str = "origin", branch: Optional[str] = None, set_upstream: bool = False) -> None:
        """Push ``branch`` (default: the current branch) to ``remote``."""
        target = branch or self.get_current_branch()
        args = ["push"]
        if set_upstream:
            args.append("--set-upstream")
        self._run(args + [remote, target])

    def pull(self, remote: str = "origin", branch: Optional[str] = None) -> None:
        target = branch or self.get_current_branch()
        self._run(["pull", remote, target])

    # ------------------------------------------------------------------
    # Branch operations
    # ------------------------------------------------------------------
    def get_current_branch(self) -> str:
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        return result.stdout.strip()

    def list_branches(self) -> List[str]:
        result = self._run(["branch", "--format=%(refname:short)"])
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def branch_exists(self, branch_name: str) -> bool:
        result = self._run(["branch", "--list", branch_name], check=False)
        return bool(result.stdout.strip())

    def create_branch(self, branch_name: str, checkout: bool = True) -> None:
        if checkout:
            self._run(["checkout", "-b", branch_name])
        else:
            self._run(["branch", branch_name])

    def delete_branch(self, branch_name: str, force: bool = False) -> None:
        self._run(["branch", "-D" if force else "-d", branch_name])

    def checkout(self, branch_name: str) -> None:
        self._run(["checkout", branch_name])

    # ------------------------------------------------------------------
    # Merge, rebase and conflict resolution
    # ------------------------------------------------------------------
    def merge(self, branch_name: str, no_ff: bool = False) -> None:
        args = ["merge"]
        if no_ff:
            args.append("--no-ff")
        self._run(args + [branch_name])

    def merge_abort(self) -> None:
        self._run(["merge", "--abort"])

    def rebase(self, branch_name: str) -> None:
        self._run(["rebase", branch_name])

    def rebase_abort(self) -> None:
        self._run(["rebase", "--abort"])

    def rebase_continue(self) -> None:
        # No editor; the original commit message is kept.
        self._run(["-c", "core.editor=true", "rebase", "--continue"])

    def get_conflicted_files(self) -> List[str]:
        return self.get_status().conflicted

    def has_conflicts(self) -> bool:
        return bool(self.get_conflicted_files())

    def accept_ours(self, path: str) -> None:
        """Resolve ``path`` with the current branch's version and stage it."""
        self._run(["checkout", "--ours", "--", path])
        self._run(["add", "--", path])

    def accept_theirs(self, path: str) -> None:
        """Resolve ``path`` with the incoming version and stage it."""
        self._run(["checkout", "--theirs", "--", path])
        self._run(["add", "--", path])

    def mark_resolved(self, paths: List[str]) -> None:
        """Stage hand-edited ``paths`` to mark their conflicts resolved."""
        if not paths:
            return
        self._run(["add", "--"] + list(paths))

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------
    def revert(self, commit: str = "HEAD") -> str:
        """Create a commit undoing ``commit`` and return its short hash."""
        self._run(["revert", "--no-edit", commit])
        return self._run(["rev-parse", "--short", "HEAD"]).stdout.strip()

    def reset(self, mode: str = "mixed", ref: str = "HEAD~1") -> None:
        """Move HEAD to ``ref``. ``mode`` is one of soft, mixed or hard."""
        if mode not in RESET_MODES:
            raise ValueError(f"Unknown reset mode: {mode}")
        self._run(["reset", f"--{mode}", ref])

    # ------------------------------------------------------------------
    # Stash
    # ------------------------------------------------------------------
    def stash_list(self) -> List[str]:
        result = self._run(["stash", "list"])
        return [line for line in result.stdout.splitlines() if line.strip()]

    def stash_push(self, message: Optional[str] = None) -> None:
        args = ["stash", "push"]
        if message:
            args += ["-m", message]
        self._run(args)

    def stash_pop(self) -> None:
        self._run(["stash", "pop"])

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------
    def list_tags(self) -> List[str]:
        result = self._run(["tag", "--list"])
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def create_tag(self, tag_name: str, message: Optional[str] = None) -> None:
        if message:
            self._run(["tag", "-a", tag_name, "-m", message])
        else:
            self._run(["tag", tag_name])

    def delete_tag(self, tag_name: str) -> None:
        self._run(["tag", "-d", tag_name])
