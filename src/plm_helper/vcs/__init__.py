"""
Version control integration.

This package contains the :class:`GitClient` used to read the status and
staged files of a Git repository and to stage, commit, push, and manage
branches, stashes, tags, merges and rebases.
"""

from .git_client import CommitInfo, GitClient, GitError, RepoStatus  # noqa: F401
