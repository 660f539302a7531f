"""
Command line interface for the plm_helper tool.

This module defines the ``main`` click group used as the entry point of
the ``plmhelper`` command. Its sub-commands cover the commit workflow
(heuristic or AI drafted messages), repository status, sensitive data
scanning, configuration, merge and rebase with conflict resolution,
and thin wrappers around branch, stash and tag management. Commands
beyond the standard set are gated by the configured profile, and
configured aliases resolve to top level commands.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import click

from plm_helper import __version__
from plm_helper.config.loader import (
    EXPERT_FEATURES,
    ConfigError,
    ConfigStore,
    PlmConfig,
    get_enabled_features,
)
from plm_helper.llm.ai_suggestion import generate_ai_suggestion
from plm_helper.llm.factory import PROVIDER_INFO, ProviderType, create_provider, mask_api_key
from plm_helper.security.scanner import ScanResult, scan_directory, scan_paths, summarize
from plm_helper.suggest.change_classifier import classify
from plm_helper.suggest.conventional import (
    COMMIT_TYPES,
    format_conventional_commit,
    list_commit_types,
    validate_conventional_commit,
)
from plm_helper.vcs.git_client import RESET_MODES, GitClient, GitError

# Create a module-level logger. Attach a null handler and disable
# propagation to avoid logging errors when the root logger's stream is
# closed (such as during unit tests). When logging is configured by
# the CLI, root handlers will be added and messages will propagate.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_NO_REPO = 3
EXIT_NO_CHANGES = 4
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_LLM_FAILURE = 7
EXIT_DECLINED = 8
EXIT_SENSITIVE_DATA = 9


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Simple progress indicator for user feedback."""

    def __init__(self, message: str, show_spinner: bool = True):
        self.message = message
        self.show_spinner = show_spinner
        self.spinner_chars = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        if self.show_spinner:
            click.echo(f"{self.spinner_chars[0]} {self.message}...", nl=False)
        else:
            click.echo(f"→ {self.message}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.time() - self.start_time
        if exc_type is not None:
            click.echo(f"\r✗ {self.message}")
        elif self.show_spinner:
            click.echo(f"\r✓ {self.message} (took {elapsed:.1f}s)")
        else:
            click.echo(f"  ✓ Done ({elapsed:.1f}s)")
        return False


def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_warning(message: str, indent: int = 0):
    """Print a warning message."""
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}")


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def print_summary_box(title: str, items: List[str]):
    """Print a formatted summary box."""
    max_width = max(len(title), max(len(item) for item in items) if items else 0)
    box_width = min(max_width + 4, 72)

    click.echo(f"\n┌{'─' * box_width}┐")
    click.echo(f"│ {title[:box_width - 2].ljust(box_width - 2)}│")
    click.echo(f"├{'─' * box_width}┤")
    for item in items:
        click.echo(f"│ {item[:box_width - 2].ljust(box_width - 2)}│")
    click.echo(f"└{'─' * box_width}┘")


def print_file_list(title: str, files: List[str], limit: int = 20):
    click.echo(f"\n📄 {title} ({len(files)}):")
    for path in files[:limit]:
        click.echo(f"   • {path}")
    if len(files) > limit:
        click.echo(f"   ... and {len(files) - limit} more")


def print_scan_results(results: List[ScanResult]):
    """Print findings grouped by severity, most severe first."""
    high = [r for r in results if r.severity == "high"]
    medium = [r for r in results if r.severity == "medium"]
    low = [r for r in results if r.severity == "low"]

    if high:
        click.echo(click.style(f"\n🚨 High risk ({len(high)}):", fg="red", bold=True))
        for result in high[:10]:
            click.echo(f"  • {result.file}:{result.line} - {result.pattern}")
            click.echo(f"    {result.match}")
        if len(high) > 10:
            click.echo(f"    ... and {len(high) - 10} more")
    if medium:
        click.echo(click.style(f"\n⚠ Medium risk ({len(medium)}):", fg="yellow", bold=True))
        for result in medium[:5]:
            click.echo(f"  • {result.file}:{result.line} - {result.pattern}")
        if len(medium) > 5:
            click.echo(f"    ... and {len(medium) - 5} more")
    if low:
        click.echo(click.style(f"\nℹ Low risk ({len(low)}):", fg="blue", bold=True))
        click.echo(f"  {len(low)} environment variable like assignment(s) found")


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

@contextmanager
def guarded() -> Iterator[None]:
    """Map library exceptions raised inside a command to exit codes."""
    try:
        yield
    except (click.exceptions.Exit, click.Abort, click.ClickException):
        raise
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
    except GitError as exc:
        print_error(f"Git error: {exc}")
        raise click.exceptions.Exit(EXIT_VCS_FAILURE)
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)


def open_repository() -> GitClient:
    """Return a client for the repository containing the working directory."""
    repo_root = GitClient.find_repo_root(Path.cwd())
    if not repo_root:
        print_error("No Git repository found in current directory or parent directories.")
        raise click.exceptions.Exit(EXIT_NO_REPO)
    logger.debug("Repository root: %s", repo_root)
    return GitClient(repo_root)


def get_config(ctx: click.Context) -> PlmConfig:
    store: ConfigStore = ctx.obj["config_store"]
    try:
        return store.get()
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)


def require_feature(ctx: click.Context, feature: str) -> None:
    """Exit unless ``feature`` is enabled by the configured profile."""
    config = get_config(ctx)
    if feature not in get_enabled_features(config):
        print_error(f"'{feature}' is not enabled for the {config.profile} profile.")
        print_info("Enable it with: plmhelper config set profile expert")
        raise click.exceptions.Exit(EXIT_INVALID_USAGE)


def print_conflicts(client: GitClient) -> None:
    conflicts = client.get_conflicted_files()
    if conflicts:
        print_file_list("Conflicted", conflicts)
        print_info("Resolve with: plmhelper resolve PATH [--ours | --theirs | --mark]")


def suggest_message(client: GitClient, config: PlmConfig, use_ai: bool, staged: List[str]) -> str:
    """Return a commit message for ``staged``.

    The configured AI provider is tried first when ``use_ai`` is set; any
    failure falls back to the heuristic classifier.
    """
    if use_ai:
        provider = create_provider(config)
        if provider is None:
            print_warning("AI provider is not configured; using local analysis")
        else:
            with ProgressIndicator(f"Asking {provider.name} for a commit message"):
                result = generate_ai_suggestion(client, provider)
            if result.suggestion:
                print_success(f"{provider.name} suggestion ready")
                return result.suggestion
            print_warning(f"{result.error or 'AI suggestion unavailable'}; using local analysis")

    suggestion = classify(staged)
    logger.debug("Local suggestion: %s", suggestion)
    return suggestion.full_message


def prompt_stage_files(candidates: List[str]) -> List[str]:
    """Ask which of ``candidates`` to stage. Returns the selected paths."""
    click.echo("\n📄 Unstaged files:")
    for idx, path in enumerate(candidates, start=1):
        click.echo(f"   {idx:>3}. {path}")
    answer = click.prompt(
        "   Files to stage (numbers separated by spaces, 'a' for all, empty to cancel)",
        default="",
        show_default=False,
    ).strip().lower()
    if not answer:
        return []
    if answer in {"a", "all"}:
        return list(candidates)

    selected = []
    for token in answer.replace(",", " ").split():
        if token.isdigit() and 1 <= int(token) <= len(candidates):
            path = candidates[int(token) - 1]
            if path not in selected:
                selected.append(path)
        else:
            print_warning(f"Ignoring invalid selection: {token}")
    return selected


def prompt_commit_message(suggestion: str) -> Optional[str]:
    """Let the user accept, edit or replace ``suggestion``.

    Returns
    -------
    Optional[str]
        The final commit message, or ``None`` if the user cancelled.
    """
    print_summary_box("Suggested commit message", suggestion.splitlines() or [""])
    click.echo("")
    while True:
        choice = click.prompt(
            "   Choose action (A = Accept | E = Edit | R = Replace | C = Cancel)",
            type=click.Choice(["A", "E", "R", "C", "a", "e", "r", "c"], case_sensitive=False),
            default="A",
            show_choices=False,
            show_default=True,
        ).strip().lower()

        if choice == "a":
            return suggestion
        if choice == "c":
            return None
        if choice == "e":
            edited = click.edit(suggestion)
            if edited is None or not edited.strip():
                print_warning("Editor closed without changes, using suggestion")
                return suggestion
            return edited.strip()
        if choice == "r":
            replacement = click.prompt("   Commit message", default="", show_default=False).strip()
            if replacement:
                return replacement
            print_warning("Empty message, please choose again")


def prompt_manual_message() -> str:
    """Build a Conventional Commit from a type, optional scope and description."""
    click.echo("\n📝 Build your commit message:\n")
    for info in list_commit_types():
        click.echo(f"   {info.value.ljust(10)} {info.description}")
    commit_type = click.prompt(
        "\n   Type",
        type=click.Choice(list(COMMIT_TYPES), case_sensitive=False),
        show_choices=False,
    ).lower()
    scope = click.prompt("   Scope (optional)", default="", show_default=False).strip()
    description = ""
    while not description:
        description = click.prompt("   Description").strip()
    return format_conventional_commit(commit_type, scope or None, description)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class AliasedGroup(click.Group):
    """Command group that also resolves the aliases defined in the configuration."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        command = super().get_command(ctx, cmd_name)
        if command is not None:
            return command
        # Resolution happens before the group callback runs.
        store: ConfigStore = ctx.ensure_object(dict).setdefault("config_store", ConfigStore())
        try:
            target = store.get().aliases.get(cmd_name)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
        if target is None:
            return None
        logger.debug("Alias %s -> %s", cmd_name, target)
        return super().get_command(ctx, target)


@click.group(cls=AliasedGroup, invoke_without_command=True)
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="plmhelper")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """🚀 Git assistant with conventional commit suggestions."""
    # Use force=True so handlers are reconfigured on every invocation
    # (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    ctx.ensure_object(dict)
    ctx.obj.setdefault("config_store", ConfigStore())
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
def status() -> None:
    """Show branch, tracking and file status."""
    client = open_repository()
    with guarded():
        repo_status = client.get_status()

    click.echo(f"\n🔀 Branch: {click.style(repo_status.branch, fg='cyan', bold=True)}")
    if repo_status.ahead or repo_status.behind:
        print_info(f"Ahead {repo_status.ahead}, behind {repo_status.behind}")
    if repo_status.is_clean:
        print_success("Working tree clean")
        return
    if repo_status.conflicted:
        print_file_list("Conflicted", repo_status.conflicted)
        print_warning("Unresolved conflicts; see: plmhelper resolve")
    if repo_status.staged:
        print_file_list("Staged", repo_status.staged)
    if repo_status.modified:
        print_file_list("Modified", repo_status.modified)
    if repo_status.untracked:
        print_file_list("Untracked", repo_status.untracked)


@main.command()
@click.option("--ai", "use_ai", is_flag=True, help="Try the configured AI provider first.")
@click.pass_context
def suggest(ctx: click.Context, use_ai: bool) -> None:
    """Print a commit message suggestion for the staged files."""
    client = open_repository()
    with guarded():
        staged = client.get_staged_files()
        if not staged:
            print_warning("No staged files.")
            raise click.exceptions.Exit(EXIT_NO_CHANGES)
        if use_ai:
            message = suggest_message(client, get_config(ctx), True, staged)
            click.echo(message)
            return

    suggestion = classify(staged)
    print_summary_box(
        suggestion.full_message,
        [
            f"type:    {suggestion.type}",
            f"scope:   {suggestion.scope or '-'}",
            f"message: {suggestion.message}",
        ],
    )


@main.command()
@click.option("--all", "stage_all", is_flag=True, help="Stage every change when nothing is staged.")
@click.option("--manual", is_flag=True, help="Build the message from type, scope and description.")
@click.option("--ai/--no-ai", "use_ai", default=None, help="Override the configured AI setting.")
@click.option("--scan", is_flag=True, help="Scan staged files for sensitive data first.")
@click.option("--push/--no-push", "push", default=None, help="Push after committing.")
@click.option("--yes", is_flag=True, help="Accept the suggestion without prompting.")
@click.pass_context
def commit(
    ctx: click.Context,
    stage_all: bool,
    manual: bool,
    use_ai: Optional[bool],
    scan: bool,
    push: Optional[bool],
    yes: bool,
) -> None:
    """Stage, suggest a message, and commit."""
    config = get_config(ctx)
    client = open_repository()

    with guarded():
        repo_status = client.get_status()
        staged = repo_status.staged

        if not staged:
            unstaged = repo_status.modified + repo_status.untracked
            if not unstaged:
                print_warning("Nothing to commit.")
                raise click.exceptions.Exit(EXIT_NO_CHANGES)

            print_warning("No staged files.")
            to_stage = unstaged if (stage_all or yes) else prompt_stage_files(unstaged)
            if not to_stage:
                print_warning("No files selected. Aborting.")
                raise click.exceptions.Exit(EXIT_DECLINED)

            with ProgressIndicator(f"Staging {len(to_stage)} file(s)"):
                client.stage_files(to_stage)
            staged = client.get_staged_files()

        print_file_list("Staged files", staged)

        if scan:
            findings = scan_paths(client.repo_root, staged)
            counts = summarize(findings)
            if findings:
                print_warning(f"{len(findings)} potential sensitive value(s) found")
                print_scan_results(findings)
                if yes and counts["high"]:
                    print_error("Refusing to commit high risk findings in --yes mode.")
                    raise click.exceptions.Exit(EXIT_SENSITIVE_DATA)
                if not yes and not click.confirm("   Continue with the commit anyway?", default=False):
                    print_info("Commit cancelled. Please remove the sensitive data.")
                    raise click.exceptions.Exit(EXIT_DECLINED)
            else:
                print_success("No sensitive data found in staged files")

        if manual:
            message = prompt_manual_message()
        else:
            ai_wanted = config.ai_enabled if use_ai is None else use_ai
            suggestion = suggest_message(client, config, ai_wanted, staged)
            if yes:
                print_summary_box("Commit message", suggestion.splitlines() or [""])
                message = suggestion
            else:
                message = prompt_commit_message(suggestion)
            if message is None:
                print_warning("Commit cancelled.")
                raise click.exceptions.Exit(EXIT_DECLINED)

        if config.conventional_commit:
            subject = message.splitlines()[0] if message else ""
            result = validate_conventional_commit(subject)
            if not result.valid:
                print_error(f"Not a conventional commit: {result.error}")
                raise click.exceptions.Exit(EXIT_INVALID_USAGE)

        with ProgressIndicator("Committing"):
            commit_hash = client.commit(message)
        print_success(f"Committed {commit_hash}: {message.splitlines()[0]}")

        if push is None:
            push = False if yes else click.confirm("   Push to remote?", default=False)
        if push:
            with ProgressIndicator("Pushing"):
                client.push()
            print_success("Pushed to remote")


@main.command("types")
def types_() -> None:
    """List the conventional commit types."""
    for info in list_commit_types():
        click.echo(f"{click.style(info.value.ljust(10), fg='green')} {info.description}")


@main.command()
@click.option("--staged", is_flag=True, help="Only scan staged files.")
@click.pass_context
def scan(ctx: click.Context, staged: bool) -> None:
    """Scan files for API keys, passwords and other secrets."""
    require_feature(ctx, "security")
    client = open_repository()
    with guarded():
        if staged:
            files = client.get_staged_files()
            if not files:
                print_warning("No staged files.")
                return
            with ProgressIndicator(f"Scanning {len(files)} staged file(s)"):
                results = scan_paths(client.repo_root, files)
        else:
            with ProgressIndicator("Scanning working tree"):
                results = scan_directory(client.repo_root)

    if not results:
        print_success("No sensitive data found!")
        return

    print_warning(f"{len(results)} potential sensitive value(s) found!")
    print_scan_results(results)
    if summarize(results)["high"]:
        raise click.exceptions.Exit(EXIT_SENSITIVE_DATA)


@main.command()
@click.option("-n", "--count", default=10, show_default=True, help="Number of commits to show.")
def log(count: int) -> None:
    """Show recent commits."""
    client = open_repository()
    with guarded():
        commits = client.get_recent_commits(count)
    if not commits:
        print_info("No commits yet.")
        return
    for entry in commits:
        click.echo(f"{click.style(entry.hash, fg='yellow')} {entry.date} {entry.message} ({entry.author})")


@main.command("push")
@click.option("--remote", default="origin", show_default=True)
def push_(remote: str) -> None:
    """Push the current branch."""
    client = open_repository()
    with guarded():
        with ProgressIndicator(f"Pushing to {remote}"):
            client.push(remote)
    print_success("Pushed")


@main.command()
@click.option("--remote", default="origin", show_default=True)
def pull(remote: str) -> None:
    """Pull the current branch."""
    client = open_repository()
    with guarded():
        with ProgressIndicator(f"Pulling from {remote}"):
            client.pull(remote)
    print_success("Pulled")


# ---------------------------------------------------------------------------
# Merge, rebase, conflicts and undo
# ---------------------------------------------------------------------------

def _confirm_or_decline(question: str, yes: bool, default: bool = False) -> None:
    if not yes and not click.confirm(f"   {question}", default=default):
        print_info("Cancelled.")
        raise click.exceptions.Exit(EXIT_DECLINED)


@main.command()
@click.argument("branch_name", required=False)
@click.option("--no-ff", is_flag=True, help="Always create a merge commit.")
@click.option("--abort", is_flag=True, help="Abort the merge in progress.")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def merge(ctx: click.Context, branch_name: Optional[str], no_ff: bool, abort: bool, yes: bool) -> None:
    """Merge BRANCH_NAME into the current branch, or abort a merge."""
    require_feature(ctx, "merge")
    client = open_repository()
    with guarded():
        if abort:
            _confirm_or_decline("Abort the merge and discard its changes?", yes)
            client.merge_abort()
            print_success("Merge aborted")
            return
        if not branch_name:
            raise click.UsageError("BRANCH_NAME is required unless --abort is given")
        try:
            with ProgressIndicator(f"Merging {branch_name}"):
                client.merge(branch_name, no_ff=no_ff)
        except GitError:
            print_conflicts(client)
            raise
    print_success(f"Merged {branch_name}")


@main.command()
@click.argument("branch_name", required=False)
@click.option("--abort", is_flag=True, help="Abort the rebase in progress.")
@click.option("--continue", "continue_", is_flag=True, help="Continue after resolving conflicts.")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def rebase(ctx: click.Context, branch_name: Optional[str], abort: bool, continue_: bool, yes: bool) -> None:
    """Rebase the current branch onto BRANCH_NAME."""
    require_feature(ctx, "merge")
    if abort and continue_:
        raise click.UsageError("--abort and --continue are mutually exclusive")
    client = open_repository()
    with guarded():
        if abort:
            _confirm_or_decline("Abort the rebase and discard its changes?", yes)
            client.rebase_abort()
            print_success("Rebase aborted")
            return
        if continue_:
            if client.has_conflicts():
                print_error("Resolve the remaining conflicts first.")
                print_conflicts(client)
                raise click.exceptions.Exit(EXIT_VCS_FAILURE)
            client.rebase_continue()
            print_success("Rebase continued")
            return
        if not branch_name:
            raise click.UsageError("BRANCH_NAME is required unless --abort or --continue is given")
        _confirm_or_decline("Rebasing rewrites history. Continue?", yes)
        try:
            with ProgressIndicator(f"Rebasing onto {branch_name}"):
                client.rebase(branch_name)
        except GitError:
            print_conflicts(client)
            raise
    print_success(f"Rebased onto {branch_name}")


@main.command()
@click.argument("paths", nargs=-1)
@click.option("--ours", "strategy", flag_value="ours", help="Keep the current branch's version.")
@click.option("--theirs", "strategy", flag_value="theirs", help="Take the incoming version.")
@click.option("--mark", "strategy", flag_value="mark", default=True, help="Mark hand-edited files resolved.")
@click.pass_context
def resolve(ctx: click.Context, paths: Tuple[str, ...], strategy: str) -> None:
    """List conflicted files, or resolve PATHS."""
    require_feature(ctx, "merge")
    client = open_repository()
    with guarded():
        conflicts = client.get_conflicted_files()
        if not paths:
            if not conflicts:
                print_success("No unresolved conflicts!")
            else:
                print_conflicts(client)
            return

        unknown = [p for p in paths if p not in conflicts]
        if unknown:
            print_error(f"Not conflicted: {', '.join(unknown)}")
            raise click.exceptions.Exit(EXIT_INVALID_USAGE)

        if strategy == "ours":
            for path in paths:
                client.accept_ours(path)
        elif strategy == "theirs":
            for path in paths:
                client.accept_theirs(path)
        else:
            client.mark_resolved(list(paths))
        print_success(f"Resolved {len(paths)} file(s)")

        remaining = client.get_conflicted_files()
    if remaining:
        print_info(f"{len(remaining)} conflict(s) remaining")
    else:
        print_success("All conflicts resolved; you can commit now.")


@main.command()
@click.argument("commit_ref", default="HEAD", required=False)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def revert(ctx: click.Context, commit_ref: str, yes: bool) -> None:
    """Undo COMMIT_REF (default: the last commit) with a new commit."""
    require_feature(ctx, "merge")
    client = open_repository()
    with guarded():
        _confirm_or_decline(f"Revert {commit_ref} with a new commit?", yes, default=True)
        new_hash = client.revert(commit_ref)
    print_success(f"Reverted {commit_ref} in {new_hash}")


@main.command()
@click.option("--mode", type=click.Choice(RESET_MODES), default="mixed", show_default=True)
@click.option("--ref", default="HEAD~1", show_default=True, help="Commit to move HEAD to.")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def reset(ctx: click.Context, mode: str, ref: str, yes: bool) -> None:
    """Move HEAD back to REF, by default undoing the last commit."""
    require_feature(ctx, "merge")
    client = open_repository()
    with guarded():
        if mode == "hard":
            _confirm_or_decline("A hard reset discards all uncommitted changes. Continue?", yes)
        client.reset(mode, ref)
    print_success(f"{mode} reset to {ref}")


# ---------------------------------------------------------------------------
# Branch, stash and tag management
# ---------------------------------------------------------------------------

@main.group()
def branch() -> None:
    """Manage branches."""


@branch.command("list")
def branch_list() -> None:
    client = open_repository()
    with guarded():
        current = client.get_current_branch()
        names = client.list_branches()
    for name in names:
        marker = "*" if name == current else " "
        click.echo(f"{marker} {name}")


@branch.command("create")
@click.argument("name")
@click.option("--no-checkout", is_flag=True, help="Create without switching to it.")
def branch_create(name: str, no_checkout: bool) -> None:
    client = open_repository()
    with guarded():
        if client.branch_exists(name):
            print_error(f"Branch '{name}' already exists")
            raise click.exceptions.Exit(EXIT_INVALID_USAGE)
        client.create_branch(name, checkout=not no_checkout)
    print_success(f"Created branch: {name}")


@branch.command("delete")
@click.argument("name")
@click.option("--force", is_flag=True, help="Delete even if not merged.")
def branch_delete(name: str, force: bool) -> None:
    client = open_repository()
    with guarded():
        client.delete_branch(name, force=force)
    print_success(f"Deleted branch: {name}")


@branch.command("checkout")
@click.argument("name")
def branch_checkout(name: str) -> None:
    client = open_repository()
    with guarded():
        client.checkout(name)
    print_success(f"Switched to branch: {name}")


@main.group()
def stash() -> None:
    """Manage stashes."""


@stash.command("list")
def stash_list() -> None:
    client = open_repository()
    with guarded():
        entries = client.stash_list()
    if not entries:
        print_info("No stashes.")
    for entry in entries:
        click.echo(entry)


@stash.command("push")
@click.option("-m", "--message", default=None, help="Stash description.")
def stash_push(message: Optional[str]) -> None:
    client = open_repository()
    with guarded():
        client.stash_push(message)
    print_success("Changes stashed")


@stash.command("pop")
def stash_pop() -> None:
    client = open_repository()
    with guarded():
        client.stash_pop()
    print_success("Stash applied and dropped")


@main.group()
@click.pass_context
def tag(ctx: click.Context) -> None:
    """Manage tags."""
    require_feature(ctx, "tag")


@tag.command("list")
def tag_list() -> None:
    client = open_repository()
    with guarded():
        names = client.list_tags()
    if not names:
        print_info("No tags.")
    for name in names:
        click.echo(name)


@tag.command("create")
@click.argument("name")
@click.option("-m", "--message", default=None, help="Create an annotated tag.")
def tag_create(name: str, message: Optional[str]) -> None:
    client = open_repository()
    with guarded():
        client.create_tag(name, message)
    print_success(f"Created tag: {name}")


@tag.command("delete")
@click.argument("name")
def tag_delete(name: str) -> None:
    client = open_repository()
    with guarded():
        client.delete_tag(name)
    print_success(f"Deleted tag: {name}")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

_BOOL_KEYS = {"conventional_commit", "ai_enabled"}
# Comma separated feature names.
_FEATURE_LIST_KEYS = {"custom_features", "favorites"}
_SETTABLE_KEYS = {
    "profile", "theme", "language", "conventional_commit",
    "ai_enabled", "ai_provider", "ai_model", "ai_api_key",
    "custom_features", "favorites",
}


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise click.BadParameter(f"expected a boolean, got '{value}'")


def _parse_features(value: str) -> List[str]:
    features = list(dict.fromkeys(f.strip() for f in value.split(",") if f.strip()))
    unknown = [f for f in features if f not in EXPERT_FEATURES]
    if unknown:
        raise click.BadParameter(
            f"unknown feature(s): {', '.join(unknown)}. Known features: {', '.join(EXPERT_FEATURES)}"
        )
    return features


@main.group("config")
def config_group() -> None:
    """Show or change settings."""


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    store: ConfigStore = ctx.obj["config_store"]
    config = get_config(ctx)
    provider = PROVIDER_INFO[ProviderType(config.ai_provider)]
    items: Dict[str, str] = {
        "file": str(store.path),
        "profile": config.profile,
        "features": ", ".join(get_enabled_features(config)),
        "theme": config.theme,
        "language": config.language,
        "conventional_commit": str(config.conventional_commit),
        "ai_enabled": str(config.ai_enabled),
        "ai_provider": f"{config.ai_provider} ({provider.name})",
        "ai_model": config.ai_model or provider.default_model or "-",
        "ai_api_key": mask_api_key(config.ai_api_key),
        "favorites": ", ".join(config.favorites) or "-",
        "aliases": ", ".join(f"{name} -> {target}" for name, target in sorted(config.aliases.items())) or "-",
    }
    for key, value in items.items():
        click.echo(f"{key.ljust(20)} {value}")


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--local", is_flag=True, help="Write the project-local file instead of the home file.")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str, local: bool) -> None:
    name = key.replace("-", "_")
    if name not in _SETTABLE_KEYS:
        print_error(f"Unknown setting '{key}'. Known settings: {', '.join(sorted(_SETTABLE_KEYS))}")
        raise click.exceptions.Exit(EXIT_INVALID_USAGE)
    if name in _BOOL_KEYS:
        parsed = _parse_bool(value)
    elif name in _FEATURE_LIST_KEYS:
        parsed = _parse_features(value)
    else:
        parsed = value
    store: ConfigStore = ctx.obj["config_store"]
    with guarded():
        store.update(global_=not local, **{name: parsed})
    print_success(f"{name} = {parsed}")


@config_group.command("alias")
@click.argument("name")
@click.argument("command_name", metavar="COMMAND", required=False)
@click.option("--remove", is_flag=True, help="Delete the alias instead of defining it.")
@click.option("--local", is_flag=True, help="Write the project-local file instead of the home file.")
@click.pass_context
def config_alias(ctx: click.Context, name: str, command_name: Optional[str], remove: bool, local: bool) -> None:
    """Define or remove a shortcut NAME for a top level COMMAND."""
    store: ConfigStore = ctx.obj["config_store"]
    aliases = dict(get_config(ctx).aliases)
    if remove:
        if name not in aliases:
            print_error(f"No alias named '{name}'")
            raise click.exceptions.Exit(EXIT_INVALID_USAGE)
        del aliases[name]
        with guarded():
            store.update(global_=not local, aliases=aliases)
        print_success(f"Removed alias {name}")
        return

    if command_name is None:
        raise click.UsageError("COMMAND is required unless --remove is given.")
    if name in main.commands:
        print_error(f"'{name}' is already a command")
        raise click.exceptions.Exit(EXIT_INVALID_USAGE)
    if command_name not in main.commands:
        print_error(f"Unknown command '{command_name}'")
        raise click.exceptions.Exit(EXIT_INVALID_USAGE)
    aliases[name] = command_name
    with guarded():
        store.update(global_=not local, aliases=aliases)
    print_success(f"{name} -> {command_name}")


@config_group.command("ai")
@click.argument("provider", type=click.Choice([p.value for p in ProviderType]))
@click.option("--key", "api_key", default=None, help="API key for the provider.")
@click.option("--model", default=None, help="Model name; defaults to the provider default.")
@click.pass_context
def config_ai(ctx: click.Context, provider: str, api_key: Optional[str], model: Optional[str]) -> None:
    """Select the AI provider used for commit suggestions."""
    changes = {"ai_provider": provider, "ai_enabled": provider != ProviderType.NONE.value}
    if api_key is not None:
        changes["ai_api_key"] = api_key
    if model is not None:
        changes["ai_model"] = model
    store: ConfigStore = ctx.obj["config_store"]
    with guarded():
        config = store.update(**changes)
    info = PROVIDER_INFO[ProviderType(provider)]
    print_success(f"AI provider set to {info.name}")
    if info.requires_key and not config.ai_api_key:
        print_warning(f"This provider needs an API key: plmhelper config ai {provider} --key <KEY>")


@config_group.command("test-ai")
@click.pass_context
def config_test_ai(ctx: click.Context) -> None:
    """Check that the configured AI provider answers."""
    provider = create_provider(get_config(ctx))
    if provider is None:
        print_error("AI is disabled or not fully configured.")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
    with ProgressIndicator(f"Testing connection to {provider.name}"):
        ok = provider.test_connection()
    if not ok:
        print_error(f"Could not reach {provider.name}")
        raise click.exceptions.Exit(EXIT_LLM_FAILURE)
    print_success(f"{provider.name} is reachable")
