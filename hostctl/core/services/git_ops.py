"""
Git operations — the everyday commit loop for the configuration repo.

All commands run with the terminal handed to git, so pagers, editors
and colour work as usual.
"""

from __future__ import annotations

import logging
from pathlib import Path

from hostctl.core.models.action import Receipt
from hostctl.core.models.config import HostConfig
from hostctl.core.services.runner import CommandRunner

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Low-level runner
# ═══════════════════════════════════════════════════════════════════


def run_git(
    runner: CommandRunner,
    *args: str,
    cwd: Path | None = None,
    mutating: bool = False,
) -> Receipt:
    """Run a git command with the terminal attached."""
    runner.require("git")
    return runner.run(["git", *args], stdio="inherit", cwd=cwd, mutating=mutating)


def exclude_pathspecs(patterns: list[str]) -> list[str]:
    """``:^pattern`` pathspecs that drop ``patterns`` from a diff."""
    return [f":^{p}" for p in patterns]


# ═══════════════════════════════════════════════════════════════════
#  Git operations
# ═══════════════════════════════════════════════════════════════════


def git_status(runner: CommandRunner, ignored: bool = False, cwd: Path | None = None) -> Receipt:
    args = ["status", "--ignored"] if ignored else ["status"]
    return run_git(runner, *args, cwd=cwd)


def git_diff(
    runner: CommandRunner,
    config: HostConfig,
    cached: bool = False,
    cwd: Path | None = None,
) -> Receipt:
    """Diff without lock files and generated sources."""
    args = ["diff", "--cached"] if cached else ["diff"]
    args += ["--", *exclude_pathspecs(config.git.diff_excludes)]
    return run_git(runner, *args, cwd=cwd)


def git_add(runner: CommandRunner, cwd: Path | None = None) -> Receipt:
    return run_git(runner, "add", ".", cwd=cwd, mutating=True)


def git_commit(runner: CommandRunner, message: str = "", cwd: Path | None = None) -> Receipt:
    """Commit staged changes; without a message git opens the editor."""
    args = ["commit", "-m", message] if message else ["commit"]
    return run_git(runner, *args, cwd=cwd, mutating=True)


def git_pull(runner: CommandRunner, rebase: bool = True, cwd: Path | None = None) -> Receipt:
    args = ["pull", "--rebase"] if rebase else ["pull"]
    return run_git(runner, *args, cwd=cwd, mutating=True)


def run_formatter(runner: CommandRunner, config: HostConfig, cwd: Path | None = None) -> Receipt:
    """Run the configured tree formatter (treefmt by default)."""
    formatter = config.git.formatter
    runner.require(formatter)
    return runner.run([formatter], stdio="inherit", cwd=cwd, mutating=True)


def add_commit_status(
    runner: CommandRunner,
    message: str = "",
    cwd: Path | None = None,
) -> Receipt:
    """Stage everything, commit, then show the status.

    All three steps always run. A failed ``add`` or ``commit`` (most
    often "nothing to commit") is only logged.

    Returns:
        The status receipt.
    """
    added = git_add(runner, cwd=cwd)
    if added.failed:
        logger.info("git add failed (exit %s)", added.return_code)

    committed = git_commit(runner, message, cwd=cwd)
    if committed.failed:
        logger.info("git commit failed (exit %s)", committed.return_code)

    return git_status(runner, cwd=cwd)


def format_and_commit(
    runner: CommandRunner,
    config: HostConfig,
    message: str = "",
    cwd: Path | None = None,
) -> tuple[Receipt, Receipt | None]:
    """Format, then stage/commit/status.

    Returns:
        ``(format_receipt, status_receipt)``; the second is None when
        formatting failed and git was never touched.
    """
    formatted = run_formatter(runner, config, cwd=cwd)
    if formatted.failed:
        return formatted, None
    return formatted, add_commit_status(runner, message, cwd=cwd)
