"""
Refresh workflow — format & commit, refresh flake locks, rebuild.

Each step must succeed before the next one starts. A clean tree is
not a failure: only the formatter or the closing `git status` can stop
the run at the commit step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from hostctl.core.models.action import Receipt
from hostctl.core.models.config import HostConfig
from hostctl.core.services import git_ops, nix_ops
from hostctl.core.services.runner import CommandRunner

logger = logging.getLogger(__name__)


@dataclass
class RefreshResult:
    """Outcome of a refresh run."""

    steps: list[str] = field(default_factory=list)
    error: str | None = None
    receipt: Receipt | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        if self.error is not None:
            return 1
        return self.receipt.exit_code if self.receipt else 0

    def to_dict(self) -> dict:
        result: dict = {"steps": self.steps, "exit_code": self.exit_code}
        if self.error:
            result["error"] = self.error
        return result


def refresh_and_rebuild(
    runner: CommandRunner,
    config: HostConfig,
    root: Path,
    message: str = "",
) -> RefreshResult:
    """Commit pending changes, update flake locks and inputs, rebuild."""
    result = RefreshResult()

    formatted, committed = git_ops.format_and_commit(runner, config, message, cwd=root)
    result.steps.append("commit")
    if formatted.failed or committed is None or committed.failed:
        result.error = "Failed to format and commit changes"
        result.receipt = committed or formatted
        return result

    for subdir, receipt in nix_ops.lock_flake_dirs(runner, config, root):
        result.steps.append(f"lock:{subdir}")
        if receipt.failed:
            result.error = f"Failed to update {subdir} flake lock"
            result.receipt = receipt
            return result

    updated = nix_ops.flake_update(runner, cwd=root)
    result.steps.append("update")
    if updated.failed:
        result.error = "Failed to update flake inputs"
        result.receipt = updated
        return result

    result.steps.append("rebuild")
    result.receipt = nix_ops.rebuild(runner, config, cwd=root)
    logger.info("Refresh finished with exit %d", result.exit_code)
    return result
