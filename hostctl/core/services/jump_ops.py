"""
Directory jump — pick a frecent directory with zoxide and open a shell there.

The shell is a new child process rooted at the chosen directory; this
process never changes its own working directory.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from hostctl.core.models.action import Receipt
from hostctl.core.models.config import HostConfig
from hostctl.core.services.runner import CommandError, CommandRunner

logger = logging.getLogger(__name__)


def query_directory(runner: CommandRunner, pattern: str = "") -> str:
    """Interactive ``zoxide query -i``; "" when nothing matched or cancelled."""
    runner.require("zoxide")
    argv = ["zoxide", "query", "-i"]
    if pattern:
        argv.append(pattern)

    receipt = runner.run(argv, stdio="select")
    if receipt.failed:
        # zoxide exits 1 when nothing matches, 130 when the picker is cancelled
        if receipt.return_code in (1, 130):
            return ""
        raise CommandError(receipt, f"zoxide failed: {receipt.error}")
    return receipt.output.strip()


def resolve_shell(config: HostConfig) -> str:
    """Shell program: config, then $SHELL, then bash."""
    return config.terminal.shell or os.environ.get("SHELL") or "bash"


def launch_shell(runner: CommandRunner, directory: Path, shell: str) -> Receipt:
    """Start an interactive ``shell`` whose working directory is ``directory``."""
    logger.info("Launching %s in %s", shell, directory)
    return runner.run([shell], stdio="inherit", cwd=directory)
