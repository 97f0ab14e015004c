"""
Knowledge system — pass-through to the repository's knowledge script.

The script records problems and their solutions; hostctl only makes
sure it is executable and forwards the sub-command.
"""

from __future__ import annotations

import logging
import stat
from pathlib import Path

from hostctl.core.models.action import Receipt
from hostctl.core.services.runner import CommandRunner

logger = logging.getLogger(__name__)

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH

# sub-commands that only read the knowledge base
READ_ONLY_COMMANDS = frozenset({"analyze", "suggest", "report"})


def make_executable(path: Path) -> None:
    """``chmod +x`` (respecting the read bits that are already set)."""
    mode = path.stat().st_mode
    # only grant execute where read is granted, like chmod +x under umask 022
    read_bits = mode & (stat.S_IRUSR | stat.S_IRGRP | stat.S_IROTH)
    path.chmod(mode | (read_bits >> 2) & _EXEC_BITS | stat.S_IXUSR)


def run_knowledge(runner: CommandRunner, script: Path, *args: str) -> Receipt:
    """Run ``script <args...>`` from the current directory."""
    if not script.is_file():
        raise FileNotFoundError(f"Knowledge script not found: {script}")
    make_executable(script)
    mutating = not args or args[0] not in READ_ONLY_COMMANDS
    return runner.run([str(script), *args], stdio="inherit", mutating=mutating)


def init_knowledge(runner: CommandRunner, script: Path) -> Receipt:
    """Make every tool script executable, then run ``init`` and ``hook``."""
    if not script.is_file():
        raise FileNotFoundError(f"Knowledge script not found: {script}")
    for tool in sorted(script.parent.rglob("*.sh")):
        make_executable(tool)
        logger.debug("chmod +x %s", tool)

    initialised = run_knowledge(runner, script, "init")
    if initialised.failed:
        return initialised
    return run_knowledge(runner, script, "hook")
