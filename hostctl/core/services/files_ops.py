"""
File picker — fuzzy-find a file under a directory and open it.

Lists files with ripgrep (hidden files included, excludes skipped),
picks one with the selector using a bat preview, then hands the
terminal to the user's editor.
"""

from __future__ import annotations

import logging
import os
import shlex
from pathlib import Path

from hostctl.core.models.action import Receipt
from hostctl.core.models.config import HostConfig
from hostctl.core.services.interaction import FzfSelector
from hostctl.core.services.runner import CommandError, CommandRunner

logger = logging.getLogger(__name__)

PREVIEW_COMMAND = "bat --style=numbers --color=always {}"
PREVIEW_WINDOW = "right:60%:wrap"


def list_files(runner: CommandRunner, root: Path, excludes: list[str]) -> list[str]:
    """Files under ``root`` as reported by ``rg --files``."""
    argv = ["rg", "--files", "--hidden"]
    for pattern in excludes:
        argv += ["--glob", f"!{pattern}"]

    receipt = runner.run(argv, cwd=root)
    if receipt.failed:
        if receipt.return_code == 1:
            return []  # rg: nothing found
        raise CommandError(receipt, f"Failed to list files: {receipt.error}")
    return [line for line in receipt.output.splitlines() if line]


def pick_file(runner: CommandRunner, config: HostConfig, root: Path) -> str:
    """Let the user choose a file; "" when nothing was chosen.

    Raises:
        ToolMissingError: ripgrep, the selector or bat is missing.
    """
    selector_bin = config.terminal.selector
    runner.require(
        "rg", selector_bin, "bat",
        message="Error: Required tools (ripgrep, fzf, bat) are not installed.",
    )
    files = list_files(runner, root, config.terminal.file_excludes)
    selector = FzfSelector(runner, selector_bin).with_args(
        "--preview", PREVIEW_COMMAND, f"--preview-window={PREVIEW_WINDOW}",
    )
    return selector.select(files, "Select file: ")


def resolve_editor(config: HostConfig) -> list[str]:
    """Editor argv: config, then $EDITOR, then nano."""
    editor = config.terminal.editor or os.environ.get("EDITOR") or "nano"
    return shlex.split(editor)


def open_in_editor(runner: CommandRunner, path: Path, editor: list[str]) -> Receipt:
    """Open ``path`` in ``editor`` with the terminal handed over."""
    logger.info("Opening %s with %s", path, editor[0])
    return runner.run([*editor, str(path)], stdio="inherit")
