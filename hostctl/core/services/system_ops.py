"""
Small system utilities — directory listings and HTML man pages.
"""

from __future__ import annotations

from hostctl.core.models.action import Receipt
from hostctl.core.services.runner import CommandRunner


def list_directories(runner: CommandRunner) -> Receipt:
    """``eza -D``: directories only."""
    runner.require("eza")
    return runner.run(["eza", "-D"], stdio="inherit")


def list_all(runner: CommandRunner) -> Receipt:
    """``eza -ola``: everything, hidden files included, long format."""
    runner.require("eza")
    return runner.run(["eza", "-ola"], stdio="inherit")


def open_man_page(runner: CommandRunner, subject: str, browser: str = "firefox") -> Receipt:
    """Render every man page for ``subject`` as HTML in ``browser``."""
    runner.require("man")
    return runner.run(["man", f"--html={browser}", "--all", subject], stdio="inherit")
