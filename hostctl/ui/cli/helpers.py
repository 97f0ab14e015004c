"""
Shared plumbing for CLI commands — context access, exit codes, errors.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from hostctl.core.models.action import Receipt
from hostctl.core.models.config import HostConfig
from hostctl.core.services.runner import CommandError, CommandRunner, ToolMissingError


def get_runner(ctx: click.Context) -> CommandRunner:
    return ctx.obj["runner"]


def get_config(ctx: click.Context) -> HostConfig:
    return ctx.obj["config"]


def resolve_root(ctx: click.Context) -> Path:
    """Directory that relative config paths are resolved against."""
    return ctx.obj["root"]


def fail(message: str) -> None:
    """Report an error and exit 1."""
    click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)


@contextmanager
def cli_errors() -> Iterator[None]:
    """Turn precondition failures from services into exit code 1."""
    try:
        yield
    except (ToolMissingError, CommandError, FileNotFoundError, ValueError) as e:
        fail(str(e))


def finish(receipt: Receipt) -> None:
    """Exit with the wrapped command's own exit code.

    A command that never started (missing tool, bad directory) is
    reported here, since nothing else printed anything.
    """
    if receipt.failed and receipt.return_code is None:
        fail(receipt.error or "Command failed")
    sys.exit(receipt.exit_code)
