"""
CLI commands for Git — status, diff, commit loop, formatting.

Thin wrappers over ``hostctl.core.services.git_ops``.
"""

from __future__ import annotations

import click

from hostctl.ui.cli.helpers import cli_errors, fail, finish, get_config, get_runner, resolve_root


@click.group()
def git() -> None:
    """Git — status, diff, add/commit/status loop, formatting."""


@git.command()
@click.option("--ignored", is_flag=True, help="Also show ignored files.")
@click.pass_context
def status(ctx: click.Context, ignored: bool) -> None:
    """Show working tree status."""
    from hostctl.core.services.git_ops import git_status

    with cli_errors():
        receipt = git_status(get_runner(ctx), ignored=ignored, cwd=resolve_root(ctx))
    finish(receipt)


@git.command()
@click.option("--cached", is_flag=True, help="Diff staged changes.")
@click.pass_context
def diff(ctx: click.Context, cached: bool) -> None:
    """Show changes, without lock files and generated sources."""
    from hostctl.core.services.git_ops import git_diff

    with cli_errors():
        receipt = git_diff(get_runner(ctx), get_config(ctx), cached=cached, cwd=resolve_root(ctx))
    finish(receipt)


@git.command()
@click.pass_context
def add(ctx: click.Context) -> None:
    """Stage all changes."""
    from hostctl.core.services.git_ops import git_add

    with cli_errors():
        receipt = git_add(get_runner(ctx), cwd=resolve_root(ctx))
    finish(receipt)


@git.command()
@click.argument("message", required=False, default="")
@click.pass_context
def commit(ctx: click.Context, message: str) -> None:
    """Commit changes (if no message is provided, editor opens)."""
    from hostctl.core.services.git_ops import git_commit

    with cli_errors():
        receipt = git_commit(get_runner(ctx), message, cwd=resolve_root(ctx))
    finish(receipt)


@git.command()
@click.option("--no-rebase", is_flag=True, help="Merge instead of rebasing.")
@click.pass_context
def pull(ctx: click.Context, no_rebase: bool) -> None:
    """Pull from remote (rebasing by default)."""
    from hostctl.core.services.git_ops import git_pull

    with cli_errors():
        receipt = git_pull(get_runner(ctx), rebase=not no_rebase, cwd=resolve_root(ctx))
    finish(receipt)


@git.command()
@click.pass_context
def lint(ctx: click.Context) -> None:
    """Format the tree (treefmt)."""
    from hostctl.core.services.git_ops import run_formatter

    with cli_errors():
        receipt = run_formatter(get_runner(ctx), get_config(ctx), cwd=resolve_root(ctx))
    finish(receipt)


@git.command()
@click.argument("message", required=False, default="")
@click.pass_context
def gac(ctx: click.Context, message: str) -> None:
    """Stage changes, commit with optional message, and show status."""
    from hostctl.core.services.git_ops import add_commit_status

    with cli_errors():
        receipt = add_commit_status(get_runner(ctx), message, cwd=resolve_root(ctx))
    finish(receipt)


@git.command()
@click.argument("message", required=False, default="")
@click.pass_context
def gact(ctx: click.Context, message: str) -> None:
    """Format code, stage changes, commit with optional message, and show status."""
    from hostctl.core.services.git_ops import format_and_commit

    with cli_errors():
        _, committed = format_and_commit(
            get_runner(ctx), get_config(ctx), message, cwd=resolve_root(ctx),
        )

    if committed is None:
        fail("Formatting failed")
    finish(committed)
