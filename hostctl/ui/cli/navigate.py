"""
CLI commands for searching and navigating — files, jump, man, ls.

Thin wrappers over ``files_ops``, ``jump_ops`` and ``system_ops``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from hostctl.ui.cli.helpers import cli_errors, fail, finish, get_config, get_runner


@click.command()
@click.argument("root", required=False, type=click.Path(file_okay=False, path_type=Path))
@click.pass_context
def files(ctx: click.Context, root: Path | None) -> None:
    """Fuzzy find a file (bat preview) and open it in $EDITOR."""
    from hostctl.core.services.files_ops import open_in_editor, pick_file, resolve_editor

    runner = get_runner(ctx)
    config = get_config(ctx)
    base = root or Path.cwd()

    with cli_errors():
        chosen = pick_file(runner, config, base)

    if not chosen:
        click.echo("No file selected.", err=True)
        sys.exit(0)

    path = base / chosen
    if not path.is_file():
        fail("Error: Selected file does not exist.")

    finish(open_in_editor(runner, path, resolve_editor(config)))


@click.command()
@click.argument("pattern", required=False, default="")
@click.pass_context
def jump(ctx: click.Context, pattern: str) -> None:
    """Jump to a directory via zoxide; spawn a shell in that directory."""
    from hostctl.core.services.jump_ops import launch_shell, query_directory, resolve_shell

    runner = get_runner(ctx)

    with cli_errors():
        directory = query_directory(runner, pattern)

    if not directory:
        click.echo(f"No directory found for: {pattern}", err=True)
        sys.exit(0)

    finish(launch_shell(runner, Path(directory), resolve_shell(get_config(ctx))))


@click.command()
@click.argument("subject")
@click.pass_context
def man(ctx: click.Context, subject: str) -> None:
    """Open man pages in the browser."""
    from hostctl.core.services.system_ops import open_man_page

    with cli_errors():
        receipt = open_man_page(get_runner(ctx), subject, get_config(ctx).terminal.man_browser)
    finish(receipt)


@click.group("ls")
def listing() -> None:
    """File listings (eza)."""


@listing.command("dirs")
@click.pass_context
def list_dirs(ctx: click.Context) -> None:
    """List directories."""
    from hostctl.core.services.system_ops import list_directories

    with cli_errors():
        receipt = list_directories(get_runner(ctx))
    finish(receipt)


@listing.command("all")
@click.pass_context
def list_everything(ctx: click.Context) -> None:
    """List all files (incl. hidden) with details."""
    from hostctl.core.services.system_ops import list_all

    with cli_errors():
        receipt = list_all(get_runner(ctx))
    finish(receipt)
