"""
CLI commands for Nix & NixOS — rebuild, flakes, packages, GC, logs.

Thin wrappers over ``hostctl.core.services.nix_ops``.
"""

from __future__ import annotations

import sys

import click

from hostctl.ui.cli.helpers import (
    cli_errors,
    fail,
    finish,
    get_config,
    get_runner,
    resolve_root,
)


@click.group()
def nix() -> None:
    """Nix & NixOS — rebuild, flake inputs, package search, garbage collection."""


# ── NixOS ───────────────────────────────────────────────────────

@nix.command()
@click.pass_context
def generations(ctx: click.Context) -> None:
    """List system generations."""
    from hostctl.core.services.nix_ops import list_generations

    with cli_errors():
        receipt = list_generations(get_runner(ctx))
    finish(receipt)


@nix.command()
@click.option("--fast", is_flag=True, help="Skip rebuilding nix itself.")
@click.option("--target-host", default=None, help="Deploy to this host over SSH.")
@click.pass_context
def rebuild(ctx: click.Context, fast: bool, target_host: str | None) -> None:
    """Rebuild the system (nixos-rebuild switch)."""
    from hostctl.core.services.nix_ops import rebuild as do_rebuild

    with cli_errors():
        receipt = do_rebuild(
            get_runner(ctx), get_config(ctx),
            fast=fast, target_host=target_host, cwd=resolve_root(ctx),
        )
    finish(receipt)


@nix.command("rebuild-container")
@click.pass_context
def rebuild_container(ctx: click.Context) -> None:
    """Rebuild the configured remote container host."""
    from hostctl.core.services.nix_ops import rebuild as do_rebuild

    config = get_config(ctx)
    if not config.nix.target_host:
        fail("No target host configured (set nix.target_host in hostctl.yml).")

    with cli_errors():
        receipt = do_rebuild(
            get_runner(ctx), config,
            target_host=config.nix.target_host, cwd=resolve_root(ctx),
        )
    finish(receipt)


@nix.command("view-log")
@click.pass_context
def view_log(ctx: click.Context) -> None:
    """View latest rebuild log."""
    from hostctl.core.services.nix_ops import latest_rebuild_log

    logs_dir = resolve_root(ctx) / get_config(ctx).nix.logs_dir
    latest = latest_rebuild_log(logs_dir)
    if latest is None:
        fail("No log files found in logs directory")

    click.echo(latest.read_text(encoding="utf-8", errors="replace"), nl=False)


# ── Flakes ──────────────────────────────────────────────────────

@nix.command()
@click.argument("inputs", nargs=-1)
@click.pass_context
def update(ctx: click.Context, inputs: tuple[str, ...]) -> None:
    """Update flake inputs (all, or the given ones)."""
    from hostctl.core.services.nix_ops import flake_update

    with cli_errors():
        receipt = flake_update(get_runner(ctx), list(inputs), cwd=resolve_root(ctx))
    finish(receipt)


@nix.command()
@click.pass_context
def lock(ctx: click.Context) -> None:
    """Update flake.lock without bumping inputs."""
    from hostctl.core.services.nix_ops import flake_lock

    with cli_errors():
        receipt = flake_lock(get_runner(ctx), cwd=resolve_root(ctx))
    finish(receipt)


@nix.command("lock-dirs")
@click.pass_context
def lock_dirs(ctx: click.Context) -> None:
    """Update flake.lock in every configured sub-flake."""
    from hostctl.core.services.nix_ops import lock_flake_dirs

    with cli_errors():
        results = lock_flake_dirs(get_runner(ctx), get_config(ctx), resolve_root(ctx))

    if not results:
        click.secho("No sub-flakes configured.", fg="yellow", err=True)
        return

    subdir, receipt = results[-1]
    if receipt.failed:
        fail(f"Failed to update {subdir} flake lock")


@nix.command("update-input")
@click.pass_context
def update_input(ctx: click.Context) -> None:
    """Pick one flake input interactively and update it."""
    from hostctl.core.services.nix_ops import update_selected_input

    with cli_errors():
        receipt = update_selected_input(get_runner(ctx), get_config(ctx), cwd=resolve_root(ctx))

    if receipt is None:
        click.echo("No input selected.", err=True)
        sys.exit(0)
    finish(receipt)


@nix.command()
@click.pass_context
def show(ctx: click.Context) -> None:
    """Show flake outputs."""
    from hostctl.core.services.nix_ops import flake_show

    with cli_errors():
        receipt = flake_show(get_runner(ctx), cwd=resolve_root(ctx))
    finish(receipt)


@nix.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Check flake outputs."""
    from hostctl.core.services.nix_ops import flake_check

    with cli_errors():
        receipt = flake_check(get_runner(ctx), cwd=resolve_root(ctx))
    finish(receipt)


# ── Packages ────────────────────────────────────────────────────

@nix.command()
@click.argument("package")
@click.option("--verbose", "detailed", is_flag=True, help="Fuzzy search with details.")
@click.pass_context
def search(ctx: click.Context, package: str, detailed: bool) -> None:
    """Search nixpkgs for a package."""
    from hostctl.core.services.nix_ops import search as do_search

    with cli_errors():
        receipt = do_search(get_runner(ctx), package, verbose=detailed)
    finish(receipt)


@nix.command()
@click.argument("package")
@click.pass_context
def build(ctx: click.Context, package: str) -> None:
    """Build a nixpkgs package."""
    from hostctl.core.services.nix_ops import build_package

    with cli_errors():
        receipt = build_package(get_runner(ctx), package)
    finish(receipt)


@nix.command()
@click.argument("package")
@click.pass_context
def run(ctx: click.Context, package: str) -> None:
    """Open a shell with a nixpkgs package available."""
    from hostctl.core.services.nix_ops import shell_with_package

    with cli_errors():
        receipt = shell_with_package(get_runner(ctx), package)
    finish(receipt)


@nix.command()
@click.pass_context
def repl(ctx: click.Context) -> None:
    """Start a nix repl with nixpkgs loaded."""
    from hostctl.core.services.nix_ops import repl as do_repl

    with cli_errors():
        receipt = do_repl(get_runner(ctx))
    finish(receipt)


# ── Garbage collection ──────────────────────────────────────────

def _collect(ctx: click.Context, days: int | None) -> None:
    from hostctl.core.services.nix_ops import collect_garbage, in_container

    container = in_container()
    if container:
        click.echo("Running in container environment. Using nix commands without sudo...")

    with cli_errors():
        receipt = collect_garbage(get_runner(ctx), get_config(ctx), days=days, container=container)
    finish(receipt)


@nix.command()
@click.argument("days", type=click.IntRange(min=0))
@click.pass_context
def gc(ctx: click.Context, days: int) -> None:
    """Delete generations older than DAYS and collect garbage."""
    _collect(ctx, days)


@nix.command("gc-all")
@click.pass_context
def gc_all(ctx: click.Context) -> None:
    """Collect all garbage and optimise the store."""
    _collect(ctx, None)
