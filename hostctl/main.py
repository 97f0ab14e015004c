"""
hostctl — CLI entrypoint.

Usage:
    python -m hostctl.main --help
    hostctl service [PATTERN] [ACTION]
    hostctl nix rebuild
    hostctl git gac "message"
"""

from __future__ import annotations

from pathlib import Path

import click

from hostctl import __version__
from hostctl.core.observability.logging_config import level_from_flags, setup_from_environment


@click.group()
@click.version_option(version=__version__, prog_name="hostctl")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Path to hostctl.yml (default: auto-detect).",
)
@click.option("--dry-run", is_flag=True, help="Print state-changing commands instead of running them.")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: Path | None,
    dry_run: bool,
) -> None:
    """hostctl — interactive recipes for services, files, Nix and Git."""
    from hostctl.adapters.registry import default_registry
    from hostctl.core.config.loader import (
        ConfigError,
        config_root,
        find_config_file,
        load_config,
    )
    from hostctl.core.services.runner import CommandRunner
    from hostctl.ui.cli.helpers import fail

    ctx.ensure_object(dict)

    # ── Logging setup (once, at process start) ──────────────────
    setup_from_environment(level_from_flags(debug=debug, verbose=verbose, quiet=quiet))

    # ── Configuration ───────────────────────────────────────────
    resolved = config_path or find_config_file()
    try:
        config = load_config(config_path)
    except ConfigError as e:
        fail(str(e))

    # ── Command execution (tests may pre-seed the registry) ─────
    registry = ctx.obj.get("registry") or default_registry()
    if dry_run:
        registry.set_dry_run(True)

    ctx.obj["config"] = config
    ctx.obj["config_path"] = resolved
    ctx.obj["root"] = config_root(resolved)
    ctx.obj["registry"] = registry
    ctx.obj["runner"] = CommandRunner(registry)


# ── Register commands from hostctl/ui/cli/ ──────────────────────

from hostctl.ui.cli.git import git, status as git_status
from hostctl.ui.cli.knowledge import knowledge
from hostctl.ui.cli.navigate import (
    files,
    jump,
    list_dirs,
    list_everything,
    listing,
    man,
)
from hostctl.ui.cli.nix import generations, nix, rebuild, update
from hostctl.ui.cli.service import service
from hostctl.ui.cli.workflow import gr

cli.add_command(service)
cli.add_command(files)
cli.add_command(jump)
cli.add_command(man)
cli.add_command(listing)
cli.add_command(nix)
cli.add_command(git)
cli.add_command(gr)
cli.add_command(knowledge)

# Short aliases for the most frequent recipes
cli.add_command(rebuild, name="b")
cli.add_command(list_dirs, name="d")
cli.add_command(list_everything, name="a")
cli.add_command(generations, name="l")
cli.add_command(git_status, name="gs")
cli.add_command(update, name="r")


if __name__ == "__main__":
    cli()
