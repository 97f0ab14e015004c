"""
CLI command for the refresh workflow (commit, lock, update, rebuild).

Thin wrapper over ``hostctl.core.services.refresh_ops``.
"""

from __future__ import annotations

import json
import sys

import click

from hostctl.ui.cli.helpers import cli_errors, fail, get_config, get_runner, resolve_root


@click.command()
@click.argument("message", required=False, default="")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output a summary as JSON.")
@click.pass_context
def gr(ctx: click.Context, message: str, as_json: bool) -> None:
    """Refresh flake inputs, commit changes, and rebuild system."""
    from hostctl.core.services.refresh_ops import refresh_and_rebuild

    with cli_errors():
        result = refresh_and_rebuild(get_runner(ctx), get_config(ctx), resolve_root(ctx), message)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if result.error:
        fail(result.error)
    sys.exit(result.exit_code)
