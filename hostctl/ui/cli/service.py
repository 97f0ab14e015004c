"""
CLI command for interactive systemctl management.

Thin wrapper over ``hostctl.core.services.service_pipeline``.
"""

from __future__ import annotations

import json
import sys

import click

from hostctl.ui.cli.helpers import cli_errors, get_config, get_runner


@click.command()
@click.argument("pattern", required=False, default="")
@click.argument("action", required=False, default="")
@click.option("--json-output", "--json", "as_json", is_flag=True,
              help="Print the run summary as JSON on stdout afterwards.")
@click.pass_context
def service(ctx: click.Context, pattern: str, action: str, as_json: bool) -> None:
    """Multi-level interactive systemctl management (includes spell-check hints).

    Lists service unit files (optionally filtered by PATTERN), lets you
    pick one, confirm it, pick an ACTION (unless given) and confirm the
    final ``sudo systemctl`` call.

    Examples:

        hostctl service

        hostctl service ngi restart
    """
    from hostctl.core.services.service_pipeline import build_service_pipeline

    pipeline = build_service_pipeline(get_runner(ctx), get_config(ctx))

    with cli_errors():
        result = pipeline.run(pattern=pattern, action=action)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))

    sys.exit(result.exit_code)
