"""
CLI commands for the knowledge script.

Thin wrappers over ``hostctl.core.services.knowledge_ops``.
"""

from __future__ import annotations

from pathlib import Path

import click

from hostctl.ui.cli.helpers import cli_errors, finish, get_config, get_runner, resolve_root


def _script(ctx: click.Context) -> Path:
    return resolve_root(ctx) / get_config(ctx).knowledge_script


def _forward(ctx: click.Context, *args: str) -> None:
    from hostctl.core.services.knowledge_ops import run_knowledge

    with cli_errors():
        receipt = run_knowledge(get_runner(ctx), _script(ctx), *args)
    finish(receipt)


@click.group()
def knowledge() -> None:
    """Knowledge system — record and look up known problems."""


@knowledge.command()
@click.argument("kind", metavar="TYPE")
@click.argument("description", metavar="DESC")
@click.argument("solution")
@click.pass_context
def learn(ctx: click.Context, kind: str, description: str, solution: str) -> None:
    """Record a problem and its solution."""
    _forward(ctx, "learn", kind, description, solution)


@knowledge.command()
@click.pass_context
def analyze(ctx: click.Context) -> None:
    """Analyze recorded problems."""
    _forward(ctx, "analyze")


@knowledge.command()
@click.argument("kind", metavar="TYPE")
@click.argument("context", metavar="CONTEXT")
@click.pass_context
def suggest(ctx: click.Context, kind: str, context: str) -> None:
    """Suggest solutions for a problem type in a context."""
    _forward(ctx, "suggest", kind, context)


@knowledge.command()
@click.pass_context
def report(ctx: click.Context) -> None:
    """Print the knowledge report."""
    _forward(ctx, "report")


@knowledge.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Make tool scripts executable, initialise, install the hook."""
    from hostctl.core.services.knowledge_ops import init_knowledge

    with cli_errors():
        receipt = init_knowledge(get_runner(ctx), _script(ctx))
    finish(receipt)
