"""
Interactive collaborators — choosing from a list and answering prompts.

``Selector`` picks one line from many (fzf). ``Prompter`` asks free-text
questions and reports progress to the user (click). Both are small
ABCs so the service pipeline can run against scripted fakes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import click

from hostctl.core.services.runner import CommandError, CommandRunner

logger = logging.getLogger(__name__)

# fzf: 1 = no match, 130 = interrupted with Ctrl-C / Esc
_SELECTOR_CANCEL_CODES = frozenset({1, 130})


class Selector(ABC):
    """Interactive single-choice selection."""

    @abstractmethod
    def select(self, options: list[str], prompt: str) -> str:
        """Return the chosen option, or "" when the user cancels."""


class Prompter(ABC):
    """Free-text questions and user-facing messages."""

    @abstractmethod
    def ask(self, question: str) -> str:
        """Ask a question and return the raw answer ("" when just Enter)."""

    @abstractmethod
    def info(self, message: str) -> None:
        """Informational message (stderr)."""

    @abstractmethod
    def warn(self, message: str) -> None:
        """Non-blocking warning (stderr)."""

    @abstractmethod
    def notice(self, message: str) -> None:
        """Message that belongs on stdout."""


class FzfSelector(Selector):
    """Selection through fzf (or any fzf-compatible binary).

    Args:
        runner: Command runner used to launch the selector.
        binary: Selector program name.
        extra_args: Extra flags appended to every invocation (e.g. preview).
    """

    def __init__(
        self,
        runner: CommandRunner,
        binary: str = "fzf",
        extra_args: list[str] | None = None,
    ):
        self._runner = runner
        self._binary = binary
        self._extra_args = list(extra_args or [])

    @property
    def binary(self) -> str:
        return self._binary

    def with_args(self, *args: str) -> FzfSelector:
        """Copy of this selector with additional flags."""
        return FzfSelector(self._runner, self._binary, [*self._extra_args, *args])

    def select(self, options: list[str], prompt: str) -> str:
        self._runner.require(self._binary)
        receipt = self._runner.run(
            [self._binary, "--prompt", prompt, *self._extra_args],
            stdio="select",
            input="\n".join(options),
        )
        if receipt.failed:
            if receipt.return_code in _SELECTOR_CANCEL_CODES:
                logger.debug("Selection cancelled (exit %s)", receipt.return_code)
                return ""
            raise CommandError(receipt, f"{self._binary} failed: {receipt.error}")

        lines = receipt.output.splitlines()
        return lines[0].strip() if lines else ""


class ClickPrompter(Prompter):
    """Prompter backed by click.

    Questions and messages go to stderr like ``read -p`` does, so stdout
    stays clean for what the recipe actually produces.
    """

    def ask(self, question: str) -> str:
        return click.prompt(
            question,
            default="",
            show_default=False,
            prompt_suffix="",
            err=True,
        )

    def info(self, message: str) -> None:
        click.echo(message, err=True)

    def warn(self, message: str) -> None:
        click.secho(message, fg="yellow", err=True)

    def notice(self, message: str) -> None:
        click.echo(message)
