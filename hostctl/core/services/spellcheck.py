"""
Advisory spell-check for selected names.

The advisor only ever produces warnings. When aspell is not installed
the null advisor is used, so callers never branch on tool presence.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from hostctl.core.services.runner import CommandRunner

logger = logging.getLogger(__name__)


class Advisor(ABC):
    """Suggests possible problems with a token."""

    @abstractmethod
    def suggest(self, token: str) -> list[str]:
        """Return zero or more suggestions for ``token``."""


class NullAdvisor(Advisor):
    """Advisor used when no checker is available."""

    def suggest(self, token: str) -> list[str]:
        return []


class AspellAdvisor(Advisor):
    """``aspell list`` — prints each word it does not recognise."""

    def __init__(self, runner: CommandRunner, binary: str = "aspell"):
        self._runner = runner
        self._binary = binary

    def suggest(self, token: str) -> list[str]:
        receipt = self._runner.run([self._binary, "list"], input=token)
        if receipt.failed:
            # best-effort: a broken checker is the same as no checker
            logger.debug("%s failed: %s", self._binary, receipt.error)
            return []
        return [line.strip() for line in receipt.output.splitlines() if line.strip()]


def build_advisor(runner: CommandRunner, enabled: bool = True) -> Advisor:
    """Pick the aspell advisor when installed and enabled."""
    if enabled and runner.available("aspell"):
        return AspellAdvisor(runner)
    return NullAdvisor()
