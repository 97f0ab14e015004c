"""
systemd bindings for the service pipeline.

Read side: list the installed service unit files.
Write side: run ``systemctl <action> <unit>`` with elevated privilege.
"""

from __future__ import annotations

import logging
import shlex
from abc import ABC, abstractmethod

from hostctl.core.models.service import ServiceAction
from hostctl.core.services.runner import CommandRunner

logger = logging.getLogger(__name__)

LIST_UNIT_FILES = [
    "systemctl", "list-unit-files", "--type=service", "--no-pager", "--no-legend",
]


class UnitEnumerator(ABC):
    """Source of candidate unit names."""

    @abstractmethod
    def list_units(self) -> list[str]:
        """Unit names in the order the service manager reports them."""


class ActionExecutor(ABC):
    """Performs the state change for ``(action, unit)``."""

    @abstractmethod
    def describe(self, action: str, unit: str) -> str:
        """The command line that ``execute`` would run, for display."""

    @abstractmethod
    def execute(self, action: str, unit: str) -> int:
        """Run the action and return its exit code."""


def parse_unit_list(output: str) -> list[str]:
    """First whitespace-delimited token of every non-empty line."""
    units = []
    for line in output.splitlines():
        fields = line.split()
        if fields:
            units.append(fields[0])
    return units


class SystemdUnitEnumerator(UnitEnumerator):
    def __init__(self, runner: CommandRunner):
        self._runner = runner

    def list_units(self) -> list[str]:
        output = self._runner.query(LIST_UNIT_FILES, what="list service unit files")
        units = parse_unit_list(output)
        logger.info("Found %d service unit files", len(units))
        return units


def systemctl_argv(action: str, unit: str, privilege_command: list[str] | None = None) -> list[str]:
    """Build ``[sudo] systemctl <action...> <unit>``.

    Known actions go through ``ServiceAction.systemctl_args``; anything
    else is passed verbatim.
    """
    if ServiceAction.is_known(action):
        verb = ServiceAction(action).systemctl_args
    else:
        verb = [action]
    return [*(privilege_command or []), "systemctl", *verb, unit]


class SystemctlExecutor(ActionExecutor):
    """``sudo systemctl`` with the terminal handed over (sudo may prompt)."""

    def __init__(self, runner: CommandRunner, privilege_command: list[str] | None = None):
        self._runner = runner
        self._privilege = list(privilege_command) if privilege_command is not None else ["sudo"]

    def describe(self, action: str, unit: str) -> str:
        return shlex.join(systemctl_argv(action, unit, self._privilege))

    def execute(self, action: str, unit: str) -> int:
        receipt = self._runner.run(
            systemctl_argv(action, unit, self._privilege),
            stdio="inherit",
            mutating=True,
        )
        if receipt.failed and receipt.return_code is None:
            # never started (validation / OS error)
            logger.error("%s", receipt.error)
        return receipt.exit_code
