"""
Adapter base — how hostctl reaches the programs it drives.

A service never spawns a process itself. It describes the command as
an Action; an adapter vets it, runs it and reports a Receipt.
"""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod

from pydantic import BaseModel

from hostctl.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """An action on its way through the registry.

    ``dry_run`` is already resolved: it is only True for a mutating
    action while the registry is in dry-run mode.
    """

    action: Action
    dry_run: bool = False

    @property
    def working_dir(self) -> str | None:
        """Directory the command starts in (None = ours)."""
        return self.action.cwd


class Adapter(ABC):
    """One way of running commands (real processes, or a script in tests).

    ``execute`` must not raise: a command that could not start, timed
    out or exited non-zero is a failed Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key; actions select their adapter by it."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether this adapter can run anything on this machine."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """``(True, "")`` when the action can start, else ``(False, reason)``."""

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Run the action and describe the outcome."""

    def has_command(self, program: str) -> bool:
        """Whether ``program`` resolves on PATH."""
        return shutil.which(program) is not None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
