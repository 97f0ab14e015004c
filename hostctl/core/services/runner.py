"""
Command runner — the service-facing way to run external programs.

Wraps the adapter registry so services deal in argv lists and
Receipts instead of building Actions by hand.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from hostctl.adapters.registry import AdapterRegistry
from hostctl.core.models.action import Action, Receipt, StdioMode

logger = logging.getLogger(__name__)


class ToolMissingError(Exception):
    """A required external program is not installed."""

    def __init__(self, tools: list[str], message: str | None = None):
        self.tools = tools
        super().__init__(message or f"Required tool not installed: {', '.join(tools)}")


class CommandError(Exception):
    """A read-only query failed, so the recipe cannot continue."""

    def __init__(self, receipt: Receipt, message: str):
        self.receipt = receipt
        super().__init__(message)


def _action_id(program: str) -> str:
    return f"{Path(program).name}-{uuid.uuid4().hex[:8]}"


class CommandRunner:
    """Run argv lists through the registry's shell adapter."""

    def __init__(self, registry: AdapterRegistry, adapter: str = "shell"):
        self._registry = registry
        self._adapter = adapter

    @property
    def dry_run(self) -> bool:
        return self._registry.dry_run

    def available(self, program: str) -> bool:
        adapter = self._registry.get(self._adapter)
        if adapter is None or not adapter.is_available():
            return False
        return adapter.has_command(program)

    def require(self, *programs: str, message: str | None = None) -> None:
        """Raise ToolMissingError unless every program is installed."""
        missing = [p for p in programs if not self.available(p)]
        if missing:
            raise ToolMissingError(missing, message)

    def run(
        self,
        argv: list[str],
        *,
        stdio: StdioMode = "capture",
        input: str | None = None,
        cwd: Path | str | None = None,
        mutating: bool = False,
        timeout: float | None = None,
    ) -> Receipt:
        """Run one command and return its receipt (never raises)."""
        action = Action(
            id=_action_id(argv[0] if argv else "empty"),
            adapter=self._adapter,
            argv=list(argv),
            stdio=stdio,
            input=input,
            cwd=str(cwd) if cwd is not None else None,
            mutating=mutating,
            timeout=timeout,
        )
        receipt = self._registry.execute_action(action)

        if receipt.skipped:
            logger.warning("%s", receipt.output)
        elif receipt.failed:
            logger.info("%s failed: %s", action.command_line, receipt.error)
        else:
            logger.debug("%s ok (%dms)", action.command_line, receipt.duration_ms)
        return receipt

    def query(self, argv: list[str], *, what: str, cwd: Path | str | None = None) -> str:
        """Run a read-only command and return its stdout.

        Raises:
            ToolMissingError: The program is not installed.
            CommandError: The command exited non-zero.
        """
        self.require(argv[0])
        receipt = self.run(argv, cwd=cwd)
        if receipt.failed:
            raise CommandError(receipt, f"Failed to {what}: {receipt.error}")
        return receipt.output
