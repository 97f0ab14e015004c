"""
Adapter registry — where every external command is dispatched.

Services hand an Action to the registry and get a Receipt back. The
registry picks the adapter, lets it veto the action, applies dry-run
to state-changing actions and stamps the duration.
"""

from __future__ import annotations

import logging
import time

from hostctl.adapters.base import Adapter, ExecutionContext
from hostctl.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Name → adapter table plus the dispatch rules.

    Args:
        dry_run: Skip actions marked ``mutating`` instead of running them.
    """

    def __init__(self, dry_run: bool = False):
        self._adapters: dict[str, Adapter] = {}
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def set_dry_run(self, enabled: bool) -> None:
        self._dry_run = enabled

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._adapters:
            logger.warning("Replacing adapter %s", adapter.name)
        self._adapters[adapter.name] = adapter
        logger.debug("Adapter %s ready (%s)", adapter.name, type(adapter).__name__)

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def execute_action(self, action: Action) -> Receipt:
        """Run ``action`` and return its receipt. Never raises."""
        started = time.monotonic()

        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"No adapter registered for '{action.adapter}'",
            )

        context = ExecutionContext(action=action, dry_run=self._dry_run and action.mutating)
        blocked = self._preflight(adapter, context)
        if blocked is not None:
            return blocked

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("%s adapter raised on %s: %s", action.adapter, action.command_line, e)
            receipt = Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Unexpected error: {e}",
            )

        receipt.duration_ms = int((time.monotonic() - started) * 1000)
        return receipt

    def _preflight(self, adapter: Adapter, context: ExecutionContext) -> Receipt | None:
        """Receipt that ends the dispatch early, or None to go ahead.

        Validation runs even under dry-run, so a rehearsal still
        reports a missing tool.
        """
        action = context.action
        try:
            valid, reason = adapter.validate(context)
        except Exception as e:
            valid, reason = False, f"validator raised {e}"

        if not valid:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation failed: {reason}",
            )

        if context.dry_run:
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] {action.command_line}",
                metadata={"dry_run": True},
            )
        return None


def default_registry(dry_run: bool = False) -> AdapterRegistry:
    """Registry with the real shell adapter registered."""
    from hostctl.adapters.shell.command import ShellCommandAdapter

    registry = AdapterRegistry(dry_run=dry_run)
    registry.register(ShellCommandAdapter())
    return registry
