"""
Interactive service pipeline — pick a unit, pick an action, run it.

Stages run strictly in order; each either hands a value to the next
or ends the run:

    ENUMERATE → SELECT → ADVISE → CONFIRM_SELECTION → SELECT_ACTION → CONFIRM_EXECUTION

Every early ending is a designed no-op: an informational message on
stderr and exit code 0. Only the last stage changes the system, and
its exit code becomes the pipeline's.

Missing tools and failed queries are not no-ops; collaborators raise
``ToolMissingError`` / ``CommandError`` and the caller reports them.
"""

from __future__ import annotations

import logging
import re

from hostctl.core.models.config import HostConfig
from hostctl.core.models.service import (
    PipelineOutcome,
    PipelineResult,
    PipelineStage,
    ServiceAction,
    is_affirmative,
)
from hostctl.core.services.interaction import ClickPrompter, FzfSelector, Prompter, Selector
from hostctl.core.services.runner import CommandRunner
from hostctl.core.services.spellcheck import Advisor, NullAdvisor, build_advisor
from hostctl.core.services.systemd_ops import (
    ActionExecutor,
    SystemctlExecutor,
    SystemdUnitEnumerator,
    UnitEnumerator,
)

logger = logging.getLogger(__name__)


class UnknownActionError(ValueError):
    """A supplied action is outside the closed set (strict mode only)."""


class PipelineAborted(Exception):
    """Raised by a stage to end the run without executing anything."""

    def __init__(self, stage: PipelineStage, outcome: PipelineOutcome, message: str):
        self.stage = stage
        self.outcome = outcome
        self.message = message
        super().__init__(message)


def filter_candidates(candidates: list[str], pattern: str) -> list[str]:
    """Keep candidates matching ``pattern``, case-insensitively.

    The pattern is a regular expression; one that does not compile is
    matched as a literal substring. An empty pattern keeps everything.
    """
    if not pattern:
        return list(candidates)
    try:
        regex = re.compile(pattern, re.IGNORECASE)
    except re.error:
        regex = re.compile(re.escape(pattern), re.IGNORECASE)
    return [c for c in candidates if regex.search(c)]


class ServicePipeline:
    """Multi-level interactive service management.

    Args:
        enumerator: Lists candidate units.
        selector: Interactive single-choice picker.
        prompter: Y/n questions and user messages.
        executor: Runs the chosen action against the chosen unit.
        advisor: Optional spell-check; warnings only.
        strict_actions: Reject a supplied action outside ``ServiceAction``.
    """

    def __init__(
        self,
        enumerator: UnitEnumerator,
        selector: Selector,
        prompter: Prompter,
        executor: ActionExecutor,
        advisor: Advisor | None = None,
        strict_actions: bool = False,
    ):
        self._enumerator = enumerator
        self._selector = selector
        self._prompter = prompter
        self._executor = executor
        self._advisor = advisor or NullAdvisor()
        self._strict_actions = strict_actions

    def run(self, pattern: str = "", action: str = "") -> PipelineResult:
        """Run all stages once.

        Args:
            pattern: Filter for the unit list ("" = no filtering).
            action: Pre-selected action ("" = ask interactively).

        Raises:
            UnknownActionError: strict mode and ``action`` is not a known action.
        """
        if action and not ServiceAction.is_known(action):
            if self._strict_actions:
                raise UnknownActionError(
                    f"Unknown action '{action}'. "
                    f"Valid: {', '.join(ServiceAction.choices())}"
                )
            logger.warning("Passing unrecognised action '%s' to systemctl as-is", action)

        unit = ""
        chosen = ""
        suggestions: list[str] = []
        try:
            candidates = self._enumerate(pattern)
            unit = self._select_unit(candidates)
            suggestions = self._advise(unit)
            self._confirm(
                PipelineStage.CONFIRM_SELECTION,
                f"Confirm selected service [{unit}] (Y/n)? ",
                "Aborting.",
            )
            chosen = self._select_action(action)
            command = self._executor.describe(chosen, unit)
            self._confirm(
                PipelineStage.CONFIRM_EXECUTION,
                f"Execute '{command}'? (Y/n) ",
                "Command aborted.",
            )
        except PipelineAborted as abort:
            logger.info("Pipeline stopped at %s: %s", abort.stage, abort.outcome)
            self._prompter.info(abort.message)
            return PipelineResult(
                outcome=abort.outcome,
                stage=abort.stage,
                exit_code=0,
                unit=unit,
                action=chosen,
                suggestions=suggestions,
                message=abort.message,
            )

        self._prompter.notice(f"Executing: {command}")
        exit_code = self._executor.execute(chosen, unit)
        logger.info("%s exited with %d", command, exit_code)

        return PipelineResult(
            outcome=PipelineOutcome.EXECUTED,
            stage=PipelineStage.CONFIRM_EXECUTION,
            exit_code=exit_code,
            unit=unit,
            action=chosen,
            command=command,
            suggestions=suggestions,
        )

    # ── Stages ──────────────────────────────────────────────────

    def _enumerate(self, pattern: str) -> list[str]:
        if pattern:
            self._prompter.info(f'Filtering services for pattern "{pattern}"...')
        candidates = filter_candidates(self._enumerator.list_units(), pattern)
        if not candidates:
            raise PipelineAborted(
                PipelineStage.ENUMERATE,
                PipelineOutcome.NO_CANDIDATES,
                "No services found matching pattern.",
            )
        return candidates

    def _select_unit(self, candidates: list[str]) -> str:
        unit = self._selector.select(candidates, "Select service: ")
        if not unit:
            raise PipelineAborted(
                PipelineStage.SELECT,
                PipelineOutcome.NO_SELECTION,
                "No service selected.",
            )
        return unit

    def _advise(self, unit: str) -> list[str]:
        suggestions = self._advisor.suggest(unit)
        if suggestions:
            self._prompter.warn(
                f'Warning: The service name "{unit}" might be misspelled. Suggestions:'
            )
            self._prompter.warn("\n".join(suggestions))
        return suggestions

    def _confirm(self, stage: PipelineStage, question: str, declined: str) -> None:
        if not is_affirmative(self._prompter.ask(question)):
            raise PipelineAborted(stage, PipelineOutcome.DECLINED, declined)

    def _select_action(self, action: str) -> str:
        if action:
            return action
        chosen = self._selector.select(ServiceAction.choices(), "Select action: ")
        if not chosen:
            raise PipelineAborted(
                PipelineStage.SELECT_ACTION,
                PipelineOutcome.NO_ACTION,
                "No action selected.",
            )
        return chosen


def build_service_pipeline(
    runner: CommandRunner,
    config: HostConfig,
    prompter: Prompter | None = None,
) -> ServicePipeline:
    """Wire the pipeline to systemctl, the configured selector and aspell."""
    settings = config.services
    return ServicePipeline(
        enumerator=SystemdUnitEnumerator(runner),
        selector=FzfSelector(runner, binary=config.terminal.selector),
        prompter=prompter or ClickPrompter(),
        executor=SystemctlExecutor(runner, settings.privilege_command),
        advisor=build_advisor(runner, enabled=settings.spellcheck),
        strict_actions=settings.strict_actions,
    )
