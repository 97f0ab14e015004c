"""
Service management models — the values flowing through the
interactive service pipeline.

Nothing here is persisted. Every value lives for one pipeline run.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

# Answers that count as "yes" at a confirmation prompt (empty = default yes)
AFFIRMATIVE_ANSWERS = frozenset({"", "Y", "y"})


class ServiceAction(StrEnum):
    """The closed set of actions offered by the action selector."""

    STATUS = "status"
    START = "start"
    STOP = "stop"
    RESTART = "restart"
    ENABLE = "enable"
    DISABLE = "disable"
    ENABLE_NOW = "enable-now"
    DISABLE_NOW = "disable-now"

    @classmethod
    def choices(cls) -> list[str]:
        """Action names in selector order."""
        return [member.value for member in cls]

    @classmethod
    def is_known(cls, value: str) -> bool:
        return value in cls._value2member_map_

    @property
    def systemctl_args(self) -> list[str]:
        """Arguments for ``systemctl`` (``enable-now`` → ``enable --now``)."""
        if self in (ServiceAction.ENABLE_NOW, ServiceAction.DISABLE_NOW):
            verb = self.value.removesuffix("-now")
            return [verb, "--now"]
        return [self.value]


class PipelineStage(StrEnum):
    """Stages of the service pipeline, in execution order."""

    ENUMERATE = "enumerate"
    SELECT = "select"
    ADVISE = "advise"
    CONFIRM_SELECTION = "confirm_selection"
    SELECT_ACTION = "select_action"
    CONFIRM_EXECUTION = "confirm_execution"


class PipelineOutcome(StrEnum):
    """How a pipeline run ended."""

    EXECUTED = "executed"
    NO_CANDIDATES = "no_candidates"
    NO_SELECTION = "no_selection"
    DECLINED = "declined"
    NO_ACTION = "no_action"


def is_affirmative(answer: str | None) -> bool:
    """Interpret a Y/n confirmation answer.

    Empty input, ``Y`` and ``y`` confirm. Anything else declines,
    including ``yes``.
    """
    return (answer or "").strip() in AFFIRMATIVE_ANSWERS


class PipelineResult(BaseModel):
    """Outcome of one service pipeline run."""

    outcome: PipelineOutcome
    stage: PipelineStage
    exit_code: int = 0
    unit: str = ""
    action: str = ""
    command: str = ""
    suggestions: list[str] = Field(default_factory=list)
    message: str = ""

    @property
    def executed(self) -> bool:
        return self.outcome == PipelineOutcome.EXECUTED

    @property
    def aborted(self) -> bool:
        """True for every designed no-op ending (exit code 0, nothing ran)."""
        return not self.executed

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
