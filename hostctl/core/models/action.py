"""
Action and Receipt models — one command in, one outcome out.

An Action is a command line plus how it shares the terminal. A Receipt
is what became of it. Adapters turn one into the other and report
failures inside the Receipt instead of raising.
"""

from __future__ import annotations

import shlex
from typing import Any, Literal

from pydantic import BaseModel, Field

StdioMode = Literal["capture", "select", "inherit"]
ReceiptStatus = Literal["ok", "skipped", "failed"]


class Action(BaseModel):
    """A command for an adapter to run.

    ``stdio`` decides which streams hostctl reads: ``capture`` takes
    stdout and stderr, ``select`` takes stdout only (the tool keeps the
    terminal for its UI), ``inherit`` takes nothing.
    """

    id: str
    adapter: str = "shell"
    argv: list[str] = Field(default_factory=list)
    stdio: StdioMode = "capture"
    input: str | None = None        # fed on stdin
    cwd: str | None = None
    timeout: float | None = None
    mutating: bool = False          # changes the system; skipped under dry-run

    @property
    def command_line(self) -> str:
        return shlex.join(self.argv)


class Receipt(BaseModel):
    """What happened to an Action."""

    adapter: str
    action_id: str
    status: ReceiptStatus = "ok"
    duration_ms: int = 0

    output: str = ""                # captured stdout (or the skip reason)
    error: str | None = None
    return_code: int | None = None  # None: the process never ran

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @property
    def exit_code(self) -> int:
        """Exit status to hand back to the shell.

        The process's own code when there is one; otherwise 1 for a
        failure and 0 for success or a dry-run skip.
        """
        if self.return_code is not None:
            return self.return_code
        return int(self.failed)

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, adapter: str, action_id: str, reason: str = "", **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="skipped", output=reason, **kwargs)
