"""
Shell command adapter — run an external program.

Every recipe ends up here. The action's ``stdio`` mode decides how
the program shares the terminal:

    capture  stdout and stderr captured (queries such as systemctl list)
    select   stdout captured, stderr and tty left to the tool (fzf, zoxide -i)
    inherit  nothing captured (editors, shells, sudo, nixos-rebuild)
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path

from hostctl.adapters.base import Adapter, ExecutionContext
from hostctl.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)

# stdio mode → (pipe stdout, pipe stderr)
_PIPES = {
    "capture": (True, True),
    "select": (True, False),
    "inherit": (False, False),
}


class ShellCommandAdapter(Adapter):
    """Runs ``action.argv`` as a child process (no shell in between)."""

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        argv = context.action.argv
        if not argv:
            return False, "Missing command"
        if not self.has_command(argv[0]):
            return False, f"Command not found: {argv[0]}"
        if context.working_dir and not Path(context.working_dir).is_dir():
            return False, f"Working directory does not exist: {context.working_dir}"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        action = context.action
        pipe_out, pipe_err = _PIPES[action.stdio]
        logger.debug("Executing: %s (cwd=%s, stdio=%s)", action.command_line, action.cwd, action.stdio)

        started = time.monotonic()
        try:
            completed = subprocess.run(
                action.argv,
                cwd=action.cwd,
                input=action.input,
                stdout=subprocess.PIPE if pipe_out else None,
                stderr=subprocess.PIPE if pipe_err else None,
                text=True,
                timeout=action.timeout,
            )
        except subprocess.TimeoutExpired:
            return self._not_run(action, f"Command timed out after {action.timeout}s")
        except OSError as e:
            return self._not_run(action, f"Command execution error: {e}")

        return self._finished(action, completed, int((time.monotonic() - started) * 1000))

    def _not_run(self, action: Action, error: str) -> Receipt:
        return Receipt.failure(
            adapter=self.name,
            action_id=action.id,
            error=error,
            metadata={"command": action.command_line},
        )

    def _finished(
        self,
        action: Action,
        completed: subprocess.CompletedProcess[str],
        elapsed_ms: int,
    ) -> Receipt:
        stdout = (completed.stdout or "").strip()
        stderr = (completed.stderr or "").strip()
        common = {
            "adapter": self.name,
            "action_id": action.id,
            "output": stdout,
            "return_code": completed.returncode,
            "duration_ms": elapsed_ms,
            "metadata": {"command": action.command_line, "stderr": stderr},
        }
        if completed.returncode == 0:
            return Receipt(status="ok", **common)
        return Receipt(
            status="failed",
            error=stderr or f"Command exited with code {completed.returncode}",
            **common,
        )
