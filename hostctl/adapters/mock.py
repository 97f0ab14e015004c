"""
Mock adapter — scripted stand-in for the shell adapter.

Responses are keyed by the full command line first, then by the
program name, so a test can answer ``fzf`` generally and
``systemctl list-unit-files ...`` specifically.
"""

from __future__ import annotations

from hostctl.adapters.base import Adapter, ExecutionContext
from hostctl.core.models.action import Receipt


class MockAdapter(Adapter):
    """Pretends to run commands; every program is installed unless told otherwise.

    Unscripted commands succeed with ``default_output``.
    """

    def __init__(
        self,
        adapter_name: str = "shell",
        available: bool = True,
        default_output: str = "",
        missing: set[str] | None = None,
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._missing: set[str] = set(missing or ())
        self._script: dict[str, Receipt] = {}
        self._seen: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    # ── Inspection ──────────────────────────────────────────────

    @property
    def call_log(self) -> list[ExecutionContext]:
        return self._seen

    @property
    def call_count(self) -> int:
        return len(self._seen)

    @property
    def commands(self) -> list[list[str]]:
        """argv of every executed action, oldest first."""
        return [ctx.action.argv for ctx in self._seen]

    def calls_to(self, program: str) -> list[list[str]]:
        return [argv for argv in self.commands if argv[:1] == [program]]

    # ── Scripting ───────────────────────────────────────────────

    def set_missing(self, *programs: str) -> None:
        self._missing.update(programs)

    def set_output(self, key: str, output: str, return_code: int = 0) -> None:
        """Answer ``key`` (a command line or program) with ``output``.

        A non-zero ``return_code`` makes it a failed run, as a real
        process exiting with that code would be.
        """
        status = "ok" if return_code == 0 else "failed"
        self._script[key] = Receipt(
            adapter=self._name,
            action_id=key,
            status=status,
            output=output,
            return_code=return_code,
            error=None if return_code == 0 else f"Command exited with code {return_code}",
        )

    def set_failure(self, key: str, return_code: int = 1, error: str = "Mock failure") -> None:
        self._script[key] = Receipt.failure(
            adapter=self._name, action_id=key, error=error, return_code=return_code,
        )

    def reset(self) -> None:
        self._seen.clear()
        self._script.clear()
        self._missing.clear()

    # ── Adapter protocol ────────────────────────────────────────

    def is_available(self) -> bool:
        return self._available

    def has_command(self, program: str) -> bool:
        return program not in self._missing

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        argv = context.action.argv
        if not argv:
            return False, "Missing command"
        if not self.has_command(argv[0]):
            return False, f"Command not found: {argv[0]}"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._seen.append(context)
        action = context.action

        program = action.argv[0] if action.argv else ""
        scripted = self._script.get(action.command_line) or self._script.get(program)
        if scripted is not None:
            return scripted.model_copy(update={"action_id": action.id})

        return Receipt.success(
            adapter=self._name,
            action_id=action.id,
            output=self._default_output,
            return_code=0,
            metadata={"mock": True},
        )
